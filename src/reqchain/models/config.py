"""Pydantic configuration models for reqchain clients."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ClientOptions(BaseModel):
    """
    Client-wide tuning, fixed at client construction.

    Example:
        options = ClientOptions(max_retry_count=3, timeout=10)
        client = HttpClient(options=options)
    """

    max_retry_count: int = Field(
        5,
        ge=0,
        description="Retries allowed per call when interceptors ask for them",
    )
    timeout: float = Field(30.0, gt=0, description="Transport timeout in seconds")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level used by setup_logging()",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid", "frozen": True}

    def to_yaml(self) -> str:
        """Serialize options to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ClientOptions":
        """Load options from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ClientOptions":
        """Load options from YAML file."""
        return cls.from_yaml(Path(path).read_text())
