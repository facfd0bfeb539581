"""Reqchain data and configuration models."""

from .config import ClientOptions
from .http import (
    Context,
    Evaluation,
    EvaluationKind,
    Header,
    Method,
    MimeType,
    PreparedRequest,
    Request,
    Response,
    Status,
    TransportResponse,
)

__all__ = [
    # Config
    "ClientOptions",
    # HTTP values
    "Context",
    "Evaluation",
    "EvaluationKind",
    "Header",
    "Method",
    "MimeType",
    "PreparedRequest",
    "Request",
    "Response",
    "Status",
    "TransportResponse",
]
