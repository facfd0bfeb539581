"""Value types flowing through the request pipeline."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from charset_normalizer import from_bytes as detect_encoding

if TYPE_CHECKING:
    from ..codecs import CodecRegistry
    from ..payloads import ResponseParser

logger = logging.getLogger(__name__)


class Method(str, Enum):
    """HTTP request methods."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class MimeType:
    """
    A MIME type tag used to pick a codec and derive Content-Type/Accept headers.

    Only the essence (``type/subtype``, lowercased) takes part in equality, so
    ``application/json; charset=utf-8`` matches ``application/json``.
    """

    value: str

    JSON: ClassVar[MimeType]
    TEXT: ClassVar[MimeType]
    FORM: ClassVar[MimeType]
    OCTET_STREAM: ClassVar[MimeType]

    @property
    def essence(self) -> str:
        """Lowercased ``type/subtype`` without parameters."""
        return self.value.split(";", 1)[0].strip().lower()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MimeType):
            return self.essence == other.essence
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.essence)

    def __str__(self) -> str:
        return self.value


MimeType.JSON = MimeType("application/json")
MimeType.TEXT = MimeType("text/plain")
MimeType.FORM = MimeType("application/x-www-form-urlencoded")
MimeType.OCTET_STREAM = MimeType("application/octet-stream")


@dataclass(frozen=True)
class Header:
    """A single HTTP header (name + value)."""

    name: str
    value: str

    @classmethod
    def content_type(cls, mime_type: MimeType) -> Header:
        return cls("Content-Type", mime_type.value)

    @classmethod
    def accept(cls, mime_type: MimeType) -> Header:
        return cls("Accept", mime_type.value)

    @classmethod
    def user_agent(cls, value: str) -> Header:
        return cls("User-Agent", value)

    @classmethod
    def authorization(cls, value: str) -> Header:
        return cls("Authorization", value)

    def matches(self, name: str) -> bool:
        """Case-insensitive name comparison."""
        return self.name.lower() == name.lower()


def find_header(headers: Iterable[Header], name: str) -> Optional[str]:
    """Return the value of the first header called ``name``, if any."""
    for header in headers:
        if header.matches(name):
            return header.value
    return None


def replace_header(headers: list[Header], name: str, value: str) -> None:
    """Set ``name`` to ``value`` in place, dropping any earlier occurrences."""
    headers[:] = [header for header in headers if not header.matches(name)]
    headers.append(Header(name, value))


def _decode_content(content: bytes, content_type: str) -> str:
    """
    Decode content with encoding detection.

    Fallback chain:
    1. Content-Type header charset
    2. charset-normalizer detection
    3. UTF-8 with replacement

    Args:
        content: Raw bytes content
        content_type: Content-Type header value

    Returns:
        Decoded string
    """
    encoding = None
    if content_type:
        for part in content_type.split(";"):
            part = part.strip()
            if part.lower().startswith("charset="):
                encoding = part.split("=", 1)[1].strip().strip("\"'")
                break

    if encoding:
        try:
            return content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug(f"Failed to decode with declared encoding: {encoding}")

    best_match = detect_encoding(content).best()
    if best_match is not None:
        logger.debug(f"Detected encoding: {best_match.encoding}")
        return str(best_match)

    return content.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Status:
    """
    A set of HTTP status codes with a description.

    Attributes:
        codes: Half-open ranges of accepted status codes
        description: Human-readable description
    """

    codes: tuple[range, ...]
    description: str

    OK: ClassVar[Status]
    CREATED: ClassVar[Status]
    NO_CONTENT: ClassVar[Status]
    SUCCESSFUL: ClassVar[Status]

    @classmethod
    def code(cls, code: int, description: str = "") -> Status:
        return cls((range(code, code + 1),), description or str(code))

    @classmethod
    def between(cls, start: int, stop: int, description: str = "") -> Status:
        """Status codes from ``start`` up to and including ``stop``."""
        return cls((range(start, stop + 1),), description or f"{start}-{stop}")

    def contains(self, code: int) -> bool:
        return any(code in codes for codes in self.codes)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, int) and self.contains(code)

    def __or__(self, other: Status) -> Status:
        return Status(self.codes + other.codes, f"{self.description} or {other.description}")


Status.OK = Status.code(200, "OK")
Status.CREATED = Status.code(201, "Created")
Status.NO_CONTENT = Status.code(204, "No Content")
Status.SUCCESSFUL = Status.between(200, 299, "Successful")


@dataclass(frozen=True)
class Request:
    """
    Immutable outgoing request, as built by the caller.

    Each attempt of the pipeline works on a fresh ``PreparedRequest`` copy,
    so interceptor mutations never carry over into a retry.
    """

    url: str
    method: Method = Method.GET
    body: Optional[bytes] = None
    headers: tuple[Header, ...] = ()
    follow_redirects: bool = True

    def header(self, name: str) -> Optional[str]:
        return find_header(self.headers, name)

    def with_headers(self, *headers: Header) -> Request:
        """Return a copy with ``headers`` set, replacing same-named ones."""
        merged = list(self.headers)
        for header in headers:
            replace_header(merged, header.name, header.value)
        return replace(self, headers=tuple(merged))

    def prepare(self) -> PreparedRequest:
        return PreparedRequest(
            url=self.url,
            method=self.method,
            body=self.body,
            headers=list(self.headers),
            follow_redirects=self.follow_redirects,
        )


@dataclass
class PreparedRequest:
    """Mutable per-attempt request handed to interceptors and the transport."""

    url: str
    method: Method
    body: Optional[bytes] = None
    headers: list[Header] = field(default_factory=list)
    follow_redirects: bool = True

    def header(self, name: str) -> Optional[str]:
        return find_header(self.headers, name)

    def set_header(self, name: str, value: str) -> None:
        replace_header(self.headers, name, value)

    def remove_header(self, name: str) -> None:
        self.headers[:] = [header for header in self.headers if not header.matches(name)]


@dataclass
class TransportResponse:
    """
    Mutable raw result of a transport call.

    Interceptors may rewrite any field during ``process``; the pipeline turns
    it into an immutable ``Response`` once every interceptor has proceeded.
    """

    status_code: int
    headers: list[Header] = field(default_factory=list)
    body: bytes = b""
    url: str = ""

    def header(self, name: str) -> Optional[str]:
        return find_header(self.headers, name)

    def set_header(self, name: str, value: str) -> None:
        replace_header(self.headers, name, value)

    def freeze(self) -> Response:
        return Response(
            status_code=self.status_code,
            headers=tuple(self.headers),
            body=self.body,
            url=self.url,
        )


@dataclass(frozen=True)
class Response:
    """
    Immutable HTTP response.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        headers: Response headers in received order
        body: Raw response body
        url: Final URL reported by the transport (after redirects)
    """

    status_code: int
    headers: tuple[Header, ...] = ()
    body: bytes = b""
    url: str = ""

    def header(self, name: str) -> Optional[str]:
        return find_header(self.headers, name)

    @property
    def content_type(self) -> str:
        return self.header("Content-Type") or ""

    def text(self) -> str:
        """Body decoded to text, detecting the encoding when undeclared."""
        return _decode_content(self.body, self.content_type)

    def decode(
        self,
        mime_type: MimeType = MimeType.JSON,
        as_type: Any = None,
        codecs: Optional[CodecRegistry] = None,
    ) -> Any:
        """
        Decode the body with the codec registered for ``mime_type``.

        Raises whatever the codec raises; callers inside the pipeline map
        that to ``DecodingError``. Without ``codecs`` only the built-in
        codecs are available.
        """
        from ..codecs import CodecRegistry

        registry = codecs or CodecRegistry.default()
        return registry.decode(self.body, mime_type, as_type)

    def parsed(self, parser: ResponseParser[Any]) -> Any:
        return parser.parse(self)


class EvaluationKind(str, Enum):
    """The three verdicts an interceptor can reach."""

    PROCEED = "proceed"
    RETRY = "retry"
    RETRY_AFTER = "retry_after"


@dataclass(frozen=True)
class Evaluation:
    """An interceptor's verdict on a transport error or a response."""

    kind: EvaluationKind
    delay: float = 0.0

    PROCEED: ClassVar[Evaluation]
    RETRY: ClassVar[Evaluation]

    @classmethod
    def retry_after(cls, delay: float) -> Evaluation:
        if delay < 0:
            raise ValueError(f"Retry delay must not be negative: {delay}")
        return cls(EvaluationKind.RETRY_AFTER, float(delay))

    @property
    def is_retry(self) -> bool:
        return self.kind is not EvaluationKind.PROCEED


Evaluation.PROCEED = Evaluation(EvaluationKind.PROCEED)
Evaluation.RETRY = Evaluation(EvaluationKind.RETRY)


@dataclass(frozen=True)
class Context:
    """
    Per-call pipeline state.

    Attributes:
        request: The request as built by the caller (before any interceptor ran)
        tags: Free-form string tags supplied with the call
        retry_count: Number of retries performed so far (0 on the first attempt)
        codecs: Codec registry in effect for this call
    """

    request: Request
    tags: Mapping[str, str] = field(default_factory=dict)
    retry_count: int = 0
    codecs: Optional[CodecRegistry] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    def next_attempt(self) -> Context:
        return replace(self, retry_count=self.retry_count + 1)
