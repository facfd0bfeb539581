"""Request payloads and response parsers.

A payload carries the bytes to send together with the MIME type they are
encoded as; a parser carries the MIME type it expects together with the
function turning a ``Response`` into a value. The client derives the
``Content-Type`` and ``Accept`` headers from these two MIME types, so the
headers always match the codecs actually used.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from .codecs import CodecRegistry
from .errors import EncodingError, UnexpectedResponse
from .models.http import MimeType, Response, Status

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RequestPayload:
    """
    Encoded request body plus the MIME type it represents.

    Attributes:
        mime_type: Value for the Content-Type header (None = no header)
        body: Encoded body (None = no body)
    """

    mime_type: Optional[MimeType] = None
    body: Optional[bytes] = None

    @classmethod
    def empty(cls) -> RequestPayload:
        return cls()

    @classmethod
    def data(cls, body: bytes, mime_type: Optional[MimeType] = None) -> RequestPayload:
        """Pre-encoded bytes, sent as-is."""
        return cls(mime_type=mime_type, body=body)

    @classmethod
    def encoded(
        cls,
        value: Any,
        mime_type: MimeType = MimeType.JSON,
        codecs: Optional[CodecRegistry] = None,
    ) -> RequestPayload:
        """
        Encode ``value`` with the codec registered for ``mime_type``.

        Raises:
            EncodingError: If no codec exists or the codec rejects the value
        """
        registry = codecs or CodecRegistry.default()
        try:
            body = registry.encode(value, mime_type)
        except Exception as e:
            logger.debug(f"Encoding {type(value).__name__} as {mime_type} failed: {e}")
            raise EncodingError(e) from e
        return cls(mime_type=mime_type, body=body)

    @classmethod
    def json(cls, value: Any, codecs: Optional[CodecRegistry] = None) -> RequestPayload:
        return cls.encoded(value, MimeType.JSON, codecs)


@dataclass(frozen=True)
class ResponseParser(Generic[T]):
    """
    Expected MIME type (sent as the Accept header) plus a parse function.

    The parse function may raise ``UnexpectedResponse`` for a status it does
    not accept; any other exception is reported as a decoding failure.
    """

    mime_type: Optional[MimeType]
    parse: Callable[[Response], T]

    @classmethod
    def void(cls, expecting: Status = Status.SUCCESSFUL) -> ResponseParser[None]:
        """Ignore the body, only check the status."""

        def parse(response: Response) -> None:
            _expect(response, expecting)

        return ResponseParser(None, parse)

    @classmethod
    def passthrough(cls, expecting: Status = Status.SUCCESSFUL) -> ResponseParser[Response]:
        """Return the response untouched once the status checks out."""

        def parse(response: Response) -> Response:
            _expect(response, expecting)
            return response

        return ResponseParser(None, parse)

    @classmethod
    def decoded(
        cls,
        mime_type: MimeType,
        as_type: Any = None,
        expecting: Status = Status.SUCCESSFUL,
        ignoring: Optional[Status] = None,
        codecs: Optional[CodecRegistry] = None,
    ) -> ResponseParser[Any]:
        """
        Decode the body with the codec for ``mime_type``.

        Args:
            mime_type: Expected response MIME type
            as_type: Optional type to validate the decoded value into
            expecting: Statuses considered a success
            ignoring: Statuses for which None is returned without decoding
            codecs: Registry to use (defaults to the built-in codecs)
        """
        registry = codecs or CodecRegistry.default()

        def parse(response: Response) -> Any:
            if ignoring is not None and ignoring.contains(response.status_code):
                return None
            _expect(response, expecting, registry)
            return registry.decode(response.body, mime_type, as_type)

        return ResponseParser(mime_type, parse)

    @classmethod
    def json(
        cls,
        as_type: Any = None,
        expecting: Status = Status.SUCCESSFUL,
        ignoring: Optional[Status] = None,
    ) -> ResponseParser[Any]:
        return cls.decoded(MimeType.JSON, as_type, expecting, ignoring)

    @classmethod
    def text(cls, expecting: Status = Status.SUCCESSFUL) -> ResponseParser[str]:
        """Body as text with charset detection."""

        def parse(response: Response) -> str:
            _expect(response, expecting)
            return response.text()

        return ResponseParser(MimeType.TEXT, parse)


def _expect(response: Response, expecting: Status, codecs: Optional[CodecRegistry] = None) -> None:
    if not expecting.contains(response.status_code):
        raise UnexpectedResponse(response, codecs)
