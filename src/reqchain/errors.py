"""Failure taxonomy raised by the request pipeline.

Every failed ``send``/``fetch`` raises exactly one subclass of ``HttpFailure``;
no raw transport or codec exception escapes the pipeline. The original cause,
where there is one, is available as ``cause`` and chained as ``__cause__``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .codecs import CodecRegistry
    from .models.http import MimeType, Response


class HttpFailure(Exception):
    """Base class for all pipeline failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class EncodingError(HttpFailure):
    """The request payload could not be serialized."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Failed to encode request payload: {cause}", cause)


class DecodingError(HttpFailure):
    """The response body could not be deserialized into the expected type."""

    def __init__(self, cause: BaseException, response: Optional[Response] = None) -> None:
        super().__init__(f"Failed to decode response body: {cause}", cause)
        self.response = response


class PreparationError(HttpFailure):
    """An interceptor failed while preparing the outgoing request."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Request preparation failed: {cause}", cause)


class ProcessingError(HttpFailure):
    """An interceptor failed while processing an otherwise successful exchange."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Response processing failed: {cause}", cause)


class TransportError(HttpFailure):
    """The underlying transport failed to complete the exchange."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Transport error: {cause}", cause)


class MaxRetryCountReached(HttpFailure):
    """The configured retry budget was exhausted."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Max retry count reached after {attempts} attempts")
        self.attempts = attempts


class Canceled(HttpFailure):
    """The call was cancelled while in flight."""

    def __init__(self, cause: Optional[BaseException] = None) -> None:
        super().__init__("Request was canceled", cause)


class StatusFailure(HttpFailure):
    """
    A failure carrying the full response.

    The body is left undecoded so callers can try several error schemas:

        except ClientError as e:
            try:
                problem = e.decode(as_type=Problem)
            except Exception:
                message = e.response.text()
    """

    label = "Unexpected status"

    def __init__(self, response: Response, codecs: Optional[CodecRegistry] = None) -> None:
        super().__init__(f"{self.label} ({response.status_code})")
        self.response = response
        self.codecs = codecs

    @property
    def status_code(self) -> int:
        return self.response.status_code

    def decode(
        self,
        mime_type: Optional[MimeType] = None,
        as_type: Any = None,
        codecs: Optional[CodecRegistry] = None,
    ) -> Any:
        """
        Decode the error body (JSON unless told otherwise).

        Uses the codec registry of the failed call unless ``codecs`` is given.
        """
        codecs = codecs or self.codecs
        if mime_type is None:
            return self.response.decode(as_type=as_type, codecs=codecs)
        return self.response.decode(mime_type, as_type, codecs)


class ClientError(StatusFailure):
    """The server answered with a 4xx status."""

    label = "Client error"


class ServerError(StatusFailure):
    """The server answered with a 5xx status."""

    label = "Server error"


class UnexpectedStatus(StatusFailure):
    """The server answered with a status outside 200-599."""

    label = "Unexpected status"


class UnexpectedResponse(StatusFailure):
    """The response did not meet the parser's status expectation."""

    label = "Unexpected response"
