"""HttpClient - the public entry point composing codecs, interceptors and retries."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping, Sequence
from types import TracebackType
from typing import Any, Optional, Union

from .codecs import CodecRegistry
from .errors import DecodingError, HttpFailure, PreparationError
from .models.config import ClientOptions
from .models.http import Context, Header, Method, MimeType, Request, Response, Status
from .payloads import RequestPayload, ResponseParser
from .pipeline.base import Interceptor, Observer
from .pipeline.chain import InterceptorChain
from .pipeline.retry import RetryEngine
from .transport import AiohttpTransport, Transport

logger = logging.getLogger(__name__)


class HttpClient:
    """
    Asynchronous HTTP client built around an interceptor pipeline.

    Features:
    - Per-client and per-call interceptors (prepare / handle / process)
    - Retries driven by interceptor verdicts, bounded by ``max_retry_count``
    - Status classification into a closed failure taxonomy
    - Pluggable codecs keyed by MIME type
    - Observers notified of every attempt

    The client keeps no per-call state, so one instance can serve any number
    of concurrent calls.

    Example:
        async with HttpClient(interceptors=[HeadersInterceptor(...)]) as client:
            user = await client.fetch(
                "https://api.example.com/users/1",
                response_type=User,
            )
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        codecs: Optional[CodecRegistry] = None,
        observers: Sequence[Observer] = (),
        interceptors: Sequence[Interceptor] = (),
        options: Optional[ClientOptions] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            transport: Transport to send requests with (an owned AiohttpTransport if None)
            codecs: Default codec registry (built-in JSON/text/form codecs if None)
            observers: Notification sinks for every call
            interceptors: Client-level interceptors, applied before call-level ones
            options: Retry budget and timeout
        """
        self._options = options or ClientOptions()
        self._owns_transport = transport is None
        self._transport: Transport = transport if transport is not None else AiohttpTransport()
        self._codecs = codecs or CodecRegistry.default()
        self._observers = tuple(observers)
        self._interceptors = tuple(interceptors)

    @property
    def options(self) -> ClientOptions:
        return self._options

    @property
    def codecs(self) -> CodecRegistry:
        return self._codecs

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and isinstance(self._transport, AiohttpTransport):
            await self._transport.close()

    async def send(
        self,
        request: Request,
        interceptors: Sequence[Interceptor] = (),
        tags: Optional[Mapping[str, str]] = None,
        codecs: Optional[CodecRegistry] = None,
    ) -> Response:
        """
        Send a request through the pipeline.

        Args:
            request: The request to send
            interceptors: Call-level interceptors, applied after client-level ones
            tags: Free-form tags made available to interceptors via the context
            codecs: Codec registry override for this call

        Returns:
            The final 2xx/3xx response

        Raises:
            HttpFailure: Exactly one failure subclass when the call fails
        """
        chain = InterceptorChain(
            self._transport,
            interceptors=self._interceptors + tuple(interceptors),
            observers=self._observers,
            timeout=self._options.timeout,
        )
        engine = RetryEngine(chain, max_retry_count=self._options.max_retry_count)
        context = Context(request=request, tags=tags or {}, codecs=codecs or self._codecs)

        return await engine.run(context)

    async def fetch(
        self,
        url: str,
        method: Union[Method, str] = Method.GET,
        payload: Any = None,
        *,
        content_type: MimeType = MimeType.JSON,
        accept: MimeType = MimeType.JSON,
        response_type: Any = None,
        parser: Optional[ResponseParser[Any]] = None,
        expected_status: Status = Status.SUCCESSFUL,
        empty_status_codes: Collection[int] = (),
        additional_headers: Iterable[Header] = (),
        interceptors: Sequence[Interceptor] = (),
        tags: Optional[Mapping[str, str]] = None,
        follow_redirects: bool = True,
        codecs: Optional[CodecRegistry] = None,
    ) -> Any:
        """
        Send a request and decode the response into a value.

        Args:
            url: Target URL
            method: HTTP method
            payload: None (no body), a RequestPayload (sent as-is) or a value
                to encode with the codec for ``content_type``
            content_type: MIME type to encode ``payload`` as
            accept: MIME type to decode the response as
            response_type: Type to validate the decoded body into (None = plain values)
            parser: Custom parser replacing the codec-based one entirely
            expected_status: Statuses the default parser accepts
            empty_status_codes: Statuses for which None is returned without decoding
            additional_headers: Extra request headers (cannot override Content-Type/Accept)
            interceptors: Call-level interceptors
            tags: Free-form tags for interceptors
            follow_redirects: Let the transport follow redirects
            codecs: Codec registry override for this call

        Returns:
            The decoded value, or None for an empty status code

        Raises:
            PreparationError: ``method`` is not a supported HTTP method
            EncodingError: The payload could not be encoded
            DecodingError: The body could not be decoded
            UnexpectedResponse: The status was not in ``expected_status``
            HttpFailure: Any other pipeline failure (see ``send``)
        """
        registry = codecs or self._codecs

        if not isinstance(method, Method):
            try:
                method = Method(method.upper())
            except ValueError as e:
                logger.debug(f"Rejecting request to {url}: {e}")
                raise PreparationError(e) from e

        if payload is None:
            request_payload = RequestPayload.empty()
        elif isinstance(payload, RequestPayload):
            request_payload = payload
        else:
            request_payload = RequestPayload.encoded(payload, content_type, registry)

        if parser is None:
            parser = ResponseParser.decoded(accept, response_type, expected_status, codecs=registry)

        # Content-Type and Accept always follow the payload and parser in use.
        derived: list[Header] = []
        if request_payload.mime_type is not None:
            derived.append(Header.content_type(request_payload.mime_type))
        if parser.mime_type is not None:
            derived.append(Header.accept(parser.mime_type))

        request = Request(
            url=url,
            method=method,
            body=request_payload.body,
            headers=tuple(additional_headers),
            follow_redirects=follow_redirects,
        ).with_headers(*derived)

        response = await self.send(request, interceptors=interceptors, tags=tags, codecs=registry)

        if response.status_code in empty_status_codes:
            return None

        try:
            return parser.parse(response)
        except HttpFailure:
            raise
        except Exception as e:
            logger.debug(f"Decoding response from {url} failed: {e}")
            raise DecodingError(e, response) from e
