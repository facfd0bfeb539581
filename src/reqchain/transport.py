"""Transport abstraction and the default aiohttp implementation."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Optional, Protocol, runtime_checkable

import aiohttp

from .models.http import Header, PreparedRequest, TransportResponse

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """
    Protocol for transports.

    This abstraction allows for:
    - Mock implementations in tests
    - Different backends (aiohttp, httpx, etc.)
    - Keeping connection handling out of the request pipeline
    """

    async def send(self, request: PreparedRequest, *, timeout: float) -> TransportResponse:
        """
        Send a prepared request.

        Args:
            request: The request after every interceptor prepared it
            timeout: Total timeout in seconds

        Returns:
            TransportResponse with status, headers and body

        Raises:
            Exception on network failure (any status code is a success here)
        """
        ...


class AiohttpTransport:
    """
    Transport backed by an ``aiohttp.ClientSession``.

    The session is created lazily on first use, or up front when the transport
    is used as an async context manager. A session passed in by the caller is
    never closed by the transport.

    Example:
        async with AiohttpTransport() as transport:
            client = HttpClient(transport=transport)
            response = await client.send(Request("https://example.com"))
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        proxy: Optional[str] = None,
        max_content_size: int = 50 * 1024 * 1024,
        limit: int = 100,
        limit_per_host: int = 10,
    ) -> None:
        """
        Initialize the transport.

        Args:
            session: Existing session to reuse (caller keeps ownership)
            proxy: Proxy URL (http:// or socks5://)
            max_content_size: Maximum response size in bytes
            limit: Total connection limit for an owned session
            limit_per_host: Per-host connection limit for an owned session
        """
        self._session = session
        self._owns_session = session is None
        self._proxy = proxy
        self._max_content_size = max_content_size
        self._limit = limit
        self._limit_per_host = limit_per_host

    async def __aenter__(self) -> AiohttpTransport:
        """Enter async context and create session."""
        self._ensure_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self._limit,
                limit_per_host=self._limit_per_host,
                ttl_dns_cache=300,  # DNS cache TTL
            )
            self._session = aiohttp.ClientSession(connector=connector)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this transport created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def send(self, request: PreparedRequest, *, timeout: float) -> TransportResponse:
        session = self._ensure_session()
        headers = [(header.name, header.value) for header in request.headers]

        async with session.request(
            request.method.value,
            request.url,
            data=request.body,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=timeout),
            proxy=self._proxy,
            allow_redirects=request.follow_redirects,
        ) as response:
            # Check Content-Length if available
            content_length = response.headers.get("Content-Length")
            if content_length and content_length.isdigit() and int(content_length) > self._max_content_size:
                raise ValueError(f"Content too large: {content_length} bytes")

            # Read content with size limit
            content = bytearray()
            async for chunk in response.content.iter_chunked(8192):
                content += chunk
                if len(content) > self._max_content_size:
                    raise ValueError(f"Content size limit exceeded: >{self._max_content_size} bytes")

            logger.debug(f"{request.method.value} {request.url} -> {response.status} ({len(content)} bytes)")

            return TransportResponse(
                status_code=response.status,
                headers=[Header(name, value) for name, value in response.headers.items()],
                body=bytes(content),
                url=str(response.url),
            )
