"""Interceptor adding default headers to every request."""

import logging
from collections.abc import Iterable, Mapping
from typing import Optional, Union

from ..models.http import Context, Header, PreparedRequest
from ..pipeline.base import BaseInterceptor

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "reqchain/1.0"


class HeadersInterceptor(BaseInterceptor):
    """
    Sets fixed headers on every outgoing request.

    Headers already present on the request win unless ``override`` is set,
    so a call-level interceptor placed after this one still has the last word.

    Example:
        interceptor = HeadersInterceptor(
            {"X-Api-Version": "2"},
            user_agent="my-app/1.0",
        )
        client = HttpClient(interceptors=[interceptor])
    """

    def __init__(
        self,
        headers: Union[Mapping[str, str], Iterable[Header], None] = None,
        user_agent: Optional[str] = DEFAULT_USER_AGENT,
        override: bool = False,
    ) -> None:
        """
        Initialize the interceptor.

        Args:
            headers: Headers to add (mapping or Header values)
            user_agent: User-Agent to send (None to leave it alone)
            override: Replace headers the request already carries
        """
        if headers is None:
            items: list[Header] = []
        elif isinstance(headers, Mapping):
            items = [Header(name, value) for name, value in headers.items()]
        else:
            items = list(headers)

        if user_agent is not None:
            items.append(Header.user_agent(user_agent))

        self._headers = tuple(items)
        self._override = override

    @property
    def headers(self) -> tuple[Header, ...]:
        return self._headers

    async def prepare(self, request: PreparedRequest, context: Context) -> None:
        for header in self._headers:
            if self._override or request.header(header.name) is None:
                request.set_header(header.name, header.value)
