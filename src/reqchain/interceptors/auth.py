"""Authentication interceptor backed by a pluggable trust provider."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Protocol

from ..models.http import Context, PreparedRequest
from ..pipeline.base import BaseInterceptor

logger = logging.getLogger(__name__)


class AuthenticationScheme(str, Enum):
    """How a request proves who is calling."""

    NONE = "none"
    DPOP = "dpop"
    ACCESS_TOKEN = "access_token"
    DPOP_AND_ACCESS_TOKEN = "dpop_and_access_token"


class TrustProvider(Protocol):
    """
    Protocol for credential sources.

    Both methods may await (e.g. refresh a token or reach a key store).
    """

    async def access_token(self) -> Optional[str]:
        """
        Return the current access token.

        Returns:
            Token string, or None when no token is available
        """
        ...

    async def sign(self, request: PreparedRequest) -> str:
        """
        Produce a DPoP proof for the request.

        Args:
            request: The request as prepared so far

        Returns:
            Proof to send in the DPoP header

        Raises:
            Exception if signing fails (the call fails with PreparationError)
        """
        ...


class AuthInterceptor(BaseInterceptor):
    """
    Injects credentials from a ``TrustProvider`` during ``prepare``.

    ``prepare`` runs again on every retry, so tokens and proofs are fetched
    fresh for each attempt.

    Example:
        auth = AuthInterceptor(provider, AuthenticationScheme.ACCESS_TOKEN)
        profile = await client.fetch(url, interceptors=[auth])
    """

    def __init__(
        self,
        trust_provider: TrustProvider,
        scheme: AuthenticationScheme = AuthenticationScheme.ACCESS_TOKEN,
    ) -> None:
        self._trust_provider = trust_provider
        self._scheme = scheme

    @property
    def scheme(self) -> AuthenticationScheme:
        return self._scheme

    async def prepare(self, request: PreparedRequest, context: Context) -> None:
        scheme = self._scheme

        if scheme is AuthenticationScheme.NONE:
            return

        if scheme is AuthenticationScheme.DPOP:
            request.set_header("DPoP", await self._trust_provider.sign(request))
            return

        token = await self._trust_provider.access_token()
        if token is None:
            logger.debug(f"No access token available for {request.url}")
            if scheme is AuthenticationScheme.DPOP_AND_ACCESS_TOKEN:
                request.set_header("DPoP", await self._trust_provider.sign(request))
            return

        if scheme is AuthenticationScheme.ACCESS_TOKEN:
            request.set_header("Authorization", f"Bearer {token}")
            return

        # DPoP-bound token: the proof covers the Authorization header too.
        request.set_header("Authorization", f"DPoP {token}")
        request.set_header("DPoP", await self._trust_provider.sign(request))
