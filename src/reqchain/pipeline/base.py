"""Base protocols for the request pipeline architecture."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..errors import TransportError
from ..models.http import Context, Evaluation, PreparedRequest, TransportResponse


@runtime_checkable
class Interceptor(Protocol):
    """
    Protocol for interceptors.

    An interceptor can rewrite the outgoing request, react to a transport
    failure and rewrite or evaluate the incoming response. Interceptors are
    shared by every call made through a client, so they must be stateless or
    guard their own state.

    Ordering Contract:
    - ``prepare`` runs in list order (client interceptors, then call
      interceptors), so the most specific interceptor finalizes the request
    - ``handle`` and ``process`` run in reverse list order, so the most
      specific interceptor gets to evaluate first
    - The first retry vote in a reverse pass ends that pass; the next
      attempt starts over from ``prepare`` with every interceptor

    Error Handling Contract:
    - Raising from ``prepare`` fails the call with ``PreparationError``
    - Raising from ``process`` fails the call with ``ProcessingError``
    - ``handle`` must not raise; return ``Evaluation.PROCEED`` to let the
      transport error through

    Example implementation:
        class UserAgentInterceptor(BaseInterceptor):
            async def prepare(self, request, context):
                request.set_header("User-Agent", "my-app/1.0")
    """

    async def prepare(self, request: PreparedRequest, context: Context) -> None:
        """
        Mutate the outgoing request in place.

        Args:
            request: Fresh per-attempt copy of the request
            context: Per-call context (retry count, tags, codecs)
        """
        ...

    async def handle(self, error: TransportError, context: Context) -> Evaluation:
        """
        Evaluate a transport failure.

        Args:
            error: The failure wrapping the transport's exception
            context: Per-call context

        Returns:
            PROCEED to fail the call, or a retry verdict
        """
        ...

    async def process(self, response: TransportResponse, context: Context) -> Evaluation:
        """
        Rewrite and evaluate a completed exchange (any status code).

        Args:
            response: Mutable raw response
            context: Per-call context

        Returns:
            PROCEED to continue, or a retry verdict
        """
        ...


class BaseInterceptor:
    """Interceptor with no-op defaults; override only the hooks you need."""

    async def prepare(self, request: PreparedRequest, context: Context) -> None:
        return None

    async def handle(self, error: TransportError, context: Context) -> Evaluation:
        return Evaluation.PROCEED

    async def process(self, response: TransportResponse, context: Context) -> Evaluation:
        return Evaluation.PROCEED


@runtime_checkable
class Observer(Protocol):
    """
    Protocol for observers.

    Observers are notified of pipeline events but never influence the outcome
    of a call; an exception raised by an observer is logged and ignored.
    """

    def did_prepare(self, request: PreparedRequest, context: Context) -> None:
        """Called once every ``prepare`` step of an attempt has run."""
        ...

    def did_encounter(self, error: TransportError, context: Context) -> None:
        """Called when the transport failed, before any ``handle`` step."""
        ...

    def did_receive(self, response: TransportResponse, context: Context) -> None:
        """Called when the transport returned, before any ``process`` step."""
        ...


class BaseObserver:
    """Observer with no-op defaults."""

    def did_prepare(self, request: PreparedRequest, context: Context) -> None:
        return None

    def did_encounter(self, error: TransportError, context: Context) -> None:
        return None

    def did_receive(self, response: TransportResponse, context: Context) -> None:
        return None
