"""InterceptorChain - a single pass through the interceptors and the transport."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Optional

from ..errors import Canceled, PreparationError, ProcessingError, TransportError
from ..models.http import Context, Evaluation, Response, TransportResponse
from ..transport import Transport
from .base import Interceptor, Observer

logger = logging.getLogger(__name__)


def raise_if_cancelled() -> None:
    """
    Raise ``Canceled`` if the current task has a pending cancellation request.

    Raises:
        Canceled: If the running task is being cancelled
    """
    task = asyncio.current_task()
    if task is not None and task.cancelling():
        raise Canceled()


@dataclass(frozen=True)
class AttemptOutcome:
    """
    Result of one pass through the chain.

    Attributes:
        evaluation: PROCEED, or the first retry verdict of the pass
        response: Final response when every interceptor proceeded
        error: Transport failure that a retry verdict was cast on
    """

    evaluation: Evaluation
    response: Optional[Response] = None
    error: Optional[TransportError] = None


class InterceptorChain:
    """
    Runs one attempt: prepare, send, then handle or process.

    Fatal outcomes are raised as ``HttpFailure`` subclasses; retry verdicts
    and proceeding responses are returned as an ``AttemptOutcome`` for the
    retry engine to act on.

    Example:
        chain = InterceptorChain(transport, interceptors=[AuthInterceptor(...)])
        outcome = await chain.run(Context(request=Request("https://example.com")))
        if not outcome.evaluation.is_retry:
            print(outcome.response.status_code)
    """

    def __init__(
        self,
        transport: Transport,
        interceptors: Sequence[Interceptor] = (),
        observers: Sequence[Observer] = (),
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize the chain.

        Args:
            transport: Transport performing the actual exchange
            interceptors: Client interceptors followed by call interceptors
            observers: Notification sinks
            timeout: Timeout handed to the transport (seconds)
        """
        self._transport = transport
        self._interceptors = tuple(interceptors)
        self._observers = tuple(observers)
        self._timeout = timeout

    @property
    def interceptors(self) -> tuple[Interceptor, ...]:
        return self._interceptors

    async def run(self, context: Context) -> AttemptOutcome:
        """
        Execute one attempt for the request held by ``context``.

        Args:
            context: Per-call context for this attempt

        Returns:
            AttemptOutcome (PROCEED with a response, or a retry verdict)

        Raises:
            PreparationError: A prepare step failed
            ProcessingError: A process step failed
            TransportError: The transport failed and nobody asked for a retry
            Canceled: Cancellation was observed between steps
        """
        request = context.request.prepare()

        for interceptor in self._interceptors:
            raise_if_cancelled()
            try:
                await interceptor.prepare(request, context)
            except Canceled:
                raise
            except Exception as e:
                logger.warning(f"{type(interceptor).__name__}.prepare failed for {request.url}: {e}")
                raise PreparationError(e) from e

        raise_if_cancelled()
        self._notify("did_prepare", request, context)

        try:
            raw = await self._transport.send(request, timeout=self._timeout)
        except Exception as e:
            error = TransportError(e)
            error.__cause__ = e
            logger.debug(f"Transport error for {request.method.value} {request.url}: {e}")
            self._notify("did_encounter", error, context)
            return await self._handle(error, context)

        raise_if_cancelled()
        self._notify("did_receive", raw, context)
        return await self._process(raw, context)

    async def _handle(self, error: TransportError, context: Context) -> AttemptOutcome:
        # Most specific (last) interceptor gets the first say.
        for interceptor in reversed(self._interceptors):
            raise_if_cancelled()
            try:
                evaluation = await interceptor.handle(error, context)
            except Canceled:
                raise
            except Exception:
                logger.error(f"{type(interceptor).__name__}.handle raised", exc_info=True)
                raise error from error.cause
            raise_if_cancelled()

            if evaluation.is_retry:
                return AttemptOutcome(evaluation=evaluation, error=error)

        raise error from error.cause

    async def _process(self, raw: TransportResponse, context: Context) -> AttemptOutcome:
        # Most specific (last) interceptor gets the first say.
        for interceptor in reversed(self._interceptors):
            raise_if_cancelled()
            try:
                evaluation = await interceptor.process(raw, context)
            except Canceled:
                raise
            except Exception as e:
                logger.warning(f"{type(interceptor).__name__}.process failed: {e}")
                raise ProcessingError(e) from e
            raise_if_cancelled()

            if evaluation.is_retry:
                return AttemptOutcome(evaluation=evaluation)

        return AttemptOutcome(evaluation=Evaluation.PROCEED, response=raw.freeze())

    def _notify(self, event: str, subject: Any, context: Context) -> None:
        """Fire an observer callback; observer failures never abort the call."""
        for observer in self._observers:
            try:
                getattr(observer, event)(subject, context)
            except Exception as e:
                logger.error(f"Observer {type(observer).__name__}.{event} failed: {e}", exc_info=True)
