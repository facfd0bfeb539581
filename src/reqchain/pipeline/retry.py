"""RetryEngine - drives the chain until it proceeds, fails or runs out of retries."""

from __future__ import annotations

import asyncio
import logging

from ..errors import Canceled, MaxRetryCountReached
from ..models.http import Context, EvaluationKind, Response
from .chain import InterceptorChain, raise_if_cancelled
from .classify import classify

logger = logging.getLogger(__name__)


class RetryEngine:
    """
    Sequential retry loop on top of an ``InterceptorChain``.

    Retries happen only when an interceptor votes for one; an error status
    code on its own is terminal. Every retry re-runs the whole chain from
    ``prepare`` with ``retry_count`` incremented by one, so interceptors can
    refresh volatile headers (timestamps, signatures).

    Example:
        engine = RetryEngine(chain, max_retry_count=3)
        response = await engine.run(Context(request=request))
    """

    def __init__(self, chain: InterceptorChain, max_retry_count: int = 5) -> None:
        """
        Initialize the engine.

        Args:
            chain: Chain executing a single attempt
            max_retry_count: Retries allowed after the first attempt
        """
        if max_retry_count < 0:
            raise ValueError(f"max_retry_count must not be negative: {max_retry_count}")
        self._chain = chain
        self._max_retry_count = max_retry_count

    async def run(self, context: Context) -> Response:
        """
        Run attempts until one of them reaches a terminal outcome.

        Args:
            context: Fresh context for the call (retry_count 0)

        Returns:
            The classified 2xx/3xx response

        Raises:
            HttpFailure: Exactly one failure describing why the call failed
        """
        try:
            return await self._run(context)
        except asyncio.CancelledError as e:
            logger.info(f"Request to {context.request.url} canceled")
            raise Canceled(e) from e

    async def _run(self, context: Context) -> Response:
        url = context.request.url

        while True:
            outcome = await self._chain.run(context)

            # Proceeding outcomes always carry the response.
            if outcome.response is not None:
                return classify(outcome.response, context.codecs)

            attempt = context.retry_count + 1
            if context.retry_count >= self._max_retry_count:
                logger.warning(f"Giving up on {url} after {attempt} attempts")
                raise MaxRetryCountReached(attempt)

            if outcome.evaluation.kind is EvaluationKind.RETRY_AFTER:
                delay = outcome.evaluation.delay
                logger.info(
                    f"Retrying {url} in {delay:.1f}s "
                    f"(attempt {attempt + 1}/{self._max_retry_count + 1})"
                )
                await asyncio.sleep(delay)
            else:
                logger.debug(f"Retrying {url} (attempt {attempt + 1}/{self._max_retry_count + 1})")

            raise_if_cancelled()
            context = context.next_attempt()
