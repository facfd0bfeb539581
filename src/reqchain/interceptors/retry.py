"""Status- and failure-driven retry policy."""

from __future__ import annotations

import logging
import random
from collections.abc import Collection
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from ..errors import TransportError
from ..models.http import Context, Evaluation, TransportResponse
from ..pipeline.base import BaseInterceptor

logger = logging.getLogger(__name__)

# Status codes that should trigger retry
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def parse_retry_after(value: Optional[str], now: Optional[datetime] = None) -> Optional[float]:
    """
    Parse a Retry-After header value.

    Accepts delta-seconds ("120") or an HTTP date
    ("Wed, 21 Oct 2015 07:28:00 GMT").

    Args:
        value: Raw header value
        now: Reference time for HTTP dates (current UTC time if None)

    Returns:
        Delay in seconds (never negative), or None if the value is unusable
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None

    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        return seconds if seconds >= 0 else None

    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    return max(0.0, (when - now).total_seconds())


class RetryPolicyInterceptor(BaseInterceptor):
    """
    Votes for a retry on transient failures.

    Retries responses with a retryable status code and, optionally, transport
    errors. The delay is taken from Retry-After when present, otherwise it
    is exponential backoff with optional jitter. The client's
    ``max_retry_count`` still caps the total number of retries.

    Example:
        policy = RetryPolicyInterceptor(base_delay=0.5, max_delay=10.0)
        client = HttpClient(interceptors=[policy])
    """

    def __init__(
        self,
        statuses: Collection[int] = RETRYABLE_STATUS_CODES,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        jitter: bool = True,
        retry_transport_errors: bool = True,
        respect_retry_after: bool = True,
        max_attempts: Optional[int] = None,
    ) -> None:
        """
        Initialize the policy.

        Args:
            statuses: Status codes worth retrying
            base_delay: Base delay for exponential backoff (seconds)
            max_delay: Upper bound for any single delay (seconds)
            jitter: Add up to one second of random jitter to backoff delays
            retry_transport_errors: Retry when the transport fails
            respect_retry_after: Use the Retry-After header when present
            max_attempts: Stop voting after this many attempts (None = client limit)
        """
        if base_delay < 0 or max_delay < 0:
            raise ValueError("Retry delays must not be negative")
        self._statuses = frozenset(statuses)
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._jitter = jitter
        self._retry_transport_errors = retry_transport_errors
        self._respect_retry_after = respect_retry_after
        self._max_attempts = max_attempts

    def _exhausted(self, context: Context) -> bool:
        return self._max_attempts is not None and context.retry_count + 1 >= self._max_attempts

    def backoff(self, retry_count: int) -> float:
        """
        Calculate delay for exponential backoff with jitter.

        Args:
            retry_count: Retries already made (0 for the first attempt)

        Returns:
            Delay in seconds, capped at ``max_delay``
        """
        # Exponential backoff: base * (2 ^ attempt) + random jitter
        delay = self._base_delay * (2**retry_count)
        if self._jitter:
            delay += random.uniform(0, 1)
        return min(delay, self._max_delay)

    async def handle(self, error: TransportError, context: Context) -> Evaluation:
        if not self._retry_transport_errors or self._exhausted(context):
            return Evaluation.PROCEED

        delay = self.backoff(context.retry_count)
        logger.warning(f"{error} for {context.request.url}, retrying in {delay:.1f}s")
        return Evaluation.retry_after(delay)

    async def process(self, response: TransportResponse, context: Context) -> Evaluation:
        if response.status_code not in self._statuses or self._exhausted(context):
            return Evaluation.PROCEED

        delay: Optional[float] = None
        if self._respect_retry_after:
            delay = parse_retry_after(response.header("Retry-After"))
        if delay is None:
            delay = self.backoff(context.retry_count)
        else:
            delay = min(delay, self._max_delay)

        logger.warning(
            f"Got {response.status_code} for {context.request.url}, retrying in {delay:.1f}s "
            f"(attempt {context.retry_count + 1})"
        )
        return Evaluation.retry_after(delay)
