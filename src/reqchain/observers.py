"""Observers reporting pipeline activity."""

import logging
from typing import Optional

from .errors import TransportError
from .models.http import Context, PreparedRequest, TransportResponse
from .pipeline.base import BaseObserver


class LoggingObserver(BaseObserver):
    """
    Logs every attempt a client makes.

    Example:
        client = HttpClient(observers=[LoggingObserver(level=logging.INFO)])
    """

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._level = level

    def did_prepare(self, request: PreparedRequest, context: Context) -> None:
        self._logger.log(
            self._level,
            f"-> {request.method.value} {request.url} (retry {context.retry_count})",
        )

    def did_encounter(self, error: TransportError, context: Context) -> None:
        self._logger.log(self._level, f"!! {context.request.url}: {error}")

    def did_receive(self, response: TransportResponse, context: Context) -> None:
        self._logger.log(
            self._level,
            f"<- {response.status_code} {context.request.url} ({len(response.body)} bytes)",
        )
