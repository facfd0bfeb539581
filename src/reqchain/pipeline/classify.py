"""Status code classification."""

import logging
from enum import Enum
from typing import Optional

from ..errors import ClientError, ServerError, UnexpectedStatus
from ..codecs import CodecRegistry
from ..models.http import Response

logger = logging.getLogger(__name__)


class StatusClass(str, Enum):
    """Outcome classes for a final status code."""

    SUCCESS = "success"
    REDIRECT = "redirect"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    UNEXPECTED = "unexpected"


def classify_status(status_code: int) -> StatusClass:
    """
    Classify a status code.

    Args:
        status_code: Final status code after every interceptor proceeded

    Returns:
        The StatusClass the code falls into
    """
    if 200 <= status_code < 300:
        return StatusClass.SUCCESS
    if 300 <= status_code < 400:
        return StatusClass.REDIRECT
    if 400 <= status_code < 500:
        return StatusClass.CLIENT_ERROR
    if 500 <= status_code < 600:
        return StatusClass.SERVER_ERROR
    return StatusClass.UNEXPECTED


def classify(response: Response, codecs: Optional[CodecRegistry] = None) -> Response:
    """
    Turn a proceeding response into a success or a status failure.

    2xx and 3xx responses are returned unchanged. Error statuses are terminal
    here; retrying on them is left to interceptors. Failures keep ``codecs``
    so the error body decodes with the registry of the call.

    Raises:
        ClientError: 4xx
        ServerError: 5xx
        UnexpectedStatus: anything outside 200-599
    """
    status_class = classify_status(response.status_code)

    if status_class in (StatusClass.SUCCESS, StatusClass.REDIRECT):
        return response

    logger.debug(f"Classified status {response.status_code} as {status_class.value}")

    if status_class is StatusClass.CLIENT_ERROR:
        raise ClientError(response, codecs)
    if status_class is StatusClass.SERVER_ERROR:
        raise ServerError(response, codecs)
    raise UnexpectedStatus(response, codecs)
