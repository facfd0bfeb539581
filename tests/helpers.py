"""Shared test doubles for the reqchain test suite."""

import json
from typing import Any, Callable, Optional, Union

from reqchain import BaseInterceptor, BaseObserver, Evaluation, Header, TransportResponse

Reply = Union[TransportResponse, BaseException]


def json_response(status_code: int = 200, data: Any = None, headers: tuple = ()) -> TransportResponse:
    """Build a JSON transport response."""
    body = b"" if data is None else json.dumps(data).encode("utf-8")
    return TransportResponse(
        status_code=status_code,
        headers=[Header("Content-Type", "application/json"), *headers],
        body=body,
    )


class MockTransport:
    """
    In-memory transport.

    Replies are consumed in order; the last one is repeated once the list
    runs out. A handler, when given, computes the reply from the request.
    """

    def __init__(self, *replies: Reply, handler: Optional[Callable[[Any], Reply]] = None):
        self.requests = []
        self.timeouts = []
        self._replies = list(replies)
        self._handler = handler

    async def send(self, request, *, timeout):
        self.requests.append(request)
        self.timeouts.append(timeout)

        if self._handler is not None:
            reply = self._handler(request)
        elif len(self._replies) > 1:
            reply = self._replies.pop(0)
        else:
            reply = self._replies[0]

        if isinstance(reply, BaseException):
            raise reply

        # Interceptors mutate responses, so hand out a fresh copy every time.
        return TransportResponse(
            status_code=reply.status_code,
            headers=list(reply.headers),
            body=reply.body,
            url=reply.url or request.url,
        )


def echo(request) -> TransportResponse:
    """Handler returning the request body with the request's Content-Type."""
    content_type = request.header("Content-Type") or "application/octet-stream"
    return TransportResponse(
        status_code=200,
        headers=[Header("Content-Type", content_type)],
        body=request.body or b"",
        url=request.url,
    )


class RecordingInterceptor(BaseInterceptor):
    """Logs every hook call and votes for a fixed number of retries."""

    def __init__(
        self,
        name: str,
        log: list,
        process_retries: int = 0,
        handle_retries: int = 0,
        evaluation: Evaluation = Evaluation.RETRY,
    ):
        self.name = name
        self.log = log
        self.process_retries = process_retries
        self.handle_retries = handle_retries
        self.evaluation = evaluation
        self.contexts = []

    def calls(self, hook: str) -> int:
        return self.log.count((self.name, hook))

    async def prepare(self, request, context):
        self.log.append((self.name, "prepare"))
        self.contexts.append(context)
        request.set_header("X-Trace", f"{request.header('X-Trace') or ''}{self.name}")

    async def handle(self, error, context):
        self.log.append((self.name, "handle"))
        if self.calls("handle") <= self.handle_retries:
            return self.evaluation
        return Evaluation.PROCEED

    async def process(self, response, context):
        self.log.append((self.name, "process"))
        if self.calls("process") <= self.process_retries:
            return self.evaluation
        return Evaluation.PROCEED


class CountingObserver(BaseObserver):
    """Counts notifications per event."""

    def __init__(self):
        self.prepared = 0
        self.encountered = 0
        self.received = 0

    def did_prepare(self, request, context):
        self.prepared += 1

    def did_encounter(self, error, context):
        self.encountered += 1

    def did_receive(self, response, context):
        self.received += 1
