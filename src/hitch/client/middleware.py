"""Request and response hook chains.

A :class:`MiddlewarePipeline` holds two ordered lists of callables:

* **Request pipes** run once per pending request, after authentication
  and boot hooks.  A pipe receives the
  :class:`~hitch.client.pending_request.PendingRequest` and may mutate it
  in place, return a replacement pending request, or return a
  :class:`~hitch.faking.mock_response.MockResponse` to short-circuit the
  send entirely.
* **Response pipes** run exactly once per physical send, before the
  response is classified.  A pipe may return a replacement
  :class:`~hitch.client.response.Response`; any other return value keeps
  the current one.

Exceptions raised by pipes are never caught here: they propagate to the
caller and are not retried.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from hitch.client.response import Response
from hitch.faking.mock_response import MockResponse

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest

logger = logging.getLogger(__name__)

RequestPipe = Callable[["PendingRequest"], Any]
ResponsePipe = Callable[["Response"], Any]


class MiddlewarePipeline:
    """Ordered ``on_request`` / ``on_response`` hooks."""

    def __init__(self) -> None:
        self._request_pipes: list[RequestPipe] = []
        self._response_pipes: list[ResponsePipe] = []

    def on_request(self, pipe: RequestPipe) -> MiddlewarePipeline:
        """Append a request pipe."""
        logger.debug("Registered request pipe %r", pipe)
        self._request_pipes.append(pipe)
        return self

    def on_response(self, pipe: ResponsePipe) -> MiddlewarePipeline:
        """Append a response pipe."""
        logger.debug("Registered response pipe %r", pipe)
        self._response_pipes.append(pipe)
        return self

    def merge(self, other: MiddlewarePipeline) -> MiddlewarePipeline:
        """Append every pipe of *other* after this pipeline's own pipes."""
        self._request_pipes.extend(other._request_pipes)
        self._response_pipes.extend(other._response_pipes)
        return self

    def execute_request_pipeline(self, pending_request: PendingRequest) -> PendingRequest:
        """Run the request pipes in registration order.

        Each pipe receives the output of the previous one.

        Returns:
            The (possibly replaced) pending request.  When a pipe returned a
            :class:`~hitch.faking.mock_response.MockResponse`, it is stored
            on ``pending_request.fake_response``.
        """
        from hitch.client.pending_request import PendingRequest

        for pipe in self._request_pipes:
            result = pipe(pending_request)
            if isinstance(result, MockResponse):
                pending_request.fake_response = result
            elif isinstance(result, PendingRequest):
                pending_request = result
        return pending_request

    def execute_response_pipeline(self, response: Response) -> Response:
        """Run the response pipes in registration order.

        Returns:
            The (possibly replaced) response.
        """
        for pipe in self._response_pipes:
            result = pipe(response)
            if isinstance(result, Response):
                response = result
        return response

    @property
    def request_pipes(self) -> list[RequestPipe]:
        return list(self._request_pipes)

    @property
    def response_pipes(self) -> list[ResponsePipe]:
        return list(self._response_pipes)
