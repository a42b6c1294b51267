"""Retry state machine driving one logical send.

A :class:`SendRequest` turns a :class:`~hitch.client.request.Request` into
a final :class:`~hitch.client.response.Response` by looping over attempts:

1. Build a fresh pending request from the request (the first attempt may
   reuse a pending request supplied by the caller).
2. Dispatch it: a middleware fake response, then the mock client, then
   the sender.
3. Run the response pipeline once and classify the result.
4. On success, return.  On a :class:`~hitch.exceptions.FatalRequestException`,
   propagate at once.  On a :class:`~hitch.exceptions.RequestException`,
   consult the retry handlers and either wait and try again or give up.

Giving up raises the last exception when ``throw_on_max_tries`` is enabled
and returns the last failed response otherwise.  The blocking
:meth:`SendRequest.execute` and the coroutine
:meth:`SendRequest.execute_async` share every step except the dispatch
call and the sleep.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Optional

from hitch.client.pending_request import PendingRequest
from hitch.exceptions import RequestException
from hitch.models import RetryPolicy
from hitch.output import get_output

if TYPE_CHECKING:
    from hitch.client.connector import Connector
    from hitch.client.request import Request
    from hitch.client.response import Response
    from hitch.faking.mock_client import MockClient
    from hitch.faking.mock_response import MockResponse


class SendRequest:
    """One logical send of *request* through *connector*.

    Args:
        connector: The connector supplying defaults and the sender.
        request: The request to send.  Retry handlers may mutate it between
            attempts.
        mock_client: Optional mock client overriding the request's and
            connector's own.
        asynchronous: Whether pending requests are built for the async
            pipeline.
        pending_request: A pre-built pending request to use for the first
            attempt.  Later attempts are always rebuilt from *request*.
    """

    def __init__(
        self,
        connector: Connector,
        request: Request,
        mock_client: Optional[MockClient] = None,
        asynchronous: bool = False,
        pending_request: Optional[PendingRequest] = None,
    ) -> None:
        self.connector = connector
        self.request = request
        self.mock_client = mock_client
        self.asynchronous = asynchronous
        self.policy = RetryPolicy.resolve(request, connector)
        self._initial_pending = pending_request
        self.attempts = 0

    # ------------------------------------------------------------------ #
    # Blocking
    # ------------------------------------------------------------------ #

    def execute(self) -> Response:
        """Run the state machine to completion, blocking between attempts.

        Raises:
            RequestException: If the final attempt failed and
                ``throw_on_max_tries`` is enabled.
            FatalRequestException: If the transport failed on any attempt.
        """
        while True:
            pending = self._next_pending_request()
            try:
                return self._finish(pending, self._dispatch(pending))
            except RequestException as exc:
                outcome = self._handle_failure(exc)
                if isinstance(outcome, RequestException):
                    return self._give_up(outcome)
            if self.policy.interval_ms > 0:
                time.sleep(self.policy.interval_seconds)

    def _dispatch(self, pending: PendingRequest) -> Response:
        fake = self._fake_response(pending)
        if fake is not None:
            return fake.into_response(pending)
        return self.connector.sender.send_request(pending)

    # ------------------------------------------------------------------ #
    # Asynchronous
    # ------------------------------------------------------------------ #

    async def execute_async(self) -> Response:
        """Coroutine counterpart of :meth:`execute`.

        The interval between attempts is an :func:`asyncio.sleep`, so a
        waiting retry never blocks other tasks on the loop.
        """
        while True:
            pending = self._next_pending_request()
            try:
                return self._finish(pending, await self._dispatch_async(pending))
            except RequestException as exc:
                outcome = self._handle_failure(exc)
                if isinstance(outcome, RequestException):
                    return self._give_up(outcome)
            if self.policy.interval_ms > 0:
                await asyncio.sleep(self.policy.interval_seconds)

    async def _dispatch_async(self, pending: PendingRequest) -> Response:
        fake = self._fake_response(pending)
        if fake is not None:
            return fake.into_response(pending)
        return await self.connector.sender.send_request_async(pending)

    # ------------------------------------------------------------------ #
    # Shared steps
    # ------------------------------------------------------------------ #

    def _next_pending_request(self) -> PendingRequest:
        self.attempts += 1
        if self.attempts == 1 and self._initial_pending is not None:
            return self._initial_pending
        return PendingRequest.create(
            self.connector,
            self.request,
            mock_client=self.mock_client,
            asynchronous=self.asynchronous,
        )

    @staticmethod
    def _fake_response(pending: PendingRequest) -> Optional[MockResponse]:
        if pending.fake_response is not None:
            return pending.fake_response
        if pending.mock_client is not None:
            return pending.mock_client.guess_next_response(pending)
        return None

    @staticmethod
    def _finish(pending: PendingRequest, response: Response) -> Response:
        response = pending.middleware.execute_response_pipeline(response)
        exc = response.to_exception()
        if exc is not None:
            raise exc
        return response

    def _handle_failure(self, exc: RequestException) -> Optional[RequestException]:
        """Decide what follows a classified failure.

        Returns:
            ``None`` to retry, or the exception to give up with.
        """
        output = get_output()
        if self.attempts >= self.policy.tries:
            output.debug(
                f"{type(exc).__name__} on attempt {self.attempts}/{self.policy.tries}, "
                "no tries left"
            )
            return exc

        try:
            retry = self.request.handle_retry(exc, self.request) and self.connector.handle_retry(
                exc, self.request
            )
        except RequestException as handler_exc:
            output.debug(f"Retry handler raised {type(handler_exc).__name__}, giving up")
            return handler_exc

        if not retry:
            output.debug(f"Retry handler declined to retry after attempt {self.attempts}")
            return exc

        output.debug(
            f"{type(exc).__name__} ({exc.status}), retrying in {self.policy.interval_ms}ms "
            f"(attempt {self.attempts}/{self.policy.tries})"
        )
        return None

    def _give_up(self, exc: RequestException) -> Response:
        if self.policy.throw_on_max_tries:
            raise exc
        return exc.response
