"""Tests for the asynchronous retry state machine.

The coroutines are driven with :func:`asyncio.run`, so no pytest plugin is
needed.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from hitch.exceptions import (
    FatalRequestException,
    InternalServerErrorException,
    RequestException,
)
from hitch.faking import MockClient, MockResponse

from support import (
    RetryUserRequest,
    SampleConnector,
    StandaloneUserRequest,
    UserRequest,
    transport_connector,
)


@pytest.fixture(autouse=True)
def _quiet(quiet_output):
    yield


def _mocks(*statuses: int) -> list[MockResponse]:
    return [MockResponse.make({"attempt": index + 1}, status) for index, status in enumerate(statuses)]


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


class TestAsyncOutcomes:
    def test_successful_response(self) -> None:
        mock_client = MockClient([MockResponse.make({"name": "Sam"})])

        response = asyncio.run(SampleConnector().send_async(UserRequest(), mock_client=mock_client))

        assert response.status == 200
        assert response.json("name") == "Sam"

    def test_success_after_failures(self) -> None:
        mock_client = MockClient(_mocks(500, 500, 200))

        response = asyncio.run(
            SampleConnector().send_async(RetryUserRequest(tries=3), mock_client=mock_client)
        )

        assert response.status == 200
        mock_client.assert_sent_count(3)

    def test_exhaustion_raises_last_exception(self) -> None:
        mock_client = MockClient(_mocks(500, 500, 500))

        with pytest.raises(InternalServerErrorException) as exc_info:
            asyncio.run(
                SampleConnector().send_async(RetryUserRequest(tries=3), mock_client=mock_client)
            )

        assert exc_info.value.response.json() == {"attempt": 3}
        mock_client.assert_sent_count(3)

    def test_exhaustion_returns_last_response_when_throw_disabled(self) -> None:
        mock_client = MockClient(_mocks(500, 500, 500))
        request = RetryUserRequest(tries=3, throw_on_max_tries=False)

        response = asyncio.run(SampleConnector().send_async(request, mock_client=mock_client))

        assert response.status == 500
        assert response.json() == {"attempt": 3}
        mock_client.assert_sent_count(3)

    def test_handler_false_stops_chain(self) -> None:
        mock_client = MockClient(_mocks(500, 200))
        request = RetryUserRequest(tries=3, handler=lambda exc, req: False)

        with pytest.raises(InternalServerErrorException):
            asyncio.run(SampleConnector().send_async(request, mock_client=mock_client))

        mock_client.assert_sent_count(1)

    def test_handler_mutation_reaches_next_attempt(self) -> None:
        def handler(exc: RequestException, request) -> bool:
            request.headers.add("X-Attempt", "2")
            return True

        mock_client = MockClient(_mocks(503, 200))
        request = RetryUserRequest(tries=2, handler=handler)

        response = asyncio.run(SampleConnector().send_async(request, mock_client=mock_client))

        assert response.pending_request.headers.get("X-Attempt") == "2"
        assert mock_client.recorded_requests[0].headers.get("X-Attempt") is None

    def test_pending_requests_are_flagged_asynchronous(self) -> None:
        mock_client = MockClient(_mocks(200))

        response = asyncio.run(SampleConnector().send_async(UserRequest(), mock_client=mock_client))

        assert response.pending_request.asynchronous is True

    def test_standalone_request_send_async(self) -> None:
        mock_client = MockClient(_mocks(200))

        response = asyncio.run(StandaloneUserRequest().send_async(mock_client=mock_client))

        assert response.status == 200


# ---------------------------------------------------------------------------
# Intervals and fatal failures
# ---------------------------------------------------------------------------


class TestAsyncIntervals:
    def test_interval_uses_asyncio_sleep(self) -> None:
        mock_client = MockClient(_mocks(500, 500, 200))
        request = RetryUserRequest(tries=3, retry_interval=1500)

        with patch("hitch.client.send_request.asyncio.sleep", new_callable=AsyncMock) as sleep:
            asyncio.run(SampleConnector().send_async(request, mock_client=mock_client))

        assert [call.args for call in sleep.await_args_list].count((1.5,)) == 2

    def test_fatal_failure_is_not_retried(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("Connection refused", request=request)

        connector = transport_connector(handler)
        request = RetryUserRequest(tries=3, throw_on_max_tries=False)

        with pytest.raises(FatalRequestException):
            asyncio.run(connector.send_async(request))

        assert len(calls) == 1

    def test_real_transport_retries(self) -> None:
        statuses = iter([500, 201])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(next(statuses), json={"path": request.url.path})

        response = asyncio.run(transport_connector(handler).send_async(RetryUserRequest(tries=2)))

        assert response.status == 201
        assert response.json() == {"path": "/user"}
        assert response.is_mocked is False
