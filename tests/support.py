"""Connectors and requests shared by the client test modules."""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx

from hitch.client import Connector, HttpxSender, Request
from hitch.exceptions import RequestException
from hitch.models import HTTPMethod

BASE_URL = "https://tests.hitch.dev"

RetryHandler = Callable[[RequestException, Request], bool]


# ---------------------------------------------------------------------------
# Connectors
# ---------------------------------------------------------------------------


class SampleConnector(Connector):
    def resolve_base_url(self) -> str:
        return BASE_URL

    def default_headers(self) -> dict[str, Any]:
        return {"Accept": "application/json"}


class RetryConnector(SampleConnector):
    tries = 3
    retry_interval = 0
    throw_on_max_tries = False


class VetoRetryConnector(SampleConnector):
    """Refuses every retry."""

    def handle_retry(self, exception: RequestException, request: Request) -> bool:
        return False


def transport_connector(handler: Callable[[httpx.Request], httpx.Response]) -> SampleConnector:
    """A connector whose sender is backed by :class:`httpx.MockTransport`."""
    return SampleConnector(sender=HttpxSender(transport=httpx.MockTransport(handler)))


def refusing_connector() -> SampleConnector:
    """A connector whose transport always fails to connect."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    return transport_connector(handler)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class UserRequest(Request):
    method = HTTPMethod.GET

    def resolve_endpoint(self) -> str:
        return "/user"


class CreateUserRequest(Request):
    method = HTTPMethod.POST

    def __init__(self, name: str = "Sam") -> None:
        self.name = name
        super().__init__()

    def resolve_endpoint(self) -> str:
        return "/users"

    def default_body(self) -> Any:
        return {"name": self.name}


class ErrorRequest(Request):
    def resolve_endpoint(self) -> str:
        return "/error"


class NotFoundTreatedAsSuccessfulRequest(ErrorRequest):
    treat_as_successful = frozenset({404})


class StandaloneUserRequest(UserRequest):
    connector_class = SampleConnector


class RetryUserRequest(UserRequest):
    """A user request with per-instance retry settings and handler."""

    def __init__(
        self,
        tries: Optional[int] = None,
        retry_interval: Optional[int] = None,
        throw_on_max_tries: Optional[bool] = None,
        handler: Optional[RetryHandler] = None,
    ) -> None:
        super().__init__()
        self.tries = tries
        self.retry_interval = retry_interval
        self.throw_on_max_tries = throw_on_max_tries
        self._handler = handler

    def handle_retry(self, exception: RequestException, request: Request) -> bool:
        if self._handler is None:
            return True
        return self._handler(exception, request)
