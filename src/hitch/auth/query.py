"""API key authentication through a query-string parameter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hitch.auth.base import Authenticator

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest


class QueryAuthenticator(Authenticator):
    """Authenticate by adding ``parameter=value`` to the query string.

    Args:
        parameter: The query parameter name (e.g. ``"api_key"``).
        value: The key itself.
    """

    def __init__(self, parameter: str, value: str) -> None:
        self.parameter = parameter
        self.value = value

    def apply(self, pending_request: PendingRequest) -> None:
        pending_request.query.add(self.parameter, self.value)
