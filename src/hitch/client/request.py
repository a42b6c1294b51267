"""Declarative description of one HTTP call.

Subclass :class:`Request`, set :attr:`~Request.method`, and implement
:meth:`~Request.resolve_endpoint`.  Everything else is optional:

- ``default_headers`` / ``default_query`` / ``default_config`` /
  ``default_body`` seed the request's stores; callers can further mutate
  ``request.headers`` etc. before sending.
- ``tries``, ``retry_interval`` (milliseconds) and ``throw_on_max_tries``
  configure retries; ``None`` falls back to the connector's values.
- :meth:`~Request.handle_retry` decides whether a failed attempt is
  retried, and may mutate the request (new header, new auth) first.
- :meth:`~Request.has_request_failed` and ``treat_as_successful`` override
  response classification.
- ``connector_class`` lets a request be sent on its own with
  :meth:`~Request.send`.

Example::

    class GetUser(Request):
        method = HTTPMethod.GET

        def __init__(self, user_id: int) -> None:
            super().__init__()
            self.user_id = user_id

        def resolve_endpoint(self) -> str:
            return f"/users/{self.user_id}"
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Optional

from hitch.auth.authenticates import AuthenticatesRequests
from hitch.client.middleware import MiddlewarePipeline
from hitch.client.stores import ArrayStore
from hitch.exceptions import InvalidConnectorError
from hitch.models import HTTPMethod

if TYPE_CHECKING:
    from hitch.client.connector import Connector
    from hitch.client.pending_request import PendingRequest
    from hitch.client.response import Response
    from hitch.exceptions import RequestException
    from hitch.faking.mock_client import MockClient


class Request(AuthenticatesRequests):
    """Base class for every request."""

    method: ClassVar[HTTPMethod] = HTTPMethod.GET

    tries: Optional[int] = None
    retry_interval: Optional[int] = None
    throw_on_max_tries: Optional[bool] = None

    response_class: Optional[type[Response]] = None
    treat_as_successful: frozenset[int] = frozenset()
    connector_class: Optional[type[Connector]] = None

    def __init__(self) -> None:
        self.headers = ArrayStore(self.default_headers())
        self.query = ArrayStore(self.default_query())
        self.config = ArrayStore(self.default_config())
        self.body: Any = self.default_body()
        self.middleware = MiddlewarePipeline()
        self.mock_client: Optional[MockClient] = None
        self._authenticator = None
        self._connector: Optional[Connector] = None

    def resolve_endpoint(self) -> str:
        """Return the endpoint path, relative to the connector's base URL."""
        raise NotImplementedError(f"{type(self).__name__} must implement resolve_endpoint()")

    def default_headers(self) -> dict[str, Any]:
        return {}

    def default_query(self) -> dict[str, Any]:
        return {}

    def default_config(self) -> dict[str, Any]:
        return {}

    def default_body(self) -> Any:
        return None

    # ------------------------------------------------------------------ #
    # Hooks
    # ------------------------------------------------------------------ #

    def boot(self, pending_request: PendingRequest) -> None:
        """Mutate each pending request built from this request."""

    def handle_retry(self, exception: RequestException, request: Request) -> bool:
        """Decide whether a failed attempt should be retried.

        Called between a failed attempt and the next one.  *request* is this
        request; changes made to it (headers, authenticator) carry into
        the next attempt because every attempt is rebuilt from it.

        Returns:
            ``False`` to stop retrying and treat *exception* as final.
        """
        return True

    def has_request_failed(self, response: Response) -> Optional[bool]:
        """Override response classification.

        Returns:
            ``True``/``False`` to force the verdict, or ``None`` to defer
            to the connector and the default rules.
        """
        return None

    # ------------------------------------------------------------------ #
    # Fluent setters
    # ------------------------------------------------------------------ #

    def with_mock_client(self, mock_client: Optional[MockClient]) -> Request:
        self.mock_client = mock_client
        return self

    def set_connector(self, connector: Connector) -> Request:
        self._connector = connector
        return self

    # ------------------------------------------------------------------ #
    # Standalone sending
    # ------------------------------------------------------------------ #

    def connector(self) -> Connector:
        """Return the connector this request sends through.

        Raises:
            InvalidConnectorError: If no connector was set and the request
                declares no ``connector_class``.
        """
        if self._connector is None:
            if self.connector_class is None:
                raise InvalidConnectorError(
                    f"{type(self).__name__} has no connector; set connector_class "
                    "or send it through a Connector"
                )
            self._connector = self.connector_class()
        return self._connector

    def create_pending_request(
        self,
        mock_client: Optional[MockClient] = None,
        asynchronous: bool = False,
    ) -> PendingRequest:
        return self.connector().create_pending_request(
            self, mock_client=mock_client, asynchronous=asynchronous
        )

    def send(self, mock_client: Optional[MockClient] = None) -> Response:
        """Send this request through its own connector."""
        return self.connector().send(self, mock_client=mock_client)

    async def send_async(self, mock_client: Optional[MockClient] = None) -> Response:
        return await self.connector().send_async(self, mock_client=mock_client)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.method.value}>"
