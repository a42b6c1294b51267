"""Send-ready snapshot of one request attempt.

A :class:`PendingRequest` is built fresh for every attempt by merging a
:class:`~hitch.client.connector.Connector`'s defaults with a
:class:`~hitch.client.request.Request`'s overrides.  Construction runs in
a fixed order:

1. Resolve the URL (base URL + endpoint).
2. Copy and merge headers, query, config, and body -- connector first,
   request overriding.
3. Resolve and validate the response class and mock client.
4. Resolve the authenticator (request, then connector) and apply it.
5. Run the connector's and request's ``boot`` hooks.
6. Run the middleware request pipeline (see :meth:`PendingRequest.create`).

Every store is copied, so mutating a pending request never leaks back into
the connector or request it came from.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from hitch.auth.base import Authenticator
from hitch.client.middleware import MiddlewarePipeline
from hitch.client.response import Response
from hitch.client.stores import ArrayStore
from hitch.exceptions import InvalidResponseClassError
from hitch.models import HTTPMethod

if TYPE_CHECKING:
    from hitch.client.connector import Connector
    from hitch.client.request import Request
    from hitch.faking.mock_client import MockClient
    from hitch.faking.mock_response import MockResponse


def join_url(base_url: str, endpoint: str) -> str:
    """Join *base_url* and *endpoint* with exactly one slash.

    An absolute *endpoint* (``http://`` or ``https://``) is returned as-is.
    """
    if endpoint.startswith(("http://", "https://")):
        return endpoint
    if not base_url:
        return endpoint
    if not endpoint:
        return base_url
    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"


class PendingRequest:
    """A fully merged request, ready for a sender or mock client.

    Args:
        connector: The connector supplying defaults and the sender.
        request: The request being sent.
        mock_client: Optional mock client overriding the request's and
            connector's own.
        asynchronous: Whether this attempt is driven by the async pipeline.

    Raises:
        InvalidResponseClassError: If the resolved response class is not a
            :class:`~hitch.client.response.Response` subclass.
    """

    def __init__(
        self,
        connector: Connector,
        request: Request,
        mock_client: Optional[MockClient] = None,
        asynchronous: bool = False,
    ) -> None:
        self.connector = connector
        self.request = request
        self.asynchronous = asynchronous
        self.fake_response: Optional[MockResponse] = None

        self.method: HTTPMethod = HTTPMethod(request.method)
        self.url = join_url(connector.resolve_base_url(), request.resolve_endpoint())

        self.headers = ArrayStore(connector.headers.all()).merge(request.headers.all())
        self.query = ArrayStore(connector.query.all()).merge(request.query.all())
        self.config = ArrayStore(connector.config.all()).merge(request.config.all())
        self.body = _merge_body(connector.body, request.body)

        self.mock_client = mock_client or request.mock_client or connector.mock_client
        self.response_class = self._resolve_response_class()

        self.middleware = MiddlewarePipeline().merge(connector.middleware).merge(request.middleware)

        self.authenticator = self._resolve_authenticator()
        if self.authenticator is not None:
            self.authenticator.apply(self)

        connector.boot(self)
        request.boot(self)

    @classmethod
    def create(
        cls,
        connector: Connector,
        request: Request,
        mock_client: Optional[MockClient] = None,
        asynchronous: bool = False,
    ) -> PendingRequest:
        """Build a pending request and run the middleware request pipeline on it.

        The pipeline may hand back a different pending request, so callers
        must use the returned object rather than the one they constructed.
        """
        pending = cls(connector, request, mock_client=mock_client, asynchronous=asynchronous)
        return pending.middleware.execute_request_pipeline(pending)

    def _resolve_authenticator(self) -> Optional[Authenticator]:
        return self.request.get_authenticator() or self.connector.get_authenticator()

    def _resolve_response_class(self) -> type[Response]:
        response_class = (
            self.request.response_class or self.connector.response_class or Response
        )
        if not (isinstance(response_class, type) and issubclass(response_class, Response)):
            raise InvalidResponseClassError(
                f"{response_class!r} is not a subclass of {Response.__name__}"
            )
        return response_class

    def authenticate(self, authenticator: Authenticator) -> PendingRequest:
        """Apply *authenticator* to this pending request only."""
        self.authenticator = authenticator
        authenticator.apply(self)
        return self

    def transport_headers(self) -> dict[str, str]:
        """Headers with every value converted to ``str`` for the transport."""
        return {key: str(value) for key, value in self.headers.all().items()}

    def has_mock_client(self) -> bool:
        return self.mock_client is not None

    def __repr__(self) -> str:
        return f"<PendingRequest {self.method.value} {self.url}>"


def _merge_body(connector_body: Any, request_body: Any) -> Any:
    if isinstance(connector_body, dict) and isinstance(request_body, dict):
        return {**connector_body, **request_body}
    if request_body is not None:
        return request_body
    if isinstance(connector_body, dict):
        return dict(connector_body)
    return connector_body
