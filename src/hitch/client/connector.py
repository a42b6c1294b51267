"""Connectors own the configuration shared by many requests.

Subclass :class:`Connector` and implement :meth:`~Connector.resolve_base_url`.
A connector holds:

- default headers, query parameters, transport config and body,
- a default authenticator (see :class:`~hitch.auth.AuthenticatesRequests`),
- a :class:`~hitch.client.sender.Sender` (an
  :class:`~hitch.client.sender.HttpxSender` unless one is injected),
- an optional :class:`~hitch.faking.mock_client.MockClient`,
- connector-level middleware and retry defaults.

The connector's stores are only ever read during a send: each
:class:`~hitch.client.pending_request.PendingRequest` takes its own copy,
so concurrent sends through one connector never race.

Example::

    class GitHub(Connector):
        def resolve_base_url(self) -> str:
            return "https://api.github.com"

        def default_headers(self) -> dict[str, str]:
            return {"Accept": "application/vnd.github+json"}

    response = GitHub().with_token_auth(token).send(GetUser("octocat"))
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from hitch.auth.authenticates import AuthenticatesRequests
from hitch.client.middleware import MiddlewarePipeline
from hitch.client.pending_request import PendingRequest
from hitch.client.pool import Pool
from hitch.client.send_request import SendRequest
from hitch.client.sender import HttpxSender, Sender
from hitch.client.stores import ArrayStore
from hitch.config import load_transport_config
from hitch.models import TransportConfig

if TYPE_CHECKING:
    from hitch.client.request import Request
    from hitch.client.response import Response
    from hitch.exceptions import RequestException
    from hitch.faking.mock_client import MockClient


class Connector(AuthenticatesRequests):
    """Base class for connectors.

    Args:
        sender: Transport adapter.  Defaults to a fresh
            :class:`~hitch.client.sender.HttpxSender`.
        transport_config: Transport defaults.  Defaults to
            :func:`~hitch.config.load_transport_config`, which honours the
            ``HITCH_*`` environment variables.
    """

    tries: Optional[int] = None
    retry_interval: Optional[int] = None
    throw_on_max_tries: Optional[bool] = None

    response_class: Optional[type[Response]] = None

    def __init__(
        self,
        sender: Optional[Sender] = None,
        transport_config: Optional[TransportConfig] = None,
    ) -> None:
        transport_config = transport_config or load_transport_config()
        self.headers = ArrayStore(self.default_headers())
        self.query = ArrayStore(self.default_query())
        self.config = ArrayStore(transport_config.to_config()).merge(self.default_config())
        self.body: Any = self.default_body()
        self.middleware = MiddlewarePipeline()
        self.mock_client: Optional[MockClient] = None
        self._authenticator = None
        self._sender = sender

    def resolve_base_url(self) -> str:
        """Return the base URL every endpoint is joined onto."""
        raise NotImplementedError(f"{type(self).__name__} must implement resolve_base_url()")

    def default_headers(self) -> dict[str, Any]:
        return {}

    def default_query(self) -> dict[str, Any]:
        return {}

    def default_config(self) -> dict[str, Any]:
        return {}

    def default_body(self) -> Any:
        return None

    def default_sender(self) -> Sender:
        return HttpxSender()

    @property
    def sender(self) -> Sender:
        if self._sender is None:
            self._sender = self.default_sender()
        return self._sender

    # ------------------------------------------------------------------ #
    # Hooks
    # ------------------------------------------------------------------ #

    def boot(self, pending_request: PendingRequest) -> None:
        """Mutate every pending request built by this connector."""

    def handle_retry(self, exception: RequestException, request: Request) -> bool:
        """Connector-wide retry veto, consulted after the request's own."""
        return True

    def has_request_failed(self, response: Response) -> Optional[bool]:
        """Override response classification for every request.

        Returns:
            ``True``/``False`` to force the verdict, or ``None`` to defer
            to the default rules.
        """
        return None

    # ------------------------------------------------------------------ #
    # Fluent setters
    # ------------------------------------------------------------------ #

    def with_mock_client(self, mock_client: Optional[MockClient]) -> Connector:
        self.mock_client = mock_client
        return self

    def with_sender(self, sender: Sender) -> Connector:
        self._sender = sender
        return self

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #

    def create_pending_request(
        self,
        request: Request,
        mock_client: Optional[MockClient] = None,
        asynchronous: bool = False,
    ) -> PendingRequest:
        """Merge *request* with this connector's defaults into a pending request."""
        return PendingRequest.create(
            self, request, mock_client=mock_client, asynchronous=asynchronous
        )

    def send(self, request: Request, mock_client: Optional[MockClient] = None) -> Response:
        """Send *request*, retrying according to its retry policy.

        Returns:
            The final :class:`~hitch.client.response.Response`.  When
            ``throw_on_max_tries`` is disabled this may be a failed
            response.

        Raises:
            RequestException: If the final attempt failed and
                ``throw_on_max_tries`` is enabled (the default).
            FatalRequestException: If the transport failed on any attempt.
        """
        request.set_connector(self)
        return SendRequest(self, request, mock_client=mock_client).execute()

    async def send_async(self, request: Request, mock_client: Optional[MockClient] = None) -> Response:
        """Asynchronous counterpart of :meth:`send`."""
        request.set_connector(self)
        return await SendRequest(
            self, request, mock_client=mock_client, asynchronous=True
        ).execute_async()

    def pool(
        self,
        requests: Union[Iterable[Union[Request, PendingRequest]], Callable[[], Iterable[Any]]] = (),
        concurrency: Optional[int] = None,
        response_handler: Optional[Callable[[Response], Any]] = None,
        exception_handler: Optional[Callable[[Exception], Any]] = None,
    ) -> Pool:
        """Create a :class:`~hitch.client.pool.Pool` sending *requests* through this connector."""
        return Pool(
            self,
            requests,
            concurrency=concurrency,
            response_handler=response_handler,
            exception_handler=exception_handler,
        )

    def close(self) -> None:
        if self._sender is not None:
            self._sender.close()

    def __enter__(self) -> Connector:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
