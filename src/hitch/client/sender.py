"""Transport adapters that turn a pending request into a network call.

:class:`Sender` is the contract the send pipeline relies on: a blocking
:meth:`~Sender.send_request` and a coroutine
:meth:`~Sender.send_request_async`, both returning a
:class:`~hitch.client.response.Response` or raising
:class:`~hitch.exceptions.FatalRequestException` when no response could be
obtained.  Senders never classify responses; a 500 is returned like a 200.

:class:`HttpxSender` is the default implementation, backed by
:class:`httpx.Client` and :class:`httpx.AsyncClient`.  Pending request
config keys it understands:

- ``timeout`` -- seconds, forwarded per request.
- ``follow_redirects`` -- forwarded per request.
- ``auth`` -- ``(username, password)`` for Basic or
  ``(username, password, "digest")`` for :class:`httpx.DigestAuth`.
- ``verify`` / ``cert`` -- client-level TLS settings.  A client is kept per
  distinct combination.

Any :class:`httpx.TransportError` becomes a
:class:`~hitch.exceptions.FatalRequestException`.
"""

from __future__ import annotations

import contextlib
import ssl
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Optional, Union

import httpx

from hitch.exceptions import ConfigurationError, FatalRequestException
from hitch.output import get_output

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest
    from hitch.client.response import Response

_TRANSPORT_ERRORS = (httpx.TransportError,)

VerifyType = Union[bool, str, ssl.SSLContext]


class Sender(ABC):
    """Contract for transport adapters."""

    @abstractmethod
    def send_request(self, pending_request: PendingRequest) -> Response:
        """Send *pending_request*, blocking until the response arrives.

        Raises:
            FatalRequestException: If the transport failed before a
                response was received.
        """
        ...

    @abstractmethod
    async def send_request_async(self, pending_request: PendingRequest) -> Response:
        """Send *pending_request* without blocking the event loop.

        Raises:
            FatalRequestException: If the transport failed before a
                response was received.
        """
        ...

    @contextlib.asynccontextmanager
    async def session(self) -> AsyncIterator[Sender]:
        """Share async connections between the sends made inside the block."""
        yield self

    def close(self) -> None:
        """Release any pooled connections."""


class HttpxSender(Sender):
    """Default sender backed by :mod:`httpx`.

    Synchronous sends reuse a pooled :class:`httpx.Client` per TLS
    configuration.  Asynchronous sends made inside :meth:`session` share one
    :class:`httpx.AsyncClient` per TLS configuration, closed with
    ``aclose()`` when the block exits.  Outside a session each async send
    opens a short-lived client, so the sender can be shared across event
    loops (e.g. successive :func:`asyncio.run` calls).

    Args:
        transport: Optional custom transport (e.g. :class:`httpx.MockTransport`)
            used by both the sync and async clients.
        **client_options: Extra keyword arguments for the httpx clients.

    Example::

        connector = MyConnector(sender=HttpxSender(http2=False))
    """

    def __init__(
        self,
        transport: Optional[Any] = None,
        **client_options: Any,
    ) -> None:
        self._transport = transport
        self._client_options = client_options
        self._clients: dict[tuple[Any, ...], httpx.Client] = {}
        self._async_clients: ContextVar[Optional[dict[tuple[Any, ...], httpx.AsyncClient]]] = ContextVar(
            f"hitch_async_clients_{id(self)}", default=None
        )

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #

    def send_request(self, pending_request: PendingRequest) -> Response:
        client = self._client_for(pending_request)
        kwargs = self._request_kwargs(pending_request)
        get_output().debug(f"Sending {pending_request.method.value} {pending_request.url}")
        try:
            raw = client.request(**kwargs)
        except _TRANSPORT_ERRORS as exc:
            raise FatalRequestException(exc, pending_request) from exc
        return pending_request.response_class(raw, pending_request)

    async def send_request_async(self, pending_request: PendingRequest) -> Response:
        kwargs = self._request_kwargs(pending_request)
        get_output().debug(f"Sending {pending_request.method.value} {pending_request.url} (async)")
        clients = self._async_clients.get()
        if clients is None:
            async with httpx.AsyncClient(**self._client_kwargs(pending_request)) as client:
                raw = await self._request_async(client, pending_request, kwargs)
        else:
            key = self._client_key(pending_request)
            client = clients.get(key)
            if client is None:
                client = httpx.AsyncClient(**self._client_kwargs(pending_request))
                clients[key] = client
            raw = await self._request_async(client, pending_request, kwargs)
        return pending_request.response_class(raw, pending_request)

    @contextlib.asynccontextmanager
    async def session(self) -> AsyncIterator[HttpxSender]:
        """Reuse one :class:`httpx.AsyncClient` per TLS setting inside the block.

        Tasks started inside the block inherit the session, so every item of
        a :class:`~hitch.client.pool.Pool` fan-out shares its connections.
        Nested sessions reuse the outer one.
        """
        if self._async_clients.get() is not None:
            yield self
            return

        clients: dict[tuple[Any, ...], httpx.AsyncClient] = {}
        token = self._async_clients.set(clients)
        try:
            yield self
        finally:
            self._async_clients.reset(token)
            for client in clients.values():
                await client.aclose()

    def close(self) -> None:
        for client in self._clients.values():
            client.close()
        self._clients.clear()

    def __enter__(self) -> HttpxSender:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _request_kwargs(self, pending_request: PendingRequest) -> dict[str, Any]:
        config = pending_request.config
        kwargs: dict[str, Any] = {
            "method": pending_request.method.value,
            "url": pending_request.url,
            "headers": pending_request.transport_headers(),
            "params": pending_request.query.all(),
        }

        body = pending_request.body
        if isinstance(body, (dict, list)):
            kwargs["json"] = body
        elif isinstance(body, (str, bytes)):
            kwargs["content"] = body

        if "timeout" in config:
            kwargs["timeout"] = config.get("timeout")
        if "follow_redirects" in config:
            kwargs["follow_redirects"] = config.get("follow_redirects")

        auth = _build_auth(config.get("auth"))
        if auth is not None:
            kwargs["auth"] = auth
        return kwargs

    def _client_kwargs(self, pending_request: PendingRequest) -> dict[str, Any]:
        kwargs = dict(self._client_options)
        kwargs["verify"] = _build_verify(
            pending_request.config.get("verify", True),
            pending_request.config.get("cert"),
        )
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    @staticmethod
    def _client_key(pending_request: PendingRequest) -> tuple[Any, ...]:
        return (
            pending_request.config.get("verify", True),
            pending_request.config.get("cert"),
        )

    @staticmethod
    async def _request_async(
        client: httpx.AsyncClient,
        pending_request: PendingRequest,
        kwargs: dict[str, Any],
    ) -> httpx.Response:
        try:
            return await client.request(**kwargs)
        except _TRANSPORT_ERRORS as exc:
            raise FatalRequestException(exc, pending_request) from exc

    def _client_for(self, pending_request: PendingRequest) -> httpx.Client:
        key = self._client_key(pending_request)
        client = self._clients.get(key)
        if client is None or client.is_closed:
            client = httpx.Client(**self._client_kwargs(pending_request))
            self._clients[key] = client
        return client


def _build_auth(auth: Any) -> Optional[httpx.Auth]:
    """Translate the ``auth`` config entry into an :class:`httpx.Auth`."""
    if auth is None:
        return None
    if isinstance(auth, httpx.Auth):
        return auth
    if isinstance(auth, (tuple, list)):
        if len(auth) == 3 and str(auth[2]).lower() == "digest":
            return httpx.DigestAuth(auth[0], auth[1])
        if len(auth) == 2:
            return httpx.BasicAuth(auth[0], auth[1])
    raise ConfigurationError(f"Unsupported auth config: {type(auth).__name__}")


def _build_verify(verify: VerifyType, cert: Any) -> VerifyType:
    """Fold an optional client certificate into the ``verify`` setting."""
    if cert is None:
        return verify

    if isinstance(verify, ssl.SSLContext):
        context = verify
    elif isinstance(verify, str):
        context = ssl.create_default_context(cafile=verify)
    else:
        context = ssl.create_default_context()
        if verify is False:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

    if isinstance(cert, (tuple, list)):
        path, password = cert
    else:
        path, password = cert, None
    context.load_cert_chain(path, password=password)
    return context
