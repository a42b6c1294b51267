"""Concurrent fan-out of many requests through one connector.

A :class:`Pool` sends every item with :meth:`SendRequest.execute_async
<hitch.client.send_request.SendRequest.execute_async>` under
:func:`asyncio.gather`, optionally capped by an :class:`asyncio.Semaphore`.
The fan-out runs inside the connector sender's
:meth:`~hitch.client.sender.Sender.session`, so items share connections.
Each settled item goes to exactly one callback:

* the response handler, for a response (including a failed one returned
  because ``throw_on_max_tries`` is disabled);
* the exception handler, for a
  :class:`~hitch.exceptions.RequestException` or
  :class:`~hitch.exceptions.FatalRequestException`.

Item failures never escape :meth:`Pool.send`.  Exceptions raised by the
handlers themselves, and errors outside the two families above, do.

Completion order follows the network.  With a mock client attached no
dispatch ever suspends, so callbacks fire in submission order and mock
responses are consumed in registration order.

Example::

    pool = connector.pool(
        [GetUser(1), GetUser(2), GetUser(3)],
        concurrency=2,
        response_handler=lambda response: users.append(response.json()),
        exception_handler=lambda exc: errors.append(exc),
    )
    pool.run()
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from hitch.client.pending_request import PendingRequest
from hitch.client.send_request import SendRequest
from hitch.exceptions import ConfigurationError, FatalRequestException, RequestException
from hitch.output import get_output

if TYPE_CHECKING:
    from hitch.client.connector import Connector
    from hitch.client.request import Request
    from hitch.client.response import Response
    from hitch.faking.mock_client import MockClient

PoolItem = Union["Request", PendingRequest]
ResponseHandler = Callable[["Response"], Any]
ExceptionHandler = Callable[[Exception], Any]


class Pool:
    """Send many requests concurrently and route each outcome to a handler.

    Args:
        connector: The connector every item is sent through.
        requests: Requests and/or pending requests, or a callable returning
            them.  Items are keyed by their position.
        concurrency: Maximum number of in-flight items.  ``None`` means
            unbounded.
        response_handler: Called with each settled response.
        exception_handler: Called with each item's exception.
    """

    def __init__(
        self,
        connector: Connector,
        requests: Union[Iterable[PoolItem], Callable[[], Iterable[PoolItem]]] = (),
        concurrency: Optional[int] = None,
        response_handler: Optional[ResponseHandler] = None,
        exception_handler: Optional[ExceptionHandler] = None,
    ) -> None:
        self.connector = connector
        self._requests: dict[int, PoolItem] = {}
        self._concurrency: Optional[int] = None
        self._response_handler = response_handler
        self._exception_handler = exception_handler
        self._mock_client: Optional[MockClient] = None
        self.set_requests(requests)
        self.set_concurrency(concurrency)

    # ------------------------------------------------------------------ #
    # Fluent setters
    # ------------------------------------------------------------------ #

    def set_requests(
        self,
        requests: Union[Iterable[PoolItem], Callable[[], Iterable[PoolItem]]],
    ) -> Pool:
        """Replace the pool's items, keyed by position."""
        if callable(requests):
            requests = requests()
        self._requests = dict(enumerate(requests))
        return self

    def get_requests(self) -> dict[int, PoolItem]:
        return dict(self._requests)

    def set_concurrency(self, concurrency: Optional[int]) -> Pool:
        """Cap the number of in-flight items.

        Raises:
            ConfigurationError: If *concurrency* is not a positive integer.
        """
        if concurrency is not None and concurrency < 1:
            raise ConfigurationError(f"Pool concurrency must be at least 1, got {concurrency}")
        self._concurrency = concurrency
        return self

    @property
    def concurrency(self) -> Optional[int]:
        return self._concurrency

    def with_response_handler(self, handler: Optional[ResponseHandler]) -> Pool:
        self._response_handler = handler
        return self

    def with_exception_handler(self, handler: Optional[ExceptionHandler]) -> Pool:
        self._exception_handler = handler
        return self

    def with_mock_client(self, mock_client: Optional[MockClient]) -> Pool:
        """Route every item through *mock_client* instead of the network."""
        self._mock_client = mock_client
        return self

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #

    async def send(self) -> None:
        """Send every item and wait until all of them have settled."""
        if self._concurrency is None:
            limiter: Any = contextlib.nullcontext()
        else:
            limiter = asyncio.Semaphore(self._concurrency)

        async def settle(index: int, item: PoolItem) -> None:
            async with limiter:
                try:
                    response = await self._send_item(item)
                except (RequestException, FatalRequestException) as exc:
                    self._on_exception(index, exc)
                    return
            self._on_response(response)

        async with self.connector.sender.session():
            await asyncio.gather(
                *(settle(index, item) for index, item in self._requests.items())
            )

    def run(self) -> None:
        """Blocking wrapper around :meth:`send` for code outside an event loop."""
        asyncio.run(self.send())

    async def _send_item(self, item: PoolItem) -> Response:
        if isinstance(item, PendingRequest):
            if self._mock_client is not None and item.mock_client is None:
                item.mock_client = self._mock_client
            item.asynchronous = True
            return await SendRequest(
                item.connector,
                item.request,
                mock_client=self._mock_client,
                asynchronous=True,
                pending_request=item,
            ).execute_async()
        return await self.connector.send_async(item, mock_client=self._mock_client)

    def _on_response(self, response: Response) -> None:
        if self._response_handler is not None:
            self._response_handler(response)

    def _on_exception(self, index: int, exc: Exception) -> None:
        if self._exception_handler is None:
            get_output().debug(f"Pool item {index} failed with no exception handler: {exc}")
            return
        self._exception_handler(exc)

    def __len__(self) -> int:
        return len(self._requests)
