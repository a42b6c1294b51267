"""Mock transport that serves canned responses and records what was sent.

A :class:`MockClient` attached to a connector (or passed to a single send)
intercepts every dispatch: instead of reaching the sender, the next canned
:class:`~hitch.faking.mock_response.MockResponse` is turned into a
response.  Two registration styles are supported:

* **Sequence** -- a list of mocks consumed first-in, first-out, regardless
  of which request is being sent.
* **Mapping** -- keys are :class:`~hitch.client.request.Request`
  subclasses or URL glob patterns (``"*/users/*"``); values are a single
  mock (reused for every match), a list of mocks (consumed in order), or a
  callable ``(pending_request) -> MockResponse``.

The assertion helpers are meant for tests; nothing in the send pipeline
reads them.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping, Sequence
from fnmatch import fnmatch
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from hitch.exceptions import NoMockResponseFoundError
from hitch.faking.mock_response import MockResponse

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest

MockSource = Union[MockResponse, Sequence[MockResponse], Callable[["PendingRequest"], MockResponse]]


class MockClient:
    """Serve canned responses in place of the network.

    Args:
        responses: A list of mocks (FIFO) or a mapping of request class /
            URL pattern to mock sources.  See the module docstring.
    """

    def __init__(
        self,
        responses: Union[Sequence[MockResponse], Mapping[Any, MockSource], None] = None,
    ) -> None:
        self._queue: deque[MockResponse] = deque()
        self._keyed: dict[Any, Any] = {}
        self._recorded: list[PendingRequest] = []
        if responses is not None:
            self.add_responses(responses)

    def add_responses(
        self,
        responses: Union[Sequence[MockResponse], Mapping[Any, MockSource]],
    ) -> MockClient:
        """Register more canned responses."""
        if isinstance(responses, Mapping):
            for key, source in responses.items():
                if isinstance(source, Sequence):
                    source = deque(source)
                self._keyed[key] = source
        else:
            self._queue.extend(responses)
        return self

    def add_response(self, response: MockResponse) -> MockClient:
        self._queue.append(response)
        return self

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def guess_next_response(self, pending_request: PendingRequest) -> MockResponse:
        """Pick the canned response for *pending_request* and record the send.

        Keyed registrations are checked first (request class, then URL
        pattern); the FIFO queue is the fallback.

        Raises:
            NoMockResponseFoundError: If nothing matches or the matching
                source is exhausted.
        """
        mock = self._match_keyed(pending_request)
        if mock is None:
            if not self._queue:
                raise NoMockResponseFoundError(
                    f"No mock response left for {pending_request.method.value} {pending_request.url}"
                )
            mock = self._queue.popleft()

        self._recorded.append(pending_request)
        return mock

    def _match_keyed(self, pending_request: PendingRequest) -> Optional[MockResponse]:
        for key, source in self._keyed.items():
            if not self._key_matches(key, pending_request):
                continue
            if isinstance(source, MockResponse):
                return source
            if isinstance(source, deque):
                if not source:
                    raise NoMockResponseFoundError(
                        f"Mock responses for {key!r} are exhausted"
                    )
                return source.popleft()
            return source(pending_request)
        return None

    @staticmethod
    def _key_matches(key: Any, pending_request: PendingRequest) -> bool:
        if isinstance(key, type):
            return isinstance(pending_request.request, key)
        if isinstance(key, str):
            return fnmatch(pending_request.url, key)
        return False

    # ------------------------------------------------------------------ #
    # Assertions
    # ------------------------------------------------------------------ #

    @property
    def recorded_requests(self) -> list[PendingRequest]:
        """Every pending request served so far, in dispatch order."""
        return list(self._recorded)

    def last_pending_request(self) -> Optional[PendingRequest]:
        return self._recorded[-1] if self._recorded else None

    def assert_sent_count(self, count: int) -> None:
        sent = len(self._recorded)
        if sent != count:
            raise AssertionError(f"Expected {count} request(s) to be sent, but {sent} were sent")

    def assert_nothing_sent(self) -> None:
        if self._recorded:
            raise AssertionError(f"Expected no requests, but {len(self._recorded)} were sent")

    def assert_sent(self, key: Any) -> None:
        """Assert a request matching *key* (class or URL glob) was sent."""
        if not any(self._key_matches(key, pending) for pending in self._recorded):
            raise AssertionError(f"Expected a request matching {key!r} to be sent")

    def assert_not_sent(self, key: Any) -> None:
        if any(self._key_matches(key, pending) for pending in self._recorded):
            raise AssertionError(f"Expected no request matching {key!r} to be sent")
