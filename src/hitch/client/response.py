"""Response wrapper tying a raw :class:`httpx.Response` to its pending request.

A :class:`Response` is created once per completed attempt, either by the
sender or by a mock.  Besides the usual status/header/body accessors it
knows how to classify itself: :attr:`Response.failed` consults the
request's and connector's custom classifiers and the
``treat_as_successful`` whitelist before falling back to ``status >= 400``.

Subclass :class:`Response` and set ``response_class`` on a connector or
request to add domain helpers (e.g. DTO mapping).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

import httpx

from hitch.exceptions import RequestException, create_request_exception

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest

_MISSING = object()


class Response:
    """A completed HTTP exchange.

    Args:
        raw: The transport response.
        pending_request: The pending request that produced it.
        sender_exception: An exception the sender reported alongside the
            response, if any.  Chained into :meth:`to_exception`.
        is_mocked: ``True`` when the response came from a mock client.
    """

    def __init__(
        self,
        raw: httpx.Response,
        pending_request: PendingRequest,
        sender_exception: Optional[Exception] = None,
        is_mocked: bool = False,
    ) -> None:
        self._raw = raw
        self._pending_request = pending_request
        self._sender_exception = sender_exception
        self._is_mocked = is_mocked
        self._decoded: Any = _MISSING

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def raw(self) -> httpx.Response:
        return self._raw

    @property
    def pending_request(self) -> PendingRequest:
        return self._pending_request

    @property
    def sender_exception(self) -> Optional[Exception]:
        return self._sender_exception

    @property
    def is_mocked(self) -> bool:
        return self._is_mocked

    @property
    def status(self) -> int:
        return self._raw.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._raw.headers

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._raw.headers.get(name, default)

    @property
    def content(self) -> bytes:
        return self._raw.content

    @property
    def body(self) -> str:
        """The body decoded as text."""
        return self._raw.text

    def json(self, key: Optional[str] = None, default: Any = None) -> Any:
        """Decode the body as JSON, caching the result.

        Args:
            key: Optional top-level key to return instead of the whole
                document.
            default: Returned when *key* is missing.

        Returns:
            The decoded document, or ``None`` for an empty body.

        Raises:
            ValueError: If the body is not valid JSON.
        """
        if self._decoded is _MISSING:
            self._decoded = self._raw.json() if self._raw.content else None
        if key is None:
            return self._decoded
        if isinstance(self._decoded, dict):
            return self._decoded.get(key, default)
        return default

    # ------------------------------------------------------------------ #
    # Classification
    # ------------------------------------------------------------------ #

    @property
    def client_error(self) -> bool:
        return 400 <= self.status < 500

    @property
    def server_error(self) -> bool:
        return self.status >= 500

    @property
    def redirect(self) -> bool:
        return 300 <= self.status < 400

    @property
    def failed(self) -> bool:
        """Whether this response counts as a failure.

        Resolution order: the request's ``has_request_failed``, the
        connector's ``has_request_failed`` (first non-``None`` wins), the
        request's ``treat_as_successful`` whitelist, then ``status >= 400``.
        """
        request = self._pending_request.request
        connector = self._pending_request.connector

        verdict = request.has_request_failed(self)
        if verdict is None:
            verdict = connector.has_request_failed(self)
        if verdict is not None:
            return verdict

        if self.status in request.treat_as_successful:
            return False
        return self.server_error or self.client_error

    @property
    def successful(self) -> bool:
        return not self.failed

    @property
    def ok(self) -> bool:
        return self.successful

    def to_exception(self) -> Optional[RequestException]:
        """Return the typed exception for this response, or ``None`` if it succeeded."""
        if not self.failed:
            return None
        return create_request_exception(self, self._sender_exception)

    def throw(self) -> Response:
        """Raise :meth:`to_exception` if the response failed; otherwise return ``self``."""
        exc = self.to_exception()
        if exc is not None:
            raise exc
        return self

    def __repr__(self) -> str:
        mocked = " mocked" if self._is_mocked else ""
        return f"<{type(self).__name__} [{self.status}]{mocked}>"
