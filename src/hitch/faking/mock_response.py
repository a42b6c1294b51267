"""Canned responses for :class:`~hitch.faking.mock_client.MockClient`."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

import httpx

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest
    from hitch.client.response import Response

ExceptionFactory = Callable[["PendingRequest"], Exception]


class MockResponse:
    """A canned HTTP response returned instead of performing network I/O.

    Bodies are encoded by type: ``dict`` and ``list`` become compact JSON,
    ``str`` is sent as UTF-8 text, ``bytes`` verbatim, and ``None`` as an
    empty body.

    Args:
        body: The response body.
        status: The HTTP status code.
        headers: Extra response headers.

    Example::

        MockResponse.make({"name": "Sam"}, 500)
    """

    def __init__(
        self,
        body: Any = None,
        status: int = 200,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.body = body
        self.status = status
        self.headers = dict(headers or {})
        self._exception: Optional[Union[Exception, ExceptionFactory]] = None

    @classmethod
    def make(
        cls,
        body: Any = None,
        status: int = 200,
        headers: Optional[dict[str, str]] = None,
    ) -> MockResponse:
        return cls(body, status, headers)

    def throw(self, exception: Union[Exception, ExceptionFactory]) -> MockResponse:
        """Make this mock raise instead of producing a response.

        Args:
            exception: An exception instance, or a callable receiving the
                pending request and returning the exception to raise.  The
                callable form lets the exception reference the request,
                e.g. ``lambda pending: FatalRequestException(err, pending)``.
        """
        self._exception = exception
        return self

    @property
    def raises(self) -> bool:
        return self._exception is not None

    def into_response(self, pending_request: PendingRequest) -> Response:
        """Materialise this mock as a response for *pending_request*.

        Raises:
            Exception: Whatever :meth:`throw` configured, if anything.
        """
        if self._exception is not None:
            exc = self._exception
            if callable(exc) and not isinstance(exc, BaseException):
                exc = exc(pending_request)
            raise exc

        raw = httpx.Response(
            status_code=self.status,
            headers=self._encoded_headers(),
            content=self._encoded_body(),
            request=httpx.Request(
                pending_request.method.value,
                pending_request.url,
                headers=pending_request.transport_headers(),
                params=pending_request.query.all(),
            ),
        )
        return pending_request.response_class(raw, pending_request, is_mocked=True)

    def _encoded_body(self) -> bytes:
        if self.body is None:
            return b""
        if isinstance(self.body, bytes):
            return self.body
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return json.dumps(self.body, separators=(",", ":")).encode("utf-8")

    def _encoded_headers(self) -> dict[str, str]:
        headers = dict(self.headers)
        if isinstance(self.body, (dict, list)):
            headers.setdefault("Content-Type", "application/json")
        return headers

    def __repr__(self) -> str:
        return f"MockResponse(status={self.status}, body={self.body!r})"
