"""Exception hierarchy for hitch.

All exceptions inherit from :class:`HitchError`.  Failures fall into three
groups that the send pipeline treats very differently:

* **Configuration errors** -- nothing could be sent because the request,
  connector, or response class could not be resolved.  Never retried.
* **Fatal request exceptions** -- the transport could not complete the call
  (connection refused, DNS failure, timeout).  No response exists.  Never
  retried, and always raised even when ``throw_on_max_tries`` is disabled.
* **Request exceptions** -- a response was received but classified as a
  failure.  These are the only errors the retry loop recovers from.

Subclass hierarchy::

    HitchError
    +-- ConfigurationError
    |   +-- InvalidConnectorError
    |   +-- InvalidResponseClassError
    +-- NoMockResponseFoundError
    +-- FatalRequestException
    +-- RequestException
        +-- ClientException
        |   +-- UnauthorizedException          (401)
        |   +-- PaymentRequiredException       (402)
        |   +-- ForbiddenException             (403)
        |   +-- NotFoundException              (404)
        |   +-- MethodNotAllowedException      (405)
        |   +-- RequestTimeOutException        (408)
        |   +-- UnprocessableEntityException   (422)
        |   +-- TooManyRequestsException       (429)
        +-- ServerException
            +-- InternalServerErrorException   (500)
            +-- ServiceUnavailableException    (503)
            +-- GatewayTimeoutException        (504)
"""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest
    from hitch.client.response import Response

_MAX_BODY_IN_MESSAGE = 200


class HitchError(Exception):
    """Base exception for all hitch errors."""


class ConfigurationError(HitchError):
    """Raised when a request cannot be built from its configuration."""


class InvalidConnectorError(ConfigurationError):
    """Raised when a standalone request has no connector to send through."""


class InvalidResponseClassError(ConfigurationError):
    """Raised when a configured response class is not a :class:`~hitch.client.response.Response`."""


class NoMockResponseFoundError(HitchError):
    """Raised when a mock client has no canned response left for a request."""


class FatalRequestException(HitchError):
    """Raised when the transport failed before any response was received.

    Args:
        previous: The underlying transport exception (e.g.
            :class:`httpx.ConnectError`).
        pending_request: The request that was being sent.
    """

    def __init__(self, previous: Exception, pending_request: PendingRequest):
        super().__init__(str(previous) or type(previous).__name__)
        self.previous = previous
        self.pending_request = pending_request


class RequestException(HitchError):
    """Raised when a response was received but classified as failed.

    The failed :class:`~hitch.client.response.Response` is always attached,
    so handlers can inspect the status and body.

    Args:
        response: The failed response.
        message: Optional message override.  Defaults to
            ``"<Reason> (<status>) Response: <body>"``.
        previous: The exception the sender reported, if any.
    """

    def __init__(
        self,
        response: Response,
        message: Optional[str] = None,
        previous: Optional[Exception] = None,
    ):
        super().__init__(message or _default_message(response))
        self.response = response
        self.previous = previous

    @property
    def status(self) -> int:
        """The HTTP status of the failed response."""
        return self.response.status

    @property
    def pending_request(self) -> PendingRequest:
        """The pending request that produced the failed response."""
        return self.response.pending_request


class ClientException(RequestException):
    """Raised for 4xx responses."""


class ServerException(RequestException):
    """Raised for 5xx responses."""


class UnauthorizedException(ClientException):
    """401 Unauthorized."""


class PaymentRequiredException(ClientException):
    """402 Payment Required."""


class ForbiddenException(ClientException):
    """403 Forbidden."""


class NotFoundException(ClientException):
    """404 Not Found."""


class MethodNotAllowedException(ClientException):
    """405 Method Not Allowed."""


class RequestTimeOutException(ClientException):
    """408 Request Timeout."""


class UnprocessableEntityException(ClientException):
    """422 Unprocessable Entity."""


class TooManyRequestsException(ClientException):
    """429 Too Many Requests."""


class InternalServerErrorException(ServerException):
    """500 Internal Server Error."""


class ServiceUnavailableException(ServerException):
    """503 Service Unavailable."""


class GatewayTimeoutException(ServerException):
    """504 Gateway Timeout."""


STATUS_EXCEPTIONS: dict[int, type[RequestException]] = {
    401: UnauthorizedException,
    402: PaymentRequiredException,
    403: ForbiddenException,
    404: NotFoundException,
    405: MethodNotAllowedException,
    408: RequestTimeOutException,
    422: UnprocessableEntityException,
    429: TooManyRequestsException,
    500: InternalServerErrorException,
    503: ServiceUnavailableException,
    504: GatewayTimeoutException,
}


def create_request_exception(
    response: Response,
    previous: Optional[Exception] = None,
) -> RequestException:
    """Build the typed exception for a failed *response*.

    Known statuses map to their dedicated subclass; remaining 4xx and 5xx
    statuses fall back to :class:`ClientException` and
    :class:`ServerException`.  Anything else (e.g. a 3xx that a custom
    classifier rejected) becomes a plain :class:`RequestException`.

    Args:
        response: The response that was classified as failed.
        previous: The exception the sender reported, if any.

    Returns:
        An exception instance with *response* attached.  It is returned,
        not raised.
    """
    status = response.status
    exc_class = STATUS_EXCEPTIONS.get(status)
    if exc_class is None:
        if 500 <= status < 600:
            exc_class = ServerException
        elif 400 <= status < 500:
            exc_class = ClientException
        else:
            exc_class = RequestException
    return exc_class(response, previous=previous)


def _default_message(response: Response) -> str:
    status = response.status
    try:
        reason = HTTPStatus(status).phrase
    except ValueError:
        reason = "HTTP Request Failed"

    body = response.body
    if len(body) > _MAX_BODY_IN_MESSAGE:
        body = body[:_MAX_BODY_IN_MESSAGE] + "..."
    return f"{reason} ({status}) Response: {body}"
