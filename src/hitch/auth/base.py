"""Abstract base class for authenticators.

An :class:`Authenticator` is a strategy that mutates an outgoing
:class:`~hitch.client.pending_request.PendingRequest` -- its headers,
query parameters, or transport config -- right before it is sent.

To implement a new strategy, subclass :class:`Authenticator` and implement
:meth:`~Authenticator.apply`.  Implementations must overwrite rather than
append: the same authenticator may be applied again when a retry handler
re-authenticates a request, and the second application must leave the
request exactly as the first one did.

See Also:
    :mod:`hitch.auth.manager` for building authenticators from
    :class:`~hitch.models.AuthConfig`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest


class Authenticator(ABC):
    """Abstract base class for request authentication strategies."""

    @abstractmethod
    def apply(self, pending_request: PendingRequest) -> None:
        """Apply credentials to *pending_request* in place.

        Args:
            pending_request: The request about to be sent.
        """
        ...

    def __repr__(self) -> str:
        # Never leak credentials through reprs or logs.
        return f"{type(self).__name__}()"
