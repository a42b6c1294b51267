"""HTTP Digest authentication.

Digest auth needs a challenge/response round trip, so the credentials
cannot be written into a header up front.  :class:`DigestAuthenticator`
stores them in the pending request's ``auth`` config entry instead, and
:class:`~hitch.client.sender.HttpxSender` hands them to
:class:`httpx.DigestAuth`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hitch.auth.base import Authenticator

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest


class DigestAuthenticator(Authenticator):
    """Authenticate via HTTP Digest authentication.

    Args:
        username: The user name.
        password: The password.
        digest: Scheme marker stored alongside the credentials.
    """

    def __init__(self, username: str, password: str, digest: str = "digest") -> None:
        self.username = username
        self.password = password
        self.digest = digest

    def apply(self, pending_request: PendingRequest) -> None:
        pending_request.config.add("auth", (self.username, self.password, self.digest))
