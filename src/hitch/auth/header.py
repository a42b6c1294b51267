"""Raw header authentication.

Unlike :class:`~hitch.auth.token.TokenAuthenticator`, the value is sent
verbatim with no scheme prefix, under a configurable header name.  Useful
for APIs that expect e.g. ``X-API-Key: <key>``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hitch.auth.base import Authenticator

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest


class HeaderAuthenticator(Authenticator):
    """Authenticate by setting a single header to a raw credential.

    Args:
        access_token: The header value.
        header_name: The header to set.
    """

    def __init__(self, access_token: str, header_name: str = "Authorization") -> None:
        self.access_token = access_token
        self.header_name = header_name

    def apply(self, pending_request: PendingRequest) -> None:
        pending_request.headers.add(self.header_name, self.access_token)
