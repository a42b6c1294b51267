"""Bearer-style token authentication.

This module provides :class:`TokenAuthenticator`, which sends a token in
the ``Authorization`` header as ``<prefix> <token>``.  The prefix defaults
to ``Bearer``; pass an empty prefix to send the bare token.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hitch.auth.base import Authenticator

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest


class TokenAuthenticator(Authenticator):
    """Authenticate via a token in the ``Authorization`` header.

    Args:
        token: The access token.
        prefix: Scheme placed before the token.
    """

    def __init__(self, token: str, prefix: str = "Bearer") -> None:
        self.token = token
        self.prefix = prefix

    def apply(self, pending_request: PendingRequest) -> None:
        value = f"{self.prefix} {self.token}" if self.prefix else self.token
        pending_request.headers.add("Authorization", value)
