"""HTTP Basic authentication.

This module provides :class:`BasicAuthenticator`.  The
``username:password`` pair is Base64-encoded and sent as an
``Authorization: Basic <encoded>`` header per :rfc:`7617`.
"""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING

from hitch.auth.base import Authenticator
from hitch.exceptions import ConfigurationError

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest


class BasicAuthenticator(Authenticator):
    """Authenticate via HTTP Basic authentication.

    Args:
        username: The user name.  Must not contain a colon.
        password: The password.

    Raises:
        ConfigurationError: If *username* contains a colon, which would make
            the encoded pair ambiguous.
    """

    def __init__(self, username: str, password: str) -> None:
        if ":" in username:
            raise ConfigurationError("Basic auth username must not contain a colon")
        self.username = username
        self.password = password

    def apply(self, pending_request: PendingRequest) -> None:
        raw = f"{self.username}:{self.password}"
        encoded = base64.b64encode(raw.encode("utf-8")).decode("ascii")
        pending_request.headers.add("Authorization", f"Basic {encoded}")
