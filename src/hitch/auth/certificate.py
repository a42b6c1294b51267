"""Client certificate (mutual TLS) authentication.

The certificate is a transport concern, so :class:`CertificateAuthenticator`
only records it in the pending request's ``cert`` config entry.
:class:`~hitch.client.sender.HttpxSender` loads it into the SSL context of
the client it sends through.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from hitch.auth.base import Authenticator

if TYPE_CHECKING:
    from hitch.client.pending_request import PendingRequest


class CertificateAuthenticator(Authenticator):
    """Authenticate with a client certificate.

    Args:
        path: Path to a PEM file holding the certificate (and key).
        password: Optional passphrase for the private key.
    """

    def __init__(self, path: str, password: Optional[str] = None) -> None:
        self.path = path
        self.password = password

    def apply(self, pending_request: PendingRequest) -> None:
        cert = (self.path, self.password) if self.password is not None else self.path
        pending_request.config.add("cert", cert)
