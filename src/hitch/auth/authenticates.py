"""Fluent authentication setters shared by connectors and requests.

:class:`AuthenticatesRequests` is mixed into both
:class:`~hitch.client.connector.Connector` and
:class:`~hitch.client.request.Request`.  Each side resolves its own
authenticator as "explicitly set, else :meth:`default_auth`"; the pending
request then prefers the request's authenticator over the connector's.
"""

from __future__ import annotations

from typing import Optional

from hitch.auth.base import Authenticator
from hitch.auth.basic import BasicAuthenticator
from hitch.auth.certificate import CertificateAuthenticator
from hitch.auth.digest import DigestAuthenticator
from hitch.auth.header import HeaderAuthenticator
from hitch.auth.manager import build_authenticator
from hitch.auth.query import QueryAuthenticator
from hitch.auth.token import TokenAuthenticator
from hitch.models import AuthConfig


class AuthenticatesRequests:
    """Mixin holding an optional authenticator and fluent setters for it."""

    _authenticator: Optional[Authenticator] = None

    def default_auth(self) -> Optional[Authenticator]:
        """Return the authenticator used when none was set explicitly.

        Override in subclasses to authenticate every send by default.
        """
        return None

    def get_authenticator(self) -> Optional[Authenticator]:
        return self._authenticator or self.default_auth()

    def authenticate(self, authenticator: Optional[Authenticator]):
        """Set the authenticator, replacing any previous one."""
        self._authenticator = authenticator
        return self

    def authenticate_with(self, auth_config: AuthConfig):
        """Build an authenticator from *auth_config* and set it."""
        return self.authenticate(build_authenticator(auth_config))

    def with_token_auth(self, token: str, prefix: str = "Bearer"):
        return self.authenticate(TokenAuthenticator(token, prefix))

    def with_basic_auth(self, username: str, password: str):
        return self.authenticate(BasicAuthenticator(username, password))

    def with_digest_auth(self, username: str, password: str, digest: str = "digest"):
        return self.authenticate(DigestAuthenticator(username, password, digest))

    def with_query_auth(self, parameter: str, value: str):
        return self.authenticate(QueryAuthenticator(parameter, value))

    def with_header_auth(self, access_token: str, header_name: str = "Authorization"):
        return self.authenticate(HeaderAuthenticator(access_token, header_name))

    def with_certificate_auth(self, path: str, password: Optional[str] = None):
        return self.authenticate(CertificateAuthenticator(path, password))
