"""Authentication strategies for hitch.

Every strategy implements :class:`Authenticator` and mutates a pending
request in place right before it is sent:

- :class:`TokenAuthenticator` -- ``Authorization: Bearer <token>``.
- :class:`BasicAuthenticator` -- ``Authorization: Basic <b64>``.
- :class:`DigestAuthenticator` -- digest credentials handed to the transport.
- :class:`QueryAuthenticator` -- API key in the query string.
- :class:`HeaderAuthenticator` -- raw credential under any header name.
- :class:`CertificateAuthenticator` -- client certificate for mutual TLS.

Typical usage::

    connector.with_token_auth("secret")
    request.authenticate(QueryAuthenticator("api_key", "secret"))
"""

from hitch.auth.authenticates import AuthenticatesRequests
from hitch.auth.base import Authenticator
from hitch.auth.basic import BasicAuthenticator
from hitch.auth.certificate import CertificateAuthenticator
from hitch.auth.digest import DigestAuthenticator
from hitch.auth.header import HeaderAuthenticator
from hitch.auth.manager import AUTHENTICATOR_BUILDERS, build_authenticator
from hitch.auth.query import QueryAuthenticator
from hitch.auth.token import TokenAuthenticator

__all__ = [
    "AUTHENTICATOR_BUILDERS",
    "AuthenticatesRequests",
    "Authenticator",
    "BasicAuthenticator",
    "CertificateAuthenticator",
    "DigestAuthenticator",
    "HeaderAuthenticator",
    "QueryAuthenticator",
    "TokenAuthenticator",
    "build_authenticator",
]
