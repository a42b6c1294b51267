"""Build authenticators from declarative :class:`~hitch.models.AuthConfig`.

The set of authenticator types is closed: :data:`AUTHENTICATOR_BUILDERS`
maps every ``AuthConfig.type`` to a builder, and the lookup happens once,
when the connector or request is configured -- not on every send.

Example::

    from hitch.auth import build_authenticator
    from hitch.models import AuthConfig

    connector.authenticate(
        build_authenticator(AuthConfig(type="token", source="env:API_TOKEN"))
    )
"""

from __future__ import annotations

from typing import Callable, Optional

from hitch.auth.base import Authenticator
from hitch.auth.basic import BasicAuthenticator
from hitch.auth.certificate import CertificateAuthenticator
from hitch.auth.digest import DigestAuthenticator
from hitch.auth.header import HeaderAuthenticator
from hitch.auth.query import QueryAuthenticator
from hitch.auth.token import TokenAuthenticator
from hitch.config import resolve_credential
from hitch.exceptions import ConfigurationError
from hitch.models import AuthConfig


def _require(value: Optional[str], field: str, auth_type: str) -> str:
    if not value:
        raise ConfigurationError(f"{auth_type} auth requires '{field}'")
    return value


def _secret(auth_config: AuthConfig) -> str:
    return resolve_credential(_require(auth_config.source, "source", auth_config.type))


def _build_token(auth_config: AuthConfig) -> Authenticator:
    return TokenAuthenticator(_secret(auth_config), prefix=auth_config.prefix)


def _build_basic(auth_config: AuthConfig) -> Authenticator:
    username = _require(auth_config.username, "username", "basic")
    return BasicAuthenticator(username, _secret(auth_config))


def _build_digest(auth_config: AuthConfig) -> Authenticator:
    username = _require(auth_config.username, "username", "digest")
    return DigestAuthenticator(username, _secret(auth_config), digest=auth_config.digest)


def _build_query(auth_config: AuthConfig) -> Authenticator:
    parameter = _require(auth_config.parameter, "parameter", "query")
    return QueryAuthenticator(parameter, _secret(auth_config))


def _build_header(auth_config: AuthConfig) -> Authenticator:
    return HeaderAuthenticator(_secret(auth_config), header_name=auth_config.header_name)


def _build_certificate(auth_config: AuthConfig) -> Authenticator:
    path = _require(auth_config.path, "path", "certificate")
    password = None
    if auth_config.password_source:
        password = resolve_credential(auth_config.password_source)
    return CertificateAuthenticator(path, password)


AUTHENTICATOR_BUILDERS: dict[str, Callable[[AuthConfig], Authenticator]] = {
    "token": _build_token,
    "basic": _build_basic,
    "digest": _build_digest,
    "query": _build_query,
    "header": _build_header,
    "certificate": _build_certificate,
}


def build_authenticator(auth_config: AuthConfig) -> Authenticator:
    """Create the authenticator described by *auth_config*.

    Credential sources are resolved immediately, so a missing environment
    variable or file surfaces at configuration time rather than mid-send.

    Args:
        auth_config: The declarative authenticator settings.

    Returns:
        A ready-to-apply :class:`~hitch.auth.base.Authenticator`.

    Raises:
        ConfigurationError: If the type is unknown, a required field is
            missing, or a credential source cannot be resolved.
    """
    builder = AUTHENTICATOR_BUILDERS.get(auth_config.type)
    if builder is None:
        available = ", ".join(sorted(AUTHENTICATOR_BUILDERS))
        raise ConfigurationError(
            f"Unknown authenticator type '{auth_config.type}'. Available types: {available}"
        )
    return builder(auth_config)
