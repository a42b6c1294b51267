"""Pydantic models shared across hitch modules.

The models fall into three groups:

* :class:`HTTPMethod` -- the verbs a :class:`~hitch.client.request.Request`
  may declare.
* :class:`TransportConfig` and :class:`RetryPolicy` -- settings consumed by
  the sender and the retry state machine.  Both normalise out-of-range
  values instead of rejecting them.
* :class:`AuthConfig` -- a declarative authenticator description, turned
  into a concrete strategy by :func:`~hitch.auth.manager.build_authenticator`.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from hitch.client.connector import Connector
    from hitch.client.request import Request


class HTTPMethod(str, enum.Enum):
    """HTTP methods a request can be sent with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


# --- Transport ---


class TransportConfig(BaseModel):
    """Default transport settings merged into every connector's config store.

    Loaded by :func:`~hitch.config.load_transport_config`, which layers
    environment variables over these defaults.
    """

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True, description="Follow 3xx redirects")

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be greater than zero")
        return value

    def to_config(self) -> dict[str, Any]:
        """Return the settings as config-store keys understood by the sender."""
        return {
            "timeout": self.timeout,
            "verify": self.verify_ssl,
            "follow_redirects": self.follow_redirects,
        }


# --- Retry ---


class RetryPolicy(BaseModel):
    """Resolved retry settings for a single logical send.

    ``tries`` counts physical attempts, so ``1`` means no retry.  Values
    of zero or below normalise to ``1`` and negative intervals normalise
    to ``0``.
    """

    tries: int = Field(default=1, description="Maximum number of attempts")
    interval_ms: int = Field(default=0, description="Delay between attempts in milliseconds")
    throw_on_max_tries: bool = Field(
        default=True,
        description="Raise the last exception when attempts run out instead of "
        "returning the last failed response",
    )

    @field_validator("tries", mode="before")
    @classmethod
    def _at_least_one_try(cls, value: Optional[int]) -> int:
        if value is None or value <= 0:
            return 1
        return value

    @field_validator("interval_ms", mode="before")
    @classmethod
    def _non_negative_interval(cls, value: Optional[int]) -> int:
        if value is None or value < 0:
            return 0
        return value

    @field_validator("throw_on_max_tries", mode="before")
    @classmethod
    def _default_throw(cls, value: Optional[bool]) -> bool:
        return True if value is None else value

    @property
    def interval_seconds(self) -> float:
        """The inter-attempt delay in seconds."""
        return self.interval_ms / 1000

    @classmethod
    def resolve(cls, request: Request, connector: Connector) -> RetryPolicy:
        """Build the policy for *request*, falling back to *connector* defaults.

        Each setting is taken from the request when it declares one, then
        from the connector, then from the model defaults.
        """

        def pick(name: str) -> Any:
            value = getattr(request, name, None)
            if value is None:
                value = getattr(connector, name, None)
            return value

        return cls(
            tries=pick("tries"),
            interval_ms=pick("retry_interval"),
            throw_on_max_tries=pick("throw_on_max_tries"),
        )


# --- Auth ---


AuthType = Literal["token", "basic", "digest", "query", "header", "certificate"]


class AuthConfig(BaseModel):
    """Declarative authenticator settings.

    Secrets are never stored inline; ``source`` (and ``password_source``)
    hold credential source descriptors such as ``env:API_TOKEN`` or
    ``file:~/.secrets/token`` that are resolved when the authenticator is
    built.

    Example::

        AuthConfig(type="query", parameter="api_key", source="env:API_KEY")
    """

    model_config = ConfigDict(extra="forbid")

    type: AuthType = Field(description="Authenticator type")
    source: Optional[str] = Field(
        default=None,
        description="Credential source for the token, key, or password: env:VAR or file:/path",
    )
    username: Optional[str] = Field(default=None, description="Username for basic/digest auth")
    prefix: str = Field(default="Bearer", description="Token prefix for token auth")
    parameter: Optional[str] = Field(default=None, description="Query parameter name")
    header_name: str = Field(default="Authorization", description="Header name for header auth")
    path: Optional[str] = Field(default=None, description="Client certificate path")
    password_source: Optional[str] = Field(
        default=None, description="Credential source for the certificate passphrase"
    )
    digest: str = Field(default="digest", description="Digest scheme marker")
