"""Configuration resolution: transport defaults and credential sources.

This module handles the two pieces of configuration hitch reads from the
environment:

* **Transport defaults** -- :func:`load_transport_config` builds the
  :class:`~hitch.models.TransportConfig` every
  :class:`~hitch.client.connector.Connector` starts from.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  from environment variables or files, so authenticator settings never
  hold secrets inline.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from hitch.exceptions import ConfigurationError
from hitch.models import TransportConfig

ENV_TIMEOUT = "HITCH_TIMEOUT"
ENV_VERIFY_SSL = "HITCH_VERIFY_SSL"
ENV_FOLLOW_REDIRECTS = "HITCH_FOLLOW_REDIRECTS"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(var_name: str) -> Optional[bool]:
    """Read a boolean environment variable, returning ``None`` when unset."""
    raw = os.environ.get(var_name)
    if raw is None or raw == "":
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {var_name}: {raw!r}")


def load_transport_config(
    timeout: Optional[float] = None,
    verify_ssl: Optional[bool] = None,
    follow_redirects: Optional[bool] = None,
) -> TransportConfig:
    """Resolve transport settings with full precedence chain.

    Precedence (high to low):
        1. Explicit keyword arguments
        2. Environment variables (``HITCH_TIMEOUT``, ``HITCH_VERIFY_SSL``,
           ``HITCH_FOLLOW_REDIRECTS``)
        3. :class:`~hitch.models.TransportConfig` defaults

    Returns:
        The effective :class:`~hitch.models.TransportConfig`.

    Raises:
        ConfigurationError: If an environment variable holds an invalid
            value.
    """
    values: dict[str, Any] = {}

    # 2. Environment variables
    env_timeout = os.environ.get(ENV_TIMEOUT)
    if env_timeout:
        values["timeout"] = env_timeout
    env_verify = _env_bool(ENV_VERIFY_SSL)
    if env_verify is not None:
        values["verify_ssl"] = env_verify
    env_redirects = _env_bool(ENV_FOLLOW_REDIRECTS)
    if env_redirects is not None:
        values["follow_redirects"] = env_redirects

    # 1. Explicit overrides
    if timeout is not None:
        values["timeout"] = timeout
    if verify_ssl is not None:
        values["verify_ssl"] = verify_ssl
    if follow_redirects is not None:
        values["follow_redirects"] = follow_redirects

    try:
        return TransportConfig(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid transport configuration: {exc}") from exc


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace

    Args:
        source: The source descriptor string.

    Returns:
        The resolved credential string.

    Raises:
        ConfigurationError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigurationError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        file_path = source[5:]
        path = Path(file_path).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigurationError(f"Cannot read credential file {path}: {exc}") from exc

    raise ConfigurationError(f"Unknown credential source format: {source}")
