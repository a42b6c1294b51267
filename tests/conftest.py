"""Shared test fixtures for hitch.

Provides fixtures that isolate every test from the environment and from
global output state.  They are discovered by pytest automatically.
"""

from __future__ import annotations

import pytest

from hitch.config import ENV_FOLLOW_REDIRECTS, ENV_TIMEOUT, ENV_VERIFY_SSL
from hitch.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches a Rich console bound to ``sys.stderr`` at
    creation time.  When pytest swaps the stream for capture, a cached
    console would keep writing to the old one.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _clean_transport_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear HITCH_* variables so connectors start from model defaults."""
    for var in (ENV_TIMEOUT, ENV_VERIFY_SSL, ENV_FOLLOW_REDIRECTS):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless output manager for the test."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a verbose, colourless output manager so debug lines are captured."""
    output = OutputManager(no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()
