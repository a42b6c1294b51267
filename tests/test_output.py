"""Tests for the stderr diagnostics system.

Covers:
- NO_COLOR / TERM=dumb colour disabling
- stderr-only discipline
- Quiet mode suppression rules
- Verbose mode debug output
- Global instance management
- Convenience functions
"""

from __future__ import annotations

import pytest

from hitch import output as output_module
from hitch.output import (
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


# ------------------------------------------------------------------ #
# Colour disabling
# ------------------------------------------------------------------ #


class TestColorDisabling:
    def test_no_color_env_disables_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        assert _should_disable_color() is True

    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stderr discipline
# ------------------------------------------------------------------ #


class TestStderrDiscipline:
    @pytest.mark.parametrize("method", ["info", "warning", "error"])
    def test_messages_go_to_stderr(self, capfd, method):
        getattr(OutputManager(no_color=True), method)("hello")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "hello" in captured.err

    def test_warning_prefix(self, capfd):
        OutputManager(no_color=True).warning("careful")
        assert capfd.readouterr().err == "Warning: careful\n"

    def test_error_prefix(self, capfd):
        OutputManager(no_color=True).error("broken")
        assert capfd.readouterr().err == "Error: broken\n"

    def test_rich_markup_is_escaped(self, capfd, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm")
        OutputManager().info("[bold]not markup[/bold]")
        assert "[bold]not markup[/bold]" in capfd.readouterr().err


# ------------------------------------------------------------------ #
# Quiet and verbose
# ------------------------------------------------------------------ #


class TestQuietMode:
    def test_quiet_suppresses_info(self, capfd):
        OutputManager(no_color=True, quiet=True).info("hidden")
        assert capfd.readouterr().err == ""

    def test_quiet_does_not_suppress_warning(self, capfd):
        OutputManager(no_color=True, quiet=True).warning("shown")
        assert "shown" in capfd.readouterr().err

    def test_quiet_does_not_suppress_error(self, capfd):
        OutputManager(no_color=True, quiet=True).error("shown")
        assert "shown" in capfd.readouterr().err

    def test_quiet_property(self):
        assert OutputManager(quiet=True).is_quiet is True


class TestVerboseMode:
    def test_debug_hidden_by_default(self, capfd):
        OutputManager(no_color=True).debug("secret")
        assert capfd.readouterr().err == ""

    def test_debug_shown_with_verbose(self, capfd):
        OutputManager(no_color=True, verbose=True).debug("visible")
        assert "visible" in capfd.readouterr().err

    def test_debug_prefix_in_no_color(self, capfd):
        OutputManager(no_color=True, verbose=True).debug("msg")
        assert capfd.readouterr().err == "[debug] msg\n"

    def test_verbose_property(self):
        assert OutputManager(verbose=True).is_verbose is True
        assert OutputManager().is_verbose is False


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        output = get_output()
        assert isinstance(output, OutputManager)
        assert get_output() is output

    def test_set_output(self):
        custom = OutputManager(quiet=True)
        set_output(custom)
        assert get_output() is custom

    def test_reset_output(self):
        first = get_output()
        reset_output()
        assert get_output() is not first


class TestConvenienceFunctions:
    def test_delegates_to_global(self, capfd):
        set_output(OutputManager(no_color=True, verbose=True))

        output_module.info("i")
        output_module.warning("w")
        output_module.error("e")
        output_module.debug("d")

        assert capfd.readouterr().err == "i\nWarning: w\nError: e\n[debug] d\n"
