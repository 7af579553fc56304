"""
Tests for unattended_upgrades.logging module.

Tests the logger implementations including:
- Verbosity tiers (info, debug)
- Error output with tracebacks in debug mode
- Global logger accessors
"""

from __future__ import annotations

from unattended_upgrades.logging import (
    DefaultLogger,
    SilentLogger,
    get_global_logger,
    set_global_logger,
)


class TestDefaultLogger:
    """Tests for DefaultLogger."""

    def test_quiet_by_default(self, capsys):
        """Test that info and debug are hidden without flags."""
        logger = DefaultLogger()

        logger.info("UPGRADE", "hidden")
        logger.debug("UPGRADE", "hidden")

        assert capsys.readouterr().out == ""

    def test_verbose_shows_info_only(self, capsys):
        """Test that verbose prints info but not debug."""
        logger = DefaultLogger(verbose=True)

        logger.info("UPGRADE", "Unattended upgrade started")
        logger.debug("POLICY", "skipped")

        assert capsys.readouterr().out == "[UPGRADE] Unattended upgrade started\n"

    def test_debug_implies_verbose(self, capsys):
        """Test that debug prints both tiers."""
        logger = DefaultLogger(debug=True)

        logger.info("UPGRADE", "a")
        logger.debug("POLICY", "b")

        assert capsys.readouterr().out == "[UPGRADE] a\n[POLICY] b\n"

    def test_error_goes_to_stderr(self, capsys):
        """Test that errors always print, without traceback unless debug."""
        logger = DefaultLogger()

        logger.error("UPGRADE", "Unattended upgrade of x failed", exc=ValueError("no"))

        err = capsys.readouterr().err
        assert err == "[UPGRADE] ERROR: Unattended upgrade of x failed\n"

    def test_error_traceback_in_debug(self, capsys):
        """Test that debug mode prints the exception traceback."""
        logger = DefaultLogger(debug=True)
        try:
            raise RuntimeError("disk full")
        except RuntimeError as err:
            logger.error("UPGRADE", "Unattended upgrade of x failed", exc=err)

        err = capsys.readouterr().err
        assert "Traceback" in err
        assert "RuntimeError: disk full" in err


class TestGlobalLogger:
    """Tests for the global logger accessors."""

    def test_set_and_get(self):
        """Test replacing the global logger."""
        previous = get_global_logger()
        logger = SilentLogger()
        try:
            set_global_logger(logger)
            assert get_global_logger() is logger
        finally:
            set_global_logger(previous)
