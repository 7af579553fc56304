# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging interface for unattended upgrades.

Library modules log through this interface instead of printing directly,
so the evaluator can be driven from the CLI, from a scheduler, or from
tests with a recording logger.

The logger supports four output levels:

- Step: Always printed (for progress indicators)
- Info: Only printed when verbose mode is enabled
- Debug: Only printed when debug mode is enabled (implies verbose)
- Error: Always printed to stderr, optionally with an attached exception

Example:
    Configure global logger:
        ```python
        from unattended_upgrades.logging import get_logger, set_global_logger

        logger = get_logger(verbose=True, debug=False)
        set_global_logger(logger)
        ```

    Use with dependency injection:

        def my_function(logger=None):
            if logger is None:
                logger = get_global_logger()
            logger.info("UPGRADE", "Processing...")

Note:
    The default logger is silent, so library functions won't print anything
    unless explicitly configured. The CLI configures the global logger when
    commands are executed.
"""

from __future__ import annotations

import sys
import traceback
from typing import Protocol


class Logger(Protocol):
    """Protocol for logger implementations."""

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator.

        Args:
            step: Current step number (1-based).
            total: Total number of steps.
            message: Step description.
        """
        ...

    def info(self, prefix: str, message: str) -> None:
        """Log an informational message.

        Args:
            prefix: Message prefix (e.g., "UPGRADE", "CONFIG").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Log a debug message.

        Args:
            prefix: Message prefix (e.g., "POLICY", "OCC").
            message: Log message.
        """
        ...

    def error(
        self, prefix: str, message: str, exc: BaseException | None = None
    ) -> None:
        """Log an error message.

        Args:
            prefix: Message prefix (e.g., "UPGRADE").
            message: Log message.
            exc: Exception that caused the error, if any.
        """
        ...


class DefaultLogger:
    """Default logger implementation that prints to stdout and stderr.

    This logger respects verbose and debug flags and formats output
    consistently with the CLI output format.
    """

    def __init__(self, verbose: bool = False, debug: bool = False) -> None:
        """Initialize logger with verbosity settings.

        Args:
            verbose: If True, print info messages.
            debug: If True, print debug messages and tracebacks (implies verbose).
        """
        self._verbose = verbose or debug
        self._debug = debug

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator."""
        print(f"[{step}/{total}] {message}")

    def info(self, prefix: str, message: str) -> None:
        """Print an info message (only when verbose mode is active)."""
        if self._verbose:
            print(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug message (only when debug mode is active)."""
        if self._debug:
            print(f"[{prefix}] {message}")

    def error(
        self, prefix: str, message: str, exc: BaseException | None = None
    ) -> None:
        """Print an error message to stderr, with traceback in debug mode."""
        print(f"[{prefix}] ERROR: {message}", file=sys.stderr)
        if exc is not None and self._debug:
            traceback.print_exception(type(exc), exc, exc.__traceback__)


class SilentLogger:
    """Logger that suppresses all output.

    Useful for programmatic usage when output is not desired.
    """

    def step(self, step: int, total: int, message: str) -> None:
        """Suppress step output."""
        pass

    def info(self, prefix: str, message: str) -> None:
        """Suppress info output."""
        pass

    def debug(self, prefix: str, message: str) -> None:
        """Suppress debug output."""
        pass

    def error(
        self, prefix: str, message: str, exc: BaseException | None = None
    ) -> None:
        """Suppress error output."""
        pass


# Global logger instance (defaults to silent)
_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False) -> Logger:
    """Get a logger instance with specified verbosity.

    Args:
        verbose: If True, logger will print info messages.
        debug: If True, logger will print debug messages (implies verbose).

    Returns:
        A logger instance configured with the specified verbosity.
    """
    return DefaultLogger(verbose=verbose, debug=debug)


def get_global_logger() -> Logger:
    """Get the global logger instance.

    Returns:
        The current global logger instance.

    Note:
        The default global logger is silent. Use set_global_logger() to
        configure it, or pass a logger instance directly to functions.
    """
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Set the global logger instance.

    Args:
        logger: Logger instance to use as the global logger.

    Note:
        This affects all library functions that are called without an
        explicit logger. For better isolation, pass logger instances
        directly instead of using the global logger.
    """
    global _global_logger
    _global_logger = logger
