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

"""Command-line interface for unattended upgrades.

This module provides the `unattended-upgrades` entry point. It is meant to
be invoked by an external scheduler (cron, systemd timer); it runs a single
batch and exits, it never waits for the maintenance window to open.

Commands:

    run: Upgrade permitted add-ons if the maintenance window is open
    validate: Validate a configuration file (no occ, no network)

Example:
    Preview what would be upgraded:
        ```bash
        $ unattended-upgrades run servers/cloud01.yaml --dry-run
        ```

    Upgrade, with per-add-on output:
        ```bash
        $ unattended-upgrades run servers/cloud01.yaml --verbose
        ```

    Rehearse a run as if it were 02:30 UTC:
        ```bash
        $ unattended-upgrades run servers/cloud01.yaml --dry-run \\
            --at 2026-10-20T02:30:00+00:00
        ```

Exit Codes:

- 0: Success (including a closed maintenance window)
- 1: Error (configuration, network, or host failure)

Note:
    A failed upgrade of a single add-on does not change the exit code;
    it is reported in the log output and the batch continues.
"""

from __future__ import annotations

import argparse
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import sys
import traceback

from unattended_upgrades.config import UpgradeConfig
from unattended_upgrades.exceptions import UnattendedUpgradesError
from unattended_upgrades.host import Clock, FixedClock, SystemClock, get_host
from unattended_upgrades.logging import Logger, get_logger, set_global_logger
from unattended_upgrades.upgrader import Upgrader
from unattended_upgrades.validation import validate_config


def _package_version() -> str:
    try:
        return version("unattended-upgrades")
    except PackageNotFoundError:
        from unattended_upgrades import __version__

        return __version__


def _parse_instant(value: str) -> datetime:
    """argparse type for --at."""
    try:
        return datetime.fromisoformat(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(
            f"invalid ISO-8601 datetime: {value!r}"
        ) from err


def build_upgrader(
    config_path: Path,
    *,
    host: str | None = None,
    at: datetime | None = None,
    logger: Logger | None = None,
) -> Upgrader:
    """Load configuration and wire an Upgrader for one server.

    Args:
        config_path: Path to the server configuration file.
        host: Host name override. Default is None (from configuration).
        at: Pretend the current time is this instant. Default is None
            (system clock).
        logger: Logger for the run. Defaults to the global logger.

    Returns:
        An Upgrader ready to run.

    Raises:
        ConfigError: If the configuration cannot be loaded or the host is
            unknown or misconfigured.
    """
    config = UpgradeConfig.load(config_path, host=host, logger=logger)
    adapter = get_host(config.host_name, config.host_settings, logger=logger)
    clock: Clock = FixedClock(at) if at is not None else SystemClock()
    return Upgrader(adapter, adapter, config, clock, logger=logger)


def cmd_run(args: argparse.Namespace) -> int:
    """Handler for 'unattended-upgrades run' command.

    Loads the configuration, builds the host adapter and runs one batch.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    config_path = Path(args.config).resolve()
    if not config_path.exists():
        print(f"Error: Configuration file not found: {config_path}")
        return 1

    mode = "dry-run" if args.dry_run else "upgrade"
    print(f"Unattended upgrade ({mode}) for: {config_path}")
    print()

    try:
        logger.step(1, 2, "Loading configuration...")
        upgrader = build_upgrader(
            config_path, host=args.host, at=args.at, logger=logger
        )
        logger.step(2, 2, "Evaluating add-ons...")
        report = upgrader.run(dry_run=args.dry_run)
    except UnattendedUpgradesError as err:
        print(f"Error: {err}")
        if args.verbose or args.debug:
            traceback.print_exc()
        return 1

    print()
    print("=" * 70)
    print("UPGRADE RESULTS")
    print("=" * 70)
    print(f"Checked At:      {report.checked_at.isoformat()}")
    print(f"Window:          {report.window}")
    print(f"Window Open:     {'yes' if report.window_open else 'no'}")
    print(f"Mode:            {mode}")
    label = "Would Upgrade:" if report.dry_run else "Upgraded:"
    print(f"{label:<17}{report.upgraded}")
    print("=" * 70)
    print()

    if not report.window_open:
        print("[SKIPPED] Maintenance window is not open.")
    elif report.dry_run:
        print(f"[DRY-RUN] {report.upgraded} add-on(s) would be upgraded.")
    else:
        print(f"[SUCCESS] {report.upgraded} add-on(s) upgraded.")

    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'unattended-upgrades validate' command.

    Validates a configuration file without running occ or making network
    calls.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for valid configuration, 1 for invalid).
    """
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    config_path = Path(args.config).resolve()

    print(f"Validating configuration: {config_path}")
    print()

    result = validate_config(config_path, logger=logger)

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Config:      {result.config_path}")
    print(f"Status:      {result.status.upper()}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Configuration is valid!")
        return 0

    print()
    print(
        f"[FAILED] Configuration validation failed with {len(result.errors)} error(s)."
    )
    return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="unattended-upgrades",
        description="Upgrade host add-ons inside a maintenance window",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"unattended-upgrades {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'run' command
    parser_run = subparsers.add_parser(
        "run",
        help="Upgrade permitted add-ons if the maintenance window is open",
        description="Check the maintenance window once and upgrade every permitted add-on with an available update.",
    )
    parser_run.add_argument(
        "config",
        help="Path to the configuration YAML file",
    )
    parser_run.add_argument(
        "--dry-run",
        action="store_true",
        help="Only count the add-ons that would be upgraded",
    )
    parser_run.add_argument(
        "--host",
        default=None,
        help="Override host.name from the configuration",
    )
    parser_run.add_argument(
        "--at",
        type=_parse_instant,
        default=None,
        help="Pretend the current time is this ISO-8601 instant (naive = UTC)",
    )
    parser_run.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show per-add-on outcomes",
    )
    parser_run.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show skipped add-ons, occ commands and tracebacks (implies --verbose)",
    )
    parser_run.set_defaults(func=cmd_run)

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate configuration syntax and settings (no occ, no network)",
        description="Check a configuration file for errors without touching the host.",
    )
    parser_validate.add_argument(
        "config",
        help="Path to the configuration YAML file",
    )
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress and details",
    )
    parser_validate.set_defaults(func=cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the unattended-upgrades CLI.

    This function is registered as the 'unattended-upgrades' console script
    in pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
