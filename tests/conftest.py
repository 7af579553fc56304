"""
Pytest configuration and shared fixtures for unattended upgrade tests.

This module provides reusable fixtures and test doubles used across
the test suite.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
import yaml

from unattended_upgrades.policy import MaintenanceWindow

T0 = datetime(2026, 10, 20, 2, 0, tzinfo=UTC)


class RecordingLogger:
    """Logger that keeps every message for later assertions."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, str, BaseException | None]] = []

    def step(self, step: int, total: int, message: str) -> None:
        self.records.append(("step", "STEP", message, None))

    def info(self, prefix: str, message: str) -> None:
        self.records.append(("info", prefix, message, None))

    def debug(self, prefix: str, message: str) -> None:
        self.records.append(("debug", prefix, message, None))

    def error(
        self, prefix: str, message: str, exc: BaseException | None = None
    ) -> None:
        self.records.append(("error", prefix, message, exc))

    def messages(self, level: str | None = None) -> list[str]:
        return [m for lvl, _, m, _ in self.records if level is None or lvl == level]


class FakeInstaller:
    """Installer double with scripted outcomes.

    Args:
        updates: Ids that have an update available.
        outcomes: Per-id result of update_addon: True, False, or an
            exception instance to raise. Missing ids succeed.
    """

    def __init__(
        self,
        updates: set[str],
        outcomes: dict[str, bool | Exception] | None = None,
    ) -> None:
        self.updates = updates
        self.outcomes = outcomes or {}
        self.checked: list[str] = []
        self.updated: list[str] = []

    def is_update_available(self, addon_id: str) -> bool:
        self.checked.append(addon_id)
        return addon_id in self.updates

    def update_addon(self, addon_id: str) -> bool:
        self.updated.append(addon_id)
        outcome = self.outcomes.get(addon_id, True)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeRegistry:
    """Add-on registry double that counts calls."""

    def __init__(self, addon_ids: list[str]) -> None:
        self.addon_ids = addon_ids
        self.calls = 0

    def list_installed_addon_ids(self) -> list[str]:
        self.calls += 1
        return list(self.addon_ids)


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a logger that records every message."""
    return RecordingLogger()


@pytest.fixture
def window() -> MaintenanceWindow:
    """Provide a one-hour window starting at T0."""
    return MaintenanceWindow(start=T0, end=T0 + timedelta(hours=1))


@pytest.fixture
def sample_config_data() -> dict[str, Any]:
    """
    Provide sample configuration data.

    Returns a complete configuration structure for testing.
    """
    return {
        "apiVersion": "unattended-upgrades/v1",
        "maintenance_window": {
            "start": "02:00",
            "end": "04:00",
            "timezone": "UTC",
        },
        "policy": {
            "allowed": [],
            "blocked": ["calendar"],
        },
        "host": {
            "name": "nextcloud",
            "occ": "/var/www/nextcloud/occ",
        },
    }


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("test.yaml", {"key": "value"})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


@pytest.fixture
def make_installer():
    """Factory fixture for FakeInstaller."""
    return FakeInstaller


@pytest.fixture
def make_registry():
    """Factory fixture for FakeRegistry."""
    return FakeRegistry


@pytest.fixture
def t0() -> datetime:
    """Provide the start instant of the sample window."""
    return T0
