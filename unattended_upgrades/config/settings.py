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

"""Typed access to a merged configuration.

UpgradeConfig answers the three questions the upgrader asks of its
configuration store: when is the maintenance window, which add-ons are
allowed, and which are blocked.

Configuration:
    ```yaml
    maintenance_window:
      start: "02:00"            # "HH:MM" (daily) or ISO-8601 datetime
      end: "04:30"
      timezone: Europe/Vienna   # Optional, default UTC
    policy:
      allowed: []               # Empty means no restriction
      blocked: [calendar]
    ```
"""

from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import Any

from unattended_upgrades.exceptions import ConfigError
from unattended_upgrades.logging import Logger
from unattended_upgrades.policy.upgrades import UpgradePolicy
from unattended_upgrades.policy.window import (
    MaintenanceWindow,
    absolute_window,
    daily_window,
)

from .loader import load_effective_config


def _is_time_of_day(value: Any) -> bool:
    """Return True for "HH:MM"-style values (and YAML base-60 integers)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, time)):
        return True
    if isinstance(value, str):
        try:
            time.fromisoformat(value.strip())
        except ValueError:
            return False
        return True
    return False


def _id_list(value: Any, field: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{field} must be a list of add-on ids (strings)")
    return value


class UpgradeConfig:
    """Read-only view over a merged configuration mapping.

    Attributes:
        data: The merged configuration dict.
    """

    def __init__(self, data: dict[str, Any]) -> None:
        self.data = data

    @classmethod
    def load(
        cls,
        config_path: Path,
        *,
        host: str | None = None,
        logger: Logger | None = None,
    ) -> UpgradeConfig:
        """Load, merge and wrap the configuration for one server."""
        return cls(load_effective_config(config_path, host=host, logger=logger))

    def _section(self, name: str, required: bool = False) -> dict[str, Any]:
        section = self.data.get(name)
        if section is None:
            if required:
                raise ConfigError(f"Missing required section: {name}")
            return {}
        if not isinstance(section, dict):
            raise ConfigError(f"Section '{name}' must be a mapping")
        return section

    def get_maintenance_window(self, now: datetime) -> MaintenanceWindow:
        """Return the maintenance window relevant to 'now'.

        Daily ("HH:MM") windows are resolved against the local date of
        'now'; absolute windows are returned as configured.

        Raises:
            ConfigError: If the section is missing or malformed.
        """
        section = self._section("maintenance_window", required=True)
        start = section.get("start")
        end = section.get("end")
        tz = section.get("timezone")
        if start is None or end is None:
            raise ConfigError("maintenance_window requires both 'start' and 'end'")

        if _is_time_of_day(start) and _is_time_of_day(end):
            if isinstance(start, time):
                start = start.isoformat()
            if isinstance(end, time):
                end = end.isoformat()
            return daily_window(start, end, now, tz=tz)

        # YAML turns unquoted dates into date objects
        if isinstance(start, date) and not isinstance(start, datetime):
            start = datetime.combine(start, time.min)
        if isinstance(end, date) and not isinstance(end, datetime):
            end = datetime.combine(end, time.max)
        return absolute_window(start, end, tz=tz)

    def get_allowed_addon_ids(self) -> frozenset[str]:
        return frozenset(
            _id_list(self._section("policy").get("allowed"), "policy.allowed")
        )

    def get_blocked_addon_ids(self) -> frozenset[str]:
        return frozenset(
            _id_list(self._section("policy").get("blocked"), "policy.blocked")
        )

    def get_policy(self) -> UpgradePolicy:
        return UpgradePolicy(
            allowed=self.get_allowed_addon_ids(),
            blocked=self.get_blocked_addon_ids(),
        )

    @property
    def host_settings(self) -> dict[str, Any]:
        return self._section("host")

    @property
    def host_name(self) -> str:
        """Configured host name (defaults to "nextcloud")."""
        name = self.host_settings.get("name", "nextcloud")
        if not isinstance(name, str) or not name:
            raise ConfigError("host.name must be a non-empty string")
        return name
