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

"""Maintenance window for unattended upgrades.

A maintenance window is the interval during which unattended upgrades are
permitted to run. The gate is a single point-in-time comparison; nothing in
this module waits for a window to open.

Both boundaries are inclusive: a run at exactly `start` or exactly `end`
is inside the window.

Windows can be written two ways in the configuration:

- Absolute: ISO-8601 datetimes ("2026-10-20T02:00:00+02:00")
- Daily: times of day ("02:00"), resolved against the date of `now`

Example:
    Resolve a daily window that crosses midnight:
        ```python
        from datetime import datetime, UTC
        from unattended_upgrades.policy.window import daily_window

        now = datetime(2026, 10, 20, 1, 30, tzinfo=UTC)
        window = daily_window("23:00", "03:00", now, tz="UTC")
        window.contains(now)  # True (window opened yesterday at 23:00)
        ```
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from unattended_upgrades.exceptions import ConfigError

__all__ = [
    "MaintenanceWindow",
    "absolute_window",
    "daily_window",
    "parse_time_of_day",
    "resolve_timezone",
]


@dataclass(frozen=True)
class MaintenanceWindow:
    """Closed interval [start, end] of absolute, timezone-aware instants.

    Attributes:
        start: First instant at which upgrades may run.
        end: Last instant at which upgrades may run.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ConfigError("Maintenance window boundaries must be timezone-aware")
        if self.start > self.end:
            raise ConfigError(
                f"Maintenance window ends before it starts: "
                f"{self.start.isoformat()} > {self.end.isoformat()}"
            )

    def contains(self, now: datetime) -> bool:
        """Return True if 'now' falls inside the window (boundaries inclusive)."""
        return self.start <= now <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()}"


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Look up an IANA timezone name, defaulting to UTC.

    Raises:
        ConfigError: If the timezone name is unknown.
    """
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError) as err:
        raise ConfigError(f"Unknown timezone: {name!r}") from err


def parse_time_of_day(value: str | int) -> time:
    """Parse an "HH:MM" (or "HH:MM:SS") time of day.

    YAML 1.1 reads unquoted values such as 22:00 as base-60 integers
    (22 * 60 = 1320); those are accepted and read back as HH:MM.

    Raises:
        ConfigError: If the value is not a valid time of day.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        hours, minutes = divmod(value, 60)
        if not 0 <= hours < 24:
            raise ConfigError(f"Invalid time of day {value!r}. Expected 'HH:MM'")
        return time(hours, minutes)
    try:
        return time.fromisoformat(value.strip())
    except (AttributeError, ValueError) as err:
        raise ConfigError(
            f"Invalid time of day {value!r}. Expected 'HH:MM'"
        ) from err


def _parse_instant(value: str | datetime, tz: ZoneInfo) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError as err:
            raise ConfigError(
                f"Invalid datetime {value!r}. Expected ISO-8601"
            ) from err
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def absolute_window(
    start: str | datetime, end: str | datetime, tz: str | None = None
) -> MaintenanceWindow:
    """Build a window from two absolute datetimes.

    Naive datetimes are interpreted in 'tz' (default UTC).
    """
    zone = resolve_timezone(tz)
    return MaintenanceWindow(
        start=_parse_instant(start, zone),
        end=_parse_instant(end, zone),
    )


def daily_window(
    start: str, end: str, now: datetime, tz: str | None = None
) -> MaintenanceWindow:
    """Build the daily window relevant to 'now'.

    The window is anchored on the local date of 'now' in 'tz'. When end is
    not after start the window crosses midnight: it started yesterday if
    'now' is still before today's end, otherwise it ends tomorrow.
    """
    zone = resolve_timezone(tz)
    start_time = parse_time_of_day(start)
    end_time = parse_time_of_day(end)

    local_now = now.astimezone(zone)
    today = local_now.date()

    window_start = datetime.combine(today, start_time, tzinfo=zone)
    window_end = datetime.combine(today, end_time, tzinfo=zone)

    if end_time <= start_time:
        if local_now.time() <= end_time:
            window_start -= timedelta(days=1)
        else:
            window_end += timedelta(days=1)

    return MaintenanceWindow(start=window_start, end=window_end)
