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

"""Public API return types for unattended upgrades.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Note:
    Only public API return types belong in this module. Domain types
    (like MaintenanceWindow and UpgradePolicy) stay with their logic in
    the policy package.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from unattended_upgrades.policy.window import MaintenanceWindow


@dataclass(frozen=True)
class UpgradeReport:
    """Result of one unattended upgrade run.

    Attributes:
        upgraded: Number of add-ons upgraded (or eligible, under dry-run).
        dry_run: Whether the run was a dry-run.
        window_open: Whether the maintenance window was open.
        window: The maintenance window that was checked.
        checked_at: The instant the window was checked against.
    """

    upgraded: int
    dry_run: bool
    window_open: bool
    window: MaintenanceWindow
    checked_at: datetime


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a configuration file.

    Attributes:
        status: Validation status ("valid" or "invalid").
        errors: List of error messages (empty if valid).
        warnings: List of warning messages.
        config_path: String path to the validated configuration file.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    config_path: str
