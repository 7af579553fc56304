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

"""Upgrade policy and maintenance windows.

Modules:

window : module
    Maintenance window value type and window resolution.
upgrades : module
    Allow/block policy deciding which add-ons may be upgraded.

Public API:

MaintenanceWindow : class
    Closed interval of instants during which upgrades may run.
UpgradePolicy : class
    Allow-list and block-list of add-on ids.
PolicyDecision : class
    Result of a policy check, with the skip reason.

Example:
    from datetime import datetime, UTC
    from unattended_upgrades.policy import MaintenanceWindow, UpgradePolicy

    window = MaintenanceWindow(
        start=datetime(2026, 10, 20, 2, 0, tzinfo=UTC),
        end=datetime(2026, 10, 20, 4, 0, tzinfo=UTC),
    )
    policy = UpgradePolicy.from_lists(blocked=["calendar"])

"""

from .upgrades import PolicyDecision, UpgradePolicy
from .window import MaintenanceWindow, absolute_window, daily_window

__all__ = [
    "MaintenanceWindow",
    "PolicyDecision",
    "UpgradePolicy",
    "absolute_window",
    "daily_window",
]
