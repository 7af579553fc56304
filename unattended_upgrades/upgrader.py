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

"""Maintenance-window-gated batch upgrade of add-ons.

This module holds the upgrade policy evaluator: given a maintenance window,
an allow/block policy, the current time and the installed add-ons, it
upgrades every permitted add-on that has an update available and returns
how many were upgraded.

Evaluation Steps:

1. Window gate, once for the whole batch: outside the window nothing else
   happens and the count is 0. Both boundaries are inclusive.
2. For each installed add-on, in the order the registry returns them:
    - no update available: skipped silently (no log line, not counted)
    - not in a non-empty allow-list: skipped, logged at debug
    - in the block-list: skipped, logged at debug (blocked wins over allowed)
    - dry-run: counted, no update is applied
    - otherwise the update is applied; success is counted, a False return
      or a raised exception is logged as an error and not counted
3. The count is returned.

A failed upgrade of one add-on never aborts the batch and never raises out
of evaluate(). Failures of the window, policy, registry or "update
available?" collaborators are not caught and propagate to the caller.

Dry-run computes the same count while guaranteeing no mutating call is made.
Start and finish messages are only logged for real runs.

Example:
    Wiring collaborators by hand:
        ```python
        from pathlib import Path
        from unattended_upgrades.config import UpgradeConfig
        from unattended_upgrades.host import SystemClock, get_host
        from unattended_upgrades.upgrader import Upgrader

        config = UpgradeConfig.load(Path("servers/cloud01.yaml"))
        host = get_host(config.host_name, config.host_settings)
        upgrader = Upgrader(host, host, config, SystemClock())

        print(upgrader.upgrade(dry_run=True))  # would-upgrade count
        ```
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime

from unattended_upgrades.config.settings import UpgradeConfig
from unattended_upgrades.host.base import AddonRegistry, Clock, Installer
from unattended_upgrades.logging import Logger, get_global_logger
from unattended_upgrades.policy.upgrades import UpgradePolicy
from unattended_upgrades.policy.window import MaintenanceWindow
from unattended_upgrades.results import UpgradeReport

__all__ = ["Upgrader", "evaluate"]


def evaluate(
    window: MaintenanceWindow,
    policy: UpgradePolicy,
    now: datetime,
    installed_ids: Iterable[str],
    installer: Installer,
    *,
    dry_run: bool = False,
    logger: Logger | None = None,
) -> int:
    """Upgrade every permitted add-on with an available update.

    Args:
        window: Maintenance window the run must fall into.
        policy: Allow/block policy.
        now: The current time.
        installed_ids: Installed add-on ids. Not iterated when the window
            is closed.
        installer: Checks for and applies updates.
        dry_run: If True, count eligible add-ons without applying updates.
            Default is False.
        logger: Logger for per-item outcomes. Defaults to the global logger.

    Returns:
        Number of add-ons upgraded, or that would be upgraded under dry-run.
    """
    if logger is None:
        logger = get_global_logger()

    if not dry_run:
        logger.info("UPGRADE", "Unattended upgrade started")

    if not window.contains(now):
        logger.debug(
            "UPGRADE",
            "Unattended upgrade aborted because the maintenance window is not open "
            f"({window}, now {now.isoformat()})",
        )
        return 0

    upgraded = 0
    for addon_id in installed_ids:
        if not installer.is_update_available(addon_id):
            continue

        decision = policy.decide(addon_id)
        if not decision.permitted:
            logger.debug(
                "POLICY",
                f"Ignoring unattended upgrade for {addon_id} because the add-on "
                f"is {decision.reason}",
            )
            continue

        if dry_run:
            upgraded += 1
            continue

        try:
            succeeded = installer.update_addon(addon_id)
        except Exception as err:
            logger.error(
                "UPGRADE", f"Unattended upgrade of {addon_id} failed: {err}", exc=err
            )
            continue

        if succeeded:
            logger.info("UPGRADE", f"Unattended upgrade of {addon_id} was successful")
            upgraded += 1
        else:
            logger.error("UPGRADE", f"Unattended upgrade of {addon_id} failed")

    if not dry_run:
        logger.info("UPGRADE", f"Unattended upgrade finished ({upgraded} upgraded)")

    return upgraded


class Upgrader:
    """Runs evaluate() with host-injected collaborators.

    Attributes:
        installer: Checks for and applies updates.
        registry: Lists installed add-ons.
        config: Supplies the maintenance window and the policy.
        clock: Supplies the current time.
    """

    def __init__(
        self,
        installer: Installer,
        registry: AddonRegistry,
        config: UpgradeConfig,
        clock: Clock,
        logger: Logger | None = None,
    ) -> None:
        self.installer = installer
        self.registry = registry
        self.config = config
        self.clock = clock
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger if self._logger is not None else get_global_logger()

    def _installed_ids(self) -> Iterator[str]:
        # Lazy so the registry is only consulted once the window gate passed
        yield from self.registry.list_installed_addon_ids()

    def _evaluate_at(
        self, now: datetime, window: MaintenanceWindow, dry_run: bool
    ) -> int:
        return evaluate(
            window,
            self.config.get_policy(),
            now,
            self._installed_ids(),
            self.installer,
            dry_run=dry_run,
            logger=self.logger,
        )

    def upgrade(self, dry_run: bool = False) -> int:
        """Run one unattended upgrade batch.

        Args:
            dry_run: If True, only count the add-ons that would be upgraded.

        Returns:
            Number of add-ons upgraded (or that would be upgraded).
        """
        now = self.clock.now()
        window = self.config.get_maintenance_window(now)
        return self._evaluate_at(now, window, dry_run)

    def run(self, dry_run: bool = False) -> UpgradeReport:
        """Run one batch and report the outcome with its context."""
        now = self.clock.now()
        window = self.config.get_maintenance_window(now)
        upgraded = self._evaluate_at(now, window, dry_run)
        return UpgradeReport(
            upgraded=upgraded,
            dry_run=dry_run,
            window_open=window.contains(now),
            window=window,
            checked_at=now,
        )
