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

"""Nextcloud occ console client.

Runs `php occ ...` through subprocess to list installed apps, check for
app updates and apply them. Downloading, verifying and migrating the app is
left entirely to Nextcloud's own installer behind `occ app:update`.

Commands used:

- `occ app:list --output=json`
- `occ app:update --showonly [--allow-unstable] <app_id>`
- `occ app:update [--allow-unstable] <app_id>`

Example:
    ```python
    from pathlib import Path
    from unattended_upgrades.host.occ import OccClient

    occ = OccClient(Path("/var/www/nextcloud/occ"), run_as="www-data")
    for app_id, version in occ.list_apps().items():
        if occ.update_available(app_id):
            occ.update_app(app_id)
    ```
"""

from __future__ import annotations

import json
from pathlib import Path
import subprocess

from unattended_upgrades.exceptions import HostError
from unattended_upgrades.logging import Logger, get_global_logger

DEFAULT_TIMEOUT = 600

_UPDATE_MARKER = "new version available"


class OccClient:
    """Thin wrapper around the occ console.

    Attributes:
        occ_path: Path to the `occ` script in the Nextcloud installation.
        php: PHP binary used to run occ.
        run_as: Optional system user to run occ as (via sudo -u).
        timeout: Timeout in seconds for each occ invocation.
    """

    def __init__(
        self,
        occ_path: Path,
        *,
        php: str = "php",
        run_as: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
        logger: Logger | None = None,
    ) -> None:
        self.occ_path = occ_path
        self.php = php
        self.run_as = run_as
        self.timeout = timeout
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger if self._logger is not None else get_global_logger()

    def _command(self, *args: str) -> list[str]:
        cmd = [self.php, str(self.occ_path), *args, "--no-interaction"]
        if self.run_as:
            cmd = ["sudo", "-u", self.run_as, *cmd]
        return cmd

    def run(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run an occ command and return the completed process.

        Non-zero exit codes are returned to the caller, not raised.

        Raises:
            HostError: If occ cannot be started or times out.
        """
        cmd = self._command(*args)
        self.logger.debug("OCC", f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except FileNotFoundError as err:
            raise HostError(f"Cannot run occ, executable not found: {cmd[0]}") from err
        except subprocess.TimeoutExpired as err:
            raise HostError(
                f"occ {' '.join(args)} timed out after {err.timeout}s"
            ) from err

        self.logger.debug("OCC", f"Exit code: {result.returncode}")
        return result

    def list_apps(self, include_disabled: bool = True) -> dict[str, str | None]:
        """List installed apps with their installed versions.

        Args:
            include_disabled: If True, disabled apps are listed too.

        Returns:
            Mapping of app id to installed version (None when occ reports
            no version).

        Raises:
            HostError: If occ fails or its output is not the expected JSON.
        """
        result = self.run("app:list", "--output=json")
        if result.returncode != 0:
            raise HostError(
                f"occ app:list failed (exit code {result.returncode})"
                + (f"\n{result.stderr.strip()}" if result.stderr else "")
            )

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as err:
            raise HostError(f"occ app:list returned invalid JSON: {err}") from err

        if not isinstance(data, dict):
            raise HostError("occ app:list returned unexpected JSON structure")

        sections = ["enabled", "disabled"] if include_disabled else ["enabled"]
        apps: dict[str, str | None] = {}
        for section in sections:
            entries = data.get(section) or {}
            if not isinstance(entries, dict):
                raise HostError(f"occ app:list: '{section}' is not a mapping")
            for app_id, version in entries.items():
                apps[app_id] = str(version) if version else None

        self.logger.debug("OCC", f"Found {len(apps)} installed app(s)")
        return apps

    def update_available(self, app_id: str, allow_unstable: bool = False) -> bool:
        """Ask occ whether an update is available for one app.

        Raises:
            HostError: If occ fails.
        """
        args = ["app:update", "--showonly"]
        if allow_unstable:
            args.append("--allow-unstable")
        result = self.run(*args, app_id)
        if result.returncode != 0:
            raise HostError(
                f"occ app:update --showonly {app_id} failed "
                f"(exit code {result.returncode})"
            )
        return _UPDATE_MARKER in result.stdout

    def update_app(self, app_id: str, allow_unstable: bool = False) -> bool:
        """Update one app.

        Returns:
            True if occ exited successfully, False otherwise.

        Raises:
            HostError: If occ cannot be started or times out.
        """
        args = ["app:update"]
        if allow_unstable:
            args.append("--allow-unstable")
        result = self.run(*args, app_id)

        for line in result.stdout.strip().splitlines():
            self.logger.debug("OCC", f"  {line}")
        if result.returncode != 0 and result.stderr:
            for line in result.stderr.strip().splitlines():
                self.logger.debug("OCC", f"  {line}")

        return result.returncode == 0
