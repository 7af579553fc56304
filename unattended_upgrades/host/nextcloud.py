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

"""Nextcloud host adapter.

Implements the Installer and AddonRegistry protocols for a Nextcloud
server, using the occ console for listing and updating apps and, optionally,
the app store catalog for the update check.

Host Configuration:
    ```yaml
    host:
      name: nextcloud
      occ: /var/www/nextcloud/occ       # Required: path to occ
      php: php                          # Optional: PHP binary
      run_as: www-data                  # Optional: run occ via sudo -u
      update_source: occ                # Optional: "occ" or "appstore"
      allow_unstable: false             # Optional: consider prereleases
      include_disabled: true            # Optional: also upgrade disabled apps
      timeout: 600                      # Optional: seconds per occ call
      appstore_url: https://apps.nextcloud.com/api/v1
      platform_version: "28.0.4"        # Required for update_source: appstore
    ```

Update Sources:

- **occ** (default): `occ app:update --showonly <app>` per app
- **appstore**: one catalog request, compared against the installed
  versions reported by `occ app:list`
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from unattended_upgrades.exceptions import ConfigError
from unattended_upgrades.logging import Logger, get_global_logger

from .appstore import DEFAULT_APPSTORE_URL, AppStoreClient
from .base import register_host
from .occ import DEFAULT_TIMEOUT, OccClient

UPDATE_SOURCES = ("occ", "appstore")


class NextcloudHost:
    """Installer and add-on registry backed by a Nextcloud installation."""

    def __init__(self, settings: dict[str, Any], logger: Logger | None = None) -> None:
        errors = self.validate_settings(settings)
        if errors:
            raise ConfigError("Invalid nextcloud host settings: " + "; ".join(errors))

        self._logger = logger
        self.update_source: str = settings.get("update_source", "occ")
        self.allow_unstable: bool = bool(settings.get("allow_unstable", False))
        self.include_disabled: bool = bool(settings.get("include_disabled", True))

        self.occ = OccClient(
            Path(settings["occ"]),
            php=settings.get("php", "php"),
            run_as=settings.get("run_as"),
            timeout=int(settings.get("timeout", DEFAULT_TIMEOUT)),
            logger=logger,
        )
        self.appstore: AppStoreClient | None = None
        if self.update_source == "appstore":
            self.appstore = AppStoreClient(
                str(settings["platform_version"]),
                base_url=settings.get("appstore_url", DEFAULT_APPSTORE_URL),
                logger=logger,
            )

        self._installed: dict[str, str | None] | None = None

    @property
    def logger(self) -> Logger:
        return self._logger if self._logger is not None else get_global_logger()

    @staticmethod
    def validate_settings(settings: dict[str, Any]) -> list[str]:
        """Validate nextcloud host settings without running anything.

        Returns:
            List of error messages (empty if valid).
        """
        errors = []

        occ = settings.get("occ")
        if occ is None:
            errors.append("Missing required field: host.occ")
        elif not isinstance(occ, str) or not occ.strip():
            errors.append("host.occ must be a non-empty string")

        source = settings.get("update_source", "occ")
        if source not in UPDATE_SOURCES:
            errors.append(
                f"host.update_source must be one of {', '.join(UPDATE_SOURCES)}"
                f" (got {source!r})"
            )
        elif source == "appstore" and not settings.get("platform_version"):
            errors.append(
                "host.platform_version is required when update_source is 'appstore'"
            )

        timeout = settings.get("timeout", DEFAULT_TIMEOUT)
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
            errors.append("host.timeout must be a positive integer")

        for flag in ("allow_unstable", "include_disabled"):
            if flag in settings and not isinstance(settings[flag], bool):
                errors.append(f"host.{flag} must be true or false")

        return errors

    def _installed_versions(self) -> dict[str, str | None]:
        if self._installed is None:
            self._installed = self.occ.list_apps(include_disabled=self.include_disabled)
        return self._installed

    def list_installed_addon_ids(self) -> list[str]:
        return list(self._installed_versions())

    def is_update_available(self, addon_id: str) -> bool:
        if self.appstore is not None:
            installed = self._installed_versions().get(addon_id)
            return self.appstore.has_newer(
                addon_id, installed, allow_unstable=self.allow_unstable
            )
        return self.occ.update_available(addon_id, allow_unstable=self.allow_unstable)

    def update_addon(self, addon_id: str) -> bool:
        return self.occ.update_app(addon_id, allow_unstable=self.allow_unstable)


# Register this host when the module is imported
register_host("nextcloud", NextcloudHost)
