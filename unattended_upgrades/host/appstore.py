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

"""Nextcloud app store catalog client.

Fetches the list of releases compatible with a given Nextcloud platform
version and answers "what is the latest release of this app?". This lets
the update check run against the catalog with a single HTTP request per
batch, instead of one occ invocation per app.

Endpoint:

    GET {appstore_url}/platform/{platform_version}/apps.json

The response is a JSON list of apps; each app has an "id" and a list of
"releases" with "version" and "isNightly" fields.

Error Handling:

- NetworkError: HTTP failures, timeouts, or a response that is not the
  expected JSON list
- Errors are chained with 'from err' for better debugging

Example:
    ```python
    from unattended_upgrades.host.appstore import AppStoreClient

    store = AppStoreClient(platform_version="28.0.4")
    print(store.latest_version("calendar"))  # e.g. "4.7.2"
    ```
"""

from __future__ import annotations

from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from unattended_upgrades import __version__
from unattended_upgrades.exceptions import NetworkError
from unattended_upgrades.logging import Logger, get_global_logger
from unattended_upgrades.versioning import is_newer, is_prerelease, version_key

DEFAULT_APPSTORE_URL = "https://apps.nextcloud.com/api/v1"
DEFAULT_TIMEOUT = 30


def make_session() -> requests.Session:
    """Create a requests.Session that retries transient app store failures.

    - Retries on common transient status codes.
    - Applies exponential backoff.
    - Identifies itself with a User-Agent.
    """
    s = requests.Session()
    retries = Retry(
        total=3,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    s.headers.update(
        {
            "User-Agent": f"unattended-upgrades/{__version__}",
            "Accept": "application/json",
        }
    )
    s.mount("http://", HTTPAdapter(max_retries=retries))
    s.mount("https://", HTTPAdapter(max_retries=retries))
    return s


class AppStoreClient:
    """Read-only client for the app store catalog.

    The catalog is fetched lazily on first use and kept for the lifetime
    of the client, so one batch run makes at most one request.
    """

    def __init__(
        self,
        platform_version: str,
        *,
        base_url: str = DEFAULT_APPSTORE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        logger: Logger | None = None,
    ) -> None:
        self.platform_version = platform_version
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._logger = logger
        self._releases: dict[str, list[dict[str, Any]]] | None = None
        self._session: requests.Session | None = None

    @property
    def logger(self) -> Logger:
        return self._logger if self._logger is not None else get_global_logger()

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = make_session()
        return self._session

    @property
    def catalog_url(self) -> str:
        return f"{self.base_url}/platform/{self.platform_version}/apps.json"

    def _fetch(self) -> dict[str, list[dict[str, Any]]]:
        url = self.catalog_url
        self.logger.debug("APPSTORE", f"Fetching catalog: {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as err:
            raise NetworkError(
                f"App store request failed: {response.status_code} {response.reason}"
            ) from err
        except requests.exceptions.RequestException as err:
            raise NetworkError(f"Failed to fetch app store catalog: {err}") from err

        try:
            data = response.json()
        except ValueError as err:
            raise NetworkError(f"App store returned invalid JSON: {err}") from err

        if not isinstance(data, list):
            raise NetworkError("App store returned unexpected JSON structure")

        releases: dict[str, list[dict[str, Any]]] = {}
        for app in data:
            if not isinstance(app, dict) or not app.get("id"):
                continue
            releases[app["id"]] = [
                r for r in app.get("releases", []) if isinstance(r, dict)
            ]

        self.logger.debug("APPSTORE", f"Catalog lists {len(releases)} app(s)")
        return releases

    def releases(self, app_id: str) -> list[dict[str, Any]]:
        """Return the catalog releases for an app (empty if unknown)."""
        if self._releases is None:
            self._releases = self._fetch()
        return self._releases.get(app_id, [])

    def latest_version(self, app_id: str, allow_unstable: bool = False) -> str | None:
        """Return the newest release version for an app.

        Nightly builds and prereleases are ignored unless 'allow_unstable'.

        Returns:
            The newest version string, or None if the app store has no
            matching release.
        """
        candidates = []
        for release in self.releases(app_id):
            version = release.get("version")
            if not isinstance(version, str) or not version:
                continue
            if not allow_unstable and (
                release.get("isNightly") or is_prerelease(version)
            ):
                continue
            candidates.append(version)

        if not candidates:
            return None

        latest = max(candidates, key=version_key)
        self.logger.debug("APPSTORE", f"{app_id}: latest release {latest}")
        return latest

    def has_newer(
        self, app_id: str, installed: str | None, allow_unstable: bool = False
    ) -> bool:
        """Return True if the catalog has a release newer than 'installed'."""
        if installed is None:
            return False
        latest = self.latest_version(app_id, allow_unstable=allow_unstable)
        return latest is not None and is_newer(latest, installed)
