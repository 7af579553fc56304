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

"""Host collaborator protocols and host registry.

The evaluator never talks to a host application directly. It consumes a
few narrow operations, described here as Protocol classes:

- Installer: "is an update available?" and "apply the update"
- AddonRegistry: "which add-ons are installed?"
- Clock: "what time is it?"

A host adapter (e.g., NextcloudHost) implements Installer and AddonRegistry
and registers itself by name, so the configuration file can select it with
`host.name`.

Design Philosophy:
    - Collaborators are Protocol classes (structural subtyping, not inheritance)
    - Registration happens at module import time (hosts self-register)
    - Registry is a simple dict (no dependency injection framework)
    - The evaluator receives collaborators as explicit parameters

Example:
    Implementing a custom host:
        ```python
        from unattended_upgrades.host.base import register_host

        class MyHost:
            def __init__(self, settings, logger=None):
                self._settings = settings

            def list_installed_addon_ids(self):
                return ["a", "b"]

            def is_update_available(self, addon_id):
                return True

            def update_addon(self, addon_id):
                return True

        register_host("my_host", MyHost)

        # Now it can be used in configuration files:
        # host:
        #   name: my_host
        ```
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol

from unattended_upgrades.exceptions import ConfigError
from unattended_upgrades.logging import Logger

# -------------------------------
# Collaborator protocols
# -------------------------------


class Installer(Protocol):
    """Checks for and applies add-on updates."""

    def is_update_available(self, addon_id: str) -> bool:
        """Return True if a newer version of the add-on can be installed."""
        ...

    def update_addon(self, addon_id: str) -> bool:
        """Apply the available update for an add-on.

        Returns:
            True if the update was applied, False if it was attempted but
            failed. Unexpected failures may also raise.
        """
        ...


class AddonRegistry(Protocol):
    """Lists the add-ons installed in the host application."""

    def list_installed_addon_ids(self) -> Sequence[str]:
        ...


class Clock(Protocol):
    """Time source."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...


class Host(Installer, AddonRegistry, Protocol):
    """A host adapter: an Installer and an AddonRegistry in one object.

    Host classes are constructed with the merged `host` settings mapping
    and an optional logger. They may provide a `validate_settings`
    staticmethod returning a list of error messages; `unattended-upgrades
    validate` calls it without touching the host.
    """

    pass


# -------------------------------
# Host Registry
# -------------------------------

_HOST_REGISTRY: dict[str, type] = {}


def register_host(name: str, host_class: type) -> None:
    """Register a host adapter by name.

    Registering the same name twice overwrites the previous registration
    (allows substituting fakes in tests).

    Args:
        name: Host name as used in `host.name` of the configuration file.
        host_class: Class implementing the Host protocol.
    """
    _HOST_REGISTRY[name] = host_class


def get_host_class(name: str) -> type:
    """Look up a registered host class by name.

    Raises:
        ConfigError: If the host name is not registered. The message lists
            the available hosts.
    """
    if name not in _HOST_REGISTRY:
        available = ", ".join(sorted(_HOST_REGISTRY))
        raise ConfigError(
            f"Unknown host: {name!r}. Available: {available or '(none)'}"
        )
    return _HOST_REGISTRY[name]


def get_host(
    name: str, settings: dict[str, Any], logger: Logger | None = None
) -> Host:
    """Instantiate a registered host adapter.

    Args:
        name: Registered host name (case-sensitive).
        settings: The merged `host` section of the configuration.
        logger: Logger passed on to the host. Defaults to the global logger.

    Returns:
        A new host instance.

    Raises:
        ConfigError: If the host name is not registered.
    """
    host_class = get_host_class(name)
    return host_class(settings, logger=logger)
