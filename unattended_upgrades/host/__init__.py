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

"""Host application adapters for unattended upgrades.

This package provides the collaborators the evaluator consumes: an
installer, an add-on registry and a clock. Host adapters register
themselves by name so the configuration file can select one.

Modules:

base : module
    Collaborator protocols and the host registry.
clock : module
    System and fixed clocks.
occ : module
    Client for the Nextcloud occ console.
appstore : module
    Client for the Nextcloud app store catalog.
nextcloud : module
    Nextcloud host adapter (registered as "nextcloud").

Public API:

get_host : function
    Instantiate a registered host by name.
register_host : function
    Register a host adapter class.

Example:
    from unattended_upgrades.host import get_host

    host = get_host("nextcloud", {"occ": "/var/www/nextcloud/occ"})
    for addon_id in host.list_installed_addon_ids():
        print(addon_id, host.is_update_available(addon_id))

"""

from .base import (
    AddonRegistry,
    Clock,
    Host,
    Installer,
    get_host,
    get_host_class,
    register_host,
)
from .clock import FixedClock, SystemClock

# Import hosts so they self-register
from .nextcloud import NextcloudHost  # noqa: F401

__all__ = [
    "AddonRegistry",
    "Clock",
    "FixedClock",
    "Host",
    "Installer",
    "NextcloudHost",
    "SystemClock",
    "get_host",
    "get_host_class",
    "register_host",
]
