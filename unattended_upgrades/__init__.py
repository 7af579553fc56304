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

"""Unattended upgrades for host application add-ons.

Upgrades the add-ons ("apps") of a host application, such as a Nextcloud
server, without supervision, but only inside a maintenance window and only
for the add-ons an allow/block policy permits.

Unattended upgrades provides:

- A single point-in-time maintenance window gate (daily or absolute windows)
- Allow-list and block-list policy (blocked wins over allowed)
- Dry-run mode that counts would-be upgrades without changing anything
- Best-effort batches: one failed add-on never aborts the others
- Layered YAML configuration (org defaults, host defaults, server file)
- Nextcloud host adapter using occ and, optionally, the app store catalog

Quick Start:
Validate a configuration:

    $ unattended-upgrades validate servers/cloud01.yaml

Preview, then upgrade:

    $ unattended-upgrades run servers/cloud01.yaml --dry-run
    $ unattended-upgrades run servers/cloud01.yaml

Package Structure:

cli : module
    Command-line interface with argparse.
upgrader : module
    The upgrade policy evaluator and the Upgrader service.
config : package
    YAML configuration loading, merging and typed access.
policy : package
    Maintenance windows and the allow/block policy.
host : package
    Collaborator protocols and host adapters.
versioning : module
    Add-on version comparison.
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Maintenance-window-gated unattended add-on upgrades"

from unattended_upgrades.config import UpgradeConfig, load_effective_config
from unattended_upgrades.policy import MaintenanceWindow, UpgradePolicy
from unattended_upgrades.upgrader import Upgrader, evaluate
from unattended_upgrades.validation import validate_config

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "MaintenanceWindow",
    "UpgradeConfig",
    "UpgradePolicy",
    "Upgrader",
    "evaluate",
    "load_effective_config",
    "validate_config",
]
