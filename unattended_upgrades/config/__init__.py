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

"""Configuration loading for unattended upgrades.

This module loads and merges YAML configuration with a layered approach:

  - Organization-wide defaults (defaults/org.yaml)
  - Host defaults (defaults/hosts/<host name>.yaml)
  - Server configuration (the file given on the command line)

Dicts are merged recursively and lists/scalars are replaced (last wins).

Public API:

- load_effective_config: Load and merge configuration for a server
- UpgradeConfig: Typed accessors for window, policy and host settings

Example:
    Basic usage:

        from datetime import datetime, UTC
        from pathlib import Path
        from unattended_upgrades.config import UpgradeConfig

        config = UpgradeConfig.load(Path("servers/cloud01.yaml"))
        window = config.get_maintenance_window(datetime.now(UTC))
        policy = config.get_policy()

"""

from .loader import load_effective_config
from .settings import UpgradeConfig

__all__ = ["UpgradeConfig", "load_effective_config"]
