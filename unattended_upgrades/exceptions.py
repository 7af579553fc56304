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

"""Exception hierarchy for unattended upgrades.

Library users can tell configuration problems apart from failures of the
host application or the app store:

- ConfigError: Configuration errors (YAML parse, missing fields, bad window)
- NetworkError: App store request failures
- HostError: The host console could not be run or returned unusable output

All exceptions inherit from UnattendedUpgradesError, so a single except
clause catches every error this package raises.

Note:
    A failed upgrade of a single add-on is NOT an exception at this level.
    The evaluator logs it and moves on to the next add-on.

Example:
    Catching specific error types:
        ```python
        from pathlib import Path
        from unattended_upgrades.cli import build_upgrader
        from unattended_upgrades.exceptions import ConfigError, HostError

        try:
            upgrader = build_upgrader(Path("upgrades.yaml"))
            count = upgrader.upgrade()
        except ConfigError as e:
            print(f"Configuration error: {e}")
        except HostError as e:
            print(f"Host error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "UnattendedUpgradesError",
    "ConfigError",
    "NetworkError",
    "HostError",
]


class UnattendedUpgradesError(Exception):
    """Base exception for all unattended upgrade errors."""

    pass


class ConfigError(UnattendedUpgradesError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing (syntax errors, invalid structure)
    - Missing or invalid configuration fields
    - Maintenance windows that cannot be parsed or end before they start
    - Unknown host names
    """

    pass


class NetworkError(UnattendedUpgradesError):
    """Raised when the app store catalog cannot be fetched or parsed."""

    pass


class HostError(UnattendedUpgradesError):
    """Raised for failures talking to the host application.

    This exception is raised when there are problems with:

    - The occ console or PHP binary not being found
    - occ commands timing out
    - occ output that cannot be parsed (e.g., malformed JSON)
    """

    pass
