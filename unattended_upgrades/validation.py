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

"""Configuration validation module.

Checks a configuration file without running occ or contacting the app
store. Useful before rolling a configuration out to a fleet and as a CI
pre-check.

Validation Checks:

- YAML syntax is valid and the merged config is a mapping
- apiVersion is supported
- maintenance_window has a parsable start/end in the right order
- timezone is a known IANA name
- policy.allowed / policy.blocked are lists of strings
- host.name is registered and host-specific settings are valid

Warnings (do not fail validation):

- An add-on listed in both allowed and blocked (blocked wins)
- A non-empty allow-list, which restricts upgrades to the listed add-ons

Example:
    ```python
    from pathlib import Path
    from unattended_upgrades.validation import validate_config

    result = validate_config(Path("servers/cloud01.yaml"))
    if result.status == "valid":
        print("Configuration is valid")
    else:
        for error in result.errors:
            print(f"Error: {error}")
    ```
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from unattended_upgrades.config.settings import UpgradeConfig
from unattended_upgrades.exceptions import ConfigError
from unattended_upgrades.host import get_host_class
from unattended_upgrades.logging import Logger, get_global_logger
from unattended_upgrades.results import ValidationResult

__all__ = ["validate_config"]

SUPPORTED_API_VERSION = "unattended-upgrades/v1"


def validate_config(
    config_path: Path, logger: Logger | None = None
) -> ValidationResult:
    """Validate a configuration file without touching the host.

    Args:
        config_path: Path to the configuration file to validate.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        Validation result with status, errors and warnings.
    """
    if logger is None:
        logger = get_global_logger()

    errors: list[str] = []
    warnings: list[str] = []

    def _result() -> ValidationResult:
        return ValidationResult(
            status="valid" if not errors else "invalid",
            errors=errors,
            warnings=warnings,
            config_path=str(config_path),
        )

    logger.info("VALIDATE", f"Validating configuration: {config_path}")

    try:
        config = UpgradeConfig.load(config_path, logger=logger)
    except ConfigError as err:
        errors.append(str(err))
        return _result()

    logger.info("VALIDATE", "[OK] YAML syntax is valid")

    # apiVersion
    api_version = config.data.get("apiVersion")
    if api_version is None:
        errors.append("Missing required field: apiVersion")
    elif not isinstance(api_version, str):
        errors.append("apiVersion must be a string")
    elif api_version != SUPPORTED_API_VERSION:
        warnings.append(
            f"apiVersion '{api_version}' may not be supported "
            f"(expected: {SUPPORTED_API_VERSION})"
        )

    # Maintenance window, resolved against the current time
    try:
        window = config.get_maintenance_window(datetime.now(UTC))
    except ConfigError as err:
        errors.append(f"maintenance_window: {err}")
    else:
        logger.info("VALIDATE", f"[OK] Maintenance window: {window}")

    # Policy
    allowed: frozenset[str] = frozenset()
    blocked: frozenset[str] = frozenset()
    try:
        allowed = config.get_allowed_addon_ids()
    except ConfigError as err:
        errors.append(str(err))
    try:
        blocked = config.get_blocked_addon_ids()
    except ConfigError as err:
        errors.append(str(err))

    for addon_id in sorted(allowed & blocked):
        warnings.append(
            f"Add-on {addon_id!r} is both allowed and blocked; it will not be upgraded"
        )
    if allowed:
        warnings.append(
            f"Allow-list is set: only {len(allowed)} add-on(s) will be upgraded"
        )

    # Host
    try:
        host_name = config.host_name
        host_settings = config.host_settings
        host_class = get_host_class(host_name)
    except ConfigError as err:
        errors.append(f"host: {err}")
    else:
        logger.info("VALIDATE", f"[OK] Host: {host_name}")
        validate_settings = getattr(host_class, "validate_settings", None)
        if validate_settings is not None:
            errors.extend(validate_settings(host_settings))

    result = _result()
    if result.status == "valid":
        logger.info("VALIDATE", "[OK] Configuration is valid!")
    else:
        logger.info("VALIDATE", f"[ERROR] Configuration has {len(errors)} error(s)")
    return result
