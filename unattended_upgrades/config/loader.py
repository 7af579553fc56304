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

"""Configuration loading and merging for unattended upgrades.

This module implements a three-layer configuration system so a fleet of
servers can share organization-wide defaults and host-specific settings,
while each server's file only states what differs.

Configuration Layers:

1. **Organization defaults** (defaults/org.yaml)
    - Base configuration for every server
    - Typically the maintenance window and a fleet-wide block-list
    - Found by walking upward from the configuration file

2. **Host defaults** (defaults/hosts/<host name>.yaml)
    - Settings for one kind of host (e.g., occ path for nextcloud)
    - Optional; only loaded if the host name is known
    - Overrides organization defaults

3. **Server configuration** (the file passed on the command line)
    - Always required
    - Overrides host and organization defaults

Merge Behavior:

The loader performs deep merging with "last wins" semantics:

- **Dicts**: Recursively merged (keys from overlay override base)
- **Lists**: Completely replaced (NOT appended/extended)
- **Scalars**: Overwritten (strings, numbers, booleans)

Lists replacing lists matters for the policy: a server's `policy.blocked`
replaces the organization's block-list, it does not extend it.

Path Resolution:

Relative paths are resolved against the CONFIG FILE location. Currently
resolved paths:

- host.occ

Error Handling:

- ConfigError: Missing files, YAML parse errors, empty files, or a
  top-level value that is not a mapping
- All errors are chained with "from err" for better debugging

Example:
    ```python
    from pathlib import Path
    from unattended_upgrades.config import load_effective_config

    cfg = load_effective_config(Path("servers/cloud01.yaml"))
    print(cfg["maintenance_window"])
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from unattended_upgrades.exceptions import ConfigError
from unattended_upgrades.logging import Logger, get_global_logger

# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """Load a YAML file and return the parsed Python object.

    Raises:
        ConfigError: When the file does not exist, cannot be parsed,
            or is empty.
    """
    if not p.exists():
        raise ConfigError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    return data


def _load_mapping(p: Path) -> dict[str, Any]:
    data = _load_yaml_file(p)
    if not isinstance(data, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - list + list -> overlay REPLACES base (not concatenated)
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


# -------------------------------
# Defaults discovery
# -------------------------------


def _find_defaults_root(start_dir: Path) -> Path | None:
    """Walk upward from 'start_dir' looking for 'defaults/org.yaml'.

    Returns the 'defaults' directory or None if not found.
    """
    for parent in [start_dir] + list(start_dir.parents):
        candidate = parent / "defaults" / "org.yaml"
        if candidate.exists():
            return parent / "defaults"
    return None


def _host_name(*layers: dict[str, Any]) -> str | None:
    """Return the last host.name set in any of the given layers."""
    name = None
    for layer in layers:
        host = layer.get("host")
        if isinstance(host, dict) and isinstance(host.get("name"), str):
            name = host["name"]
    return name


# -------------------------------
# Path resolution
# -------------------------------


def _resolve_known_paths(cfg: dict[str, Any], config_dir: Path) -> None:
    """Resolve relative path fields inside the merged config in place.

    Currently handled:
      - cfg["host"]["occ"]
    """
    host = cfg.get("host")
    if not isinstance(host, dict):
        return
    raw_path = host.get("occ")
    if isinstance(raw_path, str) and raw_path:
        p = Path(raw_path)
        if not p.is_absolute():
            host["occ"] = str((config_dir / p).resolve())


# -------------------------------
# Public API
# -------------------------------


def load_effective_config(
    config_path: Path,
    *,
    host: str | None = None,
    logger: Logger | None = None,
) -> dict[str, Any]:
    """Load and merge the effective configuration for one server.

    Steps
      1) Read the server configuration YAML.
      2) Find defaults root by scanning upwards for 'defaults/org.yaml'.
      3) Load org defaults.
      4) Determine host name (param 'host' > server file > org defaults).
      5) Load host defaults if present.
      6) Merge: org -> host -> server (dicts deep-merge, lists replace).
      7) Resolve known relative paths (relative to the config directory).

    Args:
        config_path: Path to the server configuration file.
        host: Host name override. Default is None (read from config).
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        The merged configuration dict. If no defaults were found, the
        server configuration is returned as-is (with path resolution).

    Raises:
        ConfigError: If any file is missing, unparsable, empty, or not a
            mapping.
    """
    if logger is None:
        logger = get_global_logger()

    config_path = config_path.resolve()
    config_dir = config_path.parent

    logger.info("CONFIG", f"Loading configuration: {config_path}")
    server_cfg = _load_mapping(config_path)

    merged: dict[str, Any] = {}
    layers_merged = 0

    defaults_root = _find_defaults_root(config_dir)
    if defaults_root:
        logger.info("CONFIG", f"Found defaults root: {defaults_root}")

        org_path = defaults_root / "org.yaml"
        logger.info("CONFIG", f"Loading: {org_path.relative_to(defaults_root.parent)}")
        org_cfg = _load_mapping(org_path)
        merged = _deep_merge_dicts(merged, org_cfg)
        layers_merged += 1

        host_name = host or _host_name(org_cfg, server_cfg)
        if host_name:
            logger.debug("CONFIG", f"Host: {host_name}")
            candidate = defaults_root / "hosts" / f"{host_name}.yaml"
            if candidate.exists():
                logger.info(
                    "CONFIG", f"Loading: {candidate.relative_to(defaults_root.parent)}"
                )
                merged = _deep_merge_dicts(merged, _load_mapping(candidate))
                layers_merged += 1

    merged = _deep_merge_dicts(merged, server_cfg)
    layers_merged += 1

    if host:
        merged.setdefault("host", {})
        if isinstance(merged["host"], dict):
            merged["host"]["name"] = host

    logger.info("CONFIG", f"Deep merged {layers_merged} layer(s)")
    logger.debug(
        "CONFIG",
        "Final configuration:\n"
        + yaml.safe_dump(merged, default_flow_style=False, sort_keys=False).rstrip(),
    )

    _resolve_known_paths(merged, config_dir)

    return merged
