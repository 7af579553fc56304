"""
Tests for unattended_upgrades.config module.

Tests configuration loading and typed access including:
- YAML file loading
- Three-layer merging (org -> host -> server)
- Path resolution
- Maintenance window and policy accessors
- Error handling
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from unattended_upgrades.config import UpgradeConfig, load_effective_config
from unattended_upgrades.exceptions import ConfigError


class TestConfigLoading:
    """Tests for basic configuration loading."""

    def test_load_simple_config(self, create_yaml_file, sample_config_data):
        """Test loading a configuration without defaults."""
        config_path = create_yaml_file("server.yaml", sample_config_data)

        config = load_effective_config(config_path)

        assert config["apiVersion"] == "unattended-upgrades/v1"
        assert config["policy"]["blocked"] == ["calendar"]
        assert config["host"]["name"] == "nextcloud"

    def test_missing_config_file_raises(self, tmp_test_dir):
        """Test that a missing configuration file raises ConfigError."""
        with pytest.raises(ConfigError, match="file not found"):
            load_effective_config(tmp_test_dir / "nonexistent.yaml")

    def test_host_override(self, create_yaml_file, sample_config_data):
        """Test that the host parameter overrides host.name."""
        config_path = create_yaml_file("server.yaml", sample_config_data)

        config = load_effective_config(config_path, host="other")

        assert config["host"]["name"] == "other"


class TestConfigMerging:
    """Tests for configuration merging behavior."""

    def _write_org(self, root: Path, text: str) -> None:
        defaults_dir = root / "defaults"
        defaults_dir.mkdir(exist_ok=True)
        (defaults_dir / "org.yaml").write_text(text)

    def test_dict_deep_merge(self, tmp_test_dir):
        """Test that dicts are deep-merged."""
        self._write_org(
            tmp_test_dir,
            """
maintenance_window:
  start: "01:00"
  end: "05:00"
  timezone: Europe/Vienna
""",
        )
        config_path = tmp_test_dir / "servers" / "cloud01.yaml"
        config_path.parent.mkdir()
        config_path.write_text(
            """
maintenance_window:
  end: "03:00"
"""
        )

        config = load_effective_config(config_path)

        assert config["maintenance_window"] == {
            "start": "01:00",
            "end": "03:00",
            "timezone": "Europe/Vienna",
        }

    def test_list_replacement(self, tmp_test_dir):
        """Test that a server block-list replaces the org block-list."""
        self._write_org(
            tmp_test_dir,
            """
policy:
  blocked: [calendar, mail]
""",
        )
        config_path = tmp_test_dir / "server.yaml"
        config_path.write_text(
            """
policy:
  blocked: [deck]
"""
        )

        config = load_effective_config(config_path)

        assert config["policy"]["blocked"] == ["deck"]

    def test_host_defaults_layer(self, tmp_test_dir):
        """Test that defaults/hosts/<name>.yaml sits between org and server."""
        self._write_org(
            tmp_test_dir,
            """
host:
  name: nextcloud
  timeout: 100
""",
        )
        hosts_dir = tmp_test_dir / "defaults" / "hosts"
        hosts_dir.mkdir()
        (hosts_dir / "nextcloud.yaml").write_text(
            """
host:
  occ: /srv/nextcloud/occ
  timeout: 200
"""
        )
        config_path = tmp_test_dir / "server.yaml"
        config_path.write_text(
            """
host:
  timeout: 300
"""
        )

        config = load_effective_config(config_path)

        assert config["host"]["name"] == "nextcloud"
        assert config["host"]["occ"] == "/srv/nextcloud/occ"
        assert config["host"]["timeout"] == 300

    def test_relative_occ_path_resolved(self, tmp_test_dir):
        """Test that host.occ is resolved against the config directory."""
        config_path = tmp_test_dir / "server.yaml"
        config_path.write_text(
            """
host:
  occ: nextcloud/occ
"""
        )

        config = load_effective_config(config_path)

        expected = (tmp_test_dir / "nextcloud" / "occ").resolve()
        assert config["host"]["occ"] == str(expected)


class TestErrorHandling:
    """Tests for error handling in config loading."""

    def test_invalid_yaml_raises(self, tmp_test_dir):
        """Test that invalid YAML raises ConfigError."""
        config_path = tmp_test_dir / "bad.yaml"
        config_path.write_text("invalid: yaml: syntax: error:")

        with pytest.raises(ConfigError, match="Error parsing YAML"):
            load_effective_config(config_path)

    def test_empty_yaml_raises(self, tmp_test_dir):
        """Test that empty YAML raises ConfigError."""
        config_path = tmp_test_dir / "empty.yaml"
        config_path.write_text("")

        with pytest.raises(ConfigError, match="empty"):
            load_effective_config(config_path)

    def test_non_dict_yaml_raises(self, tmp_test_dir):
        """Test that non-dict YAML raises ConfigError."""
        config_path = tmp_test_dir / "list.yaml"
        config_path.write_text("- item1\n- item2\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_effective_config(config_path)


class TestUpgradeConfig:
    """Tests for UpgradeConfig accessors."""

    NOW = datetime(2026, 10, 20, 3, 0, tzinfo=UTC)

    def test_load_and_read(self, create_yaml_file, sample_config_data):
        """Test loading a file and reading window and policy."""
        config = UpgradeConfig.load(create_yaml_file("s.yaml", sample_config_data))

        window = config.get_maintenance_window(self.NOW)
        assert window.contains(self.NOW)
        assert config.get_allowed_addon_ids() == frozenset()
        assert config.get_blocked_addon_ids() == frozenset({"calendar"})
        assert config.host_name == "nextcloud"

    def test_unquoted_times_from_yaml(self, tmp_test_dir):
        """Test that unquoted 22:00 style values still form a daily window."""
        config_path = tmp_test_dir / "s.yaml"
        config_path.write_text(
            """
maintenance_window:
  start: 22:00
  end: 23:30
"""
        )
        config = UpgradeConfig.load(config_path)

        window = config.get_maintenance_window(
            datetime(2026, 10, 20, 22, 15, tzinfo=UTC)
        )

        assert window.start == datetime(2026, 10, 20, 22, 0, tzinfo=UTC)
        assert window.end == datetime(2026, 10, 20, 23, 30, tzinfo=UTC)

    def test_absolute_window(self):
        """Test that ISO datetimes form an absolute window."""
        config = UpgradeConfig(
            {
                "maintenance_window": {
                    "start": "2026-10-20T02:00:00+00:00",
                    "end": "2026-10-20T04:00:00+00:00",
                }
            }
        )

        window = config.get_maintenance_window(self.NOW)

        assert window.start == datetime(2026, 10, 20, 2, 0, tzinfo=UTC)
        assert window.end == datetime(2026, 10, 20, 4, 0, tzinfo=UTC)

    def test_missing_window_raises(self):
        """Test that a missing maintenance_window section is an error."""
        with pytest.raises(ConfigError, match="maintenance_window"):
            UpgradeConfig({}).get_maintenance_window(self.NOW)

    def test_incomplete_window_raises(self):
        """Test that start without end is an error."""
        config = UpgradeConfig({"maintenance_window": {"start": "02:00"}})

        with pytest.raises(ConfigError, match="both 'start' and 'end'"):
            config.get_maintenance_window(self.NOW)

    def test_policy_must_be_list_of_strings(self):
        """Test that a scalar block-list is rejected."""
        config = UpgradeConfig({"policy": {"blocked": "calendar"}})

        with pytest.raises(ConfigError, match="policy.blocked"):
            config.get_blocked_addon_ids()

    def test_missing_policy_is_unrestricted(self):
        """Test that no policy section means no restriction."""
        policy = UpgradeConfig({}).get_policy()

        assert policy.unrestricted

    def test_host_name_defaults_to_nextcloud(self):
        """Test the default host name."""
        assert UpgradeConfig({}).host_name == "nextcloud"
