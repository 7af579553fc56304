"""
Tests for unattended_upgrades.versioning module.

Tests version comparison including:
- Semantic versioning comparison
- Prerelease tag ordering
- Prerelease detection
- Newer-than checks used by the app store update source
"""

from __future__ import annotations

import pytest

from unattended_upgrades.versioning import (
    compare_versions,
    is_newer,
    is_prerelease,
    version_key,
)


class TestVersionComparison:
    """Tests for version comparison functions."""

    def test_semver_basic_comparison(self):
        """Test basic semantic version comparison."""
        assert compare_versions("1.2.0", "1.1.9") == 1  # newer
        assert compare_versions("1.1.9", "1.2.0") == -1  # older
        assert compare_versions("1.2.0", "1.2.0") == 0  # equal

    def test_semver_major_minor_patch(self):
        """Test major.minor.patch version ordering."""
        assert compare_versions("2.0.0", "1.9.9") == 1  # major bump
        assert compare_versions("1.10.0", "1.9.0") == 1  # minor bump
        assert compare_versions("1.0.10", "1.0.9") == 1  # patch bump

    def test_semver_prerelease_ordering(self):
        """Test prerelease version ordering."""
        # Release > prerelease
        assert compare_versions("1.0.0", "1.0.0-rc.1") == 1
        assert compare_versions("1.0.0-rc.1", "1.0.0") == -1

        # Prerelease tag ordering: alpha < beta < rc
        assert compare_versions("1.0.0-beta", "1.0.0-alpha") == 1
        assert compare_versions("1.0.0-rc", "1.0.0-beta") == 1
        assert compare_versions("1.0.0-rc.2", "1.0.0-rc.1") == 1
        assert compare_versions("1.0.0-rc.10", "1.0.0-rc.9") == 1

    def test_v_prefix_ignored(self):
        """Test that 'v' prefix is handled correctly."""
        assert compare_versions("v1.2.0", "v1.1.9") == 1
        assert compare_versions("v1.2.0", "1.2.0") == 0

    def test_build_metadata_ignored(self):
        """Test that '+build' metadata does not affect ordering."""
        assert compare_versions("1.2.0+20260101", "1.2.0") == 0

    def test_trailing_zeros_equal(self):
        """Test that missing components count as zero."""
        assert compare_versions("1.2", "1.2.0") == 0
        assert compare_versions("1.2.0.0", "1.2") == 0

    def test_attached_prerelease_tag(self):
        """Test tags written without a separator (e.g. 3.1.0rc1)."""
        assert compare_versions("3.1.0rc1", "3.1.0") == -1
        assert compare_versions("3.1.0rc2", "3.1.0rc1") == 1


class TestVersionKey:
    """Tests for version key generation."""

    def test_parsed_versions_sort(self):
        """Test that sorting by key gives release order."""
        versions = ["1.0.0", "1.0.0-alpha", "0.9.9", "1.0.0-rc.1", "1.0.1"]

        assert sorted(versions, key=version_key) == [
            "0.9.9",
            "1.0.0-alpha",
            "1.0.0-rc.1",
            "1.0.0",
            "1.0.1",
        ]

    def test_unparsable_sorts_after_parsed(self):
        """Test that non-version strings fall back to text ordering."""
        assert version_key("latest") > version_key("99.0.0")


class TestPrerelease:
    """Tests for prerelease detection."""

    @pytest.mark.parametrize(
        "version", ["1.0.0-alpha", "2.0.0-beta.3", "v3.1.0-rc1", "1.0.0-dev"]
    )
    def test_prereleases(self, version):
        """Test that prerelease suffixes are detected."""
        assert is_prerelease(version)

    @pytest.mark.parametrize("version", ["1.0.0", "v2.3", "1.0.0+build.5"])
    def test_final_releases(self, version):
        """Test that final releases are not prereleases."""
        assert not is_prerelease(version)


class TestIsNewer:
    """Tests for is_newer."""

    def test_newer_remote(self):
        """Test a strictly newer remote version."""
        assert is_newer("1.2.1", "1.2.0")

    def test_equal_is_not_newer(self):
        """Test that an equal version is not an upgrade."""
        assert not is_newer("1.2.0", "1.2")

    def test_older_is_not_newer(self):
        """Test that a downgrade is never reported as newer."""
        assert not is_newer("1.1.0", "1.2.0")

    def test_missing_current(self):
        """Test that an uninstalled add-on has nothing to upgrade."""
        assert not is_newer("1.0.0", None)
