# SPDX-License-Identifier: MIT
"""Unit tests for Maven version ordering, ranges and snapshots."""

import pytest

from bundle_version import (
    InvalidMavenVersionRangeError,
    MavenVersion,
    compare_maven_versions,
    is_maven_snapshot,
    maven_version_key,
    parse_maven_version_range,
)


class TestCompareMavenVersions:
    """Tests for compare_maven_versions function."""

    def test_trailing_zeros_ignored(self):
        """Test that 1, 1.0 and 1.0.0 are equal."""
        assert compare_maven_versions("1", "1.0.0") == 0
        assert compare_maven_versions("1.0", "1.0.0") == 0
        assert MavenVersion("1.0") == MavenVersion("1")

    def test_numeric_ordering(self):
        """Test that numbers compare numerically, not lexically."""
        assert compare_maven_versions("1.9", "1.10") == -1
        assert compare_maven_versions("2", "1.99") == 1

    @pytest.mark.parametrize(
        "lower,higher",
        [
            ("1.0-alpha", "1.0-beta"),
            ("1.0-beta", "1.0-milestone"),
            ("1.0-milestone", "1.0-rc"),
            ("1.0-rc", "1.0-SNAPSHOT"),
            ("1.0-SNAPSHOT", "1.0"),
            ("1.0", "1.0-sp"),
            ("1.0-sp", "1.0-foo"),
            ("1.0-alpha-1", "1.0-alpha-2"),
            ("1.0-alpha1", "1.0-beta1"),
            ("1.0-a1", "1.0-b1"),
        ],
    )
    def test_qualifier_ordering(self, lower, higher):
        """Test the qualifier precedence."""
        assert compare_maven_versions(lower, higher) == -1
        assert compare_maven_versions(higher, lower) == 1

    def test_aliases(self):
        """Test release aliases and cr."""
        assert compare_maven_versions("1.0-ga", "1.0") == 0
        assert compare_maven_versions("1.0-final", "1.0") == 0
        assert compare_maven_versions("1.0-cr1", "1.0-rc1") == 0

    def test_case_insensitive(self):
        """Test that qualifiers are case-insensitive."""
        assert compare_maven_versions("1.0-SNAPSHOT", "1.0-snapshot") == 0

    def test_version_key_sorting(self):
        """Test sorting with maven_version_key."""
        versions = ["1.0", "1.0-rc1", "0.9", "1.0-alpha", "1.0.1"]
        assert sorted(versions, key=maven_version_key) == [
            "0.9",
            "1.0-alpha",
            "1.0-rc1",
            "1.0",
            "1.0.1",
        ]

    def test_hash_follows_equality(self):
        """Test that equal versions share a hash."""
        assert len({MavenVersion("1"), MavenVersion("1.0.0")}) == 1


class TestIsMavenSnapshot:
    """Tests for is_maven_snapshot function."""

    def test_snapshot_suffix(self):
        """Test SNAPSHOT suffix detection in any case."""
        assert is_maven_snapshot("1.0.0-SNAPSHOT")
        assert is_maven_snapshot("1-snapshot")

    def test_timestamped(self):
        """Test timestamped snapshot detection."""
        assert is_maven_snapshot("1.0-20120606.131029-1")
        assert is_maven_snapshot("1-20120606-131029-1")

    def test_release(self):
        """Test that releases are not snapshots."""
        assert not is_maven_snapshot("1.0.0")
        assert not is_maven_snapshot("1-qualifier")
        assert not is_maven_snapshot("")
        assert not is_maven_snapshot(None)


class TestParseMavenVersionRange:
    """Tests for parse_maven_version_range function."""

    def test_recommended_version(self):
        """Test that a plain version is recommended and matches only itself."""
        r = parse_maven_version_range("1.0.0-SNAPSHOT")
        assert r.recommended == MavenVersion("1.0.0-SNAPSHOT")
        assert r.contains("1.0.0-SNAPSHOT")
        assert not r.contains("1.0.0")

    def test_closed_range(self):
        """Test an inclusive range."""
        r = parse_maven_version_range("[0,1]")
        assert r.recommended is None
        assert r.contains("0")
        assert r.contains("1.0.0")
        assert r.contains("1.0.0-SNAPSHOT")
        assert not r.contains("1.0.1")

    def test_half_open_range(self):
        """Test an exclusive upper bound."""
        r = parse_maven_version_range("[0,1.1)")
        assert r.contains("1.0.9")
        assert not r.contains("1.1")

    def test_unbounded_upper(self):
        """Test a range without an upper bound."""
        r = parse_maven_version_range("[1,)")
        assert r.contains("99")
        assert not r.contains("0.9")

    def test_exact_version(self):
        """Test a single bracketed version."""
        r = parse_maven_version_range("[1.5]")
        assert r.contains("1.5")
        assert not r.contains("1.6")

    def test_multiple_sets(self):
        """Test a union of restrictions."""
        r = parse_maven_version_range("(,1.0],[1.2,)")
        assert len(r.restrictions) == 2
        assert r.contains("0.5")
        assert not r.contains("1.1")
        assert r.contains("1.3")

    @pytest.mark.parametrize(
        "spec,message",
        [
            ("(1.0)", "Single version must be surrounded by []"),
            ("[1.0,1.0]", "identical boundaries"),
            ("[2.0,1.0]", "defies version ordering"),
            ("[1.0,2.0", "Unbounded range"),
            ("[1.0,2.0],[1.5,3.0]", "Ranges overlap"),
            ("[1.0,2.0],3.0", "fully-qualified sets"),
        ],
    )
    def test_invalid(self, spec, message):
        """Test malformed range specifications."""
        with pytest.raises(InvalidMavenVersionRangeError, match=message):
            parse_maven_version_range(spec)
