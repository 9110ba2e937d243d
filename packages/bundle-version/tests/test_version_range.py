# SPDX-License-Identifier: MIT
"""Unit tests for OSGi version ranges."""

import pytest
from hypothesis import given, settings, strategies as st

from bundle_version import (
    INFINITE_RANGE,
    EmptyRangeError,
    InvalidVersionRangeError,
    Version,
    VersionRange,
    parse_version,
    parse_version_range,
)


class TestParseVersionRange:
    """Tests for parse_version_range function."""

    def test_bare_version_is_at_least(self):
        """Test that a bare version means the version or later."""
        r = parse_version_range("1.2")
        assert r.low == Version(1, 2, 0)
        assert r.high is None
        assert r.low_inclusive

    def test_interval(self):
        """Test bracketed intervals."""
        r = parse_version_range("[1.0,2.0)")
        assert r.low == Version(1)
        assert r.high == Version(2)
        assert r.low_inclusive
        assert not r.high_inclusive

    def test_exclusive_low(self):
        """Test an exclusive lower bound."""
        r = parse_version_range("(1.0,2.0]")
        assert not r.low_inclusive
        assert r.high_inclusive

    def test_qualified_bounds(self):
        """Test bounds carrying qualifiers."""
        r = parse_version_range("[0.0.0.qualifier,1.0.0.foo]")
        assert r.low.qualifier == "qualifier"
        assert r.high.qualifier == "foo"

    @pytest.mark.parametrize(
        "text",
        ["", "[1.0", "[1.0)", "[1.0,2.0,3.0]", "[a,b]", "[2.0,1.0]", "[1.0,1.0)"],
    )
    def test_invalid(self, text):
        """Test that malformed or empty ranges are rejected."""
        with pytest.raises(InvalidVersionRangeError):
            parse_version_range(text)

    def test_str(self):
        """Test the string form of ranges."""
        assert str(parse_version_range("[1,2)")) == "[1.0.0,2.0.0)"
        assert str(parse_version_range("1")) == "1.0.0"


class TestIncludes:
    """Tests for VersionRange.includes."""

    def test_bounds(self):
        """Test inclusive and exclusive bounds."""
        r = parse_version_range("[1.0,2.0)")
        assert r.includes(parse_version("1.0"))
        assert r.includes(parse_version("1.9.9"))
        assert not r.includes(parse_version("2.0"))
        assert not r.includes(parse_version("0.9"))

    def test_infinite(self):
        """Test that the infinite range includes everything."""
        assert INFINITE_RANGE.is_infinite
        assert INFINITE_RANGE.includes(parse_version("0"))
        assert INFINITE_RANGE.includes(parse_version("999.0.0.x"))

    def test_bare_version_not_infinite(self):
        """Test that only [0.0.0,) counts as infinite."""
        assert not parse_version_range("1.0").is_infinite
        assert parse_version_range("0.0.0").is_infinite


class TestIntersect:
    """Tests for VersionRange.intersect."""

    def test_overlapping(self):
        """Test intersecting overlapping ranges keeps the tighter bounds."""
        a = parse_version_range("[1.0,3.0)")
        b = parse_version_range("[2.0,4.0]")
        result = a.intersect(b)
        assert result == VersionRange(Version(2), Version(3), True, False)

    def test_with_infinite(self):
        """Test that intersecting with the infinite range is identity."""
        r = parse_version_range("[1.0,2.0)")
        assert INFINITE_RANGE.intersect(r) == r

    def test_same_bound_inclusiveness(self):
        """Test that equal bounds keep the exclusive flag."""
        a = parse_version_range("[1.0,2.0]")
        b = parse_version_range("(1.0,2.0)")
        result = a.intersect(b)
        assert not result.low_inclusive
        assert not result.high_inclusive

    def test_disjoint_raises(self):
        """Test that disjoint ranges raise EmptyRangeError."""
        with pytest.raises(EmptyRangeError):
            parse_version_range("[1.0,2.0)").intersect(parse_version_range("[2.0,3.0)"))


# =============================================================================
# Property-Based Tests
# =============================================================================

small_versions = st.builds(
    Version,
    major=st.integers(min_value=0, max_value=5),
    minor=st.integers(min_value=0, max_value=5),
    micro=st.integers(min_value=0, max_value=5),
)


@st.composite
def ranges(draw):
    """Generate non-empty bounded or unbounded ranges."""
    low = draw(small_versions)
    if draw(st.booleans()):
        return VersionRange(low=low)
    high = draw(small_versions.filter(lambda v: v > low))
    return VersionRange(low, high, draw(st.booleans()), draw(st.booleans()))


class TestRangeProperties:
    """Property-based tests for version ranges.

    Feature: bundle-version, Property 2: Intersection semantics
    """

    @given(a=ranges(), b=ranges(), version=small_versions)
    @settings(max_examples=100)
    def test_intersection_includes_exactly_common_versions(self, a, b, version):
        """
        *For any* two ranges, a version SHALL be in their intersection
        exactly when it is in both.
        """
        try:
            result = a.intersect(b)
        except EmptyRangeError:
            assert not (a.includes(version) and b.includes(version))
        else:
            assert result.includes(version) == (a.includes(version) and b.includes(version))
