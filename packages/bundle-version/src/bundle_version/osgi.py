# SPDX-License-Identifier: MIT
"""OSGi version and version-range parsing.

Supports the OSGi ``major[.minor[.micro[.qualifier]]]`` format:
- Missing numeric components default to 0: ``1`` is ``1.0.0``
- Qualifier: letters, digits, ``_`` and ``-`` (e.g. ``qualifier``, ``v20120606-1310``)

Ranges use interval notation (``[1.0,2.0)``) or a bare version that means
"this version or later".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

VERSION_PATTERN = re.compile(
    r"^(?P<major>[0-9]+)"
    r"(?:\.(?P<minor>[0-9]+)"
    r"(?:\.(?P<micro>[0-9]+)"
    r"(?:\.(?P<qualifier>[A-Za-z0-9_-]+))?)?)?$"
)


class InvalidVersionError(Exception):
    """Raised when a version string does not follow the OSGi version syntax."""

    def __init__(self, version: str, message: str = ""):
        self.version = version
        self.message = message or f"Invalid OSGi version: {version}"
        super().__init__(self.message)


class InvalidVersionRangeError(Exception):
    """Raised when a version range string cannot be parsed."""

    def __init__(self, range_text: str, message: str = ""):
        self.range_text = range_text
        self.message = message or f"Invalid version range: {range_text}"
        super().__init__(self.message)


class EmptyRangeError(ValueError):
    """Raised when the intersection of two version ranges is empty."""


@dataclass(frozen=True, slots=True, order=True)
class Version:
    """Represents a parsed OSGi version.

    Ordering compares major, minor and micro numerically and the qualifier
    as a plain string, as the OSGi framework does.

    Attributes:
        major: Major version number
        minor: Minor version number
        micro: Micro version number
        qualifier: Free-form qualifier, empty when absent
    """

    major: int
    minor: int = 0
    micro: int = 0
    qualifier: str = ""

    def __str__(self) -> str:
        version = f"{self.major}.{self.minor}.{self.micro}"
        if self.qualifier:
            version += f".{self.qualifier}"
        return version

    @property
    def base_version(self) -> str:
        """Return ``major.minor.micro`` without the qualifier."""
        return f"{self.major}.{self.minor}.{self.micro}"

    @property
    def has_qualifier(self) -> bool:
        return bool(self.qualifier)


EMPTY_VERSION = Version(0, 0, 0)


def parse_version(version_string: str) -> Version:
    """Parse an OSGi version string into a Version object.

    Args:
        version_string: A string of the form ``major[.minor[.micro[.qualifier]]]``

    Returns:
        A Version object with parsed components

    Raises:
        InvalidVersionError: If the string is not a valid OSGi version

    Examples:
        >>> parse_version("1")
        Version(major=1, minor=0, micro=0, qualifier='')

        >>> parse_version("1.0.0.qualifier")
        Version(major=1, minor=0, micro=0, qualifier='qualifier')
    """
    if not isinstance(version_string, str):
        raise InvalidVersionError(
            str(version_string), f"Version must be a string, got {type(version_string).__name__}"
        )

    version_string = version_string.strip()
    if not version_string:
        raise InvalidVersionError(version_string, "Version string cannot be empty")

    match = VERSION_PATTERN.match(version_string)
    if not match:
        raise InvalidVersionError(version_string)

    return Version(
        major=int(match.group("major")),
        minor=int(match.group("minor") or 0),
        micro=int(match.group("micro") or 0),
        qualifier=match.group("qualifier") or "",
    )


def is_valid_version(version_string: str) -> bool:
    """Check if a string is a valid OSGi version."""
    if not isinstance(version_string, str):
        return False
    return VERSION_PATTERN.match(version_string.strip()) is not None


@dataclass(frozen=True, slots=True)
class VersionRange:
    """An interval of OSGi versions.

    A missing ``high`` bound means the range is unbounded above. A missing
    ``low`` bound only appears in hand-built ranges; parsed ranges always
    have one.

    Attributes:
        low: Lower bound, or None
        high: Upper bound, or None
        low_inclusive: Whether ``low`` itself is part of the range
        high_inclusive: Whether ``high`` itself is part of the range
    """

    low: Optional[Version] = EMPTY_VERSION
    high: Optional[Version] = None
    low_inclusive: bool = True
    high_inclusive: bool = False

    def __str__(self) -> str:
        if self.high is None and self.low is not None and self.low_inclusive:
            return str(self.low)
        low = "" if self.low is None else str(self.low)
        high = "" if self.high is None else str(self.high)
        return (
            f"{'[' if self.low_inclusive else '('}{low},{high}{']' if self.high_inclusive else ')'}"
        )

    @property
    def is_infinite(self) -> bool:
        """Return True for ``[0.0.0,)``, the range that accepts every version."""
        return (
            self.low in (None, EMPTY_VERSION)
            and self.low_inclusive
            and self.high is None
        )

    @property
    def is_empty(self) -> bool:
        if self.low is None or self.high is None:
            return False
        if self.low > self.high:
            return True
        return self.low == self.high and not (self.low_inclusive and self.high_inclusive)

    def includes(self, version: Version) -> bool:
        """Return True if ``version`` lies inside the range."""
        if self.low is not None:
            if version < self.low or (version == self.low and not self.low_inclusive):
                return False
        if self.high is not None:
            if version > self.high or (version == self.high and not self.high_inclusive):
                return False
        return True

    def intersect(self, other: VersionRange) -> VersionRange:
        """Return the range of versions included in both ranges.

        Raises:
            EmptyRangeError: If the ranges do not overlap
        """
        low, low_inclusive = _tighter_low(self, other)
        high, high_inclusive = _tighter_high(self, other)
        result = VersionRange(
            low=low,
            high=high,
            low_inclusive=low_inclusive,
            high_inclusive=high_inclusive,
        )
        if result.is_empty:
            raise EmptyRangeError(f"Version ranges {self} and {other} do not intersect")
        return result


INFINITE_RANGE = VersionRange()


def _tighter_low(a: VersionRange, b: VersionRange) -> tuple[Optional[Version], bool]:
    if a.low is None:
        return b.low, b.low_inclusive
    if b.low is None:
        return a.low, a.low_inclusive
    if a.low == b.low:
        return a.low, a.low_inclusive and b.low_inclusive
    return (a.low, a.low_inclusive) if a.low > b.low else (b.low, b.low_inclusive)


def _tighter_high(a: VersionRange, b: VersionRange) -> tuple[Optional[Version], bool]:
    if a.high is None:
        return b.high, b.high_inclusive
    if b.high is None:
        return a.high, a.high_inclusive
    if a.high == b.high:
        return a.high, a.high_inclusive and b.high_inclusive
    return (a.high, a.high_inclusive) if a.high < b.high else (b.high, b.high_inclusive)


def parse_version_range(range_text: str) -> VersionRange:
    """Parse an OSGi version range.

    Args:
        range_text: Interval notation (``[1.0,2.0)``) or a bare version

    Returns:
        The parsed VersionRange

    Raises:
        InvalidVersionRangeError: If the range is malformed or empty

    Examples:
        >>> str(parse_version_range("[1.0,2.0)"))
        '[1.0.0,2.0.0)'
        >>> parse_version_range("1.2").high is None
        True
    """
    if not isinstance(range_text, str):
        raise InvalidVersionRangeError(
            str(range_text), f"Version range must be a string, got {type(range_text).__name__}"
        )

    text = range_text.strip()
    if not text:
        raise InvalidVersionRangeError(range_text, "Version range cannot be empty")

    if text[0] not in "[(":
        try:
            return VersionRange(low=parse_version(text))
        except InvalidVersionError as e:
            raise InvalidVersionRangeError(range_text, e.message) from e

    if text[-1] not in ")]":
        raise InvalidVersionRangeError(range_text, "Version range must end with ')' or ']'")

    bounds = text[1:-1].split(",")
    if len(bounds) != 2:
        raise InvalidVersionRangeError(range_text, "Version range must have exactly two bounds")

    try:
        low = parse_version(bounds[0])
        high = parse_version(bounds[1])
    except InvalidVersionError as e:
        raise InvalidVersionRangeError(range_text, e.message) from e

    result = VersionRange(
        low=low,
        high=high,
        low_inclusive=text[0] == "[",
        high_inclusive=text[-1] == "]",
    )
    if result.is_empty:
        raise InvalidVersionRangeError(range_text, "Version range is empty")
    return result
