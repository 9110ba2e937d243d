# SPDX-License-Identifier: MIT
"""Maven version ordering, version ranges and snapshot detection.

Ordering follows Maven's ComparableVersion rules:
- Versions split into items on ``.``, ``-`` and digit/letter transitions
- Qualifier ordering: alpha < beta < milestone < rc < snapshot < release < sp
- Unknown qualifiers sort after the known ones, alphabetically
- Trailing zero and release items are ignored (``1.0.0`` == ``1``)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import cmp_to_key, total_ordering
from typing import Optional, Union

SNAPSHOT_SUFFIX = "SNAPSHOT"

# Timestamped snapshot form "<base>-yyyyMMdd.HHmmss-<build>"
TIMESTAMP_SNAPSHOT_PATTERN = re.compile(r"^(.*)-([0-9]{8}.[0-9]{6})-([0-9]+)$")

_QUALIFIERS = ["alpha", "beta", "milestone", "rc", "snapshot", "", "sp"]

_ALIASES = {
    "ga": "",
    "final": "",
    "release": "",
    "cr": "rc",
}

_SHORT_QUALIFIERS = {"a": "alpha", "b": "beta", "m": "milestone"}

_RELEASE_INDEX = str(_QUALIFIERS.index(""))


class InvalidVersionRangeError(Exception):
    """Raised when a Maven version range specification is malformed."""

    def __init__(self, spec: str, message: str = ""):
        self.spec = spec
        self.message = message or f"Invalid Maven version range: {spec}"
        super().__init__(self.message)


def _comparable_qualifier(qualifier: str) -> str:
    if qualifier in _QUALIFIERS:
        return str(_QUALIFIERS.index(qualifier))
    return f"{len(_QUALIFIERS)}-{qualifier}"


# ============================================================================
# Version items
# ============================================================================


class _IntItem:
    __slots__ = ("value",)

    def __init__(self, value: int = 0):
        self.value = value

    def is_null(self) -> bool:
        return self.value == 0

    def compare(self, other: Optional[_Item]) -> int:
        if other is None:
            return 0 if self.value == 0 else 1
        if isinstance(other, _IntItem):
            return (self.value > other.value) - (self.value < other.value)
        return 1

    def __str__(self) -> str:
        return str(self.value)


class _StringItem:
    __slots__ = ("value",)

    def __init__(self, value: str, followed_by_digit: bool = False):
        if followed_by_digit and len(value) == 1:
            value = _SHORT_QUALIFIERS.get(value, value)
        self.value = _ALIASES.get(value, value)

    def is_null(self) -> bool:
        return _comparable_qualifier(self.value) == _RELEASE_INDEX

    def compare(self, other: Optional[_Item]) -> int:
        left = _comparable_qualifier(self.value)
        if other is None:
            return (left > _RELEASE_INDEX) - (left < _RELEASE_INDEX)
        if isinstance(other, _StringItem):
            right = _comparable_qualifier(other.value)
            return (left > right) - (left < right)
        return -1

    def __str__(self) -> str:
        return self.value


class _ListItem(list):
    def is_null(self) -> bool:
        return len(self) == 0

    def normalize(self) -> None:
        for i in range(len(self) - 1, -1, -1):
            item = self[i]
            if item.is_null():
                del self[i]
            elif not isinstance(item, _ListItem):
                break

    def compare(self, other: Optional[_Item]) -> int:
        if other is None:
            if not self:
                return 0
            return self[0].compare(None)
        if isinstance(other, _IntItem):
            return -1
        if isinstance(other, _StringItem):
            return 1

        for i in range(max(len(self), len(other))):
            left = self[i] if i < len(self) else None
            right = other[i] if i < len(other) else None
            if left is None:
                result = 0 if right is None else -right.compare(None)
            else:
                result = left.compare(right)
            if result != 0:
                return result
        return 0

    def __str__(self) -> str:
        parts = []
        for item in self:
            if parts:
                parts.append("-" if isinstance(item, _ListItem) else ".")
            parts.append(str(item))
        return "".join(parts)


_Item = Union[_IntItem, _StringItem, _ListItem]


def _parse_item(is_digit: bool, text: str) -> _Item:
    if is_digit:
        return _IntItem(int(text))
    return _StringItem(text, False)


def _parse_items(version: str) -> _ListItem:
    version = version.lower()
    root = _ListItem()
    current = root
    stack = [root]
    is_digit = False
    start = 0

    for i, char in enumerate(version):
        if char in ".-":
            if i == start:
                current.append(_IntItem(0))
            else:
                current.append(_parse_item(is_digit, version[start:i]))
            start = i + 1
            if char == "-":
                sub = _ListItem()
                current.append(sub)
                current = sub
                stack.append(sub)
        elif char.isdigit():
            if not is_digit and i > start:
                current.append(_StringItem(version[start:i], True))
                start = i
                sub = _ListItem()
                current.append(sub)
                current = sub
                stack.append(sub)
            is_digit = True
        else:
            if is_digit and i > start:
                current.append(_parse_item(True, version[start:i]))
                start = i
                sub = _ListItem()
                current.append(sub)
                current = sub
                stack.append(sub)
            is_digit = False

    if len(version) > start:
        current.append(_parse_item(is_digit, version[start:]))

    while stack:
        stack.pop().normalize()

    return root


# ============================================================================
# MavenVersion
# ============================================================================


@total_ordering
class MavenVersion:
    """A Maven version string with ComparableVersion ordering.

    Two versions are equal when their normalized item lists compare equal,
    so ``MavenVersion("1") == MavenVersion("1.0.0")``.

    Attributes:
        value: The original version string
        canonical: The normalized representation used for equality and hashing
    """

    __slots__ = ("value", "_items", "canonical")

    def __init__(self, value: str):
        if not isinstance(value, str):
            raise TypeError(f"Version must be a string, got {type(value).__name__}")
        self.value = value
        self._items = _parse_items(value)
        self.canonical = str(self._items)

    def compare(self, other: MavenVersion) -> int:
        return self._items.compare(other._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MavenVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: MavenVersion) -> bool:
        if not isinstance(other, MavenVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash(self.canonical)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"MavenVersion({self.value!r})"


def _coerce(version: Union[str, MavenVersion]) -> MavenVersion:
    if isinstance(version, MavenVersion):
        return version
    return MavenVersion(version)


def compare_maven_versions(
    v1: Union[str, MavenVersion],
    v2: Union[str, MavenVersion],
) -> int:
    """Compare two Maven versions.

    Args:
        v1: First version (string or MavenVersion)
        v2: Second version (string or MavenVersion)

    Returns:
        -1 if v1 < v2, 0 if v1 == v2, 1 if v1 > v2

    Examples:
        >>> compare_maven_versions("1.0-alpha-1", "1.0")
        -1
        >>> compare_maven_versions("1.0.0", "1")
        0
        >>> compare_maven_versions("1.0-sp", "1.0")
        1
    """
    result = _coerce(v1).compare(_coerce(v2))
    return (result > 0) - (result < 0)


def maven_version_key(version: Union[str, MavenVersion]):
    """Return a sort key for Maven versions.

    Example:
        >>> sorted(["1.0", "1.0-rc1", "1.0-alpha"], key=maven_version_key)
        ['1.0-alpha', '1.0-rc1', '1.0']
    """
    return _VersionKey(_coerce(version))


_VersionKey = cmp_to_key(lambda a, b: a.compare(b))


def is_maven_snapshot(version: Optional[str]) -> bool:
    """Return True if ``version`` names a Maven snapshot.

    Matches a case-insensitive ``SNAPSHOT`` suffix or the timestamped
    ``<base>-yyyyMMdd.HHmmss-<build>`` form of deployed snapshots.
    """
    if not version:
        return False
    if version[-len(SNAPSHOT_SUFFIX):].upper() == SNAPSHOT_SUFFIX:
        return True
    return TIMESTAMP_SNAPSHOT_PATTERN.match(version) is not None


# ============================================================================
# Version ranges
# ============================================================================


@dataclass(frozen=True)
class Restriction:
    """One interval of a Maven version range. A None bound is unbounded."""

    lower: Optional[MavenVersion] = None
    lower_inclusive: bool = False
    upper: Optional[MavenVersion] = None
    upper_inclusive: bool = False

    def contains(self, version: MavenVersion) -> bool:
        if self.lower is not None:
            result = self.lower.compare(version)
            if result > 0 or (result == 0 and not self.lower_inclusive):
                return False
        if self.upper is not None:
            result = self.upper.compare(version)
            if result < 0 or (result == 0 and not self.upper_inclusive):
                return False
        return True

    def __str__(self) -> str:
        lower = "" if self.lower is None else str(self.lower)
        upper = "" if self.upper is None else str(self.upper)
        if self.lower is not None and self.lower == self.upper and self.lower_inclusive:
            return f"[{lower}]"
        return (
            f"{'[' if self.lower_inclusive else '('}{lower},{upper}"
            f"{']' if self.upper_inclusive else ')'}"
        )


EVERYTHING = Restriction()


@dataclass(frozen=True)
class MavenVersionRange:
    """A parsed Maven version range specification.

    A plain version such as ``1.0`` is a *recommended* version with an
    unrestricted range; bracketed specs produce one or more restrictions.
    """

    spec: str
    restrictions: tuple[Restriction, ...] = field(default_factory=tuple)
    recommended: Optional[MavenVersion] = None

    def contains(self, version: Union[str, MavenVersion]) -> bool:
        """Return True if ``version`` satisfies the range.

        A recommended version only matches itself; otherwise any restriction
        containing the version is enough.
        """
        version = _coerce(version)
        if self.recommended is not None:
            return self.recommended == version
        return any(r.contains(version) for r in self.restrictions)

    def __str__(self) -> str:
        return self.spec


def _parse_restriction(spec: str) -> Restriction:
    lower_inclusive = spec.startswith("[")
    upper_inclusive = spec.endswith("]")
    process = spec[1:-1].strip()

    if "," not in process:
        if not (lower_inclusive and upper_inclusive):
            raise InvalidVersionRangeError(
                spec, f"Single version must be surrounded by []: {spec}"
            )
        version = MavenVersion(process)
        return Restriction(version, True, version, True)

    lower_text, upper_text = (part.strip() for part in process.split(",", 1))
    if lower_text == upper_text:
        raise InvalidVersionRangeError(spec, f"Range cannot have identical boundaries: {spec}")

    lower = MavenVersion(lower_text) if lower_text else None
    upper = MavenVersion(upper_text) if upper_text else None
    if lower is not None and upper is not None and upper < lower:
        raise InvalidVersionRangeError(spec, f"Range defies version ordering: {spec}")

    return Restriction(lower, lower_inclusive, upper, upper_inclusive)


def parse_maven_version_range(spec: str) -> MavenVersionRange:
    """Parse a Maven version range specification.

    Args:
        spec: A range such as ``[1.0,2.0)``, ``(,1.0],[1.2,)`` or a plain
            recommended version such as ``1.0``

    Returns:
        The parsed MavenVersionRange

    Raises:
        InvalidVersionRangeError: If the specification is malformed

    Examples:
        >>> parse_maven_version_range("[0,1]").contains("1.0.0-SNAPSHOT")
        True
        >>> parse_maven_version_range("1.0").recommended
        MavenVersion('1.0')
    """
    if not isinstance(spec, str):
        raise InvalidVersionRangeError(str(spec), "Version range must be a string")

    process = spec.strip()
    if not process:
        raise InvalidVersionRangeError(spec, "Version range cannot be empty")

    restrictions: list[Restriction] = []
    upper_bound: Optional[MavenVersion] = None

    while process.startswith(("[", "(")):
        close_paren = process.find(")")
        close_bracket = process.find("]")
        index = close_bracket
        if close_bracket < 0 or (0 <= close_paren < close_bracket):
            index = close_paren
        if index < 0:
            raise InvalidVersionRangeError(spec, f"Unbounded range: {spec}")

        restriction = _parse_restriction(process[: index + 1])
        if upper_bound is not None:
            if restriction.lower is None or restriction.lower < upper_bound:
                raise InvalidVersionRangeError(spec, f"Ranges overlap: {spec}")
        restrictions.append(restriction)
        upper_bound = restriction.upper

        process = process[index + 1 :].strip()
        if process.startswith(","):
            process = process[1:].strip()

    if process:
        if restrictions:
            raise InvalidVersionRangeError(
                spec, f"Only fully-qualified sets allowed in multiple set scenario: {spec}"
            )
        return MavenVersionRange(spec, (EVERYTHING,), MavenVersion(process))

    return MavenVersionRange(spec, tuple(restrictions))
