# SPDX-License-Identifier: MIT
"""Glob patterns over dot-separated bundle names.

Pattern syntax:
- Alternatives are separated by ``,``
- A leading ``!`` marks an exclude; a matching exclude vetoes the pattern
- ``*`` matches any characters within one ``.``-delimited segment
- ``**`` as a whole segment matches any number of segments, including none
- A pattern without include alternatives includes everything

Patterns are compiled once and cached.

Example:
    >>> pattern = compile_pattern("org.**,!org.sourcepit.**")
    >>> pattern.matches("org.eclipse.emf")
    True
    >>> pattern.matches("org.sourcepit.common")
    False
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

from .errors import PatternSyntaxError

SEPARATOR = "."
ALTERNATIVE_SEPARATOR = ","
EXCLUDE_PREFIX = "!"
ANY_SEGMENTS = "**"


@dataclass(frozen=True, slots=True)
class AnySegments:
    """Matches zero or more whole segments."""

    def __str__(self) -> str:
        return ANY_SEGMENTS


@dataclass(frozen=True, slots=True)
class SegmentGlob:
    """Matches exactly one segment against a ``*`` glob."""

    text: str
    regex: re.Pattern

    def matches(self, segment: str) -> bool:
        return self.regex.fullmatch(segment) is not None

    def __str__(self) -> str:
        return self.text


Segment = Union[AnySegments, SegmentGlob]


@dataclass(frozen=True, slots=True)
class Alternative:
    """One signed alternative of a pattern: a list of segment matchers."""

    segments: tuple[Segment, ...]
    exclude: bool = False

    def matches(self, path: str) -> bool:
        return _match_segments(self.segments, tuple(path.split(SEPARATOR)))

    def __str__(self) -> str:
        body = SEPARATOR.join(str(s) for s in self.segments)
        return f"{EXCLUDE_PREFIX}{body}" if self.exclude else body


@dataclass(frozen=True, slots=True)
class PathPattern:
    """A compiled pattern: include and exclude alternatives.

    Attributes:
        text: The source text of the pattern
        includes: Include alternatives, in source order
        excludes: Exclude alternatives, in source order
    """

    text: str
    includes: tuple[Alternative, ...] = ()
    excludes: tuple[Alternative, ...] = ()

    def is_excluded(self, path: str) -> bool:
        """Return True if any exclude alternative matches ``path``."""
        return any(alt.matches(path) for alt in self.excludes)

    def is_included(self, path: str) -> bool:
        """Return True if ``path`` matches an include, or there are none."""
        if not self.includes:
            return True
        return any(alt.matches(path) for alt in self.includes)

    def matches(self, path: str) -> bool:
        """Return True if ``path`` is included and not excluded."""
        return not self.is_excluded(path) and self.is_included(path)

    def __str__(self) -> str:
        return self.text


def _match_segments(pattern: tuple[Segment, ...], path: tuple[str, ...]) -> bool:
    # positions reachable in path after consuming the pattern so far
    positions = {0}
    for segment in pattern:
        if not positions:
            return False
        if isinstance(segment, AnySegments):
            positions = set(range(min(positions), len(path) + 1))
        else:
            positions = {
                pos + 1
                for pos in positions
                if pos < len(path) and segment.matches(path[pos])
            }
    return len(path) in positions


def _compile_segment(pattern: str, text: str) -> Segment:
    if not text:
        raise PatternSyntaxError(pattern, "empty segment")
    if text == ANY_SEGMENTS:
        return AnySegments()
    if ANY_SEGMENTS in text:
        raise PatternSyntaxError(pattern, f"'**' must be a whole segment, got '{text}'")
    regex = re.compile(".*".join(re.escape(part) for part in text.split("*")))
    return SegmentGlob(text, regex)


def _compile_alternative(pattern: str, text: str) -> Alternative:
    exclude = text.startswith(EXCLUDE_PREFIX)
    body = text[len(EXCLUDE_PREFIX) :].strip() if exclude else text
    if not body:
        if exclude:
            raise PatternSyntaxError(pattern, "'!' must be followed by a pattern")
        raise PatternSyntaxError(pattern, "empty alternative")
    segments = tuple(_compile_segment(pattern, s) for s in body.split(SEPARATOR))
    return Alternative(segments, exclude)


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> PathPattern:
    """Compile a pattern string.

    Args:
        pattern: Comma-separated alternatives; the empty string matches
            every path

    Returns:
        The compiled PathPattern

    Raises:
        PatternSyntaxError: On an empty alternative, a lone ``!``, an empty
            segment or ``**`` mixed with other characters in a segment
    """
    text = pattern.strip()
    if not text:
        return PathPattern(pattern)

    includes: list[Alternative] = []
    excludes: list[Alternative] = []
    for raw in text.split(ALTERNATIVE_SEPARATOR):
        alternative = _compile_alternative(pattern, raw.strip())
        (excludes if alternative.exclude else includes).append(alternative)

    return PathPattern(pattern, tuple(includes), tuple(excludes))


def matches(pattern: str, path: str) -> bool:
    """Shorthand for ``compile_pattern(pattern).matches(path)``."""
    return compile_pattern(pattern).matches(path)
