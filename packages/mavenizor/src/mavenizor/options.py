# SPDX-License-Identifier: MIT
"""Layered option lookup keyed by bundle patterns.

Options are a flat, ordered string map. Keys carry a *suffix* naming the
option (``@requirements.erase``) and a *prefix* selecting the bundles it
applies to, either as an exact identity (``org.foo_1.0.0``, ``org.foo``) or as
a pattern (``org.**,!org.foo.internal``).

Example:
    >>> options = OptionSet({"org.**@requirements.optional": "org.eclipse.**"})
    >>> resolve(bundle, options, "@requirements.optional", CompareMode.MATCH_PATTERN)
    {'org.**@requirements.optional': 'org.eclipse.**'}
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from enum import Enum
from typing import Optional

from .errors import ValidationError
from .model import BundleNode, Requirement
from .patterns import compile_pattern

# Option suffixes read during dependency assembly
EMBEDDED_LIBRARIES_PROVIDED = "@embeddedLibraries.provided"
EMBEDDED_LIBRARIES_OPTIONAL = "@embeddedLibraries.optional"
REQUIREMENTS_ERASE = "@requirements.erase"
REQUIREMENTS_PROVIDED = "@requirements.provided"
REQUIREMENTS_OPTIONAL = "@requirements.optional"


class CompareMode(Enum):
    """How option keys are compared against a bundle."""

    MATCH_PATTERN = "match_pattern"
    EQUAL_VALUE = "equal_value"


class OptionSet(MutableMapping):
    """An insertion-ordered string-to-string map of options.

    Re-assigning an existing key keeps its original position.
    """

    def __init__(self, entries: Optional[Mapping[str, str] | Iterable[tuple[str, str]]] = None):
        self._entries: dict[str, str] = {}
        if entries is not None:
            self.update(entries)

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._entries[str(key)] = str(value)

    def __delitem__(self, key: str) -> None:
        del self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"OptionSet({self._entries!r})"


def is_bundle_match(bundle: BundleNode, pattern: str) -> bool:
    """Return True if ``pattern`` selects ``bundle``.

    A pattern whose excludes match the bare symbolic name never selects the
    bundle; otherwise either ``<sn>_<version>`` or ``<sn>`` must match.
    """
    compiled = compile_pattern(pattern)
    if compiled.is_excluded(bundle.symbolic_name):
        return False
    return compiled.matches(str(bundle)) or compiled.matches(bundle.symbolic_name)


def _check_bundle(bundle: Optional[BundleNode]) -> BundleNode:
    if bundle is None or not bundle.symbolic_name:
        raise ValidationError("Bundle must have a symbolic name")
    return bundle


def resolve(
    bundle: BundleNode,
    options: Mapping[str, str],
    suffix_key: str,
    mode: CompareMode,
) -> dict[str, str]:
    """Resolve the options applying to a bundle.

    Args:
        bundle: The bundle to resolve options for
        options: The option map
        suffix_key: The option name, matched as a key suffix
        mode: MATCH_PATTERN to collect every pattern key selecting the
            bundle, EQUAL_VALUE for the first exact key hit

    Returns:
        Matching entries in option order (at most one for EQUAL_VALUE)

    Raises:
        ValidationError: If the bundle has no symbolic name
        PatternSyntaxError: If a key prefix is not a valid pattern
    """
    bundle = _check_bundle(bundle)

    if mode is CompareMode.EQUAL_VALUE:
        for key in (f"{bundle}{suffix_key}", f"{bundle.symbolic_name}{suffix_key}", suffix_key):
            value = options.get(key)
            if value is not None:
                return {key: value}
        return {}

    result: dict[str, str] = {}
    for key, value in options.items():
        if not key.endswith(suffix_key):
            continue
        pattern = key[: len(key) - len(suffix_key)]
        if is_bundle_match(bundle, pattern):
            result[key] = value
    return result


def parse_boolean(value: Optional[str]) -> bool:
    """Parse an option value: ``true`` in any case is True, anything else False."""
    return value is not None and value.strip().lower() == "true"


def boolean_option(
    bundle: BundleNode,
    options: Mapping[str, str],
    suffix_key: str,
    default: bool = False,
) -> bool:
    """Return the first matching option parsed as a boolean, or ``default``."""
    for value in resolve(bundle, options, suffix_key, CompareMode.MATCH_PATTERN).values():
        return parse_boolean(value)
    return default


def requirement_matches(
    requirement: Requirement,
    options: Mapping[str, str],
    suffix_key: str,
) -> bool:
    """Check whether a requirement is selected by an option.

    Each option selecting the requiring bundle holds a pattern that is tested
    against the required bundle; the first match wins.

    Example:
        With ``{"org.**@requirements.erase": "org.eclipse.**"}``, every
        requirement from an ``org.`` bundle onto an ``org.eclipse.`` bundle
        matches.
    """
    entries = resolve(requirement.from_bundle, options, suffix_key, CompareMode.MATCH_PATTERN)
    target = _check_bundle(requirement.to_bundle)
    return any(is_bundle_match(target, pattern) for pattern in entries.values())
