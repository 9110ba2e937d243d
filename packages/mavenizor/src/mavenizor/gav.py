# SPDX-License-Identifier: MIT
"""Derivation of Maven coordinates from OSGi bundle identities.

- groupId: the first two name segments, or three under a deep-group prefix
  (``org.apache.commons.io`` -> ``org.apache.commons``), unless a configured
  mapping applies first; an optional global prefix is prepended
- artifactId: the symbolic name, or the file stem for embedded libraries
- version: ``major.minor.micro`` plus ``-SNAPSHOT`` or ``-<qualifier>``
- version ranges: OSGi ranges rewritten in Maven notation
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Optional

from bundle_version import Version, VersionRange, is_maven_snapshot

from .errors import ValidationError
from .model import BundleNode
from .patterns import compile_pattern

SNAPSHOT_QUALIFIER = "SNAPSHOT"

GROUP_2_PATTERN = re.compile(r"^(\w*\.\w*)(\..*)?$", re.ASCII)
GROUP_3_PATTERN = re.compile(r"^(\w*\.\w*\.\w*)(\..*)?$", re.ASCII)

DEFAULT_GROUP3_PREFIXES = ("net.sf", "org.apache", "org.codehaus", "org.tigris", "org.sourcepit")

# ${name} placeholders; a leading backslash keeps the placeholder literally
_PLACEHOLDER_PATTERN = re.compile(r"(\\)?\$\{([^}]+)\}")

SnapshotRule = Callable[[BundleNode, Version], bool]


def osgi_snapshot_rule(bundle: BundleNode, version: Version) -> bool:
    """Treat the unexpanded build qualifier ``qualifier`` as a snapshot."""
    return version.qualifier == "qualifier"


def maven_snapshot_rule(bundle: BundleNode, version: Version) -> bool:
    """Treat qualifiers that Maven would read as snapshots as snapshots."""
    return bool(version.qualifier) and is_maven_snapshot(f"1-{version.qualifier}")


DEFAULT_SNAPSHOT_RULES: tuple[SnapshotRule, ...] = (osgi_snapshot_rule, maven_snapshot_rule)


def interpolate(template: str, properties: Mapping[str, str]) -> str:
    """Replace ``${name}`` placeholders in ``template``.

    Unknown placeholders are left as they are and ``\\${name}`` yields the
    literal ``${name}``.

    Example:
        >>> interpolate("srcpit_${bundle.groupId}", {"bundle.groupId": "org.eclipse"})
        'srcpit_org.eclipse'
    """

    def replace(match: re.Match) -> str:
        escaped, name = match.group(1), match.group(2)
        if escaped:
            return f"${{{name}}}"
        return properties.get(name, match.group(0))

    return _PLACEHOLDER_PATTERN.sub(replace, template)


def _range_bound(version: Version) -> str:
    # trailing zero components and qualifiers are dropped
    if version.micro > 0:
        return f"{version.major}.{version.minor}.{version.micro}"
    if version.minor > 0:
        return f"{version.major}.{version.minor}"
    return str(version.major)


class GAVStrategy:
    """Maps bundle identities onto Maven coordinates.

    Args:
        snapshot_rules: Predicates deciding whether a version is a snapshot
        group_id_prefix: Prefix prepended to every groupId
        trim_qualifiers: Drop qualifiers that are not snapshots
        group3_prefixes: Additional deep-group prefixes
        group_id_mappings: Ordered pattern -> groupId template mappings
    """

    def __init__(
        self,
        snapshot_rules: Iterable[SnapshotRule] = DEFAULT_SNAPSHOT_RULES,
        group_id_prefix: Optional[str] = None,
        trim_qualifiers: bool = False,
        group3_prefixes: Iterable[str] = (),
        group_id_mappings: Optional[Mapping[str, str]] = None,
    ):
        self.snapshot_rules = tuple(snapshot_rules)
        if group_id_prefix and not group_id_prefix.endswith("."):
            group_id_prefix += "."
        self.group_id_prefix = group_id_prefix or None
        self.trim_qualifiers = trim_qualifiers
        self.group3_prefixes = tuple(dict.fromkeys((*DEFAULT_GROUP3_PREFIXES, *group3_prefixes)))
        self.group_id_mappings = dict(group_id_mappings or {})

    # ------------------------------------------------------------------
    # groupId
    # ------------------------------------------------------------------

    def group_id(self, bundle: BundleNode) -> str:
        """Derive the groupId of a bundle.

        Raises:
            ValidationError: If the bundle has no symbolic name
        """
        symbolic_name = self._symbolic_name(bundle)
        group_id = self._mapped_group_id(symbolic_name)
        if group_id is None:
            group_id = self._derive_group_id(symbolic_name)
        if self.group_id_prefix:
            group_id = self.group_id_prefix + group_id
        return group_id

    def _mapped_group_id(self, symbolic_name: str) -> Optional[str]:
        for pattern, template in self.group_id_mappings.items():
            if compile_pattern(pattern).matches(symbolic_name):
                return interpolate(
                    template,
                    {
                        "bundle.groupId": self._derive_group_id(symbolic_name),
                        "bundle.symbolicName": symbolic_name,
                    },
                )
        return None

    def _derive_group_id(self, symbolic_name: str) -> str:
        pattern = GROUP_2_PATTERN
        if any(symbolic_name.startswith(prefix) for prefix in self.group3_prefixes):
            pattern = GROUP_3_PATTERN
        match = pattern.match(symbolic_name)
        return match.group(1) if match else symbolic_name

    # ------------------------------------------------------------------
    # artifactId
    # ------------------------------------------------------------------

    def artifact_id(self, bundle: BundleNode, library_entry: Optional[str] = None) -> str:
        """Derive the artifactId of a bundle or of one of its embedded libraries."""
        symbolic_name = self._symbolic_name(bundle)
        if library_entry is None:
            return symbolic_name
        return PurePosixPath(library_entry).stem

    # ------------------------------------------------------------------
    # versions
    # ------------------------------------------------------------------

    def is_snapshot(self, bundle: BundleNode, version: Version) -> bool:
        return any(rule(bundle, version) for rule in self.snapshot_rules)

    def _qualifier(self, bundle: BundleNode, version: Version) -> Optional[str]:
        if self.is_snapshot(bundle, version):
            return SNAPSHOT_QUALIFIER
        if not self.trim_qualifiers and version.qualifier:
            return version.qualifier
        return None

    def maven_version(self, bundle: BundleNode, version: Optional[Version] = None) -> str:
        """Derive the Maven version of a bundle.

        Examples:
            ``1.0.0.qualifier`` -> ``1.0.0-SNAPSHOT``,
            ``1.0.0.alpha-1`` -> ``1.0.0-alpha-1``,
            ``1`` -> ``1.0.0``
        """
        self._symbolic_name(bundle)
        version = bundle.version if version is None else version
        qualifier = self._qualifier(bundle, version)
        result = version.base_version
        if qualifier:
            result += f"-{qualifier}"
        return result

    def maven_version_range(self, bundle: BundleNode, version_range: Optional[VersionRange]) -> str:
        """Translate an OSGi version range into Maven notation.

        A range without a high bound becomes ``[low,)`` unless the low
        version carries a qualifier that would be kept, in which case the
        exact Maven version is returned.

        Examples:
            ``1.0.0`` -> ``[1,)``, ``1.0.0.qualifier`` -> ``1.0.0-SNAPSHOT``,
            ``[0.0.0,1.1.0)`` -> ``[0,1.1)``

        Raises:
            ValidationError: If the range is missing or has neither bound
        """
        if version_range is None:
            raise ValidationError(f"Version range of {bundle} must not be missing")
        low, high = version_range.low, version_range.high
        if low is None and high is None:
            raise ValidationError(f"Version range of {bundle} has neither bound")

        if high is None:
            qualifier = self._qualifier(bundle, low)
            if qualifier is None:
                return f"[{_range_bound(low)},)"
            return f"{low.base_version}-{qualifier}"

        return "".join(
            [
                "[" if version_range.low_inclusive else "(",
                "" if low is None else _range_bound(low),
                ",",
                _range_bound(high),
                "]" if version_range.high_inclusive else ")",
            ]
        )

    @staticmethod
    def _symbolic_name(bundle: Optional[BundleNode]) -> str:
        if bundle is None or not bundle.symbolic_name:
            raise ValidationError("Bundle must have a symbolic name")
        return bundle.symbolic_name


@dataclass
class GAVStrategyRequest:
    """Policy for building a GAVStrategy.

    Attributes:
        use_default_snapshot_rules: Start from the two default snapshot rules
        additional_snapshot_rules: Rules checked after the defaults
        group_id_prefix: Prefix prepended to every groupId
        trim_qualifiers: Drop qualifiers that are not snapshots
        group3_prefixes: Additional deep-group prefixes
        group_id_mappings: Ordered pattern -> groupId template mappings
    """

    use_default_snapshot_rules: bool = True
    additional_snapshot_rules: list[SnapshotRule] = field(default_factory=list)
    group_id_prefix: Optional[str] = None
    trim_qualifiers: bool = False
    group3_prefixes: list[str] = field(default_factory=list)
    group_id_mappings: dict[str, str] = field(default_factory=dict)


class GAVStrategyFactory:
    """Builds GAVStrategy instances from requests."""

    def new_strategy(self, request: GAVStrategyRequest) -> GAVStrategy:
        rules: list[SnapshotRule] = []
        if request.use_default_snapshot_rules:
            rules.extend(DEFAULT_SNAPSHOT_RULES)
        rules.extend(request.additional_snapshot_rules)
        return GAVStrategy(
            snapshot_rules=rules,
            group_id_prefix=request.group_id_prefix,
            trim_qualifiers=request.trim_qualifiers,
            group3_prefixes=request.group3_prefixes,
            group_id_mappings=request.group_id_mappings,
        )
