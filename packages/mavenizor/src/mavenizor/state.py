# SPDX-License-Identifier: MIT
"""Resolved bundle state and requirement collection.

The state is produced by an external OSGi resolver and handed to the
engine either programmatically or as a JSON graph file::

    {
      "bundles": [
        {
          "symbolic_name": "org.example.core",
          "version": "1.0.0.qualifier",
          "location": "plugins/org.example.core_1.0.0.jar",
          "classpath": [".", "lib/embedded.jar"],
          "headers": {"Bundle-Vendor": "Example"},
          "requires": [
            {"symbolic_name": "org.example.api", "range": "[1.0,2.0)", "optional": false}
          ]
        }
      ]
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from bundle_version import (
    INFINITE_RANGE,
    EmptyRangeError,
    InvalidVersionError,
    InvalidVersionRangeError,
    Version,
    VersionRange,
    parse_version,
    parse_version_range,
)

from .errors import StateError
from .model import BundleNode, Requirement, RequirementSpec

logger = logging.getLogger(__name__)


class RequirementsCollector(Protocol):
    """Collapses a bundle's requirement specifications into edges."""

    def collect(self, bundle: BundleNode) -> list[Requirement]: ...


class DefaultRequirementsCollector:
    """Collapse requirement specifications per required bundle.

    All specifications onto the same target become one Requirement: ranges
    are intersected (``None`` once they stop overlapping) and the optional
    flag holds only if every specification was optional. Self references
    are dropped.
    """

    def collect(self, bundle: BundleNode) -> list[Requirement]:
        requirements: dict[BundleNode, Requirement] = {}

        for spec in bundle.requires:
            target = spec.target
            if target == bundle:
                continue

            requirement = requirements.get(target)
            if requirement is None:
                requirement = Requirement(
                    from_bundle=bundle,
                    to_bundle=target,
                    optional=spec.optional,
                    version_range=INFINITE_RANGE,
                )
                requirements[target] = requirement
            else:
                requirement.optional = requirement.optional and spec.optional

            if requirement.version_range is not None:
                try:
                    requirement.version_range = requirement.version_range.intersect(
                        spec.version_range
                    )
                except EmptyRangeError:
                    logger.debug("Version ranges of %s do not overlap", requirement)
                    requirement.version_range = None

        return list(requirements.values())


class BundleState:
    """An ordered collection of resolved bundles.

    Attributes:
        bundles: Bundles in resolution order
        collector: Collapses requirement specifications into edges
    """

    def __init__(
        self,
        bundles: Iterable[BundleNode] = (),
        collector: Optional[RequirementsCollector] = None,
    ):
        self.bundles: list[BundleNode] = []
        self.collector = collector or DefaultRequirementsCollector()
        self._index: dict[tuple[str, Version], BundleNode] = {}
        self._requirements: dict[BundleNode, list[Requirement]] = {}
        for bundle in bundles:
            self.add(bundle)

    def add(self, bundle: BundleNode) -> None:
        """Add a bundle.

        Raises:
            StateError: If a bundle with the same identity already exists
        """
        identity = (bundle.symbolic_name, bundle.version)
        if identity in self._index:
            raise StateError(f"Duplicate bundle in state: {bundle}")
        self._index[identity] = bundle
        self.bundles.append(bundle)

    def get(self, symbolic_name: str, version: Version) -> Optional[BundleNode]:
        """Look up a bundle by identity."""
        return self._index.get((symbolic_name, version))

    def find(self, symbolic_name: str) -> list[BundleNode]:
        """Return every bundle with the given symbolic name, in state order."""
        return [b for b in self.bundles if b.symbolic_name == symbolic_name]

    def requirements(self, bundle: BundleNode) -> list[Requirement]:
        """Return the collapsed requirements of a bundle, computed once."""
        requirements = self._requirements.get(bundle)
        if requirements is None:
            requirements = self.collector.collect(bundle)
            self._requirements[bundle] = requirements
        return requirements

    def __iter__(self) -> Iterator[BundleNode]:
        return iter(self.bundles)

    def __len__(self) -> int:
        return len(self.bundles)

    def __contains__(self, bundle: object) -> bool:
        if not isinstance(bundle, BundleNode):
            return False
        return (bundle.symbolic_name, bundle.version) in self._index


# ============================================================================
# JSON graph file
# ============================================================================


class RequiredBundleModel(BaseModel):
    """A requirement entry of a bundle in the graph file."""

    model_config = ConfigDict(extra="forbid")

    symbolic_name: str = Field(min_length=1)
    version: Optional[str] = None
    range: Optional[str] = None
    optional: bool = False


class BundleModel(BaseModel):
    """A bundle entry in the graph file."""

    model_config = ConfigDict(extra="forbid")

    symbolic_name: str = Field(min_length=1)
    version: str = "0.0.0"
    location: Optional[str] = None
    classpath: list[str] = Field(default_factory=list)
    headers: dict[str, str] = Field(default_factory=dict)
    requires: list[RequiredBundleModel] = Field(default_factory=list)


class StateModel(BaseModel):
    """The graph file root."""

    bundles: list[BundleModel] = Field(default_factory=list)


def _select_target(
    state: BundleState,
    owner: BundleNode,
    entry: RequiredBundleModel,
    version_range: VersionRange,
) -> BundleNode:
    if entry.version is not None:
        target = state.get(entry.symbolic_name, parse_version(entry.version))
    else:
        candidates = [
            b for b in state.find(entry.symbolic_name) if version_range.includes(b.version)
        ]
        target = max(candidates, key=lambda b: b.version) if candidates else None

    if target is None:
        wanted = entry.symbolic_name
        if entry.version is not None:
            wanted += f"_{entry.version}"
        raise StateError(f"Bundle {owner} requires unknown bundle {wanted}")
    return target


def build_state(data: dict, base_dir: Optional[Path] = None) -> BundleState:
    """Build a BundleState from a graph-file dictionary.

    Args:
        data: Parsed JSON content
        base_dir: Directory that relative locations resolve against

    Returns:
        The resolved BundleState

    Raises:
        StateError: If the content is invalid or references unknown bundles
    """
    try:
        model = StateModel.model_validate(data)
    except PydanticValidationError as e:
        raise StateError(f"Invalid bundle state: {e}") from e

    state = BundleState()
    try:
        for entry in model.bundles:
            location = None
            if entry.location is not None:
                location = Path(entry.location)
                if base_dir is not None and not location.is_absolute():
                    location = base_dir / location
            state.add(
                BundleNode(
                    symbolic_name=entry.symbolic_name,
                    version=parse_version(entry.version),
                    location=location,
                    classpath=tuple(entry.classpath),
                    headers=dict(entry.headers),
                )
            )

        for entry, bundle in zip(model.bundles, state.bundles):
            for required in entry.requires:
                version_range = (
                    parse_version_range(required.range)
                    if required.range is not None
                    else INFINITE_RANGE
                )
                target = _select_target(state, bundle, required, version_range)
                bundle.requires.append(
                    RequirementSpec(target, version_range, required.optional)
                )
    except (InvalidVersionError, InvalidVersionRangeError) as e:
        raise StateError(f"Invalid bundle state: {e}") from e

    return state


def load_state(path: Path | str) -> BundleState:
    """Load a resolved bundle state from a JSON graph file.

    Raises:
        FileNotFoundError: If the file does not exist
        StateError: If the file is not valid
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise StateError(f"Invalid JSON in {path}: {e}") from e

    state = build_state(data, base_dir=path.parent)
    logger.debug("Loaded %d bundles from %s", len(state), path)
    return state
