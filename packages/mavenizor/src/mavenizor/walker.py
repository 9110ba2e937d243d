# SPDX-License-Identifier: MIT
"""Walking the bundle requirement graph into an artifact/POM graph.

Each bundle is converted once. Its result is recorded before any of its
requirements are followed, so requirement cycles resolve against the entry
already in the memo table.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from bundle_version import InvalidMavenVersionRangeError, parse_maven_version_range

from .converter import BundleConverter, ConverterResult
from .gav import GAVStrategy, GAVStrategyFactory, GAVStrategyRequest
from .model import (
    DEFAULT_TYPE,
    ArtifactBundle,
    BundleNode,
    ConvertedArtifact,
    Dependency,
    PomModel,
    Requirement,
    TargetType,
)
from .options import (
    EMBEDDED_LIBRARIES_OPTIONAL,
    EMBEDDED_LIBRARIES_PROVIDED,
    REQUIREMENTS_ERASE,
    REQUIREMENTS_OPTIONAL,
    REQUIREMENTS_PROVIDED,
    OptionSet,
    boolean_option,
    is_bundle_match,
    requirement_matches,
)
from .sources import SourceAttacher, SourceJarResolver
from .state import BundleState

logger = logging.getLogger(__name__)

SCOPE_PROVIDED = "provided"

BundleFilter = Callable[[BundleNode], bool]


@dataclass
class MavenizeRequest:
    """Everything one conversion run needs.

    Attributes:
        state: The resolved bundle state
        options: Ordered option map
        working_dir: Staging directory for embedded libraries
        target_type: Kind of artifacts to produce
        gav_strategy: Coordinate strategy; built from ``gav_request`` when None
        gav_request: Policy for the default coordinate strategy
        input_filter: Selects the input bundles; overrides ``input_patterns``
        input_patterns: Bundle patterns selecting the input bundles; all when empty
        source_jar_resolver: Finds sources for hosts without a source bundle
    """

    state: BundleState
    options: Mapping[str, str] = field(default_factory=OptionSet)
    working_dir: Path = Path("target/mavenizor")
    target_type: TargetType = TargetType.JAVA
    gav_strategy: Optional[GAVStrategy] = None
    gav_request: GAVStrategyRequest = field(default_factory=GAVStrategyRequest)
    input_filter: Optional[BundleFilter] = None
    input_patterns: list[str] = field(default_factory=list)
    source_jar_resolver: Optional[SourceJarResolver] = None

    def accepts(self, bundle: BundleNode) -> bool:
        """Check whether a bundle is an input bundle."""
        if self.input_filter is not None:
            return self.input_filter(bundle)
        if not self.input_patterns:
            return True
        return any(is_bundle_match(bundle, pattern) for pattern in self.input_patterns)


@dataclass
class MavenizationResult:
    """Outcome of a conversion run.

    Attributes:
        converter_results: Memo table of converted bundles, in conversion order
        source_bundles: Deferred source bundles, in state order
        input_bundles: Bundles selected as input, in state order
        artifact_bundles_by_gav: ArtifactBundles keyed by ``g:a:v``
    """

    converter_results: dict[BundleNode, ConverterResult] = field(default_factory=dict)
    source_bundles: list[BundleNode] = field(default_factory=list)
    input_bundles: list[BundleNode] = field(default_factory=list)
    artifact_bundles_by_gav: dict[str, ArtifactBundle] = field(default_factory=dict)

    def record(self, converter_result: ConverterResult) -> None:
        """Add a converter result and file its artifacts by coordinate."""
        self.converter_results[converter_result.bundle] = converter_result
        for converted in converter_result.converted_artifacts:
            self.add_artifact(converted)

    def add_artifact(self, converted: ConvertedArtifact) -> ArtifactBundle:
        """File an artifact into the ArtifactBundle of its coordinate."""
        artifact = converted.artifact
        artifact_bundle = self.artifact_bundles_by_gav.get(artifact.gav)
        if artifact_bundle is None:
            artifact_bundle = ArtifactBundle(
                PomModel(artifact.group_id, artifact.artifact_id, artifact.version)
            )
            self.artifact_bundles_by_gav[artifact.gav] = artifact_bundle
        if all(a.artifact.key != artifact.key for a in artifact_bundle.artifacts):
            artifact_bundle.artifacts.append(converted)
        return artifact_bundle

    def artifact_bundle(self, converted: ConvertedArtifact) -> ArtifactBundle:
        return self.artifact_bundles_by_gav[converted.artifact.gav]

    def artifact_bundles(self, bundle: Optional[BundleNode] = None) -> list[ArtifactBundle]:
        """Return the ArtifactBundles of a bundle in artifact order, or all of them."""
        if bundle is None:
            return list(self.artifact_bundles_by_gav.values())
        converter_result = self.converter_results.get(bundle)
        if converter_result is None:
            return []
        result: dict[str, ArtifactBundle] = {}
        for converted in converter_result.converted_artifacts:
            gav = converted.artifact.gav
            if gav not in result:
                result[gav] = self.artifact_bundles_by_gav[gav]
        return list(result.values())

    def converter_result(self, bundle: BundleNode) -> Optional[ConverterResult]:
        return self.converter_results.get(bundle)

    @property
    def bundles(self) -> list[BundleNode]:
        """Converted bundles, in conversion order."""
        return list(self.converter_results)

    @property
    def missing_embedded_libraries(self) -> dict[BundleNode, list[str]]:
        return {
            bundle: list(r.missing_embedded_libraries)
            for bundle, r in self.converter_results.items()
            if r.missing_embedded_libraries
        }

    @property
    def unhandled_embedded_libraries(self) -> dict[BundleNode, list[str]]:
        return {
            bundle: list(r.unhandled_embedded_libraries)
            for bundle, r in self.converter_results.items()
            if r.unhandled_embedded_libraries
        }


def _dependency(converted: ConvertedArtifact, version: Optional[str] = None) -> Dependency:
    artifact = converted.artifact
    return Dependency(
        group_id=artifact.group_id,
        artifact_id=artifact.artifact_id,
        version=version or artifact.version,
        classifier=artifact.classifier,
        type=None if artifact.type == DEFAULT_TYPE else artifact.type,
    )


def _add_dependency(pom: PomModel, dependency: Dependency) -> None:
    if (dependency.group_id, dependency.artifact_id, dependency.version) == (
        pom.group_id,
        pom.artifact_id,
        pom.version,
    ) and dependency.classifier is None:
        return
    for existing in pom.dependencies:
        if (
            existing.group_id == dependency.group_id
            and existing.artifact_id == dependency.artifact_id
            and existing.classifier == dependency.classifier
            and existing.type == dependency.type
        ):
            return
    pom.dependencies.append(dependency)


class Mavenizor:
    """Converts a resolved bundle state into Maven artifacts and POMs.

    Example:
        >>> state = load_state("bundles.json")
        >>> result = Mavenizor().mavenize(MavenizeRequest(state))
        >>> [ab.gav for ab in result.artifact_bundles()]
        ['org.example:org.example.core:1.0.0-SNAPSHOT', ...]
    """

    def __init__(self, gav_strategy_factory: Optional[GAVStrategyFactory] = None):
        self.gav_strategy_factory = gav_strategy_factory or GAVStrategyFactory()

    def mavenize(self, request: MavenizeRequest) -> MavenizationResult:
        """Run a conversion.

        Raises:
            ValidationError: If a bundle or range violates a precondition
            DirectiveError: If a directive option cannot be parsed
        """
        walk = _Walk(request, self.gav_strategy_factory)
        for bundle in request.state:
            if bundle.is_source_bundle:
                walk.result.source_bundles.append(bundle)
            elif request.accepts(bundle):
                walk.result.input_bundles.append(bundle)
                walk.visit(bundle)
            else:
                logger.debug("%s is not an input bundle", bundle)

        SourceAttacher(request.source_jar_resolver).attach(request.state, walk.result)
        return walk.result


class _Walk:
    """State of one depth-first conversion walk."""

    def __init__(self, request: MavenizeRequest, factory: GAVStrategyFactory):
        self.request = request
        self.options = request.options
        self.gav_strategy = request.gav_strategy or factory.new_strategy(request.gav_request)
        self.converter = BundleConverter(self.gav_strategy, request.working_dir, request.target_type)
        self.result = MavenizationResult()

    def visit(self, bundle: BundleNode) -> ConverterResult:
        converter_result = self.result.converter_results.get(bundle)
        if converter_result is not None:
            return converter_result

        converter_result = self.converter.convert(bundle, self.options)
        self.result.record(converter_result)

        for entry in converter_result.missing_embedded_libraries:
            logger.warning("Library %s not found in %s", entry, bundle.location or bundle)
        for entry in converter_result.unhandled_embedded_libraries:
            logger.warning(
                "Unknown embedded library. Introduce it via property "
                "'%s[_%s]/%s = mavenize | ignore | auto_detect | "
                "<groupId>:<artifactId>:<type>[:<classifier>]:<version>'",
                bundle.symbolic_name,
                bundle.version,
                entry,
            )

        self._add_dependencies(converter_result)
        return converter_result

    def _requirements(self, bundle: BundleNode) -> list[Requirement]:
        requirements = []
        for requirement in self.request.state.requirements(bundle):
            if requirement_matches(requirement, self.options, REQUIREMENTS_ERASE):
                logger.info(
                    "Omitting requirement from %s to %s",
                    requirement.from_bundle,
                    requirement.to_bundle,
                )
                continue
            if requirement.to_bundle.is_source_bundle:
                logger.debug("Skipping requirement on source bundle %s", requirement.to_bundle)
                continue
            requirements.append(requirement)
        return requirements

    def _add_dependencies(self, converter_result: ConverterResult) -> None:
        bundle = converter_result.bundle
        required = [(r, self.visit(r.to_bundle)) for r in self._requirements(bundle)]

        mavenized = converter_result.mavenized_artifacts
        if not mavenized:
            return

        embedded = [a for a in converter_result.converted_artifacts if a.is_embedded_library]
        embedded_provided = boolean_option(bundle, self.options, EMBEDDED_LIBRARIES_PROVIDED)
        embedded_optional = boolean_option(bundle, self.options, EMBEDDED_LIBRARIES_OPTIONAL)

        for converted in mavenized:
            pom = self.result.artifact_bundle(converted).pom

            if not converted.is_embedded_library:
                for library in embedded:
                    dependency = _dependency(library)
                    if embedded_provided:
                        dependency.scope = SCOPE_PROVIDED
                    dependency.optional = embedded_optional
                    _add_dependency(pom, dependency)

            for requirement, required_result in required:
                provided = requirement_matches(requirement, self.options, REQUIREMENTS_PROVIDED)
                optional = requirement.optional or requirement_matches(
                    requirement, self.options, REQUIREMENTS_OPTIONAL
                )
                for required_artifact in required_result.converted_artifacts:
                    version = None
                    if not required_artifact.is_embedded_library:
                        version = self._dependency_version(requirement, required_artifact)
                    dependency = _dependency(required_artifact, version)
                    if provided:
                        dependency.scope = SCOPE_PROVIDED
                    dependency.optional = optional
                    _add_dependency(pom, dependency)

    def _dependency_version(self, requirement: Requirement, converted: ConvertedArtifact) -> str:
        """Use the translated requirement range when it admits the artifact version."""
        version = converted.artifact.version
        version_range = requirement.version_range
        if version_range is None or version_range.is_infinite:
            return version

        spec = self.gav_strategy.maven_version_range(requirement.to_bundle, version_range)
        try:
            maven_range = parse_maven_version_range(spec)
        except InvalidMavenVersionRangeError:
            logger.debug("Cannot use version range %s of %s", spec, requirement)
            return version
        return spec if maven_range.contains(version) else version
