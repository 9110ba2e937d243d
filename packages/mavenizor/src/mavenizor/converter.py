# SPDX-License-Identifier: MIT
"""Conversion of a single bundle into Maven artifacts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .archive import detect_maven_artifact
from .embedded import EmbeddedLibraryResolver, bundle_action, library_entries
from .gav import GAVStrategy
from .model import (
    DEFAULT_TYPE,
    MAVEN_ARTIFACT_ID_HEADER,
    MAVEN_CLASSIFIER_HEADER,
    MAVEN_GROUP_ID_HEADER,
    MAVEN_TYPE_HEADER,
    MAVEN_VERSION_HEADER,
    BundleNode,
    ConversionDirective,
    ConvertedArtifact,
    MavenArtifact,
    TargetType,
)

logger = logging.getLogger(__name__)


@dataclass
class ConverterResult:
    """Outcome of converting one bundle.

    Attributes:
        bundle: The converted bundle
        directive: The directive that was applied to the bundle
        converted_artifacts: Produced artifacts; the main artifact, if any, first
        missing_embedded_libraries: Classpath entries not found in the bundle
        unhandled_embedded_libraries: Entries whose coordinates could not be detected
    """

    bundle: BundleNode
    directive: ConversionDirective
    converted_artifacts: list[ConvertedArtifact] = field(default_factory=list)
    missing_embedded_libraries: list[str] = field(default_factory=list)
    unhandled_embedded_libraries: list[str] = field(default_factory=list)

    @property
    def mavenized_artifacts(self) -> list[ConvertedArtifact]:
        return [a for a in self.converted_artifacts if a.is_mavenized]


def artifact_from_headers(bundle: BundleNode) -> Optional[MavenArtifact]:
    """Read coordinates from ``Maven-GroupId``/``-ArtifactId``/``-Version`` headers."""
    group_id = bundle.header(MAVEN_GROUP_ID_HEADER)
    artifact_id = bundle.header(MAVEN_ARTIFACT_ID_HEADER)
    version = bundle.header(MAVEN_VERSION_HEADER)
    if not (group_id and artifact_id and version):
        return None
    return MavenArtifact(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        classifier=bundle.header(MAVEN_CLASSIFIER_HEADER) or None,
        type=bundle.header(MAVEN_TYPE_HEADER) or DEFAULT_TYPE,
        file=bundle.location,
    )


class BundleConverter:
    """Applies the bundle directive and resolves embedded libraries.

    Example:
        >>> converter = BundleConverter(GAVStrategy(), Path("target/mavenizor"))
        >>> result = converter.convert(bundle, {"org.example.core": "ignore"})
        >>> result.converted_artifacts
        []
    """

    def __init__(
        self,
        gav_strategy: GAVStrategy,
        working_dir: Path,
        target_type: TargetType = TargetType.JAVA,
    ):
        self.gav_strategy = gav_strategy
        self.target_type = target_type
        self.libraries = EmbeddedLibraryResolver(gav_strategy, working_dir, target_type)

    def convert(self, bundle: BundleNode, options: Mapping[str, str]) -> ConverterResult:
        """Convert a bundle.

        Raises:
            DirectiveError: If a bundle or library directive cannot be parsed
            ValidationError: If the bundle has no symbolic name
        """
        action = bundle_action(bundle, options)
        directive = action.directive

        if directive is ConversionDirective.IGNORE:
            logger.info("%s (ignored)", bundle)
            return ConverterResult(bundle, directive)

        if directive is ConversionDirective.REPLACE:
            logger.info("%s -> %s (mapped)", bundle, action.replacement.key)
            return ConverterResult(
                bundle,
                directive,
                [ConvertedArtifact(action.replacement, directive, False)],
            )

        if directive is ConversionDirective.AUTO_DETECT:
            artifact = self._detect(bundle)
            if artifact is not None:
                logger.info("%s -> %s (detected)", bundle, artifact.key)
                return ConverterResult(
                    bundle,
                    directive,
                    [ConvertedArtifact(artifact, directive, False)],
                )
            directive = ConversionDirective.MAVENIZE

        return self._convert_with_libraries(bundle, directive, options)

    def _detect(self, bundle: BundleNode) -> Optional[MavenArtifact]:
        artifact = artifact_from_headers(bundle)
        if artifact is None and bundle.location is not None:
            artifact = detect_maven_artifact(bundle.location)
        return artifact

    def _convert_with_libraries(
        self,
        bundle: BundleNode,
        directive: ConversionDirective,
        options: Mapping[str, str],
    ) -> ConverterResult:
        libraries = self.libraries.resolve(bundle, library_entries(bundle), options)
        result = ConverterResult(
            bundle,
            directive,
            list(libraries.artifacts),
            list(libraries.missing),
            list(libraries.unhandled),
        )

        if directive is ConversionDirective.OMIT and libraries.artifacts:
            logger.info("%s (omitted)", bundle)
            return result

        main = MavenArtifact(
            group_id=self.gav_strategy.group_id(bundle),
            artifact_id=self.gav_strategy.artifact_id(bundle),
            version=self.gav_strategy.maven_version(bundle),
            file=bundle.location,
        )
        logger.info("%s -> %s (mavenized)", bundle, main.key)
        result.converted_artifacts.insert(
            0, ConvertedArtifact(main, ConversionDirective.MAVENIZE, False)
        )
        return result
