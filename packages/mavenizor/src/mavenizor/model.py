# SPDX-License-Identifier: MIT
"""Data model for bundles, requirements and Maven artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from bundle_version import Version, VersionRange

DEFAULT_TYPE = "jar"
POM_MODEL_VERSION = "4.0.0"

# Manifest headers read by the engine
SOURCE_BUNDLE_HEADER = "Eclipse-SourceBundle"
MAVEN_GROUP_ID_HEADER = "Maven-GroupId"
MAVEN_ARTIFACT_ID_HEADER = "Maven-ArtifactId"
MAVEN_VERSION_HEADER = "Maven-Version"
MAVEN_TYPE_HEADER = "Maven-Type"
MAVEN_CLASSIFIER_HEADER = "Maven-Classifier"


class TargetType(str, Enum):
    """Kind of artifacts the conversion produces."""

    JAVA = "java"
    OSGI = "osgi"


class ConversionDirective(str, Enum):
    """What to do with a bundle or an embedded library."""

    AUTO_DETECT = "auto_detect"
    MAVENIZE = "mavenize"
    OMIT = "omit"
    IGNORE = "ignore"
    REPLACE = "replace"

    @property
    def literal(self) -> str:
        """The option value spelling of the directive."""
        return self.value


@dataclass(frozen=True, eq=False)
class RequirementSpec:
    """One raw requirement specification of a bundle.

    Attributes:
        target: The bundle that satisfies the requirement
        version_range: The OSGi version range the requirement asks for
        optional: Whether the requirement is optional
    """

    target: BundleNode
    version_range: VersionRange
    optional: bool = False


@dataclass(frozen=True)
class BundleNode:
    """A resolved OSGi bundle.

    Identity is ``(symbolic_name, version)``; the remaining attributes are
    ignored for equality and hashing.

    Attributes:
        symbolic_name: Bundle-SymbolicName
        version: Bundle-Version
        location: Bundle directory or archive, if known
        classpath: Bundle-ClassPath entries in manifest order
        headers: Manifest headers
        requires: Outgoing requirement specifications
    """

    symbolic_name: str
    version: Version
    location: Optional[Path] = field(default=None, compare=False)
    classpath: tuple[str, ...] = field(default=(), compare=False)
    headers: dict[str, str] = field(default_factory=dict, compare=False, repr=False)
    requires: list[RequirementSpec] = field(default_factory=list, compare=False, repr=False)

    def __str__(self) -> str:
        return f"{self.symbolic_name}_{self.version}"

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name)

    @property
    def is_source_bundle(self) -> bool:
        """True for ``Eclipse-SourceBundle`` bundles and ``*.source`` names."""
        return (
            self.header(SOURCE_BUNDLE_HEADER) is not None
            or self.symbolic_name.endswith(".source")
        )


@dataclass
class Requirement:
    """A collapsed requirement edge between two bundles.

    Attributes:
        from_bundle: The requiring bundle
        to_bundle: The required bundle
        optional: True only if every contributing specification was optional
        version_range: Intersection of all ranges; None when they do not overlap
    """

    from_bundle: BundleNode
    to_bundle: BundleNode
    optional: bool = False
    version_range: Optional[VersionRange] = None

    def __str__(self) -> str:
        return f"{self.from_bundle} -> {self.to_bundle}"


@dataclass(frozen=True)
class MavenArtifact:
    """A Maven artifact coordinate, optionally bound to a file.

    Attributes:
        group_id: groupId
        artifact_id: artifactId
        version: Maven version string
        classifier: Optional classifier
        type: Artifact type (extension)
        file: File backing the artifact
    """

    group_id: str
    artifact_id: str
    version: str
    classifier: Optional[str] = None
    type: str = DEFAULT_TYPE
    file: Optional[Path] = field(default=None, compare=False)

    @property
    def key(self) -> str:
        """``groupId:artifactId:type[:classifier]:version``."""
        parts = [self.group_id, self.artifact_id, self.type]
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version)
        return ":".join(parts)

    @property
    def gav(self) -> str:
        """``groupId:artifactId:version``."""
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class ConverterAction:
    """A parsed directive, carrying the coordinate for REPLACE."""

    directive: ConversionDirective
    replacement: Optional[MavenArtifact] = None


@dataclass(frozen=True)
class ConvertedArtifact:
    """An artifact produced by converting a bundle.

    Attributes:
        artifact: The Maven artifact
        directive: The directive that produced it
        is_embedded_library: True if it came from the bundle's classpath
    """

    artifact: MavenArtifact
    directive: ConversionDirective
    is_embedded_library: bool = False

    @property
    def is_mavenized(self) -> bool:
        """True if the artifact is newly produced rather than detected or mapped."""
        return self.directive is ConversionDirective.MAVENIZE


@dataclass
class Dependency:
    """A POM dependency entry."""

    group_id: str
    artifact_id: str
    version: str
    classifier: Optional[str] = None
    type: Optional[str] = None
    scope: Optional[str] = None
    optional: bool = False


@dataclass
class PomModel:
    """A minimal POM: coordinates plus dependencies."""

    group_id: str
    artifact_id: str
    version: str
    dependencies: list[Dependency] = field(default_factory=list)
    model_version: str = POM_MODEL_VERSION

    @property
    def gav(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass
class ArtifactBundle:
    """A POM and the artifacts sharing its coordinates."""

    pom: PomModel
    artifacts: list[ConvertedArtifact] = field(default_factory=list)

    @property
    def gav(self) -> str:
        return self.pom.gav
