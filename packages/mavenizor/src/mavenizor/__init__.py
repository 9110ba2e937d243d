# SPDX-License-Identifier: MIT
"""Conversion of resolved OSGi bundles into Maven artifacts and POMs.

A resolved bundle state is walked along its requirements. Each bundle is
turned into Maven artifacts according to per-bundle options, and every
artifact gets a POM whose dependencies mirror the bundle requirements.

Example:
    >>> from mavenizor import Mavenizor, MavenizeRequest, load_state, write_poms
    >>>
    >>> state = load_state("bundles.json")
    >>> result = Mavenizor().mavenize(MavenizeRequest(state))
    >>> for artifact_bundle in result.artifact_bundles():
    ...     print(artifact_bundle.gav)
    org.example:org.example.core:1.0.0-SNAPSHOT
    >>>
    >>> write_poms(result, "dist/poms")
"""

__version__ = "0.1.0"

from .errors import (
    MavenizorError,
    ValidationError,
    PatternSyntaxError,
    DirectiveError,
    StateError,
    ConfigError,
)
from .model import (
    TargetType,
    ConversionDirective,
    RequirementSpec,
    BundleNode,
    Requirement,
    MavenArtifact,
    ConverterAction,
    ConvertedArtifact,
    Dependency,
    PomModel,
    ArtifactBundle,
)
from .patterns import PathPattern, compile_pattern, matches
from .options import (
    CompareMode,
    OptionSet,
    is_bundle_match,
    resolve,
    boolean_option,
    requirement_matches,
)
from .state import (
    BundleState,
    DefaultRequirementsCollector,
    build_state,
    load_state,
)
from .gav import GAVStrategy, GAVStrategyFactory, GAVStrategyRequest
from .embedded import EmbeddedLibraryResolver, parse_directive
from .converter import BundleConverter, ConverterResult
from .walker import Mavenizor, MavenizeRequest, MavenizationResult
from .sources import SourceAttacher, source_host
from .pom import pom_to_xml, write_pom, write_poms
from .template import build_property_template, write_property_template
from .properties import load_properties, dump_properties
from .config import MavenizorConfig

__all__ = [
    # Errors
    "MavenizorError",
    "ValidationError",
    "PatternSyntaxError",
    "DirectiveError",
    "StateError",
    "ConfigError",
    # Model
    "TargetType",
    "ConversionDirective",
    "RequirementSpec",
    "BundleNode",
    "Requirement",
    "MavenArtifact",
    "ConverterAction",
    "ConvertedArtifact",
    "Dependency",
    "PomModel",
    "ArtifactBundle",
    # Patterns and options
    "PathPattern",
    "compile_pattern",
    "matches",
    "CompareMode",
    "OptionSet",
    "is_bundle_match",
    "resolve",
    "boolean_option",
    "requirement_matches",
    # State
    "BundleState",
    "DefaultRequirementsCollector",
    "build_state",
    "load_state",
    # Conversion
    "GAVStrategy",
    "GAVStrategyFactory",
    "GAVStrategyRequest",
    "EmbeddedLibraryResolver",
    "parse_directive",
    "BundleConverter",
    "ConverterResult",
    "Mavenizor",
    "MavenizeRequest",
    "MavenizationResult",
    "SourceAttacher",
    "source_host",
    # Output
    "pom_to_xml",
    "write_pom",
    "write_poms",
    "build_property_template",
    "write_property_template",
    "load_properties",
    "dump_properties",
    # Configuration
    "MavenizorConfig",
]
