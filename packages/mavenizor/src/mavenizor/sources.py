# SPDX-License-Identifier: MIT
"""Attaching source bundles to the artifacts of their host bundles."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from bundle_version import InvalidVersionError, parse_version

from .model import (
    SOURCE_BUNDLE_HEADER,
    BundleNode,
    ConversionDirective,
    ConvertedArtifact,
    MavenArtifact,
)
from .state import BundleState

if TYPE_CHECKING:
    from .walker import MavenizationResult

logger = logging.getLogger(__name__)

SOURCES_CLASSIFIER = "sources"
SOURCES_TYPE = "java-source"
SOURCE_SUFFIX = ".source"

_VERSION_ATTRIBUTE = re.compile(r"""^\s*version\s*=\s*"?([^";]*)"?\s*$""")

SourceJarResolver = Callable[[BundleNode], Optional[Path]]


def source_host(bundle: BundleNode) -> Optional[tuple[str, str]]:
    """Return the ``(symbolic name, version)`` of the bundle a source bundle belongs to.

    The ``Eclipse-SourceBundle`` header (``<host>;version="<v>"``) takes
    precedence; otherwise the ``.source`` suffix is stripped from the
    symbolic name and the source bundle's own version is used.

    Example:
        >>> source_host(BundleNode("org.foo.source", parse_version("1.0.0")))
        ('org.foo', '1.0.0')
    """
    header = bundle.header(SOURCE_BUNDLE_HEADER)
    if header:
        name, *attributes = header.split(";")
        version = str(bundle.version)
        for attribute in attributes:
            match = _VERSION_ATTRIBUTE.match(attribute)
            if match:
                version = match.group(1).strip()
        if name.strip():
            return name.strip(), version

    if bundle.symbolic_name.endswith(SOURCE_SUFFIX):
        return bundle.symbolic_name[: -len(SOURCE_SUFFIX)], str(bundle.version)
    return None


class SourceAttacher:
    """Adds ``sources`` artifacts for the deferred source bundles of a run.

    Args:
        source_jar_resolver: Consulted for hosts that have no source bundle
    """

    def __init__(self, source_jar_resolver: Optional[SourceJarResolver] = None):
        self.source_jar_resolver = source_jar_resolver

    def _host_sources(self, state: BundleState, result: MavenizationResult) -> dict[BundleNode, Path]:
        sources: dict[BundleNode, Path] = {}
        for source_bundle in result.source_bundles:
            host_id = source_host(source_bundle)
            host = None
            if host_id is not None:
                try:
                    host = state.get(host_id[0], parse_version(host_id[1]))
                except InvalidVersionError:
                    logger.debug("Invalid host version in %s", source_bundle)
            if host is None:
                logger.warning("Unable to find host bundle of source bundle %s", source_bundle)
                continue
            if source_bundle.location is None:
                logger.warning("Source bundle %s has no location", source_bundle)
                continue
            sources[host] = source_bundle.location
        return sources

    def attach(self, state: BundleState, result: MavenizationResult) -> None:
        """Attach sources to every converted host bundle that has some."""
        sources = self._host_sources(state, result)

        for host in result.bundles:
            source_jar = sources.get(host)
            if source_jar is None and self.source_jar_resolver is not None:
                source_jar = self.source_jar_resolver(host)
            if source_jar is None:
                continue

            for artifact_bundle in result.artifact_bundles(host):
                if not any(a.is_mavenized for a in artifact_bundle.artifacts):
                    continue
                pom = artifact_bundle.pom
                logger.info("Attaching source %s to %s", source_jar, pom.gav)
                artifact = MavenArtifact(
                    group_id=pom.group_id,
                    artifact_id=pom.artifact_id,
                    version=pom.version,
                    classifier=SOURCES_CLASSIFIER,
                    type=SOURCES_TYPE,
                    file=Path(source_jar),
                )
                result.add_artifact(
                    ConvertedArtifact(artifact, ConversionDirective.MAVENIZE, False)
                )
