# SPDX-License-Identifier: MIT
"""Conversion directives and embedded-library resolution.

Directives are looked up in the option map by exact key:

- bundle: ``<sn>_<version>``, then ``<sn>``
- embedded library: ``<sn>_<version>/<entry>``, then ``<sn>/<entry>``

Values are ``auto_detect``, ``mavenize``, ``omit``, ``ignore`` or a
replacement coordinate ``<groupId>:<artifactId>:<type>[:<classifier>]:<version>``.
Missing keys default to ``auto_detect``.
"""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Optional

from .archive import EntryNotFoundError, detect_maven_artifact, extract_entry
from .errors import DirectiveError
from .gav import GAVStrategy
from .model import (
    BundleNode,
    ConversionDirective,
    ConvertedArtifact,
    ConverterAction,
    MavenArtifact,
    TargetType,
)

logger = logging.getLogger(__name__)

BUNDLE_ROOT_ENTRY = "."

_LITERALS = {
    ConversionDirective.AUTO_DETECT.literal: ConversionDirective.AUTO_DETECT,
    ConversionDirective.MAVENIZE.literal: ConversionDirective.MAVENIZE,
    ConversionDirective.OMIT.literal: ConversionDirective.OMIT,
    ConversionDirective.IGNORE.literal: ConversionDirective.IGNORE,
}

DEFAULT_ACTION = ConverterAction(ConversionDirective.AUTO_DETECT)


def parse_directive(key: str, value: str) -> ConverterAction:
    """Parse a directive literal or replacement coordinate.

    Args:
        key: The option key, used for error reporting
        value: The option value

    Returns:
        The parsed ConverterAction

    Raises:
        DirectiveError: If the value is neither a literal nor a coordinate

    Examples:
        >>> parse_directive("org.foo", "omit").directive
        <ConversionDirective.OMIT: 'omit'>
        >>> parse_directive("org.foo", "hans:wurst:jar:3").replacement.key
        'hans:wurst:jar:3'
    """
    text = value.strip()
    directive = _LITERALS.get(text.lower())
    if directive is not None:
        return ConverterAction(directive)

    parts = [part.strip() for part in text.split(":")]
    if len(parts) not in (4, 5) or not all(parts):
        raise DirectiveError(key, value)

    if len(parts) == 4:
        group_id, artifact_id, type_, version = parts
        classifier = None
    else:
        group_id, artifact_id, type_, classifier, version = parts

    replacement = MavenArtifact(group_id, artifact_id, version, classifier, type_)
    return ConverterAction(ConversionDirective.REPLACE, replacement)


def _lookup(options: Mapping[str, str], keys: tuple[str, ...]) -> ConverterAction:
    for key in keys:
        value = options.get(key)
        if value is not None:
            return parse_directive(key, value)
    return DEFAULT_ACTION


def bundle_directive_keys(bundle: BundleNode) -> tuple[str, str]:
    return (str(bundle), bundle.symbolic_name)


def library_directive_keys(bundle: BundleNode, entry: str) -> tuple[str, str]:
    return (f"{bundle}/{entry}", f"{bundle.symbolic_name}/{entry}")


def bundle_action(bundle: BundleNode, options: Mapping[str, str]) -> ConverterAction:
    """Determine what to do with a whole bundle."""
    return _lookup(options, bundle_directive_keys(bundle))


def library_action(bundle: BundleNode, entry: str, options: Mapping[str, str]) -> ConverterAction:
    """Determine what to do with one embedded library of a bundle."""
    return _lookup(options, library_directive_keys(bundle, entry))


def library_entries(bundle: BundleNode) -> list[str]:
    """Return the bundle's classpath entries other than the bundle root."""
    return [entry for entry in bundle.classpath if entry.strip() != BUNDLE_ROOT_ENTRY]


@dataclass
class EmbeddedLibraries:
    """Outcome of resolving a bundle's embedded libraries.

    Attributes:
        artifacts: Produced artifacts, in classpath order
        missing: Entries that do not exist in the bundle
        unhandled: Entries whose coordinates could not be detected
    """

    artifacts: list[ConvertedArtifact] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    unhandled: list[str] = field(default_factory=list)


class EmbeddedLibraryResolver:
    """Turns a bundle's embedded libraries into Maven artifacts.

    Libraries to mavenize or auto-detect are copied to
    ``<working_dir>/<sn>_<version>/<entry>`` first.
    """

    def __init__(
        self,
        gav_strategy: GAVStrategy,
        working_dir: Path,
        target_type: TargetType = TargetType.JAVA,
    ):
        self.gav_strategy = gav_strategy
        self.working_dir = Path(working_dir)
        self.target_type = target_type

    def resolve(
        self,
        bundle: BundleNode,
        entries: list[str],
        options: Mapping[str, str],
    ) -> EmbeddedLibraries:
        """Resolve the given classpath entries of a bundle.

        Raises:
            DirectiveError: If a library directive cannot be parsed
        """
        result = EmbeddedLibraries()
        if not entries:
            return result

        if self.target_type is TargetType.OSGI:
            logger.warning("Detected embedded libraries in %s", bundle.location or bundle)
            return result

        for entry in entries:
            self._resolve_entry(bundle, entry, options, result)
        return result

    def _resolve_entry(
        self,
        bundle: BundleNode,
        entry: str,
        options: Mapping[str, str],
        result: EmbeddedLibraries,
    ) -> None:
        action = library_action(bundle, entry, options)
        directive = action.directive

        if directive in (ConversionDirective.IGNORE, ConversionDirective.OMIT):
            logger.info("%s/%s (ignored)", bundle, entry)
            return

        if directive is ConversionDirective.REPLACE:
            logger.info("%s/%s -> %s (mapped)", bundle, entry, action.replacement.key)
            result.artifacts.append(ConvertedArtifact(action.replacement, directive, True))
            return

        copy = self._copy_library(bundle, entry)
        if copy is None:
            result.missing.append(entry)
            return

        if directive is ConversionDirective.AUTO_DETECT:
            artifact = detect_maven_artifact(copy)
            if artifact is None:
                result.unhandled.append(entry)
                return
            logger.info("%s/%s -> %s (detected)", bundle, entry, artifact.key)
            result.artifacts.append(ConvertedArtifact(artifact, directive, True))
            return

        artifact = MavenArtifact(
            group_id=self.gav_strategy.group_id(bundle),
            artifact_id=self.gav_strategy.artifact_id(bundle, entry),
            version=self.gav_strategy.maven_version(bundle),
            file=copy,
        )
        logger.info("%s/%s -> %s (mavenized)", bundle, entry, artifact.key)
        result.artifacts.append(ConvertedArtifact(artifact, directive, True))

    def _copy_library(self, bundle: BundleNode, entry: str) -> Optional[Path]:
        if bundle.location is None:
            logger.debug("Bundle %s has no location", bundle)
            return None
        target = self.working_dir / str(bundle) / PurePosixPath(entry)
        try:
            return extract_entry(bundle.location, entry, target)
        except EntryNotFoundError:
            return None
        except zipfile.BadZipFile as e:
            logger.debug("Cannot read %s from %s: %s", entry, bundle.location, e)
            return None
