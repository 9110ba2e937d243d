# SPDX-License-Identifier: MIT
"""Reading entries and Maven metadata from bundle directories and archives.

A bundle or embedded library is either an exploded directory or a zip
archive (``.jar``). Maven-built jars carry their coordinates in
``META-INF/maven/<groupId>/<artifactId>/pom.properties``.
"""

from __future__ import annotations

import logging
import shutil
import xml.etree.ElementTree as ET
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional

from .model import MavenArtifact
from .properties import parse_properties

logger = logging.getLogger(__name__)

MAVEN_METADATA_DIR = "META-INF/maven"
POM_PROPERTIES = "pom.properties"
POM_XML = "pom.xml"

NS = {"m": "http://maven.apache.org/POM/4.0.0"}

# Packaging types of Tycho-built projects, whose coordinates are not usable
ECLIPSE_PACKAGING_PREFIX = "eclipse-"


class EntryNotFoundError(Exception):
    """Raised when an entry does not exist in a bundle.

    Attributes:
        location: The bundle directory or archive
        entry: The relative entry path
    """

    def __init__(self, location: Path, entry: str):
        self.location = location
        self.entry = entry
        super().__init__(f"Entry '{entry}' not found in {location}")


def _normalize_entry(entry: str) -> str:
    return str(PurePosixPath(entry.replace("\\", "/"))).lstrip("/")


def read_entry(location: Path, entry: str) -> bytes:
    """Read the bytes of a file entry.

    Args:
        location: A bundle directory or zip archive
        entry: Path of the entry relative to the bundle root

    Returns:
        The entry content

    Raises:
        EntryNotFoundError: If the entry is missing or is a directory
    """
    location = Path(location)
    entry = _normalize_entry(entry)

    if location.is_dir():
        path = location / entry
        if not path.is_file():
            raise EntryNotFoundError(location, entry)
        return path.read_bytes()

    if not zipfile.is_zipfile(location):
        raise EntryNotFoundError(location, entry)
    with zipfile.ZipFile(location, "r") as zf:
        try:
            return zf.read(entry)
        except KeyError:
            raise EntryNotFoundError(location, entry) from None


def extract_entry(location: Path, entry: str, target: Path) -> Path:
    """Copy a file or directory entry out of a bundle.

    Args:
        location: A bundle directory or zip archive
        entry: Path of the entry relative to the bundle root
        target: Destination path for the copy

    Returns:
        The destination path

    Raises:
        EntryNotFoundError: If the entry does not exist
    """
    location = Path(location)
    entry = _normalize_entry(entry)
    target.parent.mkdir(parents=True, exist_ok=True)

    if location.is_dir():
        source = location / entry
        if source.is_dir():
            if target.exists():
                shutil.rmtree(target)
            shutil.copytree(source, target)
        elif source.is_file():
            shutil.copyfile(source, target)
        else:
            raise EntryNotFoundError(location, entry)
        return target

    if not zipfile.is_zipfile(location):
        raise EntryNotFoundError(location, entry)

    with zipfile.ZipFile(location, "r") as zf:
        names = zf.namelist()
        if entry in names:
            target.write_bytes(zf.read(entry))
            return target

        prefix = entry.rstrip("/") + "/"
        members = [n for n in names if n.startswith(prefix) and not n.endswith("/")]
        if not members:
            raise EntryNotFoundError(location, entry)
        for name in members:
            destination = target / name[len(prefix) :]
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(zf.read(name))
    return target


def _maven_metadata_entries(location: Path, file_name: str) -> list[str]:
    """List ``META-INF/maven/<g>/<a>/<file_name>`` entries of a jar or directory."""
    if location.is_dir():
        base = location / MAVEN_METADATA_DIR
        if not base.is_dir():
            return []
        names = [p.relative_to(location).as_posix() for p in base.rglob(file_name)]
    elif location.suffix == ".jar" and zipfile.is_zipfile(location):
        try:
            with zipfile.ZipFile(location, "r") as zf:
                names = zf.namelist()
        except zipfile.BadZipFile:
            logger.debug("Cannot read archive %s", location)
            return []
    else:
        return []

    result = []
    for name in names:
        parts = PurePosixPath(name).parts
        if (
            len(parts) == 5
            and "/".join(parts[:2]) == MAVEN_METADATA_DIR
            and parts[4] == file_name
        ):
            result.append(name)
    return sorted(result)


def _packaging(pom_content: bytes) -> Optional[str]:
    try:
        root = ET.fromstring(pom_content)
    except ET.ParseError:
        return None
    packaging = root.find("m:packaging", NS)
    if packaging is None:
        packaging = root.find("packaging")
    if packaging is None or not packaging.text:
        return None
    return packaging.text.strip()


@dataclass(frozen=True)
class PomMetadata:
    """Coordinates found in a ``pom.properties`` entry."""

    entry: str
    group_id: str
    artifact_id: str
    version: str


def find_pom_properties(location: Path) -> list[PomMetadata]:
    """Read every ``pom.properties`` of a jar or directory.

    Only ``.jar`` archives and directories are searched; entries that cannot
    be read or lack one of groupId, artifactId or version are skipped.
    """
    location = Path(location)
    result = []
    for entry in _maven_metadata_entries(location, POM_PROPERTIES):
        try:
            props = parse_properties(read_entry(location, entry).decode("iso-8859-1"))
        except (ValueError, zipfile.BadZipFile) as e:
            logger.debug("Skipping unreadable %s in %s: %s", entry, location, e)
            continue
        group_id = props.get("groupId")
        artifact_id = props.get("artifactId")
        version = props.get("version")
        if group_id and artifact_id and version:
            result.append(PomMetadata(entry, group_id, artifact_id, version))
        else:
            logger.debug("Skipping incomplete %s in %s", entry, location)
    return result


def has_eclipse_packaging(location: Path) -> bool:
    """Check whether the single ``pom.xml`` of a jar or directory is a Tycho build."""
    location = Path(location)
    entries = _maven_metadata_entries(location, POM_XML)
    if len(entries) != 1:
        return False
    try:
        packaging = _packaging(read_entry(location, entries[0]))
    except zipfile.BadZipFile:
        return False
    return packaging is not None and packaging.startswith(ECLIPSE_PACKAGING_PREFIX)


def detect_maven_artifact(location: Path) -> Optional[MavenArtifact]:
    """Detect the Maven coordinates of a jar or directory.

    Exactly one ``pom.properties`` must be present and the project must not
    use an ``eclipse-*`` packaging.

    Returns:
        The detected artifact bound to ``location``, or None
    """
    location = Path(location)
    found = find_pom_properties(location)
    if len(found) != 1:
        if len(found) > 1:
            logger.debug("Ambiguous Maven metadata in %s: %s", location, [f.entry for f in found])
        return None
    if has_eclipse_packaging(location):
        logger.debug("Ignoring Maven metadata of eclipse packaging in %s", location)
        return None

    metadata = found[0]
    return MavenArtifact(
        group_id=metadata.group_id,
        artifact_id=metadata.artifact_id,
        version=metadata.version,
        file=location,
    )
