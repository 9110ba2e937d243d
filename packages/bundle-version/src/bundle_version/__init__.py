# SPDX-License-Identifier: MIT
"""OSGi and Maven version algebra for bundle conversion.

This package parses OSGi versions and version ranges, and orders Maven
versions the way Maven itself does, including range parsing and snapshot
detection.

Example:
    >>> from bundle_version import parse_version, parse_version_range
    >>>
    >>> version = parse_version("1.0.0.qualifier")
    >>> version.qualifier
    'qualifier'
    >>>
    >>> parse_version_range("[1.0,2.0)").includes(version)
    True
    >>>
    >>> from bundle_version import compare_maven_versions, is_maven_snapshot
    >>> compare_maven_versions("1.0-SNAPSHOT", "1.0")
    -1
    >>> is_maven_snapshot("1.0.0-SNAPSHOT")
    True
"""

__version__ = "0.1.0"

from .osgi import (
    Version,
    VersionRange,
    parse_version,
    parse_version_range,
    is_valid_version,
    InvalidVersionError,
    InvalidVersionRangeError,
    EmptyRangeError,
    EMPTY_VERSION,
    INFINITE_RANGE,
    VERSION_PATTERN,
)
from .maven import (
    MavenVersion,
    MavenVersionRange,
    Restriction,
    compare_maven_versions,
    maven_version_key,
    parse_maven_version_range,
    is_maven_snapshot,
    InvalidVersionRangeError as InvalidMavenVersionRangeError,
)

__all__ = [
    # OSGi versions
    "Version",
    "VersionRange",
    "parse_version",
    "parse_version_range",
    "is_valid_version",
    "InvalidVersionError",
    "InvalidVersionRangeError",
    "EmptyRangeError",
    "EMPTY_VERSION",
    "INFINITE_RANGE",
    "VERSION_PATTERN",
    # Maven versions
    "MavenVersion",
    "MavenVersionRange",
    "Restriction",
    "compare_maven_versions",
    "maven_version_key",
    "parse_maven_version_range",
    "is_maven_snapshot",
    "InvalidMavenVersionRangeError",
]
