# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for mavenizor tests."""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Callable, Optional

import pytest
from click.testing import CliRunner

from bundle_version import parse_version
from mavenizor.model import BundleNode


def pom_properties(group_id: str, artifact_id: str, version: str) -> str:
    """Render the pom.properties Maven puts into built jars."""
    return (
        "#Generated by Maven\n"
        f"groupId={group_id}\n"
        f"artifactId={artifact_id}\n"
        f"version={version}\n"
    )


def maven_entries(group_id: str, artifact_id: str, version: str) -> dict[str, str]:
    """Entries describing a Maven-built jar."""
    base = f"META-INF/maven/{group_id}/{artifact_id}"
    return {
        f"{base}/pom.properties": pom_properties(group_id, artifact_id, version),
        f"{base}/pom.xml": (
            '<project xmlns="http://maven.apache.org/POM/4.0.0">'
            f"<groupId>{group_id}</groupId><artifactId>{artifact_id}</artifactId>"
            f"<version>{version}</version><packaging>jar</packaging></project>"
        ),
    }


def write_jar(path: Path, entries: dict[str, str | bytes]) -> Path:
    """Write a zip archive with the given entries."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return path


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_bundle() -> Callable[..., BundleNode]:
    """Factory for BundleNode instances."""

    def factory(
        symbolic_name: str,
        version: str = "1.0.0",
        location: Optional[Path] = None,
        classpath: tuple[str, ...] = (),
        headers: Optional[dict[str, str]] = None,
    ) -> BundleNode:
        return BundleNode(
            symbolic_name=symbolic_name,
            version=parse_version(version),
            location=location,
            classpath=tuple(classpath),
            headers=dict(headers or {}),
        )

    return factory


@pytest.fixture
def make_jar(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing jars below ``tmp_path/jars``."""

    def factory(name: str, entries: Optional[dict[str, str | bytes]] = None) -> Path:
        if entries is None:
            entries = {"META-INF/MANIFEST.MF": "Manifest-Version: 1.0\n"}
        return write_jar(tmp_path / "jars" / name, entries)

    return factory


@pytest.fixture
def working_dir(tmp_path: Path) -> Path:
    """Staging directory for embedded libraries."""
    return tmp_path / "work"


@pytest.fixture
def maven_metadata() -> Callable[[str, str, str], dict[str, str]]:
    """Factory for the ``META-INF/maven`` entries of a Maven-built jar."""
    return maven_entries
