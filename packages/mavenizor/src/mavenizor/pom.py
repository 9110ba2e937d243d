# SPDX-License-Identifier: MIT
"""Rendering POM stubs as Maven ``pom.xml`` documents."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import TYPE_CHECKING

from .model import Dependency, PomModel

if TYPE_CHECKING:
    from .walker import MavenizationResult

logger = logging.getLogger(__name__)

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
SCHEMA_LOCATION = f"{POM_NAMESPACE} https://maven.apache.org/xsd/maven-4.0.0.xsd"

ET.register_namespace("", POM_NAMESPACE)
ET.register_namespace("xsi", XSI_NAMESPACE)


def _tag(name: str) -> str:
    return f"{{{POM_NAMESPACE}}}{name}"


def _child(parent: ET.Element, name: str, text: str) -> ET.Element:
    element = ET.SubElement(parent, _tag(name))
    element.text = text
    return element


def _dependency_element(parent: ET.Element, dependency: Dependency) -> None:
    element = ET.SubElement(parent, _tag("dependency"))
    _child(element, "groupId", dependency.group_id)
    _child(element, "artifactId", dependency.artifact_id)
    _child(element, "version", dependency.version)
    if dependency.type:
        _child(element, "type", dependency.type)
    if dependency.classifier:
        _child(element, "classifier", dependency.classifier)
    if dependency.scope:
        _child(element, "scope", dependency.scope)
    if dependency.optional:
        _child(element, "optional", "true")


def pom_to_element(pom: PomModel) -> ET.Element:
    """Build the ``<project>`` element of a POM."""
    project = ET.Element(_tag("project"))
    project.set(f"{{{XSI_NAMESPACE}}}schemaLocation", SCHEMA_LOCATION)
    _child(project, "modelVersion", pom.model_version)
    _child(project, "groupId", pom.group_id)
    _child(project, "artifactId", pom.artifact_id)
    _child(project, "version", pom.version)
    if pom.dependencies:
        dependencies = ET.SubElement(project, _tag("dependencies"))
        for dependency in pom.dependencies:
            _dependency_element(dependencies, dependency)
    return project


def pom_to_xml(pom: PomModel) -> str:
    """Render a POM as an indented XML document.

    Example:
        >>> print(pom_to_xml(PomModel("hans", "wurst", "3")))  # doctest: +ELLIPSIS
        <?xml version='1.0' encoding='UTF-8'?>
        <project xmlns="http://maven.apache.org/POM/4.0.0" ...>
        ...
    """
    tree = ET.ElementTree(pom_to_element(pom))
    ET.indent(tree, space="  ")
    body = ET.tostring(tree.getroot(), encoding="unicode")
    return f"<?xml version='1.0' encoding='UTF-8'?>\n{body}\n"


def write_pom(pom: PomModel, path: Path) -> Path:
    """Write a POM to ``path``, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(pom_to_xml(pom), encoding="utf-8")
    return path


def pom_path(pom: PomModel, output_dir: Path) -> Path:
    """Repository layout path: ``<g as path>/<a>/<v>/<a>-<v>.pom``."""
    return (
        Path(output_dir)
        / Path(*pom.group_id.split("."))
        / pom.artifact_id
        / pom.version
        / f"{pom.artifact_id}-{pom.version}.pom"
    )


def write_poms(result: MavenizationResult, output_dir: Path) -> list[Path]:
    """Write one POM per ArtifactBundle of a result in repository layout.

    Returns:
        The written paths, in ArtifactBundle order
    """
    written = []
    for artifact_bundle in result.artifact_bundles():
        path = write_pom(artifact_bundle.pom, pom_path(artifact_bundle.pom, output_dir))
        logger.debug("Wrote %s", path)
        written.append(path)
    return written
