# SPDX-License-Identifier: MIT
"""Tests for rendering and writing POMs."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from mavenizor.model import Dependency, PomModel
from mavenizor.options import OptionSet
from mavenizor.pom import POM_NAMESPACE, pom_path, pom_to_xml, write_pom, write_poms
from mavenizor.state import BundleState
from mavenizor.walker import MavenizeRequest, Mavenizor

NS = {"m": POM_NAMESPACE}


def _parse(xml: str) -> ET.Element:
    return ET.fromstring(xml.split("\n", 1)[1])


class TestPomToXml:
    """Tests for pom_to_xml."""

    def test_coordinates(self):
        xml = pom_to_xml(PomModel("hans", "wurst", "3"))

        assert xml.startswith("<?xml version='1.0' encoding='UTF-8'?>\n")
        root = _parse(xml)
        assert root.tag == f"{{{POM_NAMESPACE}}}project"
        assert root.findtext("m:modelVersion", namespaces=NS) == "4.0.0"
        assert root.findtext("m:groupId", namespaces=NS) == "hans"
        assert root.findtext("m:artifactId", namespaces=NS) == "wurst"
        assert root.findtext("m:version", namespaces=NS) == "3"
        assert root.find("m:dependencies", NS) is None

    def test_dependencies(self):
        pom = PomModel(
            "org.foo",
            "org.foo",
            "1.0.0",
            dependencies=[
                Dependency("hans", "wurst", "3"),
                Dependency("org.bar", "bar", "[1,2)", classifier="bin", type="zip", scope="provided", optional=True),
            ],
        )

        root = _parse(pom_to_xml(pom))

        plain, full = root.findall("m:dependencies/m:dependency", NS)
        assert plain.findtext("m:version", namespaces=NS) == "3"
        assert plain.find("m:type", NS) is None
        assert plain.find("m:scope", NS) is None
        assert plain.find("m:optional", NS) is None
        assert full.findtext("m:version", namespaces=NS) == "[1,2)"
        assert full.findtext("m:type", namespaces=NS) == "zip"
        assert full.findtext("m:classifier", namespaces=NS) == "bin"
        assert full.findtext("m:scope", namespaces=NS) == "provided"
        assert full.findtext("m:optional", namespaces=NS) == "true"

    def test_default_namespace(self):
        xml = pom_to_xml(PomModel("hans", "wurst", "3"))
        assert f'<project xmlns="{POM_NAMESPACE}"' in xml
        assert "ns0:" not in xml


class TestWritePoms:
    """Tests for writing POMs in repository layout."""

    def test_pom_path(self, tmp_path: Path):
        path = pom_path(PomModel("org.foo", "bar", "1.0.0-SNAPSHOT"), tmp_path)
        assert path == tmp_path / "org" / "foo" / "bar" / "1.0.0-SNAPSHOT" / "bar-1.0.0-SNAPSHOT.pom"

    def test_write_pom(self, tmp_path: Path):
        path = write_pom(PomModel("hans", "wurst", "3"), tmp_path / "a" / "b.pom")
        assert _parse(path.read_text(encoding="utf-8")).findtext("m:artifactId", namespaces=NS) == "wurst"

    def test_write_poms(self, make_bundle, tmp_path: Path):
        api = make_bundle("org.foo.api")
        impl = make_bundle("org.foo.impl")
        state = BundleState([api, impl])
        result = Mavenizor().mavenize(
            MavenizeRequest(state, OptionSet(), working_dir=tmp_path / "work")
        )

        written = write_poms(result, tmp_path / "repo")

        assert written == [
            tmp_path / "repo" / "org" / "foo" / "org.foo.api" / "1.0.0" / "org.foo.api-1.0.0.pom",
            tmp_path / "repo" / "org" / "foo" / "org.foo.impl" / "1.0.0" / "org.foo.impl-1.0.0.pom",
        ]
        assert all(path.exists() for path in written)
