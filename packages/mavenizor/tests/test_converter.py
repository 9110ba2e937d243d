# SPDX-License-Identifier: MIT
"""Tests for converting single bundles."""

from __future__ import annotations

from pathlib import Path

import pytest

from mavenizor.converter import BundleConverter, artifact_from_headers
from mavenizor.errors import DirectiveError
from mavenizor.gav import GAVStrategy
from mavenizor.model import BundleNode, ConversionDirective


@pytest.fixture
def converter(working_dir: Path) -> BundleConverter:
    return BundleConverter(GAVStrategy(), working_dir)


@pytest.fixture
def bundle(make_bundle, make_jar) -> BundleNode:
    """A bundle embedding a library without Maven metadata."""
    location = make_jar("org.sourcepit.foo_1.0.0.jar", {"embedded.jar": b"plain"})
    return make_bundle(
        "org.sourcepit.foo", "1.0.0.qualifier", location=location, classpath=(".", "embedded.jar")
    )


@pytest.fixture
def options(bundle: BundleNode) -> dict[str, str]:
    return {f"{bundle}/embedded.jar": "mavenize"}


def _keys(result) -> list[str]:
    return [a.artifact.key for a in result.converted_artifacts]


class TestBundleConverter:
    """Tests for BundleConverter.convert."""

    def test_mavenize_with_library(self, converter, bundle, options):
        result = converter.convert(bundle, options)

        assert result.directive is ConversionDirective.MAVENIZE
        assert _keys(result) == [
            "org.sourcepit.foo:org.sourcepit.foo:jar:1.0.0-SNAPSHOT",
            "org.sourcepit.foo:embedded:jar:1.0.0-SNAPSHOT",
        ]
        main, library = result.converted_artifacts
        assert not main.is_embedded_library
        assert main.artifact.file == bundle.location
        assert library.is_embedded_library
        assert library.directive is ConversionDirective.MAVENIZE

    def test_ignore_bundle(self, converter, bundle, options):
        options[str(bundle)] = "ignore"
        result = converter.convert(bundle, options)

        assert result.directive is ConversionDirective.IGNORE
        assert result.converted_artifacts == []
        assert result.unhandled_embedded_libraries == []

    def test_ignore_library(self, converter, bundle, options):
        options[f"{bundle}/embedded.jar"] = "ignore"
        result = converter.convert(bundle, options)

        assert len(result.converted_artifacts) == 1
        assert not result.converted_artifacts[0].is_embedded_library

    def test_omit_main_bundle(self, converter, bundle, options):
        options[str(bundle)] = "omit"
        result = converter.convert(bundle, options)

        assert result.directive is ConversionDirective.OMIT
        assert len(result.converted_artifacts) == 1
        converted = result.converted_artifacts[0]
        assert converted.artifact.artifact_id == "embedded"
        assert converted.is_embedded_library

    def test_omit_without_embedded_library_keeps_main(self, converter, make_bundle):
        bundle = make_bundle("org.sourcepit.bar")
        result = converter.convert(bundle, {"org.sourcepit.bar": "omit"})

        assert _keys(result) == ["org.sourcepit.bar:org.sourcepit.bar:jar:1.0.0"]
        assert not result.converted_artifacts[0].is_embedded_library

    def test_replace_bundle(self, converter, bundle, options):
        options[str(bundle)] = "foo:bar:jar:2"
        result = converter.convert(bundle, options)

        assert _keys(result) == ["foo:bar:jar:2"]
        assert result.converted_artifacts[0].directive is ConversionDirective.REPLACE
        assert result.mavenized_artifacts == []

    def test_replace_library(self, converter, bundle, options):
        options[f"{bundle}/embedded.jar"] = "foo:bar:jar:2"
        result = converter.convert(bundle, options)

        assert len(result.converted_artifacts) == 2
        replaced = result.converted_artifacts[1]
        assert replaced.directive is ConversionDirective.REPLACE
        assert replaced.artifact.gav == "foo:bar:2"

    def test_auto_detect_library(self, converter, make_bundle, make_jar, maven_metadata):
        library = make_jar("lib.jar", maven_metadata("hans", "wurst", "3"))
        location = make_jar("org.foo_1.0.0.jar", {"lib/wurst.jar": library.read_bytes()})
        bundle = make_bundle("org.foo", location=location, classpath=(".", "lib/wurst.jar"))

        result = converter.convert(bundle, {})

        assert len(result.converted_artifacts) == 2
        assert not result.converted_artifacts[0].is_embedded_library
        detected = result.converted_artifacts[1]
        assert detected.is_embedded_library
        assert detected.directive is ConversionDirective.AUTO_DETECT
        assert detected.artifact.gav == "hans:wurst:3"

    def test_auto_detect_library_ambiguous(self, converter, make_bundle, make_jar, maven_metadata):
        library = make_jar(
            "fat.jar", {**maven_metadata("hans", "wurst", "3"), **maven_metadata("hans", "brot", "1")}
        )
        location = make_jar("org.foo_1.0.0.jar", {"lib/fat.jar": library.read_bytes()})
        bundle = make_bundle("org.foo", location=location, classpath=("lib/fat.jar",))

        result = converter.convert(bundle, {})

        assert len(result.converted_artifacts) == 1
        assert not result.converted_artifacts[0].is_embedded_library
        assert result.unhandled_embedded_libraries == ["lib/fat.jar"]

    def test_auto_detect_bundle_from_jar(self, converter, make_bundle, make_jar, maven_metadata):
        location = make_jar("org.foo_1.0.0.jar", maven_metadata("org.foo", "foo-core", "1.2.3"))
        bundle = make_bundle("org.foo.core", location=location)

        result = converter.convert(bundle, {})

        assert result.directive is ConversionDirective.AUTO_DETECT
        assert _keys(result) == ["org.foo:foo-core:jar:1.2.3"]
        assert not result.converted_artifacts[0].is_embedded_library
        assert result.mavenized_artifacts == []

    def test_auto_detect_bundle_from_directory(self, converter, make_bundle, tmp_path: Path):
        location = tmp_path / "org.foo.core_1.0.0"
        base = location / "META-INF" / "maven" / "org.foo" / "foo-core"
        base.mkdir(parents=True)
        (base / "pom.properties").write_text("groupId=org.foo\nartifactId=foo-core\nversion=1.2.3\n")
        bundle = make_bundle("org.foo.core", location=location)

        result = converter.convert(bundle, {})

        assert _keys(result) == ["org.foo:foo-core:jar:1.2.3"]

    def test_auto_detect_bundle_from_headers(self, converter, make_bundle):
        bundle = make_bundle(
            "org.foo.core",
            headers={
                "Maven-GroupId": "org.foo",
                "Maven-ArtifactId": "foo-core",
                "Maven-Version": "1.2.3",
                "Maven-Classifier": "bin",
                "Maven-Type": "zip",
            },
        )

        result = converter.convert(bundle, {})

        assert _keys(result) == ["org.foo:foo-core:zip:bin:1.2.3"]

    def test_invalid_bundle_directive(self, converter, make_bundle):
        with pytest.raises(DirectiveError):
            converter.convert(make_bundle("org.foo"), {"org.foo": "bogus"})


class TestArtifactFromHeaders:
    """Tests for artifact_from_headers."""

    def test_incomplete_headers(self, make_bundle):
        bundle = make_bundle("org.foo", headers={"Maven-GroupId": "org.foo"})
        assert artifact_from_headers(bundle) is None

    def test_default_type(self, make_bundle):
        bundle = make_bundle(
            "org.foo",
            headers={"Maven-GroupId": "g", "Maven-ArtifactId": "a", "Maven-Version": "1"},
        )
        artifact = artifact_from_headers(bundle)
        assert artifact.type == "jar"
        assert artifact.classifier is None
