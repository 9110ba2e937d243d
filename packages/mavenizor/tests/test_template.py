# SPDX-License-Identifier: MIT
"""Tests for the library directive template."""

from __future__ import annotations

from pathlib import Path

import pytest

from mavenizor.options import OptionSet
from mavenizor.properties import load_properties
from mavenizor.state import BundleState
from mavenizor.template import (
    TEMPLATE_FILE_NAME,
    build_property_template,
    directive_choices,
    template_key,
    write_property_template,
)
from mavenizor.walker import MavenizeRequest, Mavenizor


@pytest.fixture
def result(make_bundle, make_jar, working_dir: Path):
    """A run with one unhandled and one missing library."""
    location = make_jar("org.foo_1.0.0.jar", {"lib/plain.jar": b"plain"})
    bundle = make_bundle("org.foo", location=location, classpath=(".", "lib/plain.jar", "lib/gone.jar"))
    request = MavenizeRequest(BundleState([bundle]), OptionSet(), working_dir=working_dir)
    return Mavenizor().mavenize(request)


def test_directive_choices():
    assert directive_choices() == (
        "auto_detect | mavenize | omit | ignore | "
        "<groupId>:<artifactId>:<type>[:<classifier>]:<version>"
    )


def test_template_key(make_bundle):
    assert template_key(make_bundle("org.foo", "1.2.0"), "lib/a.jar") == "org.foo[_1.2.0]/lib/a.jar"


def test_build_property_template(result):
    assert build_property_template(result) == {
        "org.foo[_1.0.0]/lib/plain.jar": directive_choices(),
        "org.foo[_1.0.0]/lib/gone.jar": "ignore",
    }


def test_empty_template(make_bundle, working_dir: Path):
    request = MavenizeRequest(BundleState([make_bundle("org.foo")]), OptionSet(), working_dir=working_dir)
    assert build_property_template(Mavenizor().mavenize(request)) == {}


def test_write_property_template(result, tmp_path: Path):
    path = write_property_template(result, tmp_path / "out" / "template.properties")

    assert path == tmp_path / "out" / "template.properties"
    assert path.read_text(encoding="utf-8").startswith("# ")
    assert load_properties(path) == build_property_template(result)


def test_write_property_template_into_directory(result, tmp_path: Path):
    path = write_property_template(result, tmp_path)
    assert path == tmp_path / TEMPLATE_FILE_NAME
    assert path.exists()
