# SPDX-License-Identifier: MIT
"""Tests for reading and writing Java properties files."""

from __future__ import annotations

from pathlib import Path

import pytest

from mavenizor.properties import dump_properties, format_properties, load_properties, parse_properties


class TestParseProperties:
    """Tests for parse_properties."""

    def test_separators(self):
        text = "a=1\nb: 2\nc 3\nd\t=\t4\n"
        assert parse_properties(text) == {"a": "1", "b": "2", "c": "3", "d": "4"}

    def test_comments_and_blank_lines(self):
        text = "# comment\n! also a comment\n\n   \nkey=value\n"
        assert parse_properties(text) == {"key": "value"}

    def test_order_is_preserved(self):
        assert list(parse_properties("z=1\na=2\nm=3\n")) == ["z", "a", "m"]

    def test_line_continuation(self):
        text = "key=first, \\\n    second\n"
        assert parse_properties(text) == {"key": "first, second"}

    def test_escapes(self):
        text = "a\\=b=c\\td\nunicode=\\u00e9\n"
        assert parse_properties(text) == {"a=b": "c\td", "unicode": "\u00e9"}

    def test_key_without_value(self):
        assert parse_properties("lonely\n") == {"lonely": ""}

    def test_later_entries_override(self):
        assert parse_properties("a=1\na=2\n") == {"a": "2"}

    def test_directive_entries(self):
        text = (
            "org.foo[_1.0.0]/lib/bar.jar=ignore\n"
            "org.foo/lib/baz.jar=hans:wurst:jar:3\n"
        )
        assert parse_properties(text) == {
            "org.foo[_1.0.0]/lib/bar.jar": "ignore",
            "org.foo/lib/baz.jar": "hans:wurst:jar:3",
        }


class TestWriteProperties:
    """Tests for writing properties."""

    def test_format(self):
        text = format_properties({"a": "1", "b c": "x y"}, comments=["header"])
        assert text == "# header\na=1\nb\\ c=x y\n"

    def test_escaped_key_characters(self):
        text = format_properties({"a=b": "c"})
        assert text == "a\\=b=c\n"

    def test_dump_and_load(self, tmp_path: Path):
        entries = {"org.foo/lib/bar.jar": "ignore", "key with space": "tab\there"}
        path = dump_properties(entries, tmp_path / "nested" / "lib.properties")

        assert path.exists()
        assert load_properties(path) == entries

    def test_non_ascii_is_escaped(self, tmp_path: Path):
        assert format_properties({"café": "naïve \U0001f600"}) == "caf\\u00e9=na\\u00efve \\ud83d\\ude00\n"

        entries = {"org.café/lib/ü.jar": "ignore", "name": "naïve \U0001f600"}
        path = dump_properties(entries, tmp_path / "lib.properties", comments=["Biblioth\u00e8ques \u2603"])

        assert path.read_bytes().isascii()
        assert path.read_text().startswith("# Biblioth\\u00e8ques \\u2603\n")
        assert load_properties(path) == entries


class TestLoadProperties:
    """Tests for load_properties."""

    def test_latin1_file(self, tmp_path: Path):
        path = tmp_path / "options.properties"
        path.write_bytes(b"# r\xe9sum\xe9\norg.foo=caf\xe9\n")

        assert load_properties(path) == {"org.foo": "café"}

    def test_malformed_escape(self, tmp_path: Path):
        path = tmp_path / "options.properties"
        path.write_text("org.foo=\\u00zz\n")

        with pytest.raises(ValueError, match="Malformed"):
            load_properties(path)
