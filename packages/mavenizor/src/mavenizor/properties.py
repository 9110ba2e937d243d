# SPDX-License-Identifier: MIT
"""Reading and writing Java ``.properties`` files.

Supports ``#``/``!`` comments, ``=``, ``:`` and whitespace separators,
backslash escapes (including ``\\uXXXX``) and line continuations.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Optional

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_KEY_TERMINATORS = "=: \t\f"


def _logical_lines(text: str) -> Iterator[str]:
    pending: Optional[str] = None
    for raw in text.splitlines():
        line = raw.lstrip(" \t\f") if pending is not None else raw
        if pending is None:
            stripped = line.lstrip(" \t\f")
            if not stripped or stripped[0] in "#!":
                continue
            line = stripped

        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = (pending or "") + line[:-1]
            continue

        yield (pending or "") + line
        pending = None

    if pending is not None:
        yield pending


def _unescape(text: str) -> str:
    result = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "\\" or i + 1 >= len(text):
            result.append(char)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt == "u" and i + 6 <= len(text):
            try:
                result.append(chr(int(text[i + 2 : i + 6], 16)))
                i += 6
                continue
            except ValueError:
                raise ValueError(f"Malformed \\uXXXX escape: {text[i:i + 6]}") from None
        result.append(_ESCAPES.get(nxt, nxt))
        i += 2
    # surrogate pairs from \uXXXX escapes combine into one character
    return "".join(result).encode("utf-16-le", "surrogatepass").decode("utf-16-le")


def _split_entry(line: str) -> tuple[str, str]:
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in _KEY_TERMINATORS:
            break
        i += 1

    key = line[:i]
    rest = line[i:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> dict[str, str]:
    """Parse ``.properties`` content into an ordered dict.

    Later duplicates overwrite earlier values but keep the first position.

    Example:
        >>> parse_properties("# comment\\ngroupId=hans\\nartifactId : wurst")
        {'groupId': 'hans', 'artifactId': 'wurst'}
    """
    return dict(_split_entry(line) for line in _logical_lines(text))


def load_properties(path: Path | str, encoding: str = "iso-8859-1") -> dict[str, str]:
    """Read a ``.properties`` file, ISO-8859-1 encoded like Java writes them.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file holds a malformed escape
    """
    return parse_properties(Path(path).read_text(encoding=encoding))


def _unicode_escape(char: str) -> str:
    units = char.encode("utf-16-be", "surrogatepass")
    return "".join(f"\\u{int.from_bytes(units[i : i + 2], 'big'):04x}" for i in range(0, len(units), 2))


def _escape(text: str, is_key: bool) -> str:
    result = []
    for index, char in enumerate(text):
        if char == "\\":
            result.append("\\\\")
        elif char == "\n":
            result.append("\\n")
        elif char == "\r":
            result.append("\\r")
        elif char == "\t":
            result.append("\\t")
        elif char == "\f":
            result.append("\\f")
        elif char == " " and (is_key or index == 0):
            result.append("\\ ")
        elif char in "=:#!" and is_key:
            result.append("\\" + char)
        elif ord(char) > 0x7E:
            result.append(_unicode_escape(char))
        else:
            result.append(char)
    return "".join(result)


def format_properties(
    entries: Mapping[str, str] | Iterable[tuple[str, str]],
    comments: Iterable[str] = (),
) -> str:
    """Render entries as ``.properties`` text, one ``key=value`` per line."""
    if isinstance(entries, Mapping):
        entries = entries.items()
    comments = ("".join(c if ord(c) <= 0x7E else _unicode_escape(c) for c in comment) for comment in comments)
    lines = [f"# {comment}" if comment else "#" for comment in comments]
    lines.extend(f"{_escape(key, True)}={_escape(value, False)}" for key, value in entries)
    return "\n".join(lines) + "\n"


def dump_properties(
    entries: Mapping[str, str] | Iterable[tuple[str, str]],
    path: Path | str,
    comments: Iterable[str] = (),
    encoding: str = "iso-8859-1",
) -> Path:
    """Write entries to a ``.properties`` file, creating parent directories.

    Characters outside printable ASCII are written as ``\\uXXXX`` escapes.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_properties(entries, comments), encoding=encoding)
    return path
