# SPDX-License-Identifier: MIT
"""Conversion configuration from ``[tool.mavenizor]`` in pyproject.toml.

Example configuration::

    [tool.mavenizor]
    target_type = "java"
    working_dir = "target/mavenizor"
    group_id_prefix = "mavenized"
    trim_qualifiers = false
    group3_prefixes = ["org.eclipse"]
    input_bundles = ["org.example.**"]
    library_mappings = ["org.example.core/lib/foo.jar=ignore"]

    [tool.mavenizor.group_id_mappings]
    "!org.example.**" = "thirdparty.${bundle.groupId}"

    [tool.mavenizor.options]
    "org.example.**@requirements.optional" = "org.eclipse.**"
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .errors import ConfigError
from .gav import GAVStrategyRequest
from .model import TargetType
from .options import OptionSet
from .state import BundleState
from .walker import MavenizeRequest

DEFAULT_WORKING_DIR = "target/mavenizor"


def _expect(value: Any, kind: type | tuple[type, ...], key: str) -> Any:
    if not isinstance(value, kind):
        names = kind.__name__ if isinstance(kind, type) else " or ".join(k.__name__ for k in kind)
        raise ConfigError(f"[tool.mavenizor].{key} must be of type {names}")
    return value


def _string_list(value: Any, key: str) -> list[str]:
    _expect(value, list, key)
    for item in value:
        _expect(item, str, key)
    return list(value)


def _string_table(value: Any, key: str) -> dict[str, str]:
    _expect(value, dict, key)
    for item in value.values():
        _expect(item, str, key)
    return dict(value)


def split_mapping(entry: str, key: str) -> tuple[str, str]:
    """Split a ``key=value`` entry.

    Raises:
        ConfigError: Unless the entry holds exactly one ``=``
    """
    parts = entry.split("=")
    if len(parts) != 2 or not parts[0].strip():
        raise ConfigError(f"Invalid {key} entry '{entry}' (expected key=value)")
    return parts[0].strip(), parts[1].strip()


@dataclass
class MavenizorConfig:
    """Settings of a conversion run.

    Attributes:
        target_type: Kind of artifacts to produce
        working_dir: Staging directory for embedded libraries
        group_id_prefix: Prefix prepended to every groupId
        trim_qualifiers: Drop qualifiers that are not snapshots
        use_default_snapshot_rules: Keep the built-in snapshot rules
        group3_prefixes: Additional deep-group prefixes
        group_id_mappings: Ordered pattern -> groupId template mappings
        input_bundles: Patterns selecting the input bundles
        options: Ordered option map, library mappings included
    """

    target_type: TargetType = TargetType.JAVA
    working_dir: Path = Path(DEFAULT_WORKING_DIR)
    group_id_prefix: Optional[str] = None
    trim_qualifiers: bool = False
    use_default_snapshot_rules: bool = True
    group3_prefixes: list[str] = field(default_factory=list)
    group_id_mappings: dict[str, str] = field(default_factory=dict)
    input_bundles: list[str] = field(default_factory=list)
    options: OptionSet = field(default_factory=OptionSet)

    @classmethod
    def from_pyproject(cls, pyproject_path: str | Path) -> MavenizorConfig:
        """Create a MavenizorConfig from a pyproject.toml file.

        Relative paths resolve against the directory holding the file.

        Raises:
            ConfigError: If the file or its [tool.mavenizor] table is invalid
            FileNotFoundError: If the file doesn't exist
        """
        path = Path(pyproject_path)
        if not path.exists():
            raise FileNotFoundError(f"pyproject.toml not found: {path}")

        try:
            with open(path, "rb") as f:
                pyproject = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML syntax: {e}") from e

        return cls.from_pyproject_dict(pyproject, base_dir=path.parent)

    @classmethod
    def from_pyproject_dict(
        cls,
        pyproject: dict[str, Any],
        base_dir: Optional[str | Path] = None,
    ) -> MavenizorConfig:
        """Create a MavenizorConfig from a parsed pyproject.toml dictionary.

        Raises:
            ConfigError: On wrong types, malformed entries or unknown target types
        """
        tool = _expect(pyproject.get("tool", {}), dict, "tool")
        table = _expect(tool.get("mavenizor", {}), dict, "mavenizor")

        target_name = _expect(table.get("target_type", TargetType.JAVA.value), str, "target_type")
        try:
            target_type = TargetType(target_name.lower())
        except ValueError:
            raise ConfigError(
                f"Unknown target_type '{target_name}' (expected java or osgi)"
            ) from None

        working_dir = Path(_expect(table.get("working_dir", DEFAULT_WORKING_DIR), str, "working_dir"))
        if base_dir is not None and not working_dir.is_absolute():
            working_dir = Path(base_dir) / working_dir

        group_id_prefix = table.get("group_id_prefix")
        if group_id_prefix is not None:
            _expect(group_id_prefix, str, "group_id_prefix")

        options = OptionSet()
        for key, value in _string_table(table.get("options", {}), "options").items():
            options[key] = value
        for entry in _string_list(table.get("library_mappings", []), "library_mappings"):
            key, value = split_mapping(entry, "library_mappings")
            options[key] = value

        return cls(
            target_type=target_type,
            working_dir=working_dir,
            group_id_prefix=group_id_prefix or None,
            trim_qualifiers=_expect(table.get("trim_qualifiers", False), bool, "trim_qualifiers"),
            use_default_snapshot_rules=_expect(
                table.get("use_default_snapshot_rules", True), bool, "use_default_snapshot_rules"
            ),
            group3_prefixes=_string_list(table.get("group3_prefixes", []), "group3_prefixes"),
            group_id_mappings=_string_table(
                table.get("group_id_mappings", {}), "group_id_mappings"
            ),
            input_bundles=_string_list(table.get("input_bundles", []), "input_bundles"),
            options=options,
        )

    def gav_request(self) -> GAVStrategyRequest:
        return GAVStrategyRequest(
            use_default_snapshot_rules=self.use_default_snapshot_rules,
            group_id_prefix=self.group_id_prefix,
            trim_qualifiers=self.trim_qualifiers,
            group3_prefixes=list(self.group3_prefixes),
            group_id_mappings=dict(self.group_id_mappings),
        )

    def to_request(self, state: BundleState) -> MavenizeRequest:
        """Build the request for converting ``state`` with these settings."""
        return MavenizeRequest(
            state=state,
            options=OptionSet(self.options),
            working_dir=self.working_dir,
            target_type=self.target_type,
            gav_request=self.gav_request(),
            input_patterns=list(self.input_bundles),
        )
