# SPDX-License-Identifier: MIT
"""The ``lib.properties`` template of libraries that need a directive.

After a run, every unhandled embedded library gets an entry listing the
possible directives and every missing one an ``ignore`` entry. Users copy
the entries they need into their options.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .model import BundleNode, ConversionDirective
from .properties import dump_properties

if TYPE_CHECKING:
    from .walker import MavenizationResult

TEMPLATE_FILE_NAME = "lib.properties"
REPLACEMENT_PLACEHOLDER = "<groupId>:<artifactId>:<type>[:<classifier>]:<version>"


def directive_choices() -> str:
    """All directive spellings, joined by `` | ``."""
    return " | ".join(
        REPLACEMENT_PLACEHOLDER if d is ConversionDirective.REPLACE else d.literal
        for d in ConversionDirective
    )


def template_key(bundle: BundleNode, entry: str) -> str:
    """``<sn>[_<version>]/<entry>``: the version part is optional in the real key."""
    return f"{bundle.symbolic_name}[_{bundle.version}]/{entry}"


def build_property_template(result: MavenizationResult) -> dict[str, str]:
    """Collect template entries for unhandled and missing libraries, in walk order."""
    template: dict[str, str] = {}
    choices = directive_choices()
    for bundle, converter_result in result.converter_results.items():
        for entry in converter_result.unhandled_embedded_libraries:
            template[template_key(bundle, entry)] = choices
        for entry in converter_result.missing_embedded_libraries:
            template[template_key(bundle, entry)] = ConversionDirective.IGNORE.literal
    return template


def write_property_template(result: MavenizationResult, path: Path) -> Path:
    """Write the template to ``path`` (a directory gets ``lib.properties``)."""
    path = Path(path)
    if path.is_dir():
        path = path / TEMPLATE_FILE_NAME
    return dump_properties(
        build_property_template(result),
        path,
        comments=["Directives for embedded libraries that could not be converted"],
    )
