# SPDX-License-Identifier: MIT
"""Convert a resolved bundle state into Maven POMs."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from ...config import split_mapping
from ...errors import MavenizorError
from ...model import TargetType
from ...pom import pom_path, write_poms
from ...properties import load_properties
from ...state import load_state
from ...template import TEMPLATE_FILE_NAME, write_property_template
from ...walker import MavenizationResult, Mavenizor
from ..main import echo_error, echo_info, echo_success, echo_warning, pass_context, Context


def _report_unhandled(result: MavenizationResult) -> None:
    for bundle, entries in result.unhandled_embedded_libraries.items():
        for entry in entries:
            echo_warning(f"Unhandled embedded library {bundle}/{entry}")


@click.command()
@click.argument(
    "state_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="pyproject.toml holding [tool.mavenizor] (defaults to the project's).",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path),
    default="dist/poms",
    help="Repository directory the POMs are written to.",
)
@click.option(
    "--working-dir",
    type=click.Path(path_type=Path),
    help="Staging directory for embedded libraries.",
)
@click.option(
    "--target-type",
    type=click.Choice([t.value for t in TargetType], case_sensitive=False),
    help="Kind of artifacts to produce.",
)
@click.option(
    "--options-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Java properties file with additional options.",
)
@click.option(
    "--option",
    "-D",
    "option_entries",
    multiple=True,
    metavar="KEY=VALUE",
    help="Additional option; may be repeated.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show the artifacts without writing POMs.",
)
@click.option(
    "--allow-unhandled",
    is_flag=True,
    help="Succeed even if embedded libraries lack a directive.",
)
@pass_context
def convert(
    ctx: Context,
    state_file: Path,
    config_path: Optional[Path],
    output_dir: Path,
    working_dir: Optional[Path],
    target_type: Optional[str],
    options_file: Optional[Path],
    option_entries: tuple[str, ...],
    dry_run: bool,
    allow_unhandled: bool,
) -> None:
    """Convert the bundles of STATE_FILE into Maven artifacts.

    Options are applied in order: [tool.mavenizor.options], library
    mappings, --options-file, then -D entries. Entries for embedded
    libraries that need a directive are written to lib.properties in the
    working directory.

    \b
    Examples:
        mavenizor convert bundles.json
        mavenizor convert bundles.json --dry-run
        mavenizor convert bundles.json -D "org.foo@requirements.erase=org.bar"
        mavenizor convert bundles.json --options-file lib.properties
    """
    try:
        config = ctx.load_config(config_path)
    except (MavenizorError, FileNotFoundError) as e:
        echo_error(str(e))
        raise SystemExit(1)

    if working_dir is not None:
        config.working_dir = ctx.resolve_path(working_dir)
    if target_type is not None:
        config.target_type = TargetType(target_type.lower())

    if options_file is not None:
        try:
            config.options.update(load_properties(options_file))
        except ValueError as e:
            echo_error(f"Invalid options file {options_file}: {e}")
            raise SystemExit(1)

    try:
        for entry in option_entries:
            key, value = split_mapping(entry, "--option")
            config.options[key] = value

        state = load_state(state_file)
        echo_info(f"Converting {len(state)} bundle(s) from: {state_file}")

        result = Mavenizor().mavenize(config.to_request(state))
    except MavenizorError as e:
        echo_error(str(e))
        raise SystemExit(1)

    if ctx.verbose:
        for bundle in result.bundles:
            converter_result = result.converter_result(bundle)
            echo_info(f"  {bundle}: {converter_result.directive.literal}")

    template_path = write_property_template(
        result, config.working_dir / TEMPLATE_FILE_NAME
    )
    if result.missing_embedded_libraries or result.unhandled_embedded_libraries:
        echo_info(f"Library directive template: {template_path}")

    if result.unhandled_embedded_libraries:
        _report_unhandled(result)
        if not allow_unhandled:
            echo_error("Unhandled embedded libraries detected")
            raise SystemExit(1)

    artifact_bundles = result.artifact_bundles()
    output_dir = ctx.resolve_path(output_dir)

    if dry_run:
        echo_info("\nArtifacts (dry run):")
        for artifact_bundle in artifact_bundles:
            echo_info(f"  {artifact_bundle.gav}")
            for converted in artifact_bundle.artifacts:
                echo_info(f"    {converted.artifact.key} ({converted.directive.literal})")
            if ctx.verbose:
                echo_info(f"    -> {pom_path(artifact_bundle.pom, output_dir)}")
        echo_success(f"\n{len(artifact_bundles)} POM(s) would be written.")
        return

    written = write_poms(result, output_dir)
    echo_info(f"Output directory: {output_dir}")
    echo_success(f"\nConversion complete! {len(written)} POM(s) written.")
