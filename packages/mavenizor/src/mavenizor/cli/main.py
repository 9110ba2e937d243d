# SPDX-License-Identifier: MIT
"""CLI entry point for the mavenizor command."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from ..config import MavenizorConfig
from ..errors import MavenizorError


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[MavenizorConfig] = None
        self.verbose: bool = False
        self.project_dir: Optional[Path] = None

    def load_config(self, config_path: Optional[Path] = None) -> MavenizorConfig:
        """Load configuration, caching the result.

        Without an explicit path, the project's pyproject.toml is used when
        it exists; otherwise defaults apply, relative to the project directory.
        """
        if self.config is None:
            if config_path is None:
                candidate = (self.project_dir or Path.cwd()) / "pyproject.toml"
                config_path = candidate if candidate.exists() else None
            if config_path is None:
                self.config = MavenizorConfig.from_pyproject_dict({}, base_dir=self.project_dir)
            else:
                self.config = MavenizorConfig.from_pyproject(config_path)
        return self.config

    def resolve_path(self, path: Path) -> Path:
        """Resolve a relative path against the project directory."""
        if path.is_absolute() or self.project_dir is None:
            return path
        return self.project_dir / path


pass_context = click.make_pass_decorator(Context, ensure=True)


def echo_error(message: str) -> None:
    """Print an error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.secho(message, fg="green")


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.secho(f"Warning: {message}", fg="yellow", err=True)


@click.group()
@click.version_option(package_name="mavenizor")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project directory holding pyproject.toml.",
)
@pass_context
def cli(ctx: Context, verbose: bool, directory: Optional[Path]) -> None:
    """Convert resolved OSGi bundles into Maven artifacts.

    \b
    Examples:
        mavenizor convert bundles.json
        mavenizor convert bundles.json -o repo --dry-run
        mavenizor -v convert bundles.json -D "org.foo/lib/bar.jar=ignore"
    """
    ctx.verbose = verbose
    ctx.project_dir = directory
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register commands
from .commands import convert

cli.add_command(convert.convert)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except MavenizorError as e:
        echo_error(str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        echo_error(str(e))
        sys.exit(1)
    except Exception as e:
        echo_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
