"""
setup-my-mac — CLI entrypoint.

Usage:
    setup-my-mac --example-config > config.toml
    setup-my-mac
    setup-my-mac --config ~/machine/config.toml --steps homebrew,git
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import NoReturn

import click

from setup_my_mac import __version__
from setup_my_mac.core.config import examples
from setup_my_mac.core.config.loader import DEFAULT_CONFIG_FILE, ConfigError, load_config
from setup_my_mac.core.engine.registry import StepKind, parse_step_list
from setup_my_mac.core.engine.runner import Runner
from setup_my_mac.core.errors import StepError, error_chain
from setup_my_mac.core.observability.logging_config import resolve_level, setup_logging


def _parse_steps(
    ctx: click.Context,
    param: click.Parameter,
    value: str | None,
) -> list[StepKind] | None:
    if value is None:
        return None
    try:
        return parse_step_list(value)
    except ValueError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param) from e


def _fail(error: Exception) -> NoReturn:
    click.secho(f"❌ {error}", fg="red", err=True)
    for cause in error_chain(error):
        click.echo(f"   • {cause}", err=True)
    sys.exit(1)


@click.command()
@click.version_option(version=__version__, prog_name="setup-my-mac")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Path to the configuration file.",
)
@click.option(
    "--steps",
    callback=_parse_steps,
    default=None,
    metavar="STEP[,STEP...]",
    help="Comma separated list of steps to execute (defaults to everything). "
    f"One of: {', '.join(kind.value for kind in StepKind)}.",
)
@click.option(
    "--example-config",
    is_flag=True,
    help="Print an example configuration to stdout and exit.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
def cli(
    config_path: Path,
    steps: list[StepKind] | None,
    example_config: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """Opinionated Mac bootstrapper."""
    if example_config:
        click.echo(examples.example_config(), nl=False)
        return

    setup_logging(
        level=resolve_level(
            debug=debug,
            verbose=verbose,
            quiet=quiet,
            env_level=os.environ.get("SMM_LOG_LEVEL"),
        ),
        log_file=os.environ.get("SMM_LOG_FILE"),
        log_file_level=os.environ.get("SMM_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )

    click.echo(f"Using configuration file: {config_path}")
    try:
        bundle = load_config(config_path)
    except ConfigError as e:
        _fail(e)

    try:
        Runner(bundle).run(steps)
    except StepError as e:
        _fail(e)


if __name__ == "__main__":
    cli()
