"""Sable command line interface."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from sable import __version__
from sable.config import get_log_level
from sable.errors import SableError
from sable.interpreter import Interpreter

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group()
@click.version_option(__version__, prog_name="sable")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=get_log_level,
    show_default="SABLE_LOG_LEVEL or WARNING",
    help="Logging verbosity.",
)
def main(log_level: str) -> None:
    """The Sable programming language."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def run(path: Path) -> None:
    """Evaluate a Sable program."""
    with Interpreter() as interp:
        try:
            interp.run_file(path)
        except SableError as err:
            click.echo(f"error: {err.format()}", err=True)
            raise SystemExit(1)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(path: Path) -> None:
    """Type-check a Sable program without running it."""
    with Interpreter() as interp:
        diagnostics = interp.check_file(path)
    for diag in diagnostics:
        click.echo(diag.format(), err=True)
    if diagnostics:
        raise SystemExit(1)
    click.echo(f"checked {path.name}: no errors")
