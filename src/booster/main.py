"""CLI entry point for Booster."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from booster import __version__
from booster.cli.commands.check import check
from booster.cli.commands.run import run
from booster.cli.context import CLIContext, ExitCode
from booster.cli.output import format_error
from booster.logging import configure_logging
from booster.settings import BoosterSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="booster")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to the bootstrap file (default: ./bootstrap.yaml).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Only report failures (ERROR level logging).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    verbose: int,
    quiet: bool,
) -> None:
    """Booster - bootstrap your machine from a YAML config."""
    ctx.ensure_object(dict)

    try:
        settings = BoosterSettings()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        click.echo(
            format_error(f"Invalid BOOSTER_{field.upper()}: {first_error['msg']}"),
            err=True,
        )
        ctx.exit(ExitCode.FAILURE)

    # Priority: quiet > verbose > BOOSTER_LOG_LEVEL
    if quiet:
        configure_logging(level=logging.ERROR)
    elif verbose > 0:
        configure_logging(level=logging.INFO if verbose == 1 else logging.DEBUG)
    else:
        configure_logging()

    ctx.obj["cli_ctx"] = CLIContext(
        settings=settings,
        config_path=Path(config_file) if config_file else settings.config,
        verbosity=verbose,
        quiet=quiet,
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(run)
cli.add_command(check)

if __name__ == "__main__":
    cli()
