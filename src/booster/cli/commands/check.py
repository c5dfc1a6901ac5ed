from __future__ import annotations

import click

from booster.cli.console import console, err_console
from booster.cli.context import CLIContext, ExitCode
from booster.cli.helpers import prepare_run
from booster.cli.output import format_error
from booster.exceptions import BoosterError
from booster.variables import parse_var_overrides


@click.command()
@click.option(
    "-p",
    "--profile",
    default=None,
    help="Profile to validate against (optional).",
)
@click.option(
    "--var",
    "variables",
    multiple=True,
    metavar="KEY=VALUE",
    help="Set a variable for expression checks.",
)
@click.pass_context
def check(ctx: click.Context, profile: str | None, variables: tuple[str, ...]) -> None:
    """Validate the bootstrap file without running anything.

    Loads the config, compiles every expression and builds every task, with
    conditions ignored. Never prompts.
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    try:
        overrides = parse_var_overrides(variables)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--var") from e

    try:
        prepared = prepare_run(
            cli_ctx,
            profile,
            overrides,
            interactive=False,
            gated=False,
            require_profile=False,
        )
    except BoosterError as e:
        err_console.print(format_error(e.message), markup=False)
        raise SystemExit(ExitCode.FAILURE) from e

    console.print(
        f"{cli_ctx.config_path}: OK, {len(prepared.config.tasks)} entries, "
        f"{len(prepared.tasks)} task(s)",
        markup=False,
    )
