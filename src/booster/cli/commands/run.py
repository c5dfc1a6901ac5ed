from __future__ import annotations

import click

from booster.cli.console import console, err_console
from booster.cli.context import CLIContext, ExitCode
from booster.cli.helpers import prepare_run
from booster.cli.output import format_error, format_plan, format_result, format_summary
from booster.cli.sudo import ensure_sudo
from booster.exceptions import BoosterError
from booster.executor import Executor
from booster.logging import bind_context, get_logger
from booster.runners import CommandRunner
from booster.task import CancelToken, Result, Task, any_needs_sudo
from booster.variables import parse_var_overrides


@click.command()
@click.option(
    "-p",
    "--profile",
    default=None,
    help="Profile to use (required when the config defines profiles).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Show the tasks that would run without executing them.",
)
@click.option(
    "--var",
    "variables",
    multiple=True,
    metavar="KEY=VALUE",
    help="Set a variable, skipping environment, stored value and prompt.",
)
@click.option(
    "--no-input",
    is_flag=True,
    default=False,
    help="Never prompt; missing variables take their declared default.",
)
@click.pass_context
def run(
    ctx: click.Context,
    profile: str | None,
    dry_run: bool,
    variables: tuple[str, ...],
    no_input: bool,
) -> None:
    """Run bootstrap tasks.

    Examples:
        booster run --profile personal
        booster run --dry-run --var editor=nvim
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    logger = get_logger(__name__)

    try:
        overrides = parse_var_overrides(variables)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--var") from e

    runner = CommandRunner(timeout=cli_ctx.settings.command_timeout)
    try:
        prepared = prepare_run(
            cli_ctx,
            profile,
            overrides,
            interactive=not no_input,
            runner=runner,
        )
    except BoosterError as e:
        err_console.print(format_error(e.message), markup=False)
        raise SystemExit(ExitCode.FAILURE) from e
    except (click.Abort, KeyboardInterrupt) as e:
        raise SystemExit(ExitCode.INTERRUPTED) from e

    bind_context(
        config=str(cli_ctx.config_path),
        os=prepared.condition_context.os,
        profile=prepared.condition_context.profile,
    )
    tasks = prepared.tasks
    if not tasks:
        console.print("No tasks to run")
        return

    if dry_run:
        console.print(format_plan(tasks), markup=False)
        return

    if any_needs_sudo(tasks):
        try:
            ensure_sudo(runner)
        except BoosterError as e:
            err_console.print(format_error(f"sudo required: {e.message}"), markup=False)
            raise SystemExit(ExitCode.FAILURE) from e

    token = CancelToken()
    executor = Executor(tasks, context=prepared.context)

    def report(task: Task, result: Result) -> None:
        if not cli_ctx.quiet or not result.success:
            console.print(format_result(task, result))

    try:
        summary = executor.run_all(token, on_result=report)
    except KeyboardInterrupt as e:
        token.cancel()
        executor.abort()
        logger.warning("run_interrupted", completed=executor.current)
        console.print(format_summary(executor.summary(), executor.elapsed_ms))
        raise SystemExit(ExitCode.INTERRUPTED) from e

    console.print(format_summary(summary, executor.elapsed_ms))
    if summary.has_failures:
        raise SystemExit(ExitCode.FAILURE)
