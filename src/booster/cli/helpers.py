"""Steps shared by ``run`` and ``check``: load, resolve variables, build."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from booster.cli.context import CLIContext
from booster.cli.validators import validate_profile
from booster.condition import ConditionContext, Evaluator, SystemDetector
from booster.config import BootstrapConfig, load_bootstrap
from booster.expr.context import Context
from booster.expr.value import resolve_nested
from booster.logging import get_logger
from booster.runners import CommandRunner
from booster.task import (
    ClickPrompter,
    Gated,
    Prompter,
    Task,
    TaskBuilder,
    Unconditional,
    new_darwin_defaults,
    new_dir_create,
    new_git_config,
    new_mise_use,
    new_pkg_install,
    new_pkg_manager_install,
    new_symlink_create,
    new_template_render,
)
from booster.variables import (
    ClickPromptCollector,
    FileStore,
    PromptCollector,
    VariableResolver,
    definitions_from_config,
)

__all__ = ["PreparedRun", "build_tasks", "create_builder", "prepare_run", "resolve_variables"]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PreparedRun:
    """Everything needed to execute a bootstrap file.

    Attributes:
        config: The loaded bootstrap file.
        condition_context: Detected OS and selected profile.
        context: Expression context the run starts from.
        tasks: Built tasks in execution order.
    """

    config: BootstrapConfig
    condition_context: ConditionContext
    context: Context
    tasks: list[Task]


def resolve_variables(
    config: BootstrapConfig,
    cli_ctx: CLIContext,
    base: Context,
    overrides: Mapping[str, str],
    collector: PromptCollector | None,
) -> dict[str, Any]:
    """Collect declared variables, apply overrides, then resolve expressions.

    Values may embed ``${ ... }`` expressions, which see the system facts and
    the profile but not other variables.
    """
    definitions = [
        d for d in definitions_from_config(config.variables) if d.name not in overrides
    ]
    resolver = VariableResolver(FileStore(cli_ctx.settings.values_path), collector)
    values: dict[str, Any] = dict(resolver.resolve(definitions))
    values.update(overrides)
    return {name: resolve_nested(value, base) for name, value in values.items()}


def create_builder(
    mode: Gated | Unconditional,
    context: Context,
    runner: CommandRunner,
    prompter: Prompter | None,
    *,
    os_name: str = "",
    config_dir: Path | None = None,
) -> TaskBuilder:
    """Builder with every built-in action registered.

    Args:
        mode: Gating mode for ``when`` clauses.
        context: Expression context task args are resolved against.
        runner: Command runner for tasks that shell out.
        prompter: Asks for unset git settings; None disables prompting.
        os_name: Detected OS, which picks the package manager and gates
            macOS defaults.
        config_dir: Directory relative defaults files are resolved against.
    """
    builder = TaskBuilder(mode, context=context)
    builder.register("dir.create", new_dir_create)
    builder.register("symlink.create", new_symlink_create)
    builder.register(
        "template.render", new_template_render(context.vars, os_name, context.profile)
    )
    builder.register("pkg-manager.install", new_pkg_manager_install(runner))
    builder.register("pkg.install", new_pkg_install(runner, os_name))
    builder.register("mise.use", new_mise_use(runner))
    builder.register("git.config", new_git_config(runner, prompter))
    builder.register(
        "set.darwin.defaults", new_darwin_defaults(runner, os_name, config_dir)
    )
    return builder


def build_tasks(
    config: BootstrapConfig,
    builder: TaskBuilder,
) -> list[Task]:
    tasks = builder.build(config.tasks)
    logger.info("tasks_built", entries=len(config.tasks), tasks=len(tasks))
    return tasks


def prepare_run(
    cli_ctx: CLIContext,
    profile: str | None,
    overrides: Mapping[str, str],
    *,
    interactive: bool,
    gated: bool = True,
    require_profile: bool = True,
    runner: CommandRunner | None = None,
    detector: SystemDetector | None = None,
) -> PreparedRun:
    """Load the bootstrap file and build its tasks.

    Args:
        cli_ctx: Global CLI options.
        profile: Value of ``--profile``.
        overrides: ``--var`` values, which win over every other source.
        interactive: Prompt for missing variables and git settings.
        gated: Honor ``when`` clauses; False builds every task ungated.
        require_profile: Enforce ``--profile`` when the config declares
            profiles. When False a missing profile is accepted as empty.
        runner: Command runner for tasks that shell out.
        detector: OS detector.

    Raises:
        ConfigError: If the file cannot be loaded, the profile is invalid,
            or variables cannot be stored.
        BuildError: If a task entry cannot be built.
        ExpressionError: If an expression in a variable or task arg is invalid.
    """
    config = load_bootstrap(cli_ctx.config_path)
    if profile or require_profile:
        profile = validate_profile(config.profiles, profile)
    else:
        profile = ""
    runner = runner or CommandRunner(timeout=cli_ctx.settings.command_timeout)
    detected = (detector or SystemDetector()).detect()
    condition_context = ConditionContext(os=detected.os, profile=profile)

    base = Context.from_environment().with_profile(profile)
    collector = ClickPromptCollector() if interactive else None
    variables = resolve_variables(config, cli_ctx, base, overrides, collector)
    context = base.with_vars(variables)

    mode: Gated | Unconditional = (
        Gated(Evaluator(condition_context)) if gated else Unconditional()
    )
    prompter = ClickPrompter() if interactive else None
    builder = create_builder(
        mode,
        context,
        runner,
        prompter,
        os_name=condition_context.os,
        config_dir=cli_ctx.config_path.parent,
    )
    tasks = build_tasks(config, builder)
    return PreparedRun(
        config=config,
        condition_context=condition_context,
        context=context,
        tasks=tasks,
    )
