"""Turn configuration task entries into executable tasks."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from booster.condition import Condition, ConditionContext, Evaluator
from booster.exceptions import BoosterError, BuildError, UnknownActionError
from booster.expr.context import Context
from booster.expr.value import resolve_nested
from booster.logging import get_logger
from booster.task.base import Task, TaskFactory
from booster.task.conditional import ConditionalTask
from booster.task.dir import new_dir_create
from booster.task.symlink import new_symlink_create

__all__ = [
    "BuildMode",
    "Gated",
    "TaskBuilder",
    "TaskEntryLike",
    "Unconditional",
    "default_builder",
]

logger = get_logger(__name__)


class WhenLike(Protocol):
    os: Sequence[str]
    profile: Sequence[str]


class TaskEntryLike(Protocol):
    """Shape of a configuration task entry as consumed by the builder."""

    action: str
    args: Any
    when: WhenLike | None


@dataclass(frozen=True, slots=True)
class Unconditional:
    """Build mode that ignores ``when`` clauses; every task runs."""


@dataclass(frozen=True, slots=True)
class Gated:
    """Build mode that wraps tasks of entries with a ``when`` clause.

    Attributes:
        evaluator: Evaluator the ConditionalTasks match against.
    """

    evaluator: Evaluator


BuildMode = Unconditional | Gated


class TaskBuilder:
    """Registry of task factories keyed by action name.

    Args:
        mode: ``Gated(evaluator)`` to honor ``when`` clauses, or
            ``Unconditional()`` to build every task ungated.
        context: Expression context used to resolve ``${ ... }`` expressions
            inside entry args. Args are passed through untouched when None.

    Example:
        ```python
        builder = TaskBuilder(Gated(Evaluator(ConditionContext(os="arch"))))
        builder.register("dir.create", new_dir_create)

        @builder.register("hello")
        def new_hello(args):
            return [HelloTask(args)]

        tasks = builder.build(config.tasks)
        ```
    """

    def __init__(
        self,
        mode: BuildMode | None = None,
        context: Context | None = None,
    ) -> None:
        self._mode: BuildMode = mode if mode is not None else Unconditional()
        self._context = context
        self._factories: dict[str, TaskFactory] = {}

    @property
    def mode(self) -> BuildMode:
        return self._mode

    @property
    def actions(self) -> tuple[str, ...]:
        return tuple(sorted(self._factories))

    def register(
        self,
        action: str,
        factory: TaskFactory | None = None,
    ) -> TaskFactory | Callable[[TaskFactory], TaskFactory]:
        """Register a factory for an action, directly or as a decorator.

        Raises:
            ValueError: If the action is already registered.
        """
        if factory is None:

            def decorator(func: TaskFactory) -> TaskFactory:
                self._register_impl(action, func)
                return func

            return decorator

        self._register_impl(action, factory)
        return factory

    def _register_impl(self, action: str, factory: TaskFactory) -> None:
        if action in self._factories:
            raise ValueError(f"action {action!r} is already registered")
        if not callable(factory):
            raise TypeError(f"factory for action {action!r} is not callable")
        self._factories[action] = factory

    def has(self, action: str) -> bool:
        return action in self._factories

    def build(self, entries: Iterable[TaskEntryLike]) -> list[Task]:
        """Build tasks for every entry, preserving order.

        Args:
            entries: Configuration task entries.

        Returns:
            All produced tasks, flattened in entry order.

        Raises:
            UnknownActionError: If an entry names an unregistered action.
            BuildError: If a factory rejects its args. Both errors name the
                entry by its 1-indexed position, and nothing is returned.
        """
        tasks: list[Task] = []
        for position, entry in enumerate(entries, start=1):
            factory = self._factories.get(entry.action)
            if factory is None:
                raise UnknownActionError(position, entry.action)

            try:
                args = self._resolve_args(entry.args)
                created = list(factory(args) or ())
            except Exception as e:
                cause = e.message if isinstance(e, BoosterError) else str(e)
                raise BuildError(
                    f"task {position} ({entry.action}): {cause}",
                    position=position,
                    action=entry.action,
                ) from e

            condition = _condition_of(entry)
            for task in created:
                if isinstance(self._mode, Gated) and condition is not None:
                    task = ConditionalTask(task, condition, self._mode.evaluator)
                tasks.append(task)

            logger.debug(
                "task_entry_built",
                position=position,
                action=entry.action,
                count=len(created),
                gated=isinstance(self._mode, Gated) and condition is not None,
            )
        return tasks

    def _resolve_args(self, args: Any) -> Any:
        if self._context is None or args is None:
            return args
        return resolve_nested(args, self._context)


def _condition_of(entry: TaskEntryLike) -> Condition | None:
    when = getattr(entry, "when", None)
    if when is None:
        return None
    if isinstance(when, Mapping):
        return Condition.of(os=when.get("os"), profile=when.get("profile"))
    return Condition.of(os=when.os, profile=when.profile)


def default_builder(
    condition_context: ConditionContext,
    context: Context | None = None,
) -> TaskBuilder:
    """Gated builder with the filesystem actions registered.

    Actions that shell out or read variables (``git.config``, ``pkg.install``,
    ``mise.use`` and the rest) need a command runner or the resolved
    variables, so ``booster.cli.helpers.create_builder`` registers them.
    """
    builder = TaskBuilder(Gated(Evaluator(condition_context)), context=context)
    builder.register("dir.create", new_dir_create)
    builder.register("symlink.create", new_symlink_create)
    return builder
