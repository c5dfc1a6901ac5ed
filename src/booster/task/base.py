"""The task contract shared by the builder, the executor and concrete tasks."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

from booster.task.models import Result

__all__ = ["CancelToken", "Task", "TaskFactory", "any_needs_sudo"]


class CancelToken:
    """Cooperative cancellation flag passed to running tasks."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def reset(self) -> None:
        self._cancelled = False


@runtime_checkable
class Task(Protocol):
    """A named, idempotent unit of work.

    ``run`` reports "already in the desired state" as SKIPPED and reports
    failures as a FAILED Result rather than raising.
    """

    @property
    def name(self) -> str:
        """Human-readable description for display."""
        ...

    @property
    def needs_sudo(self) -> bool:
        """True if the task needs elevated privileges."""
        ...

    def run(self, token: CancelToken | None = None) -> Result:
        """Execute the task."""
        ...


TaskFactory = Callable[[Any], Sequence[Task]]
"""Turns an entry's raw ``args`` into zero or more tasks.

Factories raise TaskArgumentError when the args have the wrong shape.
"""


def any_needs_sudo(tasks: Iterable[Task]) -> bool:
    return any(task.needs_sudo for task in tasks)
