"""Gate a task behind a declarative OS/profile condition."""

from __future__ import annotations

from booster.condition import Condition, Evaluator
from booster.logging import get_logger
from booster.task.base import CancelToken, Task
from booster.task.models import Result

__all__ = ["ConditionalTask"]

logger = get_logger(__name__)


class ConditionalTask:
    """Run the wrapped task only when its condition matches.

    A non-matching condition yields a SKIPPED result and the wrapped task is
    never invoked. ``name`` and ``needs_sudo`` always come from the wrapped
    task.

    Args:
        task: Task to wrap.
        condition: Condition that must match; None always matches.
        evaluator: Evaluator holding the detected OS and profile.

    Raises:
        ValueError: If evaluator is None.
    """

    def __init__(
        self,
        task: Task,
        condition: Condition | None,
        evaluator: Evaluator,
    ) -> None:
        if evaluator is None:
            raise ValueError("evaluator cannot be None")
        self._task = task
        self._condition = condition
        self._evaluator = evaluator

    @property
    def wrapped(self) -> Task:
        return self._task

    @property
    def condition(self) -> Condition | None:
        return self._condition

    @property
    def name(self) -> str:
        return self._task.name

    @property
    def needs_sudo(self) -> bool:
        return self._task.needs_sudo

    def run(self, token: CancelToken | None = None) -> Result:
        if not self._evaluator.matches(self._condition):
            reason = self._evaluator.failure_reason(self._condition)
            logger.debug("task_condition_not_met", task=self.name, reason=reason)
            return Result.skipped(f"condition not met: {reason}")
        return self._task.run(token)

    def __repr__(self) -> str:
        return f"ConditionalTask({self._task!r}, {self._condition!r})"
