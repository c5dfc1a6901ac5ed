"""Sequential task execution.

The Executor owns the live expression Context of a run: after each task it
records ``TaskResult(output, status)`` under the task's name so later
expressions can read ``tasks.<name>.status``.
"""

from __future__ import annotations

import dataclasses
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from booster.expr.context import Context
from booster.logging import get_logger
from booster.task import CancelToken, Result, Task, TaskStatus

__all__ = ["Executor", "Summary"]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Summary:
    """Counts of results by status.

    Attributes:
        done: Tasks that changed the system.
        skipped: Tasks already in the desired state or gated off.
        failed: Tasks that failed.
        pending: Tasks never run (aborted or not reached yet).
    """

    done: int = 0
    skipped: int = 0
    failed: int = 0
    pending: int = 0

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    @property
    def total(self) -> int:
        return self.done + self.skipped + self.failed + self.pending


class Executor:
    """Run tasks one at a time, in order.

    Args:
        tasks: Tasks to run.
        context: Live expression context to record results into. A fresh
            one is created from the environment when omitted.
        stop_on_failure: Abort the run after the first failed task.

    Example:
        ```python
        executor = Executor(tasks)
        while (result := executor.run_next(token)) is not None:
            print(executor.tasks[executor.current - 1].name, result.status)
        print(executor.summary())
        ```
    """

    def __init__(
        self,
        tasks: Sequence[Task],
        context: Context | None = None,
        stop_on_failure: bool = True,
    ) -> None:
        self._tasks = list(tasks)
        self._results = [Result(status=TaskStatus.PENDING) for _ in self._tasks]
        self._context = context if context is not None else Context.from_environment()
        self._stop_on_failure = stop_on_failure
        self._current = 0
        self._aborted = False
        self._start: float | None = None
        self._end: float | None = None

    @property
    def tasks(self) -> list[Task]:
        return self._tasks

    @property
    def results(self) -> list[Result]:
        return self._results

    @property
    def context(self) -> Context:
        return self._context

    @property
    def total(self) -> int:
        return len(self._tasks)

    @property
    def current(self) -> int:
        """Index of the next task to run."""
        return self._current

    @property
    def done(self) -> bool:
        return self._current >= len(self._tasks)

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def stopped(self) -> bool:
        return self._aborted or self.done

    def result_at(self, index: int) -> Result:
        if 0 <= index < len(self._results):
            return self._results[index]
        return Result(status=TaskStatus.PENDING)

    def abort(self) -> None:
        """Stop before the next task; remaining tasks stay pending."""
        if not self._aborted:
            self._aborted = True
            self._end = time.monotonic()
            logger.info("run_aborted", completed=self._current, total=self.total)

    def run_next(self, token: CancelToken | None = None) -> Result | None:
        """Run the next task.

        Returns:
            The task's result, or None if the run has stopped. A cancelled
            token aborts the run before the task starts.
        """
        if self.stopped:
            return None
        if token is not None and token.cancelled:
            self.abort()
            return None
        if self._start is None:
            self._start = time.monotonic()

        task = self._tasks[self._current]
        started = time.monotonic()
        try:
            result = task.run(token)
        except Exception as e:
            logger.exception("task_raised", task=task.name)
            result = Result.failed(e)
        duration_ms = int((time.monotonic() - started) * 1000)
        result = dataclasses.replace(result, duration_ms=duration_ms)

        self._results[self._current] = result
        self._current += 1
        self._context.set_task_result(task.name, result.output, result.status.value)
        logger.info(
            "task_finished",
            task=task.name,
            status=result.status.value,
            message=result.message,
            duration_ms=duration_ms,
        )

        if result.status is TaskStatus.FAILED and self._stop_on_failure:
            self.abort()
        elif self.done:
            self._end = time.monotonic()
        return result

    def run_all(
        self,
        token: CancelToken | None = None,
        on_result: Callable[[Task, Result], None] | None = None,
    ) -> Summary:
        """Run until stopped, reporting each result to ``on_result``."""
        while not self.stopped:
            task = self._tasks[self._current]
            result = self.run_next(token)
            if result is None:
                break
            if on_result is not None:
                on_result(task, result)
        return self.summary()

    @property
    def elapsed_ms(self) -> int:
        if self._start is None:
            return 0
        end = self._end if self._end is not None else time.monotonic()
        return int((end - self._start) * 1000)

    def summary(self) -> Summary:
        counts = {status: 0 for status in TaskStatus}
        for result in self._results:
            counts[result.status] += 1
        return Summary(
            done=counts[TaskStatus.DONE],
            skipped=counts[TaskStatus.SKIPPED],
            failed=counts[TaskStatus.FAILED],
            pending=counts[TaskStatus.PENDING] + counts[TaskStatus.RUNNING],
        )
