"""Task outcome models.

A task moves ``PENDING -> RUNNING -> {SKIPPED | DONE | FAILED}``. Tasks only
ever produce the three terminal statuses; ``PENDING`` and ``RUNNING`` are
bookkeeping states owned by the executor.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["Result", "TaskStatus"]


class TaskStatus(str, Enum):
    """Lifecycle status of a task.

    ``SKIPPED`` means the system was already in the desired state or the
    task's condition did not match. It is never an error.
    """

    PENDING = "pending"
    RUNNING = "running"
    SKIPPED = "skipped"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.SKIPPED, TaskStatus.DONE, TaskStatus.FAILED)


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of running one task.

    Attributes:
        status: Terminal status of the run.
        message: Short human-readable description ("created", "already exists").
        output: Captured command output, if any.
        error: Cause of a failure. Set if and only if status is FAILED.
        duration_ms: Wall time of the run, filled in by the executor.

    Raises:
        ValueError: If a FAILED result has no error, or a non-failed result has one.

    Example:
        >>> Result.done("created").status
        <TaskStatus.DONE: 'done'>
    """

    status: TaskStatus
    message: str = ""
    output: str = ""
    error: BaseException | None = None
    duration_ms: int = 0

    def __post_init__(self) -> None:
        if self.status is TaskStatus.FAILED and self.error is None:
            raise ValueError("failed result requires an error")
        if self.status is not TaskStatus.FAILED and self.error is not None:
            raise ValueError(f"{self.status.value} result cannot carry an error")

    @classmethod
    def done(cls, message: str = "", output: str = "") -> Result:
        return cls(status=TaskStatus.DONE, message=message, output=output)

    @classmethod
    def skipped(cls, message: str = "", output: str = "") -> Result:
        return cls(status=TaskStatus.SKIPPED, message=message, output=output)

    @classmethod
    def failed(
        cls, error: BaseException | str, message: str = "", output: str = ""
    ) -> Result:
        """Build a FAILED result, wrapping a plain string in RuntimeError."""
        if isinstance(error, str):
            error = RuntimeError(error)
        return cls(status=TaskStatus.FAILED, message=message, output=output, error=error)

    @property
    def success(self) -> bool:
        """True unless the task failed."""
        return self.status is not TaskStatus.FAILED
