from __future__ import annotations

from booster.exceptions.base import BoosterError


class BuildError(BoosterError):
    """Exception raised when configuration entries cannot become tasks.

    Every build error carries the 1-indexed position of the offending entry
    so that the message points at the right item in the YAML task list.

    Attributes:
        message: Human-readable error message (already prefixed with position).
        position: 1-indexed position of the entry in the task list.
        action: Action name of the entry, if known.
    """

    def __init__(
        self,
        message: str,
        position: int,
        action: str | None = None,
    ) -> None:
        self.position = position
        self.action = action
        super().__init__(message)


class UnknownActionError(BuildError):
    """Raised when an entry names an action with no registered factory."""

    def __init__(self, position: int, action: str) -> None:
        super().__init__(
            f'task {position}: unknown action "{action}"',
            position=position,
            action=action,
        )


class TaskArgumentError(BoosterError):
    """Raised by a task factory when an entry's args have the wrong shape.

    Factories raise this without position information; the builder wraps it
    into a BuildError that names the entry.

    Example:
        ```python
        raise TaskArgumentError("arg 2: path must be a string")
        ```
    """
