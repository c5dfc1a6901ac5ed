from __future__ import annotations

from collections.abc import Sequence

from booster.exceptions.base import BoosterError


class CommandError(BoosterError):
    """Exception for external commands that could not be executed or failed.

    Attributes:
        message: Human-readable error message.
        command: The command that was executed.
        returncode: Exit code of the process, or None if it never started.
        output: Combined stdout/stderr captured from the process.
    """

    def __init__(
        self,
        message: str,
        command: Sequence[str] = (),
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.output = output
        super().__init__(message)


class CommandNotFoundError(CommandError):
    """Raised when the executable of a command is not on PATH."""
