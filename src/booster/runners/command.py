"""Command runner for blocking subprocess execution.

Tasks run one at a time, so the runner is synchronous: it starts the
process, waits for it with a timeout and returns a CommandResult.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import time
from collections.abc import Mapping, Sequence
from pathlib import Path

from booster.constants import DEFAULT_COMMAND_TIMEOUT
from booster.exceptions import CommandError, CommandNotFoundError
from booster.logging import get_logger
from booster.runners.models import CommandResult

__all__ = ["CommandRunner"]

logger = get_logger(__name__)


class CommandRunner:
    """Execute commands with timeout and environment control.

    Attributes:
        cwd: Working directory for command execution.
        timeout: Default timeout in seconds (None for no timeout).
        env: Additional environment variables to merge with the parent env.

    Example:
        ```python
        runner = CommandRunner(timeout=30.0)
        result = runner.run(["git", "config", "--global", "--get", "user.name"])
        if result.success:
            print(result.stdout.strip())
        ```
    """

    def __init__(
        self,
        cwd: Path | None = None,
        timeout: float | None = DEFAULT_COMMAND_TIMEOUT,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._cwd = cwd
        self._timeout = timeout
        self._extra_env = dict(env or {})

    @property
    def cwd(self) -> Path | None:
        return self._cwd

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def _build_env(self, extra_env: Mapping[str, str] | None = None) -> dict[str, str]:
        env = os.environ.copy()
        env.update(self._extra_env)
        if extra_env:
            env.update(extra_env)
        return env

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
        input: str | None = None,
    ) -> CommandResult:
        """Execute a command and return the result.

        A missing executable is reported as returncode 127 and a permission
        problem as 126, mirroring the shell.

        Args:
            command: Command and arguments (no shell expansion).
            cwd: Override working directory for this command.
            timeout: Override timeout. Use 0 or negative for no timeout.
            env: Additional environment variables for this command.
            input: Text fed to the command's stdin.

        Raises:
            CommandError: If the working directory does not exist.
        """
        if not command:
            raise CommandError("Cannot run an empty command")

        effective_cwd = cwd if cwd is not None else self._cwd
        if effective_cwd is not None and not effective_cwd.is_dir():
            raise CommandError(
                f"Working directory does not exist: {effective_cwd}", command=command
            )

        effective_timeout = timeout if timeout is not None else self._timeout
        if effective_timeout is not None and effective_timeout <= 0:
            effective_timeout = None

        start_time = time.monotonic()
        timed_out = False
        try:
            completed = subprocess.run(
                list(command),
                cwd=effective_cwd,
                env=self._build_env(env),
                input=input,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=effective_timeout,
                check=False,
            )
            returncode = completed.returncode
            stdout_str = completed.stdout or ""
            stderr_str = completed.stderr or ""
        except subprocess.TimeoutExpired as e:
            timed_out = True
            returncode = -1
            stdout_str = _decode(e.stdout)
            stderr_str = _decode(e.stderr)
        except FileNotFoundError:
            returncode = 127
            stdout_str = ""
            stderr_str = f"Command not found: {command[0]}"
        except PermissionError:
            returncode = 126
            stdout_str = ""
            stderr_str = f"Permission denied: {command[0]}"

        duration_ms = int((time.monotonic() - start_time) * 1000)
        logger.debug(
            "command_finished",
            command=command[0],
            returncode=returncode,
            duration_ms=duration_ms,
            timed_out=timed_out,
        )
        return CommandResult(
            returncode=returncode,
            stdout=stdout_str,
            stderr=stderr_str,
            duration_ms=duration_ms,
            timed_out=timed_out,
        )

    def check(
        self,
        command: Sequence[str],
        *,
        timeout: float | None = None,
        input: str | None = None,
    ) -> CommandResult:
        """Run a command and raise if it does not succeed.

        Raises:
            CommandNotFoundError: If the executable could not be found.
            CommandError: If the command failed or timed out.
        """
        result = self.run(command, timeout=timeout, input=input)
        if result.success:
            return result
        if result.returncode == 127 and not result.stdout:
            raise CommandNotFoundError(
                f"Command not found: {command[0]}",
                command=command,
                returncode=result.returncode,
                output=result.output,
            )
        reason = "timed out" if result.timed_out else f"exited with {result.returncode}"
        raise CommandError(
            f"{' '.join(command)} {reason}",
            command=command,
            returncode=result.returncode,
            output=result.output,
        )

    def run_interactive(self, command: Sequence[str]) -> int:
        """Run a command attached to the terminal and return its exit code.

        Used for commands that prompt the user, such as ``sudo -v``.
        """
        try:
            return subprocess.call(list(command), env=self._build_env())
        except FileNotFoundError:
            return 127

    def which(self, name: str) -> str | None:
        """Search PATH for an executable."""
        return shutil.which(name)


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
