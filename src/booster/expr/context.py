"""Evaluation context for configuration expressions.

The Context is the data every ``${ ... }`` expression is evaluated against:
system facts (``os``, ``arch``, ``home``), the selected ``profile``, a
snapshot of the process environment (``env``), user variables (``vars``)
and the results of tasks that already ran in this run (``tasks``).

A Context is treated as immutable. ``with_profile`` and ``with_vars`` return
a new context owning fresh copies of every mapping, so a parent context can
be reused safely. ``set_task_result`` is the one operation that mutates in
place: the executor owns the live context of a run and records each task's
outcome into it so that later expressions can read
``tasks.<name>.output`` and ``tasks.<name>.status``.
"""

from __future__ import annotations

import dataclasses
import os
import platform
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

__all__ = ["Context", "TaskResult", "TaskResultStatus"]

TaskResultStatus = Literal["done", "failed", "skipped"]

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
}


@dataclass(frozen=True, slots=True)
class TaskResult:
    """Outcome of a completed task, as visible to expressions.

    Attributes:
        output: Captured task output.
        status: One of "done", "failed", "skipped".
    """

    output: Any
    status: TaskResultStatus


def _detect_os() -> str:
    return sys.platform if sys.platform != "win32" else "windows"


def _detect_arch() -> str:
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


@dataclass(slots=True)
class Context:
    """Snapshot of facts, variables and task results for one evaluation.

    Attributes:
        os: Operating system name (``linux``, ``darwin``, ...).
        arch: CPU architecture (``amd64``, ``arm64``, ...).
        home: Home directory, empty if HOME is unset.
        profile: User-selected profile, empty if none.
        env: Process environment snapshot.
        vars: User-defined configuration variables.
        tasks: Results of tasks executed so far, keyed by task name.
    """

    os: str = ""
    arch: str = ""
    home: str = ""
    profile: str = ""
    env: dict[str, str] = field(default_factory=dict)
    vars: dict[str, Any] = field(default_factory=dict)
    tasks: dict[str, TaskResult] = field(default_factory=dict)

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> Context:
        """Create a context populated from the running system.

        Args:
            environ: Environment to snapshot. Defaults to ``os.environ``.

        Returns:
            A context with system facts, the environment snapshot and empty
            ``vars``/``tasks`` mappings.
        """
        source = os.environ if environ is None else environ
        return cls(
            os=_detect_os(),
            arch=_detect_arch(),
            home=source.get("HOME", ""),
            env=dict(source),
        )

    def with_profile(self, profile: str) -> Context:
        """Return a copy of this context with ``profile`` set."""
        return self._derive(profile=profile)

    def with_vars(self, variables: Mapping[str, Any]) -> Context:
        """Return a copy of this context with ``vars`` replaced."""
        return self._derive(vars=dict(variables))

    def set_task_result(self, name: str, output: Any, status: TaskResultStatus) -> None:
        """Record a task's outcome in place.

        This mutates the receiver. Derive a copy first when the result must
        not be visible to other holders of this context.
        """
        self.tasks[name] = TaskResult(output=output, status=status)

    def _derive(self, **changes: Any) -> Context:
        copies: dict[str, Any] = {
            "env": dict(self.env),
            "vars": dict(self.vars),
            "tasks": dict(self.tasks),
        }
        copies.update(changes)
        return dataclasses.replace(self, **copies)
