"""Fake command runner for tasks that shell out.

Provides:
- FakeRunner: records commands and answers from a scripted table
- fake_runner: fixture returning an empty FakeRunner
"""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from booster.runners import CommandResult, CommandRunner


class FakeRunner(CommandRunner):
    """Stands in for CommandRunner.

    Responses are keyed by the full command tuple; unknown commands exit 1
    with no output. ``check`` is inherited, so it raises exactly as the real
    runner does for the scripted results. ``which`` answers from ``paths``.
    """

    def __init__(self, responses: dict[tuple[str, ...], CommandResult] | None = None):
        super().__init__()
        self.responses = dict(responses or {})
        self.paths: dict[str, str] = {}
        self.calls: list[tuple[str, ...]] = []
        self.options: list[dict[str, object]] = []
        self.interactive_calls: list[tuple[str, ...]] = []
        self.interactive_returncode = 0

    def respond(self, command: Sequence[str], stdout: str = "", returncode: int = 0) -> None:
        self.responses[tuple(command)] = CommandResult(
            returncode=returncode, stdout=stdout, stderr="", duration_ms=1
        )

    def install(self, name: str, path: str | None = None) -> None:
        """Make ``which(name)`` find an executable."""
        self.paths[name] = path or f"/usr/bin/{name}"

    def run(self, command: Sequence[str], **kwargs: object) -> CommandResult:
        key = tuple(command)
        self.calls.append(key)
        self.options.append(kwargs)
        return self.responses.get(
            key, CommandResult(returncode=1, stdout="", stderr="", duration_ms=1)
        )

    def run_interactive(self, command: Sequence[str]) -> int:
        self.interactive_calls.append(tuple(command))
        return self.interactive_returncode

    def which(self, name: str) -> str | None:
        return self.paths.get(name)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()
