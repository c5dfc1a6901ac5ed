"""Test doubles for tasks.

Provides:
- RecordingTask: a task that records whether it ran and returns a fixed result
- recording_task: fixture building a RecordingTask that reports DONE
"""

from __future__ import annotations

import pytest

from booster.task import CancelToken, Result


class RecordingTask:
    """Task that records each run and returns a preset result."""

    def __init__(
        self,
        name: str = "recording",
        result: Result | None = None,
        needs_sudo: bool = False,
    ) -> None:
        self._name = name
        self._result = result or Result.done("ran")
        self._needs_sudo = needs_sudo
        self.runs = 0
        self.tokens: list[CancelToken | None] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def needs_sudo(self) -> bool:
        return self._needs_sudo

    @property
    def ran(self) -> bool:
        return self.runs > 0

    def run(self, token: CancelToken | None = None) -> Result:
        self.runs += 1
        self.tokens.append(token)
        return self._result


@pytest.fixture
def recording_task() -> RecordingTask:
    return RecordingTask()
