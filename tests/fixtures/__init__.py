"""Shared test fixtures for the Booster test suite.

Available Fixtures
==================

Task doubles (from tests/fixtures/tasks.py)
-------------------------------------------

Classes:
    RecordingTask: Task returning a preset Result and recording every run
        and the CancelToken it received.

Fixtures:
    recording_task: A RecordingTask that reports DONE.

Runner doubles (from tests/fixtures/runners.py)
-----------------------------------------------

Classes:
    FakeRunner: CommandRunner subclass answering from a table keyed by the
        full command tuple. Unknown commands exit 1. ``check`` is inherited;
        ``which`` finds only names registered with ``install``.

Fixtures:
    fake_runner: An empty FakeRunner.

Example:
    >>> def test_git(fake_runner):
    ...     fake_runner.respond(("git", "config", "--global", "--get", "user.name"), "Luke")
    ...     task = GitConfig([GitConfigItem("user.name", value="Luke")], fake_runner)
    ...     assert task.run().status is TaskStatus.SKIPPED

System doubles (from tests/fixtures/system.py)
----------------------------------------------

Classes:
    FixedDetector: SystemDetector stand-in reporting a fixed OS.
"""

from __future__ import annotations

from tests.fixtures.runners import FakeRunner, fake_runner
from tests.fixtures.system import FixedDetector
from tests.fixtures.tasks import RecordingTask, recording_task

__all__ = [
    "FakeRunner",
    "FixedDetector",
    "RecordingTask",
    "fake_runner",
    "recording_task",
]
