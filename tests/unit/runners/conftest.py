from __future__ import annotations

import subprocess
from collections.abc import Callable

import pytest


@pytest.fixture
def completed() -> Callable[..., subprocess.CompletedProcess[str]]:
    """Build a CompletedProcess as returned by subprocess.run."""

    def _make(
        returncode: int = 0, stdout: str = "", stderr: str = ""
    ) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(
            args=[], returncode=returncode, stdout=stdout, stderr=stderr
        )

    return _make
