"""Shared fixtures for CLI command tests.

Common fixtures available from the root conftest.py:
- cli_runner: Click CLI test runner
- clean_env: Environment without BOOSTER_ variables
- write_config: Writes a bootstrap file into tmp_path
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.fixtures.system import FixedDetector


@pytest.fixture
def booster_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, clean_env: None
) -> Path:
    """Isolate the values store and pin the detected OS to ``arch``.

    Returns the values store path.
    """
    values_path = tmp_path / "state" / "values.yaml"
    monkeypatch.setenv("BOOSTER_VALUES_PATH", str(values_path))
    monkeypatch.setattr(
        "booster.cli.helpers.SystemDetector", lambda: FixedDetector("arch")
    )
    return values_path
