"""Unit tests for BoosterSettings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from booster.constants import DEFAULT_COMMAND_TIMEOUT
from booster.settings import BoosterSettings, default_values_path


@pytest.mark.usefixtures("clean_env")
class TestBoosterSettings:
    def test_defaults(self) -> None:
        settings = BoosterSettings()

        assert settings.config == Path("bootstrap.yaml")
        assert settings.command_timeout == DEFAULT_COMMAND_TIMEOUT

    def test_environment_overrides(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BOOSTER_CONFIG", str(tmp_path / "custom.yaml"))
        monkeypatch.setenv("BOOSTER_VALUES_PATH", str(tmp_path / "values.yaml"))
        monkeypatch.setenv("BOOSTER_COMMAND_TIMEOUT", "30")

        settings = BoosterSettings()

        assert settings.config == tmp_path / "custom.yaml"
        assert settings.values_path == tmp_path / "values.yaml"
        assert settings.command_timeout == 30

    def test_timeout_must_be_positive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOOSTER_COMMAND_TIMEOUT", "0")

        with pytest.raises(ValidationError):
            BoosterSettings()


class TestDefaultValuesPath:
    def test_uses_xdg_data_home(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert default_values_path() == tmp_path / "booster" / "values.yaml"

    def test_falls_back_to_local_share(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_values_path() == (
            tmp_path / ".local" / "share" / "booster" / "values.yaml"
        )
