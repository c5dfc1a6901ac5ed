"""Application settings, read from ``BOOSTER_*`` environment variables."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from booster.constants import (
    DATA_DIR_NAME,
    DEFAULT_COMMAND_TIMEOUT,
    DEFAULT_CONFIG_FILENAME,
    VALUES_FILENAME,
)

__all__ = ["BoosterSettings", "default_values_path"]


def default_values_path() -> Path:
    """Location of persisted variable values.

    ``$XDG_DATA_HOME/booster/values.yaml``, falling back to
    ``~/.local/share/booster/values.yaml``.
    """
    data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / DATA_DIR_NAME / VALUES_FILENAME


class BoosterSettings(BaseSettings):
    """Settings not carried by the bootstrap file itself.

    Attributes:
        config: Default bootstrap file when ``--config`` is not given
            (``BOOSTER_CONFIG``).
        values_path: Store for prompted variable values (``BOOSTER_VALUES_PATH``).
        command_timeout: Timeout in seconds for external commands
            (``BOOSTER_COMMAND_TIMEOUT``).
    """

    model_config = SettingsConfigDict(env_prefix="BOOSTER_", extra="ignore")

    config: Path = Field(default_factory=lambda: Path(DEFAULT_CONFIG_FILENAME))
    values_path: Path = Field(default_factory=default_values_path)
    command_timeout: float = Field(default=DEFAULT_COMMAND_TIMEOUT, gt=0)
