"""CLI context and exit codes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from booster.settings import BoosterSettings

__all__ = ["CLIContext", "ExitCode"]


class ExitCode(IntEnum):
    """Exit codes for the booster CLI.

    - 0 for success
    - 1 for failure (bad config, build error, failed task)
    - 130 for keyboard interrupt (128 + SIGINT=2)
    """

    SUCCESS = 0
    FAILURE = 1
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global options shared by all commands.

    Attributes:
        settings: Application settings from the environment.
        config_path: Bootstrap file to load.
        verbosity: Verbosity level (0=default, 1=INFO, 2+=DEBUG).
        quiet: Suppress non-essential output.
    """

    settings: BoosterSettings
    config_path: Path
    verbosity: int = 0
    quiet: bool = False
