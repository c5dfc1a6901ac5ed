"""Subprocess execution for tasks and CLI checks."""

from __future__ import annotations

from booster.runners.command import CommandRunner
from booster.runners.models import CommandResult

__all__ = ["CommandResult", "CommandRunner"]
