"""Booster exception hierarchy.

All exceptions can be imported from this package:
    from booster.exceptions import BoosterError, ConfigError, BuildError

Expression errors live with the expression engine in ``booster.expr.errors``
and also derive from BoosterError.
"""

from __future__ import annotations

from booster.exceptions.base import BoosterError
from booster.exceptions.build import BuildError, TaskArgumentError, UnknownActionError
from booster.exceptions.config import ConfigError
from booster.exceptions.runner import CommandError, CommandNotFoundError

__all__ = [
    "BoosterError",
    "BuildError",
    "CommandError",
    "CommandNotFoundError",
    "ConfigError",
    "TaskArgumentError",
    "UnknownActionError",
]
