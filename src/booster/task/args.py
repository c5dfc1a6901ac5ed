"""Shared argument parsing for task factories.

Errors name the offending item by its 1-indexed position (``arg 2: ...``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from booster.exceptions import TaskArgumentError

__all__ = ["SourceTarget", "parse_path_list", "parse_source_target_args", "require_list"]


@dataclass(frozen=True, slots=True)
class SourceTarget:
    source: str
    target: str


def require_list(args: Any, message: str) -> list[Any]:
    if not isinstance(args, (list, tuple)):
        raise TaskArgumentError(message)
    return list(args)


def parse_path_list(args: Any) -> list[str]:
    """Parse a list of path strings."""
    items = require_list(args, "args must be a list of paths")
    paths: list[str] = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, str):
            raise TaskArgumentError(f"arg {position}: path must be a string")
        paths.append(item)
    return paths


def parse_source_target_args(args: Any) -> list[SourceTarget]:
    """Parse a list of ``{source, target}`` maps.

    Raises:
        TaskArgumentError: If args is not a list, or an item is not a map
            with string ``source`` and ``target`` keys.
    """
    items = require_list(args, "args must be a list of {source, target} maps")
    pairs: list[SourceTarget] = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, Mapping):
            raise TaskArgumentError(
                f"arg {position}: must be a map with 'source' and 'target'"
            )
        values: dict[str, str] = {}
        for key in ("source", "target"):
            if key not in item:
                raise TaskArgumentError(f"arg {position}: missing '{key}'")
            if not isinstance(item[key], str):
                raise TaskArgumentError(f"arg {position}: '{key}' must be a string")
            values[key] = item[key]
        pairs.append(SourceTarget(**values))
    return pairs
