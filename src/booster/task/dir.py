"""``dir.create``: ensure directories exist."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from booster.constants import DIR_MODE
from booster.task.args import parse_path_list
from booster.task.base import CancelToken, Task
from booster.task.models import Result
from booster.utils.paths import expand_path

__all__ = ["DirCreate", "new_dir_create"]


class DirCreate:
    """Create a directory, including parents.

    SKIPPED if the directory already exists; FAILED if the path exists but is
    something else.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    @property
    def name(self) -> str:
        return f"create {self.path}"

    @property
    def needs_sudo(self) -> bool:
        return False

    def run(self, token: CancelToken | None = None) -> Result:
        target = Path(expand_path(self.path))
        if target.exists():
            if target.is_dir():
                return Result.skipped("already exists")
            return Result.failed(NotADirectoryError("path exists but is not a directory"))

        try:
            os.makedirs(target, mode=DIR_MODE, exist_ok=True)
        except OSError as e:
            return Result.failed(e)
        return Result.done("created")

    def __repr__(self) -> str:
        return f"DirCreate({self.path!r})"


def new_dir_create(args: Any) -> list[Task]:
    """One DirCreate per listed path."""
    return [DirCreate(path) for path in parse_path_list(args)]
