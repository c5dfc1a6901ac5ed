"""``symlink.create``: link dotfiles into place."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from booster.constants import DIR_MODE
from booster.task.args import parse_source_target_args
from booster.task.base import CancelToken, Task
from booster.task.models import Result
from booster.utils.paths import expand_path

__all__ = ["SymlinkCreate", "new_symlink_create"]


class SymlinkCreate:
    """Create ``target`` as a symbolic link to ``source``.

    The source is made absolute first, since a relative link would resolve
    from the link's directory rather than the working directory.

    Outcomes:
    - SKIPPED when target already links to source
    - FAILED when source is missing, target links elsewhere, or target is
      a regular file or directory
    - DONE otherwise, creating parent directories of target as needed
    """

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target

    @property
    def name(self) -> str:
        return f"link {self.source} → {self.target}"

    @property
    def needs_sudo(self) -> bool:
        return False

    def run(self, token: CancelToken | None = None) -> Result:
        source = os.path.abspath(expand_path(self.source))
        target = Path(expand_path(self.target))

        if not os.path.exists(source):
            return Result.failed(FileNotFoundError(f"source does not exist: {source}"))

        if target.is_symlink():
            try:
                destination = os.readlink(target)
            except OSError as e:
                return Result.failed(e)
            if destination == source:
                return Result.skipped("already exists")
            return Result.failed(
                FileExistsError(f"symlink points to different source: {destination}")
            )
        if target.exists():
            return Result.failed(
                FileExistsError(f"target exists but is not a symlink: {target}")
            )

        try:
            os.makedirs(target.parent, mode=DIR_MODE, exist_ok=True)
            os.symlink(source, target)
        except OSError as e:
            return Result.failed(e)
        return Result.done("created")

    def __repr__(self) -> str:
        return f"SymlinkCreate({self.source!r}, {self.target!r})"


def new_symlink_create(args: Any) -> list[Task]:
    return [
        SymlinkCreate(pair.source, pair.target)
        for pair in parse_source_target_args(args)
    ]
