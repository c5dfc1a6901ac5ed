"""Path expansion helpers shared by tasks, config loading and expressions."""

from __future__ import annotations

import os
from pathlib import Path

__all__ = ["expand_home", "expand_path"]


def expand_home(path: str) -> str:
    """Expand a leading ``~`` or ``~/`` to the user's home directory.

    Other forms (``~user``) and the rest of the path are left untouched.

    Examples:
        >>> expand_home("/etc/hosts")
        '/etc/hosts'
    """
    if path == "~":
        return str(Path.home())
    if path.startswith("~/"):
        return str(Path.home() / path[2:])
    return path


def expand_path(path: str) -> str:
    """Expand ``~`` and ``$VAR``/``${VAR}`` references in a path.

    Unset variables are left in place, matching ``os.path.expandvars``.
    """
    return os.path.expandvars(expand_home(path))
