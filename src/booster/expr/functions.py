"""Builtin functions available inside expressions.

Each builtin validates its own arity and argument types when called, because
arguments are often the result of other expressions whose type is only known
at run time. Failures raise BuiltinError, which the evaluator turns into an
ExpressionEvaluationError naming the expression.

Usage inside configuration values:
    ${ exists("~/.config/nvim") }
    ${ which("nvim") }
    ${ installed("git") }
    ${ default(vars.editor, "vim") }
    ${ expand("~/.config") }
    ${ hasSubstr(os, "arch") }
    ${ join(vars.packages, ", ") }
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from booster.expr.types import ANY, BOOL, LIST, STRING, TypeInfo, format_value, type_name_of
from booster.runners import CommandRunner
from booster.utils.paths import expand_path

__all__ = [
    "BUILTINS",
    "Builtin",
    "BuiltinError",
]


# PATH lookups for `which` and `installed`
_runner = CommandRunner()


class BuiltinError(ValueError):
    """Raised by a builtin when called with bad arguments."""


@dataclass(frozen=True, slots=True)
class Builtin:
    """A builtin function and its declared signature.

    Attributes:
        name: Name used in expressions.
        params: Declared parameter types, used for static arity/type checks.
        returns: Declared return type.
        impl: Implementation receiving the evaluated arguments.
    """

    name: str
    params: tuple[TypeInfo, ...]
    returns: TypeInfo
    impl: Callable[..., Any]

    def __call__(self, *args: Any) -> Any:
        return self.impl(*args)


def _check_arity(name: str, args: tuple[Any, ...], expected: int) -> None:
    if len(args) != expected:
        plural = "argument" if expected == 1 else "arguments"
        raise BuiltinError(f"{name}: expected {expected} {plural}, got {len(args)}")


def _require_str(name: str, value: Any, what: str = "string") -> str:
    if not isinstance(value, str):
        raise BuiltinError(f"{name}: expected {what}, got {type_name_of(value)}")
    return value


def exists(*args: Any) -> bool:
    """Check whether a file or directory exists after path expansion."""
    _check_arity("exists", args, 1)
    path = _require_str("exists", args[0])
    return Path(expand_path(path)).exists()


def which(*args: Any) -> str:
    """Return the path of an executable on PATH, or an empty string."""
    _check_arity("which", args, 1)
    name = _require_str("which", args[0])
    return _runner.which(name) or ""


def installed(*args: Any) -> bool:
    """Check whether an executable is available on PATH."""
    _check_arity("installed", args, 1)
    name = _require_str("installed", args[0])
    return _runner.which(name) is not None


def default(*args: Any) -> Any:
    """Return the fallback when the value is nil or an empty string."""
    _check_arity("default", args, 2)
    value, fallback = args
    if value is None or value == "":
        return fallback
    return value


def expand(*args: Any) -> str:
    """Expand ``~`` and environment variables in a path."""
    _check_arity("expand", args, 1)
    return expand_path(_require_str("expand", args[0]))


def has_substr(*args: Any) -> bool:
    _check_arity("hasSubstr", args, 2)
    haystack = _require_str("hasSubstr", args[0])
    needle = _require_str("hasSubstr", args[1])
    return needle in haystack


def join(*args: Any) -> str:
    """Join list elements, formatted with the default conversion, with a separator."""
    _check_arity("join", args, 2)
    items, sep = args
    if not isinstance(items, (list, tuple)):
        raise BuiltinError(f"join: expected list, got {type_name_of(items)}")
    sep = _require_str("join", sep, what="string separator")
    return sep.join(format_value(item) for item in items)


BUILTINS: dict[str, Builtin] = {
    builtin.name: builtin
    for builtin in (
        Builtin("exists", (STRING,), BOOL, exists),
        Builtin("which", (STRING,), STRING, which),
        Builtin("installed", (STRING,), BOOL, installed),
        Builtin("default", (ANY, ANY), ANY, default),
        Builtin("expand", (STRING,), STRING, expand),
        Builtin("hasSubstr", (STRING, STRING), BOOL, has_substr),
        Builtin("join", (LIST, STRING), STRING, join),
    )
}
