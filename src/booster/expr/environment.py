"""Static environment expressions are compiled against.

The environment declares the names an expression may reference (the fields of
the evaluation Context) and the builtin function catalog. Compiling against it
turns typos such as ``${ var.name }`` or ``${ exist("x") }`` into load-time
errors instead of failures halfway through a run.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from booster.expr.functions import BUILTINS, Builtin
from booster.expr.types import ANY, STRING, TypeInfo, map_of, struct

__all__ = [
    "CONTEXT_FIELDS",
    "DEFAULT_ENVIRONMENT",
    "Environment",
    "TASK_RESULT_TYPE",
]

TASK_RESULT_TYPE = struct("TaskResult", output=ANY, status=STRING)

#: Names visible to expressions, matching the attributes of Context
CONTEXT_FIELDS: Mapping[str, TypeInfo] = MappingProxyType(
    {
        "os": STRING,
        "arch": STRING,
        "home": STRING,
        "profile": STRING,
        "env": map_of(STRING),
        "vars": map_of(ANY),
        "tasks": map_of(TASK_RESULT_TYPE),
    }
)


@dataclass(frozen=True, slots=True)
class Environment:
    """Names and functions available to expressions.

    Attributes:
        names: Top-level names and their static types.
        functions: Builtin functions by name.
    """

    names: Mapping[str, TypeInfo] = field(default_factory=lambda: CONTEXT_FIELDS)
    functions: Mapping[str, Builtin] = field(
        default_factory=lambda: MappingProxyType(BUILTINS)
    )

    def lookup_name(self, name: str) -> TypeInfo | None:
        return self.names.get(name)

    def lookup_function(self, name: str) -> Builtin | None:
        return self.functions.get(name)


DEFAULT_ENVIRONMENT = Environment()
