"""Static types used to check expressions before they run.

The checker only needs coarse kinds: enough to reject ``os.name`` (member
access on a string) or ``exists(1)`` at load time. Anything it cannot know
statically is ``ANY`` and is checked again at run time.
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any


class Kind(str, Enum):
    """Coarse kind of an expression value."""

    ANY = "any"
    NIL = "nil"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    LIST = "list"
    MAP = "map"
    STRUCT = "struct"


@dataclass(frozen=True, slots=True)
class TypeInfo:
    """Static type of an expression.

    Attributes:
        kind: Coarse kind.
        name: Display name used in error messages.
        element: Element type for lists and value type for maps.
        fields: Field names and types for structs.
    """

    kind: Kind
    name: str
    element: TypeInfo | None = None
    fields: tuple[tuple[str, TypeInfo], ...] = ()

    @property
    def known(self) -> bool:
        return self.kind is not Kind.ANY

    @property
    def numeric(self) -> bool:
        return self.kind in (Kind.INT, Kind.FLOAT)

    def field(self, name: str) -> TypeInfo | None:
        for field_name, field_type in self.fields:
            if field_name == name:
                return field_type
        return None

    def accepts(self, other: TypeInfo) -> bool:
        """Whether a value of type ``other`` may be passed where ``self`` is expected."""
        if not self.known or not other.known:
            return True
        if self.kind is Kind.FLOAT and other.kind is Kind.INT:
            return True
        return self.kind is other.kind

    def __str__(self) -> str:
        return self.name


ANY = TypeInfo(Kind.ANY, "any")
NIL = TypeInfo(Kind.NIL, "nil")
BOOL = TypeInfo(Kind.BOOL, "bool")
INT = TypeInfo(Kind.INT, "int")
FLOAT = TypeInfo(Kind.FLOAT, "float")
STRING = TypeInfo(Kind.STRING, "string")
LIST = TypeInfo(Kind.LIST, "list", element=ANY)
MAP = TypeInfo(Kind.MAP, "map", element=ANY)


def map_of(element: TypeInfo) -> TypeInfo:
    return TypeInfo(Kind.MAP, f"map[string]{element}", element=element)


def struct(name: str, **fields: TypeInfo) -> TypeInfo:
    return TypeInfo(Kind.STRUCT, name, fields=tuple(fields.items()))


def type_of_literal(value: Any) -> TypeInfo:
    """Static type of a literal value produced by the parser."""
    if value is None:
        return NIL
    if isinstance(value, bool):
        return BOOL
    if isinstance(value, int):
        return INT
    if isinstance(value, float):
        return FLOAT
    if isinstance(value, str):
        return STRING
    return ANY


def type_name_of(value: Any) -> str:
    """Runtime type name of a value, in the vocabulary of the static types."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "list"
    if isinstance(value, Mapping):
        return "map"
    return type(value).__name__


def format_float(value: float) -> str:
    """Shortest round-trip form, without a trailing ``.0``.

    Exponent notation is used below 1e-4 and from 1e6 on.

    Examples:
        >>> format_float(2.0)
        '2'
        >>> format_float(1234567.0)
        '1.234567e+06'
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    number = Decimal(repr(value)).normalize()
    sign, digits, exponent = number.as_tuple()
    magnitude = len(digits) + exponent - 1
    if -4 <= magnitude < 6:
        text = format(abs(number), "f")
    else:
        mantissa = str(digits[0])
        if len(digits) > 1:
            mantissa += "." + "".join(str(d) for d in digits[1:])
        text = f"{mantissa}e{'-' if magnitude < 0 else '+'}{abs(magnitude):02d}"
    return "-" + text if sign else text


def format_value(value: Any) -> str:
    """Format a value with the default string conversion used for interpolation.

    Booleans and nil use the expression-language spelling, lists and maps are
    rendered recursively, and floats use format_float.

    Examples:
        >>> format_value(True)
        'true'
        >>> format_value(["a", 1, None])
        '[a 1 nil]'
        >>> format_value({"b": 2, "a": 1})
        'map[a:1 b:2]'
    """
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(format_value(item) for item in value) + "]"
    if isinstance(value, Mapping):
        entries = sorted(value.items(), key=lambda kv: str(kv[0]))
        return (
            "map["
            + " ".join(f"{key}:{format_value(item)}" for key, item in entries)
            + "]"
        )
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        parts = (
            format_value(getattr(value, f.name)) for f in dataclasses.fields(value)
        )
        return "{" + " ".join(parts) + "}"
    return str(value)
