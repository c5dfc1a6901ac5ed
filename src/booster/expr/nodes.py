"""AST node types produced by the expression parser.

All nodes are frozen dataclasses so that a compiled program can be shared
between any number of evaluations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Literal:
    value: Any


@dataclass(frozen=True, slots=True)
class ListLiteral:
    items: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class MapLiteral:
    entries: tuple[tuple[str, Node], ...]


@dataclass(frozen=True, slots=True)
class Name:
    name: str


@dataclass(frozen=True, slots=True)
class Member:
    target: Node
    name: str


@dataclass(frozen=True, slots=True)
class Index:
    target: Node
    index: Node


@dataclass(frozen=True, slots=True)
class Call:
    function: str
    args: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Unary:
    op: str  # "not" or "-"
    operand: Node


@dataclass(frozen=True, slots=True)
class Binary:
    """Binary operation.

    ``op`` is the canonical operator: arithmetic (``+ - * / %``), comparison
    (``== != < <= > >=``), membership (``in``, ``not in``), string
    (``contains``, ``startsWith``, ``endsWith``) or logical (``and``, ``or``).
    """

    op: str
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class Conditional:
    condition: Node
    if_true: Node
    if_false: Node


Node = (
    Literal
    | ListLiteral
    | MapLiteral
    | Name
    | Member
    | Index
    | Call
    | Unary
    | Binary
    | Conditional
)
