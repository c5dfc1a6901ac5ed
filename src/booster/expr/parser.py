"""Expression parser for ``${ ... }`` bodies.

This module uses a Lark LALR parser with a formal grammar (grammar.lark) and
transforms the parse tree into the frozen AST nodes of ``booster.expr.nodes``.
Parsing is purely syntactic; name resolution and type checks against the
evaluation environment happen in ``booster.expr.compiler``.

Supported syntax:
- Literals: ``42``, ``3.14``, ``"text"``, ``'text'``, ``true``, ``false``, ``nil``
- Collections: ``[1, 2]``, ``{"key": "value", other: 1}``
- Access: ``vars.name``, ``env["HOME"]``, ``tasks.clone.output``
- Calls: ``exists("~/.config")``, ``default(vars.editor, "vim")``
- Operators: ``not``, ``and``, ``or``, ``== != < <= > >=``, ``in``,
  ``not in``, ``contains``, ``startsWith``, ``endsWith``, ``+ - * / %``,
  ``cond ? a : b``
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from lark import Lark, Token, Transformer, UnexpectedCharacters, UnexpectedInput
from lark.exceptions import UnexpectedEOF, VisitError

from booster.expr.errors import ExpressionSyntaxError
from booster.expr.nodes import (
    Binary,
    Call,
    Conditional,
    Index,
    ListLiteral,
    Literal,
    MapLiteral,
    Member,
    Name,
    Node,
    Unary,
)

__all__ = ["parse_expression"]

_GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"
_GRAMMAR = _GRAMMAR_PATH.read_text()

_parser = Lark(
    _GRAMMAR,
    parser="lalr",
    start="start",
    maybe_placeholders=True,
)

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

_ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)


def _unquote(token: str) -> str:
    """Strip quotes and decode backslash escapes of a string literal."""
    body = token[1:-1]
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


class _NodeTransformer(Transformer[Token, Node]):
    """Transform the Lark parse tree into AST nodes."""

    def conditional(self, items: list[Node]) -> Conditional:
        return Conditional(condition=items[0], if_true=items[1], if_false=items[2])

    def or_op(self, items: list[Node]) -> Binary:
        return Binary(op="or", left=items[0], right=items[1])

    def and_op(self, items: list[Node]) -> Binary:
        return Binary(op="and", left=items[0], right=items[1])

    def not_op(self, items: list[Node]) -> Unary:
        return Unary(op="not", operand=items[-1])

    def binary(self, items: list[Any]) -> Binary:
        left, op, right = items
        return Binary(op=str(op), left=left, right=right)

    def in_op(self, items: list[Node]) -> Binary:
        return Binary(op="in", left=items[0], right=items[1])

    def not_in_op(self, items: list[Node]) -> Binary:
        return Binary(op="not in", left=items[0], right=items[1])

    def neg(self, items: list[Any]) -> Node:
        operand = items[-1]
        # Fold negative numeric literals so "-1" stays a literal
        if isinstance(operand, Literal) and type(operand.value) in (int, float):
            return Literal(-operand.value)
        return Unary(op="-", operand=operand)

    def member(self, items: list[Any]) -> Member:
        return Member(target=items[0], name=str(items[1]))

    def index(self, items: list[Node]) -> Index:
        return Index(target=items[0], index=items[1])

    def call(self, items: list[Any]) -> Call:
        args = items[1] if len(items) > 1 and items[1] is not None else ()
        return Call(function=str(items[0]), args=tuple(args))

    def arguments(self, items: list[Node]) -> tuple[Node, ...]:
        return tuple(item for item in items if item is not None)

    def name(self, items: list[Token]) -> Name:
        return Name(str(items[0]))

    def list_literal(self, items: list[Node | None]) -> ListLiteral:
        return ListLiteral(tuple(item for item in items if item is not None))

    def map_literal(self, items: list[tuple[str, Node] | None]) -> MapLiteral:
        return MapLiteral(tuple(item for item in items if item is not None))

    def pair(self, items: list[Any]) -> tuple[str, Node]:
        key: Token = items[0]
        text = _unquote(str(key)) if key.type == "STRING" else str(key)
        return (text, items[1])

    def float_literal(self, items: list[Token]) -> Literal:
        return Literal(float(items[0]))

    def int_literal(self, items: list[Token]) -> Literal:
        return Literal(int(items[0]))

    def string_literal(self, items: list[Token]) -> Literal:
        return Literal(_unquote(str(items[0])))

    def true_literal(self, items: list[Any]) -> Literal:
        return Literal(True)

    def false_literal(self, items: list[Any]) -> Literal:
        return Literal(False)

    def nil_literal(self, items: list[Any]) -> Literal:
        return Literal(None)


def parse_expression(expression: str) -> Node:
    """Parse the body of a ``${ ... }`` span into an AST.

    Args:
        expression: Expression text without the ``${`` and ``}`` delimiters.

    Returns:
        Root AST node of the expression.

    Raises:
        ExpressionSyntaxError: If the text is empty or not valid syntax.

    Examples:
        >>> parse_expression("vars.name")
        Member(target=Name(name='vars'), name='name')
        >>> parse_expression("1 + 2")  # doctest: +ELLIPSIS
        Binary(op='+', left=Literal(value=1), right=Literal(value=2))
    """
    if not expression or expression.isspace():
        raise ExpressionSyntaxError("Empty expression", expression=expression)

    try:
        tree = _parser.parse(expression)
    except UnexpectedEOF as e:
        raise ExpressionSyntaxError(
            "Unexpected end of expression",
            expression=expression,
            position=len(expression.rstrip()),
        ) from e
    except UnexpectedCharacters as e:
        pos = e.column - 1 if e.column and e.column > 0 else 0
        raise ExpressionSyntaxError(
            f"Invalid character {expression[e.pos_in_stream]!r} in expression",
            expression=expression,
            position=pos,
        ) from e
    except UnexpectedInput as e:
        pos = e.column - 1 if isinstance(e.column, int) and e.column > 0 else 0
        token = getattr(e, "token", None)
        detail = f"Unexpected token {str(token)!r}" if token else "Unexpected token"
        raise ExpressionSyntaxError(
            detail, expression=expression, position=pos
        ) from e

    try:
        node: Node = _NodeTransformer().transform(tree)
    except VisitError as e:
        raise ExpressionSyntaxError(
            f"Malformed expression ({e.orig_exc})", expression=expression
        ) from e
    return node
