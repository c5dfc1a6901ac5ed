"""Configuration values that may embed ``${ ... }`` expressions.

A Value wraps one raw configuration value and classifies it once, at
construction:

- literal: any non-string value, or a string without ``${``; resolves to the
  raw value unchanged
- full expression: the whole (trimmed) string is a single ``${ ... }`` span;
  resolves to the expression's natively typed result
- interpolated string: literal text mixed with spans; resolves to a string

Spans are found by a brace-depth scanner that ignores braces inside quoted
strings, so expressions may contain map literals: ``${ {"a": 1}.a }``.
Every expression is compiled when the Value is built, so a broken expression
rejects the configuration before any task runs.

Example:
    ```python
    ctx = Context.from_environment().with_vars({"name": "Luke", "version": "1.0"})
    Value("${ vars.name } v${ vars.version }").resolve(ctx)  # "Luke v1.0"
    Value("${ 1 + 2 }").resolve(ctx)  # 3
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from booster.expr.compiler import Program, compile_expression
from booster.expr.context import Context
from booster.expr.environment import DEFAULT_ENVIRONMENT, Environment
from booster.expr.errors import ConditionTypeError, ExpressionSyntaxError
from booster.expr.types import format_value, type_name_of

__all__ = [
    "Span",
    "Value",
    "resolve_condition",
    "resolve_nested",
    "scan_spans",
]

_OPEN = "${"


@dataclass(frozen=True, slots=True)
class Span:
    """Location of one ``${ ... }`` expression inside a string.

    Attributes:
        start: Index of the ``$``.
        end: Index one past the closing ``}``.
        inner: Text between the delimiters.
    """

    start: int
    end: int
    inner: str


def scan_spans(text: str) -> tuple[Span, ...]:
    """Find every ``${ ... }`` span in ``text``, left to right.

    Inside a span, ``{`` and ``}`` change the nesting depth unless they occur
    within a single- or double-quoted string (backslash escapes honored).

    Raises:
        ExpressionSyntaxError: If a span is opened but never closed.

    Examples:
        >>> scan_spans("a ${ x } b")
        (Span(start=2, end=8, inner=' x '),)
        >>> [s.inner for s in scan_spans('${ {"k": "}"}.k }')]
        [' {"k": "}"}.k ']
    """
    spans: list[Span] = []
    pos = 0
    while True:
        start = text.find(_OPEN, pos)
        if start < 0:
            break
        depth = 1
        quote: str | None = None
        escaped = False
        i = start + len(_OPEN)
        while i < len(text):
            char = text[i]
            if quote is not None:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == quote:
                    quote = None
            elif char in ("'", '"'):
                quote = char
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    break
            i += 1
        if depth != 0:
            raise ExpressionSyntaxError(
                "Unterminated expression", expression=text, position=start
            )
        spans.append(Span(start=start, end=i + 1, inner=text[start + 2 : i]))
        pos = i + 1
    return tuple(spans)


@dataclass(frozen=True, slots=True)
class _Part:
    literal: str = ""
    program: Program | None = None


class Value:
    """A configuration value, possibly containing expressions.

    Construction compiles every embedded expression once; a Value is
    immutable afterwards and may be resolved against any number of contexts.

    Args:
        raw: The value as loaded from configuration.
        environment: Environment to compile expressions against.

    Raises:
        ExpressionSyntaxError: If an embedded expression does not parse.
        ExpressionCompileError: If an embedded expression is invalid.
    """

    __slots__ = ("_raw", "_parts", "_program")

    def __init__(self, raw: Any, environment: Environment = DEFAULT_ENVIRONMENT) -> None:
        self._raw = raw
        self._parts: tuple[_Part, ...] = ()
        self._program: Program | None = None

        if not isinstance(raw, str) or _OPEN not in raw:
            return

        trimmed = raw.strip()
        spans = scan_spans(trimmed)
        if len(spans) == 1 and spans[0].start == 0 and spans[0].end == len(trimmed):
            self._program = compile_expression(spans[0].inner, environment)
            return

        parts: list[_Part] = []
        last_end = 0
        for span in scan_spans(raw):
            if span.start > last_end:
                parts.append(_Part(literal=raw[last_end : span.start]))
            parts.append(_Part(program=compile_expression(span.inner, environment)))
            last_end = span.end
        if last_end < len(raw):
            parts.append(_Part(literal=raw[last_end:]))
        self._parts = tuple(parts)

    @property
    def raw(self) -> Any:
        """The configuration value as written."""
        return self._raw

    @property
    def is_full_expression(self) -> bool:
        return self._program is not None

    @property
    def is_literal(self) -> bool:
        """True if the value contains no expressions at all."""
        if self._program is not None:
            return False
        return all(part.program is None for part in self._parts)

    @property
    def programs(self) -> tuple[Program, ...]:
        """Compiled expressions in source order."""
        if self._program is not None:
            return (self._program,)
        return tuple(part.program for part in self._parts if part.program)

    def resolve(self, ctx: Context | Mapping[str, Any]) -> Any:
        """Evaluate the value against a context.

        Returns:
            The raw value for literals, the native result for a full
            expression, or the concatenated string for interpolations.

        Raises:
            ExpressionEvaluationError: If any expression fails to evaluate.
        """
        if self._program is not None:
            return self._program.run(ctx)
        if self.is_literal:
            return self._raw
        chunks: list[str] = []
        for part in self._parts:
            if part.program is None:
                chunks.append(part.literal)
            else:
                chunks.append(format_value(part.program.run(ctx)))
        return "".join(chunks)

    def __repr__(self) -> str:
        if self._program is not None:
            return f"Expr({self._raw!r})"
        if not self.is_literal:
            return f"Interpolated({self._raw!r})"
        return f"Literal({self._raw!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(repr(self))


def resolve_condition(when: Value | None, ctx: Context | Mapping[str, Any]) -> bool:
    """Decide whether a task gated by a ``when`` expression should run.

    Rules:
    - no condition, or a literal empty string: run
    - otherwise the value must evaluate to a bool; anything else is an error,
      never coerced

    Raises:
        ConditionTypeError: If the condition evaluates to a non-bool.
        ExpressionEvaluationError: If evaluation fails.
    """
    if when is None:
        return True
    if when.is_literal and when.raw == "" and isinstance(when.raw, str):
        return True
    result = when.resolve(ctx)
    if not isinstance(result, bool):
        raise ConditionTypeError(type_name_of(result), expression=str(when.raw))
    return result


def resolve_nested(
    raw: Any,
    ctx: Context | Mapping[str, Any],
    environment: Environment = DEFAULT_ENVIRONMENT,
) -> Any:
    """Resolve every string inside a nested list/map structure.

    Mapping keys are kept as-is; only values are resolved.

    Raises:
        ExpressionError: If any embedded expression fails to compile or run.
    """
    if isinstance(raw, Mapping):
        return {key: resolve_nested(item, ctx, environment) for key, item in raw.items()}
    if isinstance(raw, (list, tuple)):
        return [resolve_nested(item, ctx, environment) for item in raw]
    return Value(raw, environment).resolve(ctx)
