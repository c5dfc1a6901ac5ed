"""Expressions embedded in configuration values as ``${ ... }``.

The package splits into:
- ``context``: the data expressions are evaluated against
- ``value``: span scanning, Value and the condition resolver
- ``parser``/``compiler``/``evaluator``: the expression language itself
"""

from __future__ import annotations

from booster.expr.compiler import Program, compile_expression
from booster.expr.context import Context, TaskResult
from booster.expr.errors import (
    ConditionTypeError,
    ExpressionCompileError,
    ExpressionError,
    ExpressionEvaluationError,
    ExpressionSyntaxError,
)
from booster.expr.value import Span, Value, resolve_condition, resolve_nested, scan_spans

__all__ = [
    "ConditionTypeError",
    "Context",
    "ExpressionCompileError",
    "ExpressionError",
    "ExpressionEvaluationError",
    "ExpressionSyntaxError",
    "Program",
    "Span",
    "TaskResult",
    "Value",
    "compile_expression",
    "resolve_condition",
    "resolve_nested",
    "scan_spans",
]
