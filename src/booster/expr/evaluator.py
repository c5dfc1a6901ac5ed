"""Runtime evaluation of compiled expression trees.

The evaluator walks an AST produced by ``booster.expr.parser`` against an
evaluation context. Names resolve to attributes of the context (or keys, when
the context is a plain mapping). Errors are raised as
ExpressionEvaluationError naming the expression that failed.

Evaluation rules:
- ``and``, ``or``, ``not`` and the ternary condition require booleans
- ``==`` never considers a bool equal to a number
- ``/`` always produces a float, ``%`` requires integers
- missing map keys evaluate to nil; member access on nil is an error
"""

from __future__ import annotations

import dataclasses
import operator
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from booster.expr.errors import ExpressionEvaluationError
from booster.expr.functions import BuiltinError
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
from booster.expr.types import type_name_of

if TYPE_CHECKING:
    from booster.expr.environment import Environment

__all__ = ["Evaluator"]

_ORDERING = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return bool(left == right)


class _Failure(Exception):
    """Internal signal carrying an evaluation error message."""


class Evaluator:
    """Evaluates AST nodes against a context.

    The evaluator holds no per-run state, so one instance may evaluate any
    number of programs.

    Example:
        ```python
        evaluator = Evaluator(DEFAULT_ENVIRONMENT)
        node = parse_expression("vars.name")
        evaluator.evaluate(node, Context(vars={"name": "Luke"}), "vars.name")
        # "Luke"
        ```
    """

    def __init__(self, environment: Environment) -> None:
        self._env = environment

    def evaluate(self, node: Node, context: Any, source: str) -> Any:
        """Evaluate ``node`` against ``context``.

        Args:
            node: Root node of a compiled expression.
            context: Evaluation context (a Context or a mapping of names).
            source: Expression text, used in error messages.

        Returns:
            The natively typed result.

        Raises:
            ExpressionEvaluationError: If evaluation fails.
        """
        try:
            return self._eval(node, context)
        except _Failure as e:
            raise ExpressionEvaluationError(str(e), expression=source) from None
        except BuiltinError as e:
            raise ExpressionEvaluationError(str(e), expression=source) from e

    def _eval(self, node: Node, context: Any) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, ListLiteral):
            return [self._eval(item, context) for item in node.items]
        if isinstance(node, MapLiteral):
            return {key: self._eval(item, context) for key, item in node.entries}
        if isinstance(node, Name):
            return self._lookup_name(node.name, context)
        if isinstance(node, Member):
            return self._fetch(self._eval(node.target, context), node.name)
        if isinstance(node, Index):
            return self._index(
                self._eval(node.target, context), self._eval(node.index, context)
            )
        if isinstance(node, Call):
            return self._call(node, context)
        if isinstance(node, Unary):
            return self._unary(node, context)
        if isinstance(node, Binary):
            return self._binary(node, context)
        if isinstance(node, Conditional):
            condition = self._eval(node.condition, context)
            if not isinstance(condition, bool):
                raise _Failure(
                    f"non-bool expression (type {type_name_of(condition)}) "
                    "used as condition"
                )
            branch = node.if_true if condition else node.if_false
            return self._eval(branch, context)
        raise _Failure(f"unsupported node {type(node).__name__}")

    def _lookup_name(self, name: str, context: Any) -> Any:
        if self._env.lookup_name(name) is None:
            raise _Failure(f"unknown name {name}")
        if isinstance(context, Mapping):
            return context.get(name)
        return getattr(context, name, None)

    def _fetch(self, target: Any, name: str) -> Any:
        if target is None:
            raise _Failure(f"cannot fetch {name} from nil")
        if isinstance(target, Mapping):
            return target.get(name)
        if dataclasses.is_dataclass(target) and not isinstance(target, type):
            if name in {f.name for f in dataclasses.fields(target)}:
                return getattr(target, name)
        raise _Failure(f"type {type_name_of(target)} has no field {name}")

    def _index(self, target: Any, index: Any) -> Any:
        if target is None:
            raise _Failure(f"cannot fetch {index} from nil")
        if isinstance(target, (list, tuple, str)):
            if not isinstance(index, int) or isinstance(index, bool):
                raise _Failure(
                    f"{type_name_of(target)} index must be int, "
                    f"got {type_name_of(index)}"
                )
            if not -len(target) <= index < len(target):
                raise _Failure(
                    f"index out of range: {index} (length {len(target)})"
                )
            return target[index]
        if isinstance(target, Mapping):
            try:
                return target.get(index)
            except TypeError:
                raise _Failure(
                    f"invalid map key of type {type_name_of(index)}"
                ) from None
        if isinstance(index, str):
            return self._fetch(target, index)
        raise _Failure(f"type {type_name_of(target)} does not support indexing")

    def _call(self, node: Call, context: Any) -> Any:
        builtin = self._env.lookup_function(node.function)
        if builtin is None:
            raise _Failure(f"unknown function {node.function}")
        args = [self._eval(arg, context) for arg in node.args]
        return builtin(*args)

    def _unary(self, node: Unary, context: Any) -> Any:
        operand = self._eval(node.operand, context)
        if node.op == "not":
            if not isinstance(operand, bool):
                raise _Failure(f"invalid operation: not {type_name_of(operand)}")
            return not operand
        if not _is_number(operand):
            raise _Failure(f"invalid operation: -{type_name_of(operand)}")
        return -operand

    def _binary(self, node: Binary, context: Any) -> Any:
        op = node.op
        if op in ("and", "or"):
            return self._logical(node, context)

        left = self._eval(node.left, context)
        right = self._eval(node.right, context)

        if op == "==":
            return _equal(left, right)
        if op == "!=":
            return not _equal(left, right)
        if op in _ORDERING:
            if (_is_number(left) and _is_number(right)) or (
                isinstance(left, str) and isinstance(right, str)
            ):
                return _ORDERING[op](left, right)
            raise self._invalid(left, op, right)
        if op in ("in", "not in"):
            found = self._contains(right, left, op)
            return found if op == "in" else not found
        if op in ("contains", "startsWith", "endsWith"):
            if not (isinstance(left, str) and isinstance(right, str)):
                raise self._invalid(left, op, right)
            if op == "contains":
                return right in left
            if op == "startsWith":
                return left.startswith(right)
            return left.endswith(right)
        return self._arithmetic(op, left, right)

    def _logical(self, node: Binary, context: Any) -> bool:
        left = self._eval(node.left, context)
        if not isinstance(left, bool):
            raise _Failure(
                f"invalid operation: {type_name_of(left)} {node.op} bool"
            )
        # Short-circuit without evaluating the right side
        if node.op == "and" and not left:
            return False
        if node.op == "or" and left:
            return True
        right = self._eval(node.right, context)
        if not isinstance(right, bool):
            raise _Failure(
                f"invalid operation: bool {node.op} {type_name_of(right)}"
            )
        return right

    def _contains(self, container: Any, item: Any, op: str) -> bool:
        if isinstance(container, Mapping):
            try:
                return item in container
            except TypeError:
                return False
        if isinstance(container, (list, tuple)):
            return any(_equal(item, element) for element in container)
        if dataclasses.is_dataclass(container) and not isinstance(container, type):
            return isinstance(item, str) and item in {
                f.name for f in dataclasses.fields(container)
            }
        raise self._invalid(item, op, container)

    def _arithmetic(self, op: str, left: Any, right: Any) -> Any:
        if op == "+":
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
                return [*left, *right]
        if not (_is_number(left) and _is_number(right)):
            raise self._invalid(left, op, right)
        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if op == "/":
            if right == 0:
                raise _Failure("division by zero")
            return left / right
        if op == "%":
            if not (isinstance(left, int) and isinstance(right, int)):
                raise self._invalid(left, op, right)
            if right == 0:
                raise _Failure("integer divide by zero")
            return left % right
        raise _Failure(f"unknown operator {op}")

    @staticmethod
    def _invalid(left: Any, op: str, right: Any) -> _Failure:
        return _Failure(
            f"invalid operation: {type_name_of(left)} {op} {type_name_of(right)}"
        )
