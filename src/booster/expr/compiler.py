"""Compile expressions into reusable programs.

Compilation parses the expression and checks it against the static
Environment. A compiled Program is immutable and can be run any number of
times against different evaluation contexts.

Example:
    ```python
    program = compile_expression('default(vars.editor, "vim")')
    program.run(Context.from_environment())  # "vim" unless vars.editor is set
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from booster.expr.environment import DEFAULT_ENVIRONMENT, Environment
from booster.expr.errors import ExpressionCompileError
from booster.expr.evaluator import Evaluator
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
from booster.expr.parser import parse_expression
from booster.expr.types import (
    ANY,
    BOOL,
    FLOAT,
    INT,
    LIST,
    MAP,
    STRING,
    Kind,
    TypeInfo,
    type_of_literal,
)

__all__ = ["Program", "compile_expression"]

_ORDERING = frozenset({"<", "<=", ">", ">="})
_STRING_OPS = frozenset({"contains", "startsWith", "endsWith"})


@dataclass(frozen=True, slots=True)
class Program:
    """A parsed and checked expression.

    Attributes:
        source: Expression text as written between ``${`` and ``}``.
        node: Root AST node.
        result_type: Statically inferred result type (``any`` if unknown).
        environment: Environment the program was checked against.
    """

    source: str
    node: Node
    result_type: TypeInfo
    environment: Environment = field(default=DEFAULT_ENVIRONMENT, repr=False)

    def run(self, context: Any) -> Any:
        """Evaluate the program against an evaluation context.

        Raises:
            ExpressionEvaluationError: If evaluation fails.
        """
        return Evaluator(self.environment).evaluate(self.node, context, self.source)


def compile_expression(
    source: str,
    environment: Environment = DEFAULT_ENVIRONMENT,
) -> Program:
    """Parse and statically check an expression.

    Args:
        source: Expression text without ``${`` and ``}``.
        environment: Names and functions the expression may use.

    Returns:
        The compiled Program.

    Raises:
        ExpressionSyntaxError: If the expression does not parse.
        ExpressionCompileError: If it references unknown names or functions,
            calls a function with the wrong arity, or combines values whose
            types are statically known to be incompatible.
    """
    text = source.strip()
    node = parse_expression(text)
    result_type = _Checker(environment, text).check(node)
    return Program(
        source=text, node=node, result_type=result_type, environment=environment
    )


class _Checker:
    """Infer static types and reject expressions that can never succeed."""

    def __init__(self, environment: Environment, source: str) -> None:
        self._env = environment
        self._source = source

    def _fail(self, message: str) -> ExpressionCompileError:
        return ExpressionCompileError(message, expression=self._source)

    def check(self, node: Node) -> TypeInfo:
        if isinstance(node, Literal):
            return type_of_literal(node.value)
        if isinstance(node, ListLiteral):
            for item in node.items:
                self.check(item)
            return LIST
        if isinstance(node, MapLiteral):
            for _, item in node.entries:
                self.check(item)
            return MAP
        if isinstance(node, Name):
            return self._check_name(node)
        if isinstance(node, Member):
            return self._check_member(node)
        if isinstance(node, Index):
            return self._check_index(node)
        if isinstance(node, Call):
            return self._check_call(node)
        if isinstance(node, Unary):
            return self._check_unary(node)
        if isinstance(node, Binary):
            return self._check_binary(node)
        if isinstance(node, Conditional):
            return self._check_conditional(node)
        raise self._fail(f"unsupported node {type(node).__name__}")

    def _check_name(self, node: Name) -> TypeInfo:
        found = self._env.lookup_name(node.name)
        if found is None:
            if self._env.lookup_function(node.name) is not None:
                raise self._fail(f"function {node.name} must be called")
            raise self._fail(f"unknown name {node.name}")
        return found

    def _check_member(self, node: Member) -> TypeInfo:
        target = self.check(node.target)
        if target.kind is Kind.ANY:
            return ANY
        if target.kind is Kind.MAP:
            return target.element or ANY
        if target.kind is Kind.STRUCT:
            found = target.field(node.name)
            if found is None:
                raise self._fail(f"type {target} has no field {node.name}")
            return found
        if target.kind is Kind.NIL:
            raise self._fail(f"cannot fetch {node.name} from nil")
        raise self._fail(f"type {target} has no field {node.name}")

    def _check_index(self, node: Index) -> TypeInfo:
        target = self.check(node.target)
        index = self.check(node.index)
        if target.kind is Kind.ANY:
            return ANY
        if target.kind in (Kind.LIST, Kind.STRING):
            if not INT.accepts(index):
                raise self._fail(f"{target} index must be int, got {index}")
            return STRING if target.kind is Kind.STRING else target.element or ANY
        if target.kind in (Kind.MAP, Kind.STRUCT):
            if not STRING.accepts(index):
                raise self._fail(f"{target} key must be string, got {index}")
            if target.kind is Kind.STRUCT and isinstance(node.index, Literal):
                found = target.field(node.index.value)
                if found is None:
                    raise self._fail(f"type {target} has no field {node.index.value}")
                return found
            return target.element or ANY
        raise self._fail(f"type {target} does not support indexing")

    def _check_call(self, node: Call) -> TypeInfo:
        builtin = self._env.lookup_function(node.function)
        if builtin is None:
            raise self._fail(f"unknown function {node.function}")
        expected = len(builtin.params)
        if len(node.args) != expected:
            plural = "argument" if expected == 1 else "arguments"
            raise self._fail(
                f"{node.function}: expected {expected} {plural}, got {len(node.args)}"
            )
        for position, (param, arg) in enumerate(
            zip(builtin.params, node.args, strict=True), start=1
        ):
            actual = self.check(arg)
            if not param.accepts(actual):
                raise self._fail(
                    f"{node.function}: argument {position} must be {param}, "
                    f"got {actual}"
                )
        return builtin.returns

    def _check_unary(self, node: Unary) -> TypeInfo:
        operand = self.check(node.operand)
        if node.op == "not":
            if operand.known and operand.kind is not Kind.BOOL:
                raise self._fail(f"invalid operation: not {operand}")
            return BOOL
        if operand.known and not operand.numeric:
            raise self._fail(f"invalid operation: -{operand}")
        return operand

    def _check_binary(self, node: Binary) -> TypeInfo:
        left = self.check(node.left)
        right = self.check(node.right)
        op = node.op
        invalid = self._fail(f"invalid operation: {left} {op} {right}")

        if op in ("and", "or"):
            for side in (left, right):
                if side.known and side.kind is not Kind.BOOL:
                    raise invalid
            return BOOL
        if op in ("==", "!="):
            return BOOL
        if op in _ORDERING:
            if left.known and right.known:
                comparable = (left.numeric and right.numeric) or (
                    left.kind is Kind.STRING and right.kind is Kind.STRING
                )
                if not comparable:
                    raise invalid
            elif (left.known and not (left.numeric or left.kind is Kind.STRING)) or (
                right.known and not (right.numeric or right.kind is Kind.STRING)
            ):
                raise invalid
            return BOOL
        if op in _STRING_OPS:
            if not (STRING.accepts(left) and STRING.accepts(right)):
                raise invalid
            return BOOL
        if op in ("in", "not in"):
            if right.known and right.kind not in (Kind.LIST, Kind.MAP, Kind.STRUCT):
                raise invalid
            if right.kind in (Kind.MAP, Kind.STRUCT) and not STRING.accepts(left):
                raise invalid
            return BOOL
        return self._check_arithmetic(op, left, right, invalid)

    def _check_arithmetic(
        self,
        op: str,
        left: TypeInfo,
        right: TypeInfo,
        invalid: ExpressionCompileError,
    ) -> TypeInfo:
        if op == "+":
            if left.known and right.known:
                if left.kind is right.kind and left.kind in (Kind.STRING, Kind.LIST):
                    return left
                if left.numeric and right.numeric:
                    return INT if left.kind is right.kind is Kind.INT else FLOAT
                raise invalid
            known = left if left.known else right
            if known.known and not (
                known.numeric or known.kind in (Kind.STRING, Kind.LIST)
            ):
                raise invalid
            return ANY
        for side in (left, right):
            if side.known and not side.numeric:
                raise invalid
        if op == "/":
            return FLOAT
        if op == "%":
            if (left.known and left.kind is not Kind.INT) or (
                right.known and right.kind is not Kind.INT
            ):
                raise invalid
            return INT
        if not (left.known and right.known):
            return ANY
        if left.kind is Kind.INT and right.kind is Kind.INT:
            return INT
        return FLOAT

    def _check_conditional(self, node: Conditional) -> TypeInfo:
        condition = self.check(node.condition)
        if condition.known and condition.kind is not Kind.BOOL:
            raise self._fail(f"non-bool expression (type {condition}) used as condition")
        if_true = self.check(node.if_true)
        if_false = self.check(node.if_false)
        if if_true == if_false:
            return if_true
        return ANY
