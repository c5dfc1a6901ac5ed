"""Expression-specific error types for Booster configuration values.

Errors fall into three phases:

- ExpressionSyntaxError: the text inside ``${ ... }`` cannot be parsed.
- ExpressionCompileError: the text parses but is invalid against the static
  environment (unknown name, unknown function, wrong arity, known type clash).
- ExpressionEvaluationError: a compiled program failed while running.

ConditionTypeError is raised when a condition evaluates successfully but not
to a boolean.
"""

from __future__ import annotations

from booster.exceptions.base import BoosterError


class ExpressionError(BoosterError):
    """Base exception for all expression-related errors.

    Attributes:
        message: Human-readable error message.
        expression: The expression that caused the error (if known).
    """

    def __init__(
        self,
        message: str,
        expression: str | None = None,
    ) -> None:
        self.expression = expression
        super().__init__(message)


class ExpressionSyntaxError(ExpressionError):
    """Exception raised for syntax errors in ``${ }`` expressions.

    Attributes:
        message: Human-readable error message.
        expression: The expression that failed to parse.
        position: Character position in the expression where the error occurred.
    """

    def __init__(
        self,
        message: str,
        expression: str,
        position: int = 0,
    ) -> None:
        self.position = position
        if position > 0 and expression:
            # Caret under the offending character
            error_line = f"{expression}\n{' ' * position}^"
            full_message = f"{message} at position {position}:\n{error_line}"
        else:
            full_message = f"{message}: {expression!r}"
        super().__init__(full_message, expression=expression)


class ExpressionCompileError(ExpressionError):
    """Exception raised when an expression is invalid against the environment.

    Attributes:
        message: Human-readable error message.
        expression: The expression that failed to compile.
    """

    def __init__(self, message: str, expression: str) -> None:
        super().__init__(
            f"invalid expression {expression!r}: {message}", expression=expression
        )


class ExpressionEvaluationError(ExpressionError):
    """Exception raised for runtime evaluation errors in expressions.

    Raised when an expression compiles but fails while running, such as a
    builtin receiving the wrong argument type or member access on nil.

    Attributes:
        message: Human-readable error message.
        expression: The expression that failed to evaluate.
    """

    def __init__(self, message: str, expression: str) -> None:
        super().__init__(
            f"{message} in expression: {expression}", expression=expression
        )


class ConditionTypeError(ExpressionError):
    """Raised when a condition evaluates to something other than a bool.

    Attributes:
        actual_type: Name of the type the condition produced.
    """

    def __init__(self, actual_type: str, expression: str | None = None) -> None:
        self.actual_type = actual_type
        super().__init__(
            f"condition must evaluate to bool, got {actual_type}",
            expression=expression,
        )
