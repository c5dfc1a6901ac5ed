"""Unit tests for static checks performed by compile_expression."""

from __future__ import annotations

import pytest

from booster.expr import Context, ExpressionCompileError, compile_expression
from booster.expr.types import Kind


class TestResultTypes:
    @pytest.mark.parametrize(
        ("text", "kind"),
        [
            ("1 + 2", Kind.INT),
            ("1 + 2.5", Kind.FLOAT),
            ("4 / 2", Kind.FLOAT),
            ("7 % 2", Kind.INT),
            ('"a" + "b"', Kind.STRING),
            ("os", Kind.STRING),
            ('exists("~")', Kind.BOOL),
            ("vars.anything", Kind.ANY),
            ('tasks["clone"].status', Kind.STRING),
            ("1 < 2", Kind.BOOL),
        ],
    )
    def test_inferred_kind(self, text: str, kind: Kind) -> None:
        assert compile_expression(text).result_type.kind is kind

    def test_source_is_trimmed(self) -> None:
        assert compile_expression("  os  ").source == "os"


class TestRejected:
    @pytest.mark.parametrize(
        ("text", "message"),
        [
            ("nope", "unknown name nope"),
            ("exists", "function exists must be called"),
            ('missing("x")', "unknown function missing"),
            ("which()", "which: expected 1 argument, got 0"),
            ("exists(1)", "exists: argument 1 must be string, got int"),
            ('join("a", ",")', "join: argument 1 must be list, got string"),
            ("os.name", "type string has no field name"),
            ("tasks.clone.result", "has no field result"),
            ('os["x"]', "string index must be int, got string"),
            ("1[0]", "type int does not support indexing"),
            ('"a" + 1', "invalid operation: string + int"),
            ('"a" - "b"', "invalid operation: string - string"),
            ("1.5 % 2", "invalid operation: float % int"),
            ('1 < "a"', "invalid operation: int < string"),
            ("1 and true", "invalid operation: int and bool"),
            ('not "a"', "invalid operation: not string"),
            ('-"a"', "invalid operation: -string"),
            ('"a" contains 1', "invalid operation: string contains int"),
            ('"a" in "abc"', "invalid operation: string in string"),
            ('1 ? "a" : "b"', "non-bool expression (type int) used as condition"),
        ],
    )
    def test_message(self, text: str, message: str) -> None:
        with pytest.raises(ExpressionCompileError) as exc_info:
            compile_expression(text)
        assert message in str(exc_info.value)

    def test_unknown_values_are_checked_at_run_time(self) -> None:
        # vars entries are untyped, so only evaluation can reject this
        compile_expression("vars.count + 1")


class TestProgram:
    def test_program_runs_many_times(self) -> None:
        program = compile_expression("profile")
        assert program.run(Context(profile="work")) == "work"
        assert program.run(Context(profile="personal")) == "personal"

    def test_runs_against_plain_mapping(self) -> None:
        program = compile_expression("vars.name")
        assert program.run({"vars": {"name": "Luke"}}) == "Luke"
