"""Unit tests for expression builtins."""

from __future__ import annotations

from pathlib import Path

import pytest

from booster.expr import Context, ExpressionEvaluationError, compile_expression
from booster.expr.functions import BuiltinError, default, has_substr, join
from booster.expr.types import format_value
from tests.fixtures.runners import FakeRunner


def evaluate(text: str, ctx: Context | None = None) -> object:
    return compile_expression(text).run(ctx or Context())


class TestExists:
    def test_existing_path(self, tmp_path: Path) -> None:
        assert evaluate(f'exists("{tmp_path}")') is True

    def test_missing_path(self, tmp_path: Path) -> None:
        assert evaluate(f'exists("{tmp_path / "nope"}")') is False

    def test_expands_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / ".zshrc").touch()
        assert evaluate('exists("~/.zshrc")') is True

    def test_expands_env_vars(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOOSTER_TEST_DIR", str(tmp_path))
        assert evaluate('exists("$BOOSTER_TEST_DIR")') is True

    def test_runtime_type_check(self) -> None:
        with pytest.raises(ExpressionEvaluationError, match="exists: expected string, got int"):
            evaluate("exists(vars.n)", Context(vars={"n": 1}))


class TestWhichAndInstalled:
    def test_found(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("shutil.which", lambda name: f"/usr/bin/{name}")
        assert evaluate('which("git")') == "/usr/bin/git"
        assert evaluate('installed("git")') is True

    def test_not_found(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("shutil.which", lambda name: None)
        assert evaluate('which("nope")') == ""
        assert evaluate('installed("nope")') is False

    def test_lookup_goes_through_command_runner(
        self, monkeypatch: pytest.MonkeyPatch, fake_runner: FakeRunner
    ) -> None:
        fake_runner.install("nvim", "/opt/bin/nvim")
        monkeypatch.setattr("booster.expr.functions._runner", fake_runner)

        assert evaluate('which("nvim")') == "/opt/bin/nvim"
        assert evaluate('installed("nvim")') is True
        assert evaluate('installed("emacs")') is False


class TestDefault:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, "vim"), ("", "vim"), ("nvim", "nvim"), (0, 0), (False, False)],
    )
    def test_fallback_only_for_nil_or_empty(self, value: object, expected: object) -> None:
        assert default(value, "vim") == expected

    def test_in_expression(self) -> None:
        assert evaluate('default(vars.editor, "vim")') == "vim"

    def test_arity(self) -> None:
        with pytest.raises(BuiltinError, match="default: expected 2 arguments, got 1"):
            default("x")


class TestStrings:
    def test_expand(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", "/home/luke")
        assert evaluate('expand("~/.config")') == "/home/luke/.config"

    def test_has_substr(self) -> None:
        assert has_substr("archlinux", "arch") is True
        assert evaluate('hasSubstr("archlinux", "mac")') is False

    def test_has_substr_type_error(self) -> None:
        with pytest.raises(BuiltinError, match="hasSubstr: expected string, got int"):
            has_substr("a", 1)


class TestJoin:
    def test_joins_formatted_elements(self) -> None:
        assert join(["a", 1, True, None], ", ") == "a, 1, true, nil"

    def test_in_expression(self) -> None:
        ctx = Context(vars={"pkgs": ["git", "zsh"]})
        assert evaluate('join(vars.pkgs, " ")', ctx) == "git zsh"

    def test_requires_list(self) -> None:
        with pytest.raises(ExpressionEvaluationError, match="join: expected list, got string"):
            evaluate('join(vars.pkgs, " ")', Context(vars={"pkgs": "git"}))

    def test_requires_string_separator(self) -> None:
        with pytest.raises(BuiltinError, match="expected string separator, got int"):
            join(["a"], 1)


class TestFormatValue:
    @pytest.mark.parametrize(
        ("value", "text"),
        [
            (True, "true"),
            (None, "nil"),
            (3, "3"),
            (2.5, "2.5"),
            (2.0, "2"),
            (-3.0, "-3"),
            (0.1 + 0.2, "0.30000000000000004"),
            (123456.0, "123456"),
            (1e6, "1e+06"),
            (1.5e-5, "1.5e-05"),
            (float("inf"), "+Inf"),
            (["a", [1, 2]], "[a [1 2]]"),
            ({"b": 2, "a": 1}, "map[a:1 b:2]"),
        ],
    )
    def test_format(self, value: object, text: str) -> None:
        assert format_value(value) == text
