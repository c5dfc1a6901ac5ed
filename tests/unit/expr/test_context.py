"""Unit tests for the expression evaluation Context."""

from __future__ import annotations

import pytest

from booster.expr import Context, TaskResult


class TestFromEnvironment:
    def test_snapshots_environment(self) -> None:
        ctx = Context.from_environment({"HOME": "/home/luke", "EDITOR": "nvim"})
        assert ctx.home == "/home/luke"
        assert ctx.env == {"HOME": "/home/luke", "EDITOR": "nvim"}
        assert ctx.vars == {}
        assert ctx.tasks == {}
        assert ctx.profile == ""

    def test_missing_home_is_empty(self) -> None:
        assert Context.from_environment({}).home == ""

    def test_os_and_arch_detected(self) -> None:
        ctx = Context.from_environment({})
        assert ctx.os
        assert ctx.arch

    def test_env_is_a_copy(self) -> None:
        environ = {"A": "1"}
        ctx = Context.from_environment(environ)
        environ["A"] = "2"
        assert ctx.env["A"] == "1"

    def test_defaults_to_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOOSTER_TEST_MARKER", "yes")
        assert Context.from_environment().env["BOOSTER_TEST_MARKER"] == "yes"


class TestDerive:
    def test_with_profile_leaves_parent_untouched(self) -> None:
        parent = Context(os="linux", vars={"a": 1})
        child = parent.with_profile("work")
        assert child.profile == "work"
        assert child.os == "linux"
        assert parent.profile == ""

    def test_with_vars_replaces_vars(self) -> None:
        parent = Context(vars={"a": 1})
        child = parent.with_vars({"b": 2})
        assert child.vars == {"b": 2}
        assert parent.vars == {"a": 1}

    def test_derived_mappings_are_not_shared(self) -> None:
        parent = Context(env={"X": "1"}, vars={"a": 1})
        child = parent.with_profile("p")
        child.env["X"] = "changed"
        child.vars["a"] = 99
        child.set_task_result("t", "out", "done")
        assert parent.env == {"X": "1"}
        assert parent.vars == {"a": 1}
        assert parent.tasks == {}

    def test_with_vars_copies_argument(self) -> None:
        variables = {"a": 1}
        child = Context().with_vars(variables)
        variables["a"] = 2
        assert child.vars == {"a": 1}


class TestSetTaskResult:
    def test_mutates_in_place(self) -> None:
        ctx = Context()
        ctx.set_task_result("clone dotfiles", "Cloning...", "done")
        assert ctx.tasks["clone dotfiles"] == TaskResult(output="Cloning...", status="done")

    def test_later_result_overwrites(self) -> None:
        ctx = Context()
        ctx.set_task_result("t", "", "failed")
        ctx.set_task_result("t", "ok", "done")
        assert ctx.tasks["t"].status == "done"
