"""Unit tests for the mise.use task."""

from __future__ import annotations

import pytest

from booster.exceptions import TaskArgumentError
from booster.task import CancelToken, MiseUse, TaskStatus, ToolSpec, new_mise_use
from booster.task.mise import parse_tool_spec
from tests.fixtures.runners import FakeRunner

GO = ToolSpec("go", "1.22.0")
NODE = ToolSpec("node", "20.10.0")


@pytest.fixture
def mise(fake_runner: FakeRunner) -> FakeRunner:
    fake_runner.install("mise", "/usr/bin/mise")
    return fake_runner


def test_installs_tools_at_other_versions(mise: FakeRunner) -> None:
    mise.respond(("mise", "current", "go"), stdout="1.22.0\n")
    mise.respond(("mise", "current", "node"), stdout="18.0.0\n")
    mise.respond(("mise", "use", "--global", "node@20.10.0"), stdout="node 20.10.0 installed")

    result = MiseUse([GO, NODE], mise).run()

    assert result.status is TaskStatus.DONE
    assert result.message == "configured 1 tool(s)"
    assert result.output == "node 20.10.0 installed"
    assert ("mise", "use", "--global", "go@1.22.0") not in mise.calls


def test_matching_versions_are_skipped(mise: FakeRunner) -> None:
    mise.respond(("mise", "current", "go"), stdout="1.22.0\n")

    result = MiseUse([GO], mise).run()

    assert result.status is TaskStatus.SKIPPED
    assert result.message == "all tools at correct versions"


def test_unset_tool_is_installed(mise: FakeRunner) -> None:
    mise.respond(("mise", "use", "--global", "go@1.22.0"))

    assert MiseUse([GO], mise).run().status is TaskStatus.DONE


def test_missing_mise_fails(fake_runner: FakeRunner) -> None:
    result = MiseUse([GO], fake_runner).run()

    assert result.status is TaskStatus.FAILED
    assert result.message == "mise not installed"
    assert fake_runner.calls == []


def test_failed_use_reports_tool(mise: FakeRunner) -> None:
    result = MiseUse([GO], mise).run()

    assert result.status is TaskStatus.FAILED
    assert str(result.error).startswith("mise use go@1.22.0:")


def test_cancel_stops_before_next_tool(mise: FakeRunner) -> None:
    token = CancelToken()
    token.cancel()

    result = MiseUse([GO], mise).run(token)

    assert result.status is TaskStatus.FAILED
    assert not any(call[:2] == ("mise", "use") for call in mise.calls)


def test_does_not_need_sudo(fake_runner: FakeRunner) -> None:
    assert not MiseUse([GO], fake_runner).needs_sudo


@pytest.mark.parametrize(
    ("tools", "name"),
    [
        ([GO], "mise use: go@1.22.0"),
        ([GO, NODE, GO, NODE], "mise use: 4 tools"),
        ([], "mise use: (none)"),
    ],
)
def test_name(fake_runner: FakeRunner, tools: list[ToolSpec], name: str) -> None:
    assert MiseUse(tools, fake_runner).name == name


class TestToolSpec:
    def test_parse(self) -> None:
        assert parse_tool_spec("python@3.12") == ToolSpec("python", "3.12")
        assert str(parse_tool_spec("python@3.12")) == "python@3.12"

    @pytest.mark.parametrize("text", ["go", "@1.22", "go@"])
    def test_rejects_malformed(self, text: str) -> None:
        with pytest.raises(ValueError, match="expected format tool@version"):
            parse_tool_spec(text)


class TestFactory:
    def test_one_task_for_all_tools(self, fake_runner: FakeRunner) -> None:
        (task,) = new_mise_use(fake_runner)(["go@1.22.0", "node@20.10.0"])

        assert isinstance(task, MiseUse)
        assert task.tools == [GO, NODE]

    def test_empty_list_builds_nothing(self, fake_runner: FakeRunner) -> None:
        assert new_mise_use(fake_runner)([]) == []

    @pytest.mark.parametrize(
        ("args", "message"),
        [
            ("go@1", "args must be a list of tool@version specs"),
            ([1], "arg 1: must be a string"),
            (["go@1", "node"], "arg 2: invalid tool spec 'node'"),
        ],
    )
    def test_rejects_bad_args(
        self, fake_runner: FakeRunner, args: object, message: str
    ) -> None:
        with pytest.raises(TaskArgumentError, match=message):
            new_mise_use(fake_runner)(args)
