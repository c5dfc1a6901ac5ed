"""Unit tests for the git.config task."""

from __future__ import annotations

import click
import pytest

from booster.exceptions import TaskArgumentError
from booster.task import (
    CancelToken,
    GitConfig,
    GitConfigItem,
    TaskStatus,
    new_git_config,
)
from booster.task.git_config import parse_git_config_args
from tests.fixtures.runners import FakeRunner

GET_NAME = ("git", "config", "--global", "--get", "user.name")


class ScriptedPrompter:
    def __init__(self, *answers: str) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []

    def prompt(self, text: str) -> str:
        self.prompts.append(text)
        if not self.answers:
            raise click.Abort()
        return self.answers.pop(0)


def test_sets_explicit_value(fake_runner: FakeRunner) -> None:
    fake_runner.respond(("git", "config", "--global", "user.name", "Luke"))
    task = GitConfig([GitConfigItem("user.name", value="Luke")], fake_runner)

    result = task.run()

    assert result.status is TaskStatus.DONE
    assert result.message == "configured 1 keys"
    assert fake_runner.calls[-1] == ("git", "config", "--global", "user.name", "Luke")


def test_matching_value_is_skipped(fake_runner: FakeRunner) -> None:
    fake_runner.respond(GET_NAME, stdout="Luke\n")
    task = GitConfig([GitConfigItem("user.name", value="Luke")], fake_runner)

    result = task.run()

    assert result.status is TaskStatus.SKIPPED
    assert result.message == "all keys already configured"
    assert fake_runner.calls == [GET_NAME]


def test_prompts_for_unset_key(fake_runner: FakeRunner) -> None:
    fake_runner.respond(GET_NAME, stdout="Luke\n")
    fake_runner.respond(("git", "config", "--global", "user.email", "l@x.dev"))
    prompter = ScriptedPrompter("l@x.dev")
    task = GitConfig(
        [
            GitConfigItem("user.name", prompt="Name?"),
            GitConfigItem("user.email", prompt="Email?"),
        ],
        fake_runner,
        prompter,
    )

    result = task.run()

    assert result.status is TaskStatus.DONE
    assert result.message == "configured 1 keys (skipped 1)"
    assert prompter.prompts == ["Email?"]


def test_unset_key_without_prompter_fails(fake_runner: FakeRunner) -> None:
    task = GitConfig([GitConfigItem("user.email", prompt="Email?")], fake_runner)

    result = task.run()

    assert result.status is TaskStatus.FAILED
    assert str(result.error) == "cannot prompt for user.email: no prompter configured"


def test_aborted_prompt_fails(fake_runner: FakeRunner) -> None:
    task = GitConfig(
        [GitConfigItem("user.email", prompt="Email?")], fake_runner, ScriptedPrompter()
    )

    result = task.run()

    assert result.status is TaskStatus.FAILED
    assert "aborted" in str(result.error)


def test_failed_set_reports_exit_status(fake_runner: FakeRunner) -> None:
    task = GitConfig([GitConfigItem("user.name", value="Luke")], fake_runner)

    result = task.run()

    assert result.status is TaskStatus.FAILED
    assert str(result.error) == "set user.name: exit status 1"


def test_cancelled_token_stops_before_any_command(fake_runner: FakeRunner) -> None:
    token = CancelToken()
    token.cancel()
    task = GitConfig([GitConfigItem("user.name", value="Luke")], fake_runner)

    result = task.run(token)

    assert result.status is TaskStatus.FAILED
    assert fake_runner.calls == []


def test_name_lists_keys(fake_runner: FakeRunner) -> None:
    task = GitConfig(
        [GitConfigItem("user.name"), GitConfigItem("user.email")], fake_runner
    )
    assert task.name == "configure git: user.name, user.email"
    assert GitConfig([], fake_runner).name == "configure git: (none)"


class TestParsing:
    def test_parses_items(self) -> None:
        items = parse_git_config_args(
            [{"key": "user.name", "value": "Luke"}, {"key": "user.email", "prompt": "?"}]
        )
        assert items == [
            GitConfigItem("user.name", value="Luke"),
            GitConfigItem("user.email", prompt="?"),
        ]

    def test_key_required(self) -> None:
        with pytest.raises(TaskArgumentError, match="arg 1: 'key' is required"):
            parse_git_config_args([{"value": "x"}])

    def test_factory_yields_single_task(self, fake_runner: FakeRunner) -> None:
        factory = new_git_config(fake_runner)
        tasks = factory([{"key": "a"}, {"key": "b"}])
        assert len(tasks) == 1
        assert factory([]) == []
