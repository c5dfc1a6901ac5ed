"""``git.config``: set global git configuration values."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import click

from booster.exceptions import TaskArgumentError
from booster.runners import CommandRunner
from booster.task.args import require_list
from booster.task.base import CancelToken, Task, TaskFactory
from booster.task.models import Result

__all__ = [
    "ClickPrompter",
    "GitConfig",
    "GitConfigItem",
    "Prompter",
    "new_git_config",
    "parse_git_config_args",
]


class Prompter(Protocol):
    """Asks the user for a single value."""

    def prompt(self, text: str) -> str: ...


class ClickPrompter:
    """Prompter reading from the terminal via ``click.prompt``."""

    def prompt(self, text: str) -> str:
        return click.prompt(text, err=True)


@dataclass(frozen=True, slots=True)
class GitConfigItem:
    """One key to configure.

    Attributes:
        key: Git config key (``user.name``).
        value: Explicit value; empty means "keep existing or prompt".
        prompt: Prompt shown when the key is unset and no value is given.
    """

    key: str
    value: str = ""
    prompt: str = ""


class GitConfig:
    """Set ``git config --global`` keys idempotently.

    For each item:
    - explicit value equal to the current value: left alone
    - explicit value otherwise: set
    - no value and key already set: left alone
    - no value, key unset and a prompt given: prompt, then set
    - no value, key unset and no prompt: left alone
    """

    def __init__(
        self,
        items: list[GitConfigItem],
        runner: CommandRunner,
        prompter: Prompter | None = None,
    ) -> None:
        self.items = items
        self._runner = runner
        self._prompter = prompter

    @property
    def name(self) -> str:
        if not self.items:
            return "configure git: (none)"
        return "configure git: " + ", ".join(item.key for item in self.items)

    @property
    def needs_sudo(self) -> bool:
        return False

    def run(self, token: CancelToken | None = None) -> Result:
        if not self.items:
            return Result.skipped("no items to configure")

        configured: list[str] = []
        skipped: list[str] = []
        for item in self.items:
            if token is not None and token.cancelled:
                return Result.failed(f"cancelled before {item.key}")

            current = self._runner.run(["git", "config", "--global", "--get", item.key])
            existing = current.stdout.strip() if current.success else ""

            value = item.value
            if not value:
                if existing or not item.prompt:
                    skipped.append(item.key)
                    continue
                if self._prompter is None:
                    return Result.failed(
                        f"cannot prompt for {item.key}: no prompter configured"
                    )
                try:
                    value = self._prompter.prompt(item.prompt)
                except (click.Abort, EOFError):
                    return Result.failed(RuntimeError(f"prompt for {item.key}: aborted"))
            elif existing == value:
                skipped.append(item.key)
                continue

            result = self._runner.run(["git", "config", "--global", item.key, value])
            if not result.success:
                return Result.failed(
                    RuntimeError(f"set {item.key}: exit status {result.returncode}"),
                    output=result.output,
                )
            configured.append(item.key)

        if not configured:
            return Result.skipped("all keys already configured")
        message = f"configured {len(configured)} keys"
        if skipped:
            message += f" (skipped {len(skipped)})"
        return Result.done(message)

    def __repr__(self) -> str:
        return f"GitConfig({[item.key for item in self.items]!r})"


def parse_git_config_args(args: Any) -> list[GitConfigItem]:
    """Parse ``[{key, value?, prompt?}, ...]``."""
    entries = require_list(args, "args must be a list")
    items: list[GitConfigItem] = []
    for position, entry in enumerate(entries, start=1):
        if not isinstance(entry, Mapping):
            raise TaskArgumentError(f"arg {position}: must be a map with 'key' field")
        key = entry.get("key")
        if not isinstance(key, str) or not key:
            raise TaskArgumentError(
                f"arg {position}: 'key' is required and must be a string"
            )
        value = entry.get("value")
        prompt = entry.get("prompt")
        items.append(
            GitConfigItem(
                key=key,
                value=value if isinstance(value, str) else "",
                prompt=prompt if isinstance(prompt, str) else "",
            )
        )
    return items


def new_git_config(runner: CommandRunner, prompter: Prompter | None = None) -> TaskFactory:
    """Factory producing one GitConfig task for all listed keys."""

    def factory(args: Any) -> list[Task]:
        items = parse_git_config_args(args)
        if not items:
            return []
        return [GitConfig(items, runner, prompter)]

    return factory
