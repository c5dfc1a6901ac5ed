"""``mise.use``: pin toolchain versions globally with mise."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from booster.constants import INSTALL_TIMEOUT
from booster.exceptions import CommandError, TaskArgumentError
from booster.runners import CommandRunner
from booster.task.args import require_list
from booster.task.base import CancelToken, Task, TaskFactory
from booster.task.models import Result

__all__ = ["MiseUse", "ToolSpec", "new_mise_use", "parse_tool_spec"]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """A tool and the version to pin, written ``tool@version``."""

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


def parse_tool_spec(text: str) -> ToolSpec:
    """Parse ``tool@version``.

    Raises:
        ValueError: If either side of the first ``@`` is empty.
    """
    name, sep, version = text.partition("@")
    if not sep or not name or not version:
        raise ValueError(f"invalid tool spec {text!r}: expected format tool@version")
    return ToolSpec(name=name, version=version)


class MiseUse:
    """Run ``mise use --global`` for every tool whose current version differs.

    FAILED when mise is not on PATH; SKIPPED when every tool already reports
    the requested version through ``mise current``.
    """

    def __init__(self, tools: list[ToolSpec], runner: CommandRunner) -> None:
        self.tools = tools
        self._runner = runner

    @property
    def name(self) -> str:
        if not self.tools:
            return "mise use: (none)"
        if len(self.tools) <= 3:
            return "mise use: " + ", ".join(str(tool) for tool in self.tools)
        return f"mise use: {len(self.tools)} tools"

    @property
    def needs_sudo(self) -> bool:
        return False

    def current_version(self, tool: str) -> str:
        result = self._runner.run(["mise", "current", tool])
        return result.stdout.strip() if result.success else ""

    def run(self, token: CancelToken | None = None) -> Result:
        if self._runner.which("mise") is None:
            return Result.failed(
                RuntimeError(
                    "mise not found in PATH; install mise first (e.g., via pkg.install)"
                ),
                message="mise not installed",
            )

        missing = [t for t in self.tools if self.current_version(t.name) != t.version]
        if not missing:
            return Result.skipped("all tools at correct versions")

        outputs: list[str] = []
        for tool in missing:
            if token is not None and token.cancelled:
                return Result.failed(f"cancelled before {tool}", output="\n".join(outputs))
            try:
                result = self._runner.check(
                    ["mise", "use", "--global", str(tool)], timeout=INSTALL_TIMEOUT
                )
            except CommandError as e:
                if e.output:
                    outputs.append(e.output)
                return Result.failed(
                    RuntimeError(f"mise use {tool}: {e.message}"),
                    output="\n".join(outputs),
                )
            if result.output:
                outputs.append(result.output)

        return Result.done(f"configured {len(missing)} tool(s)", output="\n".join(outputs))

    def __repr__(self) -> str:
        return f"MiseUse({[str(tool) for tool in self.tools]!r})"


def new_mise_use(runner: CommandRunner) -> TaskFactory:
    """Factory producing one MiseUse task for all listed ``tool@version`` specs."""

    def factory(args: Any) -> list[Task]:
        items = require_list(args, "args must be a list of tool@version specs")
        tools: list[ToolSpec] = []
        for position, item in enumerate(items, start=1):
            if not isinstance(item, str):
                raise TaskArgumentError(f"arg {position}: must be a string")
            try:
                tools.append(parse_tool_spec(item))
            except ValueError as e:
                raise TaskArgumentError(f"arg {position}: {e}") from e
        if not tools:
            return []
        return [MiseUse(tools, runner)]

    return factory
