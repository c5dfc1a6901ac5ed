"""``set.darwin.defaults``: apply macOS ``defaults`` from a separate YAML file.

The task entry names the file; relative paths are resolved against the
directory holding the bootstrap file:

```yaml
- action: set.darwin.defaults
  args: {file: macos-defaults.yaml}
```

```yaml
# macos-defaults.yaml
defaults:
  - {domain: com.apple.dock, key: autohide, type: bool, value: true}
  - {domain: NSGlobalDomain, key: KeyRepeat, type: int, value: 2}
```
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from booster.exceptions import TaskArgumentError
from booster.expr.types import format_value
from booster.runners import CommandRunner
from booster.task.base import CancelToken, Task, TaskFactory
from booster.task.models import Result
from booster.utils.paths import expand_path

__all__ = [
    "DarwinDefaults",
    "DefaultsEntry",
    "DefaultsFile",
    "load_defaults_file",
    "new_darwin_defaults",
]

DefaultsType = Literal["bool", "int", "float", "string"]


class DefaultsEntry(BaseModel):
    """One ``defaults write`` setting."""

    model_config = ConfigDict(frozen=True)

    domain: str = Field(min_length=1)
    key: str = Field(min_length=1)
    type: DefaultsType
    value: bool | int | float | str


class DefaultsFile(BaseModel):
    defaults: list[DefaultsEntry] = Field(default_factory=list)


def _write_argument(entry: DefaultsEntry) -> str:
    if entry.type == "bool" and not isinstance(entry.value, str):
        return "true" if entry.value else "false"
    return format_value(entry.value)


def _normalize(value_type: str, value: Any) -> str:
    """Comparable form of a value; booleans collapse to ``1``/``0``."""
    if value_type != "bool":
        return format_value(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1"):
            return "1"
        if lowered in ("false", "0"):
            return "0"
        return lowered
    return "1" if value else "0"


class DarwinDefaults:
    """Write each entry whose current value differs from the desired one.

    SKIPPED off macOS, and when every entry already holds its value.
    """

    def __init__(
        self, entries: list[DefaultsEntry], runner: CommandRunner, os_name: str
    ) -> None:
        self.entries = entries
        self.os_name = os_name
        self._runner = runner

    @property
    def name(self) -> str:
        if not self.entries:
            return "set macOS defaults: (none)"
        if len(self.entries) == 1:
            entry = self.entries[0]
            return f"set macOS defaults: {entry.domain} {entry.key}"
        return f"set macOS defaults: {len(self.entries)} entries"

    @property
    def needs_sudo(self) -> bool:
        return False

    def read(self, entry: DefaultsEntry) -> str:
        result = self._runner.run(["defaults", "read", entry.domain, entry.key])
        return result.stdout.strip() if result.success else ""

    def run(self, token: CancelToken | None = None) -> Result:
        if self.os_name != "darwin":
            return Result.skipped("not macOS")
        if not self.entries:
            return Result.skipped("no defaults to set")

        changed = 0
        already_set = 0
        outputs: list[str] = []
        for entry in self.entries:
            if token is not None and token.cancelled:
                return Result.failed(
                    f"cancelled before {entry.domain} {entry.key}",
                    output="\n".join(outputs),
                )
            current = self.read(entry)
            if current and _normalize(entry.type, current) == _normalize(
                entry.type, entry.value
            ):
                already_set += 1
                continue

            result = self._runner.run(
                [
                    "defaults",
                    "write",
                    entry.domain,
                    entry.key,
                    f"-{entry.type}",
                    _write_argument(entry),
                ]
            )
            if result.output:
                outputs.append(result.output)
            if not result.success:
                return Result.failed(
                    RuntimeError(
                        f"write {entry.domain} {entry.key}: "
                        f"exit status {result.returncode}"
                    ),
                    output="\n".join(outputs),
                )
            changed += 1

        output = "\n".join(outputs)
        if not changed:
            return Result.skipped(
                f"all {already_set} settings already configured", output=output
            )
        message = f"configured {changed} settings"
        if already_set:
            message += f", {already_set} already set"
        return Result.done(message, output=output)

    def __repr__(self) -> str:
        return f"DarwinDefaults({len(self.entries)} entries)"


def load_defaults_file(path: Path) -> list[DefaultsEntry]:
    """Read and validate a defaults file.

    Raises:
        TaskArgumentError: If the file cannot be read or parsed, or an entry
            is missing a field or has an unsupported type.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise TaskArgumentError(f"load defaults file: read file: {e}") from e
    except yaml.YAMLError as e:
        raise TaskArgumentError(f"load defaults file: parse YAML: {e}") from e

    if data is None:
        return []
    if not isinstance(data, Mapping):
        raise TaskArgumentError("load defaults file: top level must be a mapping")

    try:
        return DefaultsFile.model_validate(data).defaults
    except ValidationError as e:
        first_error = e.errors()[0]
        loc = first_error["loc"]
        if len(loc) >= 3 and loc[0] == "defaults" and isinstance(loc[1], int):
            where = f"entry {loc[1] + 1}"
            field = loc[2]
            if first_error["type"] == "missing":
                raise TaskArgumentError(f"{where}: missing '{field}'") from e
            raise TaskArgumentError(f"{where}: {field}: {first_error['msg']}") from e
        field = ".".join(str(part) for part in loc)
        raise TaskArgumentError(
            f"load defaults file: {field}: {first_error['msg']}"
        ) from e


def new_darwin_defaults(
    runner: CommandRunner, os_name: str, config_dir: Path | None = None
) -> TaskFactory:
    """Factory loading ``args.file`` at build time into one DarwinDefaults."""

    def factory(args: Any) -> list[Task]:
        if not isinstance(args, Mapping):
            raise TaskArgumentError("args must be a map with 'file' key")
        if "file" not in args:
            raise TaskArgumentError("missing required 'file' argument")
        file = args["file"]
        if not isinstance(file, str):
            raise TaskArgumentError("'file' must be a string")

        path = Path(expand_path(file))
        if not path.is_absolute() and config_dir is not None:
            path = Path(expand_path(str(config_dir / path)))
        return [DarwinDefaults(load_defaults_file(path), runner, os_name)]

    return factory
