"""Bootstrap configuration file loading.

A bootstrap file declares the profiles, the variables to collect and the
ordered task list:

```yaml
version: "1"
profiles: [personal, work]
variables:
  editor: {prompt: "Editor?", default: "nvim"}
tasks:
  - action: dir.create
    when: {os: [arch, darwin], profile: personal}
    args: ["~/src"]
```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from booster.constants import CONFIG_VERSION
from booster.exceptions import ConfigError
from booster.logging import get_logger
from booster.utils.paths import expand_home

__all__ = [
    "BootstrapConfig",
    "TaskEntry",
    "VariableDef",
    "When",
    "load_bootstrap",
]

logger = get_logger(__name__)


def _string_or_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


class When(BaseModel):
    """Declarative condition on a task entry.

    Each field accepts a single string or a list of strings.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    os: list[str] = Field(default_factory=list)
    profile: list[str] = Field(default_factory=list)

    @field_validator("os", "profile", mode="before")
    @classmethod
    def coerce_string(cls, v: Any) -> Any:
        return _string_or_list(v)


class TaskEntry(BaseModel):
    """One entry of the ``tasks`` list. ``args`` is opaque to the loader."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    action: str = ""
    args: Any = None
    when: When | None = None


class VariableDef(BaseModel):
    """A variable collected before tasks run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    prompt: str = ""
    default: str = ""


class BootstrapConfig(BaseModel):
    """Root of a bootstrap file."""

    model_config = ConfigDict(extra="forbid")

    version: str
    profiles: list[str] = Field(default_factory=list)
    variables: dict[str, VariableDef] = Field(default_factory=dict)
    tasks: list[TaskEntry] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> Any:
        # YAML reads an unquoted `version: 1` as an int
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("profiles", mode="before")
    @classmethod
    def coerce_profiles(cls, v: Any) -> Any:
        return _string_or_list(v)

    @field_validator("variables", "tasks", mode="before")
    @classmethod
    def coerce_null(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return {} if info.field_name == "variables" else []
        return v


def load_bootstrap(path: Path | str) -> BootstrapConfig:
    """Read, parse and validate a bootstrap file.

    Args:
        path: Path to the YAML file; a leading ``~`` is expanded.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, fails
            validation, has a missing or unsupported version, or contains a
            task without an action.
    """
    config_path = Path(expand_home(str(path)))
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"read config: {e}", value=str(config_path)) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"parse config: {e}", value=str(config_path)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("parse config: top level must be a mapping")

    version = data.get("version")
    if version is None or version == "":
        raise ConfigError("config missing version field", field="version")

    try:
        config = BootstrapConfig.model_validate(data)
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            f"Invalid configuration: {field}: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e

    if config.version != CONFIG_VERSION:
        raise ConfigError(
            f"unsupported config version: {config.version}",
            field="version",
            value=config.version,
        )

    for position, task in enumerate(config.tasks, start=1):
        if not task.action:
            raise ConfigError(
                f"task {position}: action cannot be empty",
                field=f"tasks.{position - 1}.action",
            )

    logger.debug(
        "config_loaded",
        path=str(config_path),
        tasks=len(config.tasks),
        profiles=config.profiles,
        variables=sorted(config.variables),
    )
    return config
