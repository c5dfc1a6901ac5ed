"""Variable collection: environment, persisted values, then prompts.

Every declared variable is resolved in order:

1. a non-empty process environment variable with the same name
2. a value persisted by an earlier run
3. a prompt, falling back to the declared default on an empty answer

Prompted values are persisted so later runs do not ask again.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import click
import yaml

from booster.config import VariableDef
from booster.exceptions import ConfigError
from booster.logging import get_logger

__all__ = [
    "ClickPromptCollector",
    "Definition",
    "FileStore",
    "PromptCollector",
    "VariableResolver",
    "definitions_from_config",
    "parse_var_overrides",
]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Definition:
    """A declared variable.

    Attributes:
        name: Variable name, also the environment variable consulted first.
        prompt: Text shown when asking the user.
        default: Used when the user gives an empty answer.
    """

    name: str
    prompt: str = ""
    default: str = ""


def definitions_from_config(variables: Mapping[str, VariableDef]) -> list[Definition]:
    """Definitions sorted by name, for a stable prompt order."""
    return [
        Definition(name=name, prompt=declared.prompt, default=declared.default)
        for name, declared in sorted(variables.items())
    ]


class FileStore:
    """YAML file holding persisted variable values."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, str]:
        """Read stored values; a missing file yields an empty dict.

        Raises:
            ConfigError: If the file cannot be read or is not a mapping.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise ConfigError(f"read values: {e}", value=str(self.path)) from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"parse values: {e}", value=str(self.path)) from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError("parse values: expected a mapping", value=str(self.path))
        return {str(key): "" if value is None else str(value) for key, value in data.items()}

    def save(self, values: Mapping[str, str]) -> None:
        """Write values, creating parent directories.

        Raises:
            ConfigError: If the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                yaml.safe_dump(dict(values), default_flow_style=False, sort_keys=True),
                encoding="utf-8",
            )
        except OSError as e:
            raise ConfigError(f"write values: {e}", value=str(self.path)) from e


class PromptCollector(Protocol):
    """Asks the user for every definition that is still missing."""

    def collect(self, definitions: Sequence[Definition]) -> dict[str, str]: ...


class ClickPromptCollector:
    """Prompt on the terminal with ``click.prompt``, showing defaults."""

    def collect(self, definitions: Sequence[Definition]) -> dict[str, str]:
        values: dict[str, str] = {}
        for definition in definitions:
            values[definition.name] = click.prompt(
                definition.prompt or definition.name,
                default=definition.default,
                show_default=bool(definition.default),
                err=True,
            )
        return values


class VariableResolver:
    """Resolve declared variables.

    Args:
        store: Persisted values.
        collector: Prompt collector. Without one, missing variables take
            their declared default and nothing is persisted.
        env_lookup: Environment lookup; defaults to ``os.environ.get``.
    """

    def __init__(
        self,
        store: FileStore,
        collector: PromptCollector | None = None,
        env_lookup: Callable[[str], str | None] | None = None,
    ) -> None:
        self._store = store
        self._collector = collector
        self._env_lookup = env_lookup or os.environ.get

    def resolve(self, definitions: Sequence[Definition]) -> dict[str, str]:
        """Resolve every definition.

        Raises:
            ConfigError: If the store cannot be read or written.
        """
        if not definitions:
            return {}

        stored = self._store.load()
        result: dict[str, str] = {}
        missing: list[Definition] = []
        for definition in definitions:
            from_env = self._env_lookup(definition.name)
            if from_env:
                result[definition.name] = from_env
            elif definition.name in stored:
                result[definition.name] = stored[definition.name]
            else:
                missing.append(definition)

        if not missing:
            return result

        if self._collector is None:
            for definition in missing:
                result[definition.name] = definition.default
            logger.debug("variables_defaulted", names=[d.name for d in missing])
            return result

        prompted = self._collector.collect(missing)
        for definition in missing:
            value = prompted.get(definition.name, "") or definition.default
            result[definition.name] = value
            stored[definition.name] = value
        self._store.save(stored)
        logger.debug("variables_prompted", names=[d.name for d in missing])
        return result


def parse_var_overrides(pairs: Sequence[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings from the command line.

    Raises:
        ValueError: If a pair has no ``=`` or an empty key.

    Examples:
        >>> parse_var_overrides(["editor=vim", "url=a=b"])
        {'editor': 'vim', 'url': 'a=b'}
    """
    overrides: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"invalid variable {pair!r}, expected KEY=VALUE")
        overrides[key.strip()] = value
    return overrides
