"""``template.render``: render Jinja2 templates into place.

Templates see the resolved variables and the detected system:

```jinja
[user]
    email = {{ vars.email }}
{% if system.os == "darwin" %}
[credential]
    helper = osxkeychain
{% endif %}
```
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

from booster.constants import DIR_MODE
from booster.task.args import parse_source_target_args
from booster.task.base import CancelToken, Task, TaskFactory
from booster.task.models import Result
from booster.utils.paths import expand_path

__all__ = ["TemplateContext", "TemplateRender", "new_template_render"]


@dataclass(frozen=True, slots=True)
class TemplateSystem:
    os: str = ""
    profile: str = ""


@dataclass(frozen=True, slots=True)
class TemplateContext:
    """Data passed to every template.

    Attributes:
        vars: Resolved configuration variables.
        system: Detected OS and selected profile.
    """

    vars: Mapping[str, Any] = field(default_factory=dict)
    system: TemplateSystem = TemplateSystem()


def _environment() -> Environment:
    return Environment(
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


class TemplateRender:
    """Render ``source`` and write it to ``target``.

    SKIPPED when the target already holds the rendered text. Parent
    directories of the target are created as needed. Undefined template
    names fail the task.
    """

    def __init__(self, source: str, target: str, context: TemplateContext) -> None:
        self.source = source
        self.target = target
        self.context = context

    @property
    def name(self) -> str:
        return f"render {Path(self.source).name} → {Path(self.target).name}"

    @property
    def needs_sudo(self) -> bool:
        return False

    def render(self) -> str:
        """Render the source template.

        Raises:
            OSError: If the template cannot be read.
            TemplateError: If the template cannot be parsed or rendered.
        """
        text = Path(expand_path(self.source)).read_text(encoding="utf-8")
        template = _environment().from_string(text)
        return template.render(vars=dict(self.context.vars), system=self.context.system)

    def run(self, token: CancelToken | None = None) -> Result:
        try:
            rendered = self.render()
        except OSError as e:
            return Result.failed(RuntimeError(f"read template: {e}"))
        except TemplateError as e:
            return Result.failed(RuntimeError(f"render template: {e}"))

        target = Path(expand_path(self.target))
        if _holds(target, rendered):
            return Result.skipped("already up to date")

        try:
            target.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            target.write_text(rendered, encoding="utf-8")
        except OSError as e:
            return Result.failed(e)
        return Result.done("rendered")

    def __repr__(self) -> str:
        return f"TemplateRender({self.source!r}, {self.target!r})"


def _holds(target: Path, text: str) -> bool:
    try:
        return target.read_text(encoding="utf-8") == text
    except (OSError, UnicodeDecodeError):
        return False


def new_template_render(
    variables: Mapping[str, Any], os_name: str, profile: str
) -> TaskFactory:
    """Factory producing one TemplateRender per ``{source, target}`` pair.

    All tasks share the context captured here.
    """
    context = TemplateContext(
        vars=dict(variables), system=TemplateSystem(os=os_name, profile=profile)
    )

    def factory(args: Any) -> list[Task]:
        return [
            TemplateRender(pair.source, pair.target, context)
            for pair in parse_source_target_args(args)
        ]

    return factory
