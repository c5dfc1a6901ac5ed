"""Tasks: the result model, the task contract, conditional gating and the builder.

Example:
    ```python
    from booster.condition import ConditionContext
    from booster.task import default_builder

    builder = default_builder(ConditionContext(os="arch"))
    for task in builder.build(config.tasks):
        result = task.run()
    ```
"""

from __future__ import annotations

from booster.task.base import CancelToken, Task, TaskFactory, any_needs_sudo
from booster.task.builder import (
    BuildMode,
    Gated,
    TaskBuilder,
    Unconditional,
    default_builder,
)
from booster.task.conditional import ConditionalTask
from booster.task.darwin_defaults import DarwinDefaults, DefaultsEntry, new_darwin_defaults
from booster.task.dir import DirCreate, new_dir_create
from booster.task.git_config import (
    ClickPrompter,
    GitConfig,
    GitConfigItem,
    Prompter,
    new_git_config,
)
from booster.task.mise import MiseUse, ToolSpec, new_mise_use
from booster.task.models import Result, TaskStatus
from booster.task.pkg_install import (
    HomebrewManager,
    PackageManager,
    PacmanManager,
    PkgInstall,
    new_pkg_install,
)
from booster.task.pkg_manager import PkgManagerInstall, new_pkg_manager_install
from booster.task.symlink import SymlinkCreate, new_symlink_create
from booster.task.template import TemplateRender, new_template_render

__all__ = [
    "BuildMode",
    "CancelToken",
    "ClickPrompter",
    "ConditionalTask",
    "DarwinDefaults",
    "DefaultsEntry",
    "DirCreate",
    "Gated",
    "GitConfig",
    "GitConfigItem",
    "HomebrewManager",
    "MiseUse",
    "PackageManager",
    "PacmanManager",
    "PkgInstall",
    "PkgManagerInstall",
    "Prompter",
    "Result",
    "SymlinkCreate",
    "Task",
    "TaskBuilder",
    "TaskFactory",
    "TaskStatus",
    "TemplateRender",
    "ToolSpec",
    "Unconditional",
    "any_needs_sudo",
    "default_builder",
    "new_darwin_defaults",
    "new_dir_create",
    "new_git_config",
    "new_mise_use",
    "new_pkg_install",
    "new_pkg_manager_install",
    "new_symlink_create",
    "new_template_render",
]
