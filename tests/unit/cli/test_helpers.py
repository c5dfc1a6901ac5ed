"""Unit tests for the shared run preparation steps."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from booster.cli.context import CLIContext
from booster.cli.helpers import create_builder, prepare_run
from booster.expr import Context
from booster.settings import BoosterSettings
from booster.task import (
    ConditionalTask,
    DarwinDefaults,
    DirCreate,
    GitConfig,
    MiseUse,
    PkgInstall,
    Unconditional,
    any_needs_sudo,
)
from tests.fixtures.system import FixedDetector

WriteConfig = Callable[[str], Path]

CONFIG = """\
version: "1"
profiles: [personal, work]
variables:
  editor: {default: nvim}
  greeting: {default: "hi ${ profile }"}
tasks:
  - action: dir.create
    when: {os: darwin}
    args: ["~/mac"]
  - action: git.config
    args:
      - {key: core.editor, value: "${ vars.editor }"}
"""


@pytest.fixture
def cli_ctx(tmp_path: Path, write_config: WriteConfig) -> CLIContext:
    settings = BoosterSettings(values_path=tmp_path / "values.yaml")
    return CLIContext(settings=settings, config_path=write_config(CONFIG))


def test_gated_run(cli_ctx: CLIContext, fake_runner) -> None:
    prepared = prepare_run(
        cli_ctx,
        "work",
        {},
        interactive=False,
        runner=fake_runner,
        detector=FixedDetector("arch"),
    )

    assert prepared.condition_context.os == "arch"
    assert prepared.condition_context.profile == "work"
    assert prepared.context.profile == "work"
    assert prepared.context.vars == {"editor": "nvim", "greeting": "hi work"}
    mac, git = prepared.tasks
    assert isinstance(mac, ConditionalTask)
    assert isinstance(git, GitConfig)
    assert git.items[0].value == "nvim"


def test_overrides_win(cli_ctx: CLIContext, fake_runner) -> None:
    prepared = prepare_run(
        cli_ctx,
        "personal",
        {"editor": "vim"},
        interactive=False,
        runner=fake_runner,
        detector=FixedDetector("arch"),
    )

    assert prepared.context.vars["editor"] == "vim"


def test_ungated_build_without_profile(cli_ctx: CLIContext, fake_runner) -> None:
    prepared = prepare_run(
        cli_ctx,
        None,
        {},
        interactive=False,
        gated=False,
        require_profile=False,
        runner=fake_runner,
        detector=FixedDetector("arch"),
    )

    assert prepared.condition_context.profile == ""
    assert isinstance(prepared.tasks[0], DirCreate)

def test_builder_registers_every_action(fake_runner) -> None:
    builder = create_builder(Unconditional(), Context(), fake_runner, None, os_name="arch")

    assert sorted(builder.actions) == [
        "dir.create",
        "git.config",
        "mise.use",
        "pkg-manager.install",
        "pkg.install",
        "set.darwin.defaults",
        "symlink.create",
        "template.render",
    ]


def test_package_install_requires_sudo_on_arch(
    tmp_path: Path, write_config: WriteConfig, fake_runner
) -> None:
    config = write_config(
        'version: "1"\n'
        "tasks:\n"
        "  - action: pkg.install\n"
        "    args: [git, zsh]\n"
        "  - action: mise.use\n"
        '    args: ["go@1.22.0"]\n'
    )
    cli_ctx = CLIContext(
        settings=BoosterSettings(values_path=tmp_path / "values.yaml"),
        config_path=config,
    )

    prepared = prepare_run(
        cli_ctx,
        None,
        {},
        interactive=False,
        runner=fake_runner,
        detector=FixedDetector("arch"),
    )

    pkg, mise = prepared.tasks
    assert isinstance(pkg, PkgInstall)
    assert isinstance(mise, MiseUse)
    assert any_needs_sudo(prepared.tasks)


def test_defaults_file_resolves_next_to_config(
    tmp_path: Path, write_config: WriteConfig, fake_runner
) -> None:
    config = write_config(
        'version: "1"\n'
        "tasks:\n"
        "  - action: set.darwin.defaults\n"
        "    args: {file: macos.yaml}\n"
    )
    (config.parent / "macos.yaml").write_text(
        "defaults:\n  - {domain: d, key: k, type: string, value: v}\n"
    )
    cli_ctx = CLIContext(
        settings=BoosterSettings(values_path=tmp_path / "values.yaml"),
        config_path=config,
    )

    prepared = prepare_run(
        cli_ctx,
        None,
        {},
        interactive=False,
        runner=fake_runner,
        detector=FixedDetector("darwin"),
    )

    (task,) = prepared.tasks
    assert isinstance(task, DarwinDefaults)
    assert task.os_name == "darwin"
    assert [entry.key for entry in task.entries] == ["k"]
