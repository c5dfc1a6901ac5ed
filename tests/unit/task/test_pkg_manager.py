"""Unit tests for the pkg-manager.install task."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from booster.exceptions import TaskArgumentError
from booster.runners import CommandResult
from booster.task import PkgManagerInstall, TaskStatus, new_pkg_manager_install
from booster.task.pkg_manager import HOMEBREW_INSTALL_URL
from tests.fixtures.runners import FakeRunner

PARU_URL = "https://aur.archlinux.org/paru.git"


def test_installed_helper_is_skipped(fake_runner: FakeRunner) -> None:
    fake_runner.install("paru")
    fake_runner.respond(("pacman", "-Q", "paru"), stdout="paru 2.0.3-1")

    result = PkgManagerInstall("paru", fake_runner).run()

    assert result.status is TaskStatus.SKIPPED
    assert result.message == "already installed"


def test_binary_without_package_is_reinstalled(fake_runner: FakeRunner) -> None:
    fake_runner.install("paru")

    result = PkgManagerInstall("paru", fake_runner).run()

    assert result.status is TaskStatus.FAILED
    assert ("pacman", "-Q", "paru") in fake_runner.calls
    assert fake_runner.calls[-1][:3] == ("git", "clone", PARU_URL)


class PrefixRunner(FakeRunner):
    """Answers by the first two words; the clone directory is random."""

    def run(self, command: Sequence[str], **kwargs: object) -> CommandResult:
        self.calls.append(tuple(command))
        self.options.append(kwargs)
        return self.responses.get(
            tuple(command[:2]),
            CommandResult(returncode=1, stdout="", stderr="", duration_ms=1),
        )


def test_builds_aur_helper_in_clone() -> None:
    runner = PrefixRunner()
    runner.respond(("git", "clone"), stdout="Cloning")
    runner.respond(("makepkg", "-si"), stdout="Installing paru")

    result = PkgManagerInstall("paru", runner).run()

    assert result.status is TaskStatus.DONE
    assert result.output == "Cloning\nInstalling paru"
    clone, makepkg = runner.calls[-2:]
    assert clone[:3] == ("git", "clone", PARU_URL)
    assert makepkg == ("makepkg", "-si", "--noconfirm")
    assert runner.options[-1]["cwd"] == Path(clone[3])


def test_always_needs_sudo(fake_runner: FakeRunner) -> None:
    assert PkgManagerInstall("yay", fake_runner).needs_sudo
    assert PkgManagerInstall("homebrew", fake_runner).needs_sudo


def test_homebrew_found_at_known_path(fake_runner: FakeRunner) -> None:
    task = PkgManagerInstall("homebrew", fake_runner, lambda: "/opt/homebrew/bin/brew")

    assert task.run().status is TaskStatus.SKIPPED
    assert fake_runner.calls == []


def test_homebrew_install_runs_downloaded_script(fake_runner: FakeRunner) -> None:
    fake_runner.respond(("curl", "-fsSL", HOMEBREW_INSTALL_URL), stdout="#!/bin/bash\n")
    task = PkgManagerInstall("homebrew", fake_runner, lambda: None)

    result = task.run()

    bash = fake_runner.calls[-1]
    assert bash[0] == "bash"
    assert bash[1].endswith("install.sh")
    assert fake_runner.options[-1]["env"] == {"NONINTERACTIVE": "1"}
    assert result.status is TaskStatus.FAILED
    assert "install homebrew: exit status 1" in str(result.error)


def test_homebrew_download_failure(fake_runner: FakeRunner) -> None:
    result = PkgManagerInstall("homebrew", fake_runner, lambda: None).run()

    assert result.status is TaskStatus.FAILED
    assert "download homebrew install script" in str(result.error)


def test_unsupported_manager(fake_runner: FakeRunner) -> None:
    result = PkgManagerInstall("pikaur", fake_runner).run()

    assert result.status is TaskStatus.FAILED
    assert str(result.error) == "unsupported package manager: pikaur"


def test_factory_one_task_per_manager(fake_runner: FakeRunner) -> None:
    tasks = new_pkg_manager_install(fake_runner)(["paru", "homebrew"])

    assert [task.name for task in tasks] == [
        "install package manager: paru",
        "install package manager: homebrew",
    ]


@pytest.mark.parametrize(
    ("args", "message"),
    [("paru", "args must be a list"), (["paru", 2], "arg 2: must be a string")],
)
def test_factory_rejects_bad_args(fake_runner: FakeRunner, args: object, message: str) -> None:
    with pytest.raises(TaskArgumentError, match=message):
        new_pkg_manager_install(fake_runner)(args)
