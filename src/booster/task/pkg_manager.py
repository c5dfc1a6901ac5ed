"""``pkg-manager.install``: bootstrap an AUR helper or Homebrew itself."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

from booster.constants import INSTALL_TIMEOUT
from booster.exceptions import CommandError, TaskArgumentError
from booster.runners import CommandRunner
from booster.task.args import require_list
from booster.task.base import CancelToken, Task, TaskFactory
from booster.task.models import Result
from booster.task.pkg_install import BrewPathFinder, find_brew

__all__ = [
    "AUR_HELPERS",
    "HOMEBREW_INSTALL_URL",
    "PkgManagerInstall",
    "new_pkg_manager_install",
]

AUR_HELPERS: dict[str, str] = {
    "paru": "https://aur.archlinux.org/paru.git",
    "yay": "https://aur.archlinux.org/yay.git",
}

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"


class PkgManagerInstall:
    """Install a package manager unless it is already present.

    An AUR helper counts as installed only if its binary is on PATH and
    pacman knows the package. Homebrew counts as installed when ``brew``
    exists at one of its well-known locations.
    """

    def __init__(
        self,
        manager: str,
        runner: CommandRunner,
        path_finder: BrewPathFinder | None = None,
    ) -> None:
        self.manager = manager
        self._runner = runner
        self._path_finder = path_finder or find_brew

    @property
    def name(self) -> str:
        return f"install package manager: {self.manager}"

    @property
    def needs_sudo(self) -> bool:
        return True

    def is_installed(self) -> bool:
        if self.manager == "homebrew":
            return self._path_finder() is not None
        if self._runner.which(self.manager) is None:
            return False
        return self._runner.run(["pacman", "-Q", self.manager]).success

    def run(self, token: CancelToken | None = None) -> Result:
        if self.is_installed():
            return Result.skipped("already installed")
        if token is not None and token.cancelled:
            return Result.failed(f"cancelled before installing {self.manager}")

        if self.manager in AUR_HELPERS:
            return self._install_from_aur(AUR_HELPERS[self.manager])
        if self.manager == "homebrew":
            return self._install_homebrew()
        return Result.failed(f"unsupported package manager: {self.manager}")

    def _install_from_aur(self, url: str) -> Result:
        outputs: list[str] = []
        with tempfile.TemporaryDirectory(prefix="booster-aur-") as tmp:
            clone_dir = Path(tmp) / self.manager
            steps = (
                ("clone", ["git", "clone", url, str(clone_dir)], None),
                ("makepkg", ["makepkg", "-si", "--noconfirm"], clone_dir),
            )
            for label, command, cwd in steps:
                result = self._runner.run(command, cwd=cwd, timeout=INSTALL_TIMEOUT)
                if result.output:
                    outputs.append(result.output)
                if not result.success:
                    return Result.failed(
                        RuntimeError(
                            f"{label} {self.manager}: exit status {result.returncode}"
                        ),
                        output="\n".join(outputs),
                    )
        return Result.done("installed", output="\n".join(outputs))

    def _install_homebrew(self) -> Result:
        try:
            script = self._runner.check(["curl", "-fsSL", HOMEBREW_INSTALL_URL])
        except CommandError as e:
            return Result.failed(
                RuntimeError(f"download homebrew install script: {e.message}"),
                output=e.output,
            )

        with tempfile.TemporaryDirectory(prefix="booster-brew-") as tmp:
            script_path = Path(tmp) / "install.sh"
            try:
                script_path.write_text(script.stdout)
            except OSError as e:
                return Result.failed(e)
            result = self._runner.run(
                ["bash", str(script_path)],
                env={"NONINTERACTIVE": "1"},
                timeout=INSTALL_TIMEOUT,
            )
        if not result.success:
            return Result.failed(
                RuntimeError(f"install homebrew: exit status {result.returncode}"),
                output=result.output,
            )
        return Result.done("installed", output=result.output)

    def __repr__(self) -> str:
        return f"PkgManagerInstall({self.manager!r})"


def new_pkg_manager_install(
    runner: CommandRunner, path_finder: BrewPathFinder | None = None
) -> TaskFactory:
    """Factory producing one PkgManagerInstall per listed manager name."""

    def factory(args: Any) -> list[Task]:
        names = require_list(args, "args must be a list of package manager names")
        tasks: list[Task] = []
        for position, name in enumerate(names, start=1):
            if not isinstance(name, str):
                raise TaskArgumentError(f"arg {position}: must be a string")
            tasks.append(PkgManagerInstall(name, runner, path_finder))
        return tasks

    return factory
