"""``pkg.install``: install system packages with pacman helpers or Homebrew.

Two argument shapes are accepted and may be mixed:

```yaml
args: [git, curl]
args:
  - packages: [git]
  - casks: [firefox]
```

Casks are a Homebrew concept and are rejected on any other OS.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

from booster.constants import INSTALL_TIMEOUT, KNOWN_BREW_PATHS
from booster.exceptions import CommandError, TaskArgumentError
from booster.runners import CommandRunner
from booster.task.args import require_list
from booster.task.base import CancelToken, Task, TaskFactory
from booster.task.models import Result

__all__ = [
    "BrewPathFinder",
    "HomebrewManager",
    "PackageManager",
    "PacmanManager",
    "PkgInstall",
    "find_brew",
    "new_pkg_install",
    "parse_pkg_install_args",
]

BrewPathFinder = Callable[[], str | None]


def find_brew() -> str | None:
    """Return the first well-known ``brew`` location that exists.

    Checked directly because PATH may predate a Homebrew installed during
    the same run.
    """
    for candidate in KNOWN_BREW_PATHS:
        if Path(candidate).exists():
            return candidate
    return None


def _lines(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


class PackageManager(Protocol):
    """Lists and installs packages. Failures raise CommandError."""

    @property
    def name(self) -> str: ...

    @property
    def supports_casks(self) -> bool: ...

    def list_installed(self) -> list[str]: ...

    def install(self, packages: list[str]) -> str: ...

    def list_installed_casks(self) -> list[str]: ...

    def install_casks(self, casks: list[str]) -> str: ...


class PacmanManager:
    """Arch packages: queried with pacman, installed with an AUR helper."""

    def __init__(self, runner: CommandRunner, helper: str = "paru") -> None:
        self._runner = runner
        self.helper = helper

    @property
    def name(self) -> str:
        return self.helper

    @property
    def supports_casks(self) -> bool:
        return False

    def list_installed(self) -> list[str]:
        return _lines(self._runner.check(["pacman", "-Qq"]).stdout)

    def install(self, packages: list[str]) -> str:
        if not packages:
            return ""
        command = [self.helper, "-S", "--noconfirm", "--needed", "--skipreview", *packages]
        return self._runner.check(command, timeout=INSTALL_TIMEOUT).output

    def list_installed_casks(self) -> list[str]:
        return []

    def install_casks(self, casks: list[str]) -> str:
        return ""


class HomebrewManager:
    """Formulae and casks via ``brew``."""

    def __init__(
        self, runner: CommandRunner, path_finder: BrewPathFinder | None = None
    ) -> None:
        self._runner = runner
        self._path_finder = path_finder or find_brew

    @property
    def name(self) -> str:
        return "homebrew"

    @property
    def supports_casks(self) -> bool:
        return True

    @property
    def brew(self) -> str:
        return self._path_finder() or "brew"

    def list_installed(self) -> list[str]:
        return _lines(self._runner.check([self.brew, "list", "--formulae"]).stdout)

    def install(self, packages: list[str]) -> str:
        if not packages:
            return ""
        return self._runner.check(
            [self.brew, "install", *packages], timeout=INSTALL_TIMEOUT
        ).output

    def list_installed_casks(self) -> list[str]:
        return _lines(self._runner.check([self.brew, "list", "--casks"]).stdout)

    def install_casks(self, casks: list[str]) -> str:
        if not casks:
            return ""
        return self._runner.check(
            [self.brew, "install", "--cask", *casks], timeout=INSTALL_TIMEOUT
        ).output


def _summarize(names: list[str], noun: str, prefix: str = "") -> str:
    if len(names) <= 3:
        return prefix + ", ".join(names)
    return f"{len(names)} {noun}"


def _format_counts(category: str, skipped: int, installed: int) -> str:
    plural = "" if skipped == 1 and installed == 0 else "s"
    if skipped and installed:
        return (
            f"{skipped + installed} {category}{plural} "
            f"({skipped} existed, {installed} installed)"
        )
    if skipped:
        return f"{skipped} {category}{plural} (all existed)"
    return f"{installed} {category}{plural} installed"


class PkgInstall:
    """Install every listed package and cask that is not installed yet.

    Everything is queried first; only the missing names are handed to the
    manager, in one batch for packages and one for casks. SKIPPED when
    nothing is missing. Needs sudo everywhere except macOS.
    """

    def __init__(
        self,
        manager: PackageManager,
        os_name: str,
        packages: list[str],
        casks: list[str] | None = None,
    ) -> None:
        self.manager = manager
        self.os_name = os_name
        self.packages = packages
        self.casks = casks or []

    @property
    def name(self) -> str:
        parts: list[str] = []
        if self.packages:
            parts.append(_summarize(self.packages, "packages"))
        if self.casks:
            parts.append(_summarize(self.casks, "casks", prefix="casks: "))
        if not parts:
            return "install packages: (none)"
        return "install packages: " + " + ".join(parts)

    @property
    def needs_sudo(self) -> bool:
        return self.os_name != "darwin"

    def run(self, token: CancelToken | None = None) -> Result:
        if self.casks and self.os_name != "darwin" and not self.manager.supports_casks:
            return Result.failed(
                RuntimeError(f"casks specified but OS is {self.os_name} (not darwin)"),
                message="casks are only supported on macOS",
            )

        try:
            missing = _missing(self.packages, self.manager.list_installed)
            missing_casks = _missing(self.casks, self.manager.list_installed_casks)
        except CommandError as e:
            return Result.failed(e, output=e.output)

        if not missing and not missing_casks:
            return Result.skipped("all packages already installed")
        if token is not None and token.cancelled:
            return Result.failed("cancelled before install")

        outputs: list[str] = []
        try:
            if missing:
                outputs.append(self.manager.install(missing))
            if missing_casks:
                outputs.append(self.manager.install_casks(missing_casks))
        except CommandError as e:
            outputs.append(e.output)
            return Result.failed(e, output="\n".join(o for o in outputs if o))

        counts: list[str] = []
        if self.packages:
            counts.append(
                _format_counts("pkg", len(self.packages) - len(missing), len(missing))
            )
        if self.casks:
            counts.append(
                _format_counts(
                    "cask", len(self.casks) - len(missing_casks), len(missing_casks)
                )
            )
        return Result.done(" | ".join(counts), output="\n".join(o for o in outputs if o))

    def __repr__(self) -> str:
        return f"PkgInstall({self.packages!r}, casks={self.casks!r})"


def _missing(wanted: list[str], list_installed: Callable[[], list[str]]) -> list[str]:
    if not wanted:
        return []
    installed = set(list_installed())
    return [name for name in wanted if name not in installed]


def _string_list(value: Any, where: str) -> list[str]:
    if not isinstance(value, (list, tuple)):
        raise TaskArgumentError(f"{where}: must be a list")
    names: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise TaskArgumentError(f"{where}[{index}]: must be a string")
        names.append(item)
    return names


def parse_pkg_install_args(args: Any) -> tuple[list[str], list[str]]:
    """Split args into ``(packages, casks)``.

    Raises:
        TaskArgumentError: If args is not a list, or an item is neither a
            package name nor a ``{packages, casks}`` map.
    """
    items = require_list(args, "args must be a list")
    packages: list[str] = []
    casks: list[str] = []
    for position, item in enumerate(items, start=1):
        if isinstance(item, str):
            packages.append(item)
        elif isinstance(item, Mapping):
            if "packages" in item:
                packages.extend(_string_list(item["packages"], f"arg {position} packages"))
            if "casks" in item:
                casks.extend(_string_list(item["casks"], f"arg {position} casks"))
        else:
            raise TaskArgumentError(
                f"arg {position}: must be a string or map, got {type(item).__name__}"
            )
    return packages, casks


def new_pkg_install(
    runner: CommandRunner,
    os_name: str,
    manager: PackageManager | None = None,
    path_finder: BrewPathFinder | None = None,
) -> TaskFactory:
    """Factory producing a single PkgInstall per entry.

    Without an explicit manager, macOS uses Homebrew and everything else the
    pacman helper.
    """

    def factory(args: Any) -> list[Task]:
        packages, casks = parse_pkg_install_args(args)
        if not packages and not casks:
            return []
        chosen = manager
        if chosen is None:
            chosen = (
                HomebrewManager(runner, path_finder)
                if os_name == "darwin"
                else PacmanManager(runner)
            )
        return [PkgInstall(chosen, os_name, packages, casks)]

    return factory
