"""Detect the operating system used by declarative conditions."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

from booster.condition.matcher import ConditionContext
from booster.logging import get_logger

__all__ = ["OS_RELEASE_PATH", "SystemDetector", "parse_os_release_content"]

OS_RELEASE_PATH = Path("/etc/os-release")

logger = get_logger(__name__)


def parse_os_release_content(content: str) -> str:
    """Extract the distribution ``ID`` from os-release content.

    Examples:
        >>> parse_os_release_content('NAME="Arch Linux"\\nID=arch\\n')
        'arch'
        >>> parse_os_release_content('ID="ubuntu"')
        'ubuntu'
    """
    for line in content.splitlines():
        line = line.strip()
        if line.startswith("ID="):
            return line[len("ID=") :].strip().strip("\"'")
    return ""


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


class SystemDetector:
    """Detect the host OS.

    Args:
        read_file: Reader for ``/etc/os-release``; injectable for tests.
        platform: Platform name, defaults to ``sys.platform``.
    """

    def __init__(
        self,
        read_file: Callable[[Path], str] | None = None,
        platform: str | None = None,
    ) -> None:
        self._read_file = read_file or _read_text
        self._platform = platform or sys.platform

    def detect(self) -> ConditionContext:
        """Return a ConditionContext with ``os`` set and an empty profile."""
        if self._platform == "darwin":
            return ConditionContext(os="darwin")
        if self._platform.startswith("linux"):
            return ConditionContext(os=self._detect_linux())
        return ConditionContext(os=self._platform)

    def _detect_linux(self) -> str:
        try:
            content = self._read_file(OS_RELEASE_PATH)
        except OSError as e:
            logger.debug("os_release_unreadable", path=str(OS_RELEASE_PATH), error=str(e))
            return "linux"
        return parse_os_release_content(content) or "linux"
