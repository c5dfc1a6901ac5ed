"""Pre-authenticate sudo before privileged tasks run."""

from __future__ import annotations

from booster.exceptions import CommandError
from booster.logging import get_logger
from booster.runners import CommandRunner

__all__ = ["ensure_sudo", "has_sudo_credentials"]

logger = get_logger(__name__)


def has_sudo_credentials(runner: CommandRunner) -> bool:
    """True if sudo works without a password prompt."""
    return runner.run(["sudo", "-n", "true"]).success


def ensure_sudo(runner: CommandRunner) -> None:
    """Cache sudo credentials, prompting for a password if needed.

    Raises:
        CommandError: If authentication fails.
    """
    if has_sudo_credentials(runner):
        logger.debug("sudo_credentials_cached")
        return
    returncode = runner.run_interactive(["sudo", "-v"])
    if returncode != 0:
        raise CommandError(
            "sudo authentication failed", command=("sudo", "-v"), returncode=returncode
        )
