"""Booster constants shared across modules."""

from __future__ import annotations

#: Only supported bootstrap config schema version
CONFIG_VERSION: str = "1"

#: Default bootstrap config file, relative to the working directory
DEFAULT_CONFIG_FILENAME: str = "bootstrap.yaml"

#: Directory name used under the XDG data home for persisted variables
DATA_DIR_NAME: str = "booster"

#: File holding persisted variable values
VALUES_FILENAME: str = "values.yaml"

#: Default timeout for external commands, in seconds
DEFAULT_COMMAND_TIMEOUT: float = 300.0

#: Permission bits for directories created by tasks
DIR_MODE: int = 0o755

#: Timeout for package, package-manager and toolchain installs, in seconds
INSTALL_TIMEOUT: float = 3600.0

#: Locations checked for the ``brew`` binary before falling back to PATH
KNOWN_BREW_PATHS: tuple[str, ...] = (
    "/opt/homebrew/bin/brew",
    "/usr/local/bin/brew",
    "/home/linuxbrew/.linuxbrew/bin/brew",
)
