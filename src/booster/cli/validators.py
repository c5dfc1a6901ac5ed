"""Validation of command-line choices against the loaded configuration."""

from __future__ import annotations

from collections.abc import Sequence

from booster.exceptions import ConfigError

__all__ = ["validate_profile"]


def validate_profile(configured: Sequence[str], selected: str | None) -> str:
    """Check ``--profile`` against the profiles a config declares.

    Returns:
        The selected profile, or an empty string when the config declares none.

    Raises:
        ConfigError: If a profile is given but none are declared, if profiles
            are declared but none is given, or if the profile is unknown.
    """
    if not configured:
        if selected:
            raise ConfigError(
                "--profile specified but no profiles defined in config",
                field="profiles",
            )
        return ""
    if not selected:
        raise ConfigError(
            f"config defines profiles {', '.join(configured)}, "
            "use --profile to select one",
            field="profiles",
        )
    if selected not in configured:
        raise ConfigError(
            f"invalid profile {selected!r}, must be one of: {', '.join(configured)}",
            field="profiles",
            value=selected,
        )
    return selected
