from __future__ import annotations

from typing import Any

from booster.exceptions.base import BoosterError


class ConfigError(BoosterError):
    """Exception for configuration loading, parsing, and validation errors.

    Raised when a bootstrap file cannot be read, is not valid YAML, fails
    schema validation, or declares an unsupported version.

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional field name that caused the error (e.g., "version").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        raise ConfigError("config missing version field", field="version")

        raise ConfigError(
            "unsupported config version: 2", field="version", value="2"
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)
