"""Declarative OS/profile matching for task gating."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

__all__ = ["Condition", "ConditionContext", "Evaluator"]


@dataclass(frozen=True, slots=True)
class ConditionContext:
    """Facts a declarative condition is matched against.

    Attributes:
        os: Detected operating system (``arch``, ``darwin``, ``ubuntu`` ...).
        profile: Selected configuration profile, empty if none.
    """

    os: str = ""
    profile: str = ""


@dataclass(frozen=True, slots=True)
class Condition:
    """Allowed values per field; an empty field matches anything.

    Within a field any listed value matches (OR). Across fields every
    non-empty field must match (AND).
    """

    os: tuple[str, ...] = ()
    profile: tuple[str, ...] = ()

    @classmethod
    def of(
        cls,
        os: str | Iterable[str] | None = None,
        profile: str | Iterable[str] | None = None,
    ) -> Condition:
        """Build a condition from a string or a list per field."""
        return cls(os=_as_tuple(os), profile=_as_tuple(profile))

    @property
    def is_empty(self) -> bool:
        return not self.os and not self.profile


def _as_tuple(value: str | Iterable[str] | None) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    return tuple(value)


class Evaluator:
    """Match declarative conditions against a fixed ConditionContext.

    Example:
        ```python
        evaluator = Evaluator(ConditionContext(os="arch", profile="work"))
        evaluator.matches(Condition.of(os=["arch", "darwin"]))  # True
        evaluator.failure_reason(Condition.of(profile="personal"))
        # "profile=work, want personal"
        ```
    """

    def __init__(self, context: ConditionContext) -> None:
        self._context = context

    @property
    def context(self) -> ConditionContext:
        return self._context

    def matches(self, condition: Condition | None) -> bool:
        return not self.failure_reason(condition)

    def failure_reason(self, condition: Condition | None) -> str:
        """Describe the first field that fails to match.

        Returns:
            ``"os=<actual>, want <a> or <b>"`` (or the same for ``profile``),
            or an empty string when the condition matches or is None.
        """
        if condition is None:
            return ""
        checks = (
            ("os", self._context.os, condition.os),
            ("profile", self._context.profile, condition.profile),
        )
        for field, actual, allowed in checks:
            if allowed and actual not in allowed:
                return f"{field}={actual}, want {' or '.join(allowed)}"
        return ""
