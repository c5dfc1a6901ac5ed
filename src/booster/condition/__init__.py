"""Declarative OS/profile conditions for gating tasks."""

from __future__ import annotations

from booster.condition.detect import SystemDetector, parse_os_release_content
from booster.condition.matcher import Condition, ConditionContext, Evaluator

__all__ = [
    "Condition",
    "ConditionContext",
    "Evaluator",
    "SystemDetector",
    "parse_os_release_content",
]
