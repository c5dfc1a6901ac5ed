"""Unit tests for declarative OS/profile matching."""

from __future__ import annotations

import pytest

from booster.condition import Condition, ConditionContext, Evaluator


@pytest.fixture
def evaluator() -> Evaluator:
    return Evaluator(ConditionContext(os="arch", profile="personal"))


class TestMatches:
    def test_none_matches(self, evaluator: Evaluator) -> None:
        assert evaluator.matches(None)
        assert evaluator.failure_reason(None) == ""

    def test_empty_condition_matches(self, evaluator: Evaluator) -> None:
        assert evaluator.matches(Condition())

    def test_os_membership_is_or(self, evaluator: Evaluator) -> None:
        assert evaluator.matches(Condition(os=("arch", "darwin")))
        assert not evaluator.matches(Condition(os=("darwin", "ubuntu")))

    def test_fields_combine_with_and(self, evaluator: Evaluator) -> None:
        assert evaluator.matches(Condition(os=("arch", "darwin"), profile=("personal",)))
        assert not evaluator.matches(Condition(os=("arch",), profile=("work",)))

    def test_profile_only(self, evaluator: Evaluator) -> None:
        assert evaluator.matches(Condition(profile=("personal", "work")))

    def test_empty_context_profile_fails_profile_condition(self) -> None:
        evaluator = Evaluator(ConditionContext(os="arch"))
        assert not evaluator.matches(Condition(profile=("work",)))


class TestFailureReason:
    def test_profile_mismatch(self) -> None:
        evaluator = Evaluator(ConditionContext(os="arch", profile="work"))
        condition = Condition(os=("arch", "darwin"), profile=("personal",))
        assert not evaluator.matches(condition)
        assert evaluator.failure_reason(condition) == "profile=work, want personal"

    def test_os_mismatch_lists_alternatives(self, evaluator: Evaluator) -> None:
        reason = evaluator.failure_reason(Condition(os=("darwin", "ubuntu")))
        assert reason == "os=arch, want darwin or ubuntu"

    def test_first_failing_field_wins(self, evaluator: Evaluator) -> None:
        reason = evaluator.failure_reason(Condition(os=("darwin",), profile=("work",)))
        assert reason.startswith("os=arch")

    def test_matching_condition_has_no_reason(self, evaluator: Evaluator) -> None:
        assert evaluator.failure_reason(Condition(os=("arch",))) == ""


class TestConditionOf:
    def test_accepts_string_or_list(self) -> None:
        assert Condition.of(os="arch", profile=["a", "b"]) == Condition(
            os=("arch",), profile=("a", "b")
        )

    def test_none_and_empty_string_are_empty(self) -> None:
        assert Condition.of(os=None, profile="").is_empty
