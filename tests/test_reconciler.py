"""Tests for score reconciliation."""
from __future__ import annotations

import pytest

from config.settings import ReconciliationBounds
from models.leakage import ValidationVerdict
from models.shared import ConfidenceTier
from validation.reconciler import reconcile_score, reconcile_scores


def verdict(value: str, confidence: str, question_id: str = "q1") -> ValidationVerdict:
    return ValidationVerdict(question_id=question_id, verdict=value, confidence=confidence)


class TestReconcileScore:
    def test_ok_high_caps_score(self) -> None:
        assert reconcile_score(0.5, verdict("OK", "high")) == pytest.approx(0.15)

    @pytest.mark.parametrize("confidence,floor", [("high", 0.6), ("medium", 0.45), ("low", 0.35)])
    def test_leak_raises_to_floor(self, confidence: str, floor: float) -> None:
        assert reconcile_score(0.1, verdict("LEAK", confidence)) == pytest.approx(floor)

    @pytest.mark.parametrize("confidence,ceiling", [("high", 0.15), ("medium", 0.25), ("low", 0.30)])
    def test_ok_caps_at_ceiling(self, confidence: str, ceiling: float) -> None:
        assert reconcile_score(0.9, verdict("OK", confidence)) == pytest.approx(ceiling)

    def test_leak_never_lowers(self) -> None:
        assert reconcile_score(0.9, verdict("LEAK", "low")) == pytest.approx(0.9)

    def test_ok_never_raises(self) -> None:
        assert reconcile_score(0.05, verdict("OK", "low")) == pytest.approx(0.05)

    def test_no_verdict_keeps_rule_score(self) -> None:
        assert reconcile_score(0.42, None) == 0.42

    def test_custom_bounds(self) -> None:
        bounds = ReconciliationBounds(
            leak_floors={ConfidenceTier.HIGH: 0.8, ConfidenceTier.MEDIUM: 0.5, ConfidenceTier.LOW: 0.4},
            ok_ceilings={ConfidenceTier.HIGH: 0.0, ConfidenceTier.MEDIUM: 0.2, ConfidenceTier.LOW: 0.3},
        )
        assert reconcile_score(0.2, verdict("LEAK", "high"), bounds) == pytest.approx(0.8)
        assert reconcile_score(0.2, verdict("OK", "high"), bounds) == 0.0


class TestReconcileScores:
    def test_only_verdicts_move_scores(self) -> None:
        result = reconcile_scores(
            {"q1": 0.5, "q2": 0.2},
            {"q1": verdict("OK", "high", "q1"), "q9": verdict("LEAK", "high", "q9")},
        )
        assert result == {"q1": pytest.approx(0.15), "q2": 0.2}
