"""Merge semantic verdicts into rule-based leakage scores.

- LEAK raises the score to at least the floor for its confidence tier
- OK caps the score at the ceiling for its confidence tier

A verdict only ever moves the score in its own direction, so a LEAK never
lowers a score and an OK never raises one.
"""
from __future__ import annotations

from typing import Mapping

from config.settings import ReconciliationBounds
from models.leakage import ValidationVerdict
from models.shared import Verdict
from scoring.rule_scorer import clamp_score


def reconcile_score(
    rule_score: float,
    verdict: ValidationVerdict | None,
    bounds: ReconciliationBounds | None = None,
) -> float:
    """Final score for one question. Without a verdict the rule score stands."""
    if verdict is None:
        return rule_score

    bounds = bounds or ReconciliationBounds()
    if verdict.verdict == Verdict.LEAK:
        return clamp_score(max(rule_score, bounds.leak_floors[verdict.confidence]))
    return clamp_score(min(rule_score, bounds.ok_ceilings[verdict.confidence]))


def reconcile_scores(
    rule_scores: Mapping[str, float],
    verdicts: Mapping[str, ValidationVerdict],
    bounds: ReconciliationBounds | None = None,
) -> dict[str, float]:
    """Reconcile every question id in ``rule_scores``."""
    bounds = bounds or ReconciliationBounds()
    return {
        question_id: reconcile_score(score, verdicts.get(question_id), bounds)
        for question_id, score in rule_scores.items()
    }
