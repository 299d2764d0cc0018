"""Rule-based leakage scorer.

Combines the lexical signals for a (question, claim) pair into a bounded
score:

- Specific identifier overlap: 0.2 per identifier, capped at 0.4
- Distinctive phrase match: 0.35
- Answer embedded in the question: 0.4
- Non-generic banned terms: 0.1 per term, capped at 0.3

Multi-target questions take the maximum over their target claims, then the
style discount applies (contextual and thematic questions are broader by
intent, so raw overlap is weaker evidence for them).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import structlog

from config.settings import ScoringWeights
from models.claims import Claim
from models.leakage import LeakageSignal
from models.questions import Question
from scoring.lexicon import Lexicon, get_default_lexicon
from scoring.overlap import find_banned_terms, find_specific_overlap
from scoring.patterns import detect_answer_embedding
from scoring.phrases import find_distinctive_phrase
from scoring.text import normalize_words

logger = structlog.get_logger(__name__)

# Scores are rounded to this many places so float noise never crosses a threshold
SCORE_PRECISION = 6


def clamp_score(value: float) -> float:
    """Clamp a score into [0, 1]."""
    if value != value:  # NaN
        return 0.0
    return max(0.0, min(1.0, value))


@dataclass
class LeakageFeatures:
    """Weighted contribution of each signal to the raw score."""
    specific_overlap: float = 0.0
    distinctive_phrase: float = 0.0
    answer_embedded: float = 0.0
    banned_terms: float = 0.0

    @property
    def raw_total(self) -> float:
        return (
            self.specific_overlap +
            self.distinctive_phrase +
            self.answer_embedded +
            self.banned_terms
        )

    @property
    def total(self) -> float:
        """Raw total capped at 1.0."""
        return clamp_score(min(1.0, round(self.raw_total, SCORE_PRECISION)))

    def to_dict(self) -> dict[str, float]:
        return {
            "specific_overlap": round(self.specific_overlap, 3),
            "distinctive_phrase": round(self.distinctive_phrase, 3),
            "answer_embedded": round(self.answer_embedded, 3),
            "banned_terms": round(self.banned_terms, 3),
            "raw_total": round(self.raw_total, 3),
        }


@dataclass
class RuleScoreResult:
    """Rule-based outcome for one question."""
    question_id: str
    score: float
    raw_score: float
    style_discount: float
    signal: LeakageSignal | None = None
    claim_signals: list[LeakageSignal] = field(default_factory=list)
    claim_scores: dict[str, float] = field(default_factory=dict)
    unresolved_claim_ids: list[str] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        return self.signal is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "question_id": self.question_id,
            "score": round(self.score, 3),
            "raw_score": round(self.raw_score, 3),
            "style_discount": self.style_discount,
            "signal": self.signal.to_dict() if self.signal else None,
            "claim_scores": {k: round(v, 3) for k, v in self.claim_scores.items()},
            "unresolved_claim_ids": list(self.unresolved_claim_ids),
        }


def compute_features(signal: LeakageSignal, weights: ScoringWeights) -> LeakageFeatures:
    return LeakageFeatures(
        specific_overlap=min(weights.specific_overlap_cap, signal.specific_overlap * weights.specific_overlap_weight),
        distinctive_phrase=weights.distinctive_phrase_weight if signal.distinctive_phrase else 0.0,
        answer_embedded=weights.answer_embedded_weight if signal.answer_embedded else 0.0,
        banned_terms=min(weights.banned_term_cap, signal.banned_term_count * weights.banned_term_weight),
    )


def compute_leakage_score(signal: LeakageSignal, weights: ScoringWeights | None = None) -> float:
    """Undiscounted score for one (question, claim) signal."""
    return compute_features(signal, weights or ScoringWeights()).total


def collect_signal(question: Question, claim: Claim, lexicon: Lexicon | None = None) -> LeakageSignal:
    """Run every detector for a (question, claim) pair."""
    lexicon = lexicon or get_default_lexicon()

    matched_entities = find_specific_overlap(question.question_text, claim.entities, lexicon)
    phrase = find_distinctive_phrase(
        normalize_words(question.question_text),
        normalize_words(claim.claim_text),
        lexicon,
    )
    embedded = detect_answer_embedding(question.question_text, claim.claim_text, question.answer_type)
    banned = find_banned_terms(question.question_text, question.banned_terms, lexicon)

    return LeakageSignal(
        claim_id=claim.claim_id,
        specific_overlap=len(matched_entities),
        matched_entities=matched_entities,
        distinctive_phrase=phrase.found,
        phrase=phrase.phrase,
        answer_embedded=embedded.found,
        answer_reason=embedded.reason,
        banned_term_count=len(banned),
        banned_terms=banned,
    )


def check_leakage(
    question: Question,
    claim: Claim,
    lexicon: Lexicon | None = None,
    weights: ScoringWeights | None = None,
) -> tuple[float, LeakageSignal]:
    """Score one (question, claim) pair before any style discount."""
    signal = collect_signal(question, claim, lexicon)
    return compute_leakage_score(signal, weights), signal


def score_question(
    question: Question,
    claims_by_id: Mapping[str, Claim],
    lexicon: Lexicon | None = None,
    weights: ScoringWeights | None = None,
) -> RuleScoreResult:
    """Rule-based score for a question against all of its target claims."""
    weights = weights or ScoringWeights()
    discount = weights.discount_for(question.question_style)

    claim_signals: list[LeakageSignal] = []
    claim_scores: dict[str, float] = {}
    unresolved: list[str] = []
    best_signal: LeakageSignal | None = None
    max_score = 0.0

    for claim_id in question.target_ids:
        claim = claims_by_id.get(claim_id)
        if claim is None:
            unresolved.append(claim_id)
            continue
        score, signal = check_leakage(question, claim, lexicon, weights)
        claim_signals.append(signal)
        claim_scores[claim_id] = score
        if best_signal is None or score > max_score:
            best_signal = signal
            max_score = score

    if unresolved:
        logger.warning(
            "leakage_unresolved_target_claims",
            question_id=question.question_id,
            claim_ids=unresolved,
        )

    if best_signal is None:
        return RuleScoreResult(
            question_id=question.question_id,
            score=0.0,
            raw_score=0.0,
            style_discount=discount,
            unresolved_claim_ids=unresolved,
        )

    return RuleScoreResult(
        question_id=question.question_id,
        score=clamp_score(round(max_score * discount, SCORE_PRECISION)),
        raw_score=max_score,
        style_discount=discount,
        signal=best_signal,
        claim_signals=claim_signals,
        claim_scores=claim_scores,
        unresolved_claim_ids=unresolved,
    )


def score_questions(
    questions: list[Question],
    claims: list[Claim],
    lexicon: Lexicon | None = None,
    weights: ScoringWeights | None = None,
) -> list[RuleScoreResult]:
    """Score every question. Pure: the questions are not modified."""
    claims_by_id = {c.claim_id: c for c in claims}
    lexicon = lexicon or get_default_lexicon()
    return [score_question(q, claims_by_id, lexicon, weights) for q in questions]
