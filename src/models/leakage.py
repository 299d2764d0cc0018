"""Leakage signal, verdict and report models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, field_validator

from models.questions import Question
from models.shared import ConfidenceTier, QuestionState, Verdict

# Names reported for each rule-based signal that fired
SIGNAL_SPECIFIC_OVERLAP = "specific_overlap"
SIGNAL_DISTINCTIVE_PHRASE = "distinctive_phrase"
SIGNAL_ANSWER_EMBEDDED = "answer_embedded"
SIGNAL_BANNED_TERMS = "banned_terms"


@dataclass
class LeakageSignal:
    """Rule-based evidence computed for one (question, claim) pair."""
    claim_id: str = ""
    specific_overlap: int = 0
    matched_entities: list[str] = field(default_factory=list)
    distinctive_phrase: bool = False
    phrase: str = ""
    answer_embedded: bool = False
    answer_reason: str = ""
    banned_term_count: int = 0
    banned_terms: list[str] = field(default_factory=list)

    def fired(self) -> list[str]:
        """Names of the signals that contributed to the score."""
        names: list[str] = []
        if self.specific_overlap > 0:
            names.append(SIGNAL_SPECIFIC_OVERLAP)
        if self.distinctive_phrase:
            names.append(SIGNAL_DISTINCTIVE_PHRASE)
        if self.answer_embedded:
            names.append(SIGNAL_ANSWER_EMBEDDED)
        if self.banned_term_count > 0:
            names.append(SIGNAL_BANNED_TERMS)
        return names

    def issues(self) -> list[str]:
        """Human-readable description of each fired signal."""
        issues: list[str] = []
        if self.specific_overlap > 0:
            issues.append(
                f"Specific identifier leak: {self.specific_overlap} specific terms "
                f"({', '.join(self.matched_entities)})"
            )
        if self.distinctive_phrase:
            issues.append(f'Distinctive phrase: "{self.phrase}"')
        if self.answer_embedded:
            issues.append(f"Answer embedded: {self.answer_reason}")
        if self.banned_term_count > 0:
            issues.append(f"Banned terms: {', '.join(self.banned_terms)}")
        return issues

    def to_dict(self) -> dict[str, Any]:
        return {
            "claim_id": self.claim_id,
            "specific_overlap": self.specific_overlap,
            "matched_entities": list(self.matched_entities),
            "distinctive_phrase": self.distinctive_phrase,
            "phrase": self.phrase,
            "answer_embedded": self.answer_embedded,
            "answer_reason": self.answer_reason,
            "banned_term_count": self.banned_term_count,
            "banned_terms": list(self.banned_terms),
        }


class ValidationVerdict(BaseModel):
    """One semantic judge verdict for a question."""
    question_id: str = Field(min_length=1)
    verdict: Verdict
    confidence: ConfidenceTier
    reason: str = ""

    @field_validator("question_id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v.strip() if isinstance(v, str) else v

    @field_validator("verdict", mode="before")
    @classmethod
    def normalize_verdict(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("confidence", mode="before")
    @classmethod
    def normalize_confidence(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("reason", mode="before")
    @classmethod
    def default_reason(cls, v: Any) -> str:
        return "" if v is None else str(v)


@dataclass
class LeakageRecord:
    """Per-question bookkeeping for one scoring run."""
    question: Question
    rule_score: float = 0.0
    raw_score: float = 0.0
    signal: LeakageSignal | None = None
    claim_signals: list[LeakageSignal] = field(default_factory=list)
    verdict: ValidationVerdict | None = None
    final_score: float = 0.0
    state: QuestionState = QuestionState.GENERATED

    @property
    def question_id(self) -> str:
        return self.question.question_id

    @property
    def fired_signals(self) -> list[str]:
        return self.signal.fired() if self.signal else []


class FlaggedQuestion(BaseModel):
    """A question whose final score exceeded the flag threshold."""
    question_id: str
    score: float
    signals: list[str] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)
    claim_id: str = ""
    verdict: str | None = None
    verdict_confidence: str | None = None
    verdict_reason: str | None = None


class ValidationSummary(BaseModel):
    """Outcome of the semantic validation pass."""
    selected: int = 0
    validated: int = 0
    ok_count: int = 0
    leak_count: int = 0
    high_confidence_leaks: list[str] = Field(default_factory=list)
    borderline: list[str] = Field(default_factory=list)
    batches_total: int = 0
    batches_failed: int = 0
    input_tokens: int = 0
    output_tokens: int = 0


class LeakageReport(BaseModel):
    """Aggregate leakage report across a batch of questions."""
    count: int = 0
    flagged_count: int = 0
    average_score: float = 0.0
    flag_threshold: float = 0.3
    flagged: list[FlaggedQuestion] = Field(default_factory=list)
    validation: ValidationSummary | None = None
