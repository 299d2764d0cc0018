"""Question models produced by the upstream question generator."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.shared import (
    AnswerType,
    QuestionStyle,
    ANSWER_TYPE_FALLBACK,
    QUESTION_STYLE_FALLBACK,
    coerce_enum,
)


class Question(BaseModel):
    """A retrieval query intended to probe a claim without stating its answer.

    ``leakage_score`` is the only field the scoring engine writes.
    """
    model_config = ConfigDict(validate_assignment=True)

    question_id: str
    targets_claim_id: str = Field(
        default="",
        description="Primary target claim. Targeted questions have exactly one target.",
    )
    targets_claim_ids: list[str] | None = Field(
        default=None,
        description="Contextual/thematic questions may relate to several claims.",
    )
    question_text: str
    question_style: QuestionStyle = QuestionStyle.TARGETED
    answer_type: AnswerType = AnswerType.WHAT
    allowed_hints: list[str] = Field(
        default_factory=list,
        description='Hint categories the generator permitted, e.g. ["time_window", "region"].',
    )
    banned_terms: list[str] = Field(
        default_factory=list,
        description="Terms the generator itself judged risky.",
    )
    leakage_score: float = Field(default=0.0, description="0-1, lower is better.")

    @field_validator("question_style", mode="before")
    @classmethod
    def coerce_style(cls, v: Any) -> QuestionStyle:
        return coerce_enum(QuestionStyle, v, QUESTION_STYLE_FALLBACK)

    @field_validator("answer_type", mode="before")
    @classmethod
    def coerce_answer_type(cls, v: Any) -> AnswerType:
        return coerce_enum(AnswerType, v, ANSWER_TYPE_FALLBACK)

    @field_validator("allowed_hints", "banned_terms", mode="before")
    @classmethod
    def drop_blank_terms(cls, v: Any) -> list[str]:
        """Silently skip non-string and blank entries."""
        if not isinstance(v, (list, tuple)):
            return []
        return [t.strip() for t in v if isinstance(t, str) and t.strip()]

    @field_validator("leakage_score", mode="before")
    @classmethod
    def clamp_score(cls, v: Any) -> float:
        """Keep the score inside [0, 1]."""
        try:
            value = float(v)
        except (TypeError, ValueError):
            return 0.0
        if value != value:  # NaN
            return 0.0
        return max(0.0, min(1.0, value))

    @property
    def target_ids(self) -> list[str]:
        """All target claim ids, primary first, without duplicates."""
        ids: list[str] = []
        for claim_id in [self.targets_claim_id, *(self.targets_claim_ids or [])]:
            if claim_id and claim_id not in ids:
                ids.append(claim_id)
        return ids
