"""Claim models produced by the upstream claim extractor."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.shared import ClaimType, CLAIM_TYPE_FALLBACK, coerce_enum


class TimeBounds(BaseModel):
    """Open-ended time window a claim applies to."""
    model_config = ConfigDict(frozen=True)

    start: str | None = None
    end: str | None = None


class Claim(BaseModel):
    """An atomic factual proposition extracted from a source document.

    Claims are read-only inputs to the leakage scorer.
    """
    model_config = ConfigDict(frozen=True)

    claim_id: str = Field(description="Unique within a document (e.g. 'c1').")
    claim_text: str
    claim_type: ClaimType = ClaimType.OTHER
    entities: list[str] = Field(
        default_factory=list,
        description="Entity mentions in order of appearance. Not deduplicated.",
    )
    time_bounds: TimeBounds | None = None
    importance: int = Field(default=3, ge=1, le=5, description="1-5, where 5 is most important.")

    @field_validator("claim_type", mode="before")
    @classmethod
    def coerce_claim_type(cls, v: Any) -> ClaimType:
        """Unknown claim types fall back to OTHER."""
        return coerce_enum(ClaimType, v, CLAIM_TYPE_FALLBACK)

    @field_validator("entities", mode="before")
    @classmethod
    def drop_malformed_entities(cls, v: Any) -> list[str]:
        """Silently skip non-string and blank entity mentions."""
        if not isinstance(v, (list, tuple)):
            return []
        return [e.strip() for e in v if isinstance(e, str) and e.strip()]

    @field_validator("importance", mode="before")
    @classmethod
    def clamp_importance(cls, v: Any) -> int:
        """Clamp importance to the 1-5 range."""
        try:
            value = int(v)
        except (TypeError, ValueError):
            return 3
        return max(1, min(5, value))
