"""Shared model definitions for the leakage scoring engine.

This module contains canonical definitions for the enums used by claims,
questions and semantic verdicts, plus the fallback values unknown
upstream strings are coerced to.

Usage:
    from models.shared import ClaimType, QuestionStyle, AnswerType
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class ClaimType(str, Enum):
    """Kind of factual proposition extracted from a source document."""
    EVENT = "event"                # Something that happened
    ASSESSMENT = "assessment"      # An evaluation or judgment
    PLAN = "plan"                  # Future intention or proposal
    RELATIONSHIP = "relationship"  # Connection between entities
    LOGISTICS = "logistics"        # Operational details (dates, numbers, locations)
    ATTRIBUTION = "attribution"    # Who said/reported something
    OTHER = "other"


class QuestionStyle(str, Enum):
    """Question styles for different retrieval strategies.

    - TARGETED: Directly probes a specific claim (factoid-style)
    - CONTEXTUAL: Asks about the broader situation/context (exploratory)
    - THEMATIC: Asks about themes, relationships, or patterns across the domain
    """
    TARGETED = "targeted"
    CONTEXTUAL = "contextual"
    THEMATIC = "thematic"


class AnswerType(str, Enum):
    WHO = "who"
    WHAT = "what"
    WHEN = "when"
    WHERE = "where"
    WHY = "why"
    HOW = "how"
    NUMERIC = "numeric"
    LIST = "list"


class Verdict(str, Enum):
    """Semantic judge verdict."""
    OK = "OK"
    LEAK = "LEAK"


class ConfidenceTier(str, Enum):
    """Semantic judge self-reported certainty."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class QuestionState(str, Enum):
    """Lifecycle of a question inside one scoring run."""
    GENERATED = "generated"
    RULE_SCORED = "rule_scored"
    VALIDATED = "validated"
    UNVALIDATED = "unvalidated"
    FINALIZED = "finalized"


# Fallbacks for values the upstream generator produced outside the enums
CLAIM_TYPE_FALLBACK = ClaimType.OTHER
ANSWER_TYPE_FALLBACK = AnswerType.WHAT
QUESTION_STYLE_FALLBACK = QuestionStyle.TARGETED


def coerce_enum(enum_cls: type[Enum], value: Any, fallback: Enum) -> Enum:
    """Map a raw upstream value onto ``enum_cls``, returning ``fallback`` when unknown."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        cleaned = value.strip().lower()
        for member in enum_cls:
            if member.value.lower() == cleaned:
                return member
    return fallback
