"""Semantic judge interface.

The judge is an external capability injected into the batch validator.
It receives up to ``batch_size`` (question, claim) pairs and returns one raw
entry per pair it managed to judge. Entries are parsed by the validator, so
a judge may return fewer entries than requested or entries that do not
parse; it signals a failed call by raising.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from models.shared import QuestionStyle


@dataclass(frozen=True)
class JudgeRequestItem:
    """One (question, claim) pair sent to the judge."""
    question_id: str
    question_text: str
    claim_text: str
    question_style: QuestionStyle = QuestionStyle.TARGETED

    def to_dict(self) -> dict[str, str]:
        return {
            "question_id": self.question_id,
            "question_text": self.question_text,
            "claim_text": self.claim_text,
            "question_style": self.question_style.value,
        }


@dataclass
class JudgeResponse:
    """Raw verdict entries plus token usage for one judge call."""
    entries: list[Any] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0


class SemanticJudge(ABC):
    @abstractmethod
    def judge(self, items: list[JudgeRequestItem]) -> JudgeResponse:
        """Judge a batch of pairs. Raises once the client's retry budget is spent."""
        raise NotImplementedError
