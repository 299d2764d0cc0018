"""Shared factories and a deterministic semantic judge for the test suite."""
from __future__ import annotations

from typing import Any, Callable

from models.claims import Claim
from models.questions import Question
from validation.judge import JudgeRequestItem, JudgeResponse, SemanticJudge


class FakeJudge(SemanticJudge):
    """Deterministic judge: answers from a callback, records every batch."""

    def __init__(
        self,
        respond: Callable[[list[JudgeRequestItem]], list[Any]] | None = None,
        fail_on: set[int] | None = None,
    ):
        self._respond = respond or (lambda items: [])
        self._fail_on = fail_on or set()
        self.calls: list[list[JudgeRequestItem]] = []

    def judge(self, items: list[JudgeRequestItem]) -> JudgeResponse:
        call_index = len(self.calls)
        self.calls.append(list(items))
        if call_index in self._fail_on:
            raise RuntimeError(f"judge unavailable for batch {call_index}")
        return JudgeResponse(entries=self._respond(items), input_tokens=100, output_tokens=20)


def all_verdicts(verdict: str, confidence: str = "high") -> Callable[[list[JudgeRequestItem]], list[dict]]:
    """Respond with the same verdict for every requested item."""
    def respond(items: list[JudgeRequestItem]) -> list[dict]:
        return [
            {"question_id": i.question_id, "verdict": verdict, "confidence": confidence, "reason": "test"}
            for i in items
        ]
    return respond


def make_claim(
    claim_id: str = "c1",
    claim_text: str = "Minister Kao said Taiwan has plans to produce tanks in the near future.",
    entities: list[str] | None = None,
    **kwargs: Any,
) -> Claim:
    return Claim(
        claim_id=claim_id,
        claim_text=claim_text,
        entities=["Minister Kao"] if entities is None else entities,
        **kwargs,
    )


def make_question(
    question_id: str = "q1",
    question_text: str = "What did the minister discuss?",
    targets_claim_id: str = "c1",
    **kwargs: Any,
) -> Question:
    return Question(
        question_id=question_id,
        question_text=question_text,
        targets_claim_id=targets_claim_id,
        **kwargs,
    )
