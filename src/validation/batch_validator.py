"""Batch semantic validation of rule-scored questions.

Only questions whose rule-based score reaches the trigger threshold are
sent to the judge; obviously clean questions never cost a judge call.
Batches are sent sequentially and are all-or-nothing: when a judge call
fails, that batch's questions keep their rule-based scores and the
remaining batches still run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import structlog
from pydantic import ValidationError

from config.settings import LeakageSettings
from models.claims import Claim
from models.leakage import LeakageRecord, ValidationVerdict
from validation.judge import JudgeRequestItem, SemanticJudge

logger = structlog.get_logger(__name__)

VERDICT_TUPLE_FIELDS = ("question_id", "verdict", "confidence", "reason")


@dataclass
class ValidationRun:
    """Outcome of one validation pass."""
    verdicts: dict[str, ValidationVerdict] = field(default_factory=dict)
    selected_ids: list[str] = field(default_factory=list)
    batches_total: int = 0
    failed_batches: list[int] = field(default_factory=list)
    dropped_entries: int = 0
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def batches_failed(self) -> int:
        return len(self.failed_batches)


def build_batches(items: list[JudgeRequestItem], batch_size: int) -> list[list[JudgeRequestItem]]:
    """Split items into consecutive batches of at most ``batch_size``."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")
    return [items[i:i + batch_size] for i in range(0, len(items), batch_size)]


def parse_verdict_entry(entry: Any) -> ValidationVerdict:
    """Parse one raw judge entry (mapping or 4-tuple). Raises ValidationError."""
    if isinstance(entry, (list, tuple)):
        entry = dict(zip(VERDICT_TUPLE_FIELDS, entry))
    return ValidationVerdict.model_validate(entry)


class BatchSemanticValidator:
    """Sends selected questions to an injected semantic judge in batches."""

    def __init__(self, judge: SemanticJudge, settings: LeakageSettings | None = None):
        self.judge = judge
        self.settings = settings or LeakageSettings()

    def select(self, records: list[LeakageRecord]) -> list[LeakageRecord]:
        """Records whose rule-based score reaches the trigger threshold."""
        threshold = self.settings.validation_trigger_threshold
        return [r for r in records if r.rule_score >= threshold]

    def _request_item(
        self,
        record: LeakageRecord,
        claims_by_id: Mapping[str, Claim],
    ) -> JudgeRequestItem | None:
        question = record.question
        claim_ids = [record.signal.claim_id] if record.signal else []
        claim_ids.extend(question.target_ids)

        for claim_id in claim_ids:
            claim = claims_by_id.get(claim_id)
            if claim is not None:
                return JudgeRequestItem(
                    question_id=question.question_id,
                    question_text=question.question_text,
                    claim_text=claim.claim_text,
                    question_style=question.question_style,
                )
        return None

    def build_request_items(
        self,
        records: list[LeakageRecord],
        claims_by_id: Mapping[str, Claim],
    ) -> list[JudgeRequestItem]:
        items: list[JudgeRequestItem] = []
        for record in records:
            item = self._request_item(record, claims_by_id)
            if item is None:
                logger.warning("leakage_validation_no_claim", question_id=record.question_id)
                continue
            items.append(item)
        return items

    def _collect_verdicts(
        self,
        entries: list[Any],
        batch_ids: set[str],
        batch_index: int,
    ) -> tuple[dict[str, ValidationVerdict], int]:
        """Parse a batch's entries. Returns (verdicts by question id, dropped count)."""
        verdicts: dict[str, ValidationVerdict] = {}
        dropped = 0
        for entry in entries:
            try:
                verdict = parse_verdict_entry(entry)
            except (ValidationError, TypeError) as e:
                dropped += 1
                logger.warning(
                    "leakage_validation_malformed_entry",
                    batch_index=batch_index,
                    error=str(e)[:200],
                )
                continue

            if verdict.question_id not in batch_ids:
                logger.debug(
                    "leakage_validation_unexpected_id",
                    batch_index=batch_index,
                    question_id=verdict.question_id,
                )
                continue
            verdicts.setdefault(verdict.question_id, verdict)
        return verdicts, dropped

    def validate(
        self,
        records: list[LeakageRecord],
        claims_by_id: Mapping[str, Claim],
    ) -> ValidationRun:
        """Judge every selected record. Never raises for judge failures."""
        run = ValidationRun()
        selected = self.select(records)
        items = self.build_request_items(selected, claims_by_id)
        run.selected_ids = [item.question_id for item in items]

        logger.info(
            "leakage_validation_started",
            selected=len(items),
            total=len(records),
            threshold=self.settings.validation_trigger_threshold,
        )
        if not items:
            return run

        batches = build_batches(items, self.settings.batch_size)
        run.batches_total = len(batches)

        for batch_index, batch in enumerate(batches):
            batch_ids = {item.question_id for item in batch}
            try:
                response = self.judge.judge(batch)
                entries = list(response.entries or [])
                verdicts, dropped = self._collect_verdicts(entries, batch_ids, batch_index)
            except Exception as e:
                run.failed_batches.append(batch_index)
                logger.warning(
                    "leakage_validation_batch_failed",
                    batch_index=batch_index,
                    batch_items=len(batch),
                    error_type=getattr(e, "error_type", type(e).__name__),
                    error=str(e)[:200],
                )
                continue

            run.verdicts.update(verdicts)
            run.dropped_entries += dropped
            run.input_tokens += response.input_tokens
            run.output_tokens += response.output_tokens

            logger.info(
                "leakage_validation_batch_complete",
                batch_index=batch_index,
                batches_total=run.batches_total,
                requested=len(batch),
                verdicts=len(verdicts),
                missing=len(batch_ids - verdicts.keys()),
            )

        logger.info(
            "leakage_validation_finished",
            verdicts=len(run.verdicts),
            batches_total=run.batches_total,
            batches_failed=run.batches_failed,
            dropped_entries=run.dropped_entries,
        )
        return run
