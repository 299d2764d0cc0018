"""Aggregate leakage report across a batch of questions."""
from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from models.leakage import (
    FlaggedQuestion,
    LeakageRecord,
    LeakageReport,
    ValidationSummary,
    ValidationVerdict,
)
from models.questions import Question
from models.shared import ConfidenceTier, Verdict

if TYPE_CHECKING:
    from validation.batch_validator import ValidationRun

logger = structlog.get_logger(__name__)


def filter_low_leakage(questions: list[Question], threshold: float = 0.3) -> list[Question]:
    """Questions safe to keep (score at or below the threshold)."""
    return [q for q in questions if q.leakage_score <= threshold]


def get_high_leakage_questions(questions: list[Question], threshold: float = 0.3) -> list[Question]:
    """Questions a caller may want to regenerate (score above the threshold)."""
    return [q for q in questions if q.leakage_score > threshold]


def summarize_validation(
    verdicts: list[ValidationVerdict],
    run: "ValidationRun | None" = None,
) -> ValidationSummary:
    """OK/LEAK counts plus the ids of high-confidence and borderline leaks."""
    summary = ValidationSummary(validated=len(verdicts))

    for verdict in verdicts:
        if verdict.verdict == Verdict.OK:
            summary.ok_count += 1
            continue
        summary.leak_count += 1
        if verdict.confidence == ConfidenceTier.HIGH:
            summary.high_confidence_leaks.append(verdict.question_id)
        else:
            summary.borderline.append(verdict.question_id)

    if run is not None:
        summary.selected = len(run.selected_ids)
        summary.batches_total = run.batches_total
        summary.batches_failed = run.batches_failed
        summary.input_tokens = run.input_tokens
        summary.output_tokens = run.output_tokens

    return summary


def _flag(record: LeakageRecord) -> FlaggedQuestion:
    flagged = FlaggedQuestion(
        question_id=record.question_id,
        score=record.final_score,
        signals=record.fired_signals,
        issues=record.signal.issues() if record.signal else [],
        claim_id=record.signal.claim_id if record.signal else "",
    )
    if record.verdict is not None:
        flagged.verdict = record.verdict.verdict.value
        flagged.verdict_confidence = record.verdict.confidence.value
        flagged.verdict_reason = record.verdict.reason
    return flagged


def build_report(
    records: list[LeakageRecord],
    flag_threshold: float = 0.3,
    run: "ValidationRun | None" = None,
) -> LeakageReport:
    """Summarize finalized records: count, flagged items and mean score."""
    count = len(records)
    flagged = [_flag(r) for r in records if r.final_score > flag_threshold]
    average = sum(r.final_score for r in records) / count if count else 0.0

    report = LeakageReport(
        count=count,
        flagged_count=len(flagged),
        average_score=average,
        flag_threshold=flag_threshold,
        flagged=flagged,
    )

    if run is not None:
        verdicts = [r.verdict for r in records if r.verdict is not None]
        report.validation = summarize_validation(verdicts, run)

    logger.info(
        "leakage_report_built",
        count=count,
        flagged_count=report.flagged_count,
        average_score=round(average, 3),
    )
    return report
