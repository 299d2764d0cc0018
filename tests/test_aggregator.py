"""Tests for aggregate leakage reporting."""
from __future__ import annotations

import pytest

from eval.aggregator import (
    build_report,
    filter_low_leakage,
    get_high_leakage_questions,
    summarize_validation,
)
from models.leakage import LeakageRecord, LeakageSignal, ValidationVerdict
from validation.batch_validator import ValidationRun

from helpers import make_question


def make_record(question_id: str, final_score: float, **kwargs) -> LeakageRecord:
    question = make_question(question_id, f"Question {question_id}?", leakage_score=final_score)
    return LeakageRecord(question=question, rule_score=final_score, final_score=final_score, **kwargs)


class TestBuildReport:
    def test_empty_batch(self) -> None:
        report = build_report([])
        assert report.count == 0
        assert report.flagged_count == 0
        assert report.average_score == 0.0
        assert report.flagged == []

    def test_flags_strictly_above_threshold(self) -> None:
        signal = LeakageSignal(claim_id="c1", distinctive_phrase=True, phrase="plans to produce tanks")
        records = [
            make_record("q1", 0.3),
            make_record("q2", 0.35, signal=signal),
            make_record("q3", 0.1),
        ]

        report = build_report(records, flag_threshold=0.3)

        assert report.count == 3
        assert report.flagged_count == 1
        assert report.average_score == pytest.approx(0.25)
        flagged = report.flagged[0]
        assert flagged.question_id == "q2"
        assert flagged.claim_id == "c1"
        assert flagged.signals == ["distinctive_phrase"]
        assert flagged.issues == ['Distinctive phrase: "plans to produce tanks"']
        assert report.validation is None

    def test_flagged_carries_verdict(self) -> None:
        verdict = ValidationVerdict(question_id="q1", verdict="LEAK", confidence="high", reason="Restates")
        report = build_report([make_record("q1", 0.6, verdict=verdict)], run=ValidationRun())

        assert report.flagged[0].verdict == "LEAK"
        assert report.flagged[0].verdict_confidence == "high"
        assert report.flagged[0].verdict_reason == "Restates"
        assert report.validation is not None
        assert report.validation.leak_count == 1


class TestSummarizeValidation:
    def test_counts_and_groups(self) -> None:
        verdicts = [
            ValidationVerdict(question_id="q1", verdict="LEAK", confidence="high"),
            ValidationVerdict(question_id="q2", verdict="LEAK", confidence="low"),
            ValidationVerdict(question_id="q3", verdict="OK", confidence="medium"),
        ]
        run = ValidationRun(selected_ids=["q1", "q2", "q3", "q4"], batches_total=2, failed_batches=[1])

        summary = summarize_validation(verdicts, run)

        assert summary.validated == 3
        assert summary.leak_count == 2
        assert summary.ok_count == 1
        assert summary.high_confidence_leaks == ["q1"]
        assert summary.borderline == ["q2"]
        assert summary.selected == 4
        assert summary.batches_failed == 1


class TestFilters:
    def test_partition_by_threshold(self) -> None:
        questions = [
            make_question("q1", "A?", leakage_score=0.1),
            make_question("q2", "B?", leakage_score=0.3),
            make_question("q3", "C?", leakage_score=0.7),
        ]

        assert [q.question_id for q in filter_low_leakage(questions)] == ["q1", "q2"]
        assert [q.question_id for q in get_high_leakage_questions(questions)] == ["q3"]
        assert [q.question_id for q in get_high_leakage_questions(questions, threshold=0.05)] == ["q1", "q2", "q3"]
