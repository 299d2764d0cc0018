"""Semantic validation pass: judge interface, batch validator, reconciler."""
from validation.judge import JudgeRequestItem, JudgeResponse, SemanticJudge
from validation.batch_validator import (
    BatchSemanticValidator,
    ValidationRun,
    build_batches,
    parse_verdict_entry,
)
from validation.reconciler import reconcile_score, reconcile_scores

__all__ = [
    "JudgeRequestItem",
    "JudgeResponse",
    "SemanticJudge",
    "BatchSemanticValidator",
    "ValidationRun",
    "build_batches",
    "parse_verdict_entry",
    "reconcile_score",
    "reconcile_scores",
]
