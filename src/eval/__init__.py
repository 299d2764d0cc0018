"""Eval module for aggregate leakage reporting."""
from eval.aggregator import (
    build_report,
    filter_low_leakage,
    get_high_leakage_questions,
    summarize_validation,
)

__all__ = [
    "build_report",
    "filter_low_leakage",
    "get_high_leakage_questions",
    "summarize_validation",
]
