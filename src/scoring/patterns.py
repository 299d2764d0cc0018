"""Answer-in-question pattern detection.

Patterns are evaluated in a fixed priority order and the first match wins:

1. A multi-digit number from the claim appears in the question
2. A percentage from the claim appears in the question
3. A yes/no question that restates the claim
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from models.shared import AnswerType
from scoring.text import is_stop_word, normalize_words

# Two or more digits, thousands separators allowed inside ("1,500")
NUMBER_PATTERN = re.compile(r"\b\d[\d,]*\d\b")
YEAR_PATTERN = re.compile(r"^(1[5-9]\d\d|20\d\d)$")
MONTHS = (
    "january|february|march|april|may|june|july|august|september|october|november|december|"
    "jan|feb|mar|apr|jun|jul|aug|sep|sept|oct|nov|dec"
)
# Words that mark a year as a time window ("in early 1975", "since 1980", "March 3, 1975")
TIME_CONTEXT = rf"(?:\b(?:in|early|late|mid|since|before|after|by)[\s-]+|\b(?:{MONTHS})\.?\s+(?:\d{{1,2}},?\s+)?)"
# A year can be the answer itself for these
YEAR_ANSWER_TYPES = frozenset({AnswerType.WHEN, AnswerType.NUMERIC})
PERCENT_PATTERN = re.compile(r"(\d+(?:[.,]\d+)*)\s*(?:percent\b|per\s+cent\b|%)", re.IGNORECASE)
YES_NO_PREFIX = re.compile(
    r"^(did|does|is|was|were|has|have|will|would|could|should)\s+", re.IGNORECASE
)

RESTATEMENT_OVERLAP_THRESHOLD = 0.5


@dataclass(frozen=True)
class PatternMatch:
    found: bool
    reason: str = ""


NO_MATCH = PatternMatch(found=False)


def _numbers(text: str) -> list[str]:
    return NUMBER_PATTERN.findall(text or "")


def _percentages(text: str) -> dict[str, str]:
    """Canonical "<n> percent" form mapped to the first raw spelling seen."""
    found: dict[str, str] = {}
    for m in PERCENT_PATTERN.finditer(text or ""):
        found.setdefault(f"{m.group(1)} percent", m.group(0))
    return found


def compute_word_overlap(question_words: list[str], claim_words: list[str]) -> float:
    """Fraction of the question's distinct content words found in the claim."""
    q_set = {w for w in question_words if not is_stop_word(w)}
    c_set = {w for w in claim_words if not is_stop_word(w)}
    if not q_set:
        return 0.0
    return len(q_set & c_set) / len(q_set)


def _is_time_window_year(num: str, question_text: str, answer_type: AnswerType) -> bool:
    if answer_type in YEAR_ANSWER_TYPES or not YEAR_PATTERN.match(num):
        return False
    pattern = rf"{TIME_CONTEXT}{re.escape(num)}\b"
    return re.search(pattern, question_text or "", re.IGNORECASE) is not None


def check_shared_number(
    question_text: str,
    claim_text: str,
    answer_type: AnswerType = AnswerType.WHAT,
) -> PatternMatch:
    """Claim numbers repeated in the question.

    A year the question places in a time context ("in early 1975") is a
    time-window hint rather than an answer, unless the question asks "when"
    or for a number.
    """
    question_numbers = set(_numbers(question_text))
    for num in _numbers(claim_text):
        if num not in question_numbers:
            continue
        if _is_time_window_year(num, question_text, answer_type):
            continue
        return PatternMatch(found=True, reason=f'Contains number "{num}" from claim')
    return NO_MATCH


def check_shared_percentage(question_text: str, claim_text: str) -> PatternMatch:
    question_pcts = _percentages(question_text)
    for canonical, raw in _percentages(claim_text).items():
        if canonical in question_pcts:
            return PatternMatch(found=True, reason=f'Contains percentage "{raw}" from claim')
    return NO_MATCH


def check_yes_no_restatement(question_text: str, claim_text: str) -> PatternMatch:
    """Yes/no questions whose content words mostly come from the claim."""
    stripped = (question_text or "").strip()
    if not YES_NO_PREFIX.match(stripped):
        return NO_MATCH

    rest = YES_NO_PREFIX.sub("", stripped, count=1)
    overlap = compute_word_overlap(normalize_words(rest), normalize_words(claim_text))
    if overlap > RESTATEMENT_OVERLAP_THRESHOLD:
        return PatternMatch(found=True, reason="Yes/no question restates claim")
    return NO_MATCH


def detect_answer_embedding(
    question_text: str,
    claim_text: str,
    answer_type: AnswerType = AnswerType.WHAT,
) -> PatternMatch:
    """Run the answer-embedding patterns in priority order."""
    match = check_shared_number(question_text, claim_text, answer_type)
    if match.found:
        return match

    match = check_shared_percentage(question_text, claim_text)
    if match.found:
        return match

    return check_yes_no_restatement(question_text, claim_text)
