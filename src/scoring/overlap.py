"""Term overlap checks between a question and its target claim."""
from __future__ import annotations

from typing import Iterable

from scoring.lexicon import Lexicon

# Entities shorter than this are too ambiguous to count as leakage
MIN_ENTITY_LENGTH = 3


def find_specific_overlap(
    question_text: str,
    entities: Iterable[str],
    lexicon: Lexicon,
) -> list[str]:
    """Claim entities that are specific identifiers and appear in the question.

    Matching is a case-insensitive substring test. Entities are counted once
    per mention in the claim's entity list, which is not deduplicated.
    """
    q_lower = (question_text or "").lower()
    matched: list[str] = []

    for entity in entities:
        if not isinstance(entity, str):
            continue
        entity = entity.strip()
        if len(entity) < MIN_ENTITY_LENGTH:
            continue
        if lexicon.is_generic(entity):
            continue
        if entity.lower() in q_lower:
            matched.append(entity)

    return matched


def count_specific_overlap(question_text: str, entities: Iterable[str], lexicon: Lexicon) -> int:
    """Number of specific claim entities present in the question."""
    return len(find_specific_overlap(question_text, entities, lexicon))


def find_banned_terms(question_text: str, banned_terms: Iterable[str], lexicon: Lexicon) -> list[str]:
    """Generator-banned terms present in the question, excluding generic ones."""
    q_lower = (question_text or "").lower()
    found: list[str] = []

    for term in banned_terms:
        if not isinstance(term, str) or not term.strip():
            continue
        term = term.strip()
        if term.lower() in q_lower and not lexicon.is_generic(term):
            found.append(term)

    return found
