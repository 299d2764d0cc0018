"""Text normalization helpers shared by the leakage detectors."""
from __future__ import annotations

import re

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "be",
    "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "could", "should", "may", "might", "must", "shall", "can",
    "that", "which", "who", "whom", "this", "these", "those", "it", "its",
    "what", "when", "where", "why", "how", "about", "regarding", "concerning",
})


def normalize_text(text: str) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace."""
    text = _NON_WORD.sub(" ", (text or "").lower())
    return _WHITESPACE.sub(" ", text).strip()


def normalize_words(text: str) -> list[str]:
    """Split normalized text into words."""
    normalized = normalize_text(text)
    return normalized.split(" ") if normalized else []


def collapse_whitespace(text: str) -> str:
    """Lowercase and collapse whitespace, keeping punctuation."""
    return _WHITESPACE.sub(" ", (text or "").lower()).strip()


def is_stop_word(word: str) -> bool:
    return word.lower() in STOP_WORDS
