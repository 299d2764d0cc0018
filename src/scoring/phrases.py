"""Distinctive phrase detection.

Looks for 4-6 word sequences the question copies verbatim from the claim,
ignoring windows made mostly of stopwords or generic vocabulary.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from scoring.lexicon import Lexicon
from scoring.text import is_stop_word

MAX_PHRASE_WORDS = 6
MIN_PHRASE_WORDS = 4
MIN_MEANINGFUL_WORDS = 2


@dataclass(frozen=True)
class PhraseMatch:
    found: bool
    phrase: str = ""


NO_MATCH = PhraseMatch(found=False)


def find_distinctive_phrase(
    question_words: Sequence[str],
    claim_words: Sequence[str],
    lexicon: Lexicon,
) -> PhraseMatch:
    """Return the longest, left-most distinctive phrase shared with the claim.

    Both inputs must already be normalized (see ``scoring.text.normalize_words``).
    """
    claim_text = " ".join(claim_words)
    if not claim_text:
        return NO_MATCH

    for length in range(MAX_PHRASE_WORDS, MIN_PHRASE_WORDS - 1, -1):
        for i in range(len(question_words) - length + 1):
            window = question_words[i:i + length]

            meaningful = [w for w in window if not is_stop_word(w) and not lexicon.is_generic(w)]
            if len(meaningful) < MIN_MEANINGFUL_WORDS:
                continue

            phrase = " ".join(window)
            if phrase in claim_text:
                return PhraseMatch(found=True, phrase=phrase)

    return NO_MATCH
