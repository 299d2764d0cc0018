"""Lexicon classifier for leakage detection.

Sorts a term into one of four categories. Only ``specific_identifier``
terms count as direct leakage; everything else is vocabulary an analyst
could use without knowing the answer.

Term lists live in ``config/lexicon.yaml`` and are loaded once into
frozensets. A different corpus can inject its own lists via
``Lexicon.from_yaml`` or the constructor.
"""
from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Iterable

import structlog
import yaml

from config.loader import get_domain_match_mode, get_lexicon_path
from scoring.text import collapse_whitespace

logger = structlog.get_logger(__name__)

DEFAULT_PHRASE_PATTERN = r"^(the |a |an )?[a-z]+ (proposal|modification|concern|recommendation)$"

DOMAIN_MATCH_BOUNDARY = "boundary"
DOMAIN_MATCH_SUBSTRING = "substring"


class TermCategory(str, Enum):
    GENERIC_ACTOR = "generic_actor"
    STRUCTURAL_TERM = "structural_term"
    DOMAIN_VOCABULARY = "domain_vocabulary"
    SPECIFIC_IDENTIFIER = "specific_identifier"


def _contains_phrase(haystack: str, needle: str) -> bool:
    """True if ``needle`` occurs in ``haystack`` on word boundaries."""
    return re.search(rf"(?<!\w){re.escape(needle)}(?!\w)", haystack) is not None


class Lexicon:
    """Immutable term lists plus the classification rules over them."""

    def __init__(
        self,
        generic_actors: Iterable[str] = (),
        structural_terms: Iterable[str] = (),
        domain_vocabulary: Iterable[str] = (),
        phrase_pattern: str = DEFAULT_PHRASE_PATTERN,
        domain_match: str = DOMAIN_MATCH_BOUNDARY,
    ):
        if domain_match not in (DOMAIN_MATCH_BOUNDARY, DOMAIN_MATCH_SUBSTRING):
            raise ValueError(f"Unknown domain_match mode: {domain_match!r}")

        self._generic_actors = self._clean(generic_actors)
        self._structural_terms = self._clean(structural_terms)
        self._domain_vocabulary = self._clean(domain_vocabulary)
        self._phrase_pattern = re.compile(phrase_pattern, re.IGNORECASE)
        self._domain_match = domain_match

    @staticmethod
    def _clean(terms: Iterable[str]) -> frozenset[str]:
        return frozenset(
            collapse_whitespace(t) for t in terms if isinstance(t, str) and t.strip()
        )

    @classmethod
    def from_yaml(cls, path: Path | str, domain_match: str | None = None) -> Lexicon:
        """Load term lists from a YAML file."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        lexicon = cls(
            generic_actors=data.get("generic_actors") or [],
            structural_terms=data.get("structural_terms") or [],
            domain_vocabulary=data.get("domain_vocabulary") or [],
            phrase_pattern=data.get("phrase_pattern") or DEFAULT_PHRASE_PATTERN,
            domain_match=domain_match or data.get("domain_match") or DOMAIN_MATCH_BOUNDARY,
        )
        logger.info(
            "lexicon_loaded",
            path=str(path),
            generic_actors=len(lexicon.generic_actors),
            structural_terms=len(lexicon.structural_terms),
            domain_vocabulary=len(lexicon.domain_vocabulary),
            domain_match=lexicon.domain_match,
        )
        return lexicon

    @property
    def generic_actors(self) -> frozenset[str]:
        return self._generic_actors

    @property
    def structural_terms(self) -> frozenset[str]:
        return self._structural_terms

    @property
    def domain_vocabulary(self) -> frozenset[str]:
        return self._domain_vocabulary

    @property
    def domain_match(self) -> str:
        return self._domain_match

    def _matches_domain_vocabulary(self, term: str) -> bool:
        for vocab in self._domain_vocabulary:
            if self._domain_match == DOMAIN_MATCH_SUBSTRING:
                if vocab in term or term in vocab:
                    return True
            elif _contains_phrase(term, vocab) or _contains_phrase(vocab, term):
                return True
        return False

    def classify(self, term: str) -> TermCategory:
        """Categorize a term. SPECIFIC_IDENTIFIER is the default category."""
        lower = collapse_whitespace(term) if isinstance(term, str) else ""
        if not lower:
            return TermCategory.SPECIFIC_IDENTIFIER

        if lower in self._generic_actors:
            return TermCategory.GENERIC_ACTOR
        if lower in self._structural_terms:
            return TermCategory.STRUCTURAL_TERM
        if self._matches_domain_vocabulary(lower):
            return TermCategory.DOMAIN_VOCABULARY
        if self._phrase_pattern.match(lower):
            return TermCategory.STRUCTURAL_TERM
        return TermCategory.SPECIFIC_IDENTIFIER

    def is_generic(self, term: str) -> bool:
        """True for every category except SPECIFIC_IDENTIFIER."""
        return self.classify(term) is not TermCategory.SPECIFIC_IDENTIFIER


@lru_cache(maxsize=1)
def get_default_lexicon() -> Lexicon:
    """Lexicon loaded from the configured YAML file (loaded once)."""
    path = get_lexicon_path()
    if not path.exists():
        logger.warning("lexicon_file_not_found", path=str(path))
        return Lexicon(domain_match=get_domain_match_mode())
    return Lexicon.from_yaml(path, domain_match=get_domain_match_mode())
