"""Rule-based leakage scoring.

This package contains:
- lexicon.py: Term categorization (generic / structural / domain / specific)
- overlap.py: Specific entity overlap and banned term checks
- phrases.py: Distinctive phrase matching
- patterns.py: Answer-in-question pattern detection
- rule_scorer.py: Main scoring orchestration
"""
from scoring.lexicon import (
    Lexicon,
    TermCategory,
    get_default_lexicon,
)
from scoring.overlap import (
    count_specific_overlap,
    find_banned_terms,
    find_specific_overlap,
)
from scoring.phrases import PhraseMatch, find_distinctive_phrase
from scoring.patterns import PatternMatch, detect_answer_embedding
from scoring.rule_scorer import (
    LeakageFeatures,
    RuleScoreResult,
    check_leakage,
    clamp_score,
    compute_leakage_score,
    score_question,
    score_questions,
)

__all__ = [
    # Lexicon
    "Lexicon",
    "TermCategory",
    "get_default_lexicon",
    # Detectors
    "count_specific_overlap",
    "find_banned_terms",
    "find_specific_overlap",
    "PhraseMatch",
    "find_distinctive_phrase",
    "PatternMatch",
    "detect_answer_embedding",
    # Main scorer
    "LeakageFeatures",
    "RuleScoreResult",
    "check_leakage",
    "clamp_score",
    "compute_leakage_score",
    "score_question",
    "score_questions",
]
