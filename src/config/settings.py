"""Typed leakage settings built from the pipeline configuration.

Every value has a default matching ``pipeline_config.yaml`` so the engine
works without any config file; callers override individual fields by
constructing the dataclasses directly.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from config.loader import (
    get_batch_size,
    get_flag_threshold,
    get_judge_config,
    get_reconciliation_config,
    get_scoring_config,
    get_validation_trigger_threshold,
)
from models.shared import ConfidenceTier, QuestionStyle


def _default_style_discounts() -> dict[QuestionStyle, float]:
    return {
        QuestionStyle.TARGETED: 1.0,
        QuestionStyle.CONTEXTUAL: 0.6,
        QuestionStyle.THEMATIC: 0.6,
    }


def _default_leak_floors() -> dict[ConfidenceTier, float]:
    return {
        ConfidenceTier.HIGH: 0.6,
        ConfidenceTier.MEDIUM: 0.45,
        ConfidenceTier.LOW: 0.35,
    }


def _default_ok_ceilings() -> dict[ConfidenceTier, float]:
    return {
        ConfidenceTier.HIGH: 0.15,
        ConfidenceTier.MEDIUM: 0.25,
        ConfidenceTier.LOW: 0.30,
    }


def _check_unit_interval(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must lie in [0, 1], got {value}")


@dataclass(frozen=True)
class ScoringWeights:
    """Per-signal weights and caps for the rule-based scorer."""
    specific_overlap_weight: float = 0.2
    specific_overlap_cap: float = 0.4
    distinctive_phrase_weight: float = 0.35
    answer_embedded_weight: float = 0.4
    banned_term_weight: float = 0.1
    banned_term_cap: float = 0.3
    style_discounts: dict[QuestionStyle, float] = field(default_factory=_default_style_discounts)

    def __post_init__(self) -> None:
        for style, discount in self.style_discounts.items():
            _check_unit_interval(f"style_discounts[{style.value}]", discount)

    def discount_for(self, style: QuestionStyle) -> float:
        return self.style_discounts.get(style, 1.0)


@dataclass(frozen=True)
class ReconciliationBounds:
    """Floors applied on LEAK verdicts and ceilings applied on OK verdicts."""
    leak_floors: dict[ConfidenceTier, float] = field(default_factory=_default_leak_floors)
    ok_ceilings: dict[ConfidenceTier, float] = field(default_factory=_default_ok_ceilings)

    def __post_init__(self) -> None:
        for name, bounds in (("leak_floors", self.leak_floors), ("ok_ceilings", self.ok_ceilings)):
            for tier in ConfidenceTier:
                value = bounds.get(tier)
                if value is None:
                    raise ValueError(f"{name} is missing the {tier.value!r} tier")
                _check_unit_interval(f"{name}[{tier.value}]", value)


@dataclass(frozen=True)
class JudgeSettings:
    """Retry policy owned by the semantic judge client."""
    max_retries: int = 3
    retry_backoff_base: float = 2.0
    request_timeout_seconds: float = 120.0


@dataclass(frozen=True)
class LeakageSettings:
    """All tunables of one scoring run."""
    flag_threshold: float = 0.3
    validation_trigger_threshold: float = 0.1
    batch_size: int = 25
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    bounds: ReconciliationBounds = field(default_factory=ReconciliationBounds)

    def __post_init__(self) -> None:
        _check_unit_interval("flag_threshold", self.flag_threshold)
        _check_unit_interval("validation_trigger_threshold", self.validation_trigger_threshold)
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")


def _tier_map(raw: dict, defaults: dict[ConfidenceTier, float]) -> dict[ConfidenceTier, float]:
    return {tier: float(raw.get(tier.value, defaults[tier])) for tier in ConfidenceTier}


def get_scoring_weights() -> ScoringWeights:
    """Build scoring weights from the ``leakage.scoring`` section."""
    raw = get_scoring_config() or {}
    defaults = ScoringWeights()
    raw_discounts = raw.get("style_discounts") or {}
    discounts = {
        style: float(raw_discounts.get(style.value, defaults.style_discounts[style]))
        for style in QuestionStyle
    }
    return ScoringWeights(
        specific_overlap_weight=float(raw.get("specific_overlap_weight", defaults.specific_overlap_weight)),
        specific_overlap_cap=float(raw.get("specific_overlap_cap", defaults.specific_overlap_cap)),
        distinctive_phrase_weight=float(raw.get("distinctive_phrase_weight", defaults.distinctive_phrase_weight)),
        answer_embedded_weight=float(raw.get("answer_embedded_weight", defaults.answer_embedded_weight)),
        banned_term_weight=float(raw.get("banned_term_weight", defaults.banned_term_weight)),
        banned_term_cap=float(raw.get("banned_term_cap", defaults.banned_term_cap)),
        style_discounts=discounts,
    )


def get_reconciliation_bounds() -> ReconciliationBounds:
    """Build reconciliation floors/ceilings from ``leakage.reconciliation``."""
    raw = get_reconciliation_config() or {}
    return ReconciliationBounds(
        leak_floors=_tier_map(raw.get("leak_floors") or {}, _default_leak_floors()),
        ok_ceilings=_tier_map(raw.get("ok_ceilings") or {}, _default_ok_ceilings()),
    )


def get_judge_settings() -> JudgeSettings:
    """Build judge retry settings from the ``judge`` section."""
    raw = get_judge_config() or {}
    defaults = JudgeSettings()
    return JudgeSettings(
        max_retries=int(raw.get("max_retries", defaults.max_retries)),
        retry_backoff_base=float(raw.get("retry_backoff_base", defaults.retry_backoff_base)),
        request_timeout_seconds=float(raw.get("request_timeout_seconds", defaults.request_timeout_seconds)),
    )


def get_leakage_settings() -> LeakageSettings:
    """Build the full settings object from the loaded pipeline config."""
    return LeakageSettings(
        flag_threshold=float(get_flag_threshold()),
        validation_trigger_threshold=float(get_validation_trigger_threshold()),
        batch_size=int(get_batch_size()),
        weights=get_scoring_weights(),
        bounds=get_reconciliation_bounds(),
    )
