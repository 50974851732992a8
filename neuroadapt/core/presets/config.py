# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preset rule configuration management.

All thresholds and weights used by the analyzers are fixed constants
derived from research heuristics, not learned values. They live in
DEFAULT_RULES and can be tuned per deployment through rules.yaml, which
is layered over the defaults.

Usage:
    from neuroadapt.core.presets.config import get_preset_config

    config = get_preset_config()
    print(config.baseline[PresetId.STANDARD])

    for rule in config.cluster_rules:
        print(rule.name, rule.conditions, rule.boosts)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable

from neuroadapt.core.config.settings import get_settings
from neuroadapt.core.config.yaml_loader import YAMLLoadError, deep_merge, load_yaml
from neuroadapt.core.presets.types import PresetId, QuestionDomain, ScoreCategory

logger = logging.getLogger(__name__)


DEFAULT_RULES: dict[str, Any] = {
    "baseline": {
        "standard": 15.0,
        "reading_support": 10.0,
        "focus_enhanced": 10.0,
        "focus_calm": 10.0,
        "social_simple": 10.0,
        "sensory_calm": 10.0,
    },
    "font_test": {
        "dyslexia_friendly_fonts": [
            "opendyslexic", "comic", "verdana", "calibri", "lexie", "dyslexie",
        ],
        "conventional_fonts": ["times", "arial", "helvetica", "georgia"],
        "friendly_high_rating": {"min_rating": 4, "weight": 2.0},
        "friendly_easy_weight": 1.5,
        "conventional_low_rating": {"max_rating": 2, "weight": 1.0},
        "conventional_hard_weight": 1.5,
        "symptom_weights": {
            "letters_move": 2.0,
            "words_blur_together": 1.5,
            "difficulty_focusing": 1.5,
            "eye_strain": 2.0,
        },
        "bands": [
            {"min_evidence": 3.0, "boosts": {"reading_support": 30.0}},
            {"min_evidence": 2.0, "boosts": {"reading_support": 20.0}},
            {"min_evidence": 1.0, "boosts": {"reading_support": 10.0, "sensory_calm": 8.0}},
        ],
        "no_reading_problem": {
            "below": 0.5,
            "boosts": {"focus_enhanced": 5.0, "focus_calm": 5.0, "social_simple": 5.0},
        },
        "pure_sensory": {
            "max_preference": 1.0,
            "min_symptoms": 2.0,
            "boosts": {"sensory_calm": 15.0},
        },
    },
    "questionnaire": {
        "rules": [
            {"name": "attention", "conditions": {"attention": 15}, "boosts": {"focus_enhanced": 25.0}},
            {
                "name": "attention_with_sensory",
                "conditions": {"attention": 15, "sensory": 12},
                "boosts": {"focus_calm": 20.0},
            },
            {"name": "reading", "conditions": {"reading": 12}, "boosts": {"reading_support": 30.0}},
            {"name": "social", "conditions": {"social": 14}, "boosts": {"social_simple": 25.0}},
            {"name": "sensory", "conditions": {"sensory": 12}, "boosts": {"sensory_calm": 20.0}},
        ],
    },
    "clusters": {
        "rules": [
            {
                "name": "adhd",
                "conditions": {"attention": 16, "sensory_processing": 10},
                "boosts": {"focus_enhanced": 20.0},
            },
            {
                "name": "dyslexia",
                "conditions": {"reading_difficulty": 14},
                "boosts": {"reading_support": 25.0},
            },
            {
                "name": "autism",
                "conditions": {"social_communication": 15, "sensory_processing": 13},
                "boosts": {"social_simple": 22.0},
            },
            {
                "name": "sensory_processing",
                "conditions": {"sensory_processing": 16},
                "boosts": {"sensory_calm": 25.0},
            },
        ],
    },
    "behavioral": {
        "high_rating": 4,
        "uniform_high_ratings": {
            "min_ratio": 0.8,
            "boosts": {"focus_enhanced": 8.0, "focus_calm": 6.0},
        },
        "rapid_responses": {
            "threshold_ms": 5000,
            "min_ratio": 0.6,
            "boosts": {"focus_enhanced": 12.0},
        },
        "slow_deliberation": {
            "threshold_ms": 15000,
            "boosts": {"social_simple": 10.0},
        },
        "symptom_variety": {
            "min_per_trial": 2.0,
            "boosts": {"sensory_calm": 15.0},
        },
        "few_issues": {
            "min_ratio": 0.9,
            "max_total_symptoms": 3,
            "boosts": {"standard": 8.0},
        },
    },
    "demographic": {
        "standard_bonus": 5.0,
        "max_prior": 5.0,
        "age_priors": {},
    },
    "traits": {
        "attention": 18,
        "reading_difficulty": 15,
        "social_communication": 16,
        "sensory_processing": 14,
        "motor_skills": 12,
    },
}


Boosts = dict[PresetId, float]


@dataclass(frozen=True)
class ThresholdRule:
    """A named combination of minimum scores that boosts presets.

    Attributes:
        name: Rule name used in the decision trace.
        conditions: Minimum value per key; all must hold.
        boosts: Amount added to each preset when the rule fires.
    """

    name: str
    conditions: dict[Enum, float]
    boosts: Boosts

    def matches(self, values: dict[Any, float]) -> bool:
        """Check whether every condition holds for the given values."""
        return all(values.get(key, 0) >= minimum for key, minimum in self.conditions.items())


@dataclass(frozen=True)
class EvidenceBand:
    """Font evidence band: applies when evidence >= min_evidence."""

    min_evidence: float
    boosts: Boosts


@dataclass(frozen=True)
class FontTestConfig:
    """Font-test evidence weights and bands."""

    dyslexia_friendly_fonts: tuple[str, ...]
    conventional_fonts: tuple[str, ...]
    friendly_min_rating: int
    friendly_high_rating_weight: float
    friendly_easy_weight: float
    conventional_max_rating: int
    conventional_low_rating_weight: float
    conventional_hard_weight: float
    symptom_weights: dict[str, float]
    bands: tuple[EvidenceBand, ...]
    no_reading_problem_below: float
    no_reading_problem_boosts: Boosts
    pure_sensory_max_preference: float
    pure_sensory_min_symptoms: float
    pure_sensory_boosts: Boosts

    def is_dyslexia_friendly(self, font_name: str) -> bool:
        """Check whether a font family is dyslexia-friendly."""
        name = font_name.lower()
        return any(keyword in name for keyword in self.dyslexia_friendly_fonts)

    def is_conventional(self, font_name: str) -> bool:
        """Check whether a font family is a conventional serif/sans font."""
        name = font_name.lower()
        return any(keyword in name for keyword in self.conventional_fonts)


@dataclass(frozen=True)
class BehavioralConfig:
    """Thresholds for behavioral patterns in font-test telemetry."""

    high_rating: int
    uniform_high_min_ratio: float
    uniform_high_boosts: Boosts
    fast_response_ms: int
    rapid_min_ratio: float
    rapid_boosts: Boosts
    slow_response_ms: int
    slow_boosts: Boosts
    symptoms_per_trial: float
    symptom_variety_boosts: Boosts
    few_issues_min_ratio: float
    few_issues_max_symptoms: int
    few_issues_boosts: Boosts


@dataclass(frozen=True)
class DemographicConfig:
    """Baseline nudge and optional age-bracket priors.

    Attributes:
        standard_bonus: Always added to the standard preset.
        max_prior: Upper bound for any single age prior.
        age_priors: Age bracket to per-preset bonus.
    """

    standard_bonus: float
    max_prior: float
    age_priors: dict[str, Boosts] = field(default_factory=dict)


@dataclass(frozen=True)
class PresetConfig:
    """Complete preset rule configuration."""

    baseline: Boosts
    font_test: FontTestConfig
    questionnaire_rules: tuple[ThresholdRule, ...]
    cluster_rules: tuple[ThresholdRule, ...]
    behavioral: BehavioralConfig
    demographic: DemographicConfig
    trait_thresholds: dict[ScoreCategory, int]


def _non_negative(value: Any, context: str) -> float:
    amount = float(value)
    if amount < 0:
        logger.warning(
            "Negative weight in preset rules clamped to 0",
            extra={"context": context, "value": amount},
        )
        return 0.0
    return amount


def _parse_boosts(data: dict[str, Any], context: str) -> Boosts:
    """Parse a preset -> amount mapping, skipping unknown presets."""
    boosts: Boosts = {}
    for key, value in (data or {}).items():
        try:
            preset = PresetId(key)
        except ValueError:
            logger.warning(
                "Unknown preset in rules skipped",
                extra={"context": context, "preset": key},
            )
            continue
        boosts[preset] = _non_negative(value, f"{context}.{key}")
    return boosts


def _parse_rules(
    data: list[dict[str, Any]],
    resolve_key: Callable[[Any], Enum | None],
    context: str,
) -> tuple[ThresholdRule, ...]:
    """Parse threshold rules, resolving condition keys to enum members."""
    rules: list[ThresholdRule] = []
    for index, rule_data in enumerate(data or []):
        name = str(rule_data.get("name", f"{context}_{index}"))
        conditions: dict[Enum, float] = {}
        for key, minimum in (rule_data.get("conditions") or {}).items():
            resolved = resolve_key(key)
            if resolved is None:
                logger.warning(
                    "Unknown condition key in rule skipped",
                    extra={"context": context, "rule": name, "key": key},
                )
                continue
            conditions[resolved] = float(minimum)
        if not conditions:
            logger.warning(
                "Rule without conditions ignored",
                extra={"context": context, "rule": name},
            )
            continue
        rules.append(
            ThresholdRule(
                name=name,
                conditions=conditions,
                boosts=_parse_boosts(rule_data.get("boosts", {}), f"{context}.{name}"),
            )
        )
    return tuple(rules)


def _parse_baseline(data: dict[str, Any]) -> Boosts:
    defaults = {PresetId(k): float(v) for k, v in DEFAULT_RULES["baseline"].items()}
    baseline = dict(defaults)
    for preset, value in _parse_boosts(data, "baseline").items():
        if value <= 0:
            logger.warning(
                "Baseline must be positive, default kept",
                extra={"preset": preset.value, "value": value},
            )
            continue
        baseline[preset] = value
    return baseline


def _parse_font_test(data: dict[str, Any]) -> FontTestConfig:
    high = data.get("friendly_high_rating", {})
    low = data.get("conventional_low_rating", {})
    no_problem = data.get("no_reading_problem", {})
    sensory = data.get("pure_sensory", {})

    bands = sorted(
        (
            EvidenceBand(
                min_evidence=float(band["min_evidence"]),
                boosts=_parse_boosts(band.get("boosts", {}), "font_test.bands"),
            )
            for band in data.get("bands", [])
        ),
        key=lambda band: band.min_evidence,
        reverse=True,
    )

    return FontTestConfig(
        dyslexia_friendly_fonts=tuple(f.lower() for f in data.get("dyslexia_friendly_fonts", [])),
        conventional_fonts=tuple(f.lower() for f in data.get("conventional_fonts", [])),
        friendly_min_rating=int(high.get("min_rating", 4)),
        friendly_high_rating_weight=_non_negative(high.get("weight", 0.0), "friendly_high_rating"),
        friendly_easy_weight=_non_negative(data.get("friendly_easy_weight", 0.0), "friendly_easy"),
        conventional_max_rating=int(low.get("max_rating", 2)),
        conventional_low_rating_weight=_non_negative(
            low.get("weight", 0.0), "conventional_low_rating"
        ),
        conventional_hard_weight=_non_negative(
            data.get("conventional_hard_weight", 0.0), "conventional_hard"
        ),
        symptom_weights={
            name: _non_negative(weight, f"symptom_weights.{name}")
            for name, weight in data.get("symptom_weights", {}).items()
        },
        bands=tuple(bands),
        no_reading_problem_below=float(no_problem.get("below", 0.0)),
        no_reading_problem_boosts=_parse_boosts(
            no_problem.get("boosts", {}), "font_test.no_reading_problem"
        ),
        pure_sensory_max_preference=float(sensory.get("max_preference", 0.0)),
        pure_sensory_min_symptoms=float(sensory.get("min_symptoms", 0.0)),
        pure_sensory_boosts=_parse_boosts(sensory.get("boosts", {}), "font_test.pure_sensory"),
    )


def _parse_behavioral(data: dict[str, Any]) -> BehavioralConfig:
    uniform = data.get("uniform_high_ratings", {})
    rapid = data.get("rapid_responses", {})
    slow = data.get("slow_deliberation", {})
    variety = data.get("symptom_variety", {})
    few = data.get("few_issues", {})

    return BehavioralConfig(
        high_rating=int(data.get("high_rating", 4)),
        uniform_high_min_ratio=float(uniform.get("min_ratio", 0.8)),
        uniform_high_boosts=_parse_boosts(uniform.get("boosts", {}), "behavioral.uniform"),
        fast_response_ms=int(rapid.get("threshold_ms", 5000)),
        rapid_min_ratio=float(rapid.get("min_ratio", 0.6)),
        rapid_boosts=_parse_boosts(rapid.get("boosts", {}), "behavioral.rapid"),
        slow_response_ms=int(slow.get("threshold_ms", 15000)),
        slow_boosts=_parse_boosts(slow.get("boosts", {}), "behavioral.slow"),
        symptoms_per_trial=float(variety.get("min_per_trial", 2.0)),
        symptom_variety_boosts=_parse_boosts(variety.get("boosts", {}), "behavioral.variety"),
        few_issues_min_ratio=float(few.get("min_ratio", 0.9)),
        few_issues_max_symptoms=int(few.get("max_total_symptoms", 3)),
        few_issues_boosts=_parse_boosts(few.get("boosts", {}), "behavioral.few_issues"),
    )


def _parse_demographic(data: dict[str, Any]) -> DemographicConfig:
    max_prior = _non_negative(data.get("max_prior", 5.0), "demographic.max_prior")
    age_priors: dict[str, Boosts] = {}
    for bracket, boosts in (data.get("age_priors") or {}).items():
        parsed = _parse_boosts(boosts, f"demographic.age_priors.{bracket}")
        age_priors[str(bracket)] = {
            preset: min(amount, max_prior) for preset, amount in parsed.items()
        }
    return DemographicConfig(
        standard_bonus=_non_negative(data.get("standard_bonus", 5.0), "demographic.standard_bonus"),
        max_prior=max_prior,
        age_priors=age_priors,
    )


def _parse_traits(data: dict[str, Any]) -> dict[ScoreCategory, int]:
    thresholds: dict[ScoreCategory, int] = {}
    for key, value in data.items():
        category = ScoreCategory.parse(key)
        if category is None:
            logger.warning("Unknown trait category skipped", extra={"category": key})
            continue
        thresholds[category] = int(value)
    return thresholds


def parse_preset_config(overrides: dict[str, Any] | None = None) -> PresetConfig:
    """Build a PresetConfig from overrides layered over DEFAULT_RULES.

    Args:
        overrides: Partial rule mapping (same shape as DEFAULT_RULES).

    Returns:
        PresetConfig instance.
    """
    data = deep_merge(DEFAULT_RULES, overrides or {})

    return PresetConfig(
        baseline=_parse_baseline(data.get("baseline", {})),
        font_test=_parse_font_test(data.get("font_test", {})),
        questionnaire_rules=_parse_rules(
            data.get("questionnaire", {}).get("rules", []),
            QuestionDomain.parse,
            "questionnaire",
        ),
        cluster_rules=_parse_rules(
            data.get("clusters", {}).get("rules", []),
            ScoreCategory.parse,
            "clusters",
        ),
        behavioral=_parse_behavioral(data.get("behavioral", {})),
        demographic=_parse_demographic(data.get("demographic", {})),
        trait_thresholds=_parse_traits(data.get("traits", {})),
    )


@lru_cache(maxsize=1)
def load_preset_config(config_path: str | None = None) -> PresetConfig:
    """Load preset rules from YAML, falling back to the built-in defaults.

    Uses LRU cache to avoid reloading on every access.
    Call `load_preset_config.cache_clear()` to reload.

    Args:
        config_path: Optional rules file override (as string for caching).

    Returns:
        PresetConfig instance.
    """
    path = Path(config_path) if config_path else get_settings().presets.rules_path

    logger.debug("Loading preset rules from: %s", path)

    try:
        rules_data = load_yaml(path)
    except YAMLLoadError as e:
        logger.warning("Failed to load preset rules, using defaults: %s", e)
        rules_data = {}

    config = parse_preset_config(rules_data.get("presets", {}))

    logger.info(
        "Loaded preset rules: %d questionnaire rules, %d cluster rules",
        len(config.questionnaire_rules),
        len(config.cluster_rules),
    )

    return config


def get_preset_config() -> PresetConfig:
    """Get the cached preset rule configuration."""
    return load_preset_config()


def reload_preset_config() -> PresetConfig:
    """Clear the cache and load fresh rule configuration."""
    load_preset_config.cache_clear()
    return load_preset_config()
