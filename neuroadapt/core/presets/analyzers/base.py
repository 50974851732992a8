# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base analyzer classes for preset classification.

Every analyzer receives the same immutable AssessmentEvidence and returns
its own AnalyzerResult: a non-negative delta per preset plus the evidence
that explains it. Analyzers never read each other's output, so their
contributions can be merged in any order.

IMPORTANT: Analyzers produce UI adaptation hints, not diagnoses.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from neuroadapt.core.presets.config import Boosts, PresetConfig
from neuroadapt.core.presets.types import CategoryScoreSet, FontTrialRecord, PresetId


def _make_json_serializable(obj: Any) -> Any:
    """Recursively convert evidence payloads to JSON-serializable types.

    Handles enums (by value), sets, tuples, Decimal and datetime.
    """
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset, tuple, list)):
        return [_make_json_serializable(item) for item in obj]
    if isinstance(obj, Mapping):
        return {
            str(_make_json_serializable(k)): _make_json_serializable(v)
            for k, v in obj.items()
        }
    return str(obj)


@dataclass
class Evidence:
    """One fired rule or observed pattern.

    Attributes:
        category: Rule family (e.g. "font_band", "cluster", "pattern").
        description: Human-readable description.
        data: Values that made the rule fire.
        weight: Total score this evidence added across presets.
    """

    category: str
    description: str
    data: dict[str, Any] = field(default_factory=dict)
    weight: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert evidence to a JSON-safe dictionary."""
        return {
            "category": self.category,
            "description": self.description,
            "data": _make_json_serializable(self.data),
            "weight": self.weight,
        }


@dataclass
class AnalyzerResult:
    """Score deltas contributed by one analyzer.

    Attributes:
        analyzer: Name of the analyzer that produced the result.
        deltas: Non-negative amount added per preset.
        evidence: Evidence explaining each delta.
        sample_size: Number of data points analyzed.
        summary: Brief summary of the analysis.
    """

    analyzer: str
    deltas: dict[PresetId, float] = field(default_factory=dict)
    evidence: list[Evidence] = field(default_factory=list)
    sample_size: int = 0
    summary: str = ""

    @classmethod
    def empty(cls, analyzer: str, summary: str = "No evidence") -> "AnalyzerResult":
        """Create a result that contributes nothing."""
        return cls(analyzer=analyzer, summary=summary)

    def add(self, preset: PresetId, amount: float) -> None:
        """Add a delta for a preset.

        Raises:
            ValueError: If amount is negative.
        """
        if amount < 0:
            raise ValueError(
                f"{self.analyzer} produced a negative delta for {preset.value}: {amount}"
            )
        self.deltas[preset] = self.deltas.get(preset, 0.0) + amount

    def apply(
        self,
        boosts: Boosts,
        category: str,
        description: str,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Add every boost of a fired rule and record why it fired."""
        for preset, amount in boosts.items():
            self.add(preset, amount)
        self.evidence.append(
            Evidence(
                category=category,
                description=description,
                data={**(data or {}), "boosts": dict(boosts)},
                weight=sum(boosts.values()),
            )
        )

    @property
    def total(self) -> float:
        """Sum of all deltas."""
        return sum(self.deltas.values())

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "analyzer": self.analyzer,
            "deltas": {preset.value: amount for preset, amount in self.deltas.items()},
            "evidence": [e.to_dict() for e in self.evidence],
            "sample_size": self.sample_size,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class AssessmentEvidence:
    """Everything one classification run may look at.

    Attributes:
        user_id: User being classified (for logging only).
        category_scores: Stored aggregate category scores.
        font_trials: Font-test history, oldest or newest first.
        responses: Question id to normalized response.
        question_domains: Question id to domain tag from the catalog.
        age_bracket: Optional age bracket such as "9-12".
    """

    user_id: str | int | None = None
    category_scores: CategoryScoreSet = field(default_factory=CategoryScoreSet)
    font_trials: tuple[FontTrialRecord, ...] = ()
    responses: Mapping[str, int] = field(default_factory=dict)
    question_domains: Mapping[str, str] = field(default_factory=dict)
    age_bracket: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "font_trials", tuple(self.font_trials))
        object.__setattr__(self, "responses", dict(self.responses))
        object.__setattr__(self, "question_domains", dict(self.question_domains))

    @property
    def trial_count(self) -> int:
        """Number of font trials."""
        return len(self.font_trials)

    @property
    def has_font_trials(self) -> bool:
        """Check whether any font-test data exists."""
        return bool(self.font_trials)


class BaseAnalyzer(ABC):
    """Abstract base class for preset evidence analyzers.

    Analyzers are rule-based and stateless apart from their configuration,
    so one instance can serve concurrent classification runs.
    """

    def __init__(self, config: PresetConfig | None = None) -> None:
        """Initialize the analyzer.

        Args:
            config: Rule configuration. Loaded from YAML on first use
                when omitted.
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._config = config

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the analyzer name used in decision traces."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Return description of what this analyzer looks at."""
        pass

    @property
    def config(self) -> PresetConfig:
        """Get rule configuration, loading it lazily."""
        if self._config is None:
            from neuroadapt.core.presets.config import get_preset_config

            self._config = get_preset_config()
        return self._config

    @abstractmethod
    def analyze(self, evidence: AssessmentEvidence) -> AnalyzerResult:
        """Compute this analyzer's score deltas.

        Args:
            evidence: Immutable input of the classification run.

        Returns:
            AnalyzerResult with non-negative deltas and evidence.
        """
        pass

    def new_result(self, sample_size: int = 0) -> AnalyzerResult:
        """Create an empty result tagged with this analyzer's name."""
        return AnalyzerResult(analyzer=self.name, sample_size=sample_size)

    @staticmethod
    def _ratio(count: int, total: int) -> float:
        """Safe ratio; 0.0 when total is zero."""
        if total == 0:
            return 0.0
        return count / total
