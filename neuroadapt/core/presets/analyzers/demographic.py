# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Demographic adjuster.

Adds a small constant to the standard preset so that, absent any other
evidence, classification settles on the balanced preset instead of an
arbitrary tie. Optional age-bracket priors are bounded by configuration.
"""

from neuroadapt.core.presets.analyzers.base import (
    AnalyzerResult,
    AssessmentEvidence,
    BaseAnalyzer,
)
from neuroadapt.core.presets.types import PresetId

# Representative age per bracket offered at sign-up
AGE_BRACKETS: dict[str, int] = {
    "5-8": 7,
    "9-12": 11,
    "13-16": 15,
    "17+": 18,
}
DEFAULT_AGE = 16


def estimate_age(age_bracket: str | None) -> int:
    """Representative age for an age bracket; DEFAULT_AGE when unknown."""
    if age_bracket is None:
        return DEFAULT_AGE
    return AGE_BRACKETS.get(age_bracket.strip(), DEFAULT_AGE)


class DemographicAdjuster(BaseAnalyzer):
    """Baseline nudge toward the standard preset plus age priors."""

    @property
    def name(self) -> str:
        """Return analyzer name."""
        return "demographic"

    @property
    def description(self) -> str:
        """Return analyzer description."""
        return "Adds the standard-preset floor bonus and bounded age priors."

    def analyze(self, evidence: AssessmentEvidence) -> AnalyzerResult:
        """Apply demographic adjustments.

        Args:
            evidence: Classification input.

        Returns:
            AnalyzerResult; always boosts the standard preset.
        """
        cfg = self.config.demographic
        bracket = evidence.age_bracket.strip() if evidence.age_bracket else None
        data = {"age_bracket": bracket, "estimated_age": estimate_age(bracket)}

        result = self.new_result(sample_size=1 if bracket else 0)
        result.apply(
            {PresetId.STANDARD: cfg.standard_bonus},
            category="demographic",
            description="Balanced preset floor bonus",
            data=data,
        )

        priors = cfg.age_priors.get(bracket, {}) if bracket else {}
        if priors:
            bounded = {preset: min(amount, cfg.max_prior) for preset, amount in priors.items()}
            result.apply(
                bounded,
                category="demographic",
                description=f"Age prior for bracket {bracket}",
                data=data,
            )

        result.summary = f"Demographic adjustment (age bracket: {bracket or 'unknown'})."
        return result
