# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Behavioral-pattern analyzer.

Secondary patterns in font-test telemetry act as soft, low-confidence
tie-breakers. Their weights are deliberately smaller than font-preference
or questionnaire evidence; they add resolution when the primary signals
are weak or contradictory.
"""

from neuroadapt.core.presets.analyzers.base import (
    AnalyzerResult,
    AssessmentEvidence,
    BaseAnalyzer,
)


class BehavioralPatternAnalyzer(BaseAnalyzer):
    """Detects response-style patterns across font trials.

    Patterns analyzed:
    - Uniformly high ratings (inattentive responding)
    - Rapid responses (impulsivity)
    - Slow, methodical responses
    - Many symptoms per trial (sensory load)
    - Few issues overall (standard preset may suffice)
    """

    @property
    def name(self) -> str:
        """Return analyzer name."""
        return "behavioral_patterns"

    @property
    def description(self) -> str:
        """Return analyzer description."""
        return "Looks for rating, latency and symptom-count patterns in font trials."

    def analyze(self, evidence: AssessmentEvidence) -> AnalyzerResult:
        """Analyze font-trial telemetry for behavioral patterns.

        Args:
            evidence: Classification input.

        Returns:
            AnalyzerResult; empty when there are no font trials.
        """
        if not evidence.has_font_trials:
            return AnalyzerResult.empty(self.name, "No font test data")

        cfg = self.config.behavioral
        trials = evidence.font_trials
        trial_count = len(trials)

        high_ratings = sum(
            1
            for t in trials
            if t.readability_rating is not None and t.readability_rating >= cfg.high_rating
        )
        latencies = [t.reading_time_ms for t in trials if t.reading_time_ms is not None]
        rapid_responses = sum(1 for ms in latencies if ms < cfg.fast_response_ms)
        # Trials without a latency count as zero toward the mean.
        mean_latency = sum(latencies) / trial_count
        total_symptoms = sum(t.symptom_count for t in trials)

        high_ratio = self._ratio(high_ratings, trial_count)
        rapid_ratio = self._ratio(rapid_responses, trial_count)

        result = self.new_result(sample_size=trial_count)
        data = {
            "trial_count": trial_count,
            "high_rating_ratio": round(high_ratio, 4),
            "rapid_response_ratio": round(rapid_ratio, 4),
            "mean_latency_ms": mean_latency,
            "total_symptoms": total_symptoms,
        }

        if high_ratio >= cfg.uniform_high_min_ratio:
            result.apply(
                cfg.uniform_high_boosts,
                category="pattern",
                description="Consistently high ratings across fonts",
                data=data,
            )

        if rapid_ratio >= cfg.rapid_min_ratio:
            result.apply(
                cfg.rapid_boosts,
                category="pattern",
                description="Mostly rapid responses",
                data=data,
            )

        if mean_latency > cfg.slow_response_ms:
            result.apply(
                cfg.slow_boosts,
                category="pattern",
                description="Slow, methodical responses",
                data=data,
            )

        if total_symptoms >= trial_count * cfg.symptoms_per_trial:
            result.apply(
                cfg.symptom_variety_boosts,
                category="pattern",
                description="Multiple symptoms reported per font",
                data=data,
            )

        if (
            high_ratio >= cfg.few_issues_min_ratio
            and total_symptoms < cfg.few_issues_max_symptoms
        ):
            result.apply(
                cfg.few_issues_boosts,
                category="pattern",
                description="Few reading issues reported",
                data=data,
            )

        result.summary = (
            f"{len(result.evidence)} behavioral pattern(s) detected."
            if result.evidence
            else "No behavioral pattern detected."
        )

        if result.evidence:
            self.logger.info(
                "Behavioral patterns detected",
                extra={
                    "user_id": evidence.user_id,
                    "patterns": [e.description for e in result.evidence],
                },
            )

        return result
