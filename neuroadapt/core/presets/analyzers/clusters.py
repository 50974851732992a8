# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Symptom-cluster analyzer.

Comorbid presentation is common, so these rules look at combinations of
stored category scores rather than single scores. The rule table comes
from configuration (see config/presets/rules.yaml).
"""

from neuroadapt.core.presets.analyzers.base import (
    AnalyzerResult,
    AssessmentEvidence,
    BaseAnalyzer,
)
from neuroadapt.core.presets.types import ScoreCategory


class SymptomClusterAnalyzer(BaseAnalyzer):
    """Applies research-pattern cluster rules to the CategoryScoreSet."""

    @property
    def name(self) -> str:
        """Return analyzer name."""
        return "symptom_clusters"

    @property
    def description(self) -> str:
        """Return analyzer description."""
        return "Matches stored category score combinations against cluster rules."

    def analyze(self, evidence: AssessmentEvidence) -> AnalyzerResult:
        """Analyze stored category scores.

        Args:
            evidence: Classification input.

        Returns:
            AnalyzerResult with one evidence item per fired cluster.
        """
        scores = evidence.category_scores
        values = {category: scores.get(category) for category in ScoreCategory}
        result = self.new_result(sample_size=len(values))

        for rule in self.config.cluster_rules:
            if not rule.matches(values):
                continue
            result.apply(
                rule.boosts,
                category="cluster",
                description=f"Cluster '{rule.name}' matched",
                data={key.value: values[key] for key in rule.conditions},
            )

        fired = [e.description for e in result.evidence]
        result.summary = "; ".join(fired) if fired else "No cluster matched."

        self.logger.debug(
            "Cluster analysis complete",
            extra={"user_id": evidence.user_id, "clusters_fired": len(fired)},
        )

        return result
