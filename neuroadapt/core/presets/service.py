# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preset classification service.

Runs every analyzer over the same assessment evidence, sums their deltas
on top of the baseline scores, selects the highest-scoring preset and
records the decision.

IMPORTANT: A preset is a UI adaptation, not a diagnosis.
"""

import logging
from datetime import datetime

from neuroadapt.core.presets.analyzers import (
    AnalyzerResult,
    AssessmentEvidence,
    BaseAnalyzer,
    BehavioralPatternAnalyzer,
    DemographicAdjuster,
    FontTestAnalyzer,
    QuestionnaireAnalyzer,
    SymptomClusterAnalyzer,
)
from neuroadapt.core.presets.config import PresetConfig, get_preset_config
from neuroadapt.core.presets.decision import (
    AnalyzerContribution,
    DecisionLogger,
    PresetDecision,
)
from neuroadapt.core.presets.scoring import accumulate
from neuroadapt.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class PresetClassifier:
    """Selects one of the six presets from assessment evidence.

    Classification is a pure function of the evidence and the rule
    configuration: the same input always yields the same preset and the
    same score vector.

    Usage:
        classifier = PresetClassifier()

        decision = classifier.classify(
            AssessmentEvidence(
                user_id="user-1",
                category_scores=CategoryScoreSet(attention=20),
                font_trials=trials,
            )
        )
        print(decision.preset_id, decision.reasoning())
    """

    def __init__(
        self,
        config: PresetConfig | None = None,
        analyzers: list[BaseAnalyzer] | None = None,
        decision_logger: DecisionLogger | None = None,
    ) -> None:
        """Initialize the classifier.

        Args:
            config: Rule configuration. The cached YAML configuration is
                used when omitted.
            analyzers: Analyzer set to run. Defaults to all five analyzers.
            decision_logger: Where decisions are recorded.
        """
        self._config = config or get_preset_config()
        self._analyzers: list[BaseAnalyzer] = analyzers or [
            FontTestAnalyzer(self._config),
            QuestionnaireAnalyzer(self._config),
            SymptomClusterAnalyzer(self._config),
            DemographicAdjuster(self._config),
            BehavioralPatternAnalyzer(self._config),
        ]
        self._decision_logger = decision_logger or DecisionLogger()

    @property
    def config(self) -> PresetConfig:
        """Rule configuration in use."""
        return self._config

    @property
    def analyzer_names(self) -> list[str]:
        """Names of the analyzers that contribute to each decision."""
        return [a.name for a in self._analyzers]

    def classify(
        self,
        evidence: AssessmentEvidence,
        decided_at: datetime | None = None,
    ) -> PresetDecision:
        """Classify a user into a preset.

        Args:
            evidence: Everything known about the user's assessment.
            decided_at: Decision timestamp. Defaults to now.

        Returns:
            PresetDecision with the selected preset, the full score vector
            and every analyzer's contribution.
        """
        logger.info(
            "Starting preset classification",
            extra={
                "user_id": evidence.user_id,
                "font_trials": evidence.trial_count,
                "responses": len(evidence.responses),
            },
        )

        results = self._run_analyzers(evidence)
        vector = accumulate(self._config.baseline, results)

        decision = PresetDecision(
            user_id=evidence.user_id,
            preset_id=vector.select(),
            scores=vector.scores,
            baseline=vector.baseline,
            contributions=[AnalyzerContribution.from_result(r) for r in results],
            decided_at=decided_at or utc_now(),
        )

        self._decision_logger.record(decision)
        return decision

    def _run_analyzers(self, evidence: AssessmentEvidence) -> list[AnalyzerResult]:
        """Run every analyzer; a failing analyzer contributes nothing.

        Args:
            evidence: Classification input.

        Returns:
            One result per analyzer, in analyzer order.
        """
        results: list[AnalyzerResult] = []

        for analyzer in self._analyzers:
            try:
                result = analyzer.analyze(evidence)
                results.append(result)

                logger.debug(
                    "Analyzer completed",
                    extra={
                        "analyzer": analyzer.name,
                        "total": result.total,
                        "evidence_count": len(result.evidence),
                    },
                )

            except Exception as e:
                logger.error(
                    "Analyzer failed",
                    extra={
                        "analyzer": analyzer.name,
                        "error": str(e),
                    },
                    exc_info=True,
                )
                results.append(
                    AnalyzerResult.empty(analyzer.name, summary=f"Analyzer failed: {e}")
                )

        return results


# Singleton instance
_classifier_instance: PresetClassifier | None = None


def get_preset_classifier() -> PresetClassifier:
    """Get the preset classifier singleton.

    Returns:
        PresetClassifier instance.
    """
    global _classifier_instance
    if _classifier_instance is None:
        _classifier_instance = PresetClassifier()
    return _classifier_instance
