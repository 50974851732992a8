# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the preset classifier."""

from collections.abc import Callable
from datetime import datetime, timezone

import pytest

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
from neuroadapt.core.presets.config import PresetConfig
from neuroadapt.core.presets.service import PresetClassifier, get_preset_classifier
from neuroadapt.core.presets.types import CategoryScoreSet, FontTrialRecord, PresetId

DECIDED_AT = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


# =============================================================================
# Test Analyzers
# =============================================================================


class FailingAnalyzer(BaseAnalyzer):
    """Analyzer that always raises."""

    @property
    def name(self) -> str:
        return "failing"

    @property
    def description(self) -> str:
        return "Always fails."

    def analyze(self, evidence: AssessmentEvidence) -> AnalyzerResult:
        raise RuntimeError("rules table corrupted")


class FixedBoostAnalyzer(BaseAnalyzer):
    """Analyzer that adds a fixed amount to one preset."""

    def __init__(self, preset: PresetId, amount: float) -> None:
        super().__init__()
        self._preset = preset
        self._amount = amount

    @property
    def name(self) -> str:
        return "fixed"

    @property
    def description(self) -> str:
        return "Adds a fixed boost."

    def analyze(self, evidence: AssessmentEvidence) -> AnalyzerResult:
        result = self.new_result(sample_size=1)
        result.add(self._preset, self._amount)
        return result


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def classifier(preset_config: PresetConfig) -> PresetClassifier:
    """Create a classifier with default rules and analyzers."""
    return PresetClassifier(config=preset_config)


# =============================================================================
# Tests
# =============================================================================


class TestPresetClassifier:
    """Tests for PresetClassifier.classify."""

    def test_analyzer_set(self, classifier: PresetClassifier) -> None:
        """Test all five analyzers contribute."""
        assert classifier.analyzer_names == [
            "font_test",
            "questionnaire",
            "symptom_clusters",
            "demographic",
            "behavioral_patterns",
        ]

    def test_empty_evidence_selects_standard(self, classifier: PresetClassifier) -> None:
        """Test no evidence falls back to the standard preset."""
        decision = classifier.classify(AssessmentEvidence(user_id="u1"))

        assert decision.preset_id is PresetId.STANDARD
        assert decision.scores[PresetId.STANDARD] == 20.0
        assert decision.scores[PresetId.FOCUS_CALM] == 10.0

    def test_strong_font_signal_selects_reading_support(
        self,
        classifier: PresetClassifier,
        make_trial: Callable[..., FontTrialRecord],
    ) -> None:
        """Test a clear dyslexia-font preference wins."""
        trials = tuple(make_trial("OpenDyslexic", rating=5, difficulty="easy") for _ in range(4))
        trials += (make_trial("Times New Roman", rating=1, difficulty="hard"),)

        decision = classifier.classify(AssessmentEvidence(font_trials=trials))

        assert decision.preset_id is PresetId.READING_SUPPORT
        assert decision.scores[PresetId.READING_SUPPORT] == 40.0

    def test_comorbid_attention_cluster_selects_focus_enhanced(
        self, classifier: PresetClassifier
    ) -> None:
        """Test attention with sensory load selects focus enhanced."""
        evidence = AssessmentEvidence(
            category_scores=CategoryScoreSet(attention=20, sensory_processing=12)
        )

        decision = classifier.classify(evidence)

        assert decision.preset_id is PresetId.FOCUS_ENHANCED
        assert decision.scores[PresetId.FOCUS_ENHANCED] == 30.0
        assert decision.scores[PresetId.STANDARD] == 20.0

    def test_behavioral_tie_breaker(
        self,
        classifier: PresetClassifier,
        make_trial: Callable[..., FontTrialRecord],
    ) -> None:
        """Test slow responses tip weak evidence toward social simple."""
        trials = tuple(make_trial(reading_time_ms=20000) for _ in range(3))

        decision = classifier.classify(AssessmentEvidence(font_trials=trials))

        assert decision.preset_id is PresetId.SOCIAL_SIMPLE
        assert decision.scores[PresetId.SOCIAL_SIMPLE] == 25.0

    def test_deterministic(
        self,
        classifier: PresetClassifier,
        make_trial: Callable[..., FontTrialRecord],
    ) -> None:
        """Test identical input gives an identical decision."""
        evidence = AssessmentEvidence(
            user_id="u1",
            category_scores=CategoryScoreSet(reading_difficulty=14),
            font_trials=(make_trial("Comic Neue", rating=4, difficulty="easy"),),
            responses={"q1": 5},
            question_domains={"q1": "reading"},
            age_bracket="9-12",
        )

        first = classifier.classify(evidence, decided_at=DECIDED_AT)
        second = classifier.classify(evidence, decided_at=DECIDED_AT)

        assert first == second

    def test_same_outcome_ignores_timestamp(self, classifier: PresetClassifier) -> None:
        """Test two runs at different times reach the same outcome."""
        evidence = AssessmentEvidence(category_scores=CategoryScoreSet(social_communication=16))

        first = classifier.classify(evidence, decided_at=DECIDED_AT)
        second = classifier.classify(evidence)

        assert first != second
        assert first.same_outcome(second)

    def test_scores_never_below_baseline(
        self,
        classifier: PresetClassifier,
        make_trial: Callable[..., FontTrialRecord],
    ) -> None:
        """Test every final score is at least its baseline."""
        evidence = AssessmentEvidence(
            category_scores=CategoryScoreSet(attention=30, social_communication=30),
            font_trials=(make_trial("Georgia", rating=1, difficulty="hard", eye_strain=True),),
        )

        decision = classifier.classify(evidence)

        for preset, score in decision.scores.items():
            assert score >= decision.baseline[preset]

    def test_extra_evidence_is_monotonic(self, preset_config: PresetConfig) -> None:
        """Test boosting one preset never lowers any score."""
        evidence = AssessmentEvidence(category_scores=CategoryScoreSet(sensory_processing=16))
        base = PresetClassifier(config=preset_config).classify(evidence)

        full = PresetClassifier(
            config=preset_config,
            analyzers=[
                FontTestAnalyzer(preset_config),
                QuestionnaireAnalyzer(preset_config),
                SymptomClusterAnalyzer(preset_config),
                DemographicAdjuster(preset_config),
                BehavioralPatternAnalyzer(preset_config),
                FixedBoostAnalyzer(PresetId.FOCUS_CALM, 3.0),
            ],
        ).classify(evidence)

        for preset in PresetId:
            assert full.scores[preset] >= base.scores[preset]
        assert full.scores[PresetId.FOCUS_CALM] == base.scores[PresetId.FOCUS_CALM] + 3.0

    def test_reading_total_sweep_is_monotonic(self, classifier: PresetClassifier) -> None:
        """Test raising the reading questionnaire total never lowers reading support."""
        previous = None
        for total in range(10, 17):
            answers = [min(5, total - 5 * i) for i in range(4)]
            responses = {f"read_{i}": max(0, score) for i, score in enumerate(answers)}
            evidence = AssessmentEvidence(
                responses=responses,
                question_domains={question_id: "reading" for question_id in responses},
            )

            score = classifier.classify(evidence).scores[PresetId.READING_SUPPORT]

            if previous is not None:
                assert score >= previous
            previous = score

        assert previous == 40.0

    def test_font_rating_sweep_is_monotonic(
        self,
        classifier: PresetClassifier,
        make_trial: Callable[..., FontTrialRecord],
    ) -> None:
        """Test a higher rating for a dyslexia-friendly font never lowers reading support."""
        scores = [
            classifier.classify(
                AssessmentEvidence(font_trials=(make_trial("Comic Neue", rating=rating),))
            ).scores[PresetId.READING_SUPPORT]
            for rating in (3, 4, 5)
        ]

        assert scores == sorted(scores)
        assert scores[-1] > scores[0]

    def test_failing_analyzer_is_not_fatal(self, preset_config: PresetConfig) -> None:
        """Test a failing analyzer contributes nothing and is recorded."""
        classifier = PresetClassifier(
            config=preset_config,
            analyzers=[FailingAnalyzer(preset_config), DemographicAdjuster(preset_config)],
        )

        decision = classifier.classify(AssessmentEvidence())

        assert decision.preset_id is PresetId.STANDARD
        failed = decision.contribution("failing")
        assert failed is not None
        assert failed.deltas == {}
        assert "rules table corrupted" in failed.summary

    def test_negative_delta_treated_as_failure(self, preset_config: PresetConfig) -> None:
        """Test an analyzer emitting a negative delta is discarded."""
        classifier = PresetClassifier(
            config=preset_config,
            analyzers=[FixedBoostAnalyzer(PresetId.STANDARD, -50.0)],
        )

        decision = classifier.classify(AssessmentEvidence())

        assert decision.scores[PresetId.STANDARD] == 15.0
        assert decision.contribution("fixed").deltas == {}

    def test_contributions_recorded(self, classifier: PresetClassifier) -> None:
        """Test every analyzer's contribution is kept with the decision."""
        decision = classifier.classify(
            AssessmentEvidence(category_scores=CategoryScoreSet(reading_difficulty=14))
        )

        assert [c.analyzer for c in decision.contributions] == classifier.analyzer_names
        clusters = decision.contribution("symptom_clusters")
        assert clusters.deltas == {PresetId.READING_SUPPORT: 25.0}
        assert clusters.evidence[0]["description"] == "Cluster 'dyslexia' matched"


class TestGetPresetClassifier:
    """Tests for the classifier singleton."""

    def test_returns_same_instance(self) -> None:
        """Test the singleton is reused."""
        assert get_preset_classifier() is get_preset_classifier()
