# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment submission pipeline.

Turns one questionnaire submission (plus any font-test history) into
stored category scores, significant traits, a font report and a preset
decision.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from neuroadapt.core.presets.analyzers import AssessmentEvidence
from neuroadapt.core.presets.decision import PresetDecision
from neuroadapt.core.presets.font_report import FontTestReport, build_font_report
from neuroadapt.core.presets.normalizer import (
    build_category_scores,
    normalize_responses,
    tag_question_domains,
)
from neuroadapt.core.presets.service import PresetClassifier, get_preset_classifier
from neuroadapt.core.presets.types import (
    CategoryScoreSet,
    FontTrialRecord,
    QuestionSpec,
    ScoreCategory,
)
from neuroadapt.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)


class AssessmentOutcome(BaseModel):
    """Result of evaluating one assessment submission.

    Attributes:
        user_id: Assessed user.
        category_scores: Aggregated questionnaire scores.
        traits: Category to whether its score reaches the trait threshold.
        decision: Preset decision.
        font_report: Font-test report, when font trials exist.
        font_tests_considered: Whether font trials fed the decision.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str | int | None = None
    category_scores: CategoryScoreSet
    traits: dict[ScoreCategory, bool] = Field(default_factory=dict)
    decision: PresetDecision
    font_report: FontTestReport | None = None
    font_tests_considered: bool = False

    @property
    def significant_traits(self) -> list[ScoreCategory]:
        """Categories whose score reached the trait threshold."""
        return [category for category, significant in self.traits.items() if significant]


class AssessmentService:
    """Evaluates questionnaire submissions.

    Usage:
        service = AssessmentService()
        outcome = service.evaluate_submission(
            user_id="user-1",
            raw_responses={"q1": "often", "q2": 4},
            catalog=[QuestionSpec(question_id="q1", category="attention"), ...],
        )
    """

    def __init__(self, classifier: PresetClassifier | None = None) -> None:
        """Initialize the service.

        Args:
            classifier: Preset classifier. The shared instance is used when
                omitted.
        """
        self._classifier = classifier or get_preset_classifier()

    def evaluate_submission(
        self,
        user_id: str | int | None,
        raw_responses: Mapping[str, Any],
        catalog: Mapping[str, QuestionSpec] | Iterable[QuestionSpec],
        font_trials: Iterable[FontTrialRecord] = (),
        age_bracket: str | None = None,
        decided_at: datetime | None = None,
    ) -> AssessmentOutcome:
        """Score a submission and classify the user into a preset.

        Args:
            user_id: User who submitted the assessment.
            raw_responses: Question id to raw answer.
            catalog: Question catalog, as a mapping or a list of entries.
            font_trials: Font-test history of the user.
            age_bracket: Optional age bracket such as "9-12".
            decided_at: Decision timestamp. Defaults to now.

        Returns:
            AssessmentOutcome.
        """
        questions = self._index_catalog(catalog)
        trials = tuple(font_trials)

        bind_context(user_id=user_id)
        try:
            category_scores = build_category_scores(raw_responses, questions)
            evidence = AssessmentEvidence(
                user_id=user_id,
                category_scores=category_scores,
                font_trials=trials,
                responses=normalize_responses(raw_responses, questions),
                question_domains=tag_question_domains(questions),
                age_bracket=age_bracket,
            )

            decision = self._classifier.classify(evidence, decided_at=decided_at)
            font_report = build_font_report(trials, self._classifier.config) if trials else None

            outcome = AssessmentOutcome(
                user_id=user_id,
                category_scores=category_scores,
                traits=self._significant_traits(category_scores),
                decision=decision,
                font_report=font_report,
                font_tests_considered=bool(trials),
            )

            logger.info(
                "Assessment evaluated",
                extra={
                    "user_id": user_id,
                    "preset": decision.preset_id.value,
                    "category_total": category_scores.total,
                    "font_trials": len(trials),
                },
            )

            return outcome
        finally:
            clear_context()

    def _significant_traits(self, scores: CategoryScoreSet) -> dict[ScoreCategory, bool]:
        thresholds = self._classifier.config.trait_thresholds
        return {
            category: scores.get(category) >= threshold
            for category, threshold in thresholds.items()
        }

    @staticmethod
    def _index_catalog(
        catalog: Mapping[str, QuestionSpec] | Iterable[QuestionSpec],
    ) -> dict[str, QuestionSpec]:
        if isinstance(catalog, Mapping):
            return {str(question_id): spec for question_id, spec in catalog.items()}
        return {spec.question_id: spec for spec in catalog}
