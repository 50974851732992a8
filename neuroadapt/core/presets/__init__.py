# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preset classification for adaptive learning interfaces.

This package chooses one of six UI presets for a learner from their
questionnaire answers, their font-readability test and simple
demographics.

Architecture:
    The preset system consists of:
    1. Normalizer: Raw answers to 0-5 scores and per-category totals
    2. Analyzers: Rule-based, independent score contributors
    3. PresetClassifier: Sums analyzer deltas over a baseline and selects
    4. DecisionLogger: Audit trail with the full score vector

Quick Start:
    from neuroadapt.core.presets import AssessmentService, QuestionSpec

    service = AssessmentService()
    outcome = service.evaluate_submission(
        user_id="user-1",
        raw_responses={"attention_1": "often"},
        catalog=[QuestionSpec(question_id="attention_1", category="attention")],
    )

    print(outcome.decision.preset_id)
    print(outcome.decision.reasoning())

Presets:
    - STANDARD: Balanced default
    - READING_SUPPORT: Dyslexia-friendly typography
    - FOCUS_ENHANCED: Distraction reduction and structure
    - FOCUS_CALM: Focus support with reduced stimulation
    - SOCIAL_SIMPLE: Literal language and predictable layout
    - SENSORY_CALM: Low-stimulation visuals

IMPORTANT: Presets are interface adaptations, not diagnoses.
"""

from neuroadapt.core.presets.analyzers import (
    AnalyzerResult,
    AssessmentEvidence,
    BaseAnalyzer,
    BehavioralPatternAnalyzer,
    DemographicAdjuster,
    Evidence,
    FontTestAnalyzer,
    QuestionnaireAnalyzer,
    SymptomClusterAnalyzer,
)
from neuroadapt.core.presets.assessment import AssessmentOutcome, AssessmentService
from neuroadapt.core.presets.config import (
    PresetConfig,
    get_preset_config,
    parse_preset_config,
    reload_preset_config,
)
from neuroadapt.core.presets.decision import (
    AnalyzerContribution,
    DecisionLogger,
    PresetDecision,
)
from neuroadapt.core.presets.font_report import FontTestReport, build_font_report
from neuroadapt.core.presets.normalizer import (
    build_category_scores,
    normalize_response,
    normalize_responses,
    tag_question_domains,
)
from neuroadapt.core.presets.scoring import PresetScoreVector, accumulate
from neuroadapt.core.presets.service import PresetClassifier, get_preset_classifier
from neuroadapt.core.presets.types import (
    PRESET_ORDER,
    CategoryScoreSet,
    DifficultyTier,
    FontTrialRecord,
    MalformedSymptomsError,
    PresetId,
    QuestionDomain,
    QuestionSpec,
    QuestionType,
    ScoreCategory,
    SymptomFlags,
)

__all__ = [
    # Service
    "AssessmentOutcome",
    "AssessmentService",
    "PresetClassifier",
    "get_preset_classifier",
    # Decisions
    "AnalyzerContribution",
    "DecisionLogger",
    "PresetDecision",
    "PresetScoreVector",
    "accumulate",
    # Configuration
    "PresetConfig",
    "get_preset_config",
    "parse_preset_config",
    "reload_preset_config",
    # Analyzers
    "AnalyzerResult",
    "AssessmentEvidence",
    "BaseAnalyzer",
    "BehavioralPatternAnalyzer",
    "DemographicAdjuster",
    "Evidence",
    "FontTestAnalyzer",
    "QuestionnaireAnalyzer",
    "SymptomClusterAnalyzer",
    # Normalization
    "build_category_scores",
    "normalize_response",
    "normalize_responses",
    "tag_question_domains",
    # Font report
    "FontTestReport",
    "build_font_report",
    # Types
    "PRESET_ORDER",
    "CategoryScoreSet",
    "DifficultyTier",
    "FontTrialRecord",
    "MalformedSymptomsError",
    "PresetId",
    "QuestionDomain",
    "QuestionSpec",
    "QuestionType",
    "ScoreCategory",
    "SymptomFlags",
]
