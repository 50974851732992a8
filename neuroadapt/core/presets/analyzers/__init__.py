# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preset evidence analyzers.

Available Analyzers:
    - FontTestAnalyzer: Font preference and reading symptoms
    - QuestionnaireAnalyzer: Per-domain questionnaire totals
    - SymptomClusterAnalyzer: Category score combinations
    - DemographicAdjuster: Standard-preset floor and age priors
    - BehavioralPatternAnalyzer: Rating/latency/symptom patterns

Base Classes:
    - BaseAnalyzer: Abstract base class for all analyzers
    - AnalyzerResult: Non-negative deltas plus evidence
    - AssessmentEvidence: Immutable input of one classification run
    - Evidence: One fired rule or observed pattern
"""

from neuroadapt.core.presets.analyzers.base import (
    AnalyzerResult,
    AssessmentEvidence,
    BaseAnalyzer,
    Evidence,
)
from neuroadapt.core.presets.analyzers.behavioral import BehavioralPatternAnalyzer
from neuroadapt.core.presets.analyzers.clusters import SymptomClusterAnalyzer
from neuroadapt.core.presets.analyzers.demographic import DemographicAdjuster, estimate_age
from neuroadapt.core.presets.analyzers.font_test import FontTestAnalyzer
from neuroadapt.core.presets.analyzers.questionnaire import QuestionnaireAnalyzer

__all__ = [
    # Base classes
    "AnalyzerResult",
    "AssessmentEvidence",
    "BaseAnalyzer",
    "Evidence",
    # Analyzer implementations
    "BehavioralPatternAnalyzer",
    "DemographicAdjuster",
    "FontTestAnalyzer",
    "QuestionnaireAnalyzer",
    "SymptomClusterAnalyzer",
    # Helpers
    "estimate_age",
]
