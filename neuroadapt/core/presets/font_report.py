# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Font-test report shown to the learner after the font test.

The report is informational. It never feeds back into preset
classification, which reads the font trials directly.
"""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from neuroadapt.core.presets.config import PresetConfig, get_preset_config
from neuroadapt.core.presets.types import DifficultyTier, FontTrialRecord

READING_SUPPORT_FONTS: tuple[str, ...] = ("Comic Neue", "OpenDyslexic", "Lexie Readable")
FALLBACK_FONTS: tuple[str, ...] = ("Arial", "Verdana")


class FontIndicators(BaseModel):
    """Boolean reading indicators derived from font trials."""

    model_config = ConfigDict(frozen=True)

    serif_difficulty: bool = False
    dyslexia_font_preference: bool = False
    has_movement_symptoms: bool = False
    has_eye_strain: bool = False
    likely_dyslexia: bool = False


class FontTestReport(BaseModel):
    """Font-test analysis for one learner.

    Attributes:
        indicators: Reading indicators.
        recommended_fonts: Font families to offer, best first.
        summary: One-paragraph explanation for the learner.
        trial_count: Number of trials analyzed.
    """

    model_config = ConfigDict(frozen=True)

    indicators: FontIndicators = Field(default_factory=FontIndicators)
    recommended_fonts: list[str] = Field(default_factory=list)
    summary: str = ""
    trial_count: int = 0


def _recommend_fonts(trials: list[FontTrialRecord], likely_dyslexia: bool) -> list[str]:
    if likely_dyslexia:
        return list(READING_SUPPORT_FONTS)

    easy_fonts: list[str] = []
    for trial in trials:
        if trial.difficulty is DifficultyTier.EASY and trial.font_name not in easy_fonts:
            easy_fonts.append(trial.font_name)

    return easy_fonts or list(FALLBACK_FONTS)


def _summarize(indicators: FontIndicators, recommended_fonts: list[str]) -> str:
    if indicators.likely_dyslexia:
        text = (
            "Assessment suggests potential reading support benefits. "
            "Dyslexia-friendly fonts and increased spacing may improve reading comfort. "
        )
    else:
        text = (
            "Good font flexibility observed. "
            "Standard fonts work well with possible customization options. "
        )
    return text + "Recommended fonts: " + ", ".join(recommended_fonts)


def build_font_report(
    trials: Iterable[FontTrialRecord],
    config: PresetConfig | None = None,
) -> FontTestReport:
    """Analyze font trials for reading indicators and font recommendations.

    Args:
        trials: Font-test history.
        config: Rule configuration providing the font families.

    Returns:
        FontTestReport.
    """
    font_cfg = (config or get_preset_config()).font_test
    trials = list(trials)

    serif_difficulty = any(
        font_cfg.is_conventional(t.font_name) and t.difficulty is DifficultyTier.HARD
        for t in trials
    )
    dyslexia_font_preference = any(
        font_cfg.is_dyslexia_friendly(t.font_name) and t.difficulty is DifficultyTier.EASY
        for t in trials
    )
    has_movement_symptoms = any(t.symptoms and t.symptoms.letters_move for t in trials)
    has_eye_strain = any(t.symptoms and t.symptoms.eye_strain for t in trials)

    indicators = FontIndicators(
        serif_difficulty=serif_difficulty,
        dyslexia_font_preference=dyslexia_font_preference,
        has_movement_symptoms=has_movement_symptoms,
        has_eye_strain=has_eye_strain,
        likely_dyslexia=(serif_difficulty and dyslexia_font_preference)
        or (has_movement_symptoms and has_eye_strain),
    )
    recommended = _recommend_fonts(trials, indicators.likely_dyslexia)

    return FontTestReport(
        indicators=indicators,
        recommended_fonts=recommended,
        summary=_summarize(indicators, recommended),
        trial_count=len(trials),
    )
