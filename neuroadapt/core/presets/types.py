# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared types for the preset classification engine.

Closed enumerations replace the string identifiers used by stored
assessment rows, and the free-form symptom blob recorded by the font test
is parsed into a fixed schema once, at the persistence boundary.

IMPORTANT: These types describe UI adaptation evidence only, never a
diagnosis.
"""

import json
import logging
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from neuroadapt.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def _alias_key(value: str) -> str:
    return value.strip().lower().replace("_", "").replace("-", "").replace(" ", "")


def _stored_int(value: Any, field: str, trial_id: Any) -> int | None:
    """Coerce a stored numeric column to int, or None when unusable."""
    if value is None:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        logger.warning(
            "Non-numeric %s on font trial, ignored",
            field,
            extra={"trial_id": trial_id, field: value},
        )
        return None


class PresetId(str, Enum):
    """Accessibility UI presets, in tie-break order."""

    STANDARD = "standard"
    READING_SUPPORT = "reading_support"
    FOCUS_ENHANCED = "focus_enhanced"
    FOCUS_CALM = "focus_calm"
    SOCIAL_SIMPLE = "social_simple"
    SENSORY_CALM = "sensory_calm"


# Fixed enumeration order; the selector resolves ties to the earliest entry
PRESET_ORDER: tuple[PresetId, ...] = tuple(PresetId)


class QuestionDomain(str, Enum):
    """Questionnaire domains the questionnaire analyzer sums over."""

    ATTENTION = "attention"
    READING = "reading"
    SOCIAL = "social"
    SENSORY = "sensory"

    @classmethod
    def parse(cls, tag: Any) -> "QuestionDomain | None":
        """Resolve a catalog domain tag.

        Accepts domain values and the score category names used by the
        question catalog (e.g. "ReadingSupport").

        Args:
            tag: Raw tag from the question catalog.

        Returns:
            Matching domain, or None when the tag is unknown or names a
            category without a questionnaire domain (motor skills).
        """
        if isinstance(tag, cls):
            return tag
        if not isinstance(tag, str):
            return None
        key = _alias_key(tag)
        for domain in cls:
            if key == domain.value:
                return domain
        category = ScoreCategory.parse(tag)
        return category.domain if category else None


class ScoreCategory(str, Enum):
    """Aggregate score categories stored per assessment."""

    ATTENTION = "attention"
    SOCIAL_COMMUNICATION = "social_communication"
    SENSORY_PROCESSING = "sensory_processing"
    READING_DIFFICULTY = "reading_difficulty"
    MOTOR_SKILLS = "motor_skills"

    @classmethod
    def parse(cls, value: Any) -> "ScoreCategory | None":
        """Resolve a category name, including catalog spellings."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        return _CATEGORY_ALIASES.get(_alias_key(value))

    @property
    def domain(self) -> QuestionDomain | None:
        """Questionnaire domain this category feeds, if any."""
        return _CATEGORY_DOMAINS.get(self)


_CATEGORY_ALIASES: dict[str, ScoreCategory] = {
    "attention": ScoreCategory.ATTENTION,
    "attentionsupport": ScoreCategory.ATTENTION,
    "socialcommunication": ScoreCategory.SOCIAL_COMMUNICATION,
    "social": ScoreCategory.SOCIAL_COMMUNICATION,
    "sensoryprocessing": ScoreCategory.SENSORY_PROCESSING,
    "sensory": ScoreCategory.SENSORY_PROCESSING,
    "readingdifficulty": ScoreCategory.READING_DIFFICULTY,
    "readingsupport": ScoreCategory.READING_DIFFICULTY,
    "reading": ScoreCategory.READING_DIFFICULTY,
    "motorskills": ScoreCategory.MOTOR_SKILLS,
    "motor": ScoreCategory.MOTOR_SKILLS,
}

_CATEGORY_DOMAINS: dict[ScoreCategory, QuestionDomain] = {
    ScoreCategory.ATTENTION: QuestionDomain.ATTENTION,
    ScoreCategory.SOCIAL_COMMUNICATION: QuestionDomain.SOCIAL,
    ScoreCategory.SENSORY_PROCESSING: QuestionDomain.SENSORY,
    ScoreCategory.READING_DIFFICULTY: QuestionDomain.READING,
}


class DifficultyTier(str, Enum):
    """Difficulty a student reported for one font."""

    EASY = "easy"
    NEUTRAL = "neutral"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Any) -> "DifficultyTier | None":
        """Parse a stored difficulty label; "medium" is the legacy neutral."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        if key == "medium":
            return cls.NEUTRAL
        try:
            return cls(key)
        except ValueError:
            return None


class QuestionType(str, Enum):
    """Answer format of a questionnaire item."""

    LIKERT = "likert"
    BINARY = "binary"


class MalformedSymptomsError(ValueError):
    """Raised when a stored symptom payload does not fit the flag schema."""


class SymptomFlags(BaseModel):
    """Symptoms a student ticked while reading one font sample.

    Legacy payload keys written by earlier font-test versions are
    accepted as aliases. Unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    letters_move: bool = Field(
        default=False,
        validation_alias=AliasChoices("letters_move", "lettersMove", "lettersMoveOrFlip"),
    )
    words_blur_together: bool = Field(
        default=False,
        validation_alias=AliasChoices("words_blur_together", "wordsBlurTogether", "blurTogether"),
    )
    difficulty_focusing: bool = Field(
        default=False,
        validation_alias=AliasChoices("difficulty_focusing", "difficultyFocusing", "losesFocus"),
    )
    eye_strain: bool = Field(
        default=False,
        validation_alias=AliasChoices("eye_strain", "eyeStrain"),
    )
    slow_reading: bool = Field(
        default=False,
        validation_alias=AliasChoices("slow_reading", "slowReading"),
    )
    headache: bool = Field(default=False)

    @field_validator("*", mode="before")
    @classmethod
    def _null_is_unticked(cls, value: Any) -> Any:
        return False if value is None else value

    def count(self) -> int:
        """Number of symptoms ticked."""
        return sum(1 for name in type(self).model_fields if getattr(self, name))

    @classmethod
    def parse(cls, raw: "str | Mapping[str, Any] | SymptomFlags | None") -> "SymptomFlags | None":
        """Parse a stored symptom payload.

        Args:
            raw: JSON text, a mapping, an instance, or None.

        Returns:
            Parsed flags, or None when nothing was recorded.

        Raises:
            MalformedSymptomsError: If the payload is not a JSON object or
                holds a non-boolean value for a known flag.
        """
        if raw is None or isinstance(raw, cls):
            return raw

        data: Any = raw
        if isinstance(raw, str):
            if not raw.strip():
                return None
            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                raise MalformedSymptomsError(f"Invalid symptom JSON: {e.msg}") from e

        if not isinstance(data, Mapping):
            raise MalformedSymptomsError(
                f"Symptom payload must be an object, got {type(data).__name__}"
            )

        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise MalformedSymptomsError(
                f"Invalid symptom flags: {e.error_count()} error(s)"
            ) from e


class FontTrialRecord(BaseModel):
    """One student's reaction to one font during the font-readability test.

    Attributes:
        trial_id: Stored row identifier, if any.
        font_name: Font family shown.
        readability_rating: 1-5 rating (5 = easiest to read).
        difficulty: Reported difficulty tier.
        reading_time_ms: Response latency.
        symptoms: Ticked symptom flags.
        symptoms_malformed: The stored symptom payload could not be parsed.
        tested_at: When the trial was recorded.
    """

    model_config = ConfigDict(frozen=True)

    trial_id: str | int | None = None
    font_name: str
    readability_rating: int | None = Field(default=None, ge=1, le=5)
    difficulty: DifficultyTier | None = None
    reading_time_ms: int | None = Field(default=None, ge=0)
    symptoms: SymptomFlags | None = None
    symptoms_malformed: bool = False
    tested_at: datetime | None = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def _parse_difficulty(cls, value: Any) -> DifficultyTier | None:
        return DifficultyTier.parse(value)

    @field_validator("tested_at")
    @classmethod
    def _tested_at_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @property
    def symptom_count(self) -> int:
        """Number of ticked symptoms (zero when none or malformed)."""
        return self.symptoms.count() if self.symptoms else 0

    @classmethod
    def from_stored(
        cls,
        font_name: str,
        readability_rating: Any = None,
        difficulty: str | None = None,
        reading_time_ms: Any = None,
        symptoms: "str | Mapping[str, Any] | None" = None,
        trial_id: str | int | None = None,
        tested_at: datetime | None = None,
    ) -> "FontTrialRecord":
        """Build a record from a stored font-test row.

        Never raises on bad symptom data or out-of-range telemetry: the
        offending field is dropped with a warning so one bad row cannot
        block classification.

        Args:
            font_name: Font family shown.
            readability_rating: Raw rating; numeric text is accepted.
            difficulty: Raw difficulty label.
            reading_time_ms: Raw latency; fractions are truncated.
            symptoms: Raw symptom payload (JSON text or mapping).
            trial_id: Stored row identifier.
            tested_at: When the trial was recorded.

        Returns:
            FontTrialRecord instance.
        """
        parsed_symptoms: SymptomFlags | None = None
        malformed = False
        try:
            parsed_symptoms = SymptomFlags.parse(symptoms)
        except MalformedSymptomsError as e:
            malformed = True
            logger.warning(
                "Malformed symptom data on font trial, symptoms ignored",
                extra={"trial_id": trial_id, "font_name": font_name, "error": str(e)},
            )

        readability_rating = _stored_int(readability_rating, "rating", trial_id)
        reading_time_ms = _stored_int(reading_time_ms, "reading_time_ms", trial_id)

        if readability_rating is not None and not 1 <= readability_rating <= 5:
            logger.warning(
                "Readability rating out of range, ignored",
                extra={"trial_id": trial_id, "rating": readability_rating},
            )
            readability_rating = None

        if reading_time_ms is not None and reading_time_ms < 0:
            logger.warning(
                "Negative reading time, ignored",
                extra={"trial_id": trial_id, "reading_time_ms": reading_time_ms},
            )
            reading_time_ms = None

        return cls(
            trial_id=trial_id,
            font_name=font_name,
            readability_rating=readability_rating,
            difficulty=difficulty,
            reading_time_ms=reading_time_ms,
            symptoms=parsed_symptoms,
            symptoms_malformed=malformed,
            tested_at=tested_at,
        )


class CategoryScoreSet(BaseModel):
    """Aggregate questionnaire scores stored with an assessment.

    Scores are non-negative with no fixed upper bound; their scale depends
    on questionnaire length and question weights.
    """

    model_config = ConfigDict(frozen=True)

    attention: int = Field(default=0, ge=0)
    social_communication: int = Field(default=0, ge=0)
    sensory_processing: int = Field(default=0, ge=0)
    reading_difficulty: int = Field(default=0, ge=0)
    motor_skills: int = Field(default=0, ge=0)

    def get(self, category: ScoreCategory) -> int:
        """Get the score for a category."""
        return getattr(self, category.value)

    @property
    def total(self) -> int:
        """Sum of all category scores."""
        return sum(self.get(category) for category in ScoreCategory)

    @classmethod
    def from_mapping(cls, scores: Mapping[Any, int]) -> "CategoryScoreSet":
        """Build from a mapping keyed by category names or aliases.

        Unknown keys are skipped with a debug log.
        """
        values: dict[str, int] = {}
        for key, score in scores.items():
            category = ScoreCategory.parse(key)
            if category is None:
                logger.debug("Ignoring unknown score category", extra={"category": key})
                continue
            values[category.value] = values.get(category.value, 0) + int(score)
        return cls(**values)


class QuestionSpec(BaseModel):
    """Question catalog entry needed to score a response.

    Attributes:
        question_id: Catalog identifier.
        category: Catalog category name (e.g. "AttentionSupport").
        question_type: Answer format.
        scoring_weight: Multiplier applied to the normalized response.
    """

    model_config = ConfigDict(frozen=True)

    question_id: str
    category: str
    question_type: QuestionType = QuestionType.LIKERT
    scoring_weight: float = Field(default=1.0, ge=0.0)

    @property
    def score_category(self) -> ScoreCategory | None:
        """Resolved score category, or None for categories not aggregated."""
        return ScoreCategory.parse(self.category)

    @property
    def domain(self) -> QuestionDomain | None:
        """Questionnaire domain of this question, if any."""
        category = self.score_category
        return category.domain if category else None
