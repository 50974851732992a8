# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Questionnaire response normalization.

Raw answers arrive as numbers, Likert labels ("Never" ... "Always"),
yes/no strings or booleans. Everything is mapped onto the integer scale
[0, 5] ([0, 1] for binary questions). The mapping is total: assessment UX
must never block on a malformed answer, so unrecognized Likert text falls
back to the neutral midpoint.
"""

import logging
import math
import numbers
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from neuroadapt.core.presets.types import CategoryScoreSet, QuestionSpec, QuestionType

logger = logging.getLogger(__name__)

SCALE_MIN = 0
SCALE_MAX = 5
NEUTRAL_MIDPOINT = 3

LIKERT_LABELS: dict[str, int] = {
    "never": 1,
    "not at all": 1,
    "very easy": 1,
    "rarely": 2,
    "slightly": 2,
    "easy": 2,
    "sometimes": 3,
    "moderate": 3,
    "neutral": 3,
    "often": 4,
    "difficult": 4,
    "uncomfortable": 4,
    "always": 5,
    "very difficult": 5,
    "very uncomfortable": 5,
    "yes": 1,
    "no": 0,
}

BINARY_YES = frozenset({"yes", "y", "true"})


def _parse_number(text: str) -> float | None:
    try:
        return float(text)
    except ValueError:
        return None


def _scale_number(number: float, question_type: QuestionType) -> int:
    if math.isnan(number) or math.isinf(number):
        return 0 if question_type == QuestionType.BINARY else NEUTRAL_MIDPOINT
    if question_type == QuestionType.BINARY:
        return 1 if number > 0 else 0
    return max(SCALE_MIN, min(SCALE_MAX, int(number)))


def normalize_response(
    value: Any,
    question_type: QuestionType = QuestionType.LIKERT,
) -> int:
    """Map a raw answer onto the canonical integer scale.

    Args:
        value: Raw answer as submitted.
        question_type: Answer format of the question.

    Returns:
        Integer in [0, 5], or in [0, 1] for binary questions. Unanswered
        (None) maps to 0.
    """
    if value is None:
        return 0

    if isinstance(value, bool):
        return 1 if value else 0

    if isinstance(value, (numbers.Real, Decimal)):
        return _scale_number(float(value), question_type)

    if isinstance(value, str):
        text = value.strip().lower()

        if question_type == QuestionType.BINARY:
            if text in BINARY_YES:
                return 1
            number = _parse_number(text)
            return _scale_number(number, question_type) if number is not None else 0

        number = _parse_number(text)
        if number is not None:
            return _scale_number(number, question_type)
        return LIKERT_LABELS.get(text, NEUTRAL_MIDPOINT)

    return 0 if question_type == QuestionType.BINARY else NEUTRAL_MIDPOINT


def normalize_responses(
    responses: Mapping[str, Any],
    catalog: Mapping[str, QuestionSpec] | None = None,
) -> dict[str, int]:
    """Normalize every response in a submission.

    Args:
        responses: Question id to raw answer.
        catalog: Optional question catalog giving each question's type.
            Questions missing from it are treated as Likert items.

    Returns:
        Question id to normalized score.
    """
    catalog = catalog or {}
    normalized: dict[str, int] = {}
    for question_id, value in responses.items():
        spec = catalog.get(str(question_id))
        question_type = spec.question_type if spec else QuestionType.LIKERT
        normalized[str(question_id)] = normalize_response(value, question_type)
    return normalized


def build_category_scores(
    responses: Mapping[str, Any],
    catalog: Mapping[str, QuestionSpec],
) -> CategoryScoreSet:
    """Aggregate a submission into the stored per-category scores.

    Each response is normalized, multiplied by its question's scoring
    weight and summed into the question's category. Category totals are
    rounded to integers.

    Args:
        responses: Question id to raw answer.
        catalog: Question id to catalog entry.

    Returns:
        CategoryScoreSet for the submission.
    """
    totals: dict[str, float] = {}

    for question_id, value in responses.items():
        spec = catalog.get(str(question_id))
        if spec is None:
            logger.warning(
                "Response for unknown question dropped",
                extra={"question_id": question_id},
            )
            continue

        category = spec.score_category
        if category is None:
            logger.debug(
                "Question category is not aggregated",
                extra={"question_id": question_id, "category": spec.category},
            )
            continue

        score = normalize_response(value, spec.question_type) * spec.scoring_weight
        totals[category.value] = totals.get(category.value, 0.0) + score

    return CategoryScoreSet(**{name: round(total) for name, total in totals.items()})


def tag_question_domains(catalog: Mapping[str, QuestionSpec]) -> dict[str, str]:
    """Derive the question-domain side channel from a question catalog.

    Args:
        catalog: Question id to catalog entry.

    Returns:
        Question id to domain tag, for questions that feed a domain.
    """
    return {
        question_id: spec.domain.value
        for question_id, spec in catalog.items()
        if spec.domain is not None
    }
