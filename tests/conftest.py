# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across the unit tests:
- Rule configuration built from the in-code defaults
- Font trial factories
- Question catalogs
"""

from collections.abc import Callable, Generator
from typing import Any

import pytest

from neuroadapt.core.config.settings import clear_settings_cache
from neuroadapt.core.presets.config import PresetConfig, load_preset_config, parse_preset_config
from neuroadapt.core.presets.types import FontTrialRecord, QuestionSpec, SymptomFlags


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def preset_config() -> PresetConfig:
    """Provide the default rule configuration without touching rules.yaml."""
    return parse_preset_config()


@pytest.fixture
def clean_caches() -> Generator[None, None, None]:
    """Clear settings and rule caches before and after a test."""
    clear_settings_cache()
    load_preset_config.cache_clear()
    yield
    clear_settings_cache()
    load_preset_config.cache_clear()


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_user_id() -> str:
    """Provide a sample user ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"


@pytest.fixture
def make_trial() -> Callable[..., FontTrialRecord]:
    """Factory for font trials with neutral defaults."""

    def _make(
        font_name: str = "Roboto",
        rating: int | None = 3,
        difficulty: str | None = "neutral",
        reading_time_ms: int | None = 8000,
        **symptoms: bool,
    ) -> FontTrialRecord:
        return FontTrialRecord(
            font_name=font_name,
            readability_rating=rating,
            difficulty=difficulty,
            reading_time_ms=reading_time_ms,
            symptoms=SymptomFlags(**symptoms) if symptoms else None,
        )

    return _make


@pytest.fixture
def sample_catalog() -> list[QuestionSpec]:
    """Provide a small question catalog covering every category."""
    return [
        QuestionSpec(question_id="att_1", category="attention"),
        QuestionSpec(question_id="att_2", category="attention"),
        QuestionSpec(question_id="att_3", category="attention"),
        QuestionSpec(question_id="att_4", category="attention"),
        QuestionSpec(question_id="read_1", category="reading_difficulty"),
        QuestionSpec(question_id="read_2", category="reading_difficulty"),
        QuestionSpec(question_id="soc_1", category="social_communication"),
        QuestionSpec(question_id="sen_1", category="sensory_processing"),
        QuestionSpec(question_id="mot_1", category="motor_skills", question_type="binary"),
    ]


@pytest.fixture
def sample_responses() -> dict[str, Any]:
    """Provide raw answers with a strong attention profile."""
    return {
        "att_1": "always",
        "att_2": "often",
        "att_3": 5,
        "att_4": "4",
        "read_1": "rarely",
        "read_2": 1,
        "soc_1": "sometimes",
        "sen_1": "never",
        "mot_1": "no",
    }
