# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the demographic adjuster."""

import pytest

from neuroadapt.core.presets.analyzers import (
    AssessmentEvidence,
    DemographicAdjuster,
    estimate_age,
)
from neuroadapt.core.presets.config import PresetConfig, parse_preset_config
from neuroadapt.core.presets.types import PresetId


class TestEstimateAge:
    """Tests for estimate_age."""

    @pytest.mark.parametrize(
        ("bracket", "expected"),
        [
            ("5-8", 7),
            ("9-12", 11),
            (" 13-16 ", 15),
            ("17+", 18),
            ("adult", 16),
            (None, 16),
        ],
    )
    def test_brackets(self, bracket: str | None, expected: int) -> None:
        """Test representative ages per bracket."""
        assert estimate_age(bracket) == expected


class TestDemographicAdjuster:
    """Tests for DemographicAdjuster."""

    def test_always_boosts_standard(self, preset_config: PresetConfig) -> None:
        """Test the standard preset gets its floor bonus with no data."""
        result = DemographicAdjuster(preset_config).analyze(AssessmentEvidence())

        assert result.deltas == {PresetId.STANDARD: 5.0}
        assert result.sample_size == 0
        assert "unknown" in result.summary

    def test_age_prior_applied_and_bounded(self) -> None:
        """Test configured age priors are added but capped."""
        config = parse_preset_config(
            {
                "demographic": {
                    "age_priors": {
                        "5-8": {"focus_enhanced": 20.0, "sensory_calm": 2.0},
                    }
                }
            }
        )

        result = DemographicAdjuster(config).analyze(AssessmentEvidence(age_bracket="5-8"))

        assert result.deltas == {
            PresetId.STANDARD: 5.0,
            PresetId.FOCUS_ENHANCED: 5.0,
            PresetId.SENSORY_CALM: 2.0,
        }
        assert len(result.evidence) == 2

    def test_bracket_without_prior(self, preset_config: PresetConfig) -> None:
        """Test a known bracket without priors only adds the floor bonus."""
        result = DemographicAdjuster(preset_config).analyze(
            AssessmentEvidence(age_bracket="9-12")
        )

        assert result.deltas == {PresetId.STANDARD: 5.0}
        assert result.evidence[0].data["estimated_age"] == 11
