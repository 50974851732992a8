# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for preset rule configuration."""

from pathlib import Path

import pytest

from neuroadapt.core.presets.config import (
    PresetConfig,
    ThresholdRule,
    load_preset_config,
    parse_preset_config,
    reload_preset_config,
)
from neuroadapt.core.presets.types import PresetId, QuestionDomain, ScoreCategory


class TestDefaultRules:
    """Tests for the built-in rule defaults."""

    def test_baseline(self, preset_config: PresetConfig) -> None:
        """Test the standard preset starts ahead of the others."""
        assert preset_config.baseline[PresetId.STANDARD] == 15.0
        for preset in PresetId:
            if preset is not PresetId.STANDARD:
                assert preset_config.baseline[preset] == 10.0

    def test_rule_tables(self, preset_config: PresetConfig) -> None:
        """Test the default questionnaire and cluster rule tables."""
        assert [r.name for r in preset_config.questionnaire_rules] == [
            "attention",
            "attention_with_sensory",
            "reading",
            "social",
            "sensory",
        ]
        assert [r.name for r in preset_config.cluster_rules] == [
            "adhd",
            "dyslexia",
            "autism",
            "sensory_processing",
        ]

        adhd = preset_config.cluster_rules[0]
        assert adhd.conditions == {
            ScoreCategory.ATTENTION: 16.0,
            ScoreCategory.SENSORY_PROCESSING: 10.0,
        }
        assert adhd.boosts == {PresetId.FOCUS_ENHANCED: 20.0}

    def test_bands_sorted_descending(self, preset_config: PresetConfig) -> None:
        """Test font evidence bands are checked from the highest down."""
        thresholds = [band.min_evidence for band in preset_config.font_test.bands]

        assert thresholds == [3.0, 2.0, 1.0]

    def test_font_families(self, preset_config: PresetConfig) -> None:
        """Test font family matching by keyword."""
        fonts = preset_config.font_test

        assert fonts.is_dyslexia_friendly("OpenDyslexic")
        assert fonts.is_dyslexia_friendly("Comic Neue")
        assert fonts.is_conventional("Times New Roman")
        assert fonts.is_conventional("Georgia")
        assert not fonts.is_dyslexia_friendly("Roboto")
        assert not fonts.is_conventional("Roboto")

    def test_trait_thresholds(self, preset_config: PresetConfig) -> None:
        """Test trait thresholds per category."""
        assert preset_config.trait_thresholds[ScoreCategory.ATTENTION] == 18
        assert preset_config.trait_thresholds[ScoreCategory.MOTOR_SKILLS] == 12


class TestOverrides:
    """Tests for overrides layered over the defaults."""

    def test_partial_override_keeps_other_defaults(self) -> None:
        """Test overriding one baseline keeps the rest."""
        config = parse_preset_config({"baseline": {"standard": 18}})

        assert config.baseline[PresetId.STANDARD] == 18.0
        assert config.baseline[PresetId.FOCUS_CALM] == 10.0

    @pytest.mark.parametrize("value", [0, -4])
    def test_non_positive_baseline_keeps_default(self, value: float) -> None:
        """Test a baseline must stay positive."""
        config = parse_preset_config({"baseline": {"sensory_calm": value}})

        assert config.baseline[PresetId.SENSORY_CALM] == 10.0

    def test_negative_boost_clamped(self) -> None:
        """Test negative weights never reach the analyzers."""
        config = parse_preset_config(
            {
                "clusters": {
                    "rules": [
                        {
                            "name": "custom",
                            "conditions": {"attention": 5},
                            "boosts": {"focus_enhanced": -3},
                        }
                    ]
                }
            }
        )

        assert len(config.cluster_rules) == 1
        assert config.cluster_rules[0].boosts == {PresetId.FOCUS_ENHANCED: 0.0}

    def test_unknown_preset_and_condition_skipped(self) -> None:
        """Test unknown names in a rule are skipped."""
        config = parse_preset_config(
            {
                "questionnaire": {
                    "rules": [
                        {
                            "name": "mixed",
                            "conditions": {"attention": 10, "math": 3},
                            "boosts": {"focus_calm": 4, "dark_mode": 9},
                        },
                        {
                            "name": "empty",
                            "conditions": {"math": 3},
                            "boosts": {"focus_calm": 4},
                        },
                    ]
                }
            }
        )

        assert len(config.questionnaire_rules) == 1
        rule = config.questionnaire_rules[0]
        assert rule.conditions == {QuestionDomain.ATTENTION: 10.0}
        assert rule.boosts == {PresetId.FOCUS_CALM: 4.0}

    def test_age_priors_bounded(self) -> None:
        """Test age priors cannot exceed max_prior."""
        config = parse_preset_config(
            {"demographic": {"age_priors": {"5-8": {"focus_enhanced": 20}}}}
        )

        assert config.demographic.age_priors["5-8"] == {PresetId.FOCUS_ENHANCED: 5.0}


class TestThresholdRule:
    """Tests for ThresholdRule matching."""

    def test_all_conditions_must_hold(self) -> None:
        """Test rules fire only when every minimum is met."""
        rule = ThresholdRule(
            name="adhd",
            conditions={ScoreCategory.ATTENTION: 16, ScoreCategory.SENSORY_PROCESSING: 10},
            boosts={PresetId.FOCUS_ENHANCED: 20.0},
        )

        assert rule.matches({ScoreCategory.ATTENTION: 16, ScoreCategory.SENSORY_PROCESSING: 10})
        assert not rule.matches({ScoreCategory.ATTENTION: 20, ScoreCategory.SENSORY_PROCESSING: 9})
        assert not rule.matches({ScoreCategory.ATTENTION: 20})


@pytest.mark.usefixtures("clean_caches")
class TestLoadPresetConfig:
    """Tests for loading rules from YAML."""

    def test_loads_overrides_from_file(self, tmp_path: Path) -> None:
        """Test values in the rules file override defaults."""
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text("presets:\n  baseline:\n    standard: 20\n")

        config = load_preset_config(str(rules_file))

        assert config.baseline[PresetId.STANDARD] == 20.0
        assert len(config.cluster_rules) == 4

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path) -> None:
        """Test a missing rules file yields the defaults."""
        config = load_preset_config(str(tmp_path / "absent.yaml"))

        assert config == parse_preset_config()

    def test_invalid_file_falls_back_to_defaults(self, tmp_path: Path) -> None:
        """Test an unparsable rules file yields the defaults."""
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text("presets: [unclosed\n")

        config = load_preset_config(str(rules_file))

        assert config == parse_preset_config()

    def test_bundled_rules_match_defaults(self) -> None:
        """Test the shipped rules file restates the in-code defaults."""
        assert reload_preset_config() == parse_preset_config()

    def test_results_are_cached(self, tmp_path: Path) -> None:
        """Test repeated loads return the cached instance."""
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text("presets: {}\n")

        first = load_preset_config(str(rules_file))
        second = load_preset_config(str(rules_file))

        assert first is second
