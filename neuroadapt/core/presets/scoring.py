# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Score accumulation and preset selection.

Each classification run owns one PresetScoreVector. Analyzer deltas are
summed per preset on top of the baseline, so the merge is independent of
the order analyzers ran in.
"""

from collections.abc import Iterable, Mapping

from neuroadapt.core.presets.analyzers.base import AnalyzerResult
from neuroadapt.core.presets.types import PRESET_ORDER, PresetId


class PresetScoreVector:
    """Running score per preset for one classification run.

    Usage:
        vector = PresetScoreVector(config.baseline)
        vector.merge(results)
        preset = vector.select()
    """

    def __init__(self, baseline: Mapping[PresetId, float]) -> None:
        """Initialize from baseline scores.

        Args:
            baseline: Starting score per preset. Presets missing from it
                start at 0.0.
        """
        self._baseline: dict[PresetId, float] = {
            preset: float(baseline.get(preset, 0.0)) for preset in PRESET_ORDER
        }
        self._scores: dict[PresetId, float] = dict(self._baseline)

    @property
    def baseline(self) -> dict[PresetId, float]:
        """Copy of the baseline scores."""
        return dict(self._baseline)

    @property
    def scores(self) -> dict[PresetId, float]:
        """Copy of the current scores, in preset order."""
        return dict(self._scores)

    def __getitem__(self, preset: PresetId) -> float:
        return self._scores[preset]

    def add(self, deltas: Mapping[PresetId, float]) -> None:
        """Add one analyzer's deltas.

        Raises:
            ValueError: If any delta is negative.
        """
        for preset, amount in deltas.items():
            if amount < 0:
                raise ValueError(f"Negative delta for {preset.value}: {amount}")
            self._scores[preset] += amount

    def merge(self, results: Iterable[AnalyzerResult]) -> None:
        """Add the deltas of every analyzer result."""
        for result in results:
            self.add(result.deltas)

    def select(self) -> PresetId:
        """Return the highest-scoring preset.

        Ties resolve to the earliest preset in PRESET_ORDER.
        """
        return max(PRESET_ORDER, key=lambda preset: self._scores[preset])

    def ranked(self) -> list[tuple[PresetId, float]]:
        """Presets sorted by descending score, ties in preset order."""
        return sorted(self._scores.items(), key=lambda item: -item[1])


def accumulate(
    baseline: Mapping[PresetId, float],
    results: Iterable[AnalyzerResult],
) -> PresetScoreVector:
    """Build a score vector from a baseline and analyzer results."""
    vector = PresetScoreVector(baseline)
    vector.merge(results)
    return vector
