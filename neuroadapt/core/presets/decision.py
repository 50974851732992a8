# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preset decisions and the decision audit log.

Preset decisions change the interface a vulnerable student works in, so
every decision keeps its full score vector and per-analyzer contributions
and must be explainable on request.
"""

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from neuroadapt.core.presets.analyzers.base import AnalyzerResult
from neuroadapt.core.presets.types import PRESET_ORDER, PresetId
from neuroadapt.utils.datetime import ensure_utc, utc_now
from neuroadapt.utils.logging import get_logger

logger = logging.getLogger(__name__)


class AnalyzerContribution(BaseModel):
    """What one analyzer added to the decision."""

    model_config = ConfigDict(frozen=True)

    analyzer: str
    deltas: dict[PresetId, float] = Field(default_factory=dict)
    summary: str = ""
    evidence: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: AnalyzerResult) -> "AnalyzerContribution":
        """Snapshot an analyzer result."""
        return cls(
            analyzer=result.analyzer,
            deltas=dict(result.deltas),
            summary=result.summary,
            evidence=[e.to_dict() for e in result.evidence],
        )


class PresetDecision(BaseModel):
    """Outcome of one classification run.

    Attributes:
        user_id: Classified user.
        preset_id: Selected preset.
        scores: Final score per preset.
        baseline: Starting score per preset.
        contributions: Per-analyzer deltas and evidence.
        decided_at: When the decision was made.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str | int | None = None
    preset_id: PresetId
    scores: dict[PresetId, float]
    baseline: dict[PresetId, float] = Field(default_factory=dict)
    contributions: list[AnalyzerContribution] = Field(default_factory=list)
    decided_at: datetime = Field(default_factory=utc_now)

    @field_validator("decided_at")
    @classmethod
    def _decided_at_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def ranked(self) -> list[tuple[PresetId, float]]:
        """Presets by descending score, ties in preset order."""
        ordered = [(preset, self.scores.get(preset, 0.0)) for preset in PRESET_ORDER]
        return sorted(ordered, key=lambda item: -item[1])

    @property
    def margin(self) -> float:
        """Score gap between the selected preset and the runner-up."""
        ranked = self.ranked
        if len(ranked) < 2:
            return 0.0
        return ranked[0][1] - ranked[1][1]

    def contribution(self, analyzer: str) -> AnalyzerContribution | None:
        """Get one analyzer's contribution by name."""
        return next((c for c in self.contributions if c.analyzer == analyzer), None)

    def reasoning(self) -> str:
        """Human-readable ranking, e.g. "standard(20.0) focus_calm(15.0) ..."."""
        return " ".join(f"{preset.value}({score:.1f})" for preset, score in self.ranked)

    def same_outcome(self, other: "PresetDecision") -> bool:
        """Compare everything except the timestamp."""
        return self.model_dump(exclude={"decided_at"}) == other.model_dump(exclude={"decided_at"})

    def to_audit_dict(self) -> dict[str, Any]:
        """JSON-safe audit record of the decision."""
        return self.model_dump(mode="json")


class DecisionLogger:
    """Writes every preset decision to the application and audit logs."""

    AUDIT_EVENT = "preset_decision"

    def __init__(self) -> None:
        """Initialize the decision logger."""
        self._audit_logger = get_logger("neuroadapt.audit")

    def record(self, decision: PresetDecision) -> dict[str, Any]:
        """Log a decision with its full score vector.

        Args:
            decision: Decision to record.

        Returns:
            The audit record that was emitted.
        """
        audit = decision.to_audit_dict()

        logger.info(
            "Preset decision for user %s: selected '%s'",
            decision.user_id,
            decision.preset_id.value,
            extra={"scores": audit["scores"]},
        )
        logger.info("Decision reasoning: %s", decision.reasoning())

        self._audit_logger.info(
            self.AUDIT_EVENT,
            user_id=decision.user_id,
            preset_id=decision.preset_id.value,
            scores=audit["scores"],
            margin=decision.margin,
            contributions={
                c["analyzer"]: c["deltas"] for c in audit["contributions"]
            },
            decided_at=audit["decided_at"],
        )

        return audit
