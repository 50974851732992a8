# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Questionnaire evidence analyzer.

Self-reported answers are a medium-confidence signal, layered on top of
font-test evidence rather than replacing it.
"""

from neuroadapt.core.presets.analyzers.base import (
    AnalyzerResult,
    AssessmentEvidence,
    BaseAnalyzer,
)
from neuroadapt.core.presets.types import QuestionDomain


class QuestionnaireAnalyzer(BaseAnalyzer):
    """Sums normalized responses per domain and applies domain thresholds.

    Questions whose domain tag is missing or unknown are dropped, never
    guessed.
    """

    @property
    def name(self) -> str:
        """Return analyzer name."""
        return "questionnaire"

    @property
    def description(self) -> str:
        """Return analyzer description."""
        return "Applies domain thresholds to questionnaire response totals."

    def analyze(self, evidence: AssessmentEvidence) -> AnalyzerResult:
        """Analyze questionnaire responses.

        Args:
            evidence: Classification input.

        Returns:
            AnalyzerResult; empty when no responses were submitted.
        """
        if not evidence.responses:
            self.logger.warning(
                "No questionnaire responses available for analysis",
                extra={"user_id": evidence.user_id},
            )
            return AnalyzerResult.empty(self.name, "No questionnaire responses")

        totals = self.domain_totals(evidence)
        result = self.new_result(sample_size=len(evidence.responses))
        data = {domain.value: total for domain, total in totals.items()}

        for rule in self.config.questionnaire_rules:
            if rule.matches(totals):
                result.apply(
                    rule.boosts,
                    category="questionnaire",
                    description=f"Questionnaire rule '{rule.name}' met",
                    data=data,
                )

        result.summary = (
            "Questionnaire totals: "
            + ", ".join(f"{domain.value}={total:g}" for domain, total in totals.items())
        )

        self.logger.info(
            "Questionnaire evidence computed",
            extra={"user_id": evidence.user_id, "totals": data},
        )

        return result

    def domain_totals(self, evidence: AssessmentEvidence) -> dict[QuestionDomain, float]:
        """Sum responses per domain.

        Args:
            evidence: Classification input.

        Returns:
            Total per domain (every domain present, zero when unanswered).
        """
        totals: dict[QuestionDomain, float] = {domain: 0.0 for domain in QuestionDomain}

        for question_id, score in evidence.responses.items():
            tag = evidence.question_domains.get(question_id)
            domain = QuestionDomain.parse(tag)
            if domain is None:
                self.logger.info(
                    "Response dropped: no questionnaire domain",
                    extra={
                        "user_id": evidence.user_id,
                        "question_id": question_id,
                        "domain_tag": tag,
                    },
                )
                continue
            totals[domain] += score

        return totals
