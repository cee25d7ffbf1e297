"""Vendor performance summary: strengths, weaknesses and coverage."""

import logging
from typing import Optional

from app.config import settings
from app.models import (
    CategoryScore,
    CriterionHighlight,
    EvaluationTemplate,
    PerformanceSummary,
    Priority,
    ScoreResult,
    Vendor,
)
from .scorer import Scorer

logger = logging.getLogger(__name__)


class PerformanceSummarizer:
    """Summarize how a vendor performed across the evaluation tree."""

    def __init__(self, scorer: Optional[Scorer] = None):
        self.scorer = scorer or Scorer()

    def summarize(self, vendor: Vendor, template: EvaluationTemplate) -> PerformanceSummary:
        """Build the performance summary for one vendor."""
        result = self.scorer.score(vendor, template)
        highlights = self._scored_highlights(vendor, template)

        category_scores = [
            CategoryScore(
                id=category.id,
                name=category.name,
                weight=category.weight,
                score=result.category_scores.get(category.id, 0.0),
            )
            for category in template.categories
        ]

        completion_rate = 0.0
        if result.total_criteria:
            completion_rate = result.scored_criteria / result.total_criteria * 100

        weaknesses = self._weaknesses(highlights)
        high_priority_score = self._high_priority_score(highlights)

        return PerformanceSummary(
            vendor_id=vendor.id,
            vendor_name=vendor.name,
            total_score=result.total_score,
            award_status=result.award_status,
            category_scores=category_scores,
            strengths=self._strengths(highlights),
            weaknesses=weaknesses,
            high_priority_score=high_priority_score,
            completion_rate=completion_rate,
            recommendations=self._recommendations(result, high_priority_score, weaknesses),
        )

    def _scored_highlights(
        self,
        vendor: Vendor,
        template: EvaluationTemplate,
    ) -> list[CriterionHighlight]:
        """One highlight per scored criterion, in template order."""
        highlights = []
        for category in template.categories:
            for criterion in category.criteria:
                raw = vendor.scores.get(criterion.id)
                if raw is None:
                    continue
                highlights.append(CriterionHighlight(
                    id=criterion.id,
                    name=criterion.name,
                    category=category.name,
                    score=raw,
                    normalized=raw / criterion.max_score,
                    weight=criterion.weight,
                    priority=criterion.priority,
                ))
        return highlights

    def _strengths(self, highlights: list[CriterionHighlight]) -> list[CriterionHighlight]:
        strong = [h for h in highlights if h.normalized >= settings.strength_threshold]
        strong.sort(key=lambda h: (-h.normalized, -h.weight))
        return strong[:settings.summary_limit]

    def _weaknesses(self, highlights: list[CriterionHighlight]) -> list[CriterionHighlight]:
        # A zero is "N/A" on the rating scale, not a weakness
        weak = [
            h for h in highlights
            if 0 < h.normalized <= settings.weakness_threshold
        ]
        weak.sort(key=lambda h: (h.normalized, -h.weight))
        return weak[:settings.summary_limit]

    def _high_priority_score(self, highlights: list[CriterionHighlight]) -> Optional[float]:
        high = [h for h in highlights if h.priority == Priority.HIGH]
        if not high:
            return None
        return sum(h.normalized for h in high) / len(high) * 100

    def _recommendations(
        self,
        result: ScoreResult,
        high_priority_score: Optional[float],
        weaknesses: list[CriterionHighlight],
    ) -> list[str]:
        """Next steps for the evaluator, most serious first.

        Rules that depend on a score are skipped when that score is
        undefined.
        """
        recommendations = []
        total = result.total_score

        if total is not None and total < settings.alternative_vendor_score:
            recommendations.append("Consider alternative vendors with higher overall scores")

        if high_priority_score is not None and high_priority_score < settings.critical_requirement_score:
            recommendations.append(
                "Vendor does not meet critical requirements, further evaluation needed"
            )

        if weaknesses:
            recommendations.append("Request improvements in identified weak areas before proceeding")

        if result.is_qualified:
            recommendations.append("Vendor meets or exceeds requirements, suitable for contract award")

        if not recommendations:
            recommendations.append(
                "Request additional information in key areas before making final decision"
            )

        return recommendations
