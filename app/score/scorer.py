"""Weighted multi-criteria scoring engine for vendor evaluations."""

import logging
from typing import Iterable, Mapping, Optional

from app.config import settings
from app.models import AwardStatus, Category, EvaluationTemplate, ScoreResult, Vendor

logger = logging.getLogger(__name__)


def has_scores(category: Category, scores: Mapping[str, float]) -> bool:
    """True if at least one criterion of the category has been scored."""
    return any(scores.get(c.id) is not None for c in category.criteria)


def score_category(category: Category, scores: Mapping[str, float]) -> float:
    """Score a category as a percentage (0-100).

    Only scored criteria count: each contributes ``raw / max_score * weight``
    and the sum is divided by the weight actually seen, so a partially
    evaluated category is judged on the criteria completed so far.
    Returns 0 when nothing in the category has been scored.
    """
    weighted_sum = 0.0
    weight_seen = 0.0

    for criterion in category.criteria:
        raw = scores.get(criterion.id)
        if raw is None:
            continue
        weighted_sum += (raw / criterion.max_score) * criterion.weight
        weight_seen += criterion.weight

    if weight_seen > 0:
        return (weighted_sum / weight_seen) * 100
    return 0.0


def score_total(categories: Iterable[Category], scores: Mapping[str, float]) -> float:
    """Score a whole tree as a percentage (0-100).

    Categories without any scored criterion are left out of both sums
    rather than counted as 0%.
    """
    total_weighted_sum = 0.0
    total_weight_seen = 0.0

    for category in categories:
        if not has_scores(category, scores):
            continue
        total_weighted_sum += score_category(category, scores) / 100 * category.weight
        total_weight_seen += category.weight

    if total_weight_seen > 0:
        return (total_weighted_sum / total_weight_seen) * 100
    return 0.0


def classify_award(
    total_score: Optional[float],
    threshold: Optional[float] = None,
) -> AwardStatus:
    """Qualified when the score reaches the threshold (inclusive)."""
    if threshold is None:
        threshold = settings.minimum_qualifying_score
    if total_score is not None and total_score >= threshold:
        return AwardStatus.QUALIFIED
    return AwardStatus.NOT_QUALIFIED


class Scorer:
    """Score and rank vendors against an evaluation template."""

    def __init__(self, threshold: Optional[float] = None):
        # Explicit threshold wins over the template's, which wins over settings
        self.threshold = threshold

    def resolve_threshold(self, template: EvaluationTemplate) -> float:
        if self.threshold is not None:
            return self.threshold
        if template.minimum_qualifying_score is not None:
            return template.minimum_qualifying_score
        return settings.minimum_qualifying_score

    def score(self, vendor: Vendor, template: EvaluationTemplate) -> ScoreResult:
        """Score a single vendor."""
        scores = vendor.scores
        category_scores = {
            category.id: score_category(category, scores)
            for category in template.categories
        }

        criteria = template.all_criteria()
        scored = sum(1 for c in criteria if scores.get(c.id) is not None)

        # Undefined rather than 0 when nothing has been entered yet
        total_score = score_total(template.categories, scores) if scored else None

        return ScoreResult(
            vendor_id=vendor.id,
            vendor_name=vendor.name,
            category_scores=category_scores,
            total_score=total_score,
            award_status=classify_award(total_score, self.resolve_threshold(template)),
            scored_criteria=scored,
            total_criteria=len(criteria),
        )

    def score_and_rank(
        self,
        vendors: list[Vendor],
        template: EvaluationTemplate,
    ) -> list[ScoreResult]:
        """Score all vendors and return them best first."""
        results = [self.score(vendor, template) for vendor in vendors]

        # Unscored vendors last; ties broken by coverage, then name (stable sort)
        results.sort(key=lambda r: r.vendor_name.lower())
        results.sort(
            key=lambda r: (r.total_score is not None, r.total_score or 0.0, r.scored_criteria),
            reverse=True,
        )

        for i, result in enumerate(results):
            result.rank = i + 1

        logger.debug(f"Ranked {len(results)} vendors for template {template.id}")
        return results
