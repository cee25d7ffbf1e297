"""Checks applied when a template is built or a score is entered."""

import logging

from app.config import settings
from app.errors import (
    InvalidCriterionError,
    InvalidWeightError,
    NotFoundError,
    ScoreOutOfRangeError,
)
from app.models import Category, Criterion, EvaluationTemplate, Vendor

logger = logging.getLogger(__name__)


def validate_weight(weight: float, owner: str) -> None:
    """Raise InvalidWeightError unless 0 <= weight <= 1."""
    if not 0 <= weight <= 1:
        raise InvalidWeightError(weight, owner)


def validate_criterion(criterion: Criterion) -> None:
    validate_weight(criterion.weight, f"criterion {criterion.id}")
    if criterion.max_score <= 0:
        raise InvalidCriterionError(
            f"Max score for criterion {criterion.id} must be positive, got {criterion.max_score}"
        )


def validate_category(category: Category) -> None:
    validate_weight(category.weight, f"category {category.id}")
    for criterion in category.criteria:
        validate_criterion(criterion)


def validate_score(criterion: Criterion, value: float) -> None:
    """Raise ScoreOutOfRangeError unless 0 <= value <= max_score."""
    if not 0 <= value <= criterion.max_score:
        raise ScoreOutOfRangeError(criterion.id, value, criterion.max_score)


def validate_template(template: EvaluationTemplate) -> None:
    """Validate every weight in the tree and reject duplicate ids."""
    category_ids = set()
    criterion_ids = set()

    for category in template.categories:
        if category.id in category_ids:
            raise InvalidCriterionError(f"Duplicate category id: {category.id}")
        category_ids.add(category.id)
        validate_category(category)

        for criterion in category.criteria:
            if criterion.id in criterion_ids:
                raise InvalidCriterionError(f"Duplicate criterion id: {criterion.id}")
            criterion_ids.add(criterion.id)


def validate_vendor_scores(
    vendor: Vendor,
    template: EvaluationTemplate,
    strict: bool = True,
) -> None:
    """Validate the scores and notes of a vendor against the template.

    With strict=False, entries for criteria the template no longer has are
    only logged. That is the case for stored data, where the engine
    ignores them.
    """
    for criterion_id in vendor.notes:
        if template.find_criterion(criterion_id) is None:
            _unknown_criterion(vendor, criterion_id, strict)

    for criterion_id, value in vendor.scores.items():
        found = template.find_criterion(criterion_id)
        if found is None:
            _unknown_criterion(vendor, criterion_id, strict)
            continue
        validate_score(found[1], value)


def _unknown_criterion(vendor: Vendor, criterion_id: str, strict: bool) -> None:
    if strict:
        raise NotFoundError("Criterion", criterion_id)
    logger.debug(f"Vendor {vendor.id} has an entry for unknown criterion {criterion_id}")


def weight_warnings(template: EvaluationTemplate) -> list[str]:
    """Report sibling weights that do not sum to 1.0.

    Scores are renormalized by the weight actually seen, so this is
    informational rather than an error.
    """
    warnings = []
    tolerance = settings.weight_sum_tolerance

    if template.categories:
        total = sum(c.weight for c in template.categories)
        if abs(total - 1.0) > tolerance:
            warnings.append(f"Category weights sum to {total:.3f}, not 1.0")

    for category in template.categories:
        if not category.criteria:
            continue
        total = sum(c.weight for c in category.criteria)
        if abs(total - 1.0) > tolerance:
            warnings.append(
                f"Criterion weights in category {category.id} sum to {total:.3f}, not 1.0"
            )

    return warnings
