"""Editable evaluation matrix: template tree, vendors and their scores."""

import logging
from datetime import datetime
from typing import Optional

from app.errors import AwardNotAllowedError, InvalidCriterionError, NotFoundError
from app.models import (
    Category,
    Criterion,
    Evaluation,
    EvaluationTemplate,
    PerformanceSummary,
    ScoreResult,
    Vendor,
)
from .scorer import Scorer
from .summary import PerformanceSummarizer
from .validation import (
    validate_criterion,
    validate_score,
    validate_template,
    validate_vendor_scores,
    weight_warnings,
)

logger = logging.getLogger(__name__)


class EvaluationMatrix:
    """Holds one evaluation and applies edits to it.

    The matrix works on its own copy of the template and vendors. Every
    edit is validated before it is applied. Scores are recomputed on every
    read; nothing is cached.
    """

    def __init__(
        self,
        template: EvaluationTemplate,
        vendors: Optional[list[Vendor]] = None,
        awarded_vendor_id: Optional[str] = None,
        scorer: Optional[Scorer] = None,
    ):
        validate_template(template)
        self.template = template.model_copy(deep=True)
        self.vendors: list[Vendor] = []
        self.awarded_vendor_id = awarded_vendor_id
        self.scorer = scorer or Scorer()
        self.summarizer = PerformanceSummarizer(self.scorer)

        # Existing vendors may carry entries for criteria removed since
        for vendor in vendors or []:
            self._add_vendor(vendor, strict=False)

        for warning in weight_warnings(template):
            logger.warning(f"Template {template.id}: {warning}")

    @classmethod
    def from_evaluation(
        cls,
        evaluation: Evaluation,
        scorer: Optional[Scorer] = None,
    ) -> "EvaluationMatrix":
        return cls(
            evaluation.template,
            vendors=evaluation.vendors,
            awarded_vendor_id=evaluation.awarded_vendor_id,
            scorer=scorer,
        )

    def to_evaluation(self) -> Evaluation:
        return Evaluation(
            template=self.template.model_copy(deep=True),
            vendors=[v.model_copy(deep=True) for v in self.vendors],
            awarded_vendor_id=self.awarded_vendor_id,
            updated_at=datetime.utcnow(),
        )

    # Template editing

    def get_category(self, category_id: str) -> Category:
        category = self.template.get_category(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    def get_criterion(self, criterion_id: str) -> Criterion:
        found = self.template.find_criterion(criterion_id)
        if found is None:
            raise NotFoundError("Criterion", criterion_id)
        return found[1]

    def add_category(self, category: Category) -> Category:
        category = category.model_copy(deep=True)
        candidate = self.template.model_copy(
            update={"categories": [*self.template.categories, category]}
        )
        validate_template(candidate)

        self.template.categories.append(category)
        logger.info(f"Added category {category.id} to template {self.template.id}")
        return category

    def remove_category(self, category_id: str) -> Category:
        category = self.get_category(category_id)
        self.template.categories.remove(category)
        for criterion in category.criteria:
            self._drop_entries(criterion.id)
        logger.info(f"Removed category {category_id} from template {self.template.id}")
        self._recheck_award()
        return category

    def add_criterion(self, category_id: str, criterion: Criterion) -> Criterion:
        category = self.get_category(category_id)
        if self.template.find_criterion(criterion.id) is not None:
            raise InvalidCriterionError(f"Duplicate criterion id: {criterion.id}")
        validate_criterion(criterion)

        criterion = criterion.model_copy(deep=True)
        category.criteria.append(criterion)
        logger.info(f"Added criterion {criterion.id} to category {category_id}")
        return criterion

    def remove_criterion(self, criterion_id: str) -> Criterion:
        found = self.template.find_criterion(criterion_id)
        if found is None:
            raise NotFoundError("Criterion", criterion_id)
        category, criterion = found

        category.criteria.remove(criterion)
        self._drop_entries(criterion_id)
        logger.info(f"Removed criterion {criterion_id} from category {category.id}")
        self._recheck_award()
        return criterion

    def _drop_entries(self, criterion_id: str) -> None:
        """Forget every score and note entered for a criterion."""
        for vendor in self.vendors:
            vendor.scores.pop(criterion_id, None)
            vendor.notes.pop(criterion_id, None)

    # Vendors, scores and notes

    def get_vendor(self, vendor_id: str) -> Vendor:
        for vendor in self.vendors:
            if vendor.id == vendor_id:
                return vendor
        raise NotFoundError("Vendor", vendor_id)

    def add_vendor(self, vendor: Vendor) -> Vendor:
        """Add a vendor; every score and note must name a known criterion."""
        return self._add_vendor(vendor, strict=True)

    def _add_vendor(self, vendor: Vendor, strict: bool) -> Vendor:
        if any(v.id == vendor.id for v in self.vendors):
            raise InvalidCriterionError(f"Duplicate vendor id: {vendor.id}")
        validate_vendor_scores(vendor, self.template, strict=strict)

        vendor = vendor.model_copy(deep=True)
        self.vendors.append(vendor)
        return vendor

    def remove_vendor(self, vendor_id: str) -> Vendor:
        vendor = self.get_vendor(vendor_id)
        self.vendors.remove(vendor)
        if self.awarded_vendor_id == vendor_id:
            self.awarded_vendor_id = None
            logger.info(f"Cleared award of template {self.template.id}: vendor {vendor_id} removed")
        return vendor

    def set_score(self, vendor_id: str, criterion_id: str, value: float) -> ScoreResult:
        """Enter a raw score and return the vendor's updated result."""
        vendor = self.get_vendor(vendor_id)
        criterion = self.get_criterion(criterion_id)
        validate_score(criterion, value)

        vendor.scores[criterion_id] = value
        self._recheck_award()
        return self.result(vendor_id)

    def clear_score(self, vendor_id: str, criterion_id: str) -> ScoreResult:
        """Mark a criterion as not yet evaluated for the vendor."""
        vendor = self.get_vendor(vendor_id)
        self.get_criterion(criterion_id)
        vendor.scores.pop(criterion_id, None)
        self._recheck_award()
        return self.result(vendor_id)

    def set_note(self, vendor_id: str, criterion_id: str, note: str) -> Vendor:
        """Attach an evaluator note; a blank note removes it."""
        vendor = self.get_vendor(vendor_id)
        self.get_criterion(criterion_id)

        note = note.strip()
        if note:
            vendor.notes[criterion_id] = note
        else:
            vendor.notes.pop(criterion_id, None)
        return vendor

    def clear_note(self, vendor_id: str, criterion_id: str) -> Vendor:
        vendor = self.get_vendor(vendor_id)
        self.get_criterion(criterion_id)
        vendor.notes.pop(criterion_id, None)
        return vendor

    # Results

    def result(self, vendor_id: str) -> ScoreResult:
        return self.scorer.score(self.get_vendor(vendor_id), self.template)

    def results(self) -> list[ScoreResult]:
        return self.scorer.score_and_rank(self.vendors, self.template)

    def summary(self, vendor_id: str) -> PerformanceSummary:
        return self.summarizer.summarize(self.get_vendor(vendor_id), self.template)

    @property
    def threshold(self) -> float:
        return self.scorer.resolve_threshold(self.template)

    def award(self, vendor_id: str) -> ScoreResult:
        """Award the contract to a vendor that meets the qualifying score."""
        result = self.result(vendor_id)
        if not result.is_qualified:
            raise AwardNotAllowedError(vendor_id, result.total_score, self.threshold)

        self.awarded_vendor_id = vendor_id
        logger.info(
            f"Awarded template {self.template.id} to vendor {vendor_id} "
            f"({result.total_score:.1f}%)"
        )
        return result

    def _recheck_award(self) -> None:
        """Withdraw the award once the awarded vendor no longer qualifies."""
        if self.awarded_vendor_id is None:
            return

        vendor = next((v for v in self.vendors if v.id == self.awarded_vendor_id), None)
        if vendor is not None and self.scorer.score(vendor, self.template).is_qualified:
            return

        logger.warning(
            f"Withdrew award of template {self.template.id} from vendor "
            f"{self.awarded_vendor_id}: no longer qualified"
        )
        self.awarded_vendor_id = None
