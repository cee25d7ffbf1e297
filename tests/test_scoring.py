"""Tests for the weighted scoring engine."""

import math
import pytest

from app.models import AwardStatus, Category, Criterion, EvaluationTemplate, Vendor
from app.score.scorer import Scorer, classify_award, score_category, score_total


def make_category(category_id="functional", weight=0.6, criteria=None) -> Category:
    """Create a test category with defaults."""
    if criteria is None:
        criteria = [
            Criterion(id="f1", name="Core Features", weight=0.3, priority="HIGH"),
            Criterion(id="f2", name="Integration Capabilities", weight=0.2),
        ]
    return Category(id=category_id, name=category_id.title(), weight=weight, criteria=criteria)


def make_template(**kwargs) -> EvaluationTemplate:
    """Create the two-category template used across the tests."""
    defaults = {
        "id": "software-2025",
        "name": "Software Development Project 2025",
        "categories": [
            make_category(),
            make_category(
                "non-functional",
                weight=0.4,
                criteria=[
                    Criterion(id="nf1", name="Performance", weight=0.2, priority="HIGH"),
                    Criterion(id="nf2", name="Scalability", weight=0.1),
                ],
            ),
        ],
    }
    defaults.update(kwargs)
    return EvaluationTemplate(**defaults)


class TestScoreCategory:
    """Tests for per-category scoring."""

    def test_no_scores_returns_zero(self):
        result = score_category(make_category(), {})
        assert result == 0
        assert not math.isnan(result)

    def test_all_max_scores_returns_hundred(self):
        assert score_category(make_category(), {"f1": 5, "f2": 5}) == 100

    def test_weighted_average(self):
        # (1.0 * 0.3 + 0.0 * 0.2) / 0.5 * 100
        assert score_category(make_category(), {"f1": 5, "f2": 0}) == pytest.approx(60)

    def test_absent_score_is_not_zero(self):
        category = make_category()
        assert score_category(category, {"f1": 5}) == 100
        assert score_category(category, {"f1": 5, "f2": 0}) == pytest.approx(60)

    def test_partial_evaluation_uses_weight_seen(self):
        # Only the lowest-weighted criterion scored still yields 100%
        assert score_category(make_category(), {"f2": 5}) == 100

    def test_custom_max_score(self):
        category = make_category(criteria=[
            Criterion(id="c1", name="Uptime", weight=1.0, max_score=10),
        ])
        assert score_category(category, {"c1": 5}) == pytest.approx(50)

    def test_ignores_scores_for_other_criteria(self):
        assert score_category(make_category(), {"nf1": 5}) == 0

    def test_empty_category(self):
        assert score_category(make_category(criteria=[]), {"f1": 5}) == 0

    def test_none_value_treated_as_unscored(self):
        assert score_category(make_category(), {"f1": 4, "f2": None}) == pytest.approx(80)


class TestScoreTotal:
    """Tests for the overall score."""

    def test_no_scores_returns_zero(self):
        assert score_total(make_template().categories, {}) == 0

    def test_all_max_scores_returns_hundred(self):
        scores = {"f1": 5, "f2": 5, "nf1": 5, "nf2": 5}
        assert score_total(make_template().categories, scores) == pytest.approx(100)

    def test_weighted_across_categories(self):
        scores = {"f1": 5, "f2": 0, "nf1": 5, "nf2": 5}
        # functional 60% * 0.6 + non-functional 100% * 0.4
        assert score_total(make_template().categories, scores) == pytest.approx(76)

    def test_unscored_category_is_ignored(self):
        categories = [
            make_category("a", weight=0.6),
            make_category(
                "b",
                weight=0.4,
                criteria=[Criterion(id="b1", name="Support", weight=1.0)],
            ),
        ]
        assert score_total(categories, {"b1": 5}) == 100

    def test_permutation_invariant(self):
        categories = make_template().categories
        scores = {"f1": 3, "f2": 4, "nf1": 2, "nf2": 5}
        forward = score_total(categories, scores)
        backward = score_total(list(reversed(categories)), scores)
        assert forward == pytest.approx(backward)

    def test_json_round_trip_preserves_total(self):
        template = make_template()
        vendor = Vendor(id="v1", name="Vendor A", scores={"f1": 3, "f2": 4, "nf1": 1})

        template_copy = type(template).model_validate_json(template.model_dump_json())
        vendor_copy = Vendor.model_validate_json(vendor.model_dump_json())

        assert score_total(template_copy.categories, vendor_copy.scores) == \
            score_total(template.categories, vendor.scores)


class TestClassifyAward:
    """Tests for award qualification."""

    def test_just_below_threshold(self):
        assert classify_award(84.999, 85) == AwardStatus.NOT_QUALIFIED

    def test_threshold_is_inclusive(self):
        assert classify_award(85.0, 85) == AwardStatus.QUALIFIED

    def test_default_threshold(self):
        assert classify_award(85.0) == AwardStatus.QUALIFIED
        assert classify_award(84.9) == AwardStatus.NOT_QUALIFIED

    def test_custom_threshold(self):
        assert classify_award(70, threshold=70) == AwardStatus.QUALIFIED

    def test_unscored_is_not_qualified(self):
        assert classify_award(None, 0) == AwardStatus.NOT_QUALIFIED


class TestScorer:
    """Tests for the vendor-level scorer."""

    def test_unscored_vendor_has_no_total(self):
        result = Scorer().score(Vendor(id="v1", name="Vendor A"), make_template())
        assert result.total_score is None
        assert result.award_status == AwardStatus.NOT_QUALIFIED
        assert result.category_scores == {"functional": 0, "non-functional": 0}
        assert result.scored_criteria == 0
        assert result.total_criteria == 4

    def test_score_breakdown(self):
        vendor = Vendor(id="v1", name="Vendor A", scores={"f1": 5, "f2": 0, "nf1": 5, "nf2": 5})
        result = Scorer().score(vendor, make_template())
        assert result.category_scores["functional"] == pytest.approx(60)
        assert result.category_scores["non-functional"] == 100
        assert result.total_score == pytest.approx(76)
        assert result.award_status == AwardStatus.NOT_QUALIFIED
        assert result.scored_criteria == 4

    def test_template_threshold(self):
        vendor = Vendor(id="v1", name="Vendor A", scores={"f1": 5, "f2": 0, "nf1": 5, "nf2": 5})
        result = Scorer().score(vendor, make_template(minimum_qualifying_score=75))
        assert result.is_qualified

    def test_explicit_threshold_overrides_template(self):
        vendor = Vendor(id="v1", name="Vendor A", scores={"f1": 5, "f2": 5})
        template = make_template(minimum_qualifying_score=75)
        result = Scorer(threshold=101).score(vendor, template)
        assert not result.is_qualified

    def test_rank_vendors(self):
        template = make_template()
        vendors = [
            Vendor(id="v1", name="Unscored"),
            Vendor(id="v2", name="Low", scores={"f1": 1, "f2": 1}),
            Vendor(id="v3", name="High", scores={"f1": 5, "f2": 5, "nf1": 4}),
        ]
        results = Scorer().score_and_rank(vendors, template)
        assert [r.vendor_name for r in results] == ["High", "Low", "Unscored"]
        assert [r.rank for r in results] == [1, 2, 3]

    def test_rank_ties_prefer_coverage_then_name(self):
        template = make_template()
        vendors = [
            Vendor(id="v1", name="Zeta", scores={"f1": 5}),
            Vendor(id="v2", name="Alpha", scores={"f1": 5}),
            Vendor(id="v3", name="Broad", scores={"f1": 5, "f2": 5}),
        ]
        results = Scorer().score_and_rank(vendors, template)
        assert [r.vendor_name for r in results] == ["Broad", "Alpha", "Zeta"]
