"""Tests for evaluation persistence."""

import pytest

from app.errors import NotFoundError
from app.models import Category, Criterion, Evaluation, EvaluationTemplate, Vendor
from app.models.database import EvaluationRepository, init_db
from app.score import score_total


@pytest.fixture
def repo(tmp_path):
    return EvaluationRepository(init_db(f"sqlite:///{tmp_path / 'test.db'}"))


def make_evaluation(evaluation_id="rfp-1", **kwargs) -> Evaluation:
    """Create a test evaluation with one scored vendor."""
    template = EvaluationTemplate(
        id=evaluation_id,
        name="Cloud Infrastructure Migration",
        categories=[
            Category(id="tech", name="Technical", weight=0.7, criteria=[
                Criterion(id="t1", name="Architecture", weight=0.6),
                Criterion(id="t2", name="Security", weight=0.4, max_score=10),
            ]),
            Category(id="cost", name="Cost", weight=0.3, criteria=[
                Criterion(id="c1", name="Price", weight=1.0),
            ]),
        ],
    )
    defaults = {
        "template": template,
        "vendors": [Vendor(id="v1", name="Vendor A", scores={"t1": 4, "t2": 7})],
    }
    defaults.update(kwargs)
    return Evaluation(**defaults)


class TestEvaluationRepository:
    """Tests for the key-value evaluation store."""

    def test_save_and_get(self, repo):
        repo.save(make_evaluation())
        loaded = repo.get("rfp-1")
        assert loaded.template.name == "Cloud Infrastructure Migration"
        assert loaded.vendors[0].scores == {"t1": 4, "t2": 7}

    def test_round_trip_preserves_total(self, repo):
        evaluation = make_evaluation()
        repo.save(evaluation)
        loaded = repo.get("rfp-1")
        assert score_total(loaded.template.categories, loaded.vendors[0].scores) == \
            score_total(evaluation.template.categories, evaluation.vendors[0].scores)

    def test_save_replaces_existing(self, repo):
        repo.save(make_evaluation())
        repo.save(make_evaluation(awarded_vendor_id="v1", vendors=[
            Vendor(id="v1", name="Vendor A", scores={"c1": 5}),
        ]))
        loaded = repo.get("rfp-1")
        assert loaded.awarded_vendor_id == "v1"
        assert loaded.vendors[0].scores == {"c1": 5}
        assert len(repo.list_all()) == 1

    def test_get_missing(self, repo):
        with pytest.raises(NotFoundError) as exc:
            repo.get("nope")
        assert "nope" in str(exc.value)

    def test_list_all(self, repo):
        repo.save(make_evaluation("rfp-1"))
        repo.save(make_evaluation("rfp-2"))
        assert sorted(e.id for e in repo.list_all()) == ["rfp-1", "rfp-2"]

    def test_delete(self, repo):
        repo.save(make_evaluation())
        repo.delete("rfp-1")
        assert repo.list_all() == []
        with pytest.raises(NotFoundError):
            repo.delete("rfp-1")
