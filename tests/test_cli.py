"""Tests for loading evaluation files in the CLI."""

import json

import pytest
from pydantic import ValidationError

from app.__main__ import load_evaluation


TEMPLATE = {
    "id": "office-fitout",
    "name": "Office Fit-out",
    "categories": [
        {
            "id": "delivery",
            "name": "Delivery",
            "weight": 1.0,
            "criteria": [{"id": "d1", "name": "Timeline", "weight": 1.0}],
        },
    ],
}


def write_json(tmp_path, data):
    path = tmp_path / "evaluation.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadEvaluation:
    """Tests for reading evaluation and template JSON."""

    def test_loads_stored_evaluation(self, tmp_path):
        path = write_json(tmp_path, {
            "template": TEMPLATE,
            "vendors": [{"id": "v1", "name": "Vendor A", "scores": {"d1": 4}}],
        })
        evaluation = load_evaluation(path)
        assert evaluation.id == "office-fitout"
        assert evaluation.vendors[0].scores == {"d1": 4}

    def test_loads_bare_template(self, tmp_path):
        evaluation = load_evaluation(write_json(tmp_path, TEMPLATE))
        assert evaluation.template.name == "Office Fit-out"
        assert evaluation.vendors == []

    def test_top_level_list_is_a_validation_error(self, tmp_path):
        with pytest.raises(ValidationError):
            load_evaluation(write_json(tmp_path, [TEMPLATE]))
