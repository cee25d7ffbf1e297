"""CSV export of results and import of raw scores."""

import csv
import logging
from typing import IO

from app.models import EvaluationTemplate, ScoreResult

logger = logging.getLogger(__name__)

SCORE_COLUMNS = ("vendor_id", "criterion_id", "score")


def write_results_csv(
    results: list[ScoreResult],
    template: EvaluationTemplate,
    output: IO[str],
):
    """Write ranked results, one row per vendor, one column per category."""
    writer = csv.writer(output)

    # Header
    writer.writerow([
        "Rank",
        "Vendor ID",
        "Vendor",
        "Total Score",
        "Award Status",
        "Scored Criteria",
        *[category.name for category in template.categories],
    ])

    # Data rows
    for r in results:
        writer.writerow([
            r.rank or "",
            r.vendor_id,
            r.vendor_name,
            f"{r.total_score:.1f}" if r.total_score is not None else "",
            r.award_status.value,
            f"{r.scored_criteria}/{r.total_criteria}",
            *[
                f"{r.category_scores.get(category.id, 0.0):.1f}"
                for category in template.categories
            ],
        ])


def read_scores_csv(source: IO[str]) -> dict[str, dict[str, float]]:
    """Read raw scores as vendor id -> criterion id -> score.

    Rows with a blank score are skipped so that they stay "not evaluated".
    """
    reader = csv.DictReader(source)
    missing = [c for c in SCORE_COLUMNS if c not in (reader.fieldnames or [])]
    if missing:
        raise ValueError(f"Scores CSV is missing columns: {', '.join(missing)}")

    scores: dict[str, dict[str, float]] = {}
    for row in reader:
        raw = (row["score"] or "").strip()
        if not raw:
            continue
        try:
            value = float(raw)
        except ValueError:
            raise ValueError(f"Invalid score {raw!r} on line {reader.line_num}") from None

        vendor_id = row["vendor_id"].strip()
        criterion_id = row["criterion_id"].strip()
        scores.setdefault(vendor_id, {})[criterion_id] = value

    logger.debug(f"Read scores for {len(scores)} vendors")
    return scores
