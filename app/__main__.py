"""CLI entry point for the Vendor Evaluation Matrix."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from app.config import settings
from app.errors import EvaluationError
from app.exporter import read_scores_csv, write_results_csv
from app.models import Evaluation, ScoreResult
from app.models.database import EvaluationRepository
from app.score import EvaluationMatrix, Scorer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def load_evaluation(evaluation_path: Path) -> Evaluation:
    """Load an evaluation from JSON.

    Accepts either a stored evaluation ({"template": ..., "vendors": ...})
    or a bare template.
    """
    with open(evaluation_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and "template" not in data:
        data = {"template": data}
    return Evaluation.model_validate(data)


def run_evaluation(
    evaluation: Evaluation,
    scores_path: Optional[Path] = None,
    output_path: Optional[Path] = None,
    threshold: Optional[float] = None,
    save: bool = False,
) -> list[ScoreResult]:
    """Merge imported scores, rank vendors and export the results."""
    matrix = EvaluationMatrix.from_evaluation(evaluation, scorer=Scorer(threshold))

    if scores_path:
        with open(scores_path, "r", newline="", encoding="utf-8") as f:
            imported = read_scores_csv(f)
        for vendor_id, vendor_scores in imported.items():
            for criterion_id, value in vendor_scores.items():
                matrix.set_score(vendor_id, criterion_id, value)
        logger.info(f"Imported scores for {len(imported)} vendors from {scores_path}")

    results = matrix.results()
    logger.info(f"Scored {len(results)} vendors")

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            write_results_csv(results, matrix.template, f)
        logger.info(f"Results exported to {output_path}")

    if save:
        EvaluationRepository().save(matrix.to_evaluation())

    print_summary(results, matrix.threshold)
    return results


def print_summary(results: list[ScoreResult], threshold: float):
    """Print a summary of results to console."""
    print("\n" + "=" * 60)
    print("VENDOR EVALUATION - RESULTS SUMMARY")
    print("=" * 60)

    qualified = [r for r in results if r.is_qualified]

    print(f"\nVendors scored: {len(results)}")
    print(f"Minimum required score: {threshold:g}%")
    print(f"Qualified for award: {len(qualified)}")

    if results:
        print("\n" + "-" * 60)
        print("RANKING")
        print("-" * 60)

        for r in results:
            shown = f"{r.total_score:.1f}%" if r.total_score is not None else "not scored"
            print(f"\n#{r.rank} {r.vendor_name}")
            print(f"   Score: {shown} | {r.award_status.value}")
            print(f"   Criteria scored: {r.scored_criteria}/{r.total_criteria}")

    print("\n" + "=" * 60)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Vendor Evaluation Matrix - Score and rank vendors against weighted criteria"
    )
    parser.add_argument(
        "--evaluation", "-e",
        type=Path,
        default=Path("evaluation.json"),
        help="Path to evaluation or template JSON file (default: evaluation.json)",
    )
    parser.add_argument(
        "--scores", "-s",
        type=Path,
        help="CSV of raw scores with columns vendor_id, criterion_id, score",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=settings.data_dir / "evaluation_results.csv",
        help="Output CSV path (default: data/evaluation_results.csv)",
    )
    parser.add_argument(
        "--threshold", "-t",
        type=float,
        help=f"Minimum qualifying score in percent (default: {settings.minimum_qualifying_score:g})",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Store the evaluation in the database",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    for path in (args.evaluation, args.scores):
        if path and not path.exists():
            logger.error(f"File not found: {path}")
            sys.exit(1)

    try:
        evaluation = load_evaluation(args.evaluation)
        logger.info(f"Loaded evaluation from {args.evaluation}")
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Failed to load evaluation: {e}")
        sys.exit(1)

    try:
        run_evaluation(
            evaluation,
            scores_path=args.scores,
            output_path=args.output,
            threshold=args.threshold,
            save=args.save,
        )
    except (EvaluationError, ValueError) as e:
        logger.error(f"Evaluation failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
