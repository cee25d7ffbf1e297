"""Scoring engine for vendor evaluations."""

from .scorer import Scorer, score_category, score_total, classify_award
from .matrix import EvaluationMatrix
from .summary import PerformanceSummarizer
from .validation import weight_warnings

__all__ = [
    "Scorer",
    "score_category",
    "score_total",
    "classify_award",
    "EvaluationMatrix",
    "PerformanceSummarizer",
    "weight_warnings",
]
