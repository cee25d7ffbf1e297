"""Data models for the Vendor Evaluation Matrix."""

from .criteria import (
    Priority,
    Criterion,
    Category,
    EvaluationTemplate,
    ScoringLevel,
    DEFAULT_SCORING_GUIDE,
)
from .vendor import (
    AwardStatus,
    Vendor,
    ScoreResult,
    CategoryScore,
    CriterionHighlight,
    PerformanceSummary,
    Evaluation,
)

__all__ = [
    "Priority",
    "Criterion",
    "Category",
    "EvaluationTemplate",
    "ScoringLevel",
    "DEFAULT_SCORING_GUIDE",
    "AwardStatus",
    "Vendor",
    "ScoreResult",
    "CategoryScore",
    "CriterionHighlight",
    "PerformanceSummary",
    "Evaluation",
]
