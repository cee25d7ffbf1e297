"""Evaluation template schema: weighted categories and criteria."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class Priority(str, Enum):
    """Importance of a criterion to the evaluating team."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Criterion(BaseModel):
    """A single scored requirement within a category."""

    id: str = Field(description="Unique criterion id within the template")
    name: str = Field(description="Short criterion name")
    description: str = Field(default="", description="What evaluators should look for")
    weight: float = Field(description="Fraction of the parent category's weight (0-1)")
    max_score: float = Field(default=5.0, description="Highest raw score an evaluator can enter")
    priority: Priority = Field(default=Priority.MEDIUM)


class Category(BaseModel):
    """A weighted group of criteria."""

    id: str = Field(description="Unique category id within the template")
    name: str
    description: str = ""
    weight: float = Field(description="Fraction of the overall score (0-1)")
    criteria: list[Criterion] = Field(default_factory=list)

    def get_criterion(self, criterion_id: str) -> Optional[Criterion]:
        """Return the criterion with the given id, or None."""
        for criterion in self.criteria:
            if criterion.id == criterion_id:
                return criterion
        return None


class EvaluationTemplate(BaseModel):
    """A tree of weighted categories that vendors are scored against."""

    id: str
    name: str
    description: str = ""
    categories: list[Category] = Field(default_factory=list)
    minimum_qualifying_score: Optional[float] = Field(
        default=None,
        description="Award threshold in percent; falls back to the configured default",
    )

    def get_category(self, category_id: str) -> Optional[Category]:
        """Return the category with the given id, or None."""
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def find_criterion(self, criterion_id: str) -> Optional[tuple[Category, Criterion]]:
        """Locate a criterion anywhere in the tree."""
        for category in self.categories:
            criterion = category.get_criterion(criterion_id)
            if criterion is not None:
                return category, criterion
        return None

    def all_criteria(self) -> list[Criterion]:
        return [c for category in self.categories for c in category.criteria]


class ScoringLevel(BaseModel):
    """One step of the rating scale shown to evaluators."""

    score: int
    label: str
    description: str


DEFAULT_SCORING_GUIDE = [
    ScoringLevel(score=5, label="Excellent", description="Exceeds all requirements with exceptional quality"),
    ScoringLevel(score=4, label="Good", description="Meets all requirements with above-average quality"),
    ScoringLevel(score=3, label="Satisfactory", description="Meets basic requirements adequately"),
    ScoringLevel(score=2, label="Fair", description="Partially meets requirements with some deficiencies"),
    ScoringLevel(score=1, label="Poor", description="Falls significantly short of requirements"),
    ScoringLevel(score=0, label="N/A", description="Not applicable or cannot be evaluated"),
]
