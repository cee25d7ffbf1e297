"""Vendor, score result and evaluation models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from .criteria import EvaluationTemplate, Priority


class AwardStatus(str, Enum):
    """Contract-award eligibility of a vendor."""

    QUALIFIED = "Qualified"
    NOT_QUALIFIED = "Not Qualified"


class Vendor(BaseModel):
    """A vendor being evaluated, with its sparse raw scores."""

    id: str = Field(description="Unique vendor id within the evaluation")
    name: str = Field(description="Vendor display name")
    scores: dict[str, float] = Field(
        default_factory=dict,
        description="criterion id -> raw score; absent means not yet evaluated",
    )
    notes: dict[str, str] = Field(
        default_factory=dict,
        description="criterion id -> evaluator note",
    )


class ScoreResult(BaseModel):
    """Derived scores for one vendor. Never stored on its own."""

    vendor_id: str
    vendor_name: str = ""
    category_scores: dict[str, float] = Field(
        default_factory=dict,
        description="category id -> percentage 0-100",
    )
    total_score: Optional[float] = Field(
        default=None,
        description="Overall percentage; None when nothing has been scored",
    )
    award_status: AwardStatus = AwardStatus.NOT_QUALIFIED
    scored_criteria: int = 0
    total_criteria: int = 0
    rank: Optional[int] = None

    @property
    def is_qualified(self) -> bool:
        return self.award_status == AwardStatus.QUALIFIED


class CategoryScore(BaseModel):
    """Category line of a performance summary."""

    id: str
    name: str
    weight: float
    score: float


class CriterionHighlight(BaseModel):
    """A criterion singled out as a strength or weakness."""

    id: str
    name: str
    category: str
    score: float = Field(description="Raw score entered by the evaluator")
    normalized: float = Field(description="Raw score divided by max score (0-1)")
    weight: float
    priority: Priority


class PerformanceSummary(BaseModel):
    """Strengths, weaknesses and coverage of one vendor's evaluation."""

    vendor_id: str
    vendor_name: str
    total_score: Optional[float] = None
    award_status: AwardStatus = AwardStatus.NOT_QUALIFIED
    category_scores: list[CategoryScore] = Field(default_factory=list)
    strengths: list[CriterionHighlight] = Field(default_factory=list)
    weaknesses: list[CriterionHighlight] = Field(default_factory=list)
    high_priority_score: Optional[float] = Field(
        default=None,
        description="Mean percentage over scored HIGH priority criteria",
    )
    completion_rate: float = Field(default=0.0, description="Scored criteria as a percentage of all criteria")
    recommendations: list[str] = Field(default_factory=list)


class Evaluation(BaseModel):
    """A template together with the vendors scored against it."""

    template: EvaluationTemplate
    vendors: list[Vendor] = Field(default_factory=list)
    awarded_vendor_id: Optional[str] = None
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def id(self) -> str:
        return self.template.id
