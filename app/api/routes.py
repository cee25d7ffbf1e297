"""API routes for the Vendor Evaluation Matrix."""

import io
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from app.errors import NotFoundError
from app.exporter import write_results_csv
from app.models import (
    DEFAULT_SCORING_GUIDE,
    Category,
    Criterion,
    Evaluation,
    EvaluationTemplate,
    PerformanceSummary,
    ScoreResult,
    ScoringLevel,
    Vendor,
)
from app.models.database import EvaluationRepository
from app.score import EvaluationMatrix, weight_warnings

logger = logging.getLogger(__name__)

router = APIRouter()

_repository: Optional[EvaluationRepository] = None


def get_repository() -> EvaluationRepository:
    """Shared repository; overridden in tests."""
    global _repository
    if _repository is None:
        _repository = EvaluationRepository()
    return _repository


class CreateEvaluationRequest(BaseModel):
    """Request body for creating an evaluation."""
    template: EvaluationTemplate
    vendors: list[Vendor] = []


class ScoreRequest(BaseModel):
    """Request body for entering a raw score."""
    score: float


class NoteRequest(BaseModel):
    """Request body for an evaluator note."""
    note: str


class EvaluationResponse(BaseModel):
    """An evaluation with its current ranked results."""
    evaluation: Evaluation
    results: list[ScoreResult]
    warnings: list[str]


class EvaluationListItem(BaseModel):
    """Single evaluation in a listing."""
    id: str
    name: str
    vendors: int
    awarded_vendor_id: Optional[str]


class AwardResponse(BaseModel):
    """Response for a successful award."""
    evaluation_id: str
    awarded_vendor_id: str
    result: ScoreResult


def _load(evaluation_id: str, repo: EvaluationRepository) -> EvaluationMatrix:
    return EvaluationMatrix.from_evaluation(repo.get(evaluation_id))


def _respond(matrix: EvaluationMatrix) -> EvaluationResponse:
    return EvaluationResponse(
        evaluation=matrix.to_evaluation(),
        results=matrix.results(),
        warnings=weight_warnings(matrix.template),
    )


@router.get("/scoring-guide", response_model=list[ScoringLevel])
async def scoring_guide():
    """Rating scale shown to evaluators."""
    return DEFAULT_SCORING_GUIDE


@router.post("/evaluations", response_model=EvaluationResponse, status_code=201)
async def create_evaluation(
    request: CreateEvaluationRequest,
    repo: EvaluationRepository = Depends(get_repository),
):
    """Create an evaluation from a template and optional vendors."""
    try:
        repo.get(request.template.id)
    except NotFoundError:
        pass
    else:
        raise HTTPException(status_code=409, detail=f"Evaluation already exists: {request.template.id}")

    matrix = EvaluationMatrix(request.template, vendors=request.vendors)
    repo.save(matrix.to_evaluation())
    return _respond(matrix)


@router.get("/evaluations", response_model=list[EvaluationListItem])
async def list_evaluations(repo: EvaluationRepository = Depends(get_repository)):
    """List stored evaluations, most recently updated first."""
    return [
        EvaluationListItem(
            id=e.id,
            name=e.template.name,
            vendors=len(e.vendors),
            awarded_vendor_id=e.awarded_vendor_id,
        )
        for e in repo.list_all()
    ]


@router.get("/evaluations/{evaluation_id}", response_model=EvaluationResponse)
async def get_evaluation(evaluation_id: str, repo: EvaluationRepository = Depends(get_repository)):
    return _respond(_load(evaluation_id, repo))


@router.delete("/evaluations/{evaluation_id}", status_code=204)
async def delete_evaluation(evaluation_id: str, repo: EvaluationRepository = Depends(get_repository)):
    repo.delete(evaluation_id)


@router.post("/evaluations/{evaluation_id}/categories", response_model=EvaluationResponse, status_code=201)
async def add_category(
    evaluation_id: str,
    category: Category,
    repo: EvaluationRepository = Depends(get_repository),
):
    """Add a category, with its criteria, to the template."""
    matrix = _load(evaluation_id, repo)
    matrix.add_category(category)
    repo.save(matrix.to_evaluation())
    return _respond(matrix)


@router.delete("/evaluations/{evaluation_id}/categories/{category_id}", response_model=EvaluationResponse)
async def remove_category(
    evaluation_id: str,
    category_id: str,
    repo: EvaluationRepository = Depends(get_repository),
):
    """Remove a category together with its criteria, scores and notes."""
    matrix = _load(evaluation_id, repo)
    matrix.remove_category(category_id)
    repo.save(matrix.to_evaluation())
    return _respond(matrix)


@router.post(
    "/evaluations/{evaluation_id}/categories/{category_id}/criteria",
    response_model=EvaluationResponse,
    status_code=201,
)
async def add_criterion(
    evaluation_id: str,
    category_id: str,
    criterion: Criterion,
    repo: EvaluationRepository = Depends(get_repository),
):
    """Add a criterion to a category."""
    matrix = _load(evaluation_id, repo)
    matrix.add_criterion(category_id, criterion)
    repo.save(matrix.to_evaluation())
    return _respond(matrix)


@router.delete("/evaluations/{evaluation_id}/criteria/{criterion_id}", response_model=EvaluationResponse)
async def remove_criterion(
    evaluation_id: str,
    criterion_id: str,
    repo: EvaluationRepository = Depends(get_repository),
):
    """Remove a criterion and any scores entered for it."""
    matrix = _load(evaluation_id, repo)
    matrix.remove_criterion(criterion_id)
    repo.save(matrix.to_evaluation())
    return _respond(matrix)


@router.post("/evaluations/{evaluation_id}/vendors", response_model=EvaluationResponse, status_code=201)
async def add_vendor(
    evaluation_id: str,
    vendor: Vendor,
    repo: EvaluationRepository = Depends(get_repository),
):
    matrix = _load(evaluation_id, repo)
    matrix.add_vendor(vendor)
    repo.save(matrix.to_evaluation())
    return _respond(matrix)


@router.delete("/evaluations/{evaluation_id}/vendors/{vendor_id}", response_model=EvaluationResponse)
async def remove_vendor(
    evaluation_id: str,
    vendor_id: str,
    repo: EvaluationRepository = Depends(get_repository),
):
    matrix = _load(evaluation_id, repo)
    matrix.remove_vendor(vendor_id)
    repo.save(matrix.to_evaluation())
    return _respond(matrix)


@router.put(
    "/evaluations/{evaluation_id}/vendors/{vendor_id}/scores/{criterion_id}",
    response_model=ScoreResult,
)
async def set_score(
    evaluation_id: str,
    vendor_id: str,
    criterion_id: str,
    request: ScoreRequest,
    repo: EvaluationRepository = Depends(get_repository),
):
    """Enter a raw score and return the vendor's recomputed result."""
    matrix = _load(evaluation_id, repo)
    result = matrix.set_score(vendor_id, criterion_id, request.score)
    repo.save(matrix.to_evaluation())
    return result


@router.delete(
    "/evaluations/{evaluation_id}/vendors/{vendor_id}/scores/{criterion_id}",
    response_model=ScoreResult,
)
async def clear_score(
    evaluation_id: str,
    vendor_id: str,
    criterion_id: str,
    repo: EvaluationRepository = Depends(get_repository),
):
    """Mark a criterion as not yet evaluated."""
    matrix = _load(evaluation_id, repo)
    result = matrix.clear_score(vendor_id, criterion_id)
    repo.save(matrix.to_evaluation())
    return result


@router.put(
    "/evaluations/{evaluation_id}/vendors/{vendor_id}/notes/{criterion_id}",
    response_model=Vendor,
)
async def set_note(
    evaluation_id: str,
    vendor_id: str,
    criterion_id: str,
    request: NoteRequest,
    repo: EvaluationRepository = Depends(get_repository),
):
    """Save the evaluator's note on a criterion."""
    matrix = _load(evaluation_id, repo)
    vendor = matrix.set_note(vendor_id, criterion_id, request.note)
    repo.save(matrix.to_evaluation())
    return vendor


@router.delete(
    "/evaluations/{evaluation_id}/vendors/{vendor_id}/notes/{criterion_id}",
    response_model=Vendor,
)
async def clear_note(
    evaluation_id: str,
    vendor_id: str,
    criterion_id: str,
    repo: EvaluationRepository = Depends(get_repository),
):
    matrix = _load(evaluation_id, repo)
    vendor = matrix.clear_note(vendor_id, criterion_id)
    repo.save(matrix.to_evaluation())
    return vendor


@router.get("/evaluations/{evaluation_id}/results", response_model=list[ScoreResult])
async def get_results(evaluation_id: str, repo: EvaluationRepository = Depends(get_repository)):
    """Ranked results for every vendor."""
    return _load(evaluation_id, repo).results()


@router.get(
    "/evaluations/{evaluation_id}/vendors/{vendor_id}/summary",
    response_model=PerformanceSummary,
)
async def get_summary(
    evaluation_id: str,
    vendor_id: str,
    repo: EvaluationRepository = Depends(get_repository),
):
    return _load(evaluation_id, repo).summary(vendor_id)


@router.post("/evaluations/{evaluation_id}/award/{vendor_id}", response_model=AwardResponse)
async def award_contract(
    evaluation_id: str,
    vendor_id: str,
    repo: EvaluationRepository = Depends(get_repository),
):
    """Award the contract; only qualified vendors are eligible."""
    matrix = _load(evaluation_id, repo)
    result = matrix.award(vendor_id)
    repo.save(matrix.to_evaluation())
    return AwardResponse(evaluation_id=evaluation_id, awarded_vendor_id=vendor_id, result=result)


@router.get("/evaluations/{evaluation_id}/export")
async def export_results(evaluation_id: str, repo: EvaluationRepository = Depends(get_repository)):
    """Export ranked results as CSV."""
    matrix = _load(evaluation_id, repo)
    results = matrix.results()

    if not results:
        raise HTTPException(status_code=404, detail="No vendors to export")

    output = io.StringIO()
    write_results_csv(results, matrix.template, output)

    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=evaluation_{evaluation_id}.csv"},
    )
