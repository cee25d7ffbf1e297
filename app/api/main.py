"""FastAPI application setup."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.errors import (
    AwardNotAllowedError,
    InvalidCriterionError,
    InvalidWeightError,
    NotFoundError,
    ScoreOutOfRangeError,
)
from app.models.database import init_db
from .routes import router

logger = logging.getLogger(__name__)

# Initialize database
init_db()

# Create FastAPI app
app = FastAPI(
    title="Vendor Evaluation Matrix",
    description="Score vendors against weighted evaluation templates and award contracts",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidWeightError)
@app.exception_handler(ScoreOutOfRangeError)
@app.exception_handler(InvalidCriterionError)
async def invalid_input_handler(request: Request, exc: Exception):
    logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(AwardNotAllowedError)
async def award_not_allowed_handler(request: Request, exc: AwardNotAllowedError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


# Include API routes
app.include_router(router, prefix="/api")
