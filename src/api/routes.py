"""REST API routes for course feedback.

# ─── ENDPOINTS ───────────────────────────────────────────────────────
#
# /                              GET     Service banner + endpoint list
# /health                        GET     Store connectivity check
# /api/feedback                  GET     List all feedback (newest first)
# /api/feedback                  POST    Submit feedback
# /api/feedback/{feedback_id}    GET     Get one feedback row
# /api/feedback/{feedback_id}    DELETE  Delete one feedback row
# /api/dashboard/stats           GET     Aggregate statistics
#
# Services are resolved from ``request.app.state`` (wired in main.py's
# lifespan) through small ``Depends`` accessors, so tests can build an app
# around any store.
#
# Domain errors map onto status codes here:
#   FeedbackValidationError / InvalidFeedbackIdError → 400
#   FeedbackNotFoundError                            → 404
#   StorageError                                     → 500 (driver message in ``details``)
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from src.api.schemas import (
    DashboardStatsResponse,
    ErrorResponse,
    FeedbackCreatedResponse,
    FeedbackDeletedResponse,
    FeedbackItemResponse,
    FeedbackListResponse,
    HealthResponse,
    RootResponse,
    ValidationErrorResponse,
    dump_error,
)
from src.interfaces.feedback_store import IFeedbackStore
from src.services.feedback_service import FeedbackService
from src.services.stats_service import StatsService
from src.utils.errors import (
    FeedbackNotFoundError,
    FeedbackValidationError,
    InvalidFeedbackIdError,
    StorageError,
)
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter()

ENDPOINTS: dict[str, str] = {
    "GET /api/feedback": "Get all feedback",
    "GET /api/feedback/:id": "Get single feedback",
    "POST /api/feedback": "Add new feedback",
    "DELETE /api/feedback/:id": "Delete feedback",
    "GET /api/dashboard/stats": "Get dashboard statistics",
}


# ---------------------------------------------------------------------------
# Dependency accessors
# ---------------------------------------------------------------------------


def _get_feedback_service(request: Request) -> FeedbackService:
    """Retrieve FeedbackService from app state; raise 503 if unavailable."""
    svc = getattr(request.app.state, "feedback_service", None)
    if svc is None:
        raise HTTPException(status_code=503, detail="Feedback service unavailable")
    return svc


def _get_stats_service(request: Request) -> StatsService:
    """Retrieve StatsService from app state; raise 503 if unavailable."""
    svc = getattr(request.app.state, "stats_service", None)
    if svc is None:
        raise HTTPException(status_code=503, detail="Statistics service unavailable")
    return svc


def _get_feedback_store(request: Request) -> IFeedbackStore | None:
    """Return the feedback store from application state, or ``None``."""
    return getattr(request.app.state, "feedback_store", None)


_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_SUBMISSION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "studentName": {"type": "string"},
        "courseCode": {"type": "string"},
        "comments": {"type": "string", "minLength": 10},
        "rating": {"type": "integer", "minimum": 1, "maximum": 5},
    },
    "required": ["studentName", "courseCode", "comments", "rating"],
}

_SUBMISSION_CONTENT: dict[str, Any] = {
    "application/json": {"schema": _SUBMISSION_SCHEMA},
    _FORM_CONTENT_TYPE: {"schema": _SUBMISSION_SCHEMA},
}

FeedbackServiceDep = Annotated[FeedbackService, Depends(_get_feedback_service)]
StatsServiceDep = Annotated[StatsService, Depends(_get_stats_service)]
FeedbackStoreDep = Annotated[Any, Depends(_get_feedback_store)]


# ---------------------------------------------------------------------------
# Error helpers
# ---------------------------------------------------------------------------


def _error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=dump_error(ErrorResponse(error=error, details=details)),
    )


def _storage_failure(message: str, exc: StorageError) -> JSONResponse:
    """Log a store failure and report it as a 500 with the driver message."""
    _logger.error(
        "storage_failure",
        error=message,
        details=exc.message,
        provider=exc.provider_name,
    )
    return _error_response(500, message, exc.message)


async def _read_submission_body(request: Request) -> dict[str, Any]:
    """Decode a JSON object or a URL-encoded form into a plain dict.

    Raises:
        ValueError: The body is not valid JSON or not a JSON object.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_CONTENT_TYPE):
        form = await request.form()
        return {key: value for key, value in form.items()}

    payload = await request.json()
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    return payload


def _validation_failure(exc: FeedbackValidationError) -> JSONResponse:
    outcome = exc.outcome
    body = ValidationErrorResponse(
        error=exc.message,
        errors=outcome.violations,
        required=outcome.required,
    )
    return JSONResponse(status_code=400, content=dump_error(body))


# ---------------------------------------------------------------------------
# Service info
# ---------------------------------------------------------------------------


@router.get("/", response_model=RootResponse, summary="List available endpoints")
async def root() -> RootResponse:
    return RootResponse(message="Student Feedback API is running!", endpoints=ENDPOINTS)


@router.get(
    "/health",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    responses={503: {"model": HealthResponse}},
    summary="Check store connectivity",
)
async def health(store: FeedbackStoreDep) -> HealthResponse | JSONResponse:
    if store is None:
        body = HealthResponse(status="unhealthy", store="none", error="Store not configured")
        return JSONResponse(status_code=503, content=dump_error(body))
    try:
        await store.ping()
    except StorageError as exc:
        body = HealthResponse(status="unhealthy", store=store.get_provider_name(), error=exc.message)
        return JSONResponse(status_code=503, content=dump_error(body))
    return HealthResponse(status="healthy", store=store.get_provider_name())


# ---------------------------------------------------------------------------
# Feedback
# ---------------------------------------------------------------------------


@router.get(
    "/api/feedback",
    response_model=FeedbackListResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Get all feedback, newest first",
)
async def list_feedback(service: FeedbackServiceDep) -> FeedbackListResponse | JSONResponse:
    try:
        records = await service.list_feedback()
    except StorageError as exc:
        return _storage_failure("Failed to retrieve feedback", exc)
    return FeedbackListResponse(count=len(records), data=records)


@router.get(
    "/api/feedback/{feedback_id}",
    response_model=FeedbackItemResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Get single feedback",
)
async def get_feedback(
    feedback_id: str,
    service: FeedbackServiceDep,
) -> FeedbackItemResponse | JSONResponse:
    try:
        record = await service.get_feedback(feedback_id)
    except FeedbackNotFoundError as exc:
        return _error_response(404, exc.message)
    except StorageError as exc:
        return _storage_failure("Failed to retrieve feedback", exc)
    return FeedbackItemResponse(data=record)


@router.post(
    "/api/feedback",
    response_model=FeedbackCreatedResponse,
    status_code=201,
    responses={400: {"model": ValidationErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Add new feedback",
    openapi_extra={"requestBody": {"required": True, "content": _SUBMISSION_CONTENT}},
)
async def create_feedback(
    request: Request,
    service: FeedbackServiceDep,
) -> FeedbackCreatedResponse | JSONResponse:
    try:
        payload = await _read_submission_body(request)
    except ValueError as exc:
        return _error_response(400, "Invalid request body", str(exc))

    try:
        record = await service.create_feedback(payload)
    except FeedbackValidationError as exc:
        return _validation_failure(exc)
    except StorageError as exc:
        return _storage_failure("Failed to add feedback", exc)
    return FeedbackCreatedResponse(data=record)


@router.delete(
    "/api/feedback/{feedback_id}",
    response_model=FeedbackDeletedResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Delete feedback",
)
async def delete_feedback(
    feedback_id: str,
    service: FeedbackServiceDep,
) -> FeedbackDeletedResponse | JSONResponse:
    try:
        record = await service.delete_feedback(feedback_id)
    except InvalidFeedbackIdError as exc:
        return _error_response(400, exc.message)
    except FeedbackNotFoundError as exc:
        return _error_response(404, exc.message)
    except StorageError as exc:
        return _storage_failure("Failed to delete feedback", exc)
    return FeedbackDeletedResponse(deleted_id=record.id)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@router.get(
    "/api/dashboard/stats",
    response_model=DashboardStatsResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Get dashboard statistics",
)
async def dashboard_stats(service: StatsServiceDep) -> DashboardStatsResponse | JSONResponse:
    try:
        stats = await service.get_dashboard_stats()
    except StorageError as exc:
        return _storage_failure("Failed to retrieve statistics", exc)
    return DashboardStatsResponse(data=stats)
