"""Pydantic v2 request/response schemas for the feedback REST API.

Every response uses the same envelope: ``success`` plus either ``data``
(with endpoint-specific siblings such as ``count`` or ``message``) or
``error`` (with optional ``details``).  Field names on the wire are
camelCase; Python attributes stay snake_case and are mapped with aliases.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.models.feedback import DashboardStats, FeedbackRecord, FieldViolation


class RootResponse(BaseModel):
    """Service banner listing the available endpoints."""

    message: str
    endpoints: dict[str, str]


class HealthResponse(BaseModel):
    """Store connectivity check."""

    status: str
    store: str
    error: str | None = None


class FeedbackListResponse(BaseModel):
    """All feedback, newest first."""

    success: bool = True
    count: int
    data: list[FeedbackRecord]


class FeedbackItemResponse(BaseModel):
    """A single feedback row."""

    success: bool = True
    data: FeedbackRecord


class FeedbackCreatedResponse(BaseModel):
    """Body of a 201 after a successful submission."""

    success: bool = True
    message: str = "Feedback submitted successfully"
    data: FeedbackRecord


class FeedbackDeletedResponse(BaseModel):
    """Body returned after a row is deleted."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Feedback deleted successfully"
    deleted_id: int = Field(alias="deletedId")


class DashboardStatsResponse(BaseModel):
    """Aggregate statistics for the dashboard."""

    success: bool = True
    data: DashboardStats


class ErrorResponse(BaseModel):
    """Standard error response body."""

    success: bool = False
    error: str
    details: str | None = None
    path: str | None = None


class ValidationErrorResponse(BaseModel):
    """400 body for a rejected submission.

    ``error`` repeats the first violation's message for clients that only
    show one line; ``errors`` lists every violation.  ``required`` is only
    present when fields were missing.
    """

    success: bool = False
    error: str
    errors: list[FieldViolation]
    required: list[str] | None = None


def dump_error(body: BaseModel) -> dict[str, Any]:
    """Serialize an error body, leaving out unset optional keys."""
    return body.model_dump(by_alias=True, exclude_none=True, mode="json")
