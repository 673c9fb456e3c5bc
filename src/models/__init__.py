"""Feedback API domain models — re-exports all public model classes.

Other parts of the codebase import from ``src.models`` rather than the
individual module (e.g. ``from src.models import FeedbackRecord``).

    - feedback.py — submissions, stored records, validation outcomes,
      and the dashboard aggregate
"""

from __future__ import annotations

from src.models.feedback import (
    MAX_RATING,
    MIN_COMMENT_LENGTH,
    MIN_RATING,
    REQUIRED_FIELDS,
    DashboardStats,
    FeedbackRecord,
    FeedbackSubmission,
    FieldViolation,
    ValidationOutcome,
)

__all__ = [
    "MAX_RATING",
    "MIN_COMMENT_LENGTH",
    "MIN_RATING",
    "REQUIRED_FIELDS",
    "DashboardStats",
    "FeedbackRecord",
    "FeedbackSubmission",
    "FieldViolation",
    "ValidationOutcome",
]
