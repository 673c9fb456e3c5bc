"""Course-feedback domain models.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Models (bottom of the dependency graph, no imports from upper layers).
#
# Frozen Pydantic v2 models for the single ``feedback`` entity and the
# values derived from it:
#
#   - FeedbackSubmission — validated, trimmed values ready to insert.
#   - FeedbackRecord     — a persisted row (id + created_at assigned).
#   - FieldViolation / ValidationOutcome — structured validator output.
#   - DashboardStats     — aggregation over all stored feedback.
#
# Python attributes are snake_case; the public JSON contract is camelCase
# (``studentName``, ``courseCode``) via field aliases.  ``created_at`` keeps
# its snake_case name on the wire because clients already depend on it.
# Serialize with ``model_dump(by_alias=True, mode="json")``.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# Field names of a submission, in the order violations are reported.
REQUIRED_FIELDS: tuple[str, ...] = ("studentName", "courseCode", "comments", "rating")

MIN_RATING = 1
MAX_RATING = 5
MIN_COMMENT_LENGTH = 10


class FeedbackSubmission(BaseModel):
    """A feedback submission that has passed validation.

    Text fields are already trimmed and ``rating`` is a clean integer.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    student_name: str = Field(alias="studentName", min_length=1)
    course_code: str = Field(alias="courseCode", min_length=1)
    comments: str = Field(min_length=MIN_COMMENT_LENGTH)
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING)


class FeedbackRecord(BaseModel):
    """One stored feedback row as exposed by the API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    student_name: str = Field(alias="studentName")
    course_code: str = Field(alias="courseCode")
    comments: str
    rating: int
    created_at: datetime


class FieldViolation(BaseModel):
    """A single rule a submission broke.

    ``field`` is the API field name, or ``"*"`` for the combined
    "all fields are required" failure.
    """

    model_config = ConfigDict(frozen=True)

    field: str
    message: str


class ValidationOutcome(BaseModel):
    """Result of running a candidate submission through the validator.

    Exactly one of ``submission`` (accepted) or ``violations`` (rejected)
    is populated.  ``required`` lists every field name when the rejection
    was caused by missing fields.
    """

    model_config = ConfigDict(frozen=True)

    submission: FeedbackSubmission | None = None
    violations: list[FieldViolation] = Field(default_factory=list)
    required: list[str] | None = None

    @property
    def accepted(self) -> bool:
        return self.submission is not None and not self.violations


class DashboardStats(BaseModel):
    """Summary statistics over every stored feedback row.

    On an empty table the rating figures are ``0``; since valid ratings are
    always >= 1 a zero can only mean "no data".
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_feedback: int = Field(default=0, alias="totalFeedback")
    average_rating: float = Field(default=0.0, alias="averageRating")
    highest_rating: int = Field(default=0, alias="highestRating")
    lowest_rating: int = Field(default=0, alias="lowestRating")
    total_courses: int = Field(default=0, alias="totalCourses")
