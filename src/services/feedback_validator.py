"""Feedback submission validation — pure functions, no I/O.

The validator turns an untrusted JSON body into a
:class:`~src.models.feedback.ValidationOutcome`:

  1. PRESENCE — if any of ``studentName``, ``courseCode``, ``comments``,
     ``rating`` is absent, ``null`` or an empty string, the outcome is a
     single combined "All fields are required" violation and no finer
     checks run.
  2. FIELD RULES — otherwise every rule below is evaluated and every
     failure is reported, in field order:
       - studentName: string, non-empty after trimming
       - courseCode:  string, non-empty after trimming
       - comments:    string, at least 10 characters after trimming
       - rating:      clean integer in [1, 5]

No upper bound on text length is enforced here.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from src.models.feedback import (
    MAX_RATING,
    MIN_COMMENT_LENGTH,
    MIN_RATING,
    REQUIRED_FIELDS,
    FeedbackSubmission,
    FieldViolation,
    ValidationOutcome,
)

ALL_FIELDS_REQUIRED = "All fields are required"
STUDENT_NAME_EMPTY = "Student name cannot be empty"
COURSE_CODE_EMPTY = "Course code cannot be empty"
COMMENTS_TOO_SHORT = f"Comments must be at least {MIN_COMMENT_LENGTH} characters long"
RATING_OUT_OF_RANGE = f"Rating must be a number between {MIN_RATING} and {MAX_RATING}"

_INTEGER_RE = re.compile(r"[+-]?\d+")


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def parse_rating(value: Any) -> int | None:
    """Parse *value* as a clean integer, or return ``None``.

    Accepts ints, integral floats (``4.0``) and digit strings (``" 3 "``).
    Booleans, fractional numbers and anything else are rejected.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if _INTEGER_RE.fullmatch(text):
            return int(text)
    return None


def _trimmed(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) else None


def validate_submission(payload: Mapping[str, Any]) -> ValidationOutcome:
    """Validate a candidate feedback submission.

    Args:
        payload: The decoded request body (any JSON object).

    Returns:
        An accepted outcome carrying a trimmed :class:`FeedbackSubmission`,
        or a rejected outcome listing every violation.
    """
    if any(_is_missing(payload.get(name)) for name in REQUIRED_FIELDS):
        return ValidationOutcome(
            violations=[FieldViolation(field="*", message=ALL_FIELDS_REQUIRED)],
            required=list(REQUIRED_FIELDS),
        )

    violations: list[FieldViolation] = []

    student_name = _trimmed(payload["studentName"])
    if not student_name:
        violations.append(FieldViolation(field="studentName", message=STUDENT_NAME_EMPTY))

    course_code = _trimmed(payload["courseCode"])
    if not course_code:
        violations.append(FieldViolation(field="courseCode", message=COURSE_CODE_EMPTY))

    comments = _trimmed(payload["comments"])
    if comments is None or len(comments) < MIN_COMMENT_LENGTH:
        violations.append(FieldViolation(field="comments", message=COMMENTS_TOO_SHORT))

    rating = parse_rating(payload["rating"])
    if rating is None or not MIN_RATING <= rating <= MAX_RATING:
        violations.append(FieldViolation(field="rating", message=RATING_OUT_OF_RANGE))

    if violations:
        return ValidationOutcome(violations=violations)

    return ValidationOutcome(
        submission=FeedbackSubmission(
            student_name=student_name,
            course_code=course_code,
            comments=comments,
            rating=rating,
        )
    )


def parse_feedback_id(raw_id: str | int) -> int | None:
    """Return *raw_id* as an int if it is syntactically an integer, else ``None``."""
    if isinstance(raw_id, bool):
        return None
    if isinstance(raw_id, int):
        return raw_id
    text = str(raw_id).strip()
    if not _INTEGER_RE.fullmatch(text):
        return None
    return int(text)
