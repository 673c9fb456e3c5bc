"""Unit tests for the feedback submission validator.

Covers the presence check, each field rule, boundary values, and the
"report every violation" behaviour.  Pure functions, no store involved.
"""

from __future__ import annotations

import pytest

from src.services.feedback_validator import (
    ALL_FIELDS_REQUIRED,
    COMMENTS_TOO_SHORT,
    COURSE_CODE_EMPTY,
    RATING_OUT_OF_RANGE,
    STUDENT_NAME_EMPTY,
    parse_feedback_id,
    parse_rating,
    validate_submission,
)


def _payload(**overrides):
    data = {
        "studentName": "Ada Lovelace",
        "courseCode": "ICT101",
        "comments": "Clear lectures and useful labs.",
        "rating": 4,
    }
    data.update(overrides)
    return data


# ─── Accepted submissions ─────────────────────────────────────────

class TestAccepted:
    def test_valid_submission_is_trimmed(self):
        outcome = validate_submission(_payload(
            studentName="  Ada Lovelace ",
            courseCode=" ICT101\t",
            comments="   Clear lectures and useful labs.   ",
            rating="4",
        ))

        assert outcome.accepted
        assert outcome.violations == []
        sub = outcome.submission
        assert sub.student_name == "Ada Lovelace"
        assert sub.course_code == "ICT101"
        assert sub.comments == "Clear lectures and useful labs."
        assert sub.rating == 4

    @pytest.mark.parametrize("rating", [1, 5, "1", "5", " 3 ", 2.0])
    def test_boundary_and_string_ratings_accepted(self, rating):
        outcome = validate_submission(_payload(rating=rating))
        assert outcome.accepted
        assert outcome.submission.rating == int(float(str(rating).strip()))

    def test_comments_exactly_ten_chars_accepted(self):
        outcome = validate_submission(_payload(comments="abcdefghij"))
        assert outcome.accepted

    def test_ten_chars_after_trim_accepted(self):
        outcome = validate_submission(_payload(comments="   abcdefghij   "))
        assert outcome.accepted
        assert outcome.submission.comments == "abcdefghij"

    def test_extra_fields_are_ignored(self):
        outcome = validate_submission(_payload(id=99, created_at="yesterday"))
        assert outcome.accepted


# ─── Presence ─────────────────────────────────────────────────────

class TestPresence:
    @pytest.mark.parametrize("field", ["studentName", "courseCode", "comments", "rating"])
    def test_absent_field_reports_required(self, field):
        payload = _payload()
        del payload[field]

        outcome = validate_submission(payload)

        assert not outcome.accepted
        assert outcome.submission is None
        assert len(outcome.violations) == 1
        assert outcome.violations[0].field == "*"
        assert outcome.violations[0].message == ALL_FIELDS_REQUIRED
        assert outcome.required == ["studentName", "courseCode", "comments", "rating"]

    @pytest.mark.parametrize("value", [None, ""])
    def test_null_or_empty_counts_as_missing(self, value):
        outcome = validate_submission(_payload(courseCode=value))
        assert outcome.required is not None
        assert outcome.violations[0].message == ALL_FIELDS_REQUIRED

    def test_missing_fires_before_field_checks(self):
        outcome = validate_submission({"studentName": "   ", "rating": 9})
        assert [v.message for v in outcome.violations] == [ALL_FIELDS_REQUIRED]

    def test_empty_payload(self):
        outcome = validate_submission({})
        assert not outcome.accepted
        assert outcome.required == ["studentName", "courseCode", "comments", "rating"]


# ─── Field rules ──────────────────────────────────────────────────

class TestFieldRules:
    @pytest.mark.parametrize("rating", [0, 6, -1, "abc", 3.7, "3.7", "", True, [4], {"v": 4}])
    def test_bad_ratings_rejected(self, rating):
        outcome = validate_submission(_payload(rating=rating))
        assert not outcome.accepted
        if rating == "":
            assert outcome.violations[0].message == ALL_FIELDS_REQUIRED
        else:
            assert [v.field for v in outcome.violations] == ["rating"]
            assert outcome.violations[0].message == RATING_OUT_OF_RANGE
            assert outcome.required is None

    def test_whitespace_student_name_rejected(self):
        outcome = validate_submission(_payload(studentName="    "))
        assert [v.message for v in outcome.violations] == [STUDENT_NAME_EMPTY]

    def test_whitespace_course_code_rejected(self):
        outcome = validate_submission(_payload(courseCode=" \n "))
        assert [v.message for v in outcome.violations] == [COURSE_CODE_EMPTY]

    def test_comments_nine_chars_rejected(self):
        outcome = validate_submission(_payload(comments="abcdefghi"))
        assert [v.message for v in outcome.violations] == [COMMENTS_TOO_SHORT]

    def test_comments_short_after_trim_rejected(self):
        outcome = validate_submission(_payload(comments="      short      "))
        assert not outcome.accepted
        assert outcome.violations[0].field == "comments"

    def test_non_string_name_rejected(self):
        outcome = validate_submission(_payload(studentName=12345))
        assert [v.field for v in outcome.violations] == ["studentName"]

    def test_every_violation_reported_in_field_order(self):
        outcome = validate_submission({
            "studentName": "   ",
            "courseCode": "  ",
            "comments": "too short",
            "rating": 9,
        })

        assert [v.field for v in outcome.violations] == [
            "studentName", "courseCode", "comments", "rating",
        ]
        assert outcome.required is None


# ─── Helpers ──────────────────────────────────────────────────────

class TestParsers:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(3, 3), ("3", 3), ("+3", 3), (" -2 ", -2), (4.0, 4), (3.5, None), ("3.0", None),
         ("x", None), (False, None), (None, None)],
    )
    def test_parse_rating(self, value, expected):
        assert parse_rating(value) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("12", 12), (" 7 ", 7), ("-1", -1), (5, 5), ("abc", None), ("1.5", None),
         ("", None), ("12abc", None), (True, None)],
    )
    def test_parse_feedback_id(self, raw, expected):
        assert parse_feedback_id(raw) == expected
