"""Integration tests for the feedback REST API.

Tests the full request/response cycle through FastAPI's TestClient, using
the real app factory with a temporary SQLite store.  A mocked store is used
only where a storage failure has to be forced.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.main import _build_all, create_app
from src.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore
from src.utils.errors import StorageError


@pytest.fixture
def client(sqlite_settings):
    """TestClient over an app wired to a fresh SQLite store."""
    store = SQLiteFeedbackStore(db_path=sqlite_settings.sqlite_path)
    app = create_app(sqlite_settings, components=_build_all(sqlite_settings, store=store))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def failing_client(sqlite_settings, mock_store):
    """TestClient whose store fails every query after a healthy startup."""
    failure = StorageError('relation "feedback" does not exist', provider_name="mock_feedback")
    mock_store.list_feedback.side_effect = failure
    mock_store.get_feedback.side_effect = failure
    mock_store.insert_feedback.side_effect = failure
    mock_store.delete_feedback.side_effect = failure
    mock_store.get_rating_aggregates.side_effect = failure
    mock_store.ping.side_effect = None

    app = create_app(sqlite_settings, components=_build_all(sqlite_settings, store=mock_store))
    with TestClient(app) as c:
        yield c


def _submit(client, **overrides):
    body = {
        "studentName": "Ada Lovelace",
        "courseCode": "ICT101",
        "comments": "Clear lectures and useful labs.",
        "rating": 4,
    }
    body.update(overrides)
    return client.post("/api/feedback", json=body)


# ─── Root / health / fallback ─────────────────────────────────────

class TestServiceInfo:
    def test_root_lists_endpoints(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Student Feedback API is running!"
        assert "POST /api/feedback" in data["endpoints"]
        assert "GET /api/dashboard/stats" in data["endpoints"]

    def test_health_reports_store(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "store": "sqlite_feedback"}

    def test_unmatched_route_returns_json_404(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Endpoint not found",
            "path": "/api/nope",
        }

    def test_wrong_method_uses_envelope(self, client):
        response = client.put("/api/feedback")

        assert response.status_code == 405
        assert response.json()["success"] is False

    def test_request_id_generated_and_echoed(self, client):
        generated = client.get("/")
        echoed = client.get("/api/feedback", headers={"X-Request-ID": "req-42"})

        assert len(generated.headers["X-Request-ID"]) == 32
        assert echoed.headers["X-Request-ID"] == "req-42"


# ─── Create ───────────────────────────────────────────────────────

class TestCreateFeedback:
    def test_valid_submission_returns_201(self, client):
        response = _submit(
            client,
            studentName="  Ada Lovelace  ",
            courseCode=" ICT101 ",
            comments="   Clear lectures and useful labs.   ",
            rating="5",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Feedback submitted successfully"
        data = body["data"]
        assert isinstance(data["id"], int)
        assert data["studentName"] == "Ada Lovelace"
        assert data["courseCode"] == "ICT101"
        assert data["comments"] == "Clear lectures and useful labs."
        assert data["rating"] == 5
        assert data["created_at"]

    @pytest.mark.parametrize("rating", [1, 5])
    def test_boundary_ratings_accepted(self, client, rating):
        assert _submit(client, rating=rating).status_code == 201

    @pytest.mark.parametrize("rating", [0, 6, "abc", 3.7])
    def test_bad_ratings_rejected(self, client, rating):
        response = _submit(client, rating=rating)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Rating must be a number between 1 and 5"
        assert "required" not in body

    def test_comments_length_boundary(self, client):
        assert _submit(client, comments="abcdefghi").status_code == 400
        assert _submit(client, comments="abcdefghij").status_code == 201

    def test_missing_field_returns_required_list_and_writes_nothing(self, client):
        response = client.post("/api/feedback", json={"studentName": "Ada", "rating": 3})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "All fields are required"
        assert body["required"] == ["studentName", "courseCode", "comments", "rating"]
        assert client.get("/api/feedback").json()["count"] == 0

    def test_all_violations_reported(self, client):
        response = _submit(client, studentName="   ", comments="short", rating=9)

        assert response.status_code == 400
        fields = [e["field"] for e in response.json()["errors"]]
        assert fields == ["studentName", "comments", "rating"]
        assert client.get("/api/feedback").json()["count"] == 0

    def test_malformed_json_returns_400(self, client):
        response = client.post(
            "/api/feedback",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"

    def test_non_object_body_returns_400(self, client):
        response = client.post("/api/feedback", json=["Ada", "ICT101"])
        assert response.status_code == 400

    def test_empty_body_returns_400(self, client):
        response = client.post("/api/feedback", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"

    def test_url_encoded_form_accepted(self, client):
        response = client.post(
            "/api/feedback",
            data={
                "studentName": " Grace Hopper ",
                "courseCode": "CS101",
                "comments": "Great debugging sessions.",
                "rating": "5",
            },
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["studentName"] == "Grace Hopper"
        assert data["rating"] == 5

    def test_url_encoded_form_is_validated(self, client):
        response = client.post(
            "/api/feedback",
            data={"studentName": "Grace", "courseCode": "CS101", "comments": "Too short", "rating": "9"},
        )

        assert response.status_code == 400
        assert [e["field"] for e in response.json()["errors"]] == ["comments", "rating"]


# ─── Read ─────────────────────────────────────────────────────────

class TestReadFeedback:
    def test_list_is_newest_first(self, client):
        ids = [_submit(client, studentName=name).json()["data"]["id"] for name in ("A", "B", "C")]

        response = client.get("/api/feedback")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 3
        assert [f["id"] for f in body["data"]] == list(reversed(ids))
        assert [f["studentName"] for f in body["data"]] == ["C", "B", "A"]

    def test_get_single(self, client):
        created = _submit(client).json()["data"]

        response = client.get(f"/api/feedback/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": created}

    def test_get_missing_returns_404(self, client):
        response = client.get("/api/feedback/9999")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Feedback not found"}


# ─── Delete ───────────────────────────────────────────────────────

class TestDeleteFeedback:
    def test_delete_existing(self, client):
        keep = _submit(client, studentName="Keep").json()["data"]
        gone = _submit(client, studentName="Gone").json()["data"]

        response = client.delete(f"/api/feedback/{gone['id']}")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Feedback deleted successfully",
            "deletedId": gone["id"],
        }
        remaining = client.get("/api/feedback").json()["data"]
        assert [f["id"] for f in remaining] == [keep["id"]]
        assert client.get(f"/api/feedback/{gone['id']}").status_code == 404

    def test_delete_non_numeric_id_returns_400(self, client):
        response = client.delete("/api/feedback/abc")

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid feedback ID"}

    def test_delete_missing_returns_404(self, client):
        response = client.delete("/api/feedback/4242")

        assert response.status_code == 404
        assert response.json()["error"] == "Feedback not found"

    @pytest.mark.parametrize("feedback_id", ["99999999999999999999", "-99999999999999999999"])
    def test_delete_id_wider_than_64_bits_returns_404(self, client, feedback_id):
        _submit(client)

        response = client.delete(f"/api/feedback/{feedback_id}")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Feedback not found"}
        assert client.get("/api/feedback").json()["count"] == 1

    def test_get_id_wider_than_64_bits_returns_404(self, client):
        response = client.get("/api/feedback/99999999999999999999")

        assert response.status_code == 404


# ─── Dashboard ────────────────────────────────────────────────────

class TestDashboardStats:
    def test_empty_store(self, client):
        response = client.get("/api/dashboard/stats")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {
                "totalFeedback": 0,
                "averageRating": 0.0,
                "highestRating": 0,
                "lowestRating": 0,
                "totalCourses": 0,
            },
        }

    def test_same_course_counted_once(self, client):
        _submit(client, courseCode="ICT101", rating=4)
        _submit(client, courseCode="ICT101", rating=2)

        data = client.get("/api/dashboard/stats").json()["data"]

        assert data == {
            "totalFeedback": 2,
            "averageRating": 3.0,
            "highestRating": 4,
            "lowestRating": 2,
            "totalCourses": 1,
        }

    def test_average_rounded_to_two_places(self, client):
        for rating, course in ((5, "ICT101"), (4, "ICT102"), (2, "MTH200")):
            _submit(client, courseCode=course, rating=rating)

        data = client.get("/api/dashboard/stats").json()["data"]

        assert data["averageRating"] == pytest.approx(3.67)
        assert data["totalCourses"] == 3


# ─── Storage failures ─────────────────────────────────────────────

class TestStorageFailures:
    @pytest.mark.parametrize(
        ("method", "path", "message"),
        [
            ("get", "/api/feedback", "Failed to retrieve feedback"),
            ("get", "/api/feedback/1", "Failed to retrieve feedback"),
            ("delete", "/api/feedback/1", "Failed to delete feedback"),
            ("get", "/api/dashboard/stats", "Failed to retrieve statistics"),
        ],
    )
    def test_store_error_becomes_500(self, failing_client, method, path, message):
        response = getattr(failing_client, method)(path)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": message,
            "details": 'relation "feedback" does not exist',
        }

    def test_create_store_error_becomes_500(self, failing_client):
        response = _submit(failing_client)

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to add feedback"

    def test_invalid_delete_id_never_reaches_store(self, failing_client, mock_store):
        response = failing_client.delete("/api/feedback/not-a-number")

        assert response.status_code == 400
        mock_store.delete_feedback.assert_not_awaited()

    def test_process_keeps_serving_after_failure(self, failing_client):
        assert failing_client.get("/api/feedback").status_code == 500
        assert failing_client.get("/").status_code == 200

    def test_health_reports_unhealthy(self, failing_client, mock_store):
        mock_store.ping = AsyncMock(side_effect=StorageError("timeout", provider_name="mock_feedback"))

        response = failing_client.get("/health")

        assert response.status_code == 503
        assert response.json() == {
            "status": "unhealthy",
            "store": "mock_feedback",
            "error": "timeout",
        }

    def test_unexpected_exception_becomes_500(self, failing_client, mock_store):
        mock_store.list_feedback.side_effect = RuntimeError("boom")

        response = failing_client.get("/api/feedback")

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["details"] == "boom"
