"""Shared pytest fixtures for the feedback API test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config.settings import Settings
from src.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore


@pytest.fixture
def valid_payload() -> dict[str, Any]:
    """A submission that passes every validation rule."""
    return {
        "studentName": "Ada Lovelace",
        "courseCode": "ICT101",
        "comments": "Clear lectures and useful labs.",
        "rating": 4,
    }


@pytest.fixture
def sample_row() -> dict[str, Any]:
    """A stored row as returned by a feedback store (API field names)."""
    return {
        "id": 1,
        "studentName": "Ada Lovelace",
        "courseCode": "ICT101",
        "comments": "Clear lectures and useful labs.",
        "rating": 4,
        "created_at": datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc),
    }


@pytest.fixture
def sqlite_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        db_backend="sqlite",
        sqlite_path=str(tmp_path / "feedback.db"),
        app_env="test",
    )


@pytest.fixture
async def sqlite_store(tmp_path: Path) -> SQLiteFeedbackStore:
    """An initialized SQLiteFeedbackStore backed by a temp file."""
    store = SQLiteFeedbackStore(db_path=tmp_path / "feedback.db")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def mock_store(sample_row: dict[str, Any]) -> MagicMock:
    """A feedback store double with every async method stubbed."""
    store = MagicMock()
    store.initialize = AsyncMock()
    store.ping = AsyncMock()
    store.close = AsyncMock()
    store.list_feedback = AsyncMock(return_value=[sample_row])
    store.get_feedback = AsyncMock(return_value=sample_row)
    store.insert_feedback = AsyncMock(return_value=sample_row)
    store.delete_feedback = AsyncMock(return_value=sample_row)
    store.get_rating_aggregates = AsyncMock(return_value={
        "total_feedback": 1,
        "average_rating": 4.0,
        "highest_rating": 4,
        "lowest_rating": 4,
        "total_courses": 1,
    })
    store.get_provider_name.return_value = "mock_feedback"
    return store
