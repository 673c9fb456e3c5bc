"""Feedback orchestration — list, get, create, delete.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Services (business logic orchestration).
# Depends on: IFeedbackStore, feedback_validator.
#
# FeedbackService sits between the HTTP routes and the storage adapter:
#
#   1. VALIDATION — Create runs the body through validate_submission();
#      Delete checks the id is syntactically an integer.  Rejections are
#      raised before the store is touched, so no partial writes happen.
#   2. PERSISTENCE — single-statement calls on the injected store.
#   3. SHAPING — store rows (already keyed by API field names) become
#      frozen FeedbackRecord models.
#
# The service keeps no state between calls; every read reflects the
# current contents of the store.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from src.interfaces.feedback_store import IFeedbackStore
from src.models.feedback import FeedbackRecord
from src.services.feedback_validator import parse_feedback_id, validate_submission
from src.utils.errors import (
    FeedbackNotFoundError,
    FeedbackValidationError,
    InvalidFeedbackIdError,
)

logger = structlog.get_logger(logger_name=__name__)


class FeedbackService:
    """Create/read/delete operations over course feedback.

    The store is constructor-injected; the service never builds its own.
    """

    def __init__(self, store: IFeedbackStore) -> None:
        self._store = store

    async def list_feedback(self) -> list[FeedbackRecord]:
        """Return all feedback, newest first."""
        rows = await self._store.list_feedback()
        return [FeedbackRecord.model_validate(r) for r in rows]

    async def get_feedback(self, feedback_id: str | int) -> FeedbackRecord:
        """Return one feedback row.

        Raises:
            FeedbackNotFoundError: No row matches *feedback_id*.
            StorageError: The store failed.
        """
        row = await self._store.get_feedback(feedback_id)
        if row is None:
            raise FeedbackNotFoundError()
        return FeedbackRecord.model_validate(row)

    async def create_feedback(self, payload: Mapping[str, Any]) -> FeedbackRecord:
        """Validate and persist a new submission.

        Raises:
            FeedbackValidationError: The payload broke one or more rules.
            StorageError: The store failed.
        """
        outcome = validate_submission(payload)
        if not outcome.accepted:
            logger.info(
                "feedback_rejected",
                fields=[v.field for v in outcome.violations],
            )
            raise FeedbackValidationError(outcome)

        row = await self._store.insert_feedback(outcome.submission)
        record = FeedbackRecord.model_validate(row)
        logger.info(
            "feedback_created",
            feedback_id=record.id,
            course_code=record.course_code,
            rating=record.rating,
        )
        return record

    async def delete_feedback(self, feedback_id: str | int) -> FeedbackRecord:
        """Delete one feedback row and return it.

        Raises:
            InvalidFeedbackIdError: *feedback_id* is not an integer.
            FeedbackNotFoundError: No row matches.
            StorageError: The store failed.
        """
        parsed_id = parse_feedback_id(feedback_id)
        if parsed_id is None:
            raise InvalidFeedbackIdError()

        row = await self._store.delete_feedback(parsed_id)
        if row is None:
            raise FeedbackNotFoundError()

        record = FeedbackRecord.model_validate(row)
        logger.info("feedback_deleted", feedback_id=record.id)
        return record
