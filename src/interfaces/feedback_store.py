"""Abstract base class for feedback storage adapters.

Defines the contract for persisting course-feedback rows in a relational
store.  Implementations may use SQLite (local development, tests) or
PostgreSQL (deployment).  The adapter pattern allows the storage backend to
be swapped without touching the services or routes.

Rows cross this boundary as plain dicts keyed by the **API** field names
(``id``, ``studentName``, ``courseCode``, ``comments``, ``rating``,
``created_at``).  Adapters translate their lowercase column names through
:data:`FEEDBACK_COLUMN_MAP` rather than relying on SQL alias quoting.

Adapters never interpret results: "no such row" is reported as ``None``
and every driver failure is raised as :class:`~src.utils.errors.StorageError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from src.models.feedback import FeedbackSubmission

# Store column -> API field.  Public contract: clients rely on these names.
FEEDBACK_COLUMN_MAP: dict[str, str] = {
    "id": "id",
    "studentname": "studentName",
    "coursecode": "courseCode",
    "comments": "comments",
    "rating": "rating",
    "created_at": "created_at",
}

# Column list in SELECT/RETURNING order.
FEEDBACK_COLUMNS: tuple[str, ...] = tuple(FEEDBACK_COLUMN_MAP)


def map_feedback_row(row: Any) -> dict[str, Any]:
    """Translate a driver row (mapping-like, keyed by column) into API field names."""
    return {field: row[column] for column, field in FEEDBACK_COLUMN_MAP.items()}


class IFeedbackStore(ABC):
    """Contract for feedback persistence.

    All operations are async so network-backed stores never block the
    event loop.  Each operation is a single SQL statement; no multi-statement
    transactions are required.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create the feedback table and indices if they don't exist.  Called at startup."""

    @abstractmethod
    async def ping(self) -> None:
        """Round-trip a trivial query.

        Raises
        ------
        StorageError
            If the store cannot be reached.
        """

    @abstractmethod
    async def list_feedback(self) -> list[dict[str, Any]]:
        """Return every row ordered by ``created_at`` then ``id``, newest first."""

    @abstractmethod
    async def get_feedback(self, feedback_id: str | int) -> dict[str, Any] | None:
        """Return the row with the given id, or ``None``.

        Parameters
        ----------
        feedback_id:
            Identifier exactly as the caller supplied it.  The adapter passes
            it to the store as a bound parameter; a value the store cannot
            compare against an integer column surfaces as ``StorageError``
            or simply matches nothing, depending on the engine.
        """

    @abstractmethod
    async def insert_feedback(self, submission: FeedbackSubmission) -> dict[str, Any]:
        """Insert a validated submission and return the created row."""

    @abstractmethod
    async def delete_feedback(self, feedback_id: int) -> dict[str, Any] | None:
        """Delete the row with the given id and return it, or ``None`` if absent."""

    @abstractmethod
    async def get_rating_aggregates(self) -> dict[str, Any]:
        """Return the raw aggregate row over all feedback.

        Returns
        -------
        dict
            Contains ``total_feedback``, ``average_rating`` (rounded to two
            decimals), ``highest_rating``, ``lowest_rating`` and
            ``total_courses``.  The rating figures are ``None`` on an empty
            table; callers decide how to present that.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the adapter.  Called at shutdown."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this adapter."""
