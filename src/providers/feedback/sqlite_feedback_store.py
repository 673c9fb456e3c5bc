"""SQLite-backed feedback store.

Persists course feedback to a local SQLite database (``data/feedback.db``
by default).  Uses ``aiosqlite`` for async I/O with one short-lived
connection per operation and ``PRAGMA journal_mode=WAL`` so concurrent
readers are never blocked by a writer.

``created_at`` is stored as an ISO-8601 string with millisecond precision;
together with the ``id`` tie-break this gives list results a total order.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from src.interfaces.feedback_store import (
    FEEDBACK_COLUMNS,
    IFeedbackStore,
    map_feedback_row,
)
from src.models.feedback import FeedbackSubmission
from src.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/feedback.db")

_COLUMNS_SQL = ", ".join(FEEDBACK_COLUMNS)

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS feedback (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    studentname TEXT    NOT NULL,
    coursecode  TEXT    NOT NULL,
    comments    TEXT    NOT NULL,
    rating      INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
    created_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_feedback_created ON feedback(created_at);",
]

_LIST_SQL = f"SELECT {_COLUMNS_SQL} FROM feedback ORDER BY created_at DESC, id DESC;"

_SELECT_BY_ID_SQL = f"SELECT {_COLUMNS_SQL} FROM feedback WHERE id = ?;"

_INSERT_SQL = """\
INSERT INTO feedback (studentname, coursecode, comments, rating)
VALUES (?, ?, ?, ?);
"""

_DELETE_SQL = f"DELETE FROM feedback WHERE id = ? RETURNING {_COLUMNS_SQL};"

# INTEGER PRIMARY KEY is a signed 64-bit rowid.
_MIN_ROWID = -(2**63)
_MAX_ROWID = 2**63 - 1

_AGGREGATE_SQL = """\
SELECT COUNT(*)                   AS total_feedback,
       ROUND(AVG(rating), 2)      AS average_rating,
       MAX(rating)                AS highest_rating,
       MIN(rating)                AS lowest_rating,
       COUNT(DISTINCT coursecode) AS total_courses
FROM feedback;
"""


class SQLiteFeedbackStore(IFeedbackStore):
    """SQLite-backed feedback persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection with dict-like rows; driver errors become StorageError."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except aiosqlite.Error as exc:
            raise StorageError(str(exc), provider_name=self.get_provider_name()) from exc

    async def initialize(self) -> None:
        """Create the feedback table and indices if they don't exist."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(str(exc), provider_name=self.get_provider_name()) from exc

        async with self._connect() as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            await db.execute(_CREATE_TABLE_SQL)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("store_initialized", provider=self.get_provider_name(), path=str(self._db_path))

    async def ping(self) -> None:
        async with self._connect() as db:
            cursor = await db.execute("SELECT 1;")
            await cursor.fetchone()

    async def list_feedback(self) -> list[dict[str, Any]]:
        async with self._connect() as db:
            cursor = await db.execute(_LIST_SQL)
            rows = await cursor.fetchall()
        return [map_feedback_row(r) for r in rows]

    async def get_feedback(self, feedback_id: str | int) -> dict[str, Any] | None:
        # Text ids are coerced by the INTEGER column affinity; "abc" matches nothing.
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_BY_ID_SQL, (feedback_id,))
            row = await cursor.fetchone()
        return map_feedback_row(row) if row is not None else None

    async def insert_feedback(self, submission: FeedbackSubmission) -> dict[str, Any]:
        async with self._connect() as db:
            cursor = await db.execute(
                _INSERT_SQL,
                (
                    submission.student_name,
                    submission.course_code,
                    submission.comments,
                    submission.rating,
                ),
            )
            new_id = cursor.lastrowid
            await db.commit()
            cursor = await db.execute(_SELECT_BY_ID_SQL, (new_id,))
            row = await cursor.fetchone()

        if row is None:
            raise StorageError(
                f"Inserted feedback row {new_id} could not be read back",
                provider_name=self.get_provider_name(),
            )
        return map_feedback_row(row)

    async def delete_feedback(self, feedback_id: int) -> dict[str, Any] | None:
        if not _MIN_ROWID <= feedback_id <= _MAX_ROWID:
            return None
        async with self._connect() as db:
            cursor = await db.execute(_DELETE_SQL, (feedback_id,))
            rows = await cursor.fetchall()
            await db.commit()
        return map_feedback_row(rows[0]) if rows else None

    async def get_rating_aggregates(self) -> dict[str, Any]:
        async with self._connect() as db:
            cursor = await db.execute(_AGGREGATE_SQL)
            row = await cursor.fetchone()
        return dict(row)

    async def close(self) -> None:
        # Connections are per-operation; nothing is held between requests.
        logger.info("store_closed", provider=self.get_provider_name())

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return "sqlite_feedback"
