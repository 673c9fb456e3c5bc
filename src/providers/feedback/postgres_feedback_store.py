"""PostgreSQL-backed feedback store.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Providers (concrete adapter implementing IFeedbackStore).
#
# Database: the ``feedback`` table on the server described by the
#           DB_HOST / DB_USER / DB_PASSWORD / DB_NAME / DB_PORT settings.
#
# Uses an ``asyncpg`` connection pool created once at startup and shared
# by every request.  The pool is the only shared resource in the service;
# Postgres serializes conflicting writes itself, so this adapter adds no
# locking.  Every operation is a single statement using ``$n`` bound
# parameters; user input never reaches the query text.
#
# Follows the same adapter shape as sqlite_feedback_store.py; only the
# driver, placeholders, and DDL types differ.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Any

import asyncpg
import structlog

from src.interfaces.feedback_store import (
    FEEDBACK_COLUMNS,
    IFeedbackStore,
    map_feedback_row,
)
from src.models.feedback import FeedbackSubmission
from src.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

# Driver failures that mean "the store could not do what was asked".
_DRIVER_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)

_COLUMNS_SQL = ", ".join(FEEDBACK_COLUMNS)

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS feedback (
    id          SERIAL PRIMARY KEY,
    studentname VARCHAR(255) NOT NULL,
    coursecode  VARCHAR(50)  NOT NULL,
    comments    TEXT         NOT NULL,
    rating      INTEGER      NOT NULL CHECK (rating BETWEEN 1 AND 5),
    created_at  TIMESTAMPTZ  NOT NULL DEFAULT now()
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_feedback_created ON feedback(created_at);",
]

_LIST_SQL = f"SELECT {_COLUMNS_SQL} FROM feedback ORDER BY created_at DESC, id DESC"

# The id arrives as raw text; Postgres performs the integer cast so a
# malformed id fails inside the store, exactly like any other bad input.
_SELECT_BY_ID_SQL = f"SELECT {_COLUMNS_SQL} FROM feedback WHERE id = CAST($1::text AS INTEGER)"

_INSERT_SQL = f"""\
INSERT INTO feedback (studentname, coursecode, comments, rating)
VALUES ($1, $2, $3, $4)
RETURNING {_COLUMNS_SQL}
"""

_DELETE_SQL = f"DELETE FROM feedback WHERE id = $1 RETURNING {_COLUMNS_SQL}"

# SERIAL ids are 32-bit; asyncpg refuses to encode anything wider.
_MIN_SERIAL_ID = -(2**31)
_MAX_SERIAL_ID = 2**31 - 1

_AGGREGATE_SQL = """\
SELECT COUNT(*)                   AS total_feedback,
       ROUND(AVG(rating), 2)      AS average_rating,
       MAX(rating)                AS highest_rating,
       MIN(rating)                AS lowest_rating,
       COUNT(DISTINCT coursecode) AS total_courses
FROM feedback
"""


class PostgresFeedbackStore(IFeedbackStore):
    """PostgreSQL-backed feedback persistence over an asyncpg pool."""

    def __init__(
        self,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._pool: asyncpg.Pool | None = None

    # ── Internal helpers ──────────────────────────────────────────────

    def _error(self, exc: BaseException) -> StorageError:
        return StorageError(str(exc) or type(exc).__name__, provider_name=self.get_provider_name())

    def _require_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StorageError(
                "Connection pool is not initialized",
                provider_name=self.get_provider_name(),
            )
        return self._pool

    # ── Lifecycle ─────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Create the pool, then the feedback table and indices if missing."""
        try:
            if self._pool is None:
                self._pool = await asyncpg.create_pool(
                    dsn=self._dsn,
                    min_size=self._min_size,
                    max_size=self._max_size,
                )
            await self._pool.execute(_CREATE_TABLE_SQL)
            for idx_sql in _CREATE_INDICES_SQL:
                await self._pool.execute(idx_sql)
        except _DRIVER_ERRORS as exc:
            raise self._error(exc) from exc
        logger.info(
            "store_initialized",
            provider=self.get_provider_name(),
            pool_min=self._min_size,
            pool_max=self._max_size,
        )

    async def ping(self) -> None:
        pool = self._require_pool()
        try:
            await pool.fetchval("SELECT 1")
        except _DRIVER_ERRORS as exc:
            raise self._error(exc) from exc

    async def close(self) -> None:
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        logger.info("store_closed", provider=self.get_provider_name())

    # ── Queries ───────────────────────────────────────────────────────

    async def list_feedback(self) -> list[dict[str, Any]]:
        pool = self._require_pool()
        try:
            rows = await pool.fetch(_LIST_SQL)
        except _DRIVER_ERRORS as exc:
            raise self._error(exc) from exc
        return [map_feedback_row(r) for r in rows]

    async def get_feedback(self, feedback_id: str | int) -> dict[str, Any] | None:
        pool = self._require_pool()
        try:
            row = await pool.fetchrow(_SELECT_BY_ID_SQL, str(feedback_id))
        except _DRIVER_ERRORS as exc:
            raise self._error(exc) from exc
        return map_feedback_row(row) if row is not None else None

    async def insert_feedback(self, submission: FeedbackSubmission) -> dict[str, Any]:
        pool = self._require_pool()
        try:
            row = await pool.fetchrow(
                _INSERT_SQL,
                submission.student_name,
                submission.course_code,
                submission.comments,
                submission.rating,
            )
        except _DRIVER_ERRORS as exc:
            raise self._error(exc) from exc
        return map_feedback_row(row)

    async def delete_feedback(self, feedback_id: int) -> dict[str, Any] | None:
        if not _MIN_SERIAL_ID <= feedback_id <= _MAX_SERIAL_ID:
            return None
        pool = self._require_pool()
        try:
            row = await pool.fetchrow(_DELETE_SQL, feedback_id)
        except _DRIVER_ERRORS as exc:
            raise self._error(exc) from exc
        return map_feedback_row(row) if row is not None else None

    async def get_rating_aggregates(self) -> dict[str, Any]:
        pool = self._require_pool()
        try:
            row = await pool.fetchrow(_AGGREGATE_SQL)
        except _DRIVER_ERRORS as exc:
            raise self._error(exc) from exc
        result = dict(row)
        # ROUND(AVG(...)) comes back as numeric.
        if isinstance(result.get("average_rating"), Decimal):
            result["average_rating"] = float(result["average_rating"])
        return result

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return "postgres_feedback"
