"""Dashboard statistics over all stored feedback.

Recomputed on every request from a single aggregate query; nothing is
cached or maintained incrementally.
"""

from __future__ import annotations

from typing import Any

import structlog

from src.interfaces.feedback_store import IFeedbackStore
from src.models.feedback import DashboardStats

logger = structlog.get_logger(logger_name=__name__)


def _as_int(value: Any) -> int:
    return int(value) if value is not None else 0


def _as_float(value: Any) -> float:
    return round(float(value), 2) if value is not None else 0.0


def build_dashboard_stats(aggregates: dict[str, Any]) -> DashboardStats:
    """Normalize a raw aggregate row into :class:`DashboardStats`.

    Drivers disagree on numeric types (Postgres returns ``Decimal`` and
    ``bigint``, SQLite plain ints/floats) and an empty table yields ``NULL``
    for the rating aggregates; both are flattened here.  Missing ratings
    become ``0``.
    """
    return DashboardStats(
        total_feedback=_as_int(aggregates.get("total_feedback")),
        average_rating=_as_float(aggregates.get("average_rating")),
        highest_rating=_as_int(aggregates.get("highest_rating")),
        lowest_rating=_as_int(aggregates.get("lowest_rating")),
        total_courses=_as_int(aggregates.get("total_courses")),
    )


class StatsService:
    """Computes the dashboard statistics from the injected store."""

    def __init__(self, store: IFeedbackStore) -> None:
        self._store = store

    async def get_dashboard_stats(self) -> DashboardStats:
        aggregates = await self._store.get_rating_aggregates()
        stats = build_dashboard_stats(aggregates)
        logger.debug(
            "dashboard_stats_computed",
            total_feedback=stats.total_feedback,
            total_courses=stats.total_courses,
        )
        return stats
