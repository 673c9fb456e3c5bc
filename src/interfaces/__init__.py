"""Public interface definitions for the feedback storage layer.

The services talk to storage only through ``IFeedbackStore``.  Concrete
adapters live in ``src/providers/feedback/`` and are chosen in
``src/main.py`` from the ``DB_BACKEND`` setting:

    IFeedbackStore  →  PostgresFeedbackStore, SQLiteFeedbackStore

Unit tests inject a mock store instead of opening a database.
"""

from src.interfaces.feedback_store import (
    FEEDBACK_COLUMN_MAP,
    FEEDBACK_COLUMNS,
    IFeedbackStore,
    map_feedback_row,
)

__all__ = [
    "FEEDBACK_COLUMN_MAP",
    "FEEDBACK_COLUMNS",
    "IFeedbackStore",
    "map_feedback_row",
]
