"""Feedback storage adapters.

SQLiteFeedbackStore keeps feedback in a local file (``data/feedback.db``)
and is used for development and the test suite.  PostgresFeedbackStore
talks to a PostgreSQL server through an asyncpg pool and is the default
deployment backend.  Both implement IFeedbackStore, so the services never
know which one they were given.
"""

from src.providers.feedback.postgres_feedback_store import PostgresFeedbackStore
from src.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore

__all__ = ["PostgresFeedbackStore", "SQLiteFeedbackStore"]
