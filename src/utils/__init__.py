"""Utility modules for the feedback API.

- **errors** -- Domain exception hierarchy rooted at FeedbackAPIError; each
  failure class maps onto exactly one HTTP outcome (400/404/500) so routes
  never need broad ``except Exception`` blocks.
- **logging** -- structlog setup driven by Settings (console in development,
  JSON in production) plus per-request context binding.
"""

from src.utils.errors import (
    ConfigurationError,
    FeedbackAPIError,
    FeedbackNotFoundError,
    FeedbackValidationError,
    InvalidFeedbackIdError,
    StorageError,
)
from src.utils.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "ConfigurationError",
    "FeedbackAPIError",
    "FeedbackNotFoundError",
    "FeedbackValidationError",
    "InvalidFeedbackIdError",
    "StorageError",
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
    "get_logger",
]
