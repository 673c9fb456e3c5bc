"""Custom exception hierarchy for the feedback API.

All application exceptions inherit from :class:`FeedbackAPIError`, which
carries an optional ``provider_name`` so error handlers can identify which
storage backend (e.g. "sqlite_feedback", "postgres_feedback") caused the
failure.

The hierarchy maps one-to-one onto HTTP outcomes:

    FeedbackAPIError  (base -- catch-all for any feedback API error)
    +-- FeedbackValidationError  (400: submitted fields failed validation)
    +-- InvalidFeedbackIdError   (400: id is not syntactically a number)
    +-- FeedbackNotFoundError    (404: valid request, no matching row)
    +-- StorageError             (500: connectivity loss, constraint violation)
    +-- ConfigurationError       (startup / invalid config -- fatal)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.models.feedback import ValidationOutcome


class FeedbackAPIError(Exception):
    """Base exception for all feedback API errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which storage adapter triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[postgres_feedback] connection refused``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Client errors
# ---------------------------------------------------------------------------

class FeedbackValidationError(FeedbackAPIError):
    """Raised when a feedback submission is rejected by the validator.

    The full :class:`~src.models.feedback.ValidationOutcome` is attached so
    the API layer can report every violated field, not just the first.
    """

    def __init__(self, outcome: ValidationOutcome) -> None:
        self._outcome = outcome
        first = outcome.violations[0].message if outcome.violations else "Invalid feedback"
        super().__init__(message=first)

    @property
    def outcome(self) -> ValidationOutcome:
        return self._outcome


class InvalidFeedbackIdError(FeedbackAPIError):
    """Raised when a feedback id is not syntactically an integer."""

    def __init__(self, message: str = "Invalid feedback ID") -> None:
        super().__init__(message=message)


class FeedbackNotFoundError(FeedbackAPIError):
    """Raised when no feedback row matches the requested id."""

    def __init__(self, message: str = "Feedback not found") -> None:
        super().__init__(message=message)


# ---------------------------------------------------------------------------
# Storage / configuration errors
# ---------------------------------------------------------------------------

class StorageError(FeedbackAPIError):
    """Raised when the relational store fails (unreachable, constraint, bad SQL).

    The driver's own message is preserved verbatim so it can be surfaced in
    the ``details`` field of a 500 response.
    """

    def __init__(
        self,
        message: str = "Storage operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(FeedbackAPIError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
