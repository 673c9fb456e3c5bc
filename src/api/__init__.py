"""Feedback API layer — routes, schemas, and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    install_exception_handlers,
)
from src.api.routes import router
from src.api.schemas import (
    DashboardStatsResponse,
    ErrorResponse,
    FeedbackCreatedResponse,
    FeedbackDeletedResponse,
    FeedbackItemResponse,
    FeedbackListResponse,
    HealthResponse,
    RootResponse,
    ValidationErrorResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "install_exception_handlers",
    "router",
    "DashboardStatsResponse",
    "ErrorResponse",
    "FeedbackCreatedResponse",
    "FeedbackDeletedResponse",
    "FeedbackItemResponse",
    "FeedbackListResponse",
    "HealthResponse",
    "RootResponse",
    "ValidationErrorResponse",
]
