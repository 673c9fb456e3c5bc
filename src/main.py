"""Feedback API FastAPI application entry point.

Wires the storage adapter, services, and routes together via dependency
injection.  Loads configuration from ``.env`` and ``config/config.yaml``,
configures structured logging, and owns the process lifecycle:

  - startup: build the store, create the table if needed, and verify
    connectivity.  If the store is unreachable the lifespan raises and
    uvicorn exits instead of serving in a broken state.
  - shutdown: uvicorn stops accepting connections and drains in-flight
    requests on SIGINT/SIGTERM, then the lifespan closes the store.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    install_exception_handlers,
)
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import SUPPORTED_DB_BACKENDS, Settings
from src.interfaces.feedback_store import IFeedbackStore
from src.providers.feedback.postgres_feedback_store import PostgresFeedbackStore
from src.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore
from src.services.feedback_service import FeedbackService
from src.services.stats_service import StatsService
from src.utils.errors import ConfigurationError, StorageError
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(settings)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component factories
# ---------------------------------------------------------------------------


def _build_feedback_store(app_settings: Settings) -> IFeedbackStore:
    """Select the storage adapter named by ``db_backend``."""
    backend = app_settings.db_backend.strip().lower()
    if backend == "postgresql":
        return PostgresFeedbackStore(
            dsn=app_settings.get_postgres_dsn(),
            min_size=app_settings.db_pool_min_size,
            max_size=app_settings.db_pool_max_size,
        )
    if backend == "sqlite":
        return SQLiteFeedbackStore(db_path=app_settings.sqlite_path)
    raise ConfigurationError(
        f"Unknown db_backend {app_settings.db_backend!r}; "
        f"expected one of: {', '.join(SUPPORTED_DB_BACKENDS)}"
    )


def _build_all(app_settings: Settings, store: IFeedbackStore | None = None) -> dict[str, Any]:
    """Build the store and the services that share it."""
    feedback_store = store or _build_feedback_store(app_settings)
    return {
        "feedback_store": feedback_store,
        "feedback_service": FeedbackService(store=feedback_store),
        "stats_service": StatsService(store=feedback_store),
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Connect the store on startup, close it on shutdown."""
    app_settings: Settings = application.state.settings
    components = getattr(application.state, "components", None) or _build_all(app_settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    store: IFeedbackStore = components["feedback_store"]
    try:
        await store.initialize()
        await store.ping()
    except StorageError as exc:
        _logger.error(
            "store_connection_failed",
            provider=store.get_provider_name(),
            error=exc.message,
        )
        await store.close()
        raise

    _logger.info(
        "app_startup",
        version=config.get("app", {}).get("version", "1.0.0"),
        environment=app_settings.app_env,
        store=store.get_provider_name(),
        port=app_settings.port,
    )

    yield

    _logger.info("app_shutdown", message="Closing feedback store")
    await store.close()


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    components: dict[str, Any] | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    app_settings:
        Settings to build the store from; the module-level settings when omitted.
    components:
        Optional pre-built components (``feedback_store``, ``feedback_service``,
        ``stats_service``).  Tests pass these to run against a temporary store.
    """
    app_settings = app_settings or settings
    app_meta = config.get("app", {})

    application = FastAPI(
        title=app_meta.get("name", "Student Feedback API"),
        version=app_meta.get("version", "1.0.0"),
        description="Collect, list, and aggregate course-feedback submissions.",
        lifespan=_lifespan,
    )
    application.state.settings = app_settings
    if components:
        application.state.components = components

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=config.get("cors", {}).get("allowed_origins"))
    install_exception_handlers(application)

    application.include_router(api_router)

    return application


app = create_app()


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.port,
        reload=(settings.app_env == "development"),
    )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    run()
