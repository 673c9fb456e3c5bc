"""structlog setup for the feedback API.

One processor chain feeds either a coloured console renderer (development,
tests) or a JSON renderer (``APP_ENV=production``).  Both decisions come from
:class:`~src.config.settings.Settings`, the same object the store is built
from, so the log format and the database always describe the same deployment.

Every event carries ``service`` and ``environment``.  While a request is in
flight, ``RequestLoggingMiddleware`` binds ``request_id``, ``method`` and
``path`` into structlog's contextvars, so ``feedback_created`` or
``storage_failure`` lines can be tied back to the HTTP request that caused
them.  uvicorn's own access log is quietened in favour of ``http_request``.
"""

from __future__ import annotations

import logging
import sys

import structlog

from src.config.settings import Settings
from src.utils.errors import ConfigurationError

SERVICE_NAME = "feedback-api"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _resolve_level(log_level: str) -> int:
    name = log_level.strip().upper()
    if name not in _LEVELS:
        raise ConfigurationError(
            f"Unknown log level {log_level!r}; expected one of: {', '.join(_LEVELS)}"
        )
    return logging.getLevelName(name)


def _service_fields(environment: str) -> structlog.types.Processor:
    def add_service_fields(logger, method_name, event_dict):  # noqa: ANN001, ANN202
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_service_fields


def configure_logging(app_settings: Settings | None = None) -> structlog.BoundLogger:
    """Configure structlog and stdlib logging from *app_settings*.

    Args:
        app_settings: Source of ``log_level`` and ``app_env``.  A fresh
            ``Settings()`` is read when omitted.

    Returns:
        A configured structlog BoundLogger.

    Raises:
        ConfigurationError: ``log_level`` is not a standard level name.
    """
    app_settings = app_settings or Settings()
    level = _resolve_level(app_settings.log_level)
    use_json = app_settings.app_env == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _service_fields(app_settings.app_env),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn and asyncpg log through stdlib; route them through the same chain.
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *shared_processors,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # http_request already records every request.
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))

    return structlog.get_logger()


def bind_request_context(*, request_id: str, method: str, path: str) -> None:
    """Attach request identifiers to every event logged until cleared."""
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def clear_request_context() -> None:
    structlog.contextvars.unbind_contextvars("request_id", "method", "path")


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)
