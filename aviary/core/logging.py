"""structlog configuration for the Aviary API.

Output goes to stderr through stdlib logging so gunicorn/uvicorn records
and application events share one stream:
- console renderer in development
- JSON lines in production (APP_ENV=production), or whenever LOG_JSON=true

Events logged while serving a request carry `method` and `path`, bound by
`bind_request_context`.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog
from fastapi import Request

JSON_ENVIRONMENTS = frozenset({"production", "staging"})


def use_json_output(app_env: str, log_json: Optional[bool]) -> bool:
    """An explicit LOG_JSON wins; otherwise deployed environments log JSON."""
    if log_json is not None:
        return log_json
    return app_env.lower() in JSON_ENVIRONMENTS


def configure_logging(
    *,
    level: str = "INFO",
    app_env: str = "development",
    log_json: Optional[bool] = None,
) -> None:
    app_level = logging.getLevelName(level.upper())
    if not isinstance(app_level, int):
        app_level = logging.INFO

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.UnicodeDecoder(),
    ]

    renderers: list[structlog.types.Processor]
    if use_json_output(app_env, log_json):
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *renderers,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("aviary").setLevel(app_level)
    # Access lines already come from gunicorn's accesslog.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("alembic").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


async def bind_request_context(request: Request, call_next):
    """HTTP middleware: tag every event logged during the request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        method=request.method,
        path=request.url.path,
    )
    try:
        return await call_next(request)
    finally:
        structlog.contextvars.clear_contextvars()
