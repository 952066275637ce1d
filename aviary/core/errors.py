"""
App-level exception handlers.

Expected conditions (unknown id, failed validation rule) are outcome
values rendered by `aviary.core.outcomes.render_outcome` and never reach
these handlers. What does reach them:

- RequestValidationError: the request itself is malformed (e.g. the body
  is not a JSON object). 422 with machine-readable field errors.
- Anything else: logged with traceback, answered with a generic 500.
"""
from __future__ import annotations

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

log = structlog.get_logger(__name__)


def _field_name(loc: tuple) -> str:
    """Dotted path inside the request; errors about the body as a whole are "body"."""
    parts = [str(part) for part in loc]
    if parts and parts[0] == "body":
        parts = parts[1:]
    return ".".join(parts) or "body"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = [
        {
            "field": _field_name(tuple(error["loc"])),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    log.info(
        "request.invalid",
        method=request.method,
        path=request.url.path,
        fields=[e["field"] for e in field_errors],
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "request.unhandled_error",
        method=request.method,
        path=request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
