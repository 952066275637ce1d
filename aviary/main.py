from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from aviary.db.base import get_db
from aviary.core.config import settings
from aviary.core.logging import bind_request_context, configure_logging
from aviary.routers import birds as birds_router
from aviary.schemas.common import ErrorResponse
from aviary.core.errors import (
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(
    level=settings.LOG_LEVEL,
    app_env=settings.APP_ENV,
    log_json=settings.LOG_JSON,
)

app = FastAPI(
    title="Aviary API",
    description=(
        "CRUD for **birds**, showing how a controller validates a record and "
        "formats error responses.\n\n"
        "- Unknown ids answer `404 {\"error\": \"Bird not found\"}`.\n"
        "- Rejected writes answer `422 {\"errors\": ...}` listing every failed rule.\n"
        "- Malformed requests answer `422` in the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    responses={500: {"model": ErrorResponse, "description": "Unexpected error."}},
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Logging context ---
app.middleware("http")(bind_request_context)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(birds_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
