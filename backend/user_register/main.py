"""Application factory and ASGI entry point.

Run with ``uvicorn user_register.main:app``. Startup upgrades the SQLite
schema; every error leaves the app in the ``{"error": {...}}`` envelope.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from user_register.api.deps import build_mail_verification
from user_register.api.v1.router import router as v1_router
from user_register.core.config import settings
from user_register.core.database import init_db
from user_register.core.errors import APIError
from user_register.core.rate_limiting import limiter, rate_limit_exceeded_handler
from user_register.core.responses import error_response

logger = structlog.get_logger()


def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    return error_response(exc.status_code, exc.code, exc.message)


def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as 400 with per-field details."""
    details = [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]
    return error_response(
        400, "VALIDATION_ERROR", "Request validation failed", details=details
    )


def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn anything unhandled into an opaque 500.

    Store, hashing and signing failures land here. The traceback is logged;
    the caller only sees INTERNAL_ERROR.
    """
    logger.exception("unhandled_exception", exc_info=exc, path=request.url.path)
    return error_response(500, "INTERNAL_ERROR", "An unexpected error occurred")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Upgrade the schema and drop codes that expired while the service was down."""
    await init_db()
    purged = await build_mail_verification().purge_expired()
    logger.info("database_ready", path=settings.database_path, purged_codes=purged)
    yield


def create_app(*, run_migrations: bool = True) -> FastAPI:
    """Build the FastAPI application.

    Args:
        run_migrations: Upgrade the schema on startup. Pass False when the
            database is prepared elsewhere.
    """
    logging.getLogger("user_register").setLevel(settings.log_level.upper())

    app = FastAPI(
        title="User Register API",
        version="1.0.0",
        description="User registration, login and password recovery",
        lifespan=lifespan if run_migrations else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Authorization"],
    )

    # Exception catches whatever the handlers above do not
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    app.state.limiter = limiter
    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "healthy"}

    return app


app = create_app()
