"""
Pinboard API application.

Wires together configuration, logging, the MongoDB lifespan, middleware,
error envelopes, the versioned API router and the static upload mount.

Run locally with::

    uvicorn pinboard.main:app --reload
"""
import logging
import traceback
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import DuplicateKeyError

from pinboard.api.v1.router import api_router
from pinboard.config import settings
from pinboard.core.exceptions import APIException, ConflictException, ValidationException
from pinboard.core.middleware import RateLimitMiddleware, RequestLoggingMiddleware
from pinboard.db.mongodb import mongodb


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Prepare the upload directory and hold the MongoDB connection for the app's lifetime."""
    logger.info(
        f"Starting {settings.APP_NAME} v{settings.APP_VERSION} "
        f"({settings.ENVIRONMENT}, debug={settings.DEBUG})"
    )

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Serving uploads from {upload_dir.resolve()}")

    await mongodb.connect()
    try:
        yield
    finally:
        logger.info("Shutting down, closing MongoDB connection")
        await mongodb.close()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url=settings.DOCS_URL if settings.DEBUG else None,
    redoc_url=settings.REDOC_URL if settings.DEBUG else None,
    openapi_url=settings.OPENAPI_URL if settings.DEBUG else None,
    lifespan=lifespan,
)


# =============================================================================
# Middleware (last added runs first)
# =============================================================================
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.cors_methods_list,
    allow_headers=settings.cors_headers_list,
)
app.add_middleware(RequestLoggingMiddleware)

if settings.RATE_LIMIT_ENABLED:
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.RATE_LIMIT_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        exclude_paths=[
            "/health",
            f"{settings.API_V1_PREFIX}/health",
            f"{settings.API_V1_PREFIX}/health/ready",
        ],
    )


# =============================================================================
# Error envelopes
# =============================================================================
def error_response(exc: APIException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Bad request bodies and query parameters are 400s with one entry per field."""
    fields = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return error_response(ValidationException("Request validation failed", details=fields))


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    """A unique index rejected a write that slipped past the service checks."""
    logger.warning(f"Duplicate key on {request.method} {request.url.path}: {exc}")
    return error_response(
        ConflictException("Resource already exists", error_code="ALREADY_EXISTS")
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")

    if settings.DEBUG:
        message, details = str(exc), {"traceback": traceback.format_exc()}
    else:
        message, details = "An unexpected error occurred", None

    return error_response(
        APIException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="INTERNAL_ERROR",
            message=message,
            details=details,
        )
    )


# =============================================================================
# Routes
# =============================================================================
app.include_router(api_router, prefix=settings.API_V1_PREFIX)

app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)


@app.get("/", tags=["Root"])
async def root():
    """Service information and entry points."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": "MongoDB",
        "api": settings.API_V1_PREFIX,
        "uploads": settings.UPLOAD_URL_PREFIX,
        "docs": settings.DOCS_URL if settings.DEBUG else None,
        "health": "/health",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness probe; never touches the database."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pinboard.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD
    )
