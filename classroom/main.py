"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config.settings import settings
from .controllers import analytics, announcements, auth, groups, submissions, tasks
from .database import dispose_engine, init_models
from .exceptions import ClassroomError
from .middleware import StructuredLoggingMiddleware
from .views import ErrorResponse

logger = logging.getLogger(__name__)


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
NOISY_LOGGERS = ("aiosqlite", "multipart", "python_multipart", "sqlalchemy.engine")


def _configure_logging() -> None:
    """Send application logs to stdout and a rotating file.

    Request lines from the middleware are already formatted and coloured, so
    they go to stdout bare and skip the root handlers.
    """

    formatter = logging.Formatter(LOG_FORMAT)

    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path, maxBytes=1_000_000, backupCount=5, encoding="utf-8"
    )
    console_handler = logging.StreamHandler(sys.stdout)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    for handler in (console_handler, file_handler):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    request_handler = logging.StreamHandler(sys.stdout)
    request_handler.setFormatter(logging.Formatter("%(message)s"))
    request_logger = logging.getLogger("classroom.middleware.structured")
    request_logger.handlers[:] = [request_handler]
    request_logger.setLevel(logging.INFO)
    request_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _error_response(status_code: int, message: str, code: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    location = ".".join(
        str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")
    )
    message = str(first.get("msg", "Invalid request"))
    return f"{location}: {message}" if location else message


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="Classroom management backend: groups, tasks, submissions and announcements",
    )

    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.include_router(auth.router)
    app.include_router(groups.router)
    app.include_router(tasks.group_tasks_router)
    app.include_router(tasks.router)
    app.include_router(submissions.task_submissions_router)
    app.include_router(submissions.router)
    app.include_router(announcements.router)
    app.include_router(analytics.router)

    upload_dir = Path(settings.uploads.directory)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.uploads.url_prefix,
        StaticFiles(directory=upload_dir),
        name="uploads",
    )

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Root endpoint."""

        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "operational",
        }

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""

        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(ClassroomError)
    async def classroom_error_handler(request: Request, exc: ClassroomError):
        return _error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, _first_validation_message(exc), "validation_error")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(500, "Internal server error", "internal_error")

    @app.on_event("startup")
    async def startup_event() -> None:
        await init_models()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        await dispose_engine()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "classroom.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
