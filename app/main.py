"""Main FastAPI application entry point.

``create_app`` wires middleware, exception handlers and routers around an
injectable session factory, AI assistant and email notifier. The module-level
``app`` is what ``uvicorn app.main:app`` serves.
"""

import logging
import os
import subprocess
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from app import settings
from app.core.exceptions import AppError, StorageError, UpstreamProviderError
from app.db.config import build_engine, build_session_factory, init_db
from app.repositories.stats_repo import StatsRepository
from app.routers import (
    activities,
    admin,
    ai,
    auth,
    contact,
    courses,
    enrollments,
    health,
    lessons,
    sections,
    stats,
)
from app.services.ai_assistant import AIAssistant
from app.services.email_notifier import EmailNotifier
from app.utils.validation import PayloadValidationError, field_errors, summarize

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"
PROJECT_ROOT = os.path.join(os.path.dirname(__file__), "..")

DESCRIPTION = """
Cyber Iraq learning platform backend API

* **Courses**: courses, ordered sections and lessons
* **Learning**: enrollments, lesson progress and aggregate stats
* **Accounts**: session-cookie auth with user and administrator roles
* **Contact**: public contact form with administrator notification
* **AI**: content-assist helpers backed by an external text-generation provider
"""


def _error_body(request: Request, message: str, **extra) -> dict:
    body = {
        "success": False,
        "message": message,
        "error": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": str(request.url),
    }
    body.update(extra)
    return body


def _run_migrations() -> None:
    """Apply Alembic migrations in a subprocess (AUTO_MIGRATE)."""
    logger.info("AUTO_MIGRATE enabled: running 'alembic upgrade head'")
    try:
        result = subprocess.run(
            ["alembic", "upgrade", "head"],
            cwd=PROJECT_ROOT,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        logger.error("Alembic not found, ensure it's installed in the environment")
        return
    if result.returncode != 0:
        logger.error(
            "Alembic upgrade failed (code %s): %s\n%s",
            result.returncode,
            result.stdout,
            result.stderr,
        )
    else:
        logger.info("Alembic migration applied successfully")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        extra = {}
        if isinstance(exc, UpstreamProviderError) and exc.details:
            extra["details"] = exc.details
        if isinstance(exc, StorageError):
            logger.error("Storage failure during %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.message, **extra),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = field_errors(exc.errors())
        return JSONResponse(
            status_code=400,
            content=_error_body(
                request, summarize(errors), errors=[e.to_dict() for e in errors]
            ),
        )

    @app.exception_handler(PayloadValidationError)
    async def payload_validation_handler(request: Request, exc: PayloadValidationError):
        return JSONResponse(
            status_code=400,
            content=_error_body(
                request, str(exc), errors=[e.to_dict() for e in exc.errors]
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with consistent error format"""
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "Internal server error"),
        )


def create_app(
    session_factory=None,
    ai_assistant: Optional[AIAssistant] = None,
    notifier: Optional[EmailNotifier] = None,
) -> FastAPI:
    """Build the application.

    Args:
        session_factory: ``async_sessionmaker`` to use. When omitted an engine
            is built from ``DATABASE_URL`` and owned (created, initialised and
            disposed) by the app.
        ai_assistant: text-generation facade; defaults to an OpenAI-backed one.
        notifier: outbound email sender; defaults to SMTP settings.
    """
    engine = None
    if session_factory is None:
        engine = build_engine()
        session_factory = build_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME} v{settings.VERSION}")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"CORS Origins: {settings.CORS_ORIGINS}")
        if engine is not None:
            if settings.AUTO_MIGRATE:
                _run_migrations()
            else:
                await init_db(engine)
        async with session_factory() as session:
            await StatsRepository(session).ensure_row()
        yield
        logger.info(f"Shutting down {settings.APP_NAME}")
        if engine is not None:
            await engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description=DESCRIPTION,
        version=settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.session_factory = session_factory
    app.state.ai_assistant = ai_assistant or AIAssistant()
    app.state.notifier = notifier or EmailNotifier()

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET,
        session_cookie=settings.SESSION_COOKIE,
        max_age=settings.SESSION_MAX_AGE,
        same_site="lax",
        https_only=settings.is_production(),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router, prefix=API_PREFIX)
    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(courses.router, prefix=API_PREFIX)
    app.include_router(sections.router, prefix=API_PREFIX)
    app.include_router(lessons.router, prefix=API_PREFIX)
    app.include_router(enrollments.router, prefix=API_PREFIX)
    app.include_router(contact.router, prefix=API_PREFIX)
    app.include_router(admin.router, prefix=API_PREFIX)
    app.include_router(activities.router, prefix=API_PREFIX)
    app.include_router(stats.router, prefix=API_PREFIX)
    app.include_router(ai.router, prefix=API_PREFIX)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information"""
        return {
            "name": settings.APP_NAME,
            "version": settings.VERSION,
            "status": "running",
            "environment": settings.ENVIRONMENT,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "docs": "/docs",
            "health": f"{API_PREFIX}/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    host = os.getenv("HOST", "0.0.0.0")

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=True,
        log_level="info"
    )
