"""
FastAPI application factory and main app configuration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .adapters.db.mongo.database import init_database
from .api.errors import APIError, from_domain_error
from .api.routers import health, queue
from .api.deps import get_transition_orchestrator
from .api.utils.responses import fail
from .core.config import get_settings
from .core.exceptions import PersistenceError
from .core.structured_logger import configure_logging
from .domain.errors import DomainError
from .middleware.performance_middleware import PerformanceMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware


logger = logging.getLogger("clinicqueue")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"🚀 Starting {settings.app_name} v{settings.app_version} ({settings.app_env})")

    try:
        client = await init_database(settings.database)
    except Exception as e:
        logger.error(f"❌ Database connection failed: {type(e).__name__}: {e}", exc_info=True)
        raise

    try:
        yield
    finally:
        # Let in-flight notifications / activity logs finish before closing the client
        await get_transition_orchestrator().drain()
        client.close()
        logger.info("👋 Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    configure_logging(settings.logging)

    app = FastAPI(
        title="Clinic Queue Journey",
        description="Patient queue journey tracking for clinics",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(PerformanceMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(queue.router)

    @app.get("/")
    async def root():
        return {"service": settings.app_name, "version": settings.app_version, "status": "running"}

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        req_id = getattr(request.state, "request_id", None)
        logger.info(f"APIError: {exc.code} ({exc.http_status}) {exc.message} | request_id={req_id}")
        return JSONResponse(
            status_code=exc.http_status,
            content=fail(request, exc.code, exc.message, exc.details).model_dump(),
        )

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return await api_error_handler(request, from_domain_error(exc))

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"PersistenceError: {exc.message} | request_id={req_id}")
        return JSONResponse(
            status_code=503,
            content=fail(
                request, "PERSISTENCE_ERROR", "Queue store unavailable, nothing was changed"
            ).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        error_messages = []
        for error in exc.errors():
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            error_messages.append(f"{loc}: {error.get('msg', 'Validation error')}")
        return JSONResponse(
            status_code=422,
            content=fail(
                request,
                "INVALID_INPUT",
                f"Input validation failed: {'; '.join(error_messages)}",
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"Unhandled error: {type(exc).__name__} | request_id={req_id}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=fail(
                request,
                "INTERNAL_ERROR",
                "An unexpected error has occurred. Please try again later.",
            ).model_dump(),
        )

    return app


app = create_app()
