"""Jobly API service.

Companies, job postings and user applications backed by PostgreSQL.
"""

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobly.api.routes.auth import router as auth_router
from jobly.api.routes.companies import router as companies_router
from jobly.api.routes.health import router as health_router
from jobly.api.routes.jobs import router as jobs_router
from jobly.api.routes.users import router as users_router
from jobly.core.config import AppEnvironment, get_settings
from jobly.core.database import get_engine, get_session_factory, reset_engine
from jobly.core.errors import JoblyError, get_status_code
from jobly.core.logging import setup_logging

logger = structlog.get_logger(__name__)


def _request_log_context(request: Request) -> dict[str, str]:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": getattr(request.state, "request_id", ""),
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan context manager."""
    settings = get_settings()
    setup_logging()

    logger.info(
        "Starting Jobly",
        app=settings.app.name,
        env=settings.app.env.value,
        version=settings.app.version,
    )

    app.state.settings = settings
    app.state.engine = get_engine()
    app.state.session_factory = get_session_factory()

    yield

    await reset_engine()

    logger.info("Jobly stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    api_prefix = settings.app.api_prefix
    show_docs = settings.app.env != AppEnvironment.PROD

    app = FastAPI(
        title="Jobly",
        description="Companies, jobs and applications.",
        version=settings.app.version,
        lifespan=lifespan,
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_allowed_origins,
        allow_credentials=settings.security.cors_allow_credentials,
        allow_methods=settings.security.cors_allow_methods,
        allow_headers=settings.security.cors_allow_headers,
    )

    app.include_router(health_router, prefix=api_prefix)
    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(companies_router, prefix=api_prefix)
    app.include_router(jobs_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Propagate X-Request-ID (or generate one) and bind it to log context."""
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(JoblyError)
    async def domain_error_handler(request: Request, exc: JoblyError) -> JSONResponse:
        """Handle domain-specific errors."""
        status_code = get_status_code(exc)
        logger.warning(
            "Domain exception",
            **_request_log_context(request),
            status_code=status_code,
            error=exc.message,
            error_details=exc.details or {},
        )
        return JSONResponse(
            status_code=status_code,
            content={
                "detail": exc.message,
                **({"errors": exc.details} if exc.details else {}),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed bodies and query strings as 400 with one message per problem."""
        errors = [
            f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}" for e in exc.errors()
        ]
        logger.info("Request validation failed", **_request_log_context(request), errors=errors)
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid request", "errors": errors},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "Unhandled exception",
            **_request_log_context(request),
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


def run() -> None:
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "jobly.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.env == AppEnvironment.LOCAL,
        workers=1 if settings.app.env == AppEnvironment.LOCAL else settings.server.workers,
        log_level=settings.app.log_level.lower(),
    )


if __name__ == "__main__":
    run()
