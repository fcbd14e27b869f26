"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import get_settings
from shared.database import init_db, reset_engine
from shared.exceptions import AuthenticationError, PlpgError, RateLimitError
from shared.validation import field_errors_from

from .middleware.rate_limit import general_rate_limit
from .models.errors import ErrorResponse, ValidationErrorResponse
from .routes import health
from modules.auth.routes import router as auth_router
from modules.onboarding.routes import router as onboarding_router
from modules.password_reset.routes import router as password_reset_router
from modules.users.routes import router as users_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure the root logger once for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    logger.info("Starting %s on %s:%s (%s)", settings.app_name, settings.host, settings.port, settings.environment)
    if not settings.is_production:
        await init_db()
    yield
    # Shutdown
    logger.info("Shutting down %s", settings.app_name)
    await reset_engine()


def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy onto status codes and one JSON shape."""
    settings = get_settings()

    @app.exception_handler(PlpgError)
    async def plpg_error_handler(request: Request, exc: PlpgError) -> JSONResponse:
        headers = {}
        if isinstance(exc, AuthenticationError):
            headers["WWW-Authenticate"] = "Bearer"
        if isinstance(exc, RateLimitError):
            headers["Retry-After"] = str(exc.retry_after)
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(**exc.to_dict()).model_dump(),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = field_errors_from(exc.errors())
        content = ValidationErrorResponse(
            message=next(iter(errors.values()), "Validation failed"),
            details=errors,
        )
        return JSONResponse(status_code=400, content=content.model_dump())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = "An unexpected error occurred" if settings.is_production else str(exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="INTERNAL_ERROR", message=message).model_dump(),
        )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Raises if the environment is misconfigured (e.g. missing JWT secrets).

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Personalized Learning Path Generator API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs" if settings.debug else None,
        redoc_url=f"{settings.api_prefix}/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Register routes
    prefix = settings.api_prefix
    limited = [Depends(general_rate_limit)]
    app.include_router(health.router, prefix=prefix, tags=["health"])
    app.include_router(auth_router, prefix=f"{prefix}/auth", tags=["auth"], dependencies=limited)
    app.include_router(password_reset_router, prefix=f"{prefix}/auth", tags=["auth"], dependencies=limited)
    app.include_router(users_router, prefix=f"{prefix}/users", tags=["users"], dependencies=limited)
    app.include_router(onboarding_router, prefix=f"{prefix}/onboarding", tags=["onboarding"], dependencies=limited)

    return app


# Application instance for uvicorn
app = create_app()
