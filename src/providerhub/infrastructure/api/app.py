"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
and lifecycle handlers.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from providerhub.application.services.configuration_store import KeyedLocks
from providerhub.application.services.connectivity_tester import ConnectivityTestExecutor
from providerhub.application.services.status_aggregator import register_cache_invalidation
from providerhub.core.config import Settings, get_settings
from providerhub.core.configuration.exceptions import (
    AggregationError,
    ConflictError,
    NotFoundError,
    NotVerifiedError,
    ProviderNotFoundError,
    TestFailedError,
    ValidationError,
)
from providerhub.core.hooks import HookRegistry
from providerhub.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)
from providerhub.domain.services.secret_redactor import SecretRedactor
from providerhub.domain.services.status_cache import StatusCache
from providerhub.infrastructure.configuration.providers import (
    build_default_probes,
    build_default_registry,
)
from providerhub.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)
from providerhub.infrastructure.security.encryption import EncryptionService

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control is yielded to the application during its lifetime.
    """
    settings = app.state.settings
    registry = app.state.provider_registry

    configure_logging(settings)

    logger.info(
        "Starting ProviderHub",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        providers=sum(len(registry.list_providers(f)) for f in registry.list_families()),
    )

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Shutting down ProviderHub")
    await close_database()
    logger.info("Database connection closed")


def init_services(app: FastAPI, settings: Settings) -> None:
    """Build the process-wide services and store them on app.state.

    Args:
        app: FastAPI application instance.
        settings: Application settings.
    """
    registry = build_default_registry()
    hook_registry = HookRegistry()
    status_cache = StatusCache(
        ttl_seconds=settings.status_cache_ttl_seconds,
        ttl_for_family=settings.status_cache_ttl_for,
    )
    register_cache_invalidation(hook_registry, status_cache)

    app.state.settings = settings
    app.state.provider_registry = registry
    app.state.hook_registry = hook_registry
    app.state.status_cache = status_cache
    app.state.configuration_locks = KeyedLocks()
    app.state.encryption_service = EncryptionService(settings.encryption_key)
    app.state.secret_redactor = SecretRedactor(visible_chars=settings.mask_visible_chars)
    app.state.connectivity_executor = ConnectivityTestExecutor(
        registry=registry,
        probes=build_default_probes(),
        timeout_seconds=settings.connection_test_timeout_seconds,
    )
    logger.info("Provider services initialized")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override; defaults to get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Provider configuration service",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    init_services(app, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_health_check(app)
    register_routes(app, settings)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints.

    Args:
        app: FastAPI application instance.
    """

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint.

        Returns 200 if the service is running. Does not check
        database connectivity or other dependencies.
        """
        return {
            "status": "healthy",
            "service": "ProviderHub",
            "version": app.state.settings.app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check endpoint, including database connectivity."""
        db = get_db_manager()
        db_healthy = await db.check_connection()

        if db_healthy:
            return {
                "status": "ready",
                "service": "ProviderHub",
                "version": app.state.settings.app_version,
                "database": "connected",
            }
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "service": "ProviderHub",
                "database": "disconnected",
            },
        )

    @app.get("/live", tags=["health"])
    async def liveness_check():
        """Liveness check endpoint."""
        return {
            "status": "alive",
            "service": "ProviderHub",
            "version": app.state.settings.app_version,
        }


def register_routes(app: FastAPI, settings: Settings) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
        settings: Application settings.
    """
    from providerhub.infrastructure.api.routes import providers_router

    app.include_router(
        providers_router, prefix=f"{settings.api_prefix}/providers", tags=["providers"]
    )

    @app.get(settings.api_prefix, tags=["root"])
    async def api_root():
        """API root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "api_version": "v1",
        }


def _error(status_code: int, error: str, detail: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": detail, **extra},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map configuration errors to HTTP responses.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return _error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Validation error",
            exc.message,
            missing_fields=exc.missing_fields,
            field_errors=exc.field_errors,
        )

    @app.exception_handler(ProviderNotFoundError)
    async def provider_not_found_handler(request: Request, exc: ProviderNotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, "Unknown provider", exc.message)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, "Not found", exc.message)

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return _error(status.HTTP_409_CONFLICT, "Conflict", exc.message)

    @app.exception_handler(TestFailedError)
    async def test_failed_handler(request: Request, exc: TestFailedError):
        return _error(status.HTTP_400_BAD_REQUEST, "Connection test failed", exc.detail)

    @app.exception_handler(NotVerifiedError)
    async def not_verified_handler(request: Request, exc: NotVerifiedError):
        return _error(
            status.HTTP_400_BAD_REQUEST,
            "Not verified",
            exc.message,
            current_state=exc.current_state,
        )

    @app.exception_handler(AggregationError)
    async def aggregation_error_handler(request: Request, exc: AggregationError):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Status unavailable", exc.message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            str(exc) if app.state.settings.debug else "An unexpected error occurred",
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    Args:
        app: FastAPI application instance.
    """

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log every request and propagate the correlation ID."""
        correlation_id = request.headers.get("X-Correlation-ID", f"cid_{uuid.uuid4().hex[:12]}")
        bind_correlation_id(correlation_id)

        logger.info(
            "Request started",
            method=request.method,
            path=str(request.url.path),
        )

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()
