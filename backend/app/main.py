"""
FastAPI Application Entry Point.

This is the main application file for the Unit Tracking API.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from backend.app.core.config import Settings, settings
from backend.app.api.v1.router import router as api_v1_router
from backend.app.core.dependencies import build_stores
from backend.app.core.observability import ObservabilityMiddleware, configure_logging, logger
from backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)


def create_app(app_settings: Settings = settings, engine=None, session_factory=None) -> FastAPI:
    """
    Build the application and its store handles.

    Args:
        app_settings: Settings to run with
        engine: Async engine for the database backend (defaults to the session module's)
        session_factory: Session factory for the database backend
    """
    use_database = app_settings.storage_backend.lower() == "database"
    if use_database and (engine is None or session_factory is None):
        from backend.app.db.session import engine as default_engine, AsyncSessionLocal
        engine = engine or default_engine
        session_factory = session_factory or AsyncSessionLocal

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for application startup/shutdown.

        1. Configures logging.
        2. Creates database tables when the database backend is active.
        """
        configure_logging("DEBUG" if app_settings.debug else app_settings.log_level)
        if use_database:
            from backend.app.db.session import Base
            # Import models to ensure they are registered with Base
            from backend.app.models.checkpoint import CheckpointRecord  # noqa: F401
            from backend.app.models.unit import UnitRecord  # noqa: F401
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("Started %s with %s storage", app_settings.app_name, app_settings.storage_backend)
        yield
        if use_database:
            await engine.dispose()

    # Initialize FastAPI application
    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.api_version,
        description="Tracks units through status checkpoints",
        lifespan=lifespan,
    )

    # Store handles live for the application's lifetime
    app.state.settings = app_settings
    app.state.stores = build_stores(app_settings, session_factory)

    app.add_middleware(ObservabilityMiddleware)

    # Register global exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint.

        Returns:
            dict: Status and application information
        """
        return {
            "status": "healthy",
            "app_name": app_settings.app_name,
            "version": app_settings.api_version,
            "storage_backend": app_settings.storage_backend,
        }

    # Include API v1 router
    app.include_router(api_v1_router, prefix=f"/{app_settings.api_version}")

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint.

        Returns:
            dict: Welcome message and API documentation links
        """
        return {
            "message": "Welcome to the Unit Tracking API",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
