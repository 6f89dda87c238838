"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from src.api.middleware.error_handler import setup_exception_handlers
from src.api.routes import (
    auth_router,
    clients_router,
    dashboard_router,
    health_router,
    invoices_router,
    profile_router,
    quotations_router,
)
from src.config import Settings, configure_logging, get_logger, get_settings
from src.infrastructure.identity import SupabaseIdentityProvider
from src.infrastructure.pdf import Fpdf2DocumentRenderer
from src.infrastructure.storage.sqlite import ConnectionPool, SQLiteKeyValueStore
from src.infrastructure.storage.sqlite.migrations.migrator import run_migrations

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Builds the shared resources once (database pool, identity client,
    PDF renderer), keeps them on ``app.state`` and releases them on shutdown.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        base_path=settings.api.base_path,
        debug=settings.api.debug,
    )

    if not settings.identity.anon_key or not settings.identity.service_role_key:
        logger.warning("identity_keys_missing", url=settings.identity.url)

    try:
        await run_migrations(settings.storage.db_path)
        logger.info("database_initialized")

        pool = ConnectionPool.from_settings(settings.storage)
        await pool.initialize()
        logger.info("connection_pool_ready")
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    app.state.pool = pool
    app.state.kv_store = SQLiteKeyValueStore(pool)
    app.state.identity = SupabaseIdentityProvider(settings.identity)
    app.state.pdf_renderer = Fpdf2DocumentRenderer(settings.pdf)

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    await app.state.identity.close()
    await pool.close()

    logger.info("application_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Offertes en facturen: quotations, invoices, clients and PDF export",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials="*" not in settings.api.cors_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
            expose_headers=["Content-Length", "Content-Disposition", "X-Request-ID"],
            max_age=600,
        )

    setup_exception_handlers(app)

    # Register routers under the base path
    prefix = settings.api.base_path
    for router in (
        health_router,
        auth_router,
        profile_router,
        clients_router,
        quotations_router,
        invoices_router,
        dashboard_router,
    ):
        app.include_router(router, prefix=prefix)

    return app


# Create app instance
app = create_app()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )


if __name__ == "__main__":
    run()
