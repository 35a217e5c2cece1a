"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from partsync.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from partsync.api.middleware.error_handler import setup_exception_handlers
from partsync.api.routes import (
    audit_router,
    health_router,
    inventory_router,
    mrp_router,
    orders_router,
    picking_router,
)
from partsync.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the database and opens the pool on startup; flushes pending
    webhook deliveries and closes the pool on shutdown.
    """
    settings = get_settings()
    configure_logging()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        environment=settings.environment,
        db_path=str(settings.storage.db_path),
    )

    try:
        from partsync.infrastructure.storage.sqlite import get_connection_pool
        from partsync.infrastructure.storage.sqlite.migrations import run_migrations

        results = await run_migrations()
        logger.info("database_initialized", applied=len(results))

        await get_connection_pool()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    from partsync.infrastructure.notifications import WebhookNotifier, get_notifier

    notifier = get_notifier()
    if isinstance(notifier, WebhookNotifier):
        await notifier.drain()

    try:
        from partsync.infrastructure.storage.sqlite import close_connection_pool

        await close_connection_pool()
        logger.info("connection_pool_closed")

    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title="PartSync API",
        description="Inventory ledger, MRP planning, purchasing, audits and picking",
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
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(mrp_router)
    app.include_router(orders_router)
    app.include_router(inventory_router)
    app.include_router(audit_router)
    app.include_router(picking_router)

    # Root health endpoint (for k8s/docker health checks)
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        return {"status": "healthy", "version": settings.app_version}

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "partsync.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
