"""
Main FastAPI application entry point.

Uses Application Factory Pattern.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from huissier.config.settings import Settings, get_settings, override_settings
from huissier.di import initialize_container, shutdown_container
from huissier.di.container import DIContainer
from huissier.domain.exceptions import HuissierException, StoreFailure
from huissier.infrastructure.monitoring import get_logger, setup_logging
from huissier.presentation.api.middleware import (
    MetricsMiddleware,
    RequestIDMiddleware,
    huissier_exception_handler,
    validation_exception_handler,
)
from huissier.presentation.api.routes import auth, health


async def purge_nonces_periodically(container: DIContainer, interval: float) -> None:
    """
    Delete expired nonces every `interval` seconds until cancelled.

    A failed purge is logged and retried on the next tick.
    """
    logger = get_logger(__name__)
    logger.info(f"Nonce purge started (interval: {interval}s)")

    while True:
        await asyncio.sleep(interval)
        try:
            await container.purge_expired_nonces()
        except StoreFailure as e:
            logger.warning(f"Nonce purge failed: {e.details}")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory - creates and configures FastAPI app.

    Args:
        settings: Optional Settings instance (for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()
    else:
        override_settings(settings)

    # Structured logging (JSON only in production)
    json_logs = settings.ENV == "production"
    setup_logging(level=settings.LOG_LEVEL, json_logs=json_logs)
    logger = get_logger(__name__)

    logger.info(f"Creating Huissier application (ENV={settings.ENV})")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Huissier application...")
        container = await initialize_container()
        logger.info(
            f"Huissier started (identity backend: {settings.IDENTITY_BACKEND})"
        )

        purge_task = None
        if settings.NONCE_PURGE_INTERVAL_SECONDS > 0:
            purge_task = asyncio.create_task(
                purge_nonces_periodically(
                    container, settings.NONCE_PURGE_INTERVAL_SECONDS
                )
            )

        yield

        logger.info("Shutting down Huissier application...")
        if purge_task is not None:
            purge_task.cancel()
            try:
                await purge_task
            except asyncio.CancelledError:
                pass
        await shutdown_container()
        logger.info("Huissier application shutdown complete")

    app = FastAPI(
        title="Huissier API",
        description="Wallet-signature sign-in for Solana wallets",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    # Middleware chain (last added runs first)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(MetricsMiddleware)

    # CORS: explicit allow-list, also answers preflight
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    # Exception handlers
    app.add_exception_handler(HuissierException, huissier_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Routes
    app.include_router(health.router)
    app.include_router(auth.router, prefix="/api")

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint."""
        return {
            "service": "Huissier",
            "status": "running",
            "version": settings.APP_VERSION,
        }

    if settings.METRICS_ENABLED:

        @app.get("/metrics", tags=["Monitoring"])
        async def metrics():
            """Prometheus metrics endpoint."""
            return Response(
                content=generate_latest(),
                media_type=CONTENT_TYPE_LATEST,
            )

    logger.info("Huissier application created successfully")
    return app


def get_app() -> FastAPI:
    """
    Get or create application instance.

    For uvicorn: uvicorn huissier.main:get_app --factory
    """
    return create_app()


def main():
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "huissier.main:get_app",
        factory=True,
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD,
    )


if __name__ == "__main__":
    main()
