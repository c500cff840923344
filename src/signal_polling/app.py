"""
FastAPI application factory

Creates the control API hosting the signal poller.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .routes import health_router, polling_router
from .services.signal_inbox import signal_inbox
from .services.signal_poller import signal_poller
from .utils.logging_config import get_logger, init_logging

logger = get_logger("signal_polling.app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    init_logging()
    logger.info("🚀 Starting EA signal poller service", environment=settings.environment)

    if settings.auto_start_polling and settings.license_key:
        signal_poller.start_polling(
            settings.license_key,
            on_signal_found=signal_inbox.on_signal_found,
            on_error=signal_inbox.on_error
        )
    else:
        logger.info("⏸️ Polling not started automatically - use POST /api/polling/start to start manually")

    yield

    logger.info("🛑 Shutting down EA signal poller service")
    await signal_poller.close()


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="EA Signal Poller",
        description="Polls trading signals for a license and exposes them over HTTP",
        version=__version__,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, tags=["Health"])
    app.include_router(polling_router, tags=["Signal Polling"])

    @app.get("/api")
    async def api_info():
        """API information endpoint"""
        return {
            "service": "EA Signal Poller",
            "version": __version__,
            "status": "running",
            "environment": settings.environment,
            "docs_url": "/docs",
            "redoc_url": "/redoc"
        }

    return app


# Create default app instance for uvicorn
app = create_app()
