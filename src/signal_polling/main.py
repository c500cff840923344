#!/usr/bin/env python3
"""
EA Signal Poller - Main Entry Point
"""

import asyncio
import sys

import uvicorn

from .app import create_app
from .config import settings
from .utils.logging_config import init_logging


async def main():
    """Main application entry point"""
    # Initialize logging system first
    logger = init_logging()

    try:
        app = create_app()

        logger.info("🚀 EA signal poller starting",
                   port=settings.port,
                   environment=settings.environment,
                   signals_api_url=settings.signals_api_url,
                   remote_calls_enabled=settings.enable_remote_calls)

        logger.info("📡 Service endpoints available",
                   health_check=f"http://localhost:{settings.port}/health",
                   polling_status=f"http://localhost:{settings.port}/api/polling/status",
                   start_polling=f"http://localhost:{settings.port}/api/polling/start",
                   stop_polling=f"http://localhost:{settings.port}/api/polling/stop",
                   signals=f"http://localhost:{settings.port}/api/signals")

        logger.info("🔄 Polling configuration",
                   auto_start_polling=settings.auto_start_polling,
                   license_configured=bool(settings.license_key),
                   interval_seconds=settings.polling_interval_seconds,
                   max_consecutive_errors=settings.max_consecutive_errors,
                   error_cooldown_seconds=settings.error_cooldown_seconds)

        # uvicorn handles SIGINT/SIGTERM and runs the app lifespan shutdown
        config = uvicorn.Config(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            access_log=True,
            loop="asyncio"
        )
        server = uvicorn.Server(config)
        await server.serve()

    except KeyboardInterrupt:
        logger.info("🛑 Received keyboard interrupt, shutting down")
    except Exception as error:
        logger.critical("❌ Failed to start application", error=str(error))
        sys.exit(1)


def cli_main():
    """CLI entry point for setuptools"""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
