"""Entry point for the Cloud Relay API.

Serves the FastAPI application with Uvicorn.  Host, port and log level
come from the same environment variables the application reads
(``HOST``, ``PORT``, ``LOG_LEVEL``); see ``cloud_relay_api/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from cloud_relay_api.app.core.config import Settings
from cloud_relay_api.app.main import create_app


async def run_api(settings: Settings) -> None:
    """Start the relay using Uvicorn."""
    config = Config(
        app=create_app(settings),
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


async def main() -> None:
    settings = Settings.from_env()
    try:
        await run_api(settings)
    except Exception:
        logging.getLogger(__name__).exception("Relay server stopped with an error")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
