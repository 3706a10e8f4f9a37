"""
Main entrypoint for the Cloud Relay API.

This module assembles the FastAPI application: logging, exception
handlers and the versioned router.  ``create_app`` takes an optional
``Settings`` instance and an optional httpx transport for the provider
client, so tests can build an isolated application.  A default
instance is created at import time for uvicorn::

    uvicorn cloud_relay_api.app.main:app --reload
"""

from typing import Optional

import httpx
from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import Settings
from .core.db import get_database_path, init_db
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Read from the environment when omitted.
    transport : Optional[httpx.AsyncBaseTransport]
        Transport for outbound provider requests.  ``None`` uses the
        network.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or Settings.from_env()
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(
        title=settings.project_name, version=settings.api_version, debug=settings.debug
    )
    app.state.settings = settings
    app.state.database_path = get_database_path(settings)
    app.state.provider_transport = transport

    register_exception_handlers(app)
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and applies pending migrations.
        init_db(app.state.database_path)

    return app


app = create_app()
