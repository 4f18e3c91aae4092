"""
Main entrypoint for the Carpost API.

``create_app`` configures logging, mounts the API router under
``/api`` and registers the startup hook that applies database
migrations.  The module‑level ``app`` lets ASGI servers import it
directly::

    uvicorn carpost_api.app.main:app --reload
"""

from fastapi import FastAPI

from .api.router import router as api_router
from .core.config import settings
from .core.db import init_db
from .core.logging_config import setup_logging


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured application; the database is migrated when it
        starts serving.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.include_router(api_router, prefix="/api")

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db()

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
