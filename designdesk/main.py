"""Main FastAPI application entry point"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from designdesk import __version__
from designdesk.api.errors import register_exception_handlers
from designdesk.api.health import router as health_router
from designdesk.api.projects import router as projects_router
from designdesk.config import Settings, get_settings
from designdesk.storage import StorageAdapter, create_storage

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, storage: Optional[StorageAdapter] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Application settings (defaults to the environment)
        storage: Storage facade to serve; built from settings at startup when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "storage", None) is None:
            app.state.storage = create_storage(settings)
        yield

    app = FastAPI(
        title="DesignDesk API",
        description="Project, room, task and site-log storage for interior-design studios",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.storage = storage

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=3600,
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(projects_router)

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": "DesignDesk API",
            "version": __version__,
            "status": "running",
        }

    return app


app = create_app()
