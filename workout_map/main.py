"""
Workout Map API

FastAPI application serving synced workout routes to the map UI.
"""

from contextlib import asynccontextmanager
import asyncio
import logging
import sys
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workout_map import __version__
from workout_map.config import settings
from workout_map.api.v1.router import api_router
from workout_map.features.sync import RouteSyncService, create_sync_service


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


def create_app(
    sync_service: Optional[RouteSyncService] = None,
    refresh_on_startup: Optional[bool] = None
) -> FastAPI:
    """
    Build the application.

    Args:
        sync_service: Service to serve (built from settings at startup if None)
        refresh_on_startup: Start a first refresh on startup (settings default)
    """

    if refresh_on_startup is None:
        refresh_on_startup = settings.refresh_on_startup

    # === Lifespan ===
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        # Startup
        logger.info("Starting Workout Map API...")
        service = sync_service or create_sync_service(settings)
        app.state.sync_service = service

        # Cached routes are served right away; the first refresh runs behind them
        refresh_task = None
        if refresh_on_startup:
            refresh_task = asyncio.create_task(service.refresh_if_needed())
            logger.info("Initial workout refresh started")

        yield

        # Shutdown
        if refresh_task is not None and not refresh_task.done():
            refresh_task.cancel()
        await service.close()
        logger.info("Shutting down...")

    # === App Creation ===
    app = FastAPI(
        title="Workout Map API",
        description="Workout route sync, cache and map viewport",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # === Middleware ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === Routes ===
    app.include_router(api_router, prefix="/api/v1")

    # === Health Check ===
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()
