"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from workout_map.api.v1.routes import routes, sync, viewport

api_router = APIRouter()

api_router.include_router(routes.router, prefix="/routes", tags=["Routes"])
api_router.include_router(sync.router, prefix="/sync", tags=["Sync"])
api_router.include_router(viewport.router, prefix="/viewport", tags=["Viewport"])
