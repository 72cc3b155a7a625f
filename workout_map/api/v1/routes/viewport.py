"""
Viewport Endpoints

- GET /viewport - Viewport the map should open with
- PUT /viewport - Record the current map viewport
"""

from fastapi import APIRouter, Depends, HTTPException

from workout_map.api.deps import get_sync_service
from workout_map.api.v1.schemas import ViewportSchema
from workout_map.features.sync import RouteSyncService

router = APIRouter()


@router.get("", response_model=ViewportSchema)
async def get_viewport(service: RouteSyncService = Depends(get_sync_service)):
    """Last recorded viewport, else a region around the latest route."""
    region = service.suggested_viewport()
    if region is None:
        raise HTTPException(status_code=404, detail="No viewport yet")
    return ViewportSchema.from_region(region)


@router.put("", response_model=ViewportSchema, status_code=202)
async def record_viewport(
    viewport: ViewportSchema,
    service: RouteSyncService = Depends(get_sync_service),
):
    """Remember the viewport; it is written to the cache after a short delay."""
    service.record_viewport(viewport.to_region())
    return viewport
