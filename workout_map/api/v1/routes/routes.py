"""
Route Endpoints

- GET /routes - Route list, optionally limited to a map region
- GET /routes/region - Region fitting all routes
- GET /routes/export.gpx - GPX export of selected routes
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from workout_map.api.deps import get_sync_service
from workout_map.api.v1.schemas import RouteSchema, RoutesRegion, ViewportSchema
from workout_map.features.routes import (
    RouteExportError,
    ViewportRegion,
    routes_to_gpx,
    total_distance_km,
)
from workout_map.features.sync import RouteSyncService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[RouteSchema])
async def list_routes(
    center_latitude: Optional[float] = Query(default=None, ge=-90, le=90),
    center_longitude: Optional[float] = Query(default=None, ge=-180, le=180),
    span_latitude_delta: Optional[float] = Query(default=None, gt=0),
    span_longitude_delta: Optional[float] = Query(default=None, gt=0),
    service: RouteSyncService = Depends(get_sync_service),
):
    """
    List routes, most recent first.

    If all four region parameters are given, only routes whose bounds
    overlap that region are returned.
    """
    region_params = (center_latitude, center_longitude, span_latitude_delta, span_longitude_delta)

    if all(p is not None for p in region_params):
        routes = service.routes_in_region(ViewportRegion(*region_params))
    elif any(p is not None for p in region_params):
        raise HTTPException(
            status_code=422,
            detail="Region filter needs center_latitude, center_longitude, "
                   "span_latitude_delta and span_longitude_delta"
        )
    else:
        routes = service.routes

    return [RouteSchema.from_route(route) for route in routes]


@router.get("/region", response_model=RoutesRegion)
async def routes_region(service: RouteSyncService = Depends(get_sync_service)):
    """Region that shows every route."""
    region = service.routes_region()
    if region is None:
        raise HTTPException(status_code=404, detail="No routes")

    return RoutesRegion(
        region=ViewportSchema.from_region(region),
        route_count=len(service.routes),
        total_distance_km=round(total_distance_km(service.routes), 3),
    )


@router.get("/export.gpx")
async def export_gpx(
    ids: Optional[List[str]] = Query(default=None, description="Route ids (all if omitted)"),
    service: RouteSyncService = Depends(get_sync_service),
):
    """Download selected routes as a GPX file."""
    routes = service.routes
    if ids:
        wanted = set(ids)
        routes = tuple(route for route in routes if route.id in wanted)

    try:
        content = routes_to_gpx(routes)
    except RouteExportError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logger.info(f"Exported {len(routes)} routes to GPX")
    return Response(
        content=content,
        media_type="application/gpx+xml",
        headers={"Content-Disposition": 'attachment; filename="workout-routes.gpx"'},
    )
