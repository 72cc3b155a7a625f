"""
API schemas.

Pydantic schemas for request/response serialization.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from workout_map.features.routes.models import Route, ViewportRegion
from workout_map.features.sync.state import SyncSnapshot


class ViewportSchema(BaseModel):
    """Map region (degrees)."""
    center_latitude: float = Field(..., ge=-90, le=90)
    center_longitude: float = Field(..., ge=-180, le=180)
    span_latitude_delta: float = Field(..., gt=0)
    span_longitude_delta: float = Field(..., gt=0)

    @classmethod
    def from_region(cls, region: ViewportRegion) -> "ViewportSchema":
        return cls(
            center_latitude=region.center_latitude,
            center_longitude=region.center_longitude,
            span_latitude_delta=region.span_latitude_delta,
            span_longitude_delta=region.span_longitude_delta,
        )

    def to_region(self) -> ViewportRegion:
        return ViewportRegion(
            center_latitude=self.center_latitude,
            center_longitude=self.center_longitude,
            span_latitude_delta=self.span_latitude_delta,
            span_longitude_delta=self.span_longitude_delta,
        )


class RouteSchema(BaseModel):
    """Route as drawn by the map."""
    id: str
    external_id: Optional[str] = None
    name: str
    distance_km: float
    formatted_distance: str
    start_time: datetime
    color: str
    color_gradient: List[str]
    coordinates: List[List[float]] = Field(..., description="[[lat, lon], ...]")

    @classmethod
    def from_route(cls, route: Route) -> "RouteSchema":
        return cls(
            id=route.id,
            external_id=route.external_id,
            name=route.name,
            distance_km=round(route.distance_km, 3),
            formatted_distance=route.formatted_distance,
            start_time=route.start_time,
            color=route.color.value,
            color_gradient=list(route.color.gradient),
            coordinates=[[lat, lon] for lat, lon in route.coordinates],
        )


class RoutesRegion(BaseModel):
    """Region fitting every route."""
    region: ViewportSchema
    route_count: int
    total_distance_km: float


class ProgressSchema(BaseModel):
    total: int
    loaded: int
    fraction_completed: float


class SyncStatusResponse(BaseModel):
    """Sync state snapshot."""
    state: str
    message: Optional[str] = None
    progress: Optional[ProgressSchema] = None
    route_count: int

    @classmethod
    def from_snapshot(cls, snapshot: SyncSnapshot) -> "SyncStatusResponse":
        progress = None
        if snapshot.progress is not None:
            progress = ProgressSchema(
                total=snapshot.progress.total,
                loaded=snapshot.progress.loaded,
                fraction_completed=snapshot.progress.fraction_completed,
            )
        return cls(
            state=snapshot.state.status.value,
            message=snapshot.state.message,
            progress=progress,
            route_count=len(snapshot.routes),
        )
