"""
Route cache schemas.

Pydantic schemas for the on-disk JSON document. Field aliases keep the
camelCase layout of the cache file, including files written by older
versions (bare list of routes, no camera region).
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, TypeAdapter

from workout_map.shared.constants import RouteColor
from workout_map.shared.geo import Coordinate

from .models import CachedDocument, Route, ViewportRegion


class CoordinateDTO(BaseModel):
    """Single path point."""
    latitude: float
    longitude: float


class RouteCacheDTO(BaseModel):
    """Cached route."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    external_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("workoutIdentifier", "externalId"),
        serialization_alias="workoutIdentifier",
    )
    name: str
    distance_km: float = Field(
        validation_alias=AliasChoices("distanceInKilometers", "distance_km"),
        serialization_alias="distanceInKilometers",
        ge=0,
    )
    start_time: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("startDate", "start_time"),
        serialization_alias="startDate",
    )
    coordinates: List[CoordinateDTO]
    color: RouteColor

    @classmethod
    def from_route(cls, route: Route) -> "RouteCacheDTO":
        return cls(
            id=route.id,
            external_id=route.external_id,
            name=route.name,
            distance_km=route.distance_km,
            start_time=route.start_time,
            coordinates=[
                CoordinateDTO(latitude=c.latitude, longitude=c.longitude)
                for c in route.coordinates
            ],
            color=route.color,
        )

    def to_route(self) -> Route:
        return Route(
            id=self.id,
            external_id=self.external_id,
            name=self.name,
            distance_km=self.distance_km,
            # Older caches may lack a start date
            start_time=self.start_time or datetime.now(timezone.utc),
            coordinates=tuple(Coordinate(c.latitude, c.longitude) for c in self.coordinates),
            color=self.color,
        )


class CameraRegionDTO(BaseModel):
    """Cached map viewport."""
    model_config = ConfigDict(populate_by_name=True)

    center_latitude: float = Field(alias="centerLatitude")
    center_longitude: float = Field(alias="centerLongitude")
    span_latitude_delta: float = Field(alias="spanLatitudeDelta")
    span_longitude_delta: float = Field(alias="spanLongitudeDelta")

    @classmethod
    def from_region(cls, region: ViewportRegion) -> "CameraRegionDTO":
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


class RouteCacheDocumentDTO(BaseModel):
    """Current cache file layout."""
    model_config = ConfigDict(populate_by_name=True)

    routes: List[RouteCacheDTO]
    camera_region: Optional[CameraRegionDTO] = Field(default=None, alias="cameraRegion")

    @classmethod
    def from_document(cls, document: CachedDocument) -> "RouteCacheDocumentDTO":
        return cls(
            routes=[RouteCacheDTO.from_route(r) for r in document.routes],
            camera_region=(
                CameraRegionDTO.from_region(document.viewport)
                if document.viewport else None
            ),
        )

    def to_document(self) -> CachedDocument:
        return CachedDocument(
            routes=tuple(dto.to_route() for dto in self.routes),
            viewport=self.camera_region.to_region() if self.camera_region else None,
        )

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")


# Older versions wrote a bare JSON array of routes
LegacyRouteList = TypeAdapter(List[RouteCacheDTO])
