"""
Route domain models.

Routes are immutable once built: a changed route replaces the old entry
in the collection, it is never edited in place.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from workout_map.shared.constants import RouteColor
from workout_map.shared.formatters import format_distance_km
from workout_map.shared.geo import (
    Coordinate,
    BoundingBox,
    bounding_box,
    box_intersects_region,
    fit_region,
)


def new_route_id() -> str:
    """Generate a fresh process-local route id."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ViewportRegion:
    """Map region given by its center and span (degrees)."""
    center_latitude: float
    center_longitude: float
    span_latitude_delta: float
    span_longitude_delta: float


@dataclass(frozen=True)
class Route:
    """A workout path ready to draw on the map."""
    name: str
    distance_km: float
    coordinates: tuple[Coordinate, ...]
    color: RouteColor
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    external_id: Optional[str] = None
    id: str = field(default_factory=new_route_id)

    def __post_init__(self):
        # Accept any sequence of pairs but always store an immutable tuple
        coords = tuple(Coordinate(float(lat), float(lon)) for lat, lon in self.coordinates)
        object.__setattr__(self, "coordinates", coords)
        # Start times are always aware UTC so routes from any source compare
        if self.start_time.tzinfo is None:
            object.__setattr__(self, "start_time", self.start_time.replace(tzinfo=timezone.utc))
        if self.distance_km < 0:
            raise ValueError(f"distance_km must be non-negative, got {self.distance_km}")

    @property
    def is_renderable(self) -> bool:
        return len(self.coordinates) >= 2

    @property
    def formatted_distance(self) -> str:
        return format_distance_km(self.distance_km)

    @property
    def bounds(self) -> Optional[BoundingBox]:
        return bounding_box(self.coordinates)

    def intersects(self, region: ViewportRegion) -> bool:
        """Check whether the route's bounding box overlaps a map region."""
        box = self.bounds
        if box is None:
            return False
        return box_intersects_region(
            box,
            region.center_latitude,
            region.center_longitude,
            region.span_latitude_delta,
            region.span_longitude_delta,
        )

    def region(self, padding_factor: float = 0.15, min_span: float = 0.005) -> Optional[ViewportRegion]:
        """Region that frames this route alone."""
        fitted = fit_region(self.coordinates, padding_factor, min_span)
        return ViewportRegion(*fitted) if fitted else None


@dataclass(frozen=True)
class CachedDocument:
    """The unit written to and read from the route cache."""
    routes: tuple[Route, ...] = ()
    viewport: Optional[ViewportRegion] = None

    def __post_init__(self):
        object.__setattr__(self, "routes", tuple(self.routes))

    @classmethod
    def empty(cls) -> "CachedDocument":
        return cls()


def combined_region(
    routes: Sequence[Route],
    padding_factor: float = 0.3,
    min_span: float = 0.01
) -> Optional[ViewportRegion]:
    """
    Region that fits every route with some visual padding.

    Returns:
        ViewportRegion, or None if there are no coordinates at all
    """
    fitted = fit_region(
        (coord for route in routes for coord in route.coordinates),
        padding_factor,
        min_span,
    )
    return ViewportRegion(*fitted) if fitted else None


def total_distance_km(routes: Sequence[Route]) -> float:
    """Sum of route distances."""
    return sum(route.distance_km for route in routes)
