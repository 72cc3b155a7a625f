"""
Shared utilities (NOT business logic).

Usage:
    from workout_map.shared import haversine, estimate_distance_km
    from workout_map.shared.formatters import format_distance_km
"""
from .geo import (
    Coordinate,
    BoundingBox,
    haversine,
    estimate_distance_km,
    bounding_box,
    fit_region,
    box_intersects_region,
    EARTH_RADIUS_KM,
)
from .formatters import format_distance_km
from .constants import (
    ActivityKind,
    ACTIVITY_DISPLAY_NAMES,
    DEFAULT_ACTIVITY_NAME,
    activity_display_name,
    RouteColor,
    ROUTE_COLOR_PALETTE,
)

__all__ = [
    # geo
    "Coordinate",
    "BoundingBox",
    "haversine",
    "estimate_distance_km",
    "bounding_box",
    "fit_region",
    "box_intersects_region",
    "EARTH_RADIUS_KM",
    # formatters
    "format_distance_km",
    # constants
    "ActivityKind",
    "ACTIVITY_DISPLAY_NAMES",
    "DEFAULT_ACTIVITY_NAME",
    "activity_display_name",
    "RouteColor",
    "ROUTE_COLOR_PALETTE",
]
