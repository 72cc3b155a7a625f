"""
Routes module.

Usage:
    from workout_map.features.routes import Route, RouteBuilder, color_for_index

Components:
- Route, ViewportRegion, CachedDocument: domain models
- RouteBuilder: workout record + samples -> Route
- color_for_index: palette color assignment
- routes_to_gpx: GPX export
"""

from .models import (
    Route,
    ViewportRegion,
    CachedDocument,
    combined_region,
    total_distance_km,
)
from .builder import RouteBuilder, MIN_ROUTE_POINTS
from .colors import color_for_index
from .export import routes_to_gpx, RouteExportError

__all__ = [
    # Models
    "Route",
    "ViewportRegion",
    "CachedDocument",
    "combined_region",
    "total_distance_km",
    # Builder
    "RouteBuilder",
    "MIN_ROUTE_POINTS",
    "color_for_index",
    # Export
    "routes_to_gpx",
    "RouteExportError",
]
