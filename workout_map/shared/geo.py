"""
Geographic utility functions.

This is the SINGLE SOURCE OF TRUTH for geographic calculations.
DO NOT duplicate these functions elsewhere.
"""
import math
from typing import Iterable, NamedTuple, Optional, Sequence

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


class Coordinate(NamedTuple):
    """A single (latitude, longitude) point in degrees."""
    latitude: float
    longitude: float


class BoundingBox(NamedTuple):
    """Axis-aligned lat/lon bounds of a set of coordinates."""
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float


def haversine(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def estimate_distance_km(coordinates: Sequence[Coordinate]) -> float:
    """
    Estimate path length by summing great-circle legs.

    Used only when the source does not report a distance.

    Args:
        coordinates: Ordered path points

    Returns:
        Total distance in kilometers (0 for fewer than 2 points)
    """
    total = 0.0

    for i in range(1, len(coordinates)):
        lat1, lon1 = coordinates[i - 1]
        lat2, lon2 = coordinates[i]
        total += haversine(lat1, lon1, lat2, lon2)

    return total


def bounding_box(coordinates: Iterable[Coordinate]) -> Optional[BoundingBox]:
    """Get the bounds of a set of points, or None if there are none."""
    box = None
    for lat, lon in coordinates:
        if box is None:
            box = [lat, lat, lon, lon]
            continue
        box[0] = min(box[0], lat)
        box[1] = max(box[1], lat)
        box[2] = min(box[2], lon)
        box[3] = max(box[3], lon)

    if box is None:
        return None
    return BoundingBox(*box)


def fit_region(
    coordinates: Iterable[Coordinate],
    padding_factor: float,
    min_span: float
) -> Optional[tuple[float, float, float, float]]:
    """
    Compute a center/span region that shows all given points.

    Args:
        coordinates: Points to fit
        padding_factor: Extra span added around the bounds (0.3 = +30%)
        min_span: Smallest allowed span in degrees

    Returns:
        (center_lat, center_lon, span_lat, span_lon) or None if no points
    """
    box = bounding_box(coordinates)
    if box is None:
        return None

    span_lat = max((box.max_latitude - box.min_latitude) * (1 + padding_factor), min_span)
    span_lon = max((box.max_longitude - box.min_longitude) * (1 + padding_factor), min_span)

    return (
        (box.min_latitude + box.max_latitude) / 2,
        (box.min_longitude + box.max_longitude) / 2,
        span_lat,
        span_lon,
    )


def box_intersects_region(
    box: BoundingBox,
    center_lat: float,
    center_lon: float,
    span_lat: float,
    span_lon: float
) -> bool:
    """Check whether bounds overlap a center/span region (edges count)."""
    region_min_lat = center_lat - span_lat / 2
    region_max_lat = center_lat + span_lat / 2
    region_min_lon = center_lon - span_lon / 2
    region_max_lon = center_lon + span_lon / 2

    lat_overlap = not (box.max_latitude < region_min_lat or box.min_latitude > region_max_lat)
    lon_overlap = not (box.max_longitude < region_min_lon or box.min_longitude > region_max_lon)

    return lat_overlap and lon_overlap
