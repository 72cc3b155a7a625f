"""
GPX export of routes.

Each route becomes one GPX track with a single segment, named after the
route and its start time.
"""

import logging
from typing import Sequence

import gpxpy
import gpxpy.gpx

from .models import Route

logger = logging.getLogger(__name__)


class RouteExportError(Exception):
    """Raised when there is nothing to export."""
    pass


def routes_to_gpx(routes: Sequence[Route], creator: str = "workout-map") -> str:
    """
    Serialize routes as a GPX 1.1 document.

    Args:
        routes: Routes to export, in output order
        creator: GPX creator attribute

    Returns:
        GPX XML string

    Raises:
        RouteExportError: If no route has coordinates
    """
    exportable = [route for route in routes if route.is_renderable]
    if not exportable:
        raise RouteExportError("No routes available to export.")

    gpx = gpxpy.gpx.GPX()
    gpx.creator = creator

    for route in exportable:
        track = gpxpy.gpx.GPXTrack(name=route.name)
        track.description = (
            f"{route.formatted_distance}, {route.start_time:%Y-%m-%d %H:%M}"
        )
        track.source = route.external_id
        gpx.tracks.append(track)

        segment = gpxpy.gpx.GPXTrackSegment()
        track.segments.append(segment)
        for lat, lon in route.coordinates:
            segment.points.append(gpxpy.gpx.GPXTrackPoint(lat, lon))

    logger.debug(f"Exported {len(exportable)} routes to GPX")
    return gpx.to_xml(version="1.1")
