"""
Route builder.

Turns one workout record plus its GPS samples into a Route.
"""

import logging
from typing import Iterable, Optional, Sequence

from workout_map.shared.constants import RouteColor, activity_display_name
from workout_map.shared.geo import Coordinate, estimate_distance_km
from workout_map.features.sources.base import WorkoutRecord

from .models import Route

logger = logging.getLogger(__name__)

# A route needs at least this many points to be drawn
MIN_ROUTE_POINTS = 2


class RouteBuilder:
    """Builds routes from source records."""

    @staticmethod
    def flatten(coordinate_batches: Iterable[Sequence[Coordinate]]) -> list[Coordinate]:
        """Join sample batches into one path, keeping batch then sample order."""
        coordinates: list[Coordinate] = []
        for batch in coordinate_batches:
            coordinates.extend(Coordinate(lat, lon) for lat, lon in batch)
        return coordinates

    @classmethod
    def build(
        cls,
        record: WorkoutRecord,
        coordinate_batches: Iterable[Sequence[Coordinate]],
        color: RouteColor
    ) -> Optional[Route]:
        """
        Build a route for a workout.

        Args:
            record: Source workout record
            coordinate_batches: Coordinates of each sample batch, in order
            color: Color assigned to the new route

        Returns:
            Route, or None if the workout has fewer than 2 points
        """
        coordinates = cls.flatten(coordinate_batches)

        if len(coordinates) < MIN_ROUTE_POINTS:
            logger.debug(
                f"Skipping workout {record.external_id}: "
                f"{len(coordinates)} coordinate(s)"
            )
            return None

        if record.distance_meters is not None:
            distance_km = max(record.distance_meters, 0.0) / 1000
        else:
            distance_km = estimate_distance_km(coordinates)

        return Route(
            name=activity_display_name(record.activity_kind),
            distance_km=distance_km,
            coordinates=tuple(coordinates),
            color=color,
            start_time=record.start_time,
            external_id=record.external_id,
        )
