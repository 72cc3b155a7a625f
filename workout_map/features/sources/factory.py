"""
Workout source selection.
"""

import logging

from workout_map.config import Settings

from .base import WorkoutSource
from .demo import DemoWorkoutSource
from .strava import StravaWorkoutSource

logger = logging.getLogger(__name__)


def create_workout_source(settings: Settings) -> WorkoutSource:
    """Build the workout source named in settings."""
    if settings.workout_source == "strava":
        if not settings.strava_access_token:
            logger.warning("Strava source selected but no access token configured")
        return StravaWorkoutSource(
            access_token=settings.strava_access_token,
            api_url=settings.strava_api_url,
            page_size=settings.strava_page_size,
            max_pages=settings.strava_max_pages,
        )

    logger.info("Using demo workout source")
    return DemoWorkoutSource()
