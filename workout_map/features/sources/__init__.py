"""
Workout sources.

Usage:
    from workout_map.features.sources import StravaWorkoutSource, DemoWorkoutSource

Components:
- WorkoutSource: abstract source contract
- StravaWorkoutSource: Strava API (httpx)
- DemoWorkoutSource: bundled sample workouts
"""

from .base import (
    WorkoutSource,
    WorkoutRecord,
    SampleBatch,
    WorkoutSourceError,
    SourceUnavailableError,
    AuthorizationDeniedError,
    TransientFetchError,
)
from .demo import DemoWorkoutSource
from .strava import StravaWorkoutSource, STRAVA_TO_ACTIVITY_KIND
from .factory import create_workout_source

__all__ = [
    # Contract
    "WorkoutSource",
    "WorkoutRecord",
    "SampleBatch",
    # Errors
    "WorkoutSourceError",
    "SourceUnavailableError",
    "AuthorizationDeniedError",
    "TransientFetchError",
    # Sources
    "DemoWorkoutSource",
    "StravaWorkoutSource",
    "STRAVA_TO_ACTIVITY_KIND",
    "create_workout_source",
]
