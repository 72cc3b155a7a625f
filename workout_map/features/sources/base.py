"""
Workout source contract.

A workout source is whatever holds the user's workouts and their GPS
samples (a fitness API, a health data export, bundled demo data).
The sync service only talks to sources through this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from workout_map.shared.constants import ActivityKind
from workout_map.shared.geo import Coordinate


# =============================================================================
# Exceptions
# =============================================================================

class WorkoutSourceError(Exception):
    """Base workout source error."""
    pass


class SourceUnavailableError(WorkoutSourceError):
    """The data source cannot be used on this device/configuration."""

    def __init__(self, message: str = "Workout data isn't available on this device."):
        super().__init__(message)


class AuthorizationDeniedError(WorkoutSourceError):
    """User declined or revoked access to workouts."""

    def __init__(
        self,
        message: str = (
            "Workout access hasn't been granted. "
            "You can update this in your account settings."
        )
    ):
        super().__init__(message)


class TransientFetchError(WorkoutSourceError):
    """Any other failure while fetching workouts or samples."""
    pass


# =============================================================================
# Records
# =============================================================================

@dataclass(frozen=True)
class WorkoutRecord:
    """One workout as reported by the source."""
    external_id: str
    activity_kind: ActivityKind | str
    start_time: datetime
    distance_meters: Optional[float] = None


@dataclass(frozen=True)
class SampleBatch:
    """
    One chunk of GPS samples belonging to a workout.

    `payload` is source specific; only the source that produced the batch
    knows how to turn it into coordinates (see `read_coordinates`).
    """
    workout_id: str
    payload: Any = field(default=None, compare=False)


# =============================================================================
# Source Interface
# =============================================================================

class WorkoutSource(ABC):
    """Abstract workout source."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether this source can be used at all here."""
        ...

    @abstractmethod
    async def request_access(self) -> bool:
        """
        Ask for read access to workouts.

        Returns:
            True if access was granted, False if denied
        """
        ...

    @abstractmethod
    async def fetch_workouts(self, since: Optional[datetime] = None) -> list[WorkoutRecord]:
        """
        Fetch workouts, newest first.

        Args:
            since: Only workouts starting after this time (None = all)
        """
        ...

    @abstractmethod
    async def fetch_route_samples(self, record: WorkoutRecord) -> list[SampleBatch]:
        """Fetch the GPS sample batches of one workout (may be empty)."""
        ...

    @abstractmethod
    async def read_coordinates(self, batch: SampleBatch) -> list[Coordinate]:
        """Read the ordered coordinates of one sample batch."""
        ...
