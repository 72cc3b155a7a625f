"""
Demo workout source.

Serves a few bundled workouts so the map has something to show without
any account connected.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from workout_map.shared.constants import ActivityKind
from workout_map.shared.geo import Coordinate

from .base import SampleBatch, WorkoutRecord, WorkoutSource


def _sample_workouts(now: datetime) -> list[tuple[WorkoutRecord, list[list[Coordinate]]]]:
    """Sample workouts with their sample batches, newest first."""
    return [
        (
            WorkoutRecord(
                external_id="demo-neighborhood-tempo",
                activity_kind=ActivityKind.RUNNING,
                start_time=now - timedelta(days=3),
                distance_meters=5400.0,
            ),
            [
                [
                    Coordinate(37.3349, -122.0090),
                    Coordinate(37.3300, -122.0250),
                    Coordinate(37.3245, -122.0331),
                ],
                [
                    Coordinate(37.3188, -122.0294),
                    Coordinate(37.3229, -122.0159),
                    Coordinate(37.3304, -122.0084),
                ],
            ],
        ),
        (
            WorkoutRecord(
                external_id="demo-trail-climb",
                activity_kind=ActivityKind.HIKING,
                start_time=now - timedelta(days=6),
                distance_meters=7800.0,
            ),
            [
                [
                    Coordinate(37.3700, -122.0860),
                    Coordinate(37.3644, -122.0770),
                    Coordinate(37.3582, -122.0791),
                    Coordinate(37.3520, -122.0901),
                    Coordinate(37.3460, -122.1015),
                    Coordinate(37.3508, -122.1110),
                    Coordinate(37.3590, -122.1032),
                ],
            ],
        ),
        (
            WorkoutRecord(
                external_id="demo-recovery-spin",
                activity_kind=ActivityKind.CYCLING,
                start_time=now - timedelta(days=10),
                # No distance reported: estimated from the path
                distance_meters=None,
            ),
            [
                [
                    Coordinate(37.7926, -122.4040),
                    Coordinate(37.7869, -122.4194),
                    Coordinate(37.7817, -122.4321),
                    Coordinate(37.7709, -122.4370),
                ],
                [
                    Coordinate(37.7623, -122.4282),
                    Coordinate(37.7687, -122.4150),
                    Coordinate(37.7776, -122.4057),
                    Coordinate(37.7852, -122.4019),
                ],
            ],
        ),
    ]


class DemoWorkoutSource(WorkoutSource):
    """Always available, always granted, three sample workouts."""

    def __init__(self, now: Optional[datetime] = None):
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        self._workouts = _sample_workouts(now)

    def is_available(self) -> bool:
        return True

    async def request_access(self) -> bool:
        return True

    async def fetch_workouts(self, since: Optional[datetime] = None) -> list[WorkoutRecord]:
        if since is not None and since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        return [
            record for record, _ in self._workouts
            if since is None or record.start_time > since
        ]

    async def fetch_route_samples(self, record: WorkoutRecord) -> list[SampleBatch]:
        for known, batches in self._workouts:
            if known.external_id == record.external_id:
                return [
                    SampleBatch(workout_id=known.external_id, payload=tuple(batch))
                    for batch in batches
                ]
        return []

    async def read_coordinates(self, batch: SampleBatch) -> list[Coordinate]:
        return list(batch.payload)
