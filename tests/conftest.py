"""
Shared test fixtures.

Fakes for the workout source and the byte store, plus helpers for
building records and coordinate paths.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from workout_map.features.cache import ByteStore, RouteCacheStore
from workout_map.features.sources import (
    SampleBatch,
    WorkoutRecord,
    WorkoutSource,
)
from workout_map.shared.constants import ActivityKind
from workout_map.shared.geo import Coordinate


BASE_TIME = datetime(2025, 11, 1, 7, 30, tzinfo=timezone.utc)


# =============================================================================
# Helpers
# =============================================================================

def make_path(n: int, start_lat: float = 43.23, start_lon: float = 76.94) -> list[Coordinate]:
    """Straight path of n points heading north-east."""
    return [Coordinate(start_lat + i * 0.001, start_lon + i * 0.001) for i in range(n)]


def make_record(
    external_id: str,
    days_ago: int = 0,
    kind: ActivityKind | str = ActivityKind.RUNNING,
    distance_meters: Optional[float] = 5000.0
) -> WorkoutRecord:
    return WorkoutRecord(
        external_id=external_id,
        activity_kind=kind,
        start_time=BASE_TIME - timedelta(days=days_ago),
        distance_meters=distance_meters,
    )


# =============================================================================
# Fakes
# =============================================================================

class FakeWorkoutSource(WorkoutSource):
    """
    In-memory workout source.

    `workouts` holds (record, [batch coordinates, ...]) pairs in the order
    fetch_workouts returns them.
    """

    def __init__(self, workouts=None, available: bool = True, grant: bool = True):
        self.workouts = list(workouts or [])
        self.available = available
        self.grant = grant
        self.fetch_error: Optional[Exception] = None
        self.sample_errors: dict[str, Exception] = {}
        self.fetch_delay = 0.0
        self.access_requests = 0
        self.fetch_calls: list[Optional[datetime]] = []
        self.sample_requests: list[str] = []

    def add(self, record: WorkoutRecord, *batches: list[Coordinate]) -> None:
        self.workouts.append((record, list(batches)))

    def is_available(self) -> bool:
        return self.available

    async def request_access(self) -> bool:
        self.access_requests += 1
        return self.grant

    async def fetch_workouts(self, since: Optional[datetime] = None) -> list[WorkoutRecord]:
        self.fetch_calls.append(since)
        if self.fetch_delay:
            await asyncio.sleep(self.fetch_delay)
        if self.fetch_error is not None:
            raise self.fetch_error
        return [
            record for record, _ in self.workouts
            if since is None or record.start_time > since
        ]

    async def fetch_route_samples(self, record: WorkoutRecord) -> list[SampleBatch]:
        self.sample_requests.append(record.external_id)
        await asyncio.sleep(0)
        if record.external_id in self.sample_errors:
            raise self.sample_errors[record.external_id]
        for known, batches in self.workouts:
            if known.external_id == record.external_id:
                return [SampleBatch(workout_id=known.external_id, payload=b) for b in batches]
        return []

    async def read_coordinates(self, batch: SampleBatch) -> list[Coordinate]:
        return list(batch.payload)


class MemoryByteStore(ByteStore):
    """Dict-backed byte store that records every write."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None, fail_writes: bool = False):
        self.data: dict[str, bytes] = dict(initial or {})
        self.writes: list[tuple[str, bytes]] = []
        self.fail_writes = fail_writes

    def read_bytes(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def write_bytes_atomic(self, key: str, data: bytes) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes.append((key, data))
        self.data[key] = data


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def source():
    return FakeWorkoutSource()


@pytest.fixture
def byte_store():
    return MemoryByteStore()


@pytest.fixture
def cache_store(byte_store):
    return RouteCacheStore(byte_store)
