"""
Strava workout source.

Reads the athlete's activities and their GPS streams from the Strava v3 API.

Endpoints used:
- GET /athlete                      access check
- GET /athlete/activities           activity list (paged, newest first)
- GET /activities/{id}/streams      latlng stream of one activity

Only a bearer access token is needed; obtaining and refreshing it is left
to the deployment (env var WORKOUT_MAP_STRAVA_ACCESS_TOKEN).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from workout_map.shared.constants import ActivityKind
from workout_map.shared.geo import Coordinate

from .base import (
    AuthorizationDeniedError,
    SampleBatch,
    TransientFetchError,
    WorkoutRecord,
    WorkoutSource,
)

logger = logging.getLogger(__name__)


# Strava sport types -> our activity kinds
STRAVA_TO_ACTIVITY_KIND: dict[str, ActivityKind] = {
    "Run": ActivityKind.RUNNING,
    "TrailRun": ActivityKind.RUNNING,
    "VirtualRun": ActivityKind.RUNNING,
    "Walk": ActivityKind.WALKING,
    "Hike": ActivityKind.HIKING,
    "Ride": ActivityKind.CYCLING,
    "VirtualRide": ActivityKind.CYCLING,
    "GravelRide": ActivityKind.CYCLING,
    "MountainBikeRide": ActivityKind.CYCLING,
    "EBikeRide": ActivityKind.CYCLING,
    "EMountainBikeRide": ActivityKind.CYCLING,
    "Swim": ActivityKind.SWIMMING,
    "Rowing": ActivityKind.ROWING,
    "Canoeing": ActivityKind.PADDLE_SPORTS,
    "Kayaking": ActivityKind.PADDLE_SPORTS,
    "StandUpPaddling": ActivityKind.PADDLE_SPORTS,
    "Wheelchair": ActivityKind.WHEELCHAIR_RUN_PACE,
    "NordicSki": ActivityKind.CROSS_COUNTRY_SKIING,
    "BackcountrySki": ActivityKind.CROSS_COUNTRY_SKIING,
}


def parse_strava_date(value: str) -> datetime:
    """Parse Strava's ISO timestamp ('2024-05-01T06:30:00Z')."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class StravaWorkoutSource(WorkoutSource):
    """
    Workout source backed by the Strava API.

    Usage:
        source = StravaWorkoutSource(access_token)
        if await source.request_access():
            records = await source.fetch_workouts()
    """

    API_URL = "https://www.strava.com/api/v3"

    def __init__(
        self,
        access_token: Optional[str],
        api_url: str = API_URL,
        page_size: int = 50,
        max_pages: int = 10,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.access_token = access_token
        self.api_url = api_url.rstrip("/")
        self.page_size = min(page_size, 200)
        self.max_pages = max_pages
        self.timeout = timeout
        self._transport = transport

    def is_available(self) -> bool:
        return bool(self.access_token)

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    async def _get(self, endpoint: str, params: Optional[dict] = None) -> httpx.Response:
        """
        Make an authenticated GET request.

        Raises:
            TransientFetchError: If Strava can't be reached
        """
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.get(
                    f"{self.api_url}{endpoint}",
                    headers={"Authorization": f"Bearer {self.access_token}"},
                    params=params
                )
        except httpx.HTTPError as e:
            logger.warning(f"Strava request {endpoint} failed: {e}")
            raise TransientFetchError(
                "Couldn't reach Strava. Check your connection and try again."
            )

        if "X-RateLimit-Limit" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        """
        Raises:
            AuthorizationDeniedError: On 401/403
            TransientFetchError: On rate limiting or any other error status
        """
        if response.status_code in (401, 403):
            raise AuthorizationDeniedError()
        elif response.status_code == 429:
            raise TransientFetchError("Strava rate limit exceeded. Try again in a few minutes.")
        elif response.status_code != 200:
            logger.warning(f"Strava API error {response.status_code}: {response.text[:200]}")
            raise TransientFetchError(f"Strava returned an error ({response.status_code}).")

    @staticmethod
    def _json(response: httpx.Response):
        """
        Raises:
            TransientFetchError: If the body is not JSON
        """
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Strava returned a non-JSON body: {response.text[:200]}")
            raise TransientFetchError("Strava returned an unreadable response.")

    # -------------------------------------------------------------------------
    # WorkoutSource
    # -------------------------------------------------------------------------

    async def request_access(self) -> bool:
        response = await self._get("/athlete")
        if response.status_code in (401, 403):
            return False
        self._raise_for_status(response)
        return True

    async def fetch_workouts(self, since: Optional[datetime] = None) -> list[WorkoutRecord]:
        params = {"per_page": self.page_size}
        if since:
            if since.tzinfo is None:
                since = since.replace(tzinfo=timezone.utc)
            params["after"] = int(since.timestamp())

        records: list[WorkoutRecord] = []
        for page in range(1, self.max_pages + 1):
            response = await self._get("/athlete/activities", params={**params, "page": page})
            self._raise_for_status(response)

            activities = self._json(response)
            if not isinstance(activities, list):
                raise TransientFetchError("Strava returned an unexpected activity list.")
            for data in activities:
                record = self._to_record(data)
                if record:
                    records.append(record)

            if len(activities) < self.page_size:
                break

        # `after` queries come back oldest first
        records.sort(key=lambda r: r.start_time, reverse=True)
        logger.info(f"Fetched {len(records)} Strava activities")
        return records

    @staticmethod
    def _to_record(data: dict) -> Optional[WorkoutRecord]:
        """Convert an activity summary; None if it lacks id or start date."""
        try:
            external_id = str(data["id"])
            start_time = parse_strava_date(data["start_date"])
        except (KeyError, TypeError, ValueError):
            logger.debug(f"Skipping malformed Strava activity: {data!r:.200}")
            return None

        sport = data.get("sport_type") or data.get("type") or ""
        distance = data.get("distance")

        return WorkoutRecord(
            external_id=external_id,
            activity_kind=STRAVA_TO_ACTIVITY_KIND.get(sport, ActivityKind.OTHER),
            start_time=start_time,
            distance_meters=float(distance) if distance is not None else None,
        )

    async def fetch_route_samples(self, record: WorkoutRecord) -> list[SampleBatch]:
        response = await self._get(
            f"/activities/{record.external_id}/streams",
            params={"keys": "latlng", "key_by_type": "true"}
        )
        if response.status_code == 404:
            return []
        self._raise_for_status(response)

        streams = self._json(response) or {}
        latlng = None
        if isinstance(streams, dict):
            latlng = streams.get("latlng") or {}
        if not isinstance(latlng, dict):
            raise TransientFetchError(
                f"Strava returned an unexpected GPS stream for activity {record.external_id}."
            )

        points = latlng.get("data") or []
        if not points:
            return []
        if not isinstance(points, list):
            raise TransientFetchError(
                f"Strava returned an unexpected GPS stream for activity {record.external_id}."
            )
        return [SampleBatch(workout_id=record.external_id, payload=points)]

    async def read_coordinates(self, batch: SampleBatch) -> list[Coordinate]:
        try:
            return [
                Coordinate(float(point[0]), float(point[1]))
                for point in batch.payload or []
                if point and len(point) >= 2
            ]
        except (TypeError, ValueError, KeyError):
            raise TransientFetchError(
                f"Strava returned unreadable GPS points for activity {batch.workout_id}."
            )
