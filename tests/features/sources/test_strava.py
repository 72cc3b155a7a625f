"""
Tests for the Strava workout source.

HTTP is served by httpx.MockTransport; no network access.
"""

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from workout_map.features.sources import (
    AuthorizationDeniedError,
    SampleBatch,
    StravaWorkoutSource,
    TransientFetchError,
)
from workout_map.shared.constants import ActivityKind
from workout_map.shared.geo import Coordinate

from conftest import make_record


API = "https://strava.test/api/v3"


def activity(activity_id, start, sport="Run", distance=5000.0) -> dict:
    return {
        "id": activity_id,
        "sport_type": sport,
        "start_date": start,
        "distance": distance,
    }


def make_source(handler, **kwargs) -> StravaWorkoutSource:
    return StravaWorkoutSource(
        "token-123",
        api_url=API,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


# =============================================================================
# Test Access
# =============================================================================

class TestAccess:

    def test_available_only_with_token(self):
        assert StravaWorkoutSource("abc").is_available()
        assert not StravaWorkoutSource(None).is_available()
        assert not StravaWorkoutSource("").is_available()

    def test_granted(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["path"] = request.url.path
            return httpx.Response(200, json={"id": 1})

        assert asyncio.run(make_source(handler).request_access()) is True
        assert seen == {"auth": "Bearer token-123", "path": "/api/v3/athlete"}

    @pytest.mark.parametrize("status", [401, 403])
    def test_denied(self, status):
        source = make_source(lambda request: httpx.Response(status))
        assert asyncio.run(source.request_access()) is False

    def test_server_error(self):
        source = make_source(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(TransientFetchError):
            asyncio.run(source.request_access())

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("no route to host")

        with pytest.raises(TransientFetchError, match="Couldn't reach Strava"):
            asyncio.run(make_source(handler).request_access())


# =============================================================================
# Test Activities
# =============================================================================

class TestFetchWorkouts:

    def test_records(self):
        def handler(request):
            return httpx.Response(200, json=[
                activity(2, "2025-10-02T07:00:00Z", sport="TrailRun", distance=8000),
                activity(1, "2025-10-01T07:00:00Z", sport="Kitesurf", distance=None),
            ])

        records = asyncio.run(make_source(handler).fetch_workouts())

        assert [r.external_id for r in records] == ["2", "1"]
        assert records[0].activity_kind == ActivityKind.RUNNING
        assert records[0].distance_meters == 8000.0
        assert records[0].start_time == datetime(2025, 10, 2, 7, 0, tzinfo=timezone.utc)
        assert records[1].activity_kind == ActivityKind.OTHER
        assert records[1].distance_meters is None

    def test_type_fallback(self):
        def handler(request):
            return httpx.Response(200, json=[{"id": 5, "type": "Ride", "start_date": "2025-10-01T07:00:00Z"}])

        records = asyncio.run(make_source(handler).fetch_workouts())
        assert records[0].activity_kind == ActivityKind.CYCLING

    def test_malformed_skipped(self):
        def handler(request):
            return httpx.Response(200, json=[
                {"id": 1},
                {"start_date": "2025-10-01T07:00:00Z"},
                activity(3, "not a date"),
                activity(4, "2025-10-01T07:00:00Z"),
            ])

        records = asyncio.run(make_source(handler).fetch_workouts())
        assert [r.external_id for r in records] == ["4"]

    def test_paging(self):
        pages = []

        def handler(request):
            page = int(request.url.params["page"])
            pages.append(page)
            assert request.url.params["per_page"] == "2"
            if page == 1:
                return httpx.Response(200, json=[
                    activity(4, "2025-10-04T07:00:00Z"),
                    activity(3, "2025-10-03T07:00:00Z"),
                ])
            return httpx.Response(200, json=[activity(2, "2025-10-02T07:00:00Z")])

        records = asyncio.run(make_source(handler, page_size=2).fetch_workouts())

        # Short second page ends paging
        assert pages == [1, 2]
        assert [r.external_id for r in records] == ["4", "3", "2"]

    def test_max_pages(self):
        pages = []

        def handler(request):
            pages.append(int(request.url.params["page"]))
            return httpx.Response(200, json=[activity(len(pages), "2025-10-01T07:00:00Z")])

        asyncio.run(make_source(handler, page_size=1, max_pages=3).fetch_workouts())
        assert pages == [1, 2, 3]

    def test_since_sent_as_after(self):
        seen = {}

        def handler(request):
            seen["after"] = request.url.params.get("after")
            return httpx.Response(200, json=[
                activity(1, "2025-10-01T07:00:00Z"),
                activity(2, "2025-10-02T07:00:00Z"),
            ])

        since = datetime(2025, 9, 30, tzinfo=timezone.utc)
        records = asyncio.run(make_source(handler).fetch_workouts(since=since))

        assert seen["after"] == str(int(since.timestamp()))
        # Oldest-first response comes back newest first
        assert [r.external_id for r in records] == ["2", "1"]

    @pytest.mark.parametrize("response", [
        httpx.Response(200, json={"message": "unexpected"}),
        httpx.Response(200, text="not json"),
    ])
    def test_unexpected_activity_list(self, response):
        source = make_source(lambda request: response)
        with pytest.raises(TransientFetchError):
            asyncio.run(source.fetch_workouts())

    @pytest.mark.parametrize("status,error", [
        (401, AuthorizationDeniedError),
        (403, AuthorizationDeniedError),
        (429, TransientFetchError),
        (502, TransientFetchError),
    ])
    def test_status_mapping(self, status, error):
        source = make_source(lambda request: httpx.Response(status, text="nope"))
        with pytest.raises(error):
            asyncio.run(source.fetch_workouts())


# =============================================================================
# Test Streams
# =============================================================================

class TestRouteSamples:

    def test_latlng_stream(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["keys"] = request.url.params["keys"]
            return httpx.Response(200, json={
                "latlng": {"data": [[43.0, 76.0], [43.001, 76.002]]},
                "distance": {"data": [0, 200]},
            })

        source = make_source(handler)

        async def go():
            batches = await source.fetch_route_samples(make_record("77"))
            return batches, await source.read_coordinates(batches[0])

        batches, coords = asyncio.run(go())

        assert seen == {"path": "/api/v3/activities/77/streams", "keys": "latlng"}
        assert len(batches) == 1
        assert batches[0].workout_id == "77"
        assert coords == [Coordinate(43.0, 76.0), Coordinate(43.001, 76.002)]

    @pytest.mark.parametrize("response", [
        httpx.Response(404),
        httpx.Response(200, json={}),
        httpx.Response(200, json={"latlng": {"data": []}}),
    ])
    def test_no_gps(self, response):
        source = make_source(lambda request: response)
        assert asyncio.run(source.fetch_route_samples(make_record("1"))) == []

    @pytest.mark.parametrize("response", [
        httpx.Response(200, json=[{"type": "latlng", "data": [[1.0, 2.0]]}]),
        httpx.Response(200, json={"latlng": [[1.0, 2.0]]}),
        httpx.Response(200, json={"latlng": {"data": {"0": [1.0, 2.0]}}}),
        httpx.Response(200, text="<html>maintenance</html>"),
    ])
    def test_unexpected_stream_shape(self, response):
        source = make_source(lambda request: response)
        with pytest.raises(TransientFetchError):
            asyncio.run(source.fetch_route_samples(make_record("1")))

    def test_stream_error(self):
        source = make_source(lambda request: httpx.Response(500))
        with pytest.raises(TransientFetchError):
            asyncio.run(source.fetch_route_samples(make_record("1")))

    def test_bad_points_dropped(self):
        source = StravaWorkoutSource("token")
        batch = SampleBatch(workout_id="1", payload=[[1.0, 2.0], [], [3.0], [4.0, 5.0]])
        coords = asyncio.run(source.read_coordinates(batch))
        assert coords == [Coordinate(1.0, 2.0), Coordinate(4.0, 5.0)]

    @pytest.mark.parametrize("payload", [
        [["north", 2.0], [3.0, 4.0]],
        [[None, 2.0], [3.0, 4.0]],
        [5, 6],
    ])
    def test_unreadable_points(self, payload):
        source = StravaWorkoutSource("token")
        batch = SampleBatch(workout_id="1", payload=payload)
        with pytest.raises(TransientFetchError):
            asyncio.run(source.read_coordinates(batch))
