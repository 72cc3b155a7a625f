"""
Tests for RouteBuilder and color assignment.
"""

from datetime import timedelta

import pytest

from workout_map.features.routes import RouteBuilder, color_for_index
from workout_map.shared.constants import ActivityKind, RouteColor, ROUTE_COLOR_PALETTE
from workout_map.shared.geo import Coordinate, estimate_distance_km

from conftest import BASE_TIME, make_path, make_record


# =============================================================================
# Test Flatten
# =============================================================================

class TestFlatten:
    """Batches are joined in batch order, then sample order."""

    def test_batch_order_kept(self):
        first = [Coordinate(1.0, 1.0), Coordinate(2.0, 2.0)]
        second = [Coordinate(3.0, 3.0)]
        assert RouteBuilder.flatten([first, second]) == first + second

    def test_empty_batches(self):
        assert RouteBuilder.flatten([[], []]) == []


# =============================================================================
# Test Build
# =============================================================================

class TestBuild:
    """Tests for RouteBuilder.build."""

    def test_too_few_points(self):
        """Fewer than 2 points never produces a route."""
        record = make_record("w1")
        assert RouteBuilder.build(record, [], RouteColor.SUNRISE) is None
        assert RouteBuilder.build(record, [[Coordinate(1.0, 1.0)]], RouteColor.SUNRISE) is None

    def test_two_points_across_batches(self):
        """Points from separate batches add up."""
        record = make_record("w1")
        route = RouteBuilder.build(
            record, [[Coordinate(1.0, 1.0)], [Coordinate(1.001, 1.0)]], RouteColor.SUNRISE
        )
        assert route is not None
        assert len(route.coordinates) == 2

    def test_reported_distance_wins(self):
        """Reported meters are used over the estimate."""
        record = make_record("w1", distance_meters=5400.0)
        route = RouteBuilder.build(record, [make_path(10)], RouteColor.PEACH)
        assert route.distance_km == pytest.approx(5.4)

    def test_negative_distance_clamped(self):
        record = make_record("w1", distance_meters=-20.0)
        route = RouteBuilder.build(record, [make_path(3)], RouteColor.PEACH)
        assert route.distance_km == 0.0

    def test_estimated_distance(self):
        """Without a reported distance the path length is estimated."""
        path = make_path(10)
        record = make_record("w1", distance_meters=None)
        route = RouteBuilder.build(record, [path], RouteColor.PEACH)
        assert route.distance_km == pytest.approx(estimate_distance_km(path))
        assert route.distance_km > 0

    def test_carries_record_fields(self):
        record = make_record("abc-123", days_ago=2, kind=ActivityKind.CYCLING)
        route = RouteBuilder.build(record, [make_path(3)], RouteColor.SKY)
        assert route.name == "Ride"
        assert route.external_id == "abc-123"
        assert route.start_time == BASE_TIME - timedelta(days=2)
        assert route.color == RouteColor.SKY
        assert route.id

    @pytest.mark.parametrize("kind,name", [
        (ActivityKind.RUNNING, "Run"),
        (ActivityKind.WALKING, "Walk"),
        (ActivityKind.HIKING, "Hike"),
        (ActivityKind.SWIMMING, "Swim"),
        (ActivityKind.CROSS_COUNTRY_SKIING, "XC Ski"),
        (ActivityKind.OTHER, "Workout"),
        ("yoga", "Workout"),
    ])
    def test_display_names(self, kind, name):
        route = RouteBuilder.build(make_record("w", kind=kind), [make_path(2)], RouteColor.SKY)
        assert route.name == name

    def test_fresh_ids(self):
        record = make_record("w1")
        a = RouteBuilder.build(record, [make_path(2)], RouteColor.SKY)
        b = RouteBuilder.build(record, [make_path(2)], RouteColor.SKY)
        assert a.id != b.id


# =============================================================================
# Test Color Assignment
# =============================================================================

class TestColorForIndex:
    """Palette is applied in order and wraps around."""

    def test_palette_order(self):
        assert [color_for_index(i) for i in range(8)] == list(ROUTE_COLOR_PALETTE)
        assert color_for_index(0) == RouteColor.SUNRISE
        assert color_for_index(1) == RouteColor.PEACH

    def test_wraps(self):
        assert color_for_index(8) == color_for_index(0)
        assert color_for_index(17) == color_for_index(1)

    def test_gradients(self):
        for color in ROUTE_COLOR_PALETTE:
            start, end = color.gradient
            assert start.startswith("#") and end.startswith("#")
            assert color.hex == start
