"""
Unified constants for activity kinds and route colors.

This module provides a single source of truth for activity naming
and the route color palette across the entire application.
"""

from enum import Enum


class ActivityKind(str, Enum):
    """
    Workout classification as reported by a workout source.

    Sources translate their own naming into these values.
    """
    RUNNING = "running"
    WALKING = "walking"
    CYCLING = "cycling"
    HIKING = "hiking"
    SWIMMING = "swimming"
    ROWING = "rowing"
    PADDLE_SPORTS = "paddle_sports"
    WHEELCHAIR_RUN_PACE = "wheelchair_run_pace"
    WHEELCHAIR_WALK_PACE = "wheelchair_walk_pace"
    CROSS_COUNTRY_SKIING = "cross_country_skiing"
    OTHER = "other"


# Short labels shown on the map and in exports
ACTIVITY_DISPLAY_NAMES: dict[ActivityKind, str] = {
    ActivityKind.RUNNING: "Run",
    ActivityKind.WALKING: "Walk",
    ActivityKind.CYCLING: "Ride",
    ActivityKind.HIKING: "Hike",
    ActivityKind.SWIMMING: "Swim",
    ActivityKind.ROWING: "Row",
    ActivityKind.PADDLE_SPORTS: "Paddle",
    ActivityKind.WHEELCHAIR_RUN_PACE: "Wheelchair Run",
    ActivityKind.WHEELCHAIR_WALK_PACE: "Wheelchair Walk",
    ActivityKind.CROSS_COUNTRY_SKIING: "XC Ski",
}

DEFAULT_ACTIVITY_NAME = "Workout"


def activity_display_name(kind: "ActivityKind | str | None") -> str:
    """
    Map an activity kind to its display label.

    Unknown or unmapped kinds fall back to "Workout".
    """
    try:
        kind = ActivityKind(kind)
    except ValueError:
        return DEFAULT_ACTIVITY_NAME
    return ACTIVITY_DISPLAY_NAMES.get(kind, DEFAULT_ACTIVITY_NAME)


class RouteColor(str, Enum):
    """Color token stored with each route."""
    SUNRISE = "sunrise"
    PEACH = "peach"
    SEAFOAM = "seafoam"
    LAVENDER = "lavender"
    SKY = "sky"
    MINT = "mint"
    BUTTER = "butter"
    ROSE = "rose"

    @property
    def gradient(self) -> tuple[str, str]:
        """Start/end hex colors of the route stroke."""
        return ROUTE_COLOR_GRADIENTS[self]

    @property
    def hex(self) -> str:
        """Primary hex color (gradient start)."""
        return self.gradient[0]


# Palette order defines color assignment order
ROUTE_COLOR_PALETTE: tuple[RouteColor, ...] = (
    RouteColor.SUNRISE,
    RouteColor.PEACH,
    RouteColor.SEAFOAM,
    RouteColor.LAVENDER,
    RouteColor.SKY,
    RouteColor.MINT,
    RouteColor.BUTTER,
    RouteColor.ROSE,
)

ROUTE_COLOR_GRADIENTS: dict[RouteColor, tuple[str, str]] = {
    RouteColor.SUNRISE: ("#FFDECC", "#FFBAA1"),
    RouteColor.PEACH: ("#FFD1BA", "#FCB399"),
    RouteColor.SEAFOAM: ("#C7EDE0", "#A3D6C9"),
    RouteColor.LAVENDER: ("#DED6F5", "#BDB5E8"),
    RouteColor.SKY: ("#C7E6FA", "#A1CCF0"),
    RouteColor.MINT: ("#CCF5D1", "#A8E0BD"),
    RouteColor.BUTTER: ("#FFF2C7", "#FADE99"),
    RouteColor.ROSE: ("#F7D1E0", "#F0B3C9"),
}
