"""
Route sync configuration constants.
"""


class SyncConfig:
    """Configuration for sync behavior."""

    # Quiet period before the last viewport change is written (seconds)
    VIEWPORT_DEBOUNCE_SECONDS = 0.4

    # Longest error message kept in the sync state
    MAX_ERROR_MESSAGE_LENGTH = 200

    # Shown when a failure carries no usable message
    GENERIC_ERROR_MESSAGE = "Something went wrong while loading workouts."

    TIMEOUT_ERROR_MESSAGE = "Loading workouts timed out. Try again later."

    # ==========================================================================
    # Region fitting
    # ==========================================================================
    # Whole collection: +30% padding, at least 0.01 degrees
    COLLECTION_REGION_PADDING = 0.3
    COLLECTION_REGION_MIN_SPAN = 0.01

    # Single route: +15% padding, at least 0.005 degrees
    ROUTE_REGION_PADDING = 0.15
    ROUTE_REGION_MIN_SPAN = 0.005
