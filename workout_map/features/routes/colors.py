"""
Route color assignment.

Colors are picked once, when a route is built, and stored with it.
Existing routes are never recolored.
"""

from workout_map.shared.constants import RouteColor, ROUTE_COLOR_PALETTE


def color_for_index(index: int) -> RouteColor:
    """
    Pick the palette color for the n-th route.

    Args:
        index: Ordinal position of the route (0-based)

    Returns:
        Palette entry, wrapping around after the last color
    """
    return ROUTE_COLOR_PALETTE[index % len(ROUTE_COLOR_PALETTE)]
