"""
Formatting utilities for display.
"""


def format_distance_km(km: float) -> str:
    """
    Format distance.

    Args:
        km: Distance in kilometers

    Returns:
        Formatted string (e.g., '12.5 km' or '850 m')
    """
    if km < 1:
        return f"{int(round(km * 1000))} m"
    return f"{km:.1f} km"
