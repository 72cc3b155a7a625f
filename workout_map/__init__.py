"""
Workout Map backend.

Syncs workout routes from a workout source, caches them locally and serves
them, with the sync state and last map viewport, to a map UI.
"""

__version__ = "0.1.0"
