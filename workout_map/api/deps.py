"""
API dependencies.
"""

from fastapi import Request

from workout_map.features.sync import RouteSyncService


def get_sync_service(request: Request) -> RouteSyncService:
    """Dependency for getting the process-wide sync service."""
    return request.app.state.sync_service
