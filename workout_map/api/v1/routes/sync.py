"""
Sync Endpoints

- GET /sync - Current sync state and progress
- POST /sync/refresh - Sync routes with the workout source
"""

from fastapi import APIRouter, Depends, Query

from workout_map.api.deps import get_sync_service
from workout_map.api.v1.schemas import SyncStatusResponse
from workout_map.features.sync import RouteSyncService

router = APIRouter()


@router.get("", response_model=SyncStatusResponse)
async def sync_status(service: RouteSyncService = Depends(get_sync_service)):
    """Sync state, progress of a running fetch and route count."""
    return SyncStatusResponse.from_snapshot(service.snapshot())


@router.post("/refresh", response_model=SyncStatusResponse)
async def refresh(
    if_needed: bool = Query(default=False, description="Only refresh if never refreshed yet"),
    service: RouteSyncService = Depends(get_sync_service),
):
    """
    Refresh routes from the workout source.

    Waits for the refresh to finish. Failures are reported in the returned
    state, not as an HTTP error.
    """
    if if_needed:
        await service.refresh_if_needed()
    else:
        await service.refresh()
    return SyncStatusResponse.from_snapshot(service.snapshot())
