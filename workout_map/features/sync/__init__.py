"""
Route sync services.

Provides:
- RouteSyncService: Main sync orchestrator
- ViewportPersistor: Debounced viewport writes
- SyncState / LoadingProgress / SyncSnapshot: observable state
"""

from .service import RouteSyncService, create_sync_service
from .viewport import ViewportPersistor
from .state import SyncStatus, SyncState, LoadingProgress, SyncSnapshot
from .config import SyncConfig

__all__ = [
    # Services
    "RouteSyncService",
    "create_sync_service",
    "ViewportPersistor",
    # State
    "SyncStatus",
    "SyncState",
    "LoadingProgress",
    "SyncSnapshot",
    # Config
    "SyncConfig",
]
