"""
Sync state types.

Everything a UI needs to render the sync status: the state machine value,
the progress of a running fetch, and a composite snapshot for observers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from workout_map.features.routes.models import Route


class SyncStatus(str, Enum):
    """Sync state machine values."""
    IDLE = "idle"
    REQUESTING_ACCESS = "requesting_access"
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class SyncState:
    """
    Current sync state.

    `message` is set only for the ERROR status.
    """
    status: SyncStatus = SyncStatus.IDLE
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "SyncState":
        return cls(SyncStatus.IDLE)

    @classmethod
    def requesting_access(cls) -> "SyncState":
        return cls(SyncStatus.REQUESTING_ACCESS)

    @classmethod
    def loading(cls) -> "SyncState":
        return cls(SyncStatus.LOADING)

    @classmethod
    def loaded(cls) -> "SyncState":
        return cls(SyncStatus.LOADED)

    @classmethod
    def empty(cls) -> "SyncState":
        return cls(SyncStatus.EMPTY)

    @classmethod
    def error(cls, message: str) -> "SyncState":
        return cls(SyncStatus.ERROR, message)

    @property
    def is_error(self) -> bool:
        return self.status == SyncStatus.ERROR


@dataclass(frozen=True)
class LoadingProgress:
    """Progress of a running workout fetch."""
    total: int
    loaded: int

    def __post_init__(self):
        if not 0 <= self.loaded <= self.total:
            raise ValueError(f"Invalid progress {self.loaded}/{self.total}")

    @property
    def fraction_completed(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.loaded / self.total


@dataclass(frozen=True)
class SyncSnapshot:
    """Everything observers get on each change."""
    routes: tuple[Route, ...]
    state: SyncState
    progress: Optional[LoadingProgress]
