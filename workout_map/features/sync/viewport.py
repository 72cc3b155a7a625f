"""
Debounced viewport persistence.

Map panning produces a stream of viewport changes. Only the last one in
each quiet period is written to the route cache.
"""

import asyncio
import logging
from typing import Callable, Optional, Sequence

from workout_map.features.cache.store import RouteCacheStore
from workout_map.features.routes.models import CachedDocument, Route, ViewportRegion

from .config import SyncConfig

logger = logging.getLogger(__name__)


class ViewportPersistor:
    """
    Coalesces viewport updates into delayed cache writes.

    Each call to `record_viewport` bumps a generation counter and swaps the
    pending task. A timer only writes if its generation is still current,
    so a superseded timer never writes even if it already woke up.

    Must be used from the event loop that owns the sync service.
    """

    def __init__(
        self,
        store: RouteCacheStore,
        routes_provider: Callable[[], Sequence[Route]],
        debounce_seconds: float = SyncConfig.VIEWPORT_DEBOUNCE_SECONDS,
        initial_viewport: Optional[ViewportRegion] = None
    ):
        self.store = store
        self.debounce_seconds = debounce_seconds
        self.last_viewport = initial_viewport
        self._routes_provider = routes_provider
        self._generation = 0
        self._pending: Optional[asyncio.Task] = None

    @property
    def has_pending_write(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def record_viewport(self, region: ViewportRegion) -> None:
        """Remember the viewport now and schedule its write."""
        self.last_viewport = region

        self._generation += 1
        generation = self._generation

        if self._pending is not None:
            self._pending.cancel()
        self._pending = asyncio.create_task(self._persist_later(region, generation))

    async def _persist_later(self, region: ViewportRegion, generation: int) -> None:
        await asyncio.sleep(self.debounce_seconds)

        if generation != self._generation:
            return

        # No await between the check and the hand-off below
        self._pending = None
        routes = tuple(self._routes_provider())
        logger.debug(f"Persisting viewport with {len(routes)} routes")
        self.store.save(CachedDocument(routes=routes, viewport=region))

    def cancel(self) -> None:
        """Drop the pending write, if any."""
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    async def flush(self) -> None:
        """Wait for the pending write (after its delay) and all cache writes."""
        pending = self._pending
        if pending is not None:
            await asyncio.wait({pending})
            # Superseded while waiting; follow the newer one
            if self._pending is not None and self._pending is not pending:
                await self.flush()
                return
        await self.store.wait_for_writes()
