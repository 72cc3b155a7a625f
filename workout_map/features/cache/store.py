"""
Route cache store.

Durable copy of the route collection and the last map viewport.
Only `load()` and `save()` touch the underlying byte store.

Caching is an optimization: a failed read gives an empty document and a
failed write is logged and dropped. The in-memory state of the running
sync service stays authoritative either way.
"""

import asyncio
import logging
from typing import Callable, Optional

from pydantic import ValidationError

from workout_map.features.routes.models import CachedDocument
from workout_map.features.routes.schemas import LegacyRouteList, RouteCacheDocumentDTO

from .backends import ByteStore

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "workout-routes-cache.json"


class RouteCacheStore:
    """
    Load/save the cached route document.

    Usage:
        store = RouteCacheStore(FileByteStore(cache_dir))
        document = store.load()
        store.save(CachedDocument(routes=routes, viewport=region))
        await store.wait_for_writes()
    """

    def __init__(self, backend: ByteStore, key: str = DEFAULT_CACHE_KEY):
        self.backend = backend
        self.key = key
        # Keep strong references to in-flight writes to prevent GC
        self._pending_writes: set[asyncio.Task] = set()
        # Writes land in the order they were scheduled
        self._write_lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def load(self) -> CachedDocument:
        """
        Read the cached document.

        Never raises. Falls back to the legacy bare-list layout, then to an
        empty document.
        """
        try:
            data = self.backend.read_bytes(self.key)
        except Exception as e:
            logger.warning(f"Failed to read route cache {self.key}: {e}")
            return CachedDocument.empty()

        if not data:
            return CachedDocument.empty()

        try:
            return RouteCacheDocumentDTO.model_validate_json(data).to_document()
        except (ValidationError, ValueError):
            pass

        try:
            legacy_routes = LegacyRouteList.validate_json(data)
        except (ValidationError, ValueError) as e:
            logger.info(f"Ignoring unreadable route cache {self.key}: {e.__class__.__name__}")
            return CachedDocument.empty()

        logger.info(f"Loaded legacy route cache with {len(legacy_routes)} routes")
        return CachedDocument(routes=tuple(dto.to_route() for dto in legacy_routes))

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    def _write_sync(self, document: CachedDocument) -> None:
        data = RouteCacheDocumentDTO.from_document(document).to_json_bytes()
        self.backend.write_bytes_atomic(self.key, data)

    async def write(self, document: CachedDocument) -> bool:
        """
        Write the document on a worker thread.

        Returns:
            True if the write succeeded, False otherwise (error is logged)
        """
        try:
            async with self._write_lock:
                await asyncio.to_thread(self._write_sync, document)
        except Exception as e:
            logger.warning(f"Failed to write route cache {self.key}: {e}")
            return False

        logger.debug(
            f"Route cache saved: {len(document.routes)} routes, "
            f"viewport={'yes' if document.viewport else 'no'}"
        )
        return True

    def save(
        self,
        document: CachedDocument,
        on_complete: Optional[Callable[[], None]] = None
    ) -> asyncio.Task:
        """
        Schedule a best-effort background write.

        Must be called from the event loop. `on_complete` runs on the loop
        once the write attempt is over, whether it succeeded or not.

        Returns:
            The scheduled task
        """
        task = asyncio.create_task(self._save(document, on_complete))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)
        return task

    async def _save(
        self,
        document: CachedDocument,
        on_complete: Optional[Callable[[], None]]
    ) -> bool:
        ok = await self.write(document)
        if on_complete is not None:
            try:
                on_complete()
            except Exception as e:
                logger.error(f"Route cache completion callback failed: {e}")
        return ok

    @property
    def pending_write_count(self) -> int:
        return len(self._pending_writes)

    async def wait_for_writes(self) -> None:
        """Wait until every scheduled write has finished."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)
