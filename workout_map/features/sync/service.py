"""
Route sync service.

Keeps the local route collection in step with a workout source:

1. On construction, show whatever the cache holds (no source access yet)
2. On refresh, ask for access once per process, fetch workouts, skip the
   ones already known, build the rest one by one
3. Publish the growing collection after every new route
4. Save the merged collection to the cache when something was added

All state lives on the event loop that runs the service. Cache writes go
to worker threads and never block a refresh.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from workout_map.config import Settings
from workout_map.features.cache.backends import create_byte_store
from workout_map.features.cache.store import RouteCacheStore
from workout_map.features.routes.builder import RouteBuilder
from workout_map.features.routes.colors import color_for_index
from workout_map.features.routes.models import (
    CachedDocument,
    Route,
    ViewportRegion,
    combined_region,
)
from workout_map.features.sources.base import (
    AuthorizationDeniedError,
    SourceUnavailableError,
    TransientFetchError,
    WorkoutRecord,
    WorkoutSource,
    WorkoutSourceError,
)
from workout_map.features.sources.factory import create_workout_source
from workout_map.shared.constants import RouteColor

from .config import SyncConfig
from .state import LoadingProgress, SyncSnapshot, SyncState
from .viewport import ViewportPersistor

logger = logging.getLogger(__name__)

T = TypeVar("T")

SnapshotCallback = Callable[[SyncSnapshot], None]

_UNSET = object()


class RouteSyncService:
    """
    Owner of the in-memory route collection, sync state and progress.

    Usage:
        service = RouteSyncService(store, source)
        unsubscribe = service.subscribe(render)
        await service.refresh_if_needed()
        service.record_viewport(region)
        ...
        await service.close()
    """

    def __init__(
        self,
        store: RouteCacheStore,
        source: WorkoutSource,
        debounce_seconds: float = SyncConfig.VIEWPORT_DEBOUNCE_SECONDS,
        incremental_fetch: bool = False,
        fetch_timeout_seconds: Optional[float] = None
    ):
        self.store = store
        self.source = source
        self.incremental_fetch = incremental_fetch
        self.fetch_timeout_seconds = fetch_timeout_seconds

        self._routes: tuple[Route, ...] = ()
        self._state = SyncState.idle()
        self._progress: Optional[LoadingProgress] = None
        self._subscribers: list[SnapshotCallback] = []

        self._has_access = False
        self._has_attempted_initial_load = False
        self._refresh_task: Optional[asyncio.Task] = None

        # Cache first, source later
        document = store.load()
        self.initial_viewport = document.viewport
        if document.routes:
            self._routes = document.routes
            self._state = SyncState.loaded()
        logger.info(
            f"Route cache loaded: {len(document.routes)} routes, "
            f"viewport={'yes' if document.viewport else 'no'}"
        )

        self.viewport = ViewportPersistor(
            store,
            routes_provider=lambda: self._routes,
            debounce_seconds=debounce_seconds,
            initial_viewport=document.viewport,
        )

    # -------------------------------------------------------------------------
    # Observable state
    # -------------------------------------------------------------------------

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def progress(self) -> Optional[LoadingProgress]:
        return self._progress

    @property
    def last_viewport(self) -> Optional[ViewportRegion]:
        return self.viewport.last_viewport

    @property
    def is_refreshing(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def snapshot(self) -> SyncSnapshot:
        return SyncSnapshot(routes=self._routes, state=self._state, progress=self._progress)

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """
        Register a callback for every change of routes, state or progress.

        Returns:
            Function that removes the callback
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _update(self, routes=_UNSET, state=_UNSET, progress=_UNSET) -> None:
        """Apply field changes and notify subscribers once."""
        if progress is not _UNSET:
            self._progress = progress
        if routes is not _UNSET:
            self._routes = routes
        if state is not _UNSET:
            self._state = state

        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f"Sync subscriber failed: {e}")

    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------

    async def refresh_if_needed(self) -> SyncState:
        """Refresh once per process lifetime; join the first one if it is still running."""
        if self._has_attempted_initial_load:
            if self.is_refreshing:
                return await asyncio.shield(self._refresh_task)
            return self._state
        self._has_attempted_initial_load = True
        return await self.refresh()

    async def refresh(self) -> SyncState:
        """
        Sync routes with the workout source.

        A call made while a refresh is running joins that refresh instead
        of starting a second one.

        Returns:
            State after the refresh
        """
        self._has_attempted_initial_load = True

        if self.is_refreshing:
            logger.debug("Refresh already in progress, joining it")
        else:
            self._refresh_task = asyncio.create_task(self._run_refresh())

        return await asyncio.shield(self._refresh_task)

    async def _run_refresh(self) -> SyncState:
        self._update(progress=None)

        try:
            await self._load_workouts()
        except WorkoutSourceError as e:
            logger.warning(f"Workout sync failed: {e.__class__.__name__}: {e}")
            if isinstance(e, AuthorizationDeniedError):
                # Revoked access is asked for again on the next refresh
                self._has_access = False
            self._update(progress=None, state=SyncState.error(self._user_message(e)))
        except asyncio.TimeoutError:
            logger.warning("Workout sync timed out")
            self._update(progress=None, state=SyncState.error(SyncConfig.TIMEOUT_ERROR_MESSAGE))
        except Exception as e:
            logger.error(f"Workout sync failed: {e.__class__.__name__}: {e}")
            self._update(progress=None, state=SyncState.error(SyncConfig.GENERIC_ERROR_MESSAGE))

        return self._state

    @staticmethod
    def _user_message(error: Exception) -> str:
        message = str(error).strip() or SyncConfig.GENERIC_ERROR_MESSAGE
        if len(message) > SyncConfig.MAX_ERROR_MESSAGE_LENGTH:
            message = message[:SyncConfig.MAX_ERROR_MESSAGE_LENGTH - 1].rstrip() + "…"
        return message

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        """Apply the optional fetch timeout to a source call."""
        if self.fetch_timeout_seconds is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, self.fetch_timeout_seconds)

    async def _ensure_access(self) -> None:
        if not self.source.is_available():
            raise SourceUnavailableError()

        if self._has_access:
            return

        self._update(state=SyncState.requesting_access())
        granted = await self._bounded(self.source.request_access())
        if not granted:
            raise AuthorizationDeniedError()
        self._has_access = True
        logger.info("Workout access granted")

    async def _load_workouts(self) -> None:
        await self._ensure_access()

        self._update(state=SyncState.loading(), progress=None)

        existing = self._routes
        since = None
        if self.incremental_fetch and existing:
            since = max(route.start_time for route in existing)

        records = await self._bounded(self.source.fetch_workouts(since=since))

        if not records:
            logger.info("Workout source returned no workouts")
            self._update(state=SyncState.loaded() if self._routes else SyncState.empty())
            return

        total = len(records)
        known_ids = {route.external_id for route in existing if route.external_id}
        new_routes: list[Route] = []
        failures: list[Exception] = []
        skipped = 0

        self._update(progress=LoadingProgress(total=total, loaded=0))

        try:
            for index, record in enumerate(records):
                if record.external_id in known_ids:
                    skipped += 1
                else:
                    color = color_for_index(len(existing) + len(new_routes))
                    try:
                        route = await self._build_route(record, color)
                    except AuthorizationDeniedError:
                        raise
                    except (WorkoutSourceError, asyncio.TimeoutError) as e:
                        logger.warning(f"Failed to load samples for workout {record.external_id}: {e}")
                        failures.append(e)
                        route = None
                    except Exception as e:
                        logger.error(
                            f"Unexpected error building workout {record.external_id}: "
                            f"{e.__class__.__name__}: {e}"
                        )
                        failures.append(e)
                        route = None

                    if route is not None:
                        new_routes.append(route)
                        known_ids.add(record.external_id)
                        self._update(routes=tuple(new_routes) + existing)

                self._update(progress=LoadingProgress(total=total, loaded=index + 1))
        except BaseException:
            # An aborted run leaves the collection as it was (and as cached)
            if new_routes:
                self._update(routes=existing)
            raise

        self._update(progress=None)

        logger.info(
            f"Workout sync: {total} fetched, {len(new_routes)} added, "
            f"{skipped} already known, {len(failures)} failed"
        )

        if not new_routes:
            if not self._routes and failures and len(failures) == total - skipped:
                first = failures[0]
                if isinstance(first, asyncio.TimeoutError):
                    raise first
                if isinstance(first, WorkoutSourceError):
                    raise TransientFetchError(str(first))
                raise TransientFetchError(SyncConfig.GENERIC_ERROR_MESSAGE)
            self._update(state=SyncState.loaded() if self._routes else SyncState.empty())
            return

        merged = tuple(new_routes) + existing
        self._update(routes=merged, state=SyncState.loaded())
        self.store.save(CachedDocument(routes=merged, viewport=self.viewport.last_viewport))

    async def _build_route(self, record: WorkoutRecord, color: RouteColor) -> Optional[Route]:
        batches = await self._bounded(self.source.fetch_route_samples(record))

        coordinate_batches = []
        for batch in batches:
            coordinate_batches.append(await self._bounded(self.source.read_coordinates(batch)))

        return RouteBuilder.build(record, coordinate_batches, color)

    # -------------------------------------------------------------------------
    # Viewport
    # -------------------------------------------------------------------------

    def record_viewport(self, region: ViewportRegion) -> None:
        """Remember the map viewport and persist it after a quiet period."""
        self.viewport.record_viewport(region)

    def suggested_viewport(self) -> Optional[ViewportRegion]:
        """
        Viewport the map should open with.

        Last recorded viewport if any, otherwise a region around the most
        recent route.
        """
        if self.viewport.last_viewport is not None:
            return self.viewport.last_viewport
        if not self._routes:
            return None
        return self._routes[0].region(
            padding_factor=SyncConfig.ROUTE_REGION_PADDING,
            min_span=SyncConfig.ROUTE_REGION_MIN_SPAN,
        )

    def routes_region(self) -> Optional[ViewportRegion]:
        """Region fitting the whole collection."""
        return combined_region(
            self._routes,
            padding_factor=SyncConfig.COLLECTION_REGION_PADDING,
            min_span=SyncConfig.COLLECTION_REGION_MIN_SPAN,
        )

    def routes_in_region(self, region: ViewportRegion) -> tuple[Route, ...]:
        return tuple(route for route in self._routes if route.intersects(region))

    # -------------------------------------------------------------------------
    # Shutdown
    # -------------------------------------------------------------------------

    async def close(self) -> None:
        """Stop a running refresh, write the pending viewport, drain writes."""
        if self.is_refreshing:
            self._refresh_task.cancel()
            await asyncio.wait({self._refresh_task})
        await self.viewport.flush()
        logger.info("Route sync service closed")


def create_sync_service(settings: Settings) -> RouteSyncService:
    """
    Wire store, source and service from settings.

    One store instance per process; pass the service around instead of
    creating more.
    """
    backend = create_byte_store(
        settings.cache_backend,
        settings.cache_dir,
        settings.cache_database_url,
    )
    store = RouteCacheStore(backend, key=settings.cache_key)

    return RouteSyncService(
        store,
        create_workout_source(settings),
        debounce_seconds=settings.viewport_debounce_seconds,
        incremental_fetch=settings.incremental_fetch,
        fetch_timeout_seconds=settings.fetch_timeout_seconds,
    )
