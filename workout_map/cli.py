"""
Sync workout routes from the command line.

Runs one refresh against the configured workout source and cache, then
prints the resulting route list.

Usage:
    workout-map-sync
    workout-map-sync --source demo --cache-dir /tmp/routes
    workout-map-sync --export routes.gpx
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from workout_map.config import settings
from workout_map.features.routes import RouteExportError, routes_to_gpx, total_distance_km
from workout_map.features.sync import RouteSyncService, SyncStatus, create_sync_service


def print_routes(service: RouteSyncService) -> None:
    print(f"{'#':>3s}  {'Date':10s}  {'Name':16s}  {'Distance':>10s}  {'Color':9s}  Points")
    for index, route in enumerate(service.routes, start=1):
        print(
            f"{index:3d}  {route.start_time:%Y-%m-%d}  {route.name:16s}  "
            f"{route.formatted_distance:>10s}  {route.color.value:9s}  {len(route.coordinates)}"
        )
    print(f"\nTotal: {len(service.routes)} routes, {total_distance_km(service.routes):.1f} km")


async def run(args: argparse.Namespace) -> int:
    service = create_sync_service(settings)
    cached = len(service.routes)

    state = await service.refresh()
    await service.close()

    if state.status == SyncStatus.ERROR:
        print(f"Sync failed: {state.message}")
        return 1

    print(f"Sync {state.status.value}: {len(service.routes) - cached} new, {len(service.routes)} total\n")
    if service.routes:
        print_routes(service)

    if args.export:
        try:
            Path(args.export).write_text(routes_to_gpx(service.routes), encoding="utf-8")
        except RouteExportError as e:
            print(f"\nExport skipped: {e}")
        else:
            print(f"\nExported to {args.export}")

    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Sync workout routes")
    parser.add_argument("--source", choices=["demo", "strava"], help="Workout source")
    parser.add_argument("--cache-backend", choices=["file", "sql"], help="Cache backend")
    parser.add_argument("--cache-dir", help="Cache directory (file backend)")
    parser.add_argument("--incremental", action="store_true", help="Only fetch newer workouts")
    parser.add_argument("--export", help="Write all routes to this GPX file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    # Command line flags win over env/.env
    if args.source:
        settings.workout_source = args.source
    if args.cache_backend:
        settings.cache_backend = args.cache_backend
    if args.cache_dir:
        settings.cache_dir = Path(args.cache_dir)
    if args.incremental:
        settings.incremental_fetch = True

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
