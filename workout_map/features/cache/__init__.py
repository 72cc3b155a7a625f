"""
Route cache module.

Usage:
    from workout_map.features.cache import RouteCacheStore, FileByteStore

    store = RouteCacheStore(FileByteStore(cache_dir))
"""

from .backends import ByteStore, FileByteStore, SqlByteStore, create_byte_store
from .store import RouteCacheStore, DEFAULT_CACHE_KEY

__all__ = [
    "ByteStore",
    "FileByteStore",
    "SqlByteStore",
    "create_byte_store",
    "RouteCacheStore",
    "DEFAULT_CACHE_KEY",
]
