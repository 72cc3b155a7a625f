"""
Byte store backends for the route cache.

A byte store maps a key to an opaque blob. Writes must be atomic:
a crash mid-write leaves either the old or the new blob, never a mix.

Backends:
- FileByteStore: one file per key in a directory (temp file + rename)
- SqlByteStore: one row per key in a SQLAlchemy table (single transaction)
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base, CacheEntry

logger = logging.getLogger(__name__)


class ByteStore(ABC):
    """Key/bytes storage with atomic writes."""

    @abstractmethod
    def read_bytes(self, key: str) -> Optional[bytes]:
        """Read a blob, or None if the key was never written."""
        ...

    @abstractmethod
    def write_bytes_atomic(self, key: str, data: bytes) -> None:
        """Replace the blob stored under key."""
        ...


# =============================================================================
# File Backend
# =============================================================================

class FileByteStore(ByteStore):
    """Stores each key as a file inside one directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        if not key or os.sep in key or (os.altsep and os.altsep in key) or key in (".", ".."):
            raise ValueError(f"Invalid cache key: {key!r}")
        return self.directory / key

    def read_bytes(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def write_bytes_atomic(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        # Temp file lives next to the target so os.replace stays on one filesystem
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

        logger.debug(f"Wrote {len(data)} bytes to {path}")


# =============================================================================
# SQL Backend
# =============================================================================

class SqlByteStore(ByteStore):
    """Stores each key as a row of the cache_entries table."""

    def __init__(self, database_url: str):
        if database_url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                # Share the single in-memory database across worker threads
                kwargs["poolclass"] = StaticPool
            self.engine = create_engine(database_url, **kwargs)
        else:
            self.engine = create_engine(database_url)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(bind=self.engine)

    def read_bytes(self, key: str) -> Optional[bytes]:
        with self.SessionLocal() as db:
            entry = db.get(CacheEntry, key)
            return bytes(entry.payload) if entry else None

    def write_bytes_atomic(self, key: str, data: bytes) -> None:
        with self.SessionLocal() as db:
            with db.begin():
                db.merge(CacheEntry(key=key, payload=data, updated_at=datetime.utcnow()))

        logger.debug(f"Wrote {len(data)} bytes to cache entry {key}")

    def dispose(self) -> None:
        """Close pooled connections."""
        self.engine.dispose()


def create_byte_store(backend: str, cache_dir: Path | str, database_url: str) -> ByteStore:
    """
    Build the configured byte store.

    Args:
        backend: 'file' or 'sql'
        cache_dir: Directory for the file backend
        database_url: SQLAlchemy URL for the sql backend
    """
    if backend == "sql":
        logger.info(f"Route cache: sql backend ({database_url})")
        return SqlByteStore(database_url)
    if backend == "file":
        logger.info(f"Route cache: file backend ({cache_dir})")
        return FileByteStore(cache_dir)
    raise ValueError(f"Unknown cache backend: {backend}")
