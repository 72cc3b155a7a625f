"""
Cache entry model.

Key/bytes table used by the SQL cache backend.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, LargeBinary
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CacheEntry(Base):
    """One cached blob, addressed by key."""

    __tablename__ = "cache_entries"

    key = Column(String(255), primary_key=True)
    payload = Column(LargeBinary, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<CacheEntry {self.key} ({len(self.payload or b'')} bytes)>"
