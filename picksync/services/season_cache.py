import threading
from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class SeasonCacheEntry:
    year: int
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


class SeasonCache:
    """
    In-process cache for the resolved current season year.

    Owned by a SeasonResolver instance (not module state). Reads and writes are
    guarded by a lock; callers may observe a value that expired a moment ago.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entry: SeasonCacheEntry | None = None

    def get(self, now: datetime) -> int | None:
        with self._lock:
            entry = self._entry
        if entry is None or not entry.is_valid(now):
            return None
        return entry.year

    def set(self, year: int, ttl: timedelta, now: datetime) -> SeasonCacheEntry:
        entry = SeasonCacheEntry(year=year, expires_at=now + ttl)
        with self._lock:
            self._entry = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entry = None

    @property
    def entry(self) -> SeasonCacheEntry | None:
        with self._lock:
            return self._entry
