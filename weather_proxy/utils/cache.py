import threading
import time
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from weather_proxy.errors import ConfigurationError


class CacheEntry(NamedTuple):
    key: str
    payload: Any
    inserted_at: float


def cache_key(city_id) -> str:
    """Cache key for a city's current weather"""
    return f"weather_{city_id}"


class CacheStore:
    """
    Thread-safe in-memory mapping of cache key to CacheEntry.

    Freshness is not checked here: `get` returns stale entries as well,
    deciding what is usable is the job of FreshnessPolicy.

    Args:
        clock: Callable returning the current time in seconds
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, payload: Any, now: Optional[float] = None) -> CacheEntry:
        """Insert or replace the entry for `key`, stamped with the current time"""
        entry = CacheEntry(key, payload, self._clock() if now is None else now)
        with self._lock:
            self._entries[key] = entry
        return entry

    def delete(self, key: str, expected: Optional[CacheEntry] = None) -> bool:
        """
        Remove the entry for `key` if present.

        With `expected`, the entry is only removed while it is still that
        exact entry, so an overwrite that happened in between survives.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            current = self._entries.get(key)
            if current is None:
                return False
            if expected is not None and current is not expected:
                return False
            del self._entries[key]
            return True

    def clear_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def items(self) -> List[Tuple[str, CacheEntry]]:
        """Snapshot of the stored entries"""
        with self._lock:
            return list(self._entries.items())


class FreshnessPolicy:
    """
    Fixed time-to-live check for cache entries.

    An entry inserted at t0 is fresh while `now - t0 < ttl`; at exactly
    `ttl` seconds old it is expired.
    """

    def __init__(self, ttl_seconds: float):
        if ttl_seconds is None or ttl_seconds <= 0:
            raise ConfigurationError(f"Cache TTL must be positive, got {ttl_seconds!r}")
        self._ttl = ttl_seconds

    @property
    def ttl(self) -> float:
        return self._ttl

    def is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.inserted_at < self._ttl

    def is_expired(self, entry: CacheEntry, now: float) -> bool:
        return not self.is_fresh(entry, now)
