"""
Cache-aware access to the weather provider.

A fresh cache entry is served without touching the network. On a miss the
fetcher is called and a successful result is written back; failures are
raised and never stored. Concurrent misses for the same city share a single
upstream call.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List

from weather_proxy.errors import FetchError
from weather_proxy.utils.cache import CacheStore, FreshnessPolicy, cache_key

logger = logging.getLogger(__name__)

MAX_PARALLEL_FETCHES = 8


class _PendingFetch:
    """Result slot shared by every caller waiting on one upstream fetch"""

    def __init__(self):
        self.done = threading.Event()
        self.payload = None
        self.error = None
        self.succeeded = False
        self.waiters = 0


class WeatherService:
    """
    Orchestrates cache lookups and upstream fetches.

    Args:
        fetcher: Object with a `fetch(city_id)` method
        store: Cache store shared with the janitor
        policy: Freshness policy deciding hit or miss
        clock: Callable returning the current time in seconds
    """

    def __init__(self, fetcher, store: CacheStore, policy: FreshnessPolicy,
                 clock: Callable[[], float] = time.time):
        self.fetcher = fetcher
        self.store = store
        self.policy = policy
        self._clock = clock
        self._pending: Dict[str, _PendingFetch] = {}
        self._pending_lock = threading.Lock()

    def _lookup(self, key: str):
        entry = self.store.get(key)
        if entry is not None and self.policy.is_fresh(entry, self._clock()):
            return entry
        return None

    def get_weather(self, city_id: str) -> Any:
        """
        Weather payload for a city, from cache when fresh.

        Raises:
            FetchError: If the provider call fails
        """
        key = cache_key(city_id)

        entry = self._lookup(key)
        if entry is not None:
            logger.debug(f"Cache hit for {key}")
            return entry.payload

        with self._pending_lock:
            pending = self._pending.get(key)
            leader = pending is None
            if leader:
                pending = _PendingFetch()
                self._pending[key] = pending
            else:
                pending.waiters += 1

        if not leader:
            logger.debug(f"Waiting on in-flight fetch for {key}")
            pending.done.wait()
            if pending.error is not None:
                raise pending.error
            if not pending.succeeded:
                raise FetchError(f"In-flight fetch for city {city_id} was abandoned",
                                 city_id=city_id)
            return pending.payload

        try:
            # A fetch for this key may have completed since the first lookup
            entry = self._lookup(key)
            if entry is not None:
                logger.debug(f"Cache hit for {key}")
                pending.payload = entry.payload
                pending.succeeded = True
                return entry.payload

            logger.debug(f"Cache miss for {key}")
            pending.payload = self._fetch(city_id)
            self.store.put(key, pending.payload)
            pending.succeeded = True
            return pending.payload
        except FetchError as e:
            pending.error = e
            raise
        finally:
            with self._pending_lock:
                self._pending.pop(key, None)
            pending.done.set()

    def _fetch(self, city_id: str) -> Any:
        try:
            return self.fetcher.fetch(city_id)
        except FetchError:
            raise
        except Exception as e:
            logger.error(f"Error fetching weather for city {city_id}: {e}")
            raise FetchError(f"Error fetching weather for city {city_id}: {e}",
                             city_id=city_id) from e

    def get_weather_many(self, city_ids: List[str]) -> List[Any]:
        """
        Payloads for several cities, in the order given.

        Cities are fetched in parallel; the first failure is raised and the
        whole call fails.
        """
        if not city_ids:
            return []
        workers = min(MAX_PARALLEL_FETCHES, len(city_ids))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.get_weather, city_ids))

    def clear_cache(self) -> None:
        self.store.clear_all()
        logger.info("Cache cleared")

    def cache_size(self) -> int:
        return self.store.size()

    def in_flight(self) -> int:
        """Number of upstream fetches currently running"""
        with self._pending_lock:
            return len(self._pending)

    def waiting_on(self, city_id: str) -> int:
        """Callers blocked on the in-flight fetch for a city"""
        with self._pending_lock:
            pending = self._pending.get(cache_key(city_id))
            return pending.waiters if pending is not None else 0
