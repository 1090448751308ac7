import logging
import time
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from weather_proxy.errors import ConfigurationError
from weather_proxy.utils.cache import CacheStore, FreshnessPolicy

logger = logging.getLogger(__name__)

JOB_ID = 'cache-janitor'


class CacheJanitor:
    """
    Periodically evicts expired entries from the cache store.

    The read path never deletes stale entries, so without the janitor they
    would stay in memory until overwritten or cleared.

    Args:
        store: Cache store to sweep
        policy: Freshness policy shared with the weather service
        interval_seconds: Period between sweeps
        clock: Callable returning the current time in seconds
    """

    def __init__(self, store: CacheStore, policy: FreshnessPolicy,
                 interval_seconds: float = 60, clock: Callable[[], float] = time.time):
        if interval_seconds is None or interval_seconds <= 0:
            raise ConfigurationError(
                f"Sweep interval must be positive, got {interval_seconds!r}")
        self.store = store
        self.policy = policy
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._scheduler: Optional[BackgroundScheduler] = None

    def sweep(self, now: Optional[float] = None) -> int:
        """
        Evict every entry that is at least TTL old at `now`.

        Malformed entries are logged and skipped.

        Returns:
            Number of entries removed
        """
        if now is None:
            now = self._clock()
        deleted = 0

        for key, entry in self.store.items():
            try:
                expired = self.policy.is_expired(entry, now)
            except (TypeError, AttributeError, ValueError) as e:
                logger.error(f"Skipping malformed cache entry {key}: {e}")
                continue

            if expired and self.store.delete(key, expected=entry):
                deleted += 1
                logger.info(f"Removed expired cache entry: {key}")

        if deleted:
            logger.info(f"Cleaned {deleted} expired cache entries")
        return deleted

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Schedule the sweep on a background thread"""
        if self.running:
            return
        self._scheduler = BackgroundScheduler(daemon=True)
        self._scheduler.add_job(
            self.sweep, 'interval',
            seconds=self.interval_seconds,
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info(f"Cache janitor started, sweeping every {self.interval_seconds}s")

    def shutdown(self) -> None:
        if not self.running:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Cache janitor stopped")
