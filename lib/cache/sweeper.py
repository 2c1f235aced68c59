"""
Periodic sweeper for cache namespaces, dood!

Lazy eviction in get() only removes entries that are asked for again, so a
namespace keyed by many distinct coordinates would grow without bound. The
sweeper bounds memory independently of access patterns by calling sweep() on
every registered namespace on a fixed interval.

Example:
    >>> sweeper = CacheSweeper(interval=900)
    >>> sweeper.register(weatherCache)
    >>> sweeper.register(summaryCache)
    >>> sweeper.start()
    >>> ...
    >>> await sweeper.stop()
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from .interface import CacheInterface

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL = 15 * 60


class CacheSweeper:
    """Runs sweep() on registered caches in a background asyncio task"""

    def __init__(self, interval: float = DEFAULT_SWEEP_INTERVAL):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self._caches: List[CacheInterface[Any, Any]] = []
        self._task: Optional[asyncio.Task] = None

    def register(self, cache: CacheInterface[Any, Any]) -> None:
        """Add cache namespace to sweep list"""
        if cache not in self._caches:
            self._caches.append(cache)

    def sweepAll(self) -> Dict[str, int]:
        """
        Sweep every registered namespace once.

        Returns:
            Mapping of namespace name to number of evicted entries
        """
        result: Dict[str, int] = {}
        for cache in self._caches:
            name = str(cache.getStats().get("name", type(cache).__name__))
            try:
                result[name] = cache.sweep()
            except Exception as e:
                logger.error(f"Failed to sweep cache {name}: {e}")
                result[name] = 0

        evicted = sum(result.values())
        if evicted:
            logger.info(f"Cache sweep evicted {evicted} entries: {result}")
        return result

    @property
    def isRunning(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start background sweeping, no-op if already running"""
        if self.isRunning:
            logger.warning("CacheSweeper already running")
            return
        self._task = asyncio.create_task(self._sweepLoop())
        logger.info(f"CacheSweeper started, interval: {self.interval}s, dood!")

    async def stop(self) -> None:
        """Stop background sweeping"""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("CacheSweeper stopped")

    async def _sweepLoop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.sweepAll()
