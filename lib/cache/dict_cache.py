"""
Dictionary-based cache implementation for lib.cache, dood!

One DictCache instance is one cache namespace: a dict of CacheEntry records
with a single default TTL. TTL is the only eviction policy, expired entries
are dropped lazily on get() and in bulk by sweep().
"""

import logging
import time
from threading import RLock
from typing import Any, Callable, Dict, Optional

from .interface import CacheInterface
from .types import CacheEntry, K, KeyGenerator, V

logger = logging.getLogger(__name__)


class DictCache(CacheInterface[K, V]):
    """
    In-memory TTL cache namespace, dood!

    Each namespace has its own lock, so concurrent get/set on one namespace
    never block another namespace.

    Example:
        >>> weatherCache = DictCache[Tuple[float, float], WeatherPayload](
        ...     keyGenerator=CoordinateKeyGenerator(),
        ...     defaultTtl=300,
        ...     name="weather",
        ... )
    """

    def __init__(
        self,
        keyGenerator: KeyGenerator[K],
        defaultTtl: int = 3600,
        name: str = "default",
        timeFunc: Callable[[], float] = time.time,
    ):
        """
        Initialize cache namespace

        Args:
            keyGenerator: Converts keys to strings
            defaultTtl: Default TTL in seconds (default: 1 hour)
            name: Namespace name used in logs and stats
            timeFunc: Clock returning seconds, injectable for tests
        """
        self._keyGenerator = keyGenerator
        self._defaultTtl = defaultTtl
        self._timeFunc = timeFunc
        self._entries: Dict[str, CacheEntry[V]] = {}
        self._lock = RLock()
        self.name = name

    def _effectiveTtl(self, ttl: Optional[int]) -> int:
        if ttl is None or ttl < 0:
            return self._defaultTtl
        return ttl

    async def get(self, key: K, ttl: Optional[int] = None) -> Optional[V]:
        try:
            cacheKey = self._keyGenerator.generateKey(key)
        except Exception as e:
            logger.error(f"[{self.name}] Failed to generate cache key for {key!r}: {e}")
            return None

        effectiveTtl = self._effectiveTtl(ttl)
        with self._lock:
            entry = self._entries.get(cacheKey)
            if entry is None:
                logger.debug(f"[{self.name}] Cache miss: {cacheKey}")
                return None

            if entry.isExpired(self._timeFunc(), effectiveTtl):
                del self._entries[cacheKey]
                logger.debug(f"[{self.name}] Removed expired entry: {cacheKey}")
                return None

            logger.debug(f"[{self.name}] Cache hit: {cacheKey}")
            return entry.payload

    async def set(self, key: K, value: V) -> bool:
        try:
            cacheKey = self._keyGenerator.generateKey(key)
        except Exception as e:
            logger.error(f"[{self.name}] Failed to generate cache key for {key!r}: {e}")
            return False

        with self._lock:
            self._entries[cacheKey] = CacheEntry(payload=value, createdAt=self._timeFunc())
        logger.debug(f"[{self.name}] Stored entry: {cacheKey}")
        return True

    def sweep(self) -> int:
        now = self._timeFunc()
        with self._lock:
            expiredKeys = [
                cacheKey for cacheKey, entry in self._entries.items() if entry.isExpired(now, self._defaultTtl)
            ]
            for cacheKey in expiredKeys:
                del self._entries[cacheKey]

        if expiredKeys:
            logger.debug(f"[{self.name}] Swept {len(expiredKeys)} expired entries, dood!")
        return len(expiredKeys)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.debug(f"[{self.name}] Cleared all cache data")

    def getStats(self) -> Dict[str, Any]:
        with self._lock:
            entries = len(self._entries)
        return {
            "name": self.name,
            "entries": entries,
            "defaultTtl": self._defaultTtl,
            "threadSafe": True,
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
