"""
Abstract cache interface for lib.cache, dood!

This module defines the generic CacheInterface that all cache implementations
must follow. Every implementation is one cache namespace with its own TTL.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional

from .types import K, V


class CacheInterface(ABC, Generic[K, V]):
    """
    Generic cache interface for any key-value namespace, dood!

    Type Parameters:
        K: The key type (converted to string by the namespace's KeyGenerator)
        V: The value type (any type)

    Example:
        >>> cache = DictCache[str, dict](keyGenerator=StringKeyGenerator(), defaultTtl=300)
        >>> await cache.set("51.5007,-0.1246", {"temp": 18})
        >>> payload = await cache.get("51.5007,-0.1246")
        >>> evicted = cache.sweep()
    """

    @abstractmethod
    async def get(self, key: K, ttl: Optional[int] = None) -> Optional[V]:
        """
        Get cached value by key, dood!

        Returns None both when the key is absent and when the stored entry
        is older than the TTL. A stale entry is removed as a side effect.

        Args:
            key: The cache key to retrieve
            ttl: Optional TTL override for this lookup in seconds.
                 If None, uses the namespace's default TTL.

        Returns:
            Optional[V]: The cached value if found and not expired, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: K, value: V) -> bool:
        """
        Store value in cache with the current timestamp, dood!

        Concurrent writers to the same key follow last-write-wins.

        Args:
            key: The cache key to store the value under
            value: The value to cache

        Returns:
            bool: True if the value was successfully stored, False otherwise
        """
        pass

    @abstractmethod
    def sweep(self) -> int:
        """
        Evict every entry older than the namespace TTL.

        Returns:
            int: Number of evicted entries
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all cached data, dood!"""
        pass

    @abstractmethod
    def getStats(self) -> Dict[str, Any]:
        """
        Get cache statistics, dood!

        Returns:
            Dict[str, Any]: Implementation-specific statistics
                            (entry count, default TTL, ...)
        """
        pass
