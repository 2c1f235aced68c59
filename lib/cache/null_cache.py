"""
Null cache implementation for lib.cache, dood!

No-op namespace that never stores anything. Clients fall back to it when
constructed without a cache.
"""

from typing import Any, Dict, Optional

from .interface import CacheInterface
from .types import K, V


class NullCache(CacheInterface[K, V]):
    """No-op cache that never stores anything, dood!"""

    async def get(self, key: K, ttl: Optional[int] = None) -> Optional[V]:
        """Always a miss"""
        return None

    async def set(self, key: K, value: V) -> bool:
        """Pretend to succeed"""
        return True

    def sweep(self) -> int:
        return 0

    def clear(self) -> None:
        pass

    def getStats(self) -> Dict[str, Any]:
        return {
            "name": "null",
            "entries": 0,
            "enabled": False,
        }
