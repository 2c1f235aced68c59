"""
lib.cache - In-memory TTL cache library, dood!

Core Components:
- CacheInterface: Abstract base class for all cache namespaces
- KeyGenerator: Protocol for generating cache keys from objects
- DictCache: Lock-guarded dictionary namespace with TTL expiry
- NullCache: No-op cache for clients constructed without one
- CacheSweeper: Periodic eviction of stale entries

Example Usage:
    >>> from lib.cache import CoordinateKeyGenerator, DictCache
    >>>
    >>> cache = DictCache[Tuple[float, float], dict](
    ...     keyGenerator=CoordinateKeyGenerator(),
    ...     defaultTtl=300,
    ...     name="weather",
    ... )
    >>> await cache.set((51.5007, -0.1246), {"temp": 18})
    >>> await cache.get((51.50074, -0.12458))  # same quantized key
    {'temp': 18}
"""

from .dict_cache import DictCache
from .interface import CacheInterface
from .key_generator import (
    COORDINATE_PRECISION,
    CoordinateKeyGenerator,
    StringKeyGenerator,
    SummaryKeyGenerator,
    quantizeCoordinate,
)
from .null_cache import NullCache
from .sweeper import DEFAULT_SWEEP_INTERVAL, CacheSweeper
from .types import CacheEntry, K, KeyGenerator, T, V

__all__ = [
    # Core types
    "KeyGenerator",
    "CacheEntry",
    "K",
    "V",
    "T",
    # Interfaces
    "CacheInterface",
    # Implementations
    "DictCache",
    "NullCache",
    "CacheSweeper",
    "DEFAULT_SWEEP_INTERVAL",
    # Key generators
    "StringKeyGenerator",
    "CoordinateKeyGenerator",
    "SummaryKeyGenerator",
    "COORDINATE_PRECISION",
    "quantizeCoordinate",
]
