"""
Core type definitions and protocols for lib.cache, dood!

This module contains the type variables, the key generator protocol and the
cache entry record shared by every cache namespace.
"""

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

# Type variables for generic cache operations, dood!
K = TypeVar("K")  # Key type - any object a KeyGenerator understands
V = TypeVar("V")  # Value type - can be any type
T = TypeVar("T", contravariant=True)  # Generic object type for key generators


class KeyGenerator(Protocol[T]):
    """
    Protocol for generating cache keys from objects, dood!

    Different namespaces key their entries differently: weather payloads are
    keyed by a quantized coordinate, summaries by the described conditions.
    A KeyGenerator hides that choice from the cache implementation.

    Example:
        >>> generator = CoordinateKeyGenerator()
        >>> generator.generateKey((51.50074, -0.12458))
        '51.5007,-0.1246'
    """

    def generateKey(self, obj: T) -> str:
        """
        Generate string cache key from object, dood!

        Args:
            obj: The object to convert to a cache key

        Returns:
            str: A string representation suitable for use as a cache key
        """
        ...


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[V]):
    """
    Single cached value with its creation time.

    An entry is valid while ``now - createdAt < ttl``.

    Attributes:
        payload: Cached value
        createdAt: Clock reading (seconds) when the value was stored
    """

    payload: V
    createdAt: float

    def isExpired(self, now: float, ttl: float) -> bool:
        """Check if entry age reached the TTL"""
        return now - self.createdAt >= ttl
