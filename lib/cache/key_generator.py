"""
Built-in key generator implementations for lib.cache, dood!

Available Generators:
    - StringKeyGenerator: Pass-through for string keys
    - CoordinateKeyGenerator: Quantized "lat,lon" keys for geographic lookups
    - SummaryKeyGenerator: "location|temp|condition" keys for summary text
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Tuple

from .types import KeyGenerator

# 4 decimal places is ~11m at the equator
COORDINATE_PRECISION = 4


def quantizeCoordinate(value: float, precision: int = COORDINATE_PRECISION) -> str:
    """
    Format coordinate with fixed precision, dood!

    Rounds half-up (ties away from zero) on the decimal text of the value,
    so 51.50005 becomes 51.5001 regardless of its binary float error.
    Negative zero is folded into zero so that -0.00001 and 0.00001
    produce the same key.
    """
    quantized = Decimal(repr(float(value))).quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)
    if quantized.is_zero():
        quantized = quantized.copy_abs()
    return f"{quantized:f}"


class StringKeyGenerator(KeyGenerator[str]):
    """
    Pass-through key generator for string keys, dood!

    Example:
        >>> generator = StringKeyGenerator()
        >>> generator.generateKey("user:123")
        'user:123'
    """

    def generateKey(self, obj: str) -> str:
        """
        Generate cache key from string input, dood!

        Raises:
            TypeError: If obj is not a string
        """
        if not isinstance(obj, str):
            raise TypeError(f"StringKeyGenerator expects string input, got {type(obj).__name__}, dood!")

        return obj


class CoordinateKeyGenerator(KeyGenerator[Tuple[float, float]]):
    """
    Key generator for (lat, lon) pairs, dood!

    Both values are quantized to a fixed number of decimals, so two raw
    coordinates that quantize identically share one cache entry.

    Example:
        >>> generator = CoordinateKeyGenerator()
        >>> generator.generateKey((51.50074, -0.12458))
        '51.5007,-0.1246'
    """

    __slots__ = ("precision",)

    def __init__(self, precision: int = COORDINATE_PRECISION):
        self.precision = precision

    def generateKey(self, obj: Tuple[float, float]) -> str:
        lat, lon = obj
        return f"{quantizeCoordinate(lat, self.precision)},{quantizeCoordinate(lon, self.precision)}"


class SummaryKeyGenerator(KeyGenerator[Tuple[str, float, str]]):
    """
    Key generator for (location, temperature, condition) triples, dood!

    Temperature is rounded half-up to whole degrees, so the key describes
    conditions rather than a coordinate and nearby points reuse one entry.

    Example:
        >>> SummaryKeyGenerator().generateKey(("London", 18.2, "clear"))
        'London|18|clear'
    """

    def generateKey(self, obj: Tuple[str, float, str]) -> str:
        location, temperature, condition = obj
        return f"{location}|{math.floor(float(temperature) + 0.5)}|{condition}"
