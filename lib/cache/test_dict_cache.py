"""
Tests for DictCache implementation, dood!

This test suite validates:
- Basic cache operations (get, set, clear)
- TTL expiration boundaries
- Lazy eviction and sweep()
- Coordinate key quantization
- Concurrent access
- Cache statistics
"""

import asyncio

import pytest

from lib.cache.dict_cache import DictCache
from lib.cache.key_generator import CoordinateKeyGenerator, StringKeyGenerator, SummaryKeyGenerator, quantizeCoordinate


class FakeClock:
    """Manually advanced clock, dood!"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return DictCache[str, str](keyGenerator=StringKeyGenerator(), defaultTtl=300, name="test", timeFunc=clock)


class TestDictCacheBasic:
    """Test basic cache operations, dood!"""

    def test_cache_initialization(self):
        """Test cache initialization with default parameters, dood!"""
        cache = DictCache[str, str](keyGenerator=StringKeyGenerator())

        assert cache._keyGenerator is not None
        assert cache._defaultTtl == 3600
        assert cache._lock is not None
        assert cache.name == "default"

    @pytest.mark.asyncio
    async def test_basic_set_and_get(self, cache):
        """Test basic set and get operations, dood!"""
        result = await cache.set("key1", "value1")
        assert result is True

        value = await cache.get("key1")
        assert value == "value1"

    @pytest.mark.asyncio
    async def test_get_nonexistent_key(self, cache):
        """Test getting a non-existent key returns None, dood!"""
        assert await cache.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_last_write_wins(self, cache):
        """Second set on the same key replaces the first"""
        await cache.set("key1", "first")
        await cache.set("key1", "second")

        assert await cache.get("key1") == "second"
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_clear_cache(self, cache):
        """Test clearing the cache, dood!"""
        await cache.set("key1", "value1")
        await cache.set("key2", "value2")

        cache.clear()

        assert await cache.get("key1") is None
        assert await cache.get("key2") is None

    @pytest.mark.asyncio
    async def test_get_stats(self, cache):
        """Test cache statistics, dood!"""
        stats = cache.getStats()
        assert stats["entries"] == 0
        assert stats["defaultTtl"] == 300
        assert stats["name"] == "test"
        assert stats["threadSafe"] is True

        await cache.set("key1", "value1")
        assert cache.getStats()["entries"] == 1

    @pytest.mark.asyncio
    async def test_key_generator_exception_handling(self, cache):
        """Bad keys are a miss / failed set, never an exception"""
        assert await cache.set(123, "value") is False  # type: ignore[arg-type]
        assert await cache.get(123) is None  # type: ignore[arg-type]


class TestDictCacheTTL:
    """Test TTL (Time To Live) functionality, dood!"""

    @pytest.mark.asyncio
    async def test_value_valid_for_whole_ttl_window(self, cache, clock):
        """Entry is returned for every query time in [t, t + ttl)"""
        await cache.set("key1", "value1")

        for elapsed in (0, 1, 150, 299, 299.999):
            clock.now = 1000.0 + elapsed
            assert await cache.get("key1") == "value1", f"expected hit at +{elapsed}s"

    @pytest.mark.asyncio
    async def test_value_expires_at_ttl(self, cache, clock):
        """Entry is a miss for every query time >= t + ttl"""
        await cache.set("key1", "value1")

        clock.advance(300)
        assert await cache.get("key1") is None

        # Stale get also evicts the entry
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_custom_ttl_per_get(self, cache, clock):
        """TTL override applies to a single lookup, dood!"""
        await cache.set("key1", "value1")
        clock.advance(60)

        assert await cache.get("key1") == "value1"
        assert await cache.get("key1", ttl=30) is None

    @pytest.mark.asyncio
    async def test_rewrite_refreshes_timestamp(self, cache, clock):
        await cache.set("key1", "value1")
        clock.advance(250)
        await cache.set("key1", "value2")
        clock.advance(250)

        assert await cache.get("key1") == "value2"

    @pytest.mark.asyncio
    async def test_negative_ttl_falls_back_to_default(self, cache, clock):
        await cache.set("key1", "value1")
        clock.advance(10)

        assert await cache.get("key1", ttl=-1) == "value1"


class TestDictCacheSweep:
    """Test bulk eviction, dood!"""

    @pytest.mark.asyncio
    async def test_sweep_evicts_only_stale_entries(self, cache, clock):
        await cache.set("old1", "a")
        await cache.set("old2", "b")
        clock.advance(200)
        await cache.set("fresh", "c")
        clock.advance(100)

        evicted = cache.sweep()

        assert evicted == 2
        assert len(cache) == 1
        assert await cache.get("fresh") == "c"

    @pytest.mark.asyncio
    async def test_sweep_on_empty_cache(self, cache):
        assert cache.sweep() == 0


class TestCoordinateKeys:
    """Test coordinate quantization, dood!"""

    def test_quantize_coordinate(self):
        assert quantizeCoordinate(51.5007) == "51.5007"
        assert quantizeCoordinate(51.50074) == "51.5007"
        assert quantizeCoordinate(-0.12458) == "-0.1246"
        assert quantizeCoordinate(-0.00001) == "0.0000"
        assert quantizeCoordinate(51) == "51.0000"

    def test_quantize_ties_round_half_up(self):
        """Ties go away from zero even when the float sits just below the tie"""
        assert quantizeCoordinate(51.50005) == "51.5001"
        assert quantizeCoordinate(-0.12345) == "-0.1235"
        assert quantizeCoordinate(0.00005) == "0.0001"
        assert quantizeCoordinate(-0.00005) == "-0.0001"
        assert quantizeCoordinate(1.00015, precision=4) == "1.0002"

    def test_coordinate_key_generator(self):
        generator = CoordinateKeyGenerator()

        assert generator.generateKey((51.5007, -0.1246)) == "51.5007,-0.1246"
        assert generator.generateKey((51.50074, -0.12458)) == "51.5007,-0.1246"

    @pytest.mark.asyncio
    async def test_nearby_coordinates_share_entry(self, clock):
        cache = DictCache[tuple, str](keyGenerator=CoordinateKeyGenerator(), defaultTtl=300, timeFunc=clock)

        await cache.set((51.5007, -0.1246), "london")

        assert await cache.get((51.50074, -0.12458)) == "london"
        assert await cache.get((51.5008, -0.1246)) is None


class TestSummaryKeys:
    """Test condition-based summary keys, dood!"""

    def test_summary_key_format(self):
        assert SummaryKeyGenerator().generateKey(("London", 18, "clear")) == "London|18|clear"

    def test_temperature_rounds_half_up(self):
        generator = SummaryKeyGenerator()

        assert generator.generateKey(("London", 17.6, "clear")) == "London|18|clear"
        assert generator.generateKey(("London", 18.4, "clear")) == "London|18|clear"
        assert generator.generateKey(("London", 18.5, "clear")) == "London|19|clear"
        assert generator.generateKey(("Oslo", -2.5, "snow")) == "Oslo|-2|snow"


class TestDictCacheConcurrency:
    """Test concurrent access, dood!"""

    @pytest.mark.asyncio
    async def test_concurrent_access(self, cache):
        async def writer(i: int):
            await cache.set(f"key{i % 10}", f"value{i}")
            return await cache.get(f"key{i % 10}")

        results = await asyncio.gather(*[writer(i) for i in range(100)])

        assert all(result is not None for result in results)
        assert len(cache) == 10
