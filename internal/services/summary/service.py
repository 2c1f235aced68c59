"""Summary Resolver: first-success walk over summary providers with caching, dood!

Summary text is non-critical, so resolution never raises. Results are cached
by conditions (location, rounded temperature, condition text) rather than by
coordinate, letting nearby points that read the same share one summary.
"""

import logging
from typing import Optional, Sequence

from lib.cache import CacheInterface, NullCache, SummaryKeyGenerator
from lib.openweathermap.models import WeatherPayload

from .types import SummaryInput, SummaryProviderError, SummaryProviderInterface

logger = logging.getLogger(__name__)

UNAVAILABLE_SUMMARY = "Weather summary currently unavailable."
DEFAULT_SUMMARY_TTL = 600  # 10 minutes


class SummaryResolver:
    """Resolve summary text through an ordered list of providers, dood!

    Attributes:
        providers: Providers in priority order
        cache: Summary text namespace keyed by "location|temp|condition"
        ttl: Summary cache TTL in seconds
    """

    def __init__(
        self,
        providers: Sequence[SummaryProviderInterface],
        cache: Optional[CacheInterface[str, str]] = None,
        ttl: int = DEFAULT_SUMMARY_TTL,
    ):
        self.providers = list(providers)
        self.cache: CacheInterface[str, str] = cache if cache is not None else NullCache()
        self.ttl = ttl
        self._keyGenerator = SummaryKeyGenerator()

    def getCacheKey(self, data: SummaryInput) -> str:
        return self._keyGenerator.generateKey((data.location, data.temperature, data.condition))

    async def resolve(self, payload: WeatherPayload) -> str:
        """Summary for the given payload, never raises"""
        return await self.resolveInput(SummaryInput.fromPayload(payload))

    async def resolveInput(self, data: SummaryInput) -> str:
        cacheKey = self.getCacheKey(data)

        try:
            cached = await self.cache.get(cacheKey, self.ttl)
            if cached is not None:
                logger.debug(f"Cache hit for summary: {cacheKey}")
                return cached
        except Exception as e:
            logger.warning(f"Cache error for summary {cacheKey}: {e}")

        for provider in self.providers:
            try:
                summary = await provider.generateSummary(data)
            except SummaryProviderError as e:
                logger.warning(f"Summary provider failed, trying next: {e}")
                continue
            except Exception as e:
                logger.error(f"Unexpected error in summary provider {provider.name}: {e}")
                continue

            if not summary:
                logger.warning(f"Summary provider {provider.name} returned empty text, trying next")
                continue

            try:
                await self.cache.set(cacheKey, summary)
            except Exception as e:
                logger.warning(f"Failed to cache summary {cacheKey}: {e}")

            logger.debug(f"Summary for {cacheKey} generated by {provider.name}")
            return summary

        logger.error(f"All summary providers failed for {cacheKey}")
        return UNAVAILABLE_SUMMARY
