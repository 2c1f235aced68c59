"""
Weather panel state shared by both map surfaces
"""

import logging
from typing import Optional, Tuple

from internal.services.summary import SummaryResolver
from lib.openweathermap import OpenWeatherMapClient, WeatherFetchError, WeatherPayload

logger = logging.getLogger(__name__)


class WeatherPanel:
    """
    Surface-agnostic weather panel.

    Every showWeatherAt() call gets a new generation number. A result that
    arrives after a newer request has started is dropped, so the panel always
    shows the most recent request whatever order the network completes in.
    """

    def __init__(self, weatherClient: OpenWeatherMapClient, summaryResolver: SummaryResolver):
        self.weatherClient = weatherClient
        self.summaryResolver = summaryResolver

        self.generation = 0
        self.isOpen = False
        self.isLoading = False
        self.location: Optional[Tuple[float, float]] = None
        self.payload: Optional[WeatherPayload] = None
        self.error: Optional[str] = None
        self.summary: Optional[str] = None
        self.summaryLoading = False

    def _isCurrent(self, generation: int) -> bool:
        return generation == self.generation

    async def showWeatherAt(self, lat: float, lon: float) -> bool:
        """Fetch and show weather for (lat, lon), returns False if the result was superseded"""
        self.generation += 1
        generation = self.generation

        self.isOpen = True
        self.isLoading = False
        self.location = (lat, lon)
        self.payload = None
        self.error = None
        self.summary = None
        self.summaryLoading = False

        # Cached weather is shown right away, loading state is only for network fetches
        payload = await self.weatherClient.getCached(lat, lon)
        if not self._isCurrent(generation):
            return False

        if payload is None:
            self.isLoading = True
            try:
                payload = await self.weatherClient.fetchWeather(lat, lon)
            except WeatherFetchError as e:
                if not self._isCurrent(generation):
                    logger.debug(f"Dropping stale fetch error for {lat},{lon}: {e}")
                    return False
                logger.warning(f"Weather fetch failed for {lat},{lon}: {e}")
                self.isLoading = False
                self.error = str(e)
                return True

            if not self._isCurrent(generation):
                logger.debug(f"Dropping stale weather for {lat},{lon} (generation {generation} < {self.generation})")
                return False

        self.payload = payload
        self.isLoading = False
        self.summaryLoading = True

        summary = await self.summaryResolver.resolve(payload)
        if not self._isCurrent(generation):
            logger.debug(f"Dropping stale summary for {lat},{lon}")
            return False

        self.summary = summary
        self.summaryLoading = False
        return True

    async def retry(self) -> bool:
        """Repeat the last request"""
        if self.location is None:
            return False
        lat, lon = self.location
        return await self.showWeatherAt(lat, lon)

    def close(self) -> None:
        """Hide the panel, any in-flight result will be discarded"""
        self.generation += 1
        self.isOpen = False
        self.isLoading = False
        self.location = None
        self.payload = None
        self.error = None
        self.summary = None
        self.summaryLoading = False
