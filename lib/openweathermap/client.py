"""
OpenWeatherMap Async Client

This module provides the main OpenWeatherMapClient class for fetching current
conditions, forecast and air quality from the OpenWeatherMap 2.5 API with
write-through caching.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import httpx

from lib.cache import CacheInterface, CoordinateKeyGenerator, NullCache

from .exceptions import WeatherFetchError
from .models import WeatherPayload, parseAirQuality, parseCurrent, parseForecast

logger = logging.getLogger(__name__)


class OpenWeatherMapClient:
    """
    Async client for OpenWeatherMap API with caching

    Creates a new HTTP session for each request to support proper concurrent requests.

    Example usage:
        cache = DictCache[str, WeatherPayload](keyGenerator=StringKeyGenerator(), defaultTtl=300)
        client = OpenWeatherMapClient(
            apiKey="your_key",
            weatherCache=cache,
            weatherTTL=300,  # 5 minutes
        )

        payload = await client.fetchWeather(51.5007, -0.1246)
        print(payload.current.temperature)
    """

    API_BASE_URL = "https://api.openweathermap.org/data/2.5"

    def __init__(
        self,
        apiKey: str,
        weatherCache: Optional[CacheInterface[str, WeatherPayload]] = None,
        weatherTTL: Optional[int] = 300,  # 5 minutes
        requestTimeout: int = 10,
        units: str = "metric",
    ):
        """
        Initialize OpenWeatherMap client

        Args:
            apiKey: OpenWeatherMap API key
            weatherCache: Cache for assembled payloads, keyed by "lat,lon" (default: NullCache)
            weatherTTL: Cache TTL for weather payloads (seconds)
            requestTimeout: HTTP request timeout (seconds)
            units: Unit system requested from the provider
        """
        self.apiKey = apiKey
        self.weatherCache: CacheInterface[str, WeatherPayload] = (
            weatherCache if weatherCache is not None else NullCache()
        )
        self.weatherTTL = weatherTTL
        self.requestTimeout = requestTimeout
        self.units = units
        self._keyGenerator = CoordinateKeyGenerator()

    def getCacheKey(self, lat: float, lon: float) -> str:
        """Quantized "lat,lon" key (4 decimal places)"""
        return self._keyGenerator.generateKey((lat, lon))

    async def getCurrent(self, lat: float, lon: float) -> Dict[str, Any]:
        """
        Get raw current conditions

        Uses: https://api.openweathermap.org/data/2.5/weather
        """
        params = {"lat": lat, "lon": lon, "units": self.units, "appid": self.apiKey}
        return await self._makeRequest("weather", params, "current")

    async def getForecast(self, lat: float, lon: float) -> Dict[str, Any]:
        """
        Get raw 5 day / 3 hour forecast

        Uses: https://api.openweathermap.org/data/2.5/forecast
        """
        params = {"lat": lat, "lon": lon, "units": self.units, "appid": self.apiKey}
        return await self._makeRequest("forecast", params, "forecast")

    async def getAirQuality(self, lat: float, lon: float) -> Dict[str, Any]:
        """
        Get raw air pollution data

        Uses: https://api.openweathermap.org/data/2.5/air_pollution
        """
        params = {"lat": lat, "lon": lon, "appid": self.apiKey}
        return await self._makeRequest("air_pollution", params, "AQI")

    async def getCached(self, lat: float, lon: float) -> Optional[WeatherPayload]:
        """
        Cached payload for coordinates, without any network call

        Cache errors are logged and reported as a miss.
        """
        cacheKey = self.getCacheKey(lat, lon)
        try:
            cachedData = await self.weatherCache.get(cacheKey, self.weatherTTL)
        except Exception as e:
            logger.warning(f"Cache error for weather {cacheKey}: {e}")
            return None

        if cachedData is not None:
            logger.debug(f"Cache hit for weather: {cacheKey}")
        return cachedData

    async def fetchWeather(self, lat: float, lon: float) -> WeatherPayload:
        """
        Get current conditions, forecast and air quality by coordinates

        The three requests run concurrently. The fetch is all-or-nothing: if
        any request fails nothing is cached and WeatherFetchError is raised.
        When several fail, the error of the first one in request order
        (current, forecast, AQI) is raised.

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            WeatherPayload

        Raises:
            WeatherFetchError: On any HTTP, transport or parsing failure

        Cache key format: "lat,lon" (rounded to 4 decimal places)
        """
        cacheKey = self.getCacheKey(lat, lon)

        cachedData = await self.getCached(lat, lon)
        if cachedData is not None:
            return cachedData

        results = await asyncio.gather(
            self.getCurrent(lat, lon),
            self.getForecast(lat, lon),
            self.getAirQuality(lat, lon),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, WeatherFetchError):
                logger.error(f"Weather fetch failed for {cacheKey}: {result}")
                raise result
            if isinstance(result, BaseException):
                logger.error(f"Weather fetch failed for {cacheKey}: {result}")
                raise WeatherFetchError(f"Failed to fetch weather: {result}") from result

        currentData, forecastData, airData = results
        try:
            payload = WeatherPayload(
                current=parseCurrent(currentData),
                forecast=parseForecast(forecastData),
                airQuality=parseAirQuality(airData),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed weather response for {cacheKey}: {e}")
            raise WeatherFetchError(f"Malformed OpenWeather response: {e}") from e

        # Store in cache
        try:
            await self.weatherCache.set(cacheKey, payload)
            logger.debug(f"Cached weather result: {cacheKey}")
        except Exception as e:
            logger.warning(f"Failed to cache weather result {cacheKey}: {e}")

        return payload

    async def _makeRequest(self, endpoint: str, params: Dict[str, Any], label: str) -> Dict[str, Any]:
        """
        Make HTTP request to OpenWeatherMap API

        Creates a new session for each request to support proper concurrent requests.

        Args:
            endpoint: API endpoint name (e.g. "weather")
            params: Query parameters
            label: Human-readable request name used in generic error messages

        Returns:
            Parsed JSON response

        Raises:
            WeatherFetchError: On non-2xx status, timeout, network or JSON error
        """
        url = f"{self.API_BASE_URL}/{endpoint}"
        try:
            logger.debug(f"Making request to {url}")

            # Create new session for each request
            async with httpx.AsyncClient(timeout=self.requestTimeout) as session:
                response = await session.get(url, params=params)

            if 200 <= response.status_code < 300:
                data = response.json()
                if not isinstance(data, dict):
                    logger.error(f"Unexpected {type(data).__name__} body from {endpoint}")
                    raise WeatherFetchError(f"OpenWeather {label} returned unexpected body", response.status_code)
                logger.debug(f"API request successful: {response.status_code}")
                return data

            message = self._extractErrorMessage(response)
            logger.error(f"API request to {endpoint} failed: {response.status_code} {message}")
            raise WeatherFetchError(message or f"OpenWeather {label} error {response.status_code}", response.status_code)

        except httpx.TimeoutException as e:
            logger.error(f"Request timeout: {url}")
            raise WeatherFetchError(f"OpenWeather {label} request timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Network error: {e}")
            raise WeatherFetchError(f"OpenWeather {label} network error: {e}") from e
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON response: {e}")
            raise WeatherFetchError(f"OpenWeather {label} returned invalid JSON") from e

    @staticmethod
    def _extractErrorMessage(response: httpx.Response) -> Optional[str]:
        try:
            body = response.json()
        except Exception:
            return None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return None
