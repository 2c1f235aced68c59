"""
OpenWeatherMap Async Client Library

This module provides an async client for the OpenWeatherMap 2.5 API with
in-memory caching. One fetch combines current conditions, forecast and air
quality for a coordinate.

Example usage:
    from lib.cache import DictCache, StringKeyGenerator
    from lib.openweathermap import OpenWeatherMapClient

    client = OpenWeatherMapClient(
        apiKey="your_api_key",
        weatherCache=DictCache(keyGenerator=StringKeyGenerator(), defaultTtl=300, name="weather"),
    )
    payload = await client.fetchWeather(51.5007, -0.1246)
    print(f"Temperature: {payload.current.temperature}°C")
"""

from .client import OpenWeatherMapClient
from .exceptions import WeatherFetchError
from .models import AirQualitySnapshot, ConditionsSnapshot, WeatherPayload

__all__ = [
    "AirQualitySnapshot",
    "ConditionsSnapshot",
    "WeatherPayload",
    "OpenWeatherMapClient",
    "WeatherFetchError",
]
