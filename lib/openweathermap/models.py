"""
Data models for OpenWeatherMap API client

This module defines immutable value objects built from the 2.5 API responses
(current weather, 5 day / 3 hour forecast and air pollution).
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class ConditionsSnapshot:
    """Weather conditions at one point in time"""

    # https://openweathermap.org/current#fields_json

    timestamp: int  # Unix timestamp
    temperature: float  # Temperature (Celsius for metric units)
    feelsLike: float  # Perceived temperature
    humidity: int  # Humidity percentage
    pressure: int  # Atmospheric pressure (hPa)
    windSpeed: float  # Wind speed (m/s for metric units)
    windDeg: int  # Wind direction (degrees)
    condition: str  # Weather description, e.g. "clear sky"
    icon: str  # Icon id, e.g. "01d"
    locationName: Optional[str] = None  # Only set for current conditions

    @classmethod
    def fromApi(cls, data: Dict[str, Any], locationName: Optional[str] = None) -> "ConditionsSnapshot":
        """Build snapshot from a current-weather body or a forecast list item"""
        main = data.get("main") or {}
        wind = data.get("wind") or {}
        weatherList = data.get("weather") or []
        weatherInfo = weatherList[0] if weatherList else {}

        return cls(
            timestamp=int(data.get("dt", 0)),
            temperature=float(main["temp"]),
            feelsLike=float(main.get("feels_like", main["temp"])),
            humidity=int(main.get("humidity", 0)),
            pressure=int(main.get("pressure", 0)),
            windSpeed=float(wind.get("speed", 0)),
            windDeg=int(wind.get("deg", 0)),
            condition=weatherInfo.get("description", "unknown"),
            icon=weatherInfo.get("icon", "01d"),
            locationName=locationName,
        )


@dataclass(frozen=True, slots=True)
class AirQualitySnapshot:
    """Air quality index and particulates"""

    # https://openweathermap.org/api/air-pollution#fields

    aqi: int  # Air Quality Index, 1 (good) .. 5 (very poor)
    pm25: float  # PM2.5 (ug/m3)
    pm10: float  # PM10 (ug/m3)


@dataclass(frozen=True, slots=True)
class WeatherPayload:
    """Current conditions, short-range forecast and air quality for one location"""

    current: ConditionsSnapshot
    forecast: Tuple[ConditionsSnapshot, ...]
    airQuality: Optional[AirQualitySnapshot]


def parseCurrent(data: Dict[str, Any]) -> ConditionsSnapshot:
    """Parse /weather response"""
    return ConditionsSnapshot.fromApi(data, locationName=data.get("name") or None)


def parseForecast(data: Dict[str, Any]) -> Tuple[ConditionsSnapshot, ...]:
    """Parse /forecast response"""
    return tuple(ConditionsSnapshot.fromApi(item) for item in data.get("list") or [])


def parseAirQuality(data: Dict[str, Any]) -> Optional[AirQualitySnapshot]:
    """Parse /air_pollution response, None if it carries no measurements"""
    items = data.get("list") or []
    if not items:
        return None

    item = items[0]
    components = item.get("components") or {}
    return AirQualitySnapshot(
        aqi=int((item.get("main") or {}).get("aqi", 0)),
        pm25=float(components.get("pm2_5", 0)),
        pm10=float(components.get("pm10", 0)),
    )
