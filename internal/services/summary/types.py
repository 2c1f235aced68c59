"""
Summary: input models and provider contract
"""

import datetime
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from lib.openweathermap.models import AirQualitySnapshot, WeatherPayload

# Forecast entries forwarded to summary providers
SUMMARY_FORECAST_ENTRIES = 5

UNKNOWN_LOCATION = "Unknown location"


class SummaryProviderError(Exception):
    """A single summary provider failed, the resolver falls through to the next one."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


@dataclass(frozen=True, slots=True)
class ForecastPoint:
    """Forecast entry as shown to summary providers, dood"""

    label: str  # e.g. "2023-10-18 15:00"
    temperature: float
    condition: str


@dataclass(frozen=True, slots=True)
class SummaryInput:
    """Normalized weather data a summary is generated from, dood"""

    location: str
    temperature: float
    condition: str
    windSpeed: float
    humidity: int
    pressure: int
    forecast: Tuple[ForecastPoint, ...] = ()
    airQuality: Optional[AirQualitySnapshot] = None

    @classmethod
    def fromPayload(cls, payload: WeatherPayload) -> "SummaryInput":
        current = payload.current
        forecast = tuple(
            ForecastPoint(
                label=datetime.datetime.fromtimestamp(item.timestamp, tz=datetime.timezone.utc).strftime(
                    "%Y-%m-%d %H:%M"
                ),
                temperature=item.temperature,
                condition=item.condition,
            )
            for item in payload.forecast[:SUMMARY_FORECAST_ENTRIES]
        )
        return cls(
            location=current.locationName or UNKNOWN_LOCATION,
            temperature=current.temperature,
            condition=current.condition,
            windSpeed=current.windSpeed,
            humidity=current.humidity,
            pressure=current.pressure,
            forecast=forecast,
            airQuality=payload.airQuality,
        )


class SummaryProviderInterface(ABC):
    """One interchangeable way of producing summary text"""

    name: str = "abstract"

    @abstractmethod
    async def generateSummary(self, data: SummaryInput) -> str:
        """
        Produce summary text for the given conditions.

        Raises:
            SummaryProviderError: If this provider cannot produce a summary
        """
        raise NotImplementedError
