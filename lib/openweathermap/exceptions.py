"""
OpenWeatherMap client exceptions
"""

from typing import Optional


class WeatherFetchError(Exception):
    """
    Raised when weather data could not be fetched.

    User-visible and retryable: the caller shows ``message`` and may simply
    call fetchWeather() again.

    Attributes:
        message: Provider message if the error body had one, generic text otherwise
        status: HTTP status code, None for transport errors
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        return self.message
