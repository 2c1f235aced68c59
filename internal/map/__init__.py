"""Map surfaces, weather panel and dual-surface coordination, dood!"""

from .coordinator import DualSurfaceCoordinator
from .panel import WeatherPanel
from .surfaces import FlatMapSurface, GlobeSurface, MapSurfaceInterface, haversineKm, zoomToCameraHeight
from .types import CommandResult, CommandStatus, Geolocator, SurfaceMode

__all__ = [
    "CommandResult",
    "CommandStatus",
    "Geolocator",
    "SurfaceMode",
    "MapSurfaceInterface",
    "FlatMapSurface",
    "GlobeSurface",
    "haversineKm",
    "zoomToCameraHeight",
    "WeatherPanel",
    "DualSurfaceCoordinator",
]
