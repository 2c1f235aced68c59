"""Map surfaces: one command contract, a 2D tile map and a 3D globe variant.

Each surface wraps an external rendering engine (``RenderSurface``) and owns
the ``OverlayRegistry`` for it. The variants differ in how a zoom hint is
turned into a camera position and in measurement support.
"""

import datetime
import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Tuple

from lib.overlays import DEFAULT_OVERLAY_OPACITY, OverlayRegistry, RenderSurface, TileSourceCatalog

from .types import CommandResult, SurfaceMode

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

FLAT_MIN_ZOOM = 1
FLAT_MAX_ZOOM = 19

# Globe camera heights (metres)
GLOBE_WORLD_HEIGHT = 20_000_000
GLOBE_CONTINENT_HEIGHT = 10_000_000
GLOBE_MIN_HEIGHT = 1_000


def haversineKm(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """Great-circle distance between two (lat, lon) points in km"""
    lat1, lon1 = map(math.radians, a)
    lat2, lon2 = map(math.radians, b)
    h = math.sin((lat2 - lat1) / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin((lon2 - lon1) / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def zoomToCameraHeight(zoom: float) -> float:
    """Translate a 2D zoom hint into a globe camera height in metres"""
    if zoom <= 3:
        return GLOBE_WORLD_HEIGHT
    if zoom <= 5:
        return GLOBE_CONTINENT_HEIGHT
    return max((15 - zoom) * 1_000_000, GLOBE_MIN_HEIGHT)


class MapSurfaceInterface(ABC):
    """Surface-agnostic map command contract"""

    mode: SurfaceMode

    def __init__(
        self,
        engine: RenderSurface,
        catalog: TileSourceCatalog,
        overlayOpacity: float = DEFAULT_OVERLAY_OPACITY,
    ):
        self.engine = engine
        self.overlays = OverlayRegistry(engine, catalog, overlayOpacity)
        self.marker: Optional[Any] = None

    def isReady(self) -> bool:
        return self.engine.isReady()

    def hasLayers(self) -> bool:
        """True once a basemap was built on the engine and until unmount"""
        return self.overlays.basemapId is not None

    @abstractmethod
    async def flyTo(self, lat: float, lon: float, zoomHint: float) -> CommandResult:
        raise NotImplementedError

    @abstractmethod
    async def zoomIn(self) -> CommandResult:
        raise NotImplementedError

    @abstractmethod
    async def zoomOut(self) -> CommandResult:
        raise NotImplementedError

    @abstractmethod
    async def startMeasurement(self) -> CommandResult:
        raise NotImplementedError

    def isMeasuring(self) -> bool:
        """True while clicks feed a measurement instead of showing weather"""
        return False

    async def handleClick(self, lat: float, lon: float) -> Optional[float]:
        """Pointer click hook, returns measured distance in km when a measurement completes"""
        return None

    def cancelMeasurement(self) -> None:
        pass

    async def showMarker(self, lat: float, lon: float, label: str = "") -> None:
        """Single location marker, replacing the previous one"""
        await self.clearMarker()
        self.marker = await self.engine.placeMarker(lat, lon, label)

    async def clearMarker(self) -> None:
        if self.marker is not None:
            marker, self.marker = self.marker, None
            await self.engine.removeMarker(marker)

    async def applyLayers(self, desiredIds: Iterable[str], referenceDate: datetime.date) -> None:
        await self.overlays.reconcile(desiredIds, referenceDate)

    async def applyBasemap(self, basemapId: str, desiredIds: Iterable[str], referenceDate: datetime.date) -> None:
        await self.overlays.switchBasemap(basemapId, desiredIds, referenceDate)

    async def unmount(self) -> None:
        """Release everything attached to the engine"""
        self.cancelMeasurement()
        try:
            await self.clearMarker()
        except Exception as e:
            logger.error(f"Failed to remove marker on {self.mode} unmount: {e}")
        await self.overlays.teardown()


class FlatMapSurface(MapSurfaceInterface):
    """2D tile map, camera level is the zoom"""

    mode = SurfaceMode.FLAT_2D

    def __init__(self, engine: RenderSurface, catalog: TileSourceCatalog, overlayOpacity: float = DEFAULT_OVERLAY_OPACITY):
        super().__init__(engine, catalog, overlayOpacity)
        self._measuring = False
        self.measurePoints: List[Tuple[float, float]] = []
        self.lastMeasurementKm: Optional[float] = None

    async def flyTo(self, lat: float, lon: float, zoomHint: float) -> CommandResult:
        await self.engine.flyCamera(lat, lon, zoomHint)
        return CommandResult.success()

    async def _stepZoom(self, delta: int) -> CommandResult:
        lat, lon, zoom = await self.engine.currentView()
        newZoom = min(max(zoom + delta, FLAT_MIN_ZOOM), FLAT_MAX_ZOOM)
        await self.engine.flyCamera(lat, lon, newZoom)
        return CommandResult.success(f"zoom {newZoom}")

    async def zoomIn(self) -> CommandResult:
        return await self._stepZoom(1)

    async def zoomOut(self) -> CommandResult:
        return await self._stepZoom(-1)

    def isMeasuring(self) -> bool:
        return self._measuring

    async def startMeasurement(self) -> CommandResult:
        self.cancelMeasurement()
        self._measuring = True
        return CommandResult.success("Click two points on the map")

    async def handleClick(self, lat: float, lon: float) -> Optional[float]:
        if not self._measuring:
            return None

        self.measurePoints.append((lat, lon))
        if len(self.measurePoints) < 2:
            return None

        distance = haversineKm(self.measurePoints[0], self.measurePoints[1])
        self.lastMeasurementKm = distance
        self._measuring = False
        self.measurePoints = []
        logger.debug(f"Measured distance: {distance:.2f} km")
        return distance

    def cancelMeasurement(self) -> None:
        self._measuring = False
        self.measurePoints = []


class GlobeSurface(MapSurfaceInterface):
    """3D globe, camera level is the height above ground in metres"""

    mode = SurfaceMode.GLOBE_3D

    async def flyTo(self, lat: float, lon: float, zoomHint: float) -> CommandResult:
        height = zoomToCameraHeight(zoomHint)
        await self.engine.flyCamera(lat, lon, height)
        return CommandResult.success(f"height {height:.0f} m")

    async def zoomIn(self) -> CommandResult:
        lat, lon, height = await self.engine.currentView()
        await self.engine.flyCamera(lat, lon, max(height * 0.5, GLOBE_MIN_HEIGHT))
        return CommandResult.success()

    async def zoomOut(self) -> CommandResult:
        lat, lon, height = await self.engine.currentView()
        await self.engine.flyCamera(lat, lon, height * 1.5)
        return CommandResult.success()

    async def startMeasurement(self) -> CommandResult:
        return CommandResult.unsupported("Measurement is only available on the 2D map")
