"""
Dual-surface coordinator: forwards map commands to whichever surface is active
"""

import datetime
import logging
from typing import Dict, Iterable, Optional, Set

from lib.overlays import DEFAULT_BASEMAP

from .panel import WeatherPanel
from .surfaces import MapSurfaceInterface
from .types import CommandResult, Geolocator, SurfaceMode

logger = logging.getLogger(__name__)

DEFAULT_FLY_ZOOM = 10
LOCATE_ZOOM = 13
WORLD_VIEW = (20.0, 0.0, 3)


class DualSurfaceCoordinator:
    """
    Owns the active surface mode and the shared layer state.

    Each mounted surface keeps its own overlay registry; layer, basemap and
    date changes are pushed to every mounted surface so switching modes shows
    the same overlays. The weather panel is shared, so a request started on
    one surface still lands in the panel after a switch.
    """

    def __init__(
        self,
        panel: WeatherPanel,
        geolocator: Geolocator,
        defaultLayers: Optional[Iterable[str]] = None,
        defaultBasemap: str = DEFAULT_BASEMAP,
        mode: SurfaceMode = SurfaceMode.FLAT_2D,
    ):
        self.panel = panel
        self.geolocator = geolocator
        self.mode = mode
        self.surfaces: Dict[SurfaceMode, MapSurfaceInterface] = {}

        self.desiredLayers: Set[str] = set(defaultLayers or [])
        self.basemapId = defaultBasemap
        self.referenceDate = datetime.date.today()

    def _activeSurface(self, command: str) -> Optional[MapSurfaceInterface]:
        surface = self.surfaces.get(self.mode)
        if surface is None:
            logger.warning(f"{command}: {self.mode} surface is not mounted")
            return None
        if not surface.isReady():
            logger.warning(f"{command}: {self.mode} surface is not ready")
            return None
        return surface

    async def _readySurface(self, command: str) -> Optional[MapSurfaceInterface]:
        """Active surface if it accepts commands, with its layers built"""
        surface = self._activeSurface(command)
        if surface is not None:
            await self._buildLayers(surface)
        return surface

    def _mountedReady(self):
        return [surface for surface in self.surfaces.values() if surface.isReady()]

    async def _buildLayers(self, surface: MapSurfaceInterface) -> None:
        """Build basemap and overlays on a surface whose engine got ready after mount"""
        if surface.hasLayers():
            return
        logger.info(f"Building layers on {surface.mode} surface")
        await surface.applyBasemap(self.basemapId, self.desiredLayers, self.referenceDate)

    async def _pushLayers(self, surface: MapSurfaceInterface) -> None:
        if not surface.hasLayers():
            await self._buildLayers(surface)
            return
        await surface.applyLayers(self.desiredLayers, self.referenceDate)

    async def mount(self, surface: MapSurfaceInterface) -> CommandResult:
        """Register surface for its mode and build its layers when the engine is ready"""
        previous = self.surfaces.get(surface.mode)
        if previous is not None and previous is not surface:
            await previous.unmount()
        self.surfaces[surface.mode] = surface
        logger.info(f"Mounted {surface.mode} surface")

        if not surface.isReady():
            return CommandResult.notReady(f"{surface.mode} engine is not ready, layers will be built once it is")
        await self._buildLayers(surface)
        return CommandResult.success()

    async def surfaceReady(self, mode: SurfaceMode) -> CommandResult:
        """Engine readiness notification for a surface mounted before its engine was ready"""
        surface = self.surfaces.get(mode)
        if surface is None:
            return CommandResult.notReady(f"{mode} surface is not mounted")
        if not surface.isReady():
            return CommandResult.notReady(f"{mode} engine is not ready")
        await self._buildLayers(surface)
        return CommandResult.success()

    async def unmount(self, mode: SurfaceMode) -> None:
        surface = self.surfaces.pop(mode, None)
        if surface is None:
            return
        await surface.unmount()
        logger.info(f"Unmounted {mode} surface")

    def switchMode(self, mode: SurfaceMode) -> CommandResult:
        """Toggle active surface. In-flight panel requests are left running"""
        self.mode = mode
        logger.info(f"Switched to {mode} mode")
        if self.surfaces.get(mode) is None:
            return CommandResult.notReady(f"{mode} surface is not mounted yet")
        return CommandResult.success()

    async def flyTo(self, lat: float, lon: float, zoomHint: float = DEFAULT_FLY_ZOOM) -> CommandResult:
        surface = await self._readySurface("flyTo")
        if surface is None:
            return CommandResult.notReady()
        return await surface.flyTo(lat, lon, zoomHint)

    async def flyToWorld(self) -> CommandResult:
        lat, lon, zoom = WORLD_VIEW
        return await self.flyTo(lat, lon, zoom)

    async def zoomIn(self) -> CommandResult:
        surface = await self._readySurface("zoomIn")
        if surface is None:
            return CommandResult.notReady()
        return await surface.zoomIn()

    async def zoomOut(self) -> CommandResult:
        surface = await self._readySurface("zoomOut")
        if surface is None:
            return CommandResult.notReady()
        return await surface.zoomOut()

    async def locateUser(self) -> CommandResult:
        surface = await self._readySurface("locateUser")
        if surface is None:
            return CommandResult.notReady()

        position = await self.geolocator.currentPosition()
        if position is None:
            logger.warning("User location is unavailable")
            return CommandResult.notReady("Location unavailable")

        lat, lon = position
        result = await surface.flyTo(lat, lon, LOCATE_ZOOM)
        await surface.showMarker(lat, lon, "You are here")
        return result

    async def searchAndShowWeather(self, lat: float, lon: float) -> CommandResult:
        """Fly to the location, mark it and load weather into the shared panel"""
        surface = await self._readySurface("searchAndShowWeather")
        if surface is None:
            return CommandResult.notReady()

        await surface.flyTo(lat, lon, LOCATE_ZOOM)
        await surface.showMarker(lat, lon)
        shown = await self.panel.showWeatherAt(lat, lon)
        if shown and self.panel.error is not None:
            return CommandResult.success(f"Weather unavailable: {self.panel.error}")
        return CommandResult.success()

    async def handleClick(self, lat: float, lon: float) -> CommandResult:
        """Map click: feeds an active measurement, otherwise shows weather for the point"""
        surface = await self._readySurface("handleClick")
        if surface is None:
            return CommandResult.notReady()

        if surface.isMeasuring():
            distance = await surface.handleClick(lat, lon)
            if distance is None:
                return CommandResult.success("Click the second point")
            return CommandResult.success(f"{distance:.2f} km")

        await surface.showMarker(lat, lon)
        await self.panel.showWeatherAt(lat, lon)
        return CommandResult.success()

    async def startMeasurement(self) -> CommandResult:
        surface = await self._readySurface("startMeasurement")
        if surface is None:
            return CommandResult.notReady()
        return await surface.startMeasurement()

    async def close(self) -> CommandResult:
        """Close the weather panel and drop the marker"""
        self.panel.close()
        surface = self.surfaces.get(self.mode)
        if surface is not None:
            surface.cancelMeasurement()
            if surface.isReady():
                await surface.clearMarker()
        return CommandResult.success()

    async def applyLayers(self, desiredIds: Iterable[str], referenceDate: Optional[datetime.date] = None) -> CommandResult:
        self.desiredLayers = set(desiredIds)
        if referenceDate is not None:
            self.referenceDate = referenceDate
        for surface in self._mountedReady():
            await self._pushLayers(surface)
        return self._activeStatus("applyLayers")

    async def applyBasemap(self, basemapId: str) -> CommandResult:
        self.basemapId = basemapId
        for surface in self._mountedReady():
            await surface.applyBasemap(basemapId, self.desiredLayers, self.referenceDate)
        return self._activeStatus("applyBasemap")

    async def setReferenceDate(self, referenceDate: datetime.date) -> CommandResult:
        # Desired set is taken from here, not from the registries
        self.referenceDate = referenceDate
        for surface in self._mountedReady():
            await self._pushLayers(surface)
        return self._activeStatus("setReferenceDate")

    def _activeStatus(self, command: str) -> CommandResult:
        # Layer state is kept either way and applied when the surface mounts
        if self._activeSurface(command) is None:
            return CommandResult.notReady("Saved, will apply when the surface is ready")
        return CommandResult.success()
