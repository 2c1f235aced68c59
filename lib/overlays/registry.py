"""
Overlay Registry

Keeps imagery sources attached to one rendering surface in sync with the
desired overlay set, the reference date and the active basemap.
"""

import asyncio
import datetime
import logging
from typing import Dict, Iterable, List, Optional, Set

from .catalog import DEFAULT_BASEMAP, TileSourceCatalog
from .models import ImagerySourceHandle, SourceDescriptor
from .surface import RenderSurface

logger = logging.getLogger(__name__)

# Applied uniformly to every overlay
DEFAULT_OVERLAY_OPACITY = 0.75


class OverlayRegistry:
    """
    Reconciles attached overlays with the desired set for one surface.

    Within one pass every detach happens before any attach, so a layer being
    replaced is never rendered twice. Calls are serialized with an
    asyncio.Lock: a call arriving while another is running waits and is then
    applied in order.

    Example:
        registry = OverlayRegistry(surface, TileSourceCatalog(apiKey))
        await registry.switchBasemap("openstreetmap", {"temperature"}, today)
        await registry.reconcile({"wind", "clouds"}, today)
    """

    def __init__(self, surface: RenderSurface, catalog: TileSourceCatalog, opacity: float = DEFAULT_OVERLAY_OPACITY):
        self.surface = surface
        self.catalog = catalog
        self.opacity = opacity

        self.attached: Dict[str, ImagerySourceHandle] = {}
        self.baseHandles: List[ImagerySourceHandle] = []
        self.basemapId: Optional[str] = None
        self.desiredIds: Set[str] = set()
        self.referenceDate: Optional[datetime.date] = None

        self._attachCount = 0
        self._detachCount = 0
        self._skippedCount = 0
        self._lock = asyncio.Lock()

    @property
    def attachedIds(self) -> Set[str]:
        return set(self.attached.keys())

    @property
    def stats(self) -> Dict[str, int]:
        return {
            "attached": len(self.attached),
            "base": len(self.baseHandles),
            "attaches": self._attachCount,
            "detaches": self._detachCount,
            "skipped": self._skippedCount,
        }

    async def reconcile(self, desiredIds: Iterable[str], referenceDate: datetime.date) -> None:
        """
        Converge attached overlays to desiredIds for referenceDate.

        Unknown ids are logged and skipped. When the reference date changes,
        date-sensitive sources (overlays and base) are rebuilt, static ones
        are left alone.
        """
        async with self._lock:
            await self._reconcile(set(desiredIds), referenceDate)

    async def setReferenceDate(self, referenceDate: datetime.date) -> None:
        """
        Keep the desired set, change only the date.

        The desired set is read once the lock is held, so changes queued
        before this call are not undone by it.
        """
        async with self._lock:
            await self._reconcile(set(self.desiredIds), referenceDate)

    async def _reconcile(self, desired: Set[str], referenceDate: datetime.date) -> None:
        dateChanged = self.referenceDate is not None and referenceDate != self.referenceDate
        self.desiredIds = desired
        self.referenceDate = referenceDate

        toDetach = [layerId for layerId in self.attached if layerId not in desired]
        staleBase: List[ImagerySourceHandle] = []
        if dateChanged:
            toDetach += [
                layerId
                for layerId, handle in self.attached.items()
                if layerId in desired and handle.descriptor.isDateSensitive
            ]
            staleBase = [handle for handle in self.baseHandles if handle.descriptor.isDateSensitive]

        # Detach phase
        for layerId in toDetach:
            await self._detach(self.attached.pop(layerId))
        for handle in staleBase:
            await self._detach(handle)

        # Attach phase
        if staleBase and self.basemapId is not None:
            self.baseHandles = [handle for handle in self.baseHandles if not handle.descriptor.isDateSensitive]
            await self._attachBasemap(self.basemapId, referenceDate, onlyDateSensitive=True)
        for layerId in sorted(desired):
            if layerId not in self.attached:
                await self._attachOverlay(layerId, referenceDate)

    async def switchBasemap(
        self, basemapId: str, desiredIds: Iterable[str], referenceDate: datetime.date
    ) -> None:
        """Full clear, then rebuild base layers and every desired overlay"""
        async with self._lock:
            await self._clearAll()

            self.basemapId = basemapId
            self.desiredIds = set(desiredIds)
            self.referenceDate = referenceDate

            await self._attachBasemap(basemapId, referenceDate)
            for layerId in sorted(self.desiredIds):
                await self._attachOverlay(layerId, referenceDate)
            logger.info(f"Basemap switched to {basemapId}, overlays: {sorted(self.attached)}")

    async def teardown(self) -> None:
        """Detach everything, used when the surface unmounts"""
        async with self._lock:
            await self._clearAll()
            self.basemapId = None

    async def _clearAll(self) -> None:
        handlesCount = len(self.attached) + len(self.baseHandles)
        if handlesCount:
            try:
                await self.surface.removeAllImagerySources()
            except Exception as e:
                logger.error(f"Failed to clear imagery sources: {e}")
        self._detachCount += handlesCount
        self.attached.clear()
        self.baseHandles = []

    async def _attachBasemap(
        self, basemapId: str, referenceDate: datetime.date, onlyDateSensitive: bool = False
    ) -> None:
        for descriptor in self.catalog.resolveBasemap(basemapId or DEFAULT_BASEMAP, referenceDate):
            if onlyDateSensitive and not descriptor.isDateSensitive:
                continue
            handle = await self._attach(descriptor, referenceDate, opacity=1.0, isBase=True)
            if handle is not None:
                self.baseHandles.append(handle)

    async def _attachOverlay(self, layerId: str, referenceDate: datetime.date) -> None:
        descriptor = self.catalog.resolve(layerId, referenceDate)
        if descriptor is None:
            logger.warning(f"Unknown overlay layer {layerId}, skipping")
            self._skippedCount += 1
            return

        handle = await self._attach(descriptor, referenceDate, opacity=self.opacity, isBase=False)
        if handle is not None:
            self.attached[layerId] = handle

    async def _attach(
        self, descriptor: SourceDescriptor, referenceDate: datetime.date, opacity: float, isBase: bool
    ) -> Optional[ImagerySourceHandle]:
        try:
            surfaceRef = await self.surface.addImagerySource(descriptor, opacity, isBase)
        except Exception as e:
            logger.error(f"Failed to attach imagery source {descriptor.layerId}: {e}")
            self._skippedCount += 1
            return None

        self._attachCount += 1
        logger.debug(f"Attached {descriptor.layerId} ({descriptor.kind}) for {referenceDate}")
        return ImagerySourceHandle(
            layerId=descriptor.layerId,
            descriptor=descriptor,
            referenceDate=referenceDate if descriptor.isDateSensitive else None,
            surfaceRef=surfaceRef,
        )

    async def _detach(self, handle: ImagerySourceHandle) -> None:
        try:
            await self.surface.removeImagerySource(handle.surfaceRef)
        except Exception as e:
            logger.error(f"Failed to detach imagery source {handle.layerId}: {e}")
        self._detachCount += 1
        logger.debug(f"Detached {handle.layerId}")
