"""
Rendering surface contract

The map engine (2D tile map or 3D globe) is external; this protocol lists the
operations the overlay and map layers rely on.
"""

from typing import Any, Protocol, Tuple, runtime_checkable

from .models import SourceDescriptor


@runtime_checkable
class RenderSurface(Protocol):
    """Imperative rendering engine API"""

    def isReady(self) -> bool:
        """True once the engine is mounted and accepts commands"""
        ...

    async def addImagerySource(self, descriptor: SourceDescriptor, opacity: float, isBase: bool = False) -> Any:
        """
        Attach imagery source and return engine reference for it.

        Base sources are placed beneath every overlay.
        """
        ...

    async def removeImagerySource(self, surfaceRef: Any) -> None: ...

    async def removeAllImagerySources(self) -> None: ...

    async def placeMarker(self, lat: float, lon: float, label: str = "") -> Any: ...

    async def removeMarker(self, marker: Any) -> None: ...

    async def flyCamera(self, lat: float, lon: float, level: float) -> None:
        """Move camera. level is a zoom level (2D) or camera height in metres (3D)"""
        ...

    async def currentView(self) -> Tuple[float, float, float]:
        """(lat, lon, level) of the current camera"""
        ...
