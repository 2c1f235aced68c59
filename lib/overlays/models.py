"""
Data models for imagery overlays

Source descriptors describe *where* tiles come from, handles describe *what*
is currently attached to a rendering surface.
"""

import datetime
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Iterable, List, Optional


class SourceKind(StrEnum):
    """How a source depends on the reference date"""

    # Endpoint does not depend on the date (tile-service layers)
    STATIC = "static"
    # Endpoint is parameterized by a calendar day (satellite archive)
    DATE_SENSITIVE = "date-sensitive"


@dataclass(frozen=True, slots=True)
class SourceDescriptor:
    """Resolved imagery endpoint for one layer id"""

    layerId: str
    urlTemplate: str  # with {z}/{x}/{y} placeholders
    kind: SourceKind
    attribution: str = ""
    maxLevel: int = 18

    @property
    def isDateSensitive(self) -> bool:
        return self.kind == SourceKind.DATE_SENSITIVE


@dataclass(slots=True)
class ImagerySourceHandle:
    """Source attached to a surface"""

    layerId: str
    descriptor: SourceDescriptor
    referenceDate: Optional[datetime.date]
    # Whatever the rendering engine returned from addImagerySource()
    surfaceRef: Any


@dataclass(frozen=True, slots=True)
class OverlayDescriptor:
    """Overlay entry as listed in layer pickers"""

    id: str
    isActive: bool


def overlayDescriptors(knownIds: Iterable[str], desiredIds: Iterable[str]) -> List[OverlayDescriptor]:
    desired = set(desiredIds)
    return [OverlayDescriptor(id=layerId, isActive=layerId in desired) for layerId in knownIds]
