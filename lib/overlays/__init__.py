"""
lib.overlays - Imagery overlay management for map surfaces

Core Components:
- TileSourceCatalog: Resolves overlay/basemap ids into tile endpoints
- OverlayRegistry: Reconciles attached sources with the desired set
- RenderSurface: Protocol of the external rendering engine

Example Usage:
    >>> registry = OverlayRegistry(surface, TileSourceCatalog(apiKey))
    >>> await registry.reconcile({"temperature", "wind"}, datetime.date.today())
    >>> registry.attachedIds
    {'temperature', 'wind'}
"""

from .catalog import DEFAULT_BASEMAP, GIBS_LAYERS, OPENWEATHERMAP_LAYERS, TileSourceCatalog, formatGibsDate
from .exceptions import UnknownLayerError
from .models import ImagerySourceHandle, OverlayDescriptor, SourceDescriptor, SourceKind, overlayDescriptors
from .registry import DEFAULT_OVERLAY_OPACITY, OverlayRegistry
from .surface import RenderSurface

__all__ = [
    # Models
    "SourceKind",
    "SourceDescriptor",
    "ImagerySourceHandle",
    "OverlayDescriptor",
    "overlayDescriptors",
    # Catalog
    "TileSourceCatalog",
    "DEFAULT_BASEMAP",
    "GIBS_LAYERS",
    "OPENWEATHERMAP_LAYERS",
    "formatGibsDate",
    # Registry
    "OverlayRegistry",
    "DEFAULT_OVERLAY_OPACITY",
    "RenderSurface",
    "UnknownLayerError",
]
