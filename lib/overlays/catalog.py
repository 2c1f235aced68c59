"""
Tile source catalog

Maps overlay and basemap ids to concrete imagery endpoints. Tile-service
overlays (OpenWeatherMap) are static; NASA GIBS layers are addressed by
calendar day and must be rebuilt when the reference date changes.
"""

import datetime
import logging
from typing import Dict, List, Optional, Tuple

from .exceptions import UnknownLayerError
from .models import SourceDescriptor, SourceKind

logger = logging.getLogger(__name__)

OPENWEATHERMAP_TILE_URL = "https://tile.openweathermap.org/map/{layer}/{{z}}/{{x}}/{{y}}.png?appid={apiKey}"
GIBS_TILE_URL = (
    "https://gibs.earthdata.nasa.gov/wmts/epsg3857/best/{layer}/default/{date}"
    "/GoogleMapsCompatible_Level9/{{z}}/{{y}}/{{x}}.jpg"
)
# GoogleMapsCompatible_Level9 tile matrix set
GIBS_MAX_LEVEL = 9

# overlay id -> OpenWeatherMap tile layer
OPENWEATHERMAP_LAYERS: Dict[str, str] = {
    "temperature": "temp_new",
    "precipitation": "precipitation_new",
    "wind": "wind_new",
    "pressure": "pressure_new",
    "clouds": "clouds_new",
    "snow": "snow_new",
    "wind_gust": "wind_gust",
}

# overlay id -> GIBS layer; dewpoint and feels_like approximate via surface air temperature
GIBS_LAYERS: Dict[str, str] = {
    "humidity": "MERRA2_RelativeHumidity_2m",
    "dewpoint": "AIRS_L3_Surface_Temperature_Day",
    "feels_like": "AIRS_L3_Surface_Temperature_Day",
    "visibility": "MODIS_Terra_Aerosol",
    "uvi": "OMI_L2_UV_Index",
}

DEFAULT_BASEMAP = "openstreetmap"

# basemap id -> (url template, attribution, max level), static basemaps only
STATIC_BASEMAPS: Dict[str, List[Tuple[str, str, int]]] = {
    "openstreetmap": [
        ("https://tile.openstreetmap.org/{z}/{x}/{y}.png", "© OpenStreetMap contributors", 19),
    ],
    "esri": [
        (
            "https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
            "Tiles © Esri, Maxar, Earthstar Geographics",
            19,
        ),
        (
            "https://server.arcgisonline.com/ArcGIS/rest/services/Reference/World_Boundaries_and_Places"
            "/MapServer/tile/{z}/{y}/{x}",
            "Labels © Esri",
            19,
        ),
    ],
}

GIBS_BASEMAPS: Dict[str, Tuple[str, str]] = {
    "modis": ("MODIS_Terra_CorrectedReflectance_TrueColor", "NASA GIBS | MODIS"),
    "viirs": ("VIIRS_SNPP_CorrectedReflectance_TrueColor", "NASA GIBS | VIIRS"),
}


def formatGibsDate(referenceDate: datetime.date) -> str:
    """GIBS uses UTC calendar days, YYYY-MM-DD"""
    return referenceDate.strftime("%Y-%m-%d")


class TileSourceCatalog:
    """Resolve overlay and basemap ids into source descriptors"""

    def __init__(self, openWeatherMapKey: str):
        self.openWeatherMapKey = openWeatherMapKey

    def knownLayerIds(self) -> List[str]:
        return list(OPENWEATHERMAP_LAYERS.keys()) + list(GIBS_LAYERS.keys())

    def knownBasemapIds(self) -> List[str]:
        return list(STATIC_BASEMAPS.keys()) + list(GIBS_BASEMAPS.keys())

    def isDateSensitive(self, layerId: str) -> bool:
        return layerId in GIBS_LAYERS

    def resolve(self, layerId: str, referenceDate: datetime.date) -> Optional[SourceDescriptor]:
        """Source descriptor for an overlay id, None if the id is unknown"""
        owmLayer = OPENWEATHERMAP_LAYERS.get(layerId)
        if owmLayer is not None:
            return SourceDescriptor(
                layerId=layerId,
                urlTemplate=OPENWEATHERMAP_TILE_URL.format(layer=owmLayer, apiKey=self.openWeatherMapKey),
                kind=SourceKind.STATIC,
                attribution="Weather data © OpenWeatherMap",
                maxLevel=18,
            )

        gibsLayer = GIBS_LAYERS.get(layerId)
        if gibsLayer is not None:
            return self._gibsDescriptor(layerId, gibsLayer, referenceDate, "Imagery © NASA GIBS")

        return None

    def require(self, layerId: str, referenceDate: datetime.date) -> SourceDescriptor:
        """Same as resolve(), raising UnknownLayerError for unknown ids"""
        descriptor = self.resolve(layerId, referenceDate)
        if descriptor is None:
            raise UnknownLayerError(layerId)
        return descriptor

    def resolveBasemap(self, basemapId: str, referenceDate: datetime.date) -> List[SourceDescriptor]:
        """Base layer descriptors, bottom first. Unknown ids fall back to openstreetmap"""
        if basemapId in GIBS_BASEMAPS:
            gibsLayer, attribution = GIBS_BASEMAPS[basemapId]
            return [self._gibsDescriptor(basemapId, gibsLayer, referenceDate, attribution)]

        if basemapId not in STATIC_BASEMAPS:
            logger.warning(f"Unknown basemap {basemapId}, falling back to {DEFAULT_BASEMAP}")
            basemapId = DEFAULT_BASEMAP

        layers = STATIC_BASEMAPS[basemapId]
        return [
            SourceDescriptor(
                layerId=basemapId if idx == 0 else f"{basemapId}:{idx}",
                urlTemplate=url,
                kind=SourceKind.STATIC,
                attribution=attribution,
                maxLevel=maxLevel,
            )
            for idx, (url, attribution, maxLevel) in enumerate(layers)
        ]

    @staticmethod
    def _gibsDescriptor(
        layerId: str, gibsLayer: str, referenceDate: datetime.date, attribution: str
    ) -> SourceDescriptor:
        return SourceDescriptor(
            layerId=layerId,
            urlTemplate=GIBS_TILE_URL.format(layer=gibsLayer, date=formatGibsDate(referenceDate)),
            kind=SourceKind.DATE_SENSITIVE,
            attribution=attribution,
            maxLevel=GIBS_MAX_LEVEL,
        )
