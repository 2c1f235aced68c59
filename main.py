"""
Caelus - weather overlay core: cached weather fetching, summaries and map overlays.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from internal.config.manager import ConfigManager
from internal.map import DualSurfaceCoordinator, FlatMapSurface, GlobeSurface, Geolocator, SurfaceMode, WeatherPanel
from internal.services.summary import DEFAULT_SUMMARY_TTL, SummaryResolver, buildSummaryProviders
import lib.utils as utils
from lib.ai.manager import LLMManager
from lib.cache import DEFAULT_SWEEP_INTERVAL, CacheSweeper, DictCache, StringKeyGenerator
from lib.logging_utils import initLogging
from lib.openweathermap import OpenWeatherMapClient, WeatherFetchError, WeatherPayload
from lib.overlays import DEFAULT_BASEMAP, DEFAULT_OVERLAY_OPACITY, RenderSurface, TileSourceCatalog

# Basic logging until the [logging] section is applied
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

DEFAULT_WEATHER_TTL = 300


class CaelusApp:
    """Wires configuration, caches, weather client, summaries and map layer together."""

    def __init__(self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None):
        self.configManager = ConfigManager(configPath, configDirs)
        initLogging(self.configManager.getLoggingConfig())

        weatherConfig = self.configManager.getOpenWeatherMapConfig()
        summaryConfig = self.configManager.getSummaryConfig()
        self.overlaysConfig = self.configManager.getOverlaysConfig()

        weatherTtl = int(weatherConfig.get("weather-cache-ttl", DEFAULT_WEATHER_TTL))
        summaryTtl = int(summaryConfig.get("cache-ttl", DEFAULT_SUMMARY_TTL))

        # Cache namespaces live as long as the process
        self.weatherCache = DictCache[str, WeatherPayload](
            keyGenerator=StringKeyGenerator(), defaultTtl=weatherTtl, name="weather"
        )
        self.summaryCache = DictCache[str, str](keyGenerator=StringKeyGenerator(), defaultTtl=summaryTtl, name="summary")
        self.sweeper = CacheSweeper(interval=float(summaryConfig.get("sweep-interval", DEFAULT_SWEEP_INTERVAL)))
        self.sweeper.register(self.weatherCache)
        self.sweeper.register(self.summaryCache)

        self.weatherClient = OpenWeatherMapClient(
            apiKey=weatherConfig["api-key"],
            weatherCache=self.weatherCache,
            weatherTTL=weatherTtl,
            requestTimeout=int(weatherConfig.get("request-timeout", 10)),
            units=weatherConfig.get("units", "metric"),
        )

        self.llmManager = LLMManager(self.configManager.getModelsConfig())
        self.summaryResolver = SummaryResolver(
            buildSummaryProviders(self.llmManager, summaryConfig),
            cache=self.summaryCache,
            ttl=summaryTtl,
        )

        self.tileCatalog = TileSourceCatalog(openWeatherMapKey=weatherConfig["api-key"])
        self.panel = WeatherPanel(self.weatherClient, self.summaryResolver)

    def createCoordinator(self, geolocator: Geolocator) -> DualSurfaceCoordinator:
        return DualSurfaceCoordinator(
            self.panel,
            geolocator,
            defaultLayers=self.overlaysConfig.get("default-layers", []),
            defaultBasemap=self.overlaysConfig.get("default-basemap", DEFAULT_BASEMAP),
        )

    def createSurface(self, mode: SurfaceMode, engine: RenderSurface) -> FlatMapSurface | GlobeSurface:
        """Wrap a rendering engine into the map surface for mode"""
        opacity = float(self.overlaysConfig.get("opacity", DEFAULT_OVERLAY_OPACITY))
        if mode == SurfaceMode.GLOBE_3D:
            return GlobeSurface(engine, self.tileCatalog, opacity)
        return FlatMapSurface(engine, self.tileCatalog, opacity)

    async def showWeather(self, lat: float, lon: float) -> Dict[str, Any]:
        """Fetch weather for one point and resolve its summary"""
        self.sweeper.start()
        try:
            payload = await self.weatherClient.fetchWeather(lat, lon)
            summary = await self.summaryResolver.resolve(payload)
        finally:
            await self.sweeper.stop()
        return {"payload": payload, "summary": summary}


def parseArguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Caelus - weather overlay core, dood!")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )
    parser.add_argument("--lat", type=float, help="Latitude to fetch weather for")
    parser.add_argument("--lon", type=float, help="Longitude to fetch weather for")
    args = parser.parse_args()

    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")

    args.config = os.path.abspath(args.config)
    if args.config_dir:
        args.config_dir = [os.path.abspath(dirPath) for dirPath in args.config_dir]

    return args


def prettyPrintConfig(configManager: ConfigManager):
    """Pretty-print the loaded configuration"""
    print("=== Caelus Configuration ===")
    print()
    print(utils.jsonDumps(configManager.config, indent=2))
    print()
    print("=== Configuration loaded successfully, dood! ===")


def main():
    """Main entry point."""
    args = parseArguments()

    try:
        if args.print_config:
            prettyPrintConfig(ConfigManager(args.config, args.config_dir))
            sys.exit(0)

        app = CaelusApp(configPath=args.config, configDirs=args.config_dir)
        if args.lat is None:
            logger.info("Nothing to do: pass --lat and --lon to fetch weather, dood!")
            return

        result = asyncio.run(app.showWeather(args.lat, args.lon))
        print(utils.jsonDumps(result["payload"], indent=2))
        print()
        print(result["summary"])
    except WeatherFetchError as e:
        logger.error(f"Weather fetch failed: {e}")
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    except Exception as e:
        logger.error(f"Caelus crashed: {e}")
        logger.exception(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
