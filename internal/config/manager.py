"""
Configuration management for Caelus.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import lib.utils as utils

logger = logging.getLogger(__name__)

ENV_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}")
API_KEY_PLACEHOLDERS = ("", "YOUR_OPENWEATHERMAP_API_KEY")


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Value of the matched ${VAR}, or the placeholder itself if VAR is unset"""
    return os.getenv(match.group(1), match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in strings, dicts and lists.

    Args:
        value: Configuration value of any type.

    Returns:
        A copy of value with placeholders replaced; non-container, non-string
        values are returned unchanged.
    """
    if isinstance(value, str):
        return ENV_PLACEHOLDER_RE.sub(replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


class ConfigManager:
    """Loads, merges and validates Caelus configuration, dood!

    Configuration is read once at start-up and is not reloaded: the values
    stay the same for the whole process lifetime.
    """

    def __init__(
        self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None, dotEnvFile: str = ".env"
    ):
        self.configPath = configPath
        self.configDirs = configDirs or []
        utils.load_dotenv(path=dotEnvFile)
        self.config = substituteEnvVars(self._loadConfig())
        self._validate()

        rootDir = self.config.get("application", {}).get("root-dir", None)
        if rootDir is not None:
            os.chdir(rootDir)
            logger.info(f"Changed root directory to {rootDir}")

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """All .toml files under directory, sorted, dood!"""
        dirPath = Path(directory)

        if not dirPath.exists():
            logger.warning(f"Config directory {directory} does not exist, skipping, dood!")
            return []
        if not dirPath.is_dir():
            logger.warning(f"Config path {directory} is not a directory, skipping, dood!")
            return []

        tomlFiles = [path for path in dirPath.rglob("*.toml") if path.is_file()]
        for path in tomlFiles:
            logger.debug(f"Found config file: {path}")
        return sorted(tomlFiles)

    def _mergeConfigs(self, baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge, values from newConfig win"""
        merged = baseConfig.copy()

        for key, value in newConfig.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """
        Load the main TOML file, then merge every .toml found in config directories.

        Raises:
            SystemExit: if there is neither a main config file nor config
                directories, or the main file cannot be parsed.
        """
        configFile = Path(self.configPath)
        hasConfigFile = configFile.exists()
        if not hasConfigFile and not self.configDirs:
            logger.error(f"Configuration file {self.configPath} not found!")
            sys.exit(1)

        config: Dict[str, Any] = {}
        if hasConfigFile:
            try:
                with open(configFile, "rb") as f:
                    config = tomli.load(f)
            except (OSError, tomli.TOMLDecodeError) as e:
                logger.error(f"Failed to load configuration {self.configPath}: {e}")
                sys.exit(1)
            logger.info(f"Loaded main config from {self.configPath}")

        for configDir in self.configDirs:
            tomlFiles = self._findTomlFilesRecursive(configDir)
            logger.info(f"Found {len(tomlFiles)} .toml files in {configDir}")

            for tomlFile in tomlFiles:
                try:
                    with open(tomlFile, "rb") as f:
                        dirConfig = tomli.load(f)
                except (OSError, tomli.TOMLDecodeError) as e:
                    # One broken drop-in file does not stop start-up
                    logger.error(f"Failed to load config file {tomlFile}: {e}")
                    continue

                config = self._mergeConfigs(config, dirConfig)
                logger.info(f"Merged config from {tomlFile}")

        logger.info("Configuration loaded and merged successfully, dood!")
        return config

    def _validate(self) -> None:
        apiKey = self.getOpenWeatherMapConfig().get("api-key", "")
        if apiKey in API_KEY_PLACEHOLDERS or ENV_PLACEHOLDER_RE.fullmatch(str(apiKey)):
            logger.error("openweathermap.api-key is not set, please set it in config.toml!")
            sys.exit(1)

    def get(self, key: str, default=None) -> Any:
        """Get top-level configuration section by key."""
        return self.config.get(key, default)

    def getApplicationConfig(self) -> Dict[str, Any]:
        return self.get("application", {})

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getOpenWeatherMapConfig(self) -> Dict[str, Any]:
        """
        Get OpenWeatherMap configuration

        Returns:
            Dict with api-key, weather-cache-ttl, request-timeout and units
        """
        return self.get("openweathermap", {})

    def getSummaryConfig(self) -> Dict[str, Any]:
        """
        Get weather summary configuration

        Returns:
            Dict with cache-ttl, sweep-interval and providers (ordered list of
            summary provider names, "rule-based" is always appended if missing)
        """
        return self.get("summary", {})

    def getModelsConfig(self) -> Dict[str, Any]:
        """Get models configuration for LLM manager, dood!"""
        return self.get("models", {})

    def getOverlaysConfig(self) -> Dict[str, Any]:
        """Get map overlays configuration (opacity, default-layers, default-basemap)."""
        return self.get("overlays", {})
