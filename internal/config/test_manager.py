"""
Tests for the Configuration Manager.

Covers configuration loading, merging of config directories, environment
substitution, validation of required keys and section getters.
"""

import tempfile
from pathlib import Path

import pytest

from internal.config.manager import ConfigManager, substituteEnvVars

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def tempDir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sampleConfigToml():
    """Provide sample valid TOML configuration."""
    return """
[openweathermap]
api-key = "owm_test_key"
weather-cache-ttl = 300

[summary]
cache-ttl = 600
providers = ["openai-summary", "rule-based"]

[logging]
level = "INFO"
"""


@pytest.fixture
def defaultsToml():
    """Provide default configuration TOML."""
    return """
[openweathermap]
api-key = "default_key"
request-timeout = 10
units = "metric"

[overlays]
opacity = 0.75
default-layers = ["temperature"]
"""


@pytest.fixture
def overrideToml():
    """Provide override configuration TOML."""
    return """
[openweathermap]
request-timeout = 5

[overlays]
default-basemap = "esri"

[logging]
level = "DEBUG"
"""


@pytest.fixture
def invalidSyntaxToml():
    return """
[openweathermap
api-key = "missing_bracket"
"""


# ============================================================================
# Helper Functions
# ============================================================================


def createConfigFile(directory: Path, filename: str, content: str) -> Path:
    """Create a TOML config file in the specified directory."""
    filePath = directory / filename
    filePath.write_text(content)
    return filePath


def createConfigDir(baseDir: Path, dirName: str, files: dict) -> Path:
    """Create a config directory with multiple TOML files."""
    configDir = baseDir / dirName
    configDir.mkdir(parents=True, exist_ok=True)

    for filename, content in files.items():
        createConfigFile(configDir, filename, content)

    return configDir


def makeManager(tempDir: Path, configPath: Path, **kwargs) -> ConfigManager:
    return ConfigManager(str(configPath), dotEnvFile=str(tempDir / ".env"), **kwargs)


# ============================================================================
# Loading and merging
# ============================================================================


class TestConfigurationLoading:
    """Test loading of the main file and config directories."""

    def testLoadSingleConfigFile(self, tempDir, sampleConfigToml):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)

        manager = makeManager(tempDir, configPath)

        assert manager.configPath == str(configPath)
        assert manager.getOpenWeatherMapConfig()["api-key"] == "owm_test_key"
        assert manager.getSummaryConfig()["providers"] == ["openai-summary", "rule-based"]

    def testConfigDirsOnly(self, tempDir, defaultsToml):
        """Main file may be absent when config dirs are given"""
        configDir = createConfigDir(tempDir, "defaults", {"defaults.toml": defaultsToml})

        manager = makeManager(tempDir, tempDir / "nonexistent.toml", configDirs=[str(configDir)])

        assert manager.getOpenWeatherMapConfig()["api-key"] == "default_key"

    def testMissingConfigAndNoDirs(self, tempDir):
        with pytest.raises(SystemExit):
            makeManager(tempDir, tempDir / "nonexistent.toml")

    def testMergePriority(self, tempDir, sampleConfigToml, defaultsToml, overrideToml):
        """Files are merged in sorted order, later values win, nested tables merge"""
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        configDir = createConfigDir(
            tempDir, "conf.d", {"00-defaults.toml": defaultsToml, "10-override.toml": overrideToml}
        )

        manager = makeManager(tempDir, configPath, configDirs=[str(configDir)])

        weather = manager.getOpenWeatherMapConfig()
        assert weather["api-key"] == "default_key"
        assert weather["request-timeout"] == 5
        assert weather["weather-cache-ttl"] == 300
        assert manager.getOverlaysConfig() == {
            "opacity": 0.75,
            "default-layers": ["temperature"],
            "default-basemap": "esri",
        }
        assert manager.getLoggingConfig()["level"] == "DEBUG"

    def testRecursiveConfigDiscovery(self, tempDir, sampleConfigToml):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        nested = createConfigDir(tempDir, "conf.d/models/openai", {})
        createConfigFile(nested, "provider.toml", '[models.providers.openai]\ntype = "openai"\n')

        manager = makeManager(tempDir, configPath, configDirs=[str(tempDir / "conf.d")])

        assert manager.getModelsConfig()["providers"]["openai"]["type"] == "openai"


# ============================================================================
# Environment substitution
# ============================================================================


class TestEnvSubstitution:
    def testSubstituteNested(self, monkeypatch):
        monkeypatch.setenv("CAELUS_TEST_VALUE", "42")

        result = substituteEnvVars({"a": ["${CAELUS_TEST_VALUE}", 1], "b": {"c": "x-${CAELUS_TEST_VALUE}"}})

        assert result == {"a": ["42", 1], "b": {"c": "x-42"}}

    def testUnsetVariableIsKept(self, monkeypatch):
        monkeypatch.delenv("CAELUS_UNSET_VALUE", raising=False)

        assert substituteEnvVars("${CAELUS_UNSET_VALUE}") == "${CAELUS_UNSET_VALUE}"

    def testApiKeyFromEnvironment(self, tempDir, monkeypatch):
        monkeypatch.setenv("CAELUS_OWM_KEY", "env_key")
        configPath = createConfigFile(tempDir, "config.toml", '[openweathermap]\napi-key = "${CAELUS_OWM_KEY}"\n')

        manager = makeManager(tempDir, configPath)

        assert manager.getOpenWeatherMapConfig()["api-key"] == "env_key"

    def testApiKeyFromDotEnv(self, tempDir, monkeypatch):
        monkeypatch.delenv("CAELUS_DOTENV_KEY", raising=False)
        createConfigFile(tempDir, ".env", "CAELUS_DOTENV_KEY=dotenv_key\n")
        configPath = createConfigFile(tempDir, "config.toml", '[openweathermap]\napi-key = "${CAELUS_DOTENV_KEY}"\n')

        manager = makeManager(tempDir, configPath)

        assert manager.getOpenWeatherMapConfig()["api-key"] == "dotenv_key"
        monkeypatch.delenv("CAELUS_DOTENV_KEY", raising=False)


# ============================================================================
# Validation and errors
# ============================================================================


class TestValidation:
    def testMissingApiKey(self, tempDir):
        configPath = createConfigFile(tempDir, "config.toml", '[logging]\nlevel = "INFO"\n')

        with pytest.raises(SystemExit):
            makeManager(tempDir, configPath)

    def testPlaceholderApiKey(self, tempDir):
        configPath = createConfigFile(
            tempDir, "config.toml", '[openweathermap]\napi-key = "YOUR_OPENWEATHERMAP_API_KEY"\n'
        )

        with pytest.raises(SystemExit):
            makeManager(tempDir, configPath)

    def testUnresolvedEnvApiKey(self, tempDir, monkeypatch):
        monkeypatch.delenv("CAELUS_MISSING_KEY", raising=False)
        configPath = createConfigFile(tempDir, "config.toml", '[openweathermap]\napi-key = "${CAELUS_MISSING_KEY}"\n')

        with pytest.raises(SystemExit):
            makeManager(tempDir, configPath)

    def testInvalidTomlSyntax(self, tempDir, invalidSyntaxToml):
        configPath = createConfigFile(tempDir, "config.toml", invalidSyntaxToml)

        with pytest.raises(SystemExit):
            makeManager(tempDir, configPath)

    def testInvalidTomlInConfigDirIsSkipped(self, tempDir, sampleConfigToml, invalidSyntaxToml):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        configDir = createConfigDir(tempDir, "configs", {"invalid.toml": invalidSyntaxToml})

        manager = makeManager(tempDir, configPath, configDirs=[str(configDir)])

        assert manager.getOpenWeatherMapConfig()["api-key"] == "owm_test_key"

    def testBadConfigDirsAreSkipped(self, tempDir, sampleConfigToml):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        filePath = createConfigFile(tempDir, "notadir.txt", "content")

        manager = makeManager(tempDir, configPath, configDirs=[str(tempDir / "nonexistent"), str(filePath)])

        assert manager.getOpenWeatherMapConfig()["api-key"] == "owm_test_key"


# ============================================================================
# Getters
# ============================================================================


class TestGetterMethods:
    def testEmptySections(self, tempDir):
        configPath = createConfigFile(tempDir, "config.toml", '[openweathermap]\napi-key = "k"\n')

        manager = makeManager(tempDir, configPath)

        assert manager.getSummaryConfig() == {}
        assert manager.getModelsConfig() == {}
        assert manager.getOverlaysConfig() == {}
        assert manager.getLoggingConfig() == {}
        assert manager.getApplicationConfig() == {}
        assert manager.get("nonexistent", "fallback") == "fallback"
