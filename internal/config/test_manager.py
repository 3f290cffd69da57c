"""
Tests for the Configuration Manager.

Covers configuration loading, directory merging, environment substitution,
defaults of the cache section and credential validation.
"""

import os
import tempfile
from pathlib import Path
from typing import Dict
from unittest.mock import patch

import pytest

from internal.config.manager import ConfigManager, isUnresolved, substituteEnvVars

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
[place-search]
api-key = "test_places_key"
request-timeout = 5

[geonames]
username = "test_user"

[cache]
version = 1.32

[logging]
level = "INFO"
"""


@pytest.fixture
def overrideToml():
    """Provide override configuration TOML."""
    return """
[geonames]
username = "override_user"
request-timeout = 20

[cache]
ttl = 600

[logging]
level = "DEBUG"
"""


@pytest.fixture
def invalidSyntaxToml():
    """Provide invalid TOML syntax."""
    return """
[place-search
api-key = "broken"
"""


@pytest.fixture
def noDotEnv(tempDir):
    """Path of .env file which does not exist"""
    return str(tempDir / "missing.env")


def createConfigFile(directory: Path, filename: str, content: str) -> Path:
    """Write a config file and return its path."""
    path = directory / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def createConfigDir(baseDir: Path, dirName: str, files: Dict[str, str]) -> Path:
    """Create a config directory with given files."""
    configDir = baseDir / dirName
    configDir.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        createConfigFile(configDir, filename, content)
    return configDir


# ============================================================================
# Loading Tests
# ============================================================================


class TestConfigurationLoading:
    """Test ConfigManager loading and merging."""

    def testLoadSingleConfigFile(self, tempDir, sampleConfigToml, noDotEnv):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)

        manager = ConfigManager(str(configPath), dotEnvFile=noDotEnv)

        assert manager.config_path == str(configPath)
        assert manager.getPlaceSearchConfig()["api-key"] == "test_places_key"
        assert manager.getGeoNamesConfig()["username"] == "test_user"
        assert manager.getLoggingConfig() == {"level": "INFO"}

    def testConfigDirOverridesMainFile(self, tempDir, sampleConfigToml, overrideToml, noDotEnv):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        configDir = createConfigDir(tempDir, "conf.d", {"override.toml": overrideToml})

        manager = ConfigManager(str(configPath), configDirs=[str(configDir)], dotEnvFile=noDotEnv)

        geonames = manager.getGeoNamesConfig()
        assert geonames["username"] == "override_user"
        assert geonames["request-timeout"] == 20
        # Untouched keys of merged sections survive
        assert manager.getPlaceSearchConfig()["request-timeout"] == 5
        assert manager.getCacheConfig()["version"] == 1.32
        assert manager.getCacheConfig()["ttl"] == 600

    def testRecursiveDiscoveryIsSorted(self, tempDir, noDotEnv):
        configDir = createConfigDir(
            tempDir,
            "conf.d",
            {
                "00-base.toml": '[geonames]\nusername = "base"\n',
                "nested/10-local.toml": '[geonames]\nusername = "local"\n',
            },
        )

        manager = ConfigManager(str(tempDir / "missing.toml"), configDirs=[str(configDir)], dotEnvFile=noDotEnv)

        assert manager.getGeoNamesConfig()["username"] == "local"

    def testMissingConfigWithoutDirsExits(self, tempDir, noDotEnv):
        with pytest.raises(SystemExit):
            ConfigManager(str(tempDir / "missing.toml"), dotEnvFile=noDotEnv)

    def testInvalidMainConfigExits(self, tempDir, invalidSyntaxToml, noDotEnv):
        configPath = createConfigFile(tempDir, "config.toml", invalidSyntaxToml)

        with pytest.raises(SystemExit):
            ConfigManager(str(configPath), dotEnvFile=noDotEnv)

    def testInvalidDirConfigIsSkipped(self, tempDir, sampleConfigToml, invalidSyntaxToml, noDotEnv):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        configDir = createConfigDir(tempDir, "conf.d", {"broken.toml": invalidSyntaxToml})

        manager = ConfigManager(str(configPath), configDirs=[str(configDir), str(tempDir / "nope")], dotEnvFile=noDotEnv)

        assert manager.getPlaceSearchConfig()["api-key"] == "test_places_key"


# ============================================================================
# Environment Substitution Tests
# ============================================================================


class TestEnvironmentSubstitution:
    """Test ${VAR} placeholders."""

    def testSubstituteNested(self):
        with patch.dict(os.environ, {"GEOTIME_TEST_VALUE": "secret"}):
            result = substituteEnvVars({"a": "${GEOTIME_TEST_VALUE}", "b": ["x-${GEOTIME_TEST_VALUE}", 1]})

        assert result == {"a": "secret", "b": ["x-secret", 1]}

    def testUnsetVariableIsKept(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substituteEnvVars("${GEOTIME_NOT_SET}") == "${GEOTIME_NOT_SET}"

    def testDotEnvFeedsPlaceholders(self, tempDir):
        configPath = createConfigFile(tempDir, "config.toml", '[geonames]\nusername = "${GEOTIME_TEST_GEONAMES}"\n')
        dotEnv = createConfigFile(tempDir, ".env", "GEOTIME_TEST_GEONAMES=from_dotenv\n")

        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GEOTIME_TEST_GEONAMES", None)
            manager = ConfigManager(str(configPath), dotEnvFile=str(dotEnv))

            assert manager.getGeoNamesUsername() == "from_dotenv"


# ============================================================================
# Getter Tests
# ============================================================================


class TestGetterMethods:
    """Test section getters and defaults."""

    def testCacheDefaults(self, tempDir, noDotEnv):
        configPath = createConfigFile(tempDir, "config.toml", '[logging]\nlevel = "INFO"\n')

        manager = ConfigManager(str(configPath), dotEnvFile=noDotEnv)

        assert manager.getCacheConfig() == {"version": 1.32, "ttl": 2592000, "max-size": 10000}
        assert manager.getPlaceSearchConfig() == {}
        assert manager.getRateLimiterConfig() == {}

    def testRateLimitsFromProviderSections(self, tempDir, noDotEnv):
        content = (
            '[place-search]\napi-key = "k"\n\n'
            '[geonames]\nusername = "u"\nrate-limit = { max-requests = 1000, window-seconds = 3600 }\n'
        )
        configPath = createConfigFile(tempDir, "config.toml", content)

        manager = ConfigManager(str(configPath), dotEnvFile=noDotEnv)

        assert manager.getRateLimiterConfig() == {"geonames": {"max-requests": 1000, "window-seconds": 3600}}

    def testCredentials(self, tempDir, sampleConfigToml, noDotEnv):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)

        manager = ConfigManager(str(configPath), dotEnvFile=noDotEnv)

        assert manager.getPlaceSearchApiKey() == "test_places_key"
        assert manager.getGeoNamesUsername() == "test_user"

    def testMissingCredentialsExit(self, tempDir, noDotEnv):
        content = '[place-search]\napi-key = "${GEOTIME_UNSET_KEY}"\n\n[geonames]\nusername = ""\n'
        configPath = createConfigFile(tempDir, "config.toml", content)

        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(configPath), dotEnvFile=noDotEnv)

            with pytest.raises(SystemExit):
                manager.getPlaceSearchApiKey()
            with pytest.raises(SystemExit):
                manager.getGeoNamesUsername()

    def testIsUnresolved(self):
        assert isUnresolved("")
        assert isUnresolved(None)
        assert isUnresolved("${SOMETHING}")
        assert not isUnresolved("value")
        assert not isUnresolved("prefix-${SOMETHING}")
