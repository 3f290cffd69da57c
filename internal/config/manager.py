"""
Configuration management for Geotime.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import lib.utils as utils
from lib.rate_limiter import ProviderRateLimits

logger = logging.getLogger(__name__)

ENV_PLACEHOLDER_REGEX = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}")

DEFAULT_CACHE_VERSION = 1.32
DEFAULT_CACHE_TTL = 30 * 24 * 3600
DEFAULT_CACHE_MAX_SIZE = 10000

# Config sections of rate limited providers, named as the providers themselves
PROVIDER_SECTIONS = ("place-search", "geonames")


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace ${VAR} placeholder with environment value, keeping placeholder if VAR is unset."""
    return os.getenv(match.group(1), match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in strings, dicts and lists.

    Other values are returned unchanged.
    """
    if isinstance(value, str):
        return ENV_PLACEHOLDER_REGEX.sub(replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


def isUnresolved(value: Any) -> bool:
    """Check if value is empty or still an unsubstituted ${VAR} placeholder"""
    return not value or (isinstance(value, str) and ENV_PLACEHOLDER_REGEX.fullmatch(value) is not None)


class ConfigManager:
    """Loads TOML configuration (main file plus config directories) for Geotime, dood!"""

    def __init__(
        self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None, dotEnvFile: str = ".env"
    ):
        """Initialize ConfigManager with config file path and optional config directories."""
        self.config_path = configPath
        self.config_dirs = configDirs or []
        utils.load_dotenv(path=dotEnvFile)
        self.config = substituteEnvVars(self._loadConfig())

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory, sorted for stable merge order"""
        dirPath = Path(directory)

        if not dirPath.exists():
            logger.warning(f"Config directory {directory} does not exist, skipping, dood!")
            return []

        if not dirPath.is_dir():
            logger.warning(f"Config path {directory} is not a directory, skipping, dood!")
            return []

        tomlFiles = [path for path in dirPath.rglob("*.toml") if path.is_file()]
        for tomlFile in tomlFiles:
            logger.debug(f"Found config file: {tomlFile}")
        return sorted(tomlFiles)

    def _mergeConfigs(self, baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge newConfig into copy of baseConfig, newConfig wins"""
        merged = baseConfig.copy()

        for key, value in newConfig.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """
        Load main TOML file and merge .toml files of config directories over it.

        Broken files in config directories are logged and skipped.

        Raises:
            SystemExit: If there is neither main config file nor config
                directories, or the main config file can't be parsed
        """
        configFile = Path(self.config_path)
        hasConfigFile = configFile.exists()
        if not hasConfigFile and not self.config_dirs:
            logger.error(f"Configuration file {self.config_path} not found!")
            sys.exit(1)

        config: Dict[str, Any] = {}
        if hasConfigFile:
            try:
                with open(configFile, "rb") as f:
                    config = tomli.load(f)
            except (OSError, tomli.TOMLDecodeError) as e:
                logger.error(f"Failed to load configuration {self.config_path}: {e}")
                sys.exit(1)
            logger.info(f"Loaded main config from {self.config_path}")

        if self.config_dirs:
            logger.info(f"Scanning {len(self.config_dirs)} config directories for .toml files, dood!")

        for configDir in self.config_dirs:
            tomlFiles = self._findTomlFilesRecursive(configDir)
            logger.info(f"Found {len(tomlFiles)} .toml files in {configDir}")

            for tomlFile in tomlFiles:
                try:
                    with open(tomlFile, "rb") as f:
                        dirConfig = tomli.load(f)
                except (OSError, tomli.TOMLDecodeError) as e:
                    logger.error(f"Failed to load config file {tomlFile}: {e}")
                    continue

                config = self._mergeConfigs(config, dirConfig)
                logger.info(f"Merged config from {tomlFile}")

        logger.info("Configuration loaded and merged successfully, dood!")
        return config

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getRateLimiterConfig(self) -> ProviderRateLimits:
        """
        Get rate limits of providers.

        Returns:
            Dict provider name -> rate-limit table of that provider's section,
            providers without a rate-limit table are left out
        """
        limits: ProviderRateLimits = {}
        for provider in PROVIDER_SECTIONS:
            rateLimit = self.get(provider, {}).get("rate-limit")
            if rateLimit:
                limits[provider] = rateLimit
        return limits

    def getPlaceSearchConfig(self) -> Dict[str, Any]:
        """
        Get place search configuration

        Returns:
            Dict with api-key, request-timeout and optional api-url
        """
        return self.get("place-search", {})

    def getGeoNamesConfig(self) -> Dict[str, Any]:
        """
        Get GeoNames configuration

        Returns:
            Dict with username, request-timeout and optional api-url
        """
        return self.get("geonames", {})

    def getCacheConfig(self) -> Dict[str, Any]:
        """
        Get cache configuration with defaults applied.

        Returns:
            Dict with version (key suffix, default 1.32), ttl (seconds,
            default 30 days, negative for no expiration) and max-size
            (entries, default 10000, 0 for unlimited)
        """
        config = self.get("cache", {})
        return {
            **config,
            "version": config.get("version", DEFAULT_CACHE_VERSION),
            "ttl": config.get("ttl", DEFAULT_CACHE_TTL),
            "max-size": config.get("max-size", DEFAULT_CACHE_MAX_SIZE),
        }

    def getPlaceSearchApiKey(self) -> str:
        """Get place search API key, exiting if it is not configured."""
        apiKey = self.getPlaceSearchConfig().get("api-key", "")
        if isUnresolved(apiKey) or apiKey == "YOUR_API_KEY_HERE":
            logger.error("Please set [place-search] api-key in config.toml or GOOGLE_PLACES_API_KEY in .env!")
            sys.exit(1)
        return apiKey

    def getGeoNamesUsername(self) -> str:
        """Get GeoNames username, exiting if it is not configured."""
        username = self.getGeoNamesConfig().get("username", "")
        if isUnresolved(username):
            logger.error("Please set [geonames] username in config.toml or GEONAMES_USERNAME in .env!")
            sys.exit(1)
        return username
