"""
Geotime - resolve a local date at a named place into UTC, with TOML
configuration and memoized provider lookups.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from internal.config.manager import ConfigManager
from internal.services.local_time import DateValidationError, LocalTimeResolver, ResolvedTime
from lib.cache import CacheCoordinator, DictCache
from lib.errors import GeotimeError
from lib.geonames import GeoNamesClient
from lib.logging_utils import initLogging
from lib.place_search import PlaceSearchClient, SoftGeocodeError
from lib.rate_limiter import RateLimiterManager
from lib.timezone_math import formatOffset
from lib.utils import jsonDumps

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_BAD_INPUT = 2


class GeotimeApp:
    """Wires configuration, cache, rate limiting and provider clients into a resolver."""

    def __init__(self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None):
        self.configManager = ConfigManager(configPath, configDirs)
        initLogging(self.configManager.getLoggingConfig())

        cacheConfig = self.configManager.getCacheConfig()
        maxSize = cacheConfig["max-size"] or None
        self.store = DictCache[str, Any](defaultTtl=cacheConfig["ttl"], maxSize=maxSize)
        self.coordinator = CacheCoordinator[Any](self.store)

        self.rateLimiterManager = RateLimiterManager.getInstance()

        placeSearchConfig = self.configManager.getPlaceSearchConfig()
        self.placeSearch = PlaceSearchClient(
            apiKey=self.configManager.getPlaceSearchApiKey(),
            requestTimeout=placeSearchConfig.get("request-timeout", 10),
            apiUrl=placeSearchConfig.get("api-url"),
            rateLimiter=self.rateLimiterManager,
        )

        geoNamesConfig = self.configManager.getGeoNamesConfig()
        self.timezoneClient = GeoNamesClient(
            username=self.configManager.getGeoNamesUsername(),
            requestTimeout=geoNamesConfig.get("request-timeout", 10),
            apiUrl=geoNamesConfig.get("api-url"),
            rateLimiter=self.rateLimiterManager,
        )

        self.resolver = LocalTimeResolver(
            coordinator=self.coordinator,
            placeSearch=self.placeSearch,
            timezoneClient=self.timezoneClient,
            cacheVersion=cacheConfig["version"],
        )

    async def initialize(self) -> None:
        await self.rateLimiterManager.loadConfig(self.configManager.getRateLimiterConfig())

    async def destroy(self) -> None:
        await self.rateLimiterManager.destroy()

    async def resolve(
        self, date: str, city: str, country: Optional[str] = None, timeout: Optional[float] = None
    ) -> ResolvedTime:
        await self.initialize()
        try:
            return await self.resolver.convertLocalToUtc(date, city, country, timeout=timeout)
        finally:
            logger.debug(f"Coordinator stats: {self.coordinator.getStats()}")
            await self.destroy()


def resolvedTimeToDict(result: ResolvedTime) -> Dict[str, Any]:
    """Make JSON friendly view of resolution result"""
    return {
        "utc": result["utc"].isoformat().replace("+00:00", "Z"),
        "local": result["local"].isoformat(),
        "timezone": result["timezone"],
        "timezoneOffset": result["timezoneOffset"],
        "utcOffset": formatOffset(result["timezoneOffset"]),
        "lat": result["lat"],
        "lng": result["lng"],
    }


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Geotime - convert local date at a place to UTC, dood!")
    parser.add_argument("date", nargs="?", help='Local date: "YYYY-MM-DD HH:mm" or "YYYY-MM-DDTHH:mm[:ss[.sss]][Z]"')
    parser.add_argument("city", nargs="?", help="City name")
    parser.add_argument("--country", default=None, help="Country name, appended to the place query")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times), dood!",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Give up waiting after this many seconds")
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit, dood!",
    )
    args = parser.parse_args(argv)
    args.config = os.path.abspath(args.config)
    if args.config_dir:
        args.config_dir = [os.path.abspath(dirPath) for dirPath in args.config_dir]

    if not args.print_config and (not args.date or not args.city):
        parser.error("date and city are required")

    return args


def prettyPrintConfig(configManager: ConfigManager):
    """Pretty-print the loaded configuration, dood!"""
    print("=== Geotime Configuration ===")
    print()
    print(jsonDumps(configManager.config, indent=2))
    print()
    print("=== Configuration loaded successfully, dood! ===")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point, returns process exit status."""
    args = parse_arguments(argv)

    if args.print_config:
        prettyPrintConfig(ConfigManager(args.config, args.config_dir))
        return 0

    app = GeotimeApp(configPath=args.config, configDirs=args.config_dir)
    try:
        result = asyncio.run(app.resolve(args.date, args.city, args.country, timeout=args.timeout))
    except (DateValidationError, SoftGeocodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT
    except GeotimeError as e:
        logger.error(f"Resolution failed: {type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        return EXIT_FAILURE

    print(jsonDumps(resolvedTimeToDict(result), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
