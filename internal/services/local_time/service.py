"""
Local Time Resolution Service

This module provides the LocalTimeResolver class converting a local
wall-clock date at a named place into UTC, dood!

Resolution runs through three memoized layers sharing one CacheCoordinator:

1. localToUtc:<date>:<query>:<version> - the whole answer
2. location:<query>:<version> - place search result (soft failures included)
3. tz:[<lat>,<lng>]:<version> - timezone of coordinates

Soft place search failures are remembered (as sentinels) in layers 1 and 2
and replayed as the same error type. Hard failures of any layer are never
stored, so the next call retries the provider.

Example:
    >>> await RateLimiterManager.getInstance().loadConfig(configManager.getRateLimiterConfig())
    >>> resolver = LocalTimeResolver(
    ...     coordinator=CacheCoordinator(DictCache[str, Any](defaultTtl=None)),
    ...     placeSearch=PlaceSearchClient(apiKey="..."),
    ...     timezoneClient=GeoNamesClient(username="..."),
    ... )
    >>> result = await resolver.convertLocalToUtc("2023-06-01 12:00", "Paris", "France")
    >>> result["utc"]
    datetime.datetime(2023, 6, 1, 10, 0, tzinfo=datetime.timezone.utc)
"""

import datetime
import logging
import re
from typing import Any, Optional, Protocol, cast

from lib.cache import CacheCoordinator
from lib.place_search import Location, SoftGeocodeError
from lib.timezone_math import localToUtc, offsetHours, utcToLocal
from lib.utils import runWithTimeout

from .errors import DateValidationError
from .models import GeocodeFailure, ResolvedTime, geocodeFailureToError, isGeocodeFailure, makeGeocodeFailure

logger = logging.getLogger(__name__)

DEFAULT_CACHE_VERSION = 1.32

# YYYY-MM-DD HH:mm, ASCII digits only, matched with fullmatch()
SHORT_DATE_REGEX = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2}) ([0-9]{2}):([0-9]{2})")
# YYYY-MM-DDTHH:mm[:ss[.fff]][Z]
FULL_DATE_REGEX = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2})(?::([0-9]{2})(?:\.([0-9]{1,6}))?)?Z?"
)


class PlaceSearchProtocol(Protocol):
    async def resolve(self, query: str) -> Location: ...


class TimezoneClientProtocol(Protocol):
    async def resolve(self, location: Location) -> str: ...


def parseLocalDate(value: Any) -> datetime.datetime:
    """
    Validate and normalize a local date to a naive wall-clock datetime.

    Aware datetimes are moved to UTC and their reading is used. Strings must
    match a supported shape and name a real calendar moment.

    Raises:
        DateValidationError: For anything else
    """
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        return value

    if not isinstance(value, str):
        raise DateValidationError(value)

    match = SHORT_DATE_REGEX.fullmatch(value) or FULL_DATE_REGEX.fullmatch(value)
    if match is None:
        raise DateValidationError(value)

    year, month, day, hour, minute = (int(part) for part in match.groups()[:5])
    second = 0
    microsecond = 0
    if match.re is FULL_DATE_REGEX:
        if match.group(6) is not None:
            second = int(match.group(6))
        if match.group(7) is not None:
            microsecond = int(match.group(7).ljust(6, "0"))

    try:
        return datetime.datetime(year, month, day, hour, minute, second, microsecond)
    except ValueError as e:
        raise DateValidationError(value) from e


def buildQuery(city: Optional[str], country: Optional[str] = None) -> str:
    """Join place parts into query text: "city, country" or bare city"""
    city = (city or "").strip()
    country = (country or "").strip()
    if city and country:
        return f"{city}, {country}"
    return city


def _formatVersion(version: float | str) -> str:
    return str(version)


def makeResultKey(date: datetime.datetime, query: str, version: float | str) -> str:
    return f"localToUtc:{date.isoformat()}:{query}:{_formatVersion(version)}"


def makeLocationKey(query: str, version: float | str) -> str:
    return f"location:{query}:{_formatVersion(version)}"


def makeTimezoneKey(location: Location, version: float | str) -> str:
    return f"tz:[{location['lat']},{location['lng']}]:{_formatVersion(version)}"


class LocalTimeResolver:
    """
    Resolve local wall-clock date at a place into UTC, dood!

    All collaborators are injected: the coordinator (and the store behind it)
    decides where memoized answers live, the clients decide how providers are
    reached.
    """

    def __init__(
        self,
        coordinator: CacheCoordinator[Any],
        placeSearch: PlaceSearchProtocol,
        timezoneClient: TimezoneClientProtocol,
        cacheVersion: float | str = DEFAULT_CACHE_VERSION,
    ):
        """
        Initialize resolver.

        Args:
            coordinator: Memoization coordinator shared by all three layers
            placeSearch: Place search client (query -> Location)
            timezoneClient: Timezone client (Location -> timezone id)
            cacheVersion: Suffix of every cache key, bump it to invalidate
        """
        self.coordinator = coordinator
        self.placeSearch = placeSearch
        self.timezoneClient = timezoneClient
        self.cacheVersion = cacheVersion

    async def convertLocalToUtc(
        self,
        date: datetime.datetime | str,
        city: Optional[str],
        country: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
    ) -> ResolvedTime:
        """
        Resolve local date at city (and country) into UTC, dood!

        Args:
            date: Local wall-clock date, datetime or "YYYY-MM-DD HH:mm" /
                "YYYY-MM-DDTHH:mm[:ss[.fff]][Z]" string
            city: City name
            country: Optional country name
            timeout: Optional timeout in seconds. On timeout the resolution
                keeps running and still fills the cache.

        Returns:
            ResolvedTime with utc, local, timezone, timezoneOffset, lat and lng

        Raises:
            DateValidationError: Bad date (raised before any cache or provider access)
            ZeroResultsError, InvalidQueryError: Place not found (remembered)
            HardGeocodeError, TimezoneLookupError: Provider failures (not remembered)
            OperationTimeoutError: Timeout elapsed
        """
        localDate = parseLocalDate(date)
        query = buildQuery(city, country)

        resolution = self._resolve(localDate, query)
        if timeout is not None:
            return await runWithTimeout(resolution, timeout, operation=f"Resolving {query!r}")
        return await resolution

    async def _resolve(self, localDate: datetime.datetime, query: str) -> ResolvedTime:
        key = makeResultKey(localDate, query, self.cacheVersion)

        async def produce() -> ResolvedTime | GeocodeFailure:
            return await self._computeResolvedTime(localDate, query)

        result = await self.coordinator.wrap(key, produce)
        if isGeocodeFailure(result):
            raise geocodeFailureToError(cast(GeocodeFailure, result))

        return ResolvedTime(**result)

    async def _computeResolvedTime(self, localDate: datetime.datetime, query: str) -> ResolvedTime | GeocodeFailure:
        try:
            location = await self.getLocation(query)
        except SoftGeocodeError as e:
            return makeGeocodeFailure(e)

        timezoneId = await self.getTimezone(location)

        utc = localToUtc(localDate, timezoneId)
        result = ResolvedTime(
            utc=utc,
            local=utcToLocal(utc, timezoneId),
            timezone=timezoneId,
            timezoneOffset=offsetHours(localDate, timezoneId),
            lat=location["lat"],
            lng=location["lng"],
        )
        logger.info(f"Resolved {localDate.isoformat()} at {query!r} to {utc.isoformat()} ({timezoneId})")
        return result

    async def getLocation(self, query: str) -> Location:
        """
        Get coordinates of query through the location layer.

        Raises:
            SoftGeocodeError: Remembered soft failure (fresh or replayed)
            HardGeocodeError: Provider failure, not remembered
        """
        key = makeLocationKey(query, self.cacheVersion)

        async def produce() -> Location | GeocodeFailure:
            try:
                return await self.placeSearch.resolve(query)
            except SoftGeocodeError as e:
                logger.debug(f"Remembering soft place search failure for {query!r}: {e}")
                return makeGeocodeFailure(e)

        location = await self.coordinator.wrap(key, produce)
        if isGeocodeFailure(location):
            raise geocodeFailureToError(cast(GeocodeFailure, location))

        return cast(Location, location)

    async def getTimezone(self, location: Location) -> str:
        """
        Get timezone id of location through the timezone layer.

        Raises:
            TimezoneLookupError: Provider failure, not remembered
        """
        key = makeTimezoneKey(location, self.cacheVersion)

        async def produce() -> str:
            return await self.timezoneClient.resolve(location)

        return await self.coordinator.wrap(key, produce)
