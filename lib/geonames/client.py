"""
GeoNames Timezone Async Client

This module provides the GeoNamesClient class for looking up the IANA
timezone of coordinates with the GeoNames timezoneJSON web service.
"""

import logging
from typing import Any, Dict, Optional, cast

import httpx

from lib.place_search.models import Location
from lib.rate_limiter import RateLimiterInterface, RateLimiterManager

from .errors import TimezoneLookupError
from .models import TimezoneResponse

logger = logging.getLogger(__name__)


class GeoNamesClient:
    """Async client for GeoNames timezone lookup, dood!

    Every failure is a TimezoneLookupError: the lookup is never answered with
    a stable negative result, so callers must not memoize failures.

    Example:
        >>> client = GeoNamesClient(username="demo")
        >>> await client.resolve({"lat": 40.7128, "lng": -74.006})
        'America/New_York'
    """

    API_URL = "http://api.geonames.org/timezoneJSON"

    def __init__(
        self,
        username: str,
        *,
        requestTimeout: float = 10,
        apiUrl: Optional[str] = None,
        rateLimiter: Optional[RateLimiterInterface] = None,
        rateLimiterProvider: str = "geonames",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize GeoNames client.

        Args:
            username: GeoNames account name (required)
            requestTimeout: HTTP request timeout in seconds (default: 10)
            apiUrl: Override of the timezone endpoint
            rateLimiter: Rate limiter to apply (default: RateLimiterManager singleton)
            rateLimiterProvider: Provider name for rate limiting (default: "geonames")
            transport: Optional httpx transport (used by tests to fake the provider)
        """
        self.username = username
        self.requestTimeout = requestTimeout
        self.apiUrl = apiUrl or self.API_URL
        self.rateLimiterProvider = rateLimiterProvider
        self.transport = transport
        self._rateLimiter = rateLimiter if rateLimiter is not None else RateLimiterManager.getInstance()

    async def lookup(self, lat: float, lng: float) -> TimezoneResponse:
        """Get full timezone record for coordinates.

        Raises:
            TimezoneLookupError: On transport/HTTP failure or non-JSON body
        """
        data = await self._makeRequest(lat, lng)
        return cast(TimezoneResponse, data)

    async def resolve(self, location: Location) -> str:
        """Resolve coordinates to IANA timezone identifier, dood!

        Args:
            location: Coordinates with lat and lng

        Returns:
            Timezone identifier (e.g. "Europe/Paris")

        Raises:
            TimezoneLookupError: If the response has no timezoneId or the
                request failed
        """
        lat, lng = location["lat"], location["lng"]
        response = await self.lookup(lat, lng)

        timezoneId = response.get("timezoneId")
        if not timezoneId or not isinstance(timezoneId, str):
            status = response.get("status")
            providerCode = status.get("value") if isinstance(status, dict) else None
            logger.error(f"No timezoneId for [{lat},{lng}]: {response!r}")
            raise TimezoneLookupError(
                f"No timezoneId in {response!r}",
                lat,
                lng,
                httpStatus=200,
                providerCode=providerCode,
            )

        return timezoneId

    async def _makeRequest(self, lat: float, lng: float) -> Dict[str, Any]:
        """Make HTTP request to GeoNames.

        Raises:
            TimezoneLookupError: On timeout, network error, non-200 status or
                non-JSON body
        """
        params = {"username": self.username, "lat": lat, "lng": lng}
        logger.debug(f"Making timezone request for [{lat},{lng}]")

        await self._rateLimiter.applyLimit(self.rateLimiterProvider)

        try:
            async with httpx.AsyncClient(timeout=self.requestTimeout, transport=self.transport) as session:
                response = await session.get(self.apiUrl, params=params)
        except httpx.TimeoutException as e:
            logger.error(f"Timezone request timeout for [{lat},{lng}]")
            raise TimezoneLookupError("Timezone request timeout", lat, lng) from e
        except httpx.RequestError as e:
            logger.error(f"Timezone request network error: {e}")
            raise TimezoneLookupError(f"Timezone request network error: {e}", lat, lng) from e

        if response.status_code != 200:
            logger.error(f"Timezone request failed: {response.status_code}")
            raise TimezoneLookupError(
                f"Timezone request failed with HTTP {response.status_code}",
                lat,
                lng,
                httpStatus=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse timezone response: {e}")
            raise TimezoneLookupError("Failed to parse timezone response", lat, lng, httpStatus=200) from e

        if not isinstance(data, dict):
            raise TimezoneLookupError(f"Unexpected timezone payload: {data!r}", lat, lng, httpStatus=200)

        return data
