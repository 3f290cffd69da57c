"""
Place Search API Async Client

This module provides the PlaceSearchClient class resolving free-text place
queries ("Paris, France") to coordinates via the Google Places text search
API, with failure classification and rate limiting.
"""

import logging
from typing import Any, Dict, Optional, cast

import httpx

from lib.rate_limiter import RateLimiterInterface, RateLimiterManager

from .errors import HardGeocodeError, InvalidQueryError, ZeroResultsError
from .models import Location, PlaceResult, TextSearchResponse

logger = logging.getLogger(__name__)


class PlaceSearchClient:
    """Async client for place text search, dood!

    Creates a new HTTP session for each request to support concurrent
    operations. Results are not cached here: memoization (including of soft
    failures) is the caller's business.

    Example:
        >>> client = PlaceSearchClient(apiKey="your_api_key")
        >>> location = await client.resolve("Paris, France")
        >>> print(location)  # {'lat': 48.856614, 'lng': 2.3522219}
    """

    API_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"

    def __init__(
        self,
        apiKey: str,
        *,
        requestTimeout: float = 10,
        apiUrl: Optional[str] = None,
        rateLimiter: Optional[RateLimiterInterface] = None,
        rateLimiterProvider: str = "place-search",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize place search client, dood!

        Args:
            apiKey: Places API key (required)
            requestTimeout: HTTP request timeout in seconds (default: 10)
            apiUrl: Override of the text search endpoint
            rateLimiter: Rate limiter to apply (default: RateLimiterManager singleton)
            rateLimiterProvider: Provider name for rate limiting (default: "place-search")
            transport: Optional httpx transport (used by tests to fake the provider)
        """
        self.apiKey = apiKey
        self.requestTimeout = requestTimeout
        self.apiUrl = apiUrl or self.API_URL
        self.rateLimiterProvider = rateLimiterProvider
        self.transport = transport
        self._rateLimiter = rateLimiter if rateLimiter is not None else RateLimiterManager.getInstance()

    async def search(self, query: str) -> TextSearchResponse:
        """Run text search and return the raw response envelope.

        Args:
            query: Free-form place query

        Returns:
            Response with status and results, whatever the status is

        Raises:
            HardGeocodeError: On transport/HTTP failure or malformed payload
        """
        data = await self._makeRequest(query, {"query": query})

        if not isinstance(data.get("status"), str) or not isinstance(data.get("results", []), list):
            raise HardGeocodeError(f"Unexpected place search payload: {data!r}", query)
        data.setdefault("results", [])

        return cast(TextSearchResponse, data)

    async def resolve(self, query: str) -> Location:
        """Resolve free-text query to coordinates of the first result, dood!

        Args:
            query: Free-form place query (e.g. "Paris, France")

        Returns:
            Location with lat and lng

        Raises:
            ZeroResultsError: Nothing matched the query (soft)
            InvalidQueryError: Query rejected as malformed (soft)
            HardGeocodeError: Any other failure
        """
        query = query.strip()
        if not query:
            raise InvalidQueryError("Empty place search query", query, "INVALID_REQUEST")

        response = await self.search(query)
        status = response["status"]
        results = response["results"]

        if status == "ZERO_RESULTS" or (status == "OK" and not results):
            logger.info(f"No places found for {query!r}")
            raise ZeroResultsError(f"No places found for {query!r}", query, "ZERO_RESULTS")

        if status == "INVALID_REQUEST":
            logger.warning(f"Place search rejected query {query!r}")
            raise InvalidQueryError(f"Place search rejected query {query!r}", query, status)

        if status != "OK":
            message = response.get("error_message", "")
            logger.error(f"Place search failed with status {status}: {message}")
            raise HardGeocodeError(f"Place search failed with status {status}: {message}", query, status)

        return self._extractLocation(query, results[0])

    def _extractLocation(self, query: str, result: PlaceResult) -> Location:
        try:
            location = result["geometry"]["location"]
            return Location(lat=float(location["lat"]), lng=float(location["lng"]))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Place search result without coordinates: {result!r}")
            raise HardGeocodeError(f"Place search result without coordinates for {query!r}", query, "OK") from e

    async def _makeRequest(self, query: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Make HTTP request to the place search API, dood!

        Single point for all HTTP requests with error handling, rate limiting
        and authentication.

        Raises:
            HardGeocodeError: On timeout, network error, non-200 status or
                non-JSON body
        """
        requestParams = {**params, "key": self.apiKey}
        logger.debug(f"Making place search request for {query!r}")

        await self._rateLimiter.applyLimit(self.rateLimiterProvider)

        try:
            async with httpx.AsyncClient(timeout=self.requestTimeout, transport=self.transport) as session:
                response = await session.get(self.apiUrl, params=requestParams)
        except httpx.TimeoutException as e:
            logger.error(f"Place search request timeout for {query!r}")
            raise HardGeocodeError("Place search request timeout", query) from e
        except httpx.RequestError as e:
            logger.error(f"Place search network error: {e}")
            raise HardGeocodeError(f"Place search network error: {e}", query) from e

        if response.status_code != 200:
            logger.error(f"Place search request failed: {response.status_code}")
            logger.debug(f"Response text: {response.text}")
            raise HardGeocodeError(
                f"Place search request failed with HTTP {response.status_code}",
                query,
                httpStatus=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse place search response: {e}")
            raise HardGeocodeError("Failed to parse place search response", query, httpStatus=200) from e

        if not isinstance(data, dict):
            raise HardGeocodeError(f"Unexpected place search payload: {data!r}", query, httpStatus=200)

        logger.debug(f"Place search request successful, status: {data.get('status')}")
        return data
