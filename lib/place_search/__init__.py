"""
Place Search Client Library

Async client resolving free-text place queries to coordinates, with
classification of provider failures into soft (memoizable) and hard
(retryable) errors.

Example usage:
    from lib.place_search import PlaceSearchClient, SoftGeocodeError

    client = PlaceSearchClient(apiKey="your_api_key")
    try:
        location = await client.resolve("Angarsk, Russia")
    except SoftGeocodeError:
        location = None
"""

from .client import PlaceSearchClient
from .errors import GeocodeError, HardGeocodeError, InvalidQueryError, SoftGeocodeError, ZeroResultsError
from .models import Geometry, Location, PlaceResult, TextSearchResponse

__all__ = [
    "PlaceSearchClient",
    "GeocodeError",
    "SoftGeocodeError",
    "ZeroResultsError",
    "InvalidQueryError",
    "HardGeocodeError",
    "Location",
    "Geometry",
    "PlaceResult",
    "TextSearchResponse",
]
