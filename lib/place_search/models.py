"""
Place search data models

TypedDict models of the text search response, trimmed to the fields geotime
reads.
"""

import sys
from typing import List, NotRequired

if sys.version_info >= (3, 14):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict


class Location(TypedDict):
    """Geographic coordinates in decimal degrees"""

    lat: float
    lng: float


class Geometry(TypedDict, total=False, closed=False):
    location: Location


class PlaceResult(TypedDict, total=False, closed=False):
    """One text search hit (extra provider fields are kept as-is)"""

    name: str
    formatted_address: str
    place_id: str
    geometry: Geometry


class TextSearchResponse(TypedDict, closed=False):
    """Text search response envelope"""

    status: str  # OK, ZERO_RESULTS, INVALID_REQUEST, OVER_QUERY_LIMIT, REQUEST_DENIED, UNKNOWN_ERROR
    results: List[PlaceResult]
    error_message: NotRequired[str]
