"""
GeoNames Timezone Client Library

Async client resolving coordinates to IANA timezone identifiers via the
GeoNames timezone web service.

Example usage:
    from lib.geonames import GeoNamesClient

    client = GeoNamesClient(username="your_username")
    timezoneId = await client.resolve({"lat": 52.5443, "lng": 103.8882})
    # "Asia/Irkutsk"
"""

from .client import GeoNamesClient
from .errors import TimezoneLookupError
from .models import GeoNamesStatus, TimezoneResponse

__all__ = [
    "GeoNamesClient",
    "TimezoneLookupError",
    "TimezoneResponse",
    "GeoNamesStatus",
]
