"""
GeoNames timezone data models
"""

import sys
from typing import NotRequired

if sys.version_info >= (3, 14):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict


class GeoNamesStatus(TypedDict, total=False):
    """Error envelope GeoNames returns with HTTP 200"""

    message: str
    value: int  # 10: authorization, 15: no result, 18/19/20: credits exceeded


class TimezoneResponse(TypedDict, total=False, closed=False):
    """timezoneJSON response (fields used or useful for debugging)"""

    timezoneId: str
    countryCode: str
    countryName: str
    lat: float
    lng: float
    gmtOffset: float  # Offset in January, hours
    dstOffset: float  # Offset in July, hours
    rawOffset: float  # Offset without DST, hours
    time: str  # Local time "YYYY-MM-DD HH:mm"
    sunrise: str
    sunset: str
    status: NotRequired[GeoNamesStatus]
