"""
Timezone arithmetic helpers

Pure, I/O-free conversions between local wall-clock readings and UTC instants
for IANA timezones. Offsets are expressed in (possibly fractional) hours.

Example usage:
    from lib.timezone_math import localToUtc, offsetHours, utcToLocal

    utc = localToUtc(datetime.datetime(2023, 6, 1, 12, 0), "Asia/Kolkata")
    # datetime.datetime(2023, 6, 1, 6, 30, tzinfo=datetime.timezone.utc)
    offsetHours(utc, "Asia/Kolkata")  # 5.5
"""

from .conversions import formatOffset, getZone, localToUtc, offsetHours, parseOffset, utcToLocal
from .errors import UnknownTimezoneError

__all__ = [
    "offsetHours",
    "localToUtc",
    "utcToLocal",
    "parseOffset",
    "formatOffset",
    "getZone",
    "UnknownTimezoneError",
]
