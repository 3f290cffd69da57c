"""
Offset and UTC/local conversion arithmetic.

Naive datetimes passed to offsetHours() and localToUtc() are wall-clock
readings in the given zone. Naive datetimes passed to utcToLocal() are UTC
readings. Aware datetimes are always treated as absolute instants.
"""

import datetime
import re
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import UnknownTimezoneError

OFFSET_REGEX = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def getZone(timezoneId: str) -> ZoneInfo:
    """
    Load IANA zone by identifier.

    Raises:
        UnknownTimezoneError: If the identifier is empty or not in the tz database
    """
    if not timezoneId:
        raise UnknownTimezoneError(timezoneId)
    try:
        return ZoneInfo(timezoneId)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise UnknownTimezoneError(timezoneId) from e


def _utcOffset(instant: datetime.datetime, zone: ZoneInfo) -> datetime.timedelta:
    if instant.tzinfo is None:
        localised = instant.replace(tzinfo=zone)
    else:
        localised = instant.astimezone(zone)

    offset = localised.utcoffset()
    if offset is None:
        # ZoneInfo always yields an offset, but keep type checkers calm
        return datetime.timedelta(0)
    return offset


def offsetHours(instant: datetime.datetime, timezoneId: str) -> float:
    """
    Get UTC offset in hours for given instant in given timezone, dood!

    The offset depends on both the zone and the instant (DST aware). Offsets
    that are not whole hours are returned as minutes/60 fractions, so +05:30
    gives 5.5 and -09:45 gives -9.75.

    Args:
        instant: Naive wall-clock reading in the zone, or aware instant
        timezoneId: IANA timezone identifier (e.g. "America/New_York")

    Returns:
        Signed offset in hours
    """
    return _utcOffset(instant, getZone(timezoneId)).total_seconds() / 3600


def localToUtc(localInstant: datetime.datetime, timezoneId: str) -> datetime.datetime:
    """
    Convert local wall-clock reading to UTC instant.

    Subtracts the zone offset applying at the local reading from it.

    Args:
        localInstant: Naive wall-clock reading (aware values are just moved to UTC)
        timezoneId: IANA timezone identifier

    Returns:
        Aware datetime in UTC
    """
    zone = getZone(timezoneId)
    if localInstant.tzinfo is not None:
        return localInstant.astimezone(datetime.timezone.utc)

    offset = _utcOffset(localInstant, zone)
    return (localInstant - offset).replace(tzinfo=datetime.timezone.utc)


def utcToLocal(utcInstant: datetime.datetime, timezoneId: str) -> datetime.datetime:
    """
    Convert UTC instant to local wall-clock reading.

    Adds the zone offset applying at the UTC instant to the UTC reading.
    utcToLocal(localToUtc(t, z), z) == t for any naive t, except when t falls
    into a DST gap or fold.

    Args:
        utcInstant: Aware instant or naive UTC reading
        timezoneId: IANA timezone identifier

    Returns:
        Naive wall-clock datetime
    """
    zone = getZone(timezoneId)
    if utcInstant.tzinfo is None:
        utcInstant = utcInstant.replace(tzinfo=datetime.timezone.utc)
    else:
        utcInstant = utcInstant.astimezone(datetime.timezone.utc)

    offset = _utcOffset(utcInstant, zone)
    return (utcInstant + offset).replace(tzinfo=None)


def parseOffset(offset: str) -> float:
    """
    Decode textual UTC offset into hours.

    Args:
        offset: Offset like "+05:30", "-08:00", "+0945" or "Z"

    Returns:
        Signed offset in hours ("+09:45" -> 9.75)

    Raises:
        ValueError: If the text is not an offset
    """
    offset = offset.strip()
    if offset.upper() == "Z":
        return 0.0

    match = OFFSET_REGEX.match(offset)
    if match is None:
        raise ValueError(f"Invalid UTC offset: {offset!r}")

    sign, hours, minutes = match.groups()
    if int(minutes) >= 60:
        raise ValueError(f"Invalid UTC offset: {offset!r}")

    value = int(hours) + int(minutes) / 60
    return -value if sign == "-" else value


def formatOffset(hours: float) -> str:
    """Encode offset in hours as "+HH:MM" text (5.5 -> "+05:30")."""
    sign = "-" if hours < 0 else "+"
    totalMinutes = round(abs(hours) * 60)
    return f"{sign}{totalMinutes // 60:02d}:{totalMinutes % 60:02d}"
