"""
Tests for timezone offset and UTC/local conversion arithmetic, dood!
"""

import datetime

import pytest

from . import UnknownTimezoneError, formatOffset, localToUtc, offsetHours, parseOffset, utcToLocal

UTC = datetime.timezone.utc


class TestOffsetHours:
    """Test DST-aware offset computation"""

    def test_whole_hour_offsets_follow_dst(self):
        """Same zone gives different offsets in winter and summer"""
        assert offsetHours(datetime.datetime(2023, 1, 15, 12, 0), "America/New_York") == -5.0
        assert offsetHours(datetime.datetime(2023, 7, 15, 12, 0), "America/New_York") == -4.0
        assert offsetHours(datetime.datetime(2023, 7, 15, 12, 0), "Europe/Paris") == 2.0

    def test_half_and_quarter_hour_offsets(self):
        """Non-whole offsets are minutes/60 fractions"""
        assert offsetHours(datetime.datetime(2023, 6, 1, 12, 0), "Asia/Kolkata") == 5.5
        assert offsetHours(datetime.datetime(2023, 6, 1, 12, 0), "Asia/Kathmandu") == 5.75
        assert offsetHours(datetime.datetime(2023, 6, 1, 12, 0), "Australia/Eucla") == 8.75
        assert offsetHours(datetime.datetime(2023, 6, 1, 12, 0), "Pacific/Marquesas") == -9.5
        assert offsetHours(datetime.datetime(2023, 1, 15, 12, 0), "America/St_Johns") == -3.5
        assert offsetHours(datetime.datetime(2023, 7, 15, 12, 0), "America/St_Johns") == -2.5

    def test_aware_instant(self):
        """Aware instants are converted into the zone before lookup"""
        instant = datetime.datetime(2023, 1, 15, 17, 0, tzinfo=UTC)
        assert offsetHours(instant, "America/New_York") == -5.0

    def test_unknown_timezone(self):
        """Unknown zone raises typed error, which is also a ValueError"""
        with pytest.raises(UnknownTimezoneError):
            offsetHours(datetime.datetime(2023, 1, 1), "Mars/Olympus_Mons")

        with pytest.raises(ValueError):
            offsetHours(datetime.datetime(2023, 1, 1), "")


class TestConversions:
    """Test localToUtc() and utcToLocal()"""

    def test_local_to_utc(self):
        """Offset is subtracted from wall-clock reading"""
        result = localToUtc(datetime.datetime(2023, 6, 1, 12, 0), "Asia/Kolkata")
        assert result == datetime.datetime(2023, 6, 1, 6, 30, tzinfo=UTC)
        assert result.tzinfo is UTC

        result = localToUtc(datetime.datetime(2023, 1, 15, 23, 0), "America/Los_Angeles")
        assert result == datetime.datetime(2023, 1, 16, 7, 0, tzinfo=UTC)

    def test_utc_to_local(self):
        """Offset is added to UTC reading, result is naive wall-clock"""
        result = utcToLocal(datetime.datetime(2023, 6, 1, 6, 30, tzinfo=UTC), "Asia/Kolkata")
        assert result == datetime.datetime(2023, 6, 1, 12, 0)
        assert result.tzinfo is None

        # Naive input is read as UTC
        result = utcToLocal(datetime.datetime(2023, 6, 1, 0, 0), "Asia/Kathmandu")
        assert result == datetime.datetime(2023, 6, 1, 5, 45)

    def test_aware_local_input(self):
        """Aware input to localToUtc() is an instant already"""
        paris = datetime.timezone(datetime.timedelta(hours=2))
        result = localToUtc(datetime.datetime(2023, 7, 1, 12, 0, tzinfo=paris), "Asia/Tokyo")
        assert result == datetime.datetime(2023, 7, 1, 10, 0, tzinfo=UTC)

    @pytest.mark.parametrize(
        "timezoneId",
        [
            "UTC",
            "America/New_York",
            "Europe/London",
            "Asia/Kolkata",
            "Asia/Kathmandu",
            "Australia/Lord_Howe",
            "Pacific/Chatham",
        ],
    )
    def test_round_trip(self, timezoneId: str):
        """utcToLocal(localToUtc(t)) == t away from DST transitions"""
        for month in range(1, 13):
            local = datetime.datetime(2023, month, 10, 14, 25, 30)
            assert utcToLocal(localToUtc(local, timezoneId), timezoneId) == local

    def test_round_trip_breaks_in_dst_gap(self):
        """Wall-clock time skipped by spring-forward does not round trip"""
        local = datetime.datetime(2023, 3, 12, 2, 30)
        utc = localToUtc(local, "America/New_York")
        assert utc == datetime.datetime(2023, 3, 12, 7, 30, tzinfo=UTC)
        assert utcToLocal(utc, "America/New_York") == datetime.datetime(2023, 3, 12, 3, 30)


class TestOffsetText:
    """Test offset string decoding and encoding"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("+05:30", 5.5),
            ("-08:00", -8.0),
            ("+09:45", 9.75),
            ("-09:45", -9.75),
            ("+0545", 5.75),
            ("+00:00", 0.0),
            ("Z", 0.0),
            (" -03:30 ", -3.5),
        ],
    )
    def test_parse_offset(self, text: str, expected: float):
        assert parseOffset(text) == expected

    @pytest.mark.parametrize("text", ["5:30", "+5:30", "+05:75", "05:30", "GMT+1", ""])
    def test_parse_invalid_offset(self, text: str):
        with pytest.raises(ValueError):
            parseOffset(text)

    def test_format_offset(self):
        assert formatOffset(5.5) == "+05:30"
        assert formatOffset(-9.75) == "-09:45"
        assert formatOffset(0) == "+00:00"
        assert formatOffset(-8.0) == "-08:00"
        assert formatOffset(parseOffset("+12:45")) == "+12:45"
