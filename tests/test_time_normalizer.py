import os
os.environ.setdefault("EPHEMERIS_BACKEND", "moseph")

from datetime import datetime, timezone

import pytest
import swisseph as swe

from api.services import ephem
from api.services.errors import InvalidDateError, InvalidTimeError
from api.services.models import GeoLocation, TimezoneInfo

MIAMI = GeoLocation(
    latitude=25.7617,
    longitude=-80.1918,
    formatted_name="Miami, FL, USA",
    timezone=TimezoneInfo("America/New_York", -4 * 3600, "United States"),
)


def test_normalize_applies_resolved_offset():
    inst = ephem.normalize("1995-10-08", "19:56", MIAMI)
    assert inst.utc == datetime(1995, 10, 8, 23, 56, tzinfo=timezone.utc)
    assert inst.local_iso == "1995-10-08T19:56:00-04:00"
    assert inst.utc_offset_seconds == -14400
    assert inst.offset_source == "timezone"
    assert not inst.approximate_offset
    assert inst.julian_day == pytest.approx(swe.julday(1995, 10, 8, 23 + 56 / 60, swe.GREG_CAL))


def test_normalize_is_reproducible():
    a = ephem.normalize("1995-10-08", "19:56", MIAMI)
    b = ephem.normalize("1995-10-08", "19:56", MIAMI)
    assert a.julian_day == b.julian_day
    assert a == b


def test_offset_crosses_midnight():
    tokyo = GeoLocation(35.6762, 139.6503, "Tokyo, Japan", TimezoneInfo("Asia/Tokyo", 9 * 3600, "Japan"))
    inst = ephem.normalize("2000-01-01", "03:30", tokyo)
    assert inst.utc == datetime(1999, 12, 31, 18, 30, tzinfo=timezone.utc)


def test_longitude_estimate_without_timezone():
    geo = GeoLocation(25.7617, -80.1918, "Somewhere")
    inst = ephem.normalize("1995-10-08", "19:56", geo)
    assert inst.utc_offset_seconds == -5 * 3600
    assert inst.offset_source == "longitude"
    assert inst.approximate_offset
    assert inst.utc.hour == 0 and inst.utc.day == 9


@pytest.mark.parametrize(
    "lon,hours",
    [(0.0, 0), (7.4, 0), (7.5, 1), (-7.5, 0), (-7.6, -1), (139.65, 9), (-80.19, -5), (180.0, 12)],
)
def test_estimate_offset_rounds_half_up(lon, hours):
    assert ephem.estimate_offset_seconds(lon) == hours * 3600


def test_format_offset():
    assert ephem.format_offset(0) == "+00:00"
    assert ephem.format_offset(19800) == "+05:30"
    assert ephem.format_offset(-12600) == "-03:30"


def test_parse_local():
    assert ephem.parse_local("1995-10-08", "07:05") == datetime(1995, 10, 8, 7, 5)
    assert ephem.parse_local("1995-10-08", "7:5") == datetime(1995, 10, 8, 7, 5)


@pytest.mark.parametrize("value,field", [("24:00", "hour"), ("-1:30", "hour"), ("12:60", "minute")])
def test_out_of_range_time(value, field):
    with pytest.raises(InvalidTimeError) as exc:
        ephem.parse_local_time(value)
    assert exc.value.field == field
    assert exc.value.code == "invalid_time"


@pytest.mark.parametrize("value", ["noon", "", "12h30", "1230"])
def test_malformed_time(value):
    with pytest.raises(InvalidDateError) as exc:
        ephem.parse_local_time(value)
    assert exc.value.field == "birthTime"


@pytest.mark.parametrize("value", ["1995-13-01", "08/10/1995", "", "1995-02-30"])
def test_malformed_date(value):
    with pytest.raises(InvalidDateError) as exc:
        ephem.parse_local_date(value)
    assert exc.value.field == "birthDate"


def test_format_offset_keeps_seconds():
    assert ephem.format_offset(1172) == "+00:19:32"
    assert ephem.format_offset(-17762) == "-04:56:02"


def test_local_mean_time_offset_is_applied_to_the_second():
    amsterdam = GeoLocation(
        52.3676, 4.9041, "Amsterdam, Netherlands", TimezoneInfo("Europe/Amsterdam", 1172, "Netherlands")
    )
    inst = ephem.normalize("1900-06-01", "12:00", amsterdam)
    assert inst.local_iso == "1900-06-01T12:00:00+00:19:32"
    assert inst.utc == datetime(1900, 6, 1, 11, 40, 28, tzinfo=timezone.utc)
    assert inst.julian_day == pytest.approx(ephem.julian_day(inst.utc))


@pytest.mark.parametrize(
    "day,clock,offset",
    [("9999-12-31", "23:30", -10 * 3600), ("0001-01-01", "00:30", 9 * 3600)],
)
def test_utc_outside_calendar_is_invalid_date(day, clock, offset):
    geo = GeoLocation(0.0, 0.0, "Edge", TimezoneInfo("Etc/Test", offset, ""))
    with pytest.raises(InvalidDateError) as exc:
        ephem.normalize(day, clock, geo)
    assert exc.value.field == "birthDate"
