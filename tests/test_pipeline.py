import os
os.environ.setdefault("EPHEMERIS_BACKEND", "moseph")

import logging

import pytest

from api.services import positions
from api.services.aspects import EXTENDED_ASPECTS, MAJOR_ASPECTS
from api.services.chart import calculate_chart
from api.services.config import EngineConfig
from api.services.errors import (
    EmptyInputError,
    InvalidDateError,
    InvalidTimeError,
    LocationNotFoundError,
    MissingTimezoneError,
    UnsupportedHouseSystemError,
)
from api.services.geocoding import LocationResolver
from api.services.models import ANGLES, PLANETS, BodyId, GeoLocation
from api.services.positions import PositionLayer, PositionProvider

CONFIG = EngineConfig(ephemeris_backend="moseph", layers=("swisseph", "synthetic"))
RESOLVER = LocationResolver(CONFIG)


def _calc(date="1995-10-08", time="19:56", place="Miami, FL, USA", house_system=None, **kw):
    kw.setdefault("config", CONFIG)
    kw.setdefault("resolver", RESOLVER)
    return calculate_chart(date, time, place, house_system, **kw)


class BrokenLayer(PositionLayer):
    name = "broken"

    def _compute(self, instant, geo, house_system, bodies):
        raise OSError("no ephemeris data")


class NoTimezoneResolver:
    def resolve(self, place_name, when=None):
        return GeoLocation(25.7617, -80.1918, "Miami, FL, USA")


def test_miami_end_to_end():
    outcome = _calc()
    assert outcome.ok and outcome.error is None
    chart = outcome.chart

    assert chart.location.latitude == 25.7617
    assert chart.location.timezone.zone_name == "America/New_York"
    assert chart.instant.utc_offset_seconds == -4 * 3600
    assert (chart.instant.utc.hour, chart.instant.utc.minute) == (23, 56)
    assert chart.source == "swisseph"
    assert len(chart.houses) == 12
    for planet in PLANETS:
        placed = chart.body(planet)
        assert placed is not None
        assert 0.0 <= placed.zodiac.degree_in_sign < 30.0
        assert 1 <= placed.house <= 12
    assert chart.body(BodyId.ASCENDANT) is not None
    assert chart.body(BodyId.SUN).zodiac.sign == "Libra"

    max_orb = {d.name: d.orb for d in MAJOR_ASPECTS}
    for aspect in chart.aspects:
        assert aspect.orb <= max_orb[aspect.name]
        assert aspect.body_a not in ANGLES and aspect.body_b not in ANGLES


def test_forced_primary_failure_still_yields_complete_chart():
    provider = PositionProvider(CONFIG, layers=[BrokenLayer()])
    outcome = _calc(provider=provider)
    chart = outcome.chart
    assert chart.source == "synthetic"
    assert chart.approximate
    assert len(chart.houses) == 12
    for body in CONFIG.bodies:
        assert chart.body(BodyId(body)) is not None


def test_extended_aspect_table_is_honoured():
    outcome = _calc(aspects=EXTENDED_ASPECTS)
    names = {d.name for d in EXTENDED_ASPECTS}
    assert all(a.name in names for a in outcome.chart.aspects)
    assert len(outcome.chart.aspects) >= len(_calc().chart.aspects)


def test_house_system_by_name():
    outcome = _calc(house_system="whole sign")
    assert outcome.chart.house_system == "W"
    assert outcome.chart.houses[0].cusp_longitude % 30.0 == 0.0


def test_empty_place():
    outcome = _calc(place="")
    assert outcome.chart is None
    assert isinstance(outcome.error, EmptyInputError)


def test_unknown_place_reports_sentinel_location():
    outcome = _calc(place="Nonexistent Place XYZ")
    assert isinstance(outcome.error, LocationNotFoundError)
    assert outcome.location.latitude == 0 and outcome.location.longitude == 0


def test_invalid_time():
    outcome = _calc(time="24:00")
    assert isinstance(outcome.error, InvalidTimeError)
    assert outcome.error.field == "hour"


def test_invalid_date():
    outcome = _calc(date="1995-02-30")
    assert isinstance(outcome.error, InvalidDateError)


def test_unknown_house_system():
    outcome = _calc(house_system="Z")
    assert isinstance(outcome.error, UnsupportedHouseSystemError)


def test_missing_timezone_blocks_by_default():
    outcome = _calc(resolver=NoTimezoneResolver())
    assert isinstance(outcome.error, MissingTimezoneError)


def test_missing_timezone_falls_back_to_longitude_when_allowed():
    config = EngineConfig(ephemeris_backend="moseph", layers=("swisseph", "synthetic"), require_timezone=False)
    outcome = _calc(config=config, resolver=NoTimezoneResolver())
    assert outcome.ok
    assert outcome.chart.instant.offset_source == "longitude"
    assert outcome.chart.instant.utc_offset_seconds == -5 * 3600


@pytest.mark.parametrize(
    "date,time,place",
    [("9999-12-31", "23:30", "Honolulu"), ("0001-01-01", "00:30", "Tokyo")],
)
def test_dates_at_calendar_limits_are_reported(date, time, place):
    outcome = _calc(date=date, time=time, place=place)
    assert outcome.chart is None
    assert isinstance(outcome.error, InvalidDateError)
    assert outcome.error.field == "birthDate"


def test_default_resolver_and_provider_are_reused(tmp_path, caplog, monkeypatch):
    path = tmp_path / "worldcities.csv"
    path.write_text(
        "city,city_ascii,lat,lng,country,iso2,iso3,admin_name,population\n"
        "Reykjavík,Reykjavik,64.1475,-21.9350,Iceland,IS,ISL,Höfuðborgarsvæðið,135688\n",
        encoding="utf-8",
    )
    config = EngineConfig(ephemeris_backend="moseph", layers=("swisseph", "synthetic"), worldcities_csv=str(path))
    built = []
    real_build = positions.build_layers
    monkeypatch.setattr(positions, "build_layers", lambda cfg: built.append(cfg) or real_build(cfg))

    caplog.set_level(logging.INFO)
    for _ in range(3):
        outcome = calculate_chart("1995-10-08", "19:56", "Reykjavik", config=config)
        assert outcome.ok
    loads = [r for r in caplog.records if r.getMessage() == "worldcities_loaded"]
    assert len(loads) == 1
    assert built == [config]
