from datetime import datetime
from types import SimpleNamespace

import pytest
from geopy.exc import GeocoderTimedOut

from api.services import geocoding
from api.services.config import EngineConfig
from api.services.errors import EmptyInputError, LocationNotFoundError
from api.services.geocoding import EMPTY_INPUT_MESSAGE, LocationResolver
from api.services.util.timezones import offset_seconds


@pytest.fixture
def resolver():
    return LocationResolver(EngineConfig())


@pytest.mark.parametrize("query", ["", "   ", None])
def test_empty_input_yields_sentinel(resolver, query):
    geo = resolver.resolve(query)
    assert geo.latitude == 0 and geo.longitude == 0
    assert not geo.found
    assert isinstance(geo.failure, EmptyInputError)
    assert geo.formatted_name == EMPTY_INPUT_MESSAGE


def test_unknown_place_yields_sentinel(resolver):
    geo = resolver.resolve("Nonexistent Place XYZ")
    assert geo.latitude == 0 and geo.longitude == 0
    assert not geo.found
    assert isinstance(geo.failure, LocationNotFoundError)
    assert 'Location "Nonexistent Place XYZ" not found' in geo.formatted_name
    assert geo.failure.field == "birthPlace"


def test_miami_from_table(resolver):
    geo = resolver.resolve("Miami")
    assert geo.found
    assert geo.latitude == pytest.approx(25.76, abs=0.01)
    assert geo.longitude == pytest.approx(-80.19, abs=0.01)
    assert geo.timezone.zone_name == "America/New_York"
    # no date given: standard time
    assert geo.timezone.utc_offset_seconds == -5 * 3600


def test_full_address_matches_first_component(resolver):
    geo = resolver.resolve("Miami, FL, USA")
    assert geo.formatted_name == "Miami, FL, USA"
    assert geo.timezone.country_name == "United States"


def test_case_and_whitespace_are_ignored(resolver):
    assert resolver.resolve("  LONDON ").formatted_name == resolver.resolve("london").formatted_name


def test_substring_match(resolver):
    geo = resolver.resolve("Greater London")
    assert geo.found
    assert geo.latitude == pytest.approx(51.5, abs=0.1)


def test_offset_honours_daylight_saving_at_birth_time(resolver):
    summer = resolver.resolve("Miami", when=datetime(1995, 10, 8, 19, 56))
    winter = resolver.resolve("Miami", when=datetime(1995, 12, 8, 19, 56))
    assert summer.timezone.utc_offset_seconds == -4 * 3600
    assert winter.timezone.utc_offset_seconds == -5 * 3600


def test_standard_offset_southern_hemisphere():
    assert offset_seconds("Australia/Sydney") == 10 * 3600
    assert offset_seconds("Australia/Sydney", datetime(2020, 1, 15, 12)) == 11 * 3600
    assert offset_seconds("Not/AZone") is None


def test_module_level_resolve():
    geo = geocoding.resolve("Miami")
    assert geo.found
    assert geo.latitude == pytest.approx(25.7617)


WORLDCITIES = """city,city_ascii,lat,lng,country,iso2,iso3,admin_name,population
Springfield,Springfield,39.7990,-89.6440,United States,US,USA,Illinois,114394
Springfield,Springfield,37.1943,-93.2915,United States,US,USA,Missouri,169176
Springfield,Springfield,42.1155,-72.5395,United States,US,USA,Massachusetts,155929
Tromsø,Tromso,69.6496,18.9560,Norway,NO,NOR,Troms,64448
"""


@pytest.fixture
def cities_resolver(tmp_path):
    path = tmp_path / "worldcities.csv"
    path.write_text(WORLDCITIES, encoding="utf-8")
    return LocationResolver(EngineConfig(worldcities_csv=str(path)))


def test_worldcities_ranked_by_population(cities_resolver):
    geo = cities_resolver.resolve("Springfield")
    assert geo.found
    assert geo.latitude == pytest.approx(37.1943)
    assert geo.formatted_name == "Springfield, Missouri, United States"
    assert geo.timezone.zone_name == "America/Chicago"


def test_worldcities_narrowed_by_region(cities_resolver):
    geo = cities_resolver.resolve("Springfield, Illinois")
    assert geo.latitude == pytest.approx(39.7990)


def test_worldcities_ascii_name_and_inferred_zone(cities_resolver):
    geo = cities_resolver.resolve("tromso, norway")
    assert geo.found
    assert geo.timezone.zone_name == "Europe/Oslo"
    assert geo.timezone.country_name == "Norway"


def test_worldcities_missing_file_is_a_miss(tmp_path):
    r = LocationResolver(EngineConfig(worldcities_csv=str(tmp_path / "missing.csv")))
    assert not r.resolve("Springfield").found


class FakeNominatim:
    calls = []

    def __init__(self, user_agent=None, timeout=None):
        self.user_agent = user_agent

    def geocode(self, query, addressdetails=False):
        FakeNominatim.calls.append(query)
        return SimpleNamespace(
            latitude=-22.9068,
            longitude=-43.1729,
            address="Niterói, Rio de Janeiro, Brazil",
            raw={"address": {"country": "Brazil"}},
        )


def test_geocoder_is_consulted_last(monkeypatch):
    FakeNominatim.calls = []
    monkeypatch.setattr(geocoding, "Nominatim", FakeNominatim)
    r = LocationResolver(EngineConfig(geocoder_enabled=True))

    assert r.resolve("Miami").formatted_name == "Miami, FL, USA"
    assert FakeNominatim.calls == []

    geo = r.resolve("Atlantis Bay")
    assert FakeNominatim.calls == ["Atlantis Bay"]
    assert geo.found
    assert geo.timezone.country_name == "Brazil"
    assert geo.timezone.zone_name == "America/Sao_Paulo"


def test_geocoder_error_is_a_miss(monkeypatch):
    class Failing(FakeNominatim):
        def geocode(self, query, addressdetails=False):
            raise GeocoderTimedOut("slow")

    monkeypatch.setattr(geocoding, "Nominatim", Failing)
    geo = LocationResolver(EngineConfig(geocoder_enabled=True)).resolve("Atlantis Bay")
    assert not geo.found
    assert isinstance(geo.failure, LocationNotFoundError)


def test_geocoder_disabled_by_default(monkeypatch):
    monkeypatch.setattr(geocoding, "Nominatim", None)
    assert not LocationResolver(EngineConfig()).resolve("Atlantis Bay").found
