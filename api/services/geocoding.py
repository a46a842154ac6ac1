"""Resolve free-text place names to coordinates and a timezone.

Lookup order:

1. exact match of the whole query against :data:`places.PLACES`
2. exact match of the first comma-separated component
3. substring match (either direction) of the first component against every
   table key, first hit in table order wins
4. the optional world-cities CSV (``WORLDCITIES_CSV``)
5. the optional network geocoder (``GEOCODER_ENABLED``)

A miss never raises. The returned :class:`GeoLocation` keeps the sentinel
coordinates ``(0, 0)`` and carries a typed error in ``failure``.
"""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, List, Optional

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from .config import EngineConfig, get_config
from .errors import EmptyInputError, LocationNotFoundError
from .models import GeoLocation
from .places import PLACES, Place
from .util.timezones import clamp_lat_lon, infer_tz, timezone_info

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter a location name"


def not_found_message(place_name: str) -> str:
    return f'Location "{place_name}" not found. Please try a different city name.'


class LocationResolver:
    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or get_config()
        self._cities: Optional[List[Dict[str, str]]] = None
        self._geocoder: Optional[Nominatim] = None

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------

    def resolve(self, place_name: Optional[str], when: Optional[datetime] = None) -> GeoLocation:
        """Resolve ``place_name``.

        ``when`` is the local wall-clock time of the event; when given, the
        attached UTC offset honours daylight saving time at that moment.
        """

        query = (place_name or "").strip().lower()
        if not query:
            return GeoLocation(
                latitude=0.0,
                longitude=0.0,
                formatted_name=EMPTY_INPUT_MESSAGE,
                failure=EmptyInputError(EMPTY_INPUT_MESSAGE, field="birthPlace"),
            )

        place = self._match_table(query)
        if place is not None:
            return self._from_place(place, when)

        geo = self._match_cities(query, when)
        if geo is None and self.config.geocoder_enabled:
            geo = self._match_geocoder(place_name.strip(), when)
        if geo is not None:
            return geo

        logger.info("location_not_found", extra={"query": query})
        message = not_found_message(place_name.strip())
        return GeoLocation(
            latitude=0.0,
            longitude=0.0,
            formatted_name=message,
            failure=LocationNotFoundError(message, field="birthPlace"),
        )

    # ------------------------------------------------------------------
    # fixed table
    # ------------------------------------------------------------------

    @staticmethod
    def _match_table(query: str) -> Optional[Place]:
        if query in PLACES:
            return PLACES[query]
        parts = [part.strip() for part in query.split(",")]
        first = parts[0]
        if len(parts) > 1 and first in PLACES:
            return PLACES[first]
        if not first:
            return None
        for key, place in PLACES.items():
            if first in key or key in first:
                logger.debug("location_partial_match", extra={"query": query, "key": key})
                return place
        return None

    def _from_place(self, place: Place, when: Optional[datetime]) -> GeoLocation:
        zone = place.zone_name or infer_tz(place.latitude, place.longitude)
        return GeoLocation(
            latitude=place.latitude,
            longitude=place.longitude,
            formatted_name=place.formatted_name,
            timezone=timezone_info(zone, place.country_name, when),
        )

    # ------------------------------------------------------------------
    # world-cities CSV
    # ------------------------------------------------------------------

    def _load_cities(self) -> List[Dict[str, str]]:
        if self._cities is not None:
            return self._cities
        path = self.config.worldcities_csv
        rows: List[Dict[str, str]] = []
        if path:
            try:
                with open(path, newline="", encoding="utf-8") as fh:
                    rows = [row for row in csv.DictReader(fh)]
                logger.info("worldcities_loaded", extra={"path": path, "rows": len(rows)})
            except OSError:
                logger.exception("worldcities_load_failed", extra={"path": path})
        self._cities = rows
        return rows

    def _match_cities(self, query: str, when: Optional[datetime]) -> Optional[GeoLocation]:
        cities = self._load_cities()
        if not cities:
            return None
        terms = [part.strip() for part in query.split(",")]
        city_name = terms[0]
        if not city_name:
            return None

        def names(row: Dict[str, str]) -> List[str]:
            return [(row.get("city_ascii") or "").lower(), (row.get("city") or "").lower()]

        matches = [row for row in cities if city_name in names(row)]
        if not matches:
            matches = [
                row
                for row in cities
                if any(n and (city_name in n or n in city_name) for n in names(row))
            ]
        if matches and len(terms) > 1:
            details = " ".join(t for t in terms[1:] if t)
            narrowed = [row for row in matches if _row_matches_details(row, details)]
            if narrowed:
                matches = narrowed
        if not matches:
            return None

        matches.sort(key=_population, reverse=True)
        row = matches[0]
        try:
            lat, lon = clamp_lat_lon(float(row["lat"]), float(row["lng"]))
        except (KeyError, TypeError, ValueError):
            logger.warning("worldcities_bad_row", extra={"row": row})
            return None
        formatted = ", ".join(p for p in (row.get("city"), row.get("admin_name"), row.get("country")) if p)
        country = row.get("country") or row.get("iso2") or "Unknown"
        return GeoLocation(
            latitude=lat,
            longitude=lon,
            formatted_name=formatted,
            timezone=timezone_info(infer_tz(lat, lon), country, when),
        )

    # ------------------------------------------------------------------
    # network geocoder
    # ------------------------------------------------------------------

    def _match_geocoder(self, place_name: str, when: Optional[datetime]) -> Optional[GeoLocation]:
        if self._geocoder is None:
            self._geocoder = Nominatim(
                user_agent=self.config.geocoder_user_agent, timeout=self.config.geocoder_timeout
            )
        try:
            loc = self._geocoder.geocode(place_name, addressdetails=True)
        except GeopyError:
            logger.warning("geocoder_failed", extra={"query": place_name}, exc_info=True)
            return None
        if not loc:
            return None
        lat, lon = clamp_lat_lon(float(loc.latitude), float(loc.longitude))
        raw: Dict[str, Any] = getattr(loc, "raw", None) or {}
        country = (raw.get("address") or {}).get("country") or loc.address.split(",")[-1].strip()
        return GeoLocation(
            latitude=lat,
            longitude=lon,
            formatted_name=loc.address,
            timezone=timezone_info(infer_tz(lat, lon), country, when),
        )


def _row_matches_details(row: Dict[str, str], details: str) -> bool:
    country = (row.get("country") or "").lower()
    admin = (row.get("admin_name") or "").lower()
    if country and (country in details or details in country):
        return True
    if admin and (admin in details or details in admin):
        return True
    return details in {(row.get("iso2") or "").lower(), (row.get("iso3") or "").lower()}


def _population(row: Dict[str, str]) -> float:
    try:
        return float(row.get("population") or 0)
    except ValueError:
        return 0.0


@lru_cache(maxsize=8)
def resolver_for(config: EngineConfig) -> LocationResolver:
    """One resolver per config, so the cities file and geocoder client are reused."""

    return LocationResolver(config)


def resolve(place_name: Optional[str], when: Optional[datetime] = None) -> GeoLocation:
    """Resolve with the process-wide resolver."""

    return resolver_for(get_config()).resolve(place_name, when)


__all__ = ["EMPTY_INPUT_MESSAGE", "LocationResolver", "not_found_message", "resolve", "resolver_for"]
