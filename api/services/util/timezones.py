"""Helpers for attaching timezone data to resolved places."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timezonefinder import TimezoneFinder

from ..models import TimezoneInfo

_TF: Optional[TimezoneFinder] = None


def clamp_lat_lon(lat: float, lon: float) -> Tuple[float, float]:
    """Clamp latitude/longitude to safe ranges."""

    lat = max(min(lat, 90.0), -90.0)
    if not -180.0 <= lon <= 180.0:
        lon = ((lon + 180.0) % 360.0) - 180.0  # wrap to [-180, 180)
    return lat, lon


def _finder() -> TimezoneFinder:
    global _TF
    if _TF is None:
        _TF = TimezoneFinder()
    return _TF


def infer_tz(lat: float, lon: float) -> Optional[str]:
    """Infer the IANA zone name for a coordinate pair, ``None`` over open sea."""

    return _finder().timezone_at(lng=lon, lat=lat)


def standard_offset_seconds(zone: ZoneInfo) -> int:
    """Return the zone's standard (non-DST) offset.

    January and July are sampled so both hemispheres resolve to winter time.
    """

    samples = (datetime(2001, 1, 15, 12), datetime(2001, 7, 15, 12))
    return min(int(zone.utcoffset(s).total_seconds()) for s in samples)


def offset_seconds(zone_name: str, when: Optional[datetime] = None) -> Optional[int]:
    """UTC offset of ``zone_name`` at the wall-clock time ``when``.

    ``when`` is interpreted as local time in the zone; without it the standard
    offset is returned. Unknown zone names yield ``None``.
    """

    try:
        zone = ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError):
        return None
    if when is None:
        return standard_offset_seconds(zone)
    local = when.replace(tzinfo=zone)
    return int(local.utcoffset().total_seconds())


def timezone_info(zone_name: Optional[str], country_name: str, when: Optional[datetime] = None) -> Optional[TimezoneInfo]:
    if not zone_name:
        return None
    offset = offset_seconds(zone_name, when)
    if offset is None:
        return None
    return TimezoneInfo(zone_name=zone_name, utc_offset_seconds=offset, country_name=country_name)
