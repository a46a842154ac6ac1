"""Time normalisation and Swiss Ephemeris helpers used by the chart pipeline."""

from __future__ import annotations

import math
import os
import re
from datetime import date, datetime, time, timezone
from typing import Dict, Iterable, Tuple, Union

import swisseph as swe

from .errors import InvalidDateError, InvalidTimeError
from .models import BodyId, GeoLocation, Instant


# Engine version for API responses
try:
    ENGINE_VERSION = f"swisseph-{swe.version}"
except AttributeError:
    ENGINE_VERSION = "swisseph-2.10"  # Fallback if version not available

BODIES: Dict[BodyId, int] = {
    BodyId.SUN: swe.SUN,
    BodyId.MOON: swe.MOON,
    BodyId.MERCURY: swe.MERCURY,
    BodyId.VENUS: swe.VENUS,
    BodyId.MARS: swe.MARS,
    BodyId.JUPITER: swe.JUPITER,
    BodyId.SATURN: swe.SATURN,
    BodyId.URANUS: swe.URANUS,
    BodyId.NEPTUNE: swe.NEPTUNE,
    BodyId.PLUTO: swe.PLUTO,
    BodyId.MEAN_NODE: swe.MEAN_NODE,
    BodyId.TRUE_NODE: swe.TRUE_NODE,
    BodyId.LILITH: swe.MEAN_APOG,
    BodyId.CHIRON: swe.CHIRON,
}

_TIME_RE = re.compile(r"^\s*(-?\d{1,2}):(-?\d{1,2})(?::(\d{1,2}))?\s*$")

DateLike = Union[str, date]
TimeLike = Union[str, time]


def backend_flag(moshier: bool) -> int:
    """Return the Swiss Ephemeris backend flag for the configured backend."""

    return swe.FLG_MOSEPH if moshier else swe.FLG_SWIEPH


def init_paths(ephe_dir: str | os.PathLike[str] | None) -> None:
    """Set the Swiss Ephemeris file search path when available."""

    if not ephe_dir:
        return

    path = os.fspath(ephe_dir)
    if os.path.isdir(path):
        swe.set_ephe_path(path)


# ---------------------------------------------------------------------------
# Time normalisation
# ---------------------------------------------------------------------------


def parse_local_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidDateError(
            f"Invalid birth date {value!r}. Use the YYYY-MM-DD format.", field="birthDate"
        ) from None


def parse_local_time(value: TimeLike) -> Tuple[int, int]:
    """Return ``(hour, minute)`` after range validation."""

    if isinstance(value, time):
        hour, minute = value.hour, value.minute
    else:
        match = _TIME_RE.match(str(value))
        if not match:
            raise InvalidDateError(
                f"Invalid birth time {value!r}. Use the HH:MM format.", field="birthTime"
            )
        hour, minute = int(match.group(1)), int(match.group(2))
    if not 0 <= hour <= 23:
        raise InvalidTimeError(f"Invalid hour {hour}. Hours must be 0-23.", field="hour")
    if not 0 <= minute <= 59:
        raise InvalidTimeError(f"Invalid minute {minute}. Minutes must be 0-59.", field="minute")
    return hour, minute


def parse_local(birth_date: DateLike, birth_time: TimeLike) -> datetime:
    """Validated naive wall-clock datetime for the birth moment."""

    day = parse_local_date(birth_date)
    hour, minute = parse_local_time(birth_time)
    return datetime(day.year, day.month, day.day, hour, minute)


def estimate_offset_seconds(longitude: float) -> int:
    """Whole-hour offset from longitude, 15 degrees per hour, halves rounded up."""

    return int(math.floor(longitude / 15.0 + 0.5)) * 3600


def format_offset(offset_seconds: int) -> str:
    """ISO offset; seconds are kept for local mean time zones."""

    sign = "+" if offset_seconds >= 0 else "-"
    minutes, seconds = divmod(abs(offset_seconds), 60)
    text = f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"
    if seconds:
        text += f":{seconds:02d}"
    return text


def julian_day(dt_utc: datetime) -> float:
    hour = (
        dt_utc.hour
        + dt_utc.minute / 60
        + dt_utc.second / 3600
        + dt_utc.microsecond / 3_600_000_000
    )
    return swe.julday(dt_utc.year, dt_utc.month, dt_utc.day, hour, swe.GREG_CAL)


def normalize(local_date: DateLike, local_time: TimeLike, geo: GeoLocation) -> Instant:
    """Turn a local wall-clock date/time at ``geo`` into an absolute instant.

    The offset comes from the resolved timezone. Without one, a coarse
    longitude estimate is used and the instant is flagged accordingly.
    """

    local = parse_local(local_date, local_time)

    if geo.timezone is not None:
        offset = int(geo.timezone.utc_offset_seconds)
        source = "timezone"
    else:
        offset = estimate_offset_seconds(geo.longitude)
        source = "longitude"

    # The ISO string carries the explicit offset so the UTC conversion below
    # happens exactly once.
    local_iso = f"{local.isoformat()}{format_offset(offset)}"
    try:
        dt_utc = datetime.fromisoformat(local_iso).astimezone(timezone.utc)
    except OverflowError:
        raise InvalidDateError(
            f"Birth date {local.date().isoformat()} is outside the supported calendar range.",
            field="birthDate",
        ) from None
    return Instant(
        utc=dt_utc,
        julian_day=julian_day(dt_utc),
        local_iso=local_iso,
        utc_offset_seconds=offset,
        offset_source=source,
    )


# ---------------------------------------------------------------------------
# Body positions
# ---------------------------------------------------------------------------


def positions_ecliptic(jd_utc: float, bodies: Iterable[BodyId], moshier: bool = False) -> Dict[BodyId, float]:
    """Return tropical ecliptic longitudes for ``bodies``.

    Any library error propagates; Chiron in particular needs the asteroid
    ephemeris files and fails under the Moshier backend.
    """

    flag = backend_flag(moshier) | swe.FLG_SPEED
    out: Dict[BodyId, float] = {}
    for body in bodies:
        code = BODIES.get(body)
        if code is None:
            raise KeyError(f"swisseph has no body code for {body.value}")
        values, _ = swe.calc_ut(jd_utc, code, flag)
        out[body] = values[0] % 360.0
    return out
