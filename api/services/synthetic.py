"""Deterministic stand-in positions for when no ephemeris is usable.

The numbers are plausible (mean motions from J2000 plus a small seeded
jitter) but not astronomically accurate. Every value is a pure function of
its inputs, so repeated calls agree exactly.
"""

from __future__ import annotations

import hashlib
import math
import random
from typing import Dict, Iterable, List, Tuple

from .constants import normalize_lon
from .models import BodyId, GeoLocation, Instant

J2000 = 2451545.0

# (longitude at J2000, degrees per day)
MEAN_MOTIONS: Dict[BodyId, Tuple[float, float]] = {
    BodyId.SUN: (280.460, 0.9856474),
    BodyId.MOON: (218.316, 13.176396),
    BodyId.MARS: (355.433, 0.524039),
    BodyId.JUPITER: (34.351, 0.083091),
    BodyId.SATURN: (50.077, 0.033460),
    BodyId.URANUS: (314.055, 0.011733),
    BodyId.NEPTUNE: (304.349, 0.005981),
    BodyId.PLUTO: (238.929, 0.003968),
    BodyId.MEAN_NODE: (125.045, -0.0529538),
    BodyId.LILITH: (263.353, 0.1114041),
    BodyId.CHIRON: (251.000, 0.019500),
}

# inner planets stay within their greatest elongation of the Sun
MAX_ELONGATION: Dict[BodyId, float] = {BodyId.MERCURY: 28.0, BodyId.VENUS: 47.0}

JITTER_DEGREES = 2.0
HOUSE_VARIATION_DEGREES = 4.0


def body_seed(timestamp: float, latitude: float, longitude: float, body: BodyId) -> int:
    key = f"{timestamp:.3f}|{latitude:.6f}|{longitude:.6f}|{body.value}"
    return int(hashlib.sha256(key.encode()).hexdigest()[:16], 16)


def _rng(instant: Instant, geo: GeoLocation, body: BodyId) -> random.Random:
    return random.Random(body_seed(instant.utc.timestamp(), geo.latitude, geo.longitude, body))


def synthetic_longitudes(instant: Instant, geo: GeoLocation, bodies: Iterable[BodyId]) -> Dict[BodyId, float]:
    days = instant.julian_day - J2000
    sun = normalize_lon(MEAN_MOTIONS[BodyId.SUN][0] + MEAN_MOTIONS[BodyId.SUN][1] * days)
    out: Dict[BodyId, float] = {}
    for body in bodies:
        rng = _rng(instant, geo, body)
        if body == BodyId.SUN:
            out[body] = sun
        elif body in MAX_ELONGATION:
            phase = rng.uniform(0.0, 2.0 * math.pi)
            out[body] = normalize_lon(sun + MAX_ELONGATION[body] * math.sin(phase))
        elif body == BodyId.TRUE_NODE:
            base, rate = MEAN_MOTIONS[BodyId.MEAN_NODE]
            out[body] = normalize_lon(base + rate * days + rng.uniform(-1.5, 1.5))
        elif body in MEAN_MOTIONS:
            base, rate = MEAN_MOTIONS[body]
            jitter = 0.0 if body == BodyId.MEAN_NODE else rng.uniform(-JITTER_DEGREES, JITTER_DEGREES)
            out[body] = normalize_lon(base + rate * days + jitter)
        else:
            raise KeyError(f"no synthetic model for {body.value}")
    return out


def fallback_ascendant(julian_day: float, longitude: float) -> float:
    """Fraction of the Julian day read as a 24h clock at 15 degrees per hour."""

    hours = (julian_day % 1.0) * 24.0
    return normalize_lon(hours * 15.0 - longitude)


def fallback_midheaven(ascendant: float) -> float:
    return normalize_lon(ascendant - 90.0)


def fallback_houses(ascendant: float, calendar_date: str) -> List[float]:
    """Equal houses from ``ascendant``, each cusp after the first nudged a little.

    The nudge is seeded from ``calendar_date`` (``YYYY-MM-DD``) so different
    birth dates give visibly different house sizes. The nudge stays well
    below half a house, which keeps the cusps in order.
    """

    seed = int(hashlib.sha256(calendar_date.encode()).hexdigest()[:16], 16)
    rng = random.Random(seed)
    cusps = [normalize_lon(ascendant)]
    for i in range(1, 12):
        offset = rng.uniform(-HOUSE_VARIATION_DEGREES, HOUSE_VARIATION_DEGREES)
        cusps.append(normalize_lon(ascendant + 30.0 * i + offset))
    return cusps
