"""Analytic lunar points (Meeus, Astronomical Algorithms ch. 47).

Used where the astronomical library only models physical bodies. Accuracy is
a few arc-minutes for the mean elements and about 0.1 degree for the true
node, which is plenty for chart work.
"""

from __future__ import annotations

import math

from .constants import normalize_lon
from .models import BodyId


def _centuries(jd: float) -> float:
    return (jd - 2451545.0) / 36525.0


def _poly(t: float, *coeffs: float) -> float:
    return sum(c * t ** i for i, c in enumerate(coeffs))


def mean_node(jd: float) -> float:
    t = _centuries(jd)
    return normalize_lon(_poly(t, 125.0445479, -1934.1362891, 0.0020754, 1 / 467441, -1 / 60616000))


def true_node(jd: float) -> float:
    t = _centuries(jd)
    d = math.radians(_poly(t, 297.8501921, 445267.1114034, -0.0018819, 1 / 545868, -1 / 113065000))
    m = math.radians(_poly(t, 357.5291092, 35999.0502909, -0.0001536, 1 / 24490000))
    mp = math.radians(_poly(t, 134.9633964, 477198.8675055, 0.0087414, 1 / 69699, -1 / 14712000))
    f = math.radians(_poly(t, 93.2720950, 483202.0175233, -0.0036539, -1 / 3526000, 1 / 863310000))
    correction = (
        -1.4979 * math.sin(2 * (d - f))
        - 0.1500 * math.sin(m)
        - 0.1226 * math.sin(2 * d)
        + 0.1176 * math.sin(2 * f)
        - 0.0801 * math.sin(2 * (f - mp))
    )
    return normalize_lon(mean_node(jd) + correction)


def mean_apogee(jd: float) -> float:
    """Mean lunar apogee, the point usually called Black Moon Lilith."""
    t = _centuries(jd)
    perigee = _poly(t, 83.3532465, 4069.0137287, -0.0103200, -1 / 80053, 1 / 18999000)
    return normalize_lon(perigee + 180.0)


LUNAR_POINTS = {
    BodyId.MEAN_NODE: mean_node,
    BodyId.TRUE_NODE: true_node,
    BodyId.LILITH: mean_apogee,
}
