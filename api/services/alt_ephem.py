"""Skyfield-backed positions for the alternate provider layer.

Skyfield only models physical bodies, so the lunar nodes and the mean apogee
come from :mod:`api.services.lunar` and the angles/cusps from the analytic
house math in :mod:`api.services.houses`. Chiron is not available here.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, Optional

from skyfield.api import Loader
from skyfield.framelib import ecliptic_frame

from .constants import normalize_lon
from .houses import analytic_houses, mean_obliquity
from .lunar import LUNAR_POINTS
from .models import BodyId

logger = logging.getLogger(__name__)

TARGETS: Dict[BodyId, str] = {
    BodyId.SUN: "sun",
    BodyId.MOON: "moon",
    BodyId.MERCURY: "mercury",
    BodyId.VENUS: "venus",
    BodyId.MARS: "mars barycenter",
    BodyId.JUPITER: "jupiter barycenter",
    BodyId.SATURN: "saturn barycenter",
    BodyId.URANUS: "uranus barycenter",
    BodyId.NEPTUNE: "neptune barycenter",
    BodyId.PLUTO: "pluto barycenter",
}


def supports(body: BodyId) -> bool:
    return body in TARGETS or body in LUNAR_POINTS


class SkyfieldEphemeris:
    def __init__(self, data_dir: str, kernel: str = "de421.bsp") -> None:
        self.data_dir = data_dir
        self.kernel = kernel
        self._loader: Optional[Loader] = None
        self._ts = None
        self._eph = None

    def _load(self):
        if self._eph is None:
            self._loader = Loader(self.data_dir)
            self._ts = self._loader.timescale()
            self._eph = self._loader(self.kernel)
            logger.info("skyfield_kernel_loaded", extra={"kernel": self.kernel, "data_dir": self.data_dir})
        return self._ts, self._eph

    def longitudes(self, dt_utc: datetime, jd_utc: float, bodies: Iterable[BodyId]) -> Dict[BodyId, float]:
        bodies = list(bodies)
        missing = [b.value for b in bodies if not supports(b)]
        if missing:
            raise KeyError(f"skyfield layer cannot compute {', '.join(missing)}")

        ts, eph = self._load()
        t = ts.from_datetime(dt_utc)
        earth = eph["earth"]
        out: Dict[BodyId, float] = {}
        for body in bodies:
            if body in LUNAR_POINTS:
                out[body] = LUNAR_POINTS[body](jd_utc)
                continue
            apparent = earth.at(t).observe(eph[TARGETS[body]]).apparent()
            _lat, lon, _dist = apparent.frame_latlon(ecliptic_frame)
            out[body] = normalize_lon(lon.degrees)
        return out

    def houses(self, dt_utc: datetime, jd_utc: float, lat: float, lon: float, system: str) -> Dict[str, object]:
        ts, _eph = self._load()
        t = ts.from_datetime(dt_utc)
        armc = normalize_lon(float(t.gast) * 15.0 + lon)
        return analytic_houses(armc, lat, mean_obliquity(jd_utc), system)
