import math
from typing import Dict, List

import swisseph as swe

from .constants import normalize_lon
from .errors import UnsupportedHouseSystemError

HOUSE_SYSTEMS = {
    "P": "Placidus",
    "K": "Koch",
    "O": "Porphyry",
    "R": "Regiomontanus",
    "C": "Campanus",
    "A": "Equal",
    "E": "Equal",
    "W": "Whole Sign",
    "B": "Alcabitius",
    "M": "Morinus",
    "T": "Topocentric",
}

HOUSE_CODE_MAP = {
    "placidus": "P",
    "koch": "K",
    "porphyry": "O",
    "regiomontanus": "R",
    "campanus": "C",
    "equal": "E",
    "whole_sign": "W",
    "wholesign": "W",
    "alcabitius": "B",
    "morinus": "M",
    "topocentric": "T",
}

# systems the analytic (non-swisseph) path can produce
ANALYTIC_SYSTEMS = {"P", "O", "A", "E", "W"}


def house_system_code(system: str | None, default: str = "P") -> str:
    """Accept a one-letter code or a system name and return the code."""
    if system is None or not str(system).strip():
        system = default
    raw = str(system).strip()
    if len(raw) == 1 and raw.upper() in HOUSE_SYSTEMS:
        return raw.upper()
    code = HOUSE_CODE_MAP.get(raw.lower().replace(" ", "_").replace("-", "_"))
    if code is None:
        raise UnsupportedHouseSystemError(
            f"Unknown house system {system!r}. Use one of: {', '.join(sorted(set(HOUSE_SYSTEMS)))}.",
            field="houseSystem",
        )
    return code


def houses(jd_utc: float, lat: float, lon: float, system: str = "P"):
    cusps, ascmc = swe.houses_ex(jd_utc, lat, lon, house_system_code(system).encode())
    # cusps: list of 12 values
    return {
        "asc": ascmc[0] % 360.0,
        "mc": ascmc[1] % 360.0,
        "armc": ascmc[2] % 360.0,
        "cusps": [cusps[i] % 360.0 for i in range(12)]
    }

def house_of(lon: float, cusps: list[float]) -> int:
    # Shift all longitudes so cusp 1 becomes 0° and find the sector
    shift = cusps[0]
    def norm(x):
        y = (x - shift) % 360.0
        return y
    nlon = norm(lon)
    ncusps = [norm(c) for c in cusps] + [360.0]
    for i in range(12):
        if ncusps[i] <= nlon < ncusps[i+1]:
            return i+1
    return 12

def cusps_monotonic(cusps: List[float]) -> bool:
    """True when the 12 cusps advance around the circle exactly once."""
    if len(cusps) != 12:
        return False
    gaps = [(cusps[(i + 1) % 12] - cusps[i]) % 360.0 for i in range(12)]
    return all(g > 0 for g in gaps) and abs(sum(gaps) - 360.0) < 1e-6


# ---------------------------------------------------------------------------
# Analytic house math
# ---------------------------------------------------------------------------


def mean_obliquity(jd_utc: float) -> float:
    """Mean obliquity of the ecliptic in degrees (IAU 2006 polynomial)."""
    t = (jd_utc - 2451545.0) / 36525.0
    return 23.439291111 - 0.0130041667 * t - 1.6389e-7 * t * t + 5.0361e-7 * t ** 3


def lon_from_ra(ra: float, eps: float) -> float:
    """Ecliptic longitude of the ecliptic point with right ascension ``ra``."""
    r, e = math.radians(ra), math.radians(eps)
    return normalize_lon(math.degrees(math.atan2(math.sin(r), math.cos(r) * math.cos(e))))


def mc_from_armc(armc: float, eps: float) -> float:
    return lon_from_ra(armc, eps)


def asc_from_armc(armc: float, lat: float, eps: float) -> float:
    t, e, p = math.radians(armc), math.radians(eps), math.radians(lat)
    y = math.cos(t)
    x = -(math.sin(t) * math.cos(e) + math.tan(p) * math.sin(e))
    return normalize_lon(math.degrees(math.atan2(y, x)))


def _semi_arc(lon: float, lat: float, eps: float) -> float:
    dec = math.asin(math.sin(math.radians(eps)) * math.sin(math.radians(lon)))
    x = -math.tan(math.radians(lat)) * math.tan(dec)
    if abs(x) > 1.0:
        raise ValueError("cusp is circumpolar at this latitude")
    return math.degrees(math.acos(x))


def _placidus_cusp(armc: float, lat: float, eps: float, ra_of) -> float:
    ra = ra_of(90.0)
    for _ in range(100):
        dsa = _semi_arc(lon_from_ra(ra, eps), lat, eps)
        nxt = ra_of(dsa)
        if abs(((nxt - ra) + 180.0) % 360.0 - 180.0) < 1e-9:
            ra = nxt
            break
        ra = nxt
    return lon_from_ra(ra, eps)


def _from_quadrants(asc: float, mc: float, h11: float, h12: float, h2: float, h3: float) -> List[float]:
    ic, dsc = normalize_lon(mc + 180.0), normalize_lon(asc + 180.0)
    return [
        asc, h2, h3, ic,
        normalize_lon(h11 + 180.0), normalize_lon(h12 + 180.0),
        dsc, normalize_lon(h2 + 180.0), normalize_lon(h3 + 180.0),
        mc, h11, h12,
    ]


def placidus_cusps(armc: float, lat: float, eps: float) -> List[float]:
    """Placidus cusps by semi-arc trisection; raises ValueError near the poles."""
    asc, mc = asc_from_armc(armc, lat, eps), mc_from_armc(armc, eps)
    h11 = _placidus_cusp(armc, lat, eps, lambda dsa: armc + dsa / 3.0)
    h12 = _placidus_cusp(armc, lat, eps, lambda dsa: armc + 2.0 * dsa / 3.0)
    h2 = _placidus_cusp(armc, lat, eps, lambda dsa: armc + 60.0 + 2.0 * dsa / 3.0)
    h3 = _placidus_cusp(armc, lat, eps, lambda dsa: armc + 120.0 + dsa / 3.0)
    return _from_quadrants(asc, mc, h11, h12, h2, h3)


def porphyry_cusps(asc: float, mc: float) -> List[float]:
    upper = (asc - mc) % 360.0
    lower = (normalize_lon(mc + 180.0) - asc) % 360.0
    return _from_quadrants(
        asc, mc,
        normalize_lon(mc + upper / 3.0), normalize_lon(mc + 2.0 * upper / 3.0),
        normalize_lon(asc + lower / 3.0), normalize_lon(asc + 2.0 * lower / 3.0),
    )


def equal_cusps(asc: float) -> List[float]:
    return [normalize_lon(asc + 30.0 * i) for i in range(12)]


def whole_sign_cusps(asc: float) -> List[float]:
    start = math.floor(normalize_lon(asc) / 30.0) * 30.0
    return [normalize_lon(start + 30.0 * i) for i in range(12)]


def analytic_houses(armc: float, lat: float, eps: float, system: str = "P") -> Dict[str, object]:
    """Same shape as :func:`houses`, computed without the Swiss Ephemeris."""
    code = house_system_code(system)
    if code not in ANALYTIC_SYSTEMS:
        raise ValueError(f"house system {code} needs the Swiss Ephemeris")
    asc, mc = asc_from_armc(armc, lat, eps), mc_from_armc(armc, eps)
    if code == "P":
        cusps = placidus_cusps(armc, lat, eps)
    elif code == "O":
        cusps = porphyry_cusps(asc, mc)
    elif code == "W":
        cusps = whole_sign_cusps(asc)
    else:
        cusps = equal_cusps(asc)
    return {"asc": asc, "mc": mc, "armc": armc % 360.0, "cusps": cusps}
