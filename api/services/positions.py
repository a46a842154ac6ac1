"""Position provider: an ordered chain of interchangeable layers.

Each layer turns an :class:`Instant` and a :class:`GeoLocation` into body
longitudes, the two angles and twelve house cusps. A layer reports either a
:class:`LayerSuccess` or a :class:`LayerFailure`; it never raises. The
provider walks the chain and returns the first success, so a failing layer
is discarded as a whole and results from different layers are never mixed.

Layers, in default order:

``swisseph``
    Swiss Ephemeris via ``pyswisseph`` (data files or the Moshier model).
``skyfield``
    Skyfield with a JPL kernel, analytic lunar points and house math.
``synthetic``
    Deterministic approximation that cannot fail; always last.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import ephem
from . import houses as houses_svc
from .alt_ephem import SkyfieldEphemeris, supports as skyfield_supports
from .config import EngineConfig, get_config
from .constants import normalize_lon
from .errors import PositionProviderDegraded
from .models import ANGLES, BodyId, BodyPosition, GeoLocation, HouseCusp, Instant
from .synthetic import fallback_ascendant, fallback_houses, fallback_midheaven, synthetic_longitudes

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Layer output schema
# ---------------------------------------------------------------------------


class LayerPositions(BaseModel):
    """Validated output of one layer. All longitudes are normalised to [0, 360)."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False, extra="forbid")

    bodies: Dict[BodyId, float]
    ascendant: float
    midheaven: float
    cusps: List[float] = Field(min_length=12, max_length=12)
    approximate: bool = False

    @field_validator("bodies")
    @classmethod
    def _finite_bodies(cls, value: Dict[BodyId, float]) -> Dict[BodyId, float]:
        for body, lon in value.items():
            if not math.isfinite(lon):
                raise ValueError(f"longitude for {body.value} is not finite")
        return {body: normalize_lon(lon) for body, lon in value.items()}

    @field_validator("ascendant", "midheaven")
    @classmethod
    def _normalise_angle(cls, value: float) -> float:
        return normalize_lon(value)

    @field_validator("cusps")
    @classmethod
    def _ordered_cusps(cls, value: List[float]) -> List[float]:
        cusps = [normalize_lon(c) for c in value]
        if not houses_svc.cusps_monotonic(cusps):
            raise ValueError("house cusps are not in zodiacal order")
        return cusps


def validate_layer_output(raw: Dict[str, object], requested: Sequence[BodyId]) -> LayerPositions:
    positions = LayerPositions.model_validate(raw)
    missing = [body.value for body in requested if body not in positions.bodies]
    if missing:
        raise ValueError(f"missing bodies: {', '.join(missing)}")
    return positions


@dataclass(frozen=True)
class LayerSuccess:
    layer: str
    positions: LayerPositions


@dataclass(frozen=True)
class LayerFailure:
    layer: str
    error: PositionProviderDegraded


LayerResult = Union[LayerSuccess, LayerFailure]


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------


class PositionLayer:
    name = "base"

    def compute(
        self, instant: Instant, geo: GeoLocation, house_system: str, bodies: Sequence[BodyId]
    ) -> LayerResult:
        try:
            raw = self._compute(instant, geo, house_system, bodies)
            positions = validate_layer_output(raw, bodies)
        except Exception as exc:  # noqa: BLE001 - any failure hands over to the next layer
            reason = f"{type(exc).__name__}: {exc}"
            return LayerFailure(self.name, PositionProviderDegraded(self.name, reason))
        return LayerSuccess(self.name, positions)

    def _compute(
        self, instant: Instant, geo: GeoLocation, house_system: str, bodies: Sequence[BodyId]
    ) -> Dict[str, object]:
        raise NotImplementedError


class SwissEphemerisLayer(PositionLayer):
    name = "swisseph"

    def __init__(self, config: EngineConfig) -> None:
        self.moshier = config.moshier
        ephem.init_paths(config.ephemeris_dir)

    def _compute(self, instant, geo, house_system, bodies):
        jd = instant.julian_day
        lons = ephem.positions_ecliptic(jd, bodies, moshier=self.moshier)
        hs = houses_svc.houses(jd, geo.latitude, geo.longitude, system=house_system)
        return {"bodies": lons, "ascendant": hs["asc"], "midheaven": hs["mc"], "cusps": hs["cusps"]}


class SkyfieldLayer(PositionLayer):
    name = "skyfield"

    def __init__(self, config: EngineConfig) -> None:
        self.ephemeris = SkyfieldEphemeris(config.skyfield_data_dir, config.skyfield_ephemeris)

    def _compute(self, instant, geo, house_system, bodies):
        # check capabilities before touching (and possibly downloading) the kernel
        unsupported = [b.value for b in bodies if not skyfield_supports(b)]
        if unsupported:
            raise KeyError(f"unsupported bodies: {', '.join(unsupported)}")
        if houses_svc.house_system_code(house_system) not in houses_svc.ANALYTIC_SYSTEMS:
            raise ValueError(f"house system {house_system} is not available without swisseph")
        jd = instant.julian_day
        lons = self.ephemeris.longitudes(instant.utc, jd, bodies)
        hs = self.ephemeris.houses(instant.utc, jd, geo.latitude, geo.longitude, house_system)
        return {"bodies": lons, "ascendant": hs["asc"], "midheaven": hs["mc"], "cusps": hs["cusps"]}


class SyntheticLayer(PositionLayer):
    """Approximate positions; ignores the house system and returns equal-ish houses."""

    name = "synthetic"

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        pass

    def _compute(self, instant, geo, house_system, bodies):
        asc = fallback_ascendant(instant.julian_day, geo.longitude)
        return {
            "bodies": synthetic_longitudes(instant, geo, bodies),
            "ascendant": asc,
            "midheaven": fallback_midheaven(asc),
            "cusps": fallback_houses(asc, instant.local_iso[:10]),
            "approximate": True,
        }


LAYER_TYPES = {
    SwissEphemerisLayer.name: SwissEphemerisLayer,
    SkyfieldLayer.name: SkyfieldLayer,
    SyntheticLayer.name: SyntheticLayer,
}


def build_layers(config: EngineConfig) -> List[PositionLayer]:
    # layer names are checked when the config is built
    return [LAYER_TYPES[name](config) for name in config.layers]


def tracked_bodies(names: Iterable[str]) -> Tuple[BodyId, ...]:
    out: List[BodyId] = []
    for name in names:
        body = BodyId(name)
        if body in ANGLES or body in out:
            continue
        out.append(body)
    return tuple(out)


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProviderResult:
    source: str
    bodies: Tuple[BodyPosition, ...]
    houses: Tuple[HouseCusp, ...]
    house_system: str
    approximate: bool = False
    degradations: Tuple[PositionProviderDegraded, ...] = ()

    def longitude(self, body: BodyId) -> Optional[float]:
        for position in self.bodies:
            if position.body == body:
                return position.longitude
        return None


class PositionProvider:
    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        layers: Optional[Sequence[PositionLayer]] = None,
        bodies: Optional[Iterable[str]] = None,
    ) -> None:
        self.config = config or get_config()
        self.layers: List[PositionLayer] = list(layers) if layers is not None else build_layers(self.config)
        if not self.layers or not isinstance(self.layers[-1], SyntheticLayer):
            self.layers.append(SyntheticLayer(self.config))
        self.bodies = tracked_bodies(bodies if bodies is not None else self.config.bodies)

    def positions(self, instant: Instant, geo: GeoLocation, house_system: Optional[str] = None) -> ProviderResult:
        code = houses_svc.house_system_code(house_system, self.config.default_house_system)
        degradations: List[PositionProviderDegraded] = []
        for layer in self.layers:
            result = layer.compute(instant, geo, code, self.bodies)
            if isinstance(result, LayerSuccess):
                return _to_result(result, code, degradations)
            logger.warning(
                "position_layer_failed",
                extra={"layer": result.layer, "reason": result.error.reason},
            )
            degradations.append(result.error)
        raise RuntimeError("synthetic position layer failed")


@lru_cache(maxsize=8)
def provider_for(config: EngineConfig) -> PositionProvider:
    """Process-wide provider for ``config``; layers keep their loaded ephemerides."""

    return PositionProvider(config)


def _to_result(success: LayerSuccess, code: str, degradations: List[PositionProviderDegraded]) -> ProviderResult:
    pos = success.positions
    bodies = [BodyPosition(body, lon) for body, lon in pos.bodies.items()]
    bodies.append(BodyPosition(BodyId.ASCENDANT, pos.ascendant))
    bodies.append(BodyPosition(BodyId.MIDHEAVEN, pos.midheaven))
    cusps = tuple(HouseCusp(i + 1, lon) for i, lon in enumerate(pos.cusps))
    return ProviderResult(
        source=success.layer,
        bodies=tuple(bodies),
        houses=cusps,
        house_system=code,
        approximate=pos.approximate,
        degradations=tuple(degradations),
    )


__all__ = [
    "LAYER_TYPES",
    "LayerFailure",
    "LayerPositions",
    "LayerResult",
    "LayerSuccess",
    "PositionLayer",
    "PositionProvider",
    "ProviderResult",
    "SkyfieldLayer",
    "SwissEphemerisLayer",
    "SyntheticLayer",
    "build_layers",
    "provider_for",
    "tracked_bodies",
    "validate_layer_output",
]
