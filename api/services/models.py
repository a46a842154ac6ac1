"""Immutable value types shared by the chart pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from .errors import ChartError


class BodyId(str, Enum):
    SUN = "sun"
    MOON = "moon"
    MERCURY = "mercury"
    VENUS = "venus"
    MARS = "mars"
    JUPITER = "jupiter"
    SATURN = "saturn"
    URANUS = "uranus"
    NEPTUNE = "neptune"
    PLUTO = "pluto"
    MEAN_NODE = "meanNode"
    TRUE_NODE = "trueNode"
    LILITH = "lilith"
    CHIRON = "chiron"
    ASCENDANT = "ascendant"
    MIDHEAVEN = "midheaven"


PLANETS: Tuple[BodyId, ...] = (
    BodyId.SUN,
    BodyId.MOON,
    BodyId.MERCURY,
    BodyId.VENUS,
    BodyId.MARS,
    BodyId.JUPITER,
    BodyId.SATURN,
    BodyId.URANUS,
    BodyId.NEPTUNE,
    BodyId.PLUTO,
)

ANGLES: Tuple[BodyId, ...] = (BodyId.ASCENDANT, BodyId.MIDHEAVEN)


@dataclass(frozen=True)
class TimezoneInfo:
    zone_name: str
    utc_offset_seconds: int
    country_name: str


@dataclass(frozen=True)
class GeoLocation:
    """Resolved place.

    A lookup that did not succeed keeps the historical sentinel coordinates
    (0, 0) and carries the reason in ``failure``; test ``found`` rather than
    the coordinates.
    """

    latitude: float
    longitude: float
    formatted_name: str
    timezone: Optional[TimezoneInfo] = None
    failure: Optional[ChartError] = field(default=None, compare=False)

    @property
    def found(self) -> bool:
        return self.failure is None


@dataclass(frozen=True)
class Instant:
    utc: datetime
    julian_day: float
    local_iso: str
    utc_offset_seconds: int
    offset_source: str = "timezone"

    @property
    def approximate_offset(self) -> bool:
        return self.offset_source != "timezone"


@dataclass(frozen=True)
class ZodiacPosition:
    sign: str
    sign_index: int
    degree_in_sign: float


@dataclass(frozen=True)
class BodyPosition:
    body: BodyId
    longitude: float


@dataclass(frozen=True)
class PlacedBody:
    """A body position together with its derived zodiac placement."""

    body: BodyId
    longitude: float
    zodiac: ZodiacPosition
    house: Optional[int] = None


@dataclass(frozen=True)
class HouseCusp:
    house_number: int
    cusp_longitude: float


@dataclass(frozen=True)
class Aspect:
    body_a: BodyId
    body_b: BodyId
    name: str
    symbol: str
    exact_angle: float
    separation: float
    orb: float
    strength: str


@dataclass(frozen=True)
class BirthChart:
    location: GeoLocation
    instant: Instant
    bodies: Tuple[PlacedBody, ...]
    houses: Tuple[HouseCusp, ...]
    aspects: Tuple[Aspect, ...]
    house_system: str
    source: str
    approximate: bool = False

    def body(self, body_id: BodyId) -> Optional[PlacedBody]:
        for placed in self.bodies:
            if placed.body == body_id:
                return placed
        return None


__all__ = [
    "ANGLES",
    "Aspect",
    "BirthChart",
    "BodyId",
    "BodyPosition",
    "GeoLocation",
    "HouseCusp",
    "Instant",
    "PLANETS",
    "PlacedBody",
    "TimezoneInfo",
    "ZodiacPosition",
]
