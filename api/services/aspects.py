from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .models import Aspect, BodyPosition


@dataclass(frozen=True)
class AspectDefinition:
    name: str
    angle: float
    orb: float
    symbol: str


# Table order is matching priority: the first definition within orb wins.
MAJOR_ASPECTS: Tuple[AspectDefinition, ...] = (
    AspectDefinition("Conjunction", 0.0, 8.0, "☌"),
    AspectDefinition("Opposition", 180.0, 8.0, "☍"),
    AspectDefinition("Trine", 120.0, 8.0, "△"),
    AspectDefinition("Square", 90.0, 8.0, "□"),
    AspectDefinition("Sextile", 60.0, 6.0, "⚹"),
)

EXTENDED_ASPECTS: Tuple[AspectDefinition, ...] = MAJOR_ASPECTS + (
    AspectDefinition("Quincunx", 150.0, 5.0, "⚻"),
    AspectDefinition("Semi-Square", 45.0, 4.0, "∠"),
    AspectDefinition("Semi-Sextile", 30.0, 4.0, "⚺"),
)

ASPECT_SETS = {"major": MAJOR_ASPECTS, "extended": EXTENDED_ASPECTS}

STRONG_ORB = 3.0


def aspect_definitions(aspect_set: str = "major") -> Tuple[AspectDefinition, ...]:
    try:
        return ASPECT_SETS[aspect_set.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown aspect set {aspect_set!r}") from None


def _angle_diff(a: float, b: float) -> float:
    """Return the minimal angular distance between two longitudes."""

    diff = abs(a - b) % 360.0
    return 360.0 - diff if diff > 180.0 else diff


def strength(orb: float) -> str:
    return "Strong" if orb < STRONG_ORB else "Moderate"


def find_aspects(
    bodies: Sequence[BodyPosition],
    definitions: Sequence[AspectDefinition] = MAJOR_ASPECTS,
) -> List[Aspect]:
    """Every unordered pair once; at most one aspect per pair (first match)."""

    res: List[Aspect] = []
    for i in range(len(bodies)):
        for j in range(i + 1, len(bodies)):
            a, b = bodies[i], bodies[j]
            if a.body == b.body:
                continue
            d = _angle_diff(a.longitude, b.longitude)
            for definition in definitions:
                deviation = abs(d - definition.angle)
                if deviation <= definition.orb:
                    res.append(
                        Aspect(
                            body_a=a.body,
                            body_b=b.body,
                            name=definition.name,
                            symbol=definition.symbol,
                            exact_angle=definition.angle,
                            separation=round(d, 2),
                            orb=round(deviation, 2),
                            strength=strength(deviation),
                        )
                    )
                    break
    return res


__all__ = [
    "ASPECT_SETS",
    "AspectDefinition",
    "EXTENDED_ASPECTS",
    "MAJOR_ASPECTS",
    "aspect_definitions",
    "find_aspects",
    "strength",
]
