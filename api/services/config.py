"""Engine configuration read once from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Tuple

from .aspects import ASPECT_SETS
from .errors import UnsupportedHouseSystemError
from .houses import house_system_code
from .models import BodyId

DEFAULT_BODIES: Tuple[str, ...] = (
    "sun",
    "moon",
    "mercury",
    "venus",
    "mars",
    "jupiter",
    "saturn",
    "uranus",
    "neptune",
    "pluto",
    "meanNode",
    "trueNode",
    "lilith",
)

DEFAULT_LAYERS: Tuple[str, ...] = ("swisseph", "skyfield", "synthetic")
LAYER_NAMES = frozenset(DEFAULT_LAYERS)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return default
    items = tuple(part.strip() for part in raw.split(",") if part.strip())
    return items or default


@dataclass(frozen=True)
class EngineConfig:
    ephemeris_dir: str | None = None
    ephemeris_backend: str = "swieph"
    layers: Tuple[str, ...] = DEFAULT_LAYERS
    bodies: Tuple[str, ...] = DEFAULT_BODIES
    skyfield_data_dir: str = field(default_factory=lambda: os.path.join(os.path.expanduser("~"), ".skyfield-data"))
    skyfield_ephemeris: str = "de421.bsp"
    default_house_system: str = "P"
    aspect_set: str = "major"
    require_timezone: bool = True
    worldcities_csv: str | None = None
    geocoder_enabled: bool = False
    geocoder_user_agent: str = "birthchart-engine"
    geocoder_timeout: float = 6.0

    def __post_init__(self) -> None:
        unknown = [name for name in self.layers if name not in LAYER_NAMES]
        if unknown:
            raise ValueError(f"unknown position layer(s) {unknown}; expected one of {sorted(LAYER_NAMES)}")
        bodies = {b.value for b in BodyId}
        unknown = [name for name in self.bodies if name not in bodies]
        if unknown:
            raise ValueError(f"unknown body name(s) {unknown}; expected one of {sorted(bodies)}")
        if self.aspect_set.strip().lower() not in ASPECT_SETS:
            raise ValueError(f"unknown aspect set {self.aspect_set!r}; expected one of {sorted(ASPECT_SETS)}")
        try:
            house_system_code(self.default_house_system)
        except UnsupportedHouseSystemError as exc:
            raise ValueError(exc.message) from None

    @property
    def moshier(self) -> bool:
        return self.ephemeris_backend == "moseph"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        backend = (os.getenv("EPHEMERIS_BACKEND") or "swieph").strip().lower()
        layers = _env_list("CHART_PROVIDER_LAYERS", DEFAULT_LAYERS)
        if "synthetic" not in layers:
            # the chain must always end on a layer that cannot fail
            layers = layers + ("synthetic",)
        defaults = cls()
        return cls(
            ephemeris_dir=os.getenv("EPHEMERIS_DIR") or None,
            ephemeris_backend="moseph" if backend == "moseph" else "swieph",
            layers=layers,
            bodies=_env_list("CHART_BODIES", DEFAULT_BODIES),
            skyfield_data_dir=os.getenv("SKYFIELD_DATA_DIR") or defaults.skyfield_data_dir,
            skyfield_ephemeris=os.getenv("SKYFIELD_EPHEMERIS") or defaults.skyfield_ephemeris,
            default_house_system=(os.getenv("DEFAULT_HOUSE_SYSTEM") or "P").strip().upper(),
            aspect_set=(os.getenv("CHART_ASPECT_SET") or "major").strip().lower(),
            require_timezone=_env_flag("CHART_REQUIRE_TIMEZONE", "true"),
            worldcities_csv=os.getenv("WORLDCITIES_CSV") or None,
            geocoder_enabled=_env_flag("GEOCODER_ENABLED", "false"),
            geocoder_user_agent=os.getenv("GEOCODER_USER_AGENT") or defaults.geocoder_user_agent,
            geocoder_timeout=float(os.getenv("GEOCODER_TIMEOUT", "6")),
        )


@lru_cache(maxsize=1)
def get_config() -> EngineConfig:
    """Return the process-wide configuration, built on first use."""

    return EngineConfig.from_env()


__all__ = ["DEFAULT_BODIES", "DEFAULT_LAYERS", "LAYER_NAMES", "EngineConfig", "get_config"]
