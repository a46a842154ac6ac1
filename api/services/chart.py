"""Chart assembly and the end-to-end birth chart pipeline.

``calculate_chart`` wires the stages together::

    place -> LocationResolver -> normalize -> PositionProvider
          -> classify + find_aspects -> assemble

User input problems come back as a :class:`ChartOutcome` carrying a
:class:`ChartError`; a partially built chart is never returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from . import ephem
from .aspects import AspectDefinition, aspect_definitions, find_aspects
from .config import EngineConfig, get_config
from .constants import BODY_SYMBOLS, SIGN_SYMBOLS, classify, fmt_deg, fmt_sign_degree
from .errors import ChartError, MissingTimezoneError
from .geocoding import LocationResolver, resolver_for
from .houses import HOUSE_SYSTEMS, house_of, house_system_code
from .models import ANGLES, Aspect, BirthChart, BodyId, GeoLocation, HouseCusp, Instant, PlacedBody
from .positions import PositionProvider, ProviderResult, provider_for
from .synthetic import fallback_ascendant, fallback_houses

logger = logging.getLogger(__name__)


def _complete_houses(result: ProviderResult, instant: Instant, ascendant: float) -> List[HouseCusp]:
    by_number = {h.house_number: h for h in result.houses if 1 <= h.house_number <= 12}
    if len(by_number) == 12:
        return [by_number[n] for n in range(1, 13)]
    filler = fallback_houses(ascendant, instant.local_iso[:10])
    return [by_number.get(n) or HouseCusp(n, filler[n - 1]) for n in range(1, 13)]


def assemble(
    geo: GeoLocation,
    instant: Instant,
    result: ProviderResult,
    aspects: Optional[Sequence[Aspect]] = None,
) -> BirthChart:
    """Package provider output into an immutable :class:`BirthChart`.

    Nothing is recomputed except the derived fields: each body's zodiac
    placement and house. Missing houses are filled from the fallback house
    generator and a missing ascendant falls back to the first cusp.
    """

    ascendant = result.longitude(BodyId.ASCENDANT)
    if ascendant is None:
        cusp1 = [h.cusp_longitude for h in result.houses if h.house_number == 1]
        ascendant = cusp1[0] if cusp1 else fallback_ascendant(instant.julian_day, geo.longitude)

    houses = _complete_houses(result, instant, ascendant)
    cusps = [h.cusp_longitude for h in houses]

    positions = [p for p in result.bodies if p.body != BodyId.ASCENDANT]
    placed = [
        PlacedBody(body=p.body, longitude=p.longitude, zodiac=classify(p.longitude), house=house_of(p.longitude, cusps))
        for p in positions
    ]
    placed.append(PlacedBody(body=BodyId.ASCENDANT, longitude=ascendant, zodiac=classify(ascendant), house=1))

    return BirthChart(
        location=geo,
        instant=instant,
        bodies=tuple(placed),
        houses=tuple(houses),
        aspects=tuple(aspects or ()),
        house_system=result.house_system,
        source=result.source,
        approximate=result.approximate,
    )


def house_system_label(chart: BirthChart) -> str:
    name = HOUSE_SYSTEMS.get(chart.house_system, chart.house_system)
    # the synthetic layer ignores the requested system
    return "Equal (approximate)" if chart.approximate else name


def to_record(chart: BirthChart) -> Dict[str, Any]:
    """Flatten a chart into the storage/display record.

    Bodies become ``"<Sign> <degree>°"`` strings keyed by body id; houses and
    aspects stay structured.
    """

    record: Dict[str, Any] = {}
    for placed in chart.bodies:
        record[placed.body.value] = fmt_sign_degree(placed.longitude)

    houses: Dict[str, Dict[str, Any]] = {}
    for cusp in chart.houses:
        z = classify(cusp.cusp_longitude)
        houses[f"house{cusp.house_number}"] = {
            "cusp": cusp.cusp_longitude,
            "name": z.sign,
            "symbol": SIGN_SYMBOLS[z.sign_index],
            "degree": z.degree_in_sign,
        }
    record["houses"] = houses

    record["aspects"] = [
        {
            "planet1": a.body_a.value,
            "planet2": a.body_b.value,
            "aspect": a.name,
            "angle": a.exact_angle,
            "orb": a.orb,
            "symbol": a.symbol,
            "influence": a.strength,
        }
        for a in chart.aspects
    ]

    record["positions"] = [
        {
            "body": placed.body.value,
            "symbol": BODY_SYMBOLS.get(placed.body.value, ""),
            "longitude": placed.longitude,
            "sign": placed.zodiac.sign,
            "degree": placed.zodiac.degree_in_sign,
            "house": placed.house,
            "display": fmt_deg(placed.longitude),
        }
        for placed in chart.bodies
    ]

    tz = chart.location.timezone
    record["location"] = {
        "latitude": chart.location.latitude,
        "longitude": chart.location.longitude,
        "formattedName": chart.location.formatted_name,
        "timezone": tz.zone_name if tz else None,
        "country": tz.country_name if tz else None,
    }
    record["meta"] = {
        "julianDay": chart.instant.julian_day,
        "utc": chart.instant.utc.isoformat(),
        "local": chart.instant.local_iso,
        "utcOffsetSeconds": chart.instant.utc_offset_seconds,
        "offsetSource": chart.instant.offset_source,
        "houseSystem": chart.house_system,
        "houseSystemName": house_system_label(chart),
        "source": chart.source,
        "approximate": chart.approximate,
        "engine": ephem.ENGINE_VERSION,
    }
    return record


@dataclass(frozen=True)
class ChartOutcome:
    chart: Optional[BirthChart] = None
    error: Optional[ChartError] = None
    location: Optional[GeoLocation] = None

    @property
    def ok(self) -> bool:
        return self.chart is not None


def calculate_chart(
    birth_date: str,
    birth_time: str,
    birth_place: str,
    house_system: Optional[str] = None,
    *,
    config: Optional[EngineConfig] = None,
    resolver: Optional[LocationResolver] = None,
    provider: Optional[PositionProvider] = None,
    aspects: Optional[Sequence[AspectDefinition]] = None,
) -> ChartOutcome:
    """Run the whole pipeline; user errors come back in ``ChartOutcome.error``."""

    config = config or get_config()
    geo: Optional[GeoLocation] = None
    try:
        code = house_system_code(house_system, config.default_house_system)
        local = ephem.parse_local(birth_date, birth_time)

        geo = (resolver or resolver_for(config)).resolve(birth_place, when=local)
        if not geo.found:
            return ChartOutcome(error=geo.failure, location=geo)
        if geo.timezone is None and config.require_timezone:
            raise MissingTimezoneError(
                f'No timezone is known for "{geo.formatted_name}".', field="birthPlace"
            )

        instant = ephem.normalize(local.date(), local.time(), geo)
        result = (provider or provider_for(config)).positions(instant, geo, code)
        definitions = aspects if aspects is not None else aspect_definitions(config.aspect_set)
        found = find_aspects([b for b in result.bodies if b.body not in ANGLES], definitions)
        chart = assemble(geo, instant, result, found)
    except ChartError as exc:
        logger.info("chart_rejected", extra={"code": exc.code, "field": exc.field})
        return ChartOutcome(error=exc, location=geo)

    logger.info(
        "chart_computed",
        extra={"source": chart.source, "approximate": chart.approximate, "aspects": len(chart.aspects)},
    )
    return ChartOutcome(chart=chart, location=geo)


__all__ = ["ChartOutcome", "assemble", "calculate_chart", "house_system_label", "to_record"]
