from fastapi import APIRouter, HTTPException
from hashlib import sha256
from typing import List

from ..schemas import (
    AspectOut,
    BirthChartRequest,
    BodyOut,
    ChartResponse,
    HouseOut,
    HouseSystemOut,
    LocationOut,
    MetaOut,
)
from ..services import ephem
from ..services.aspects import aspect_definitions
from ..services.chart import calculate_chart, house_system_label, to_record
from ..services.config import get_config
from ..services.constants import BODY_SYMBOLS, sign_name_from_lon
from ..services.houses import ANALYTIC_SYSTEMS, HOUSE_SYSTEMS
from ..services.models import BodyId

router = APIRouter(prefix="/v1/charts", tags=["charts"])

# user input problems the form can fix vs. values it sent in the wrong shape
ERROR_STATUS = {
    "empty_input": 400,
    "location_not_found": 400,
    "missing_timezone": 400,
    "invalid_time": 422,
    "invalid_date": 422,
    "unsupported_house_system": 422,
}


@router.post("/compute", response_model=ChartResponse)
def compute_chart(req: BirthChartRequest):
    config = get_config()
    aspects = aspect_definitions("extended") if req.extended_aspects else None
    outcome = calculate_chart(
        req.birth_date, req.birth_time, req.birth_place, req.house_system, config=config, aspects=aspects
    )
    if outcome.error is not None:
        raise HTTPException(status_code=ERROR_STATUS.get(outcome.error.code, 400), detail=outcome.error.to_dict())

    chart = outcome.chart
    geo, instant = chart.location, chart.instant
    asc = chart.body(BodyId.ASCENDANT)
    mc = chart.body(BodyId.MIDHEAVEN)
    angles = {"ascendant": round(asc.longitude, 4)}
    if mc is not None:
        angles["mc"] = round(mc.longitude, 4)

    bodies = [
        BodyOut(
            name=p.body.value,
            lon=round(p.longitude, 4),
            sign=p.zodiac.sign,
            degree=round(p.zodiac.degree_in_sign, 4),
            house=p.house,
            symbol=BODY_SYMBOLS.get(p.body.value),
        )
        for p in chart.bodies
    ]
    houses = [
        HouseOut(num=h.house_number, cusp_lon=round(h.cusp_longitude, 4), sign=sign_name_from_lon(h.cusp_longitude))
        for h in chart.houses
    ]
    aspects_out = [
        AspectOut(
            p1=a.body_a.value,
            p2=a.body_b.value,
            type=a.name,
            symbol=a.symbol,
            angle=a.exact_angle,
            orb=a.orb,
            strength=a.strength,
        )
        for a in chart.aspects
    ]

    seed = f"{req.birth_date}|{req.birth_time}|{geo.latitude:.6f}|{geo.longitude:.6f}|{chart.house_system}"
    chart_id = "cht_" + sha256(seed.encode()).hexdigest()[:24]

    tz = geo.timezone
    meta = MetaOut(
        engine_version=ephem.ENGINE_VERSION,
        house_system=chart.house_system,
        house_system_name=house_system_label(chart),
        source=chart.source,
        approximate=chart.approximate,
        offset_source=instant.offset_source,
        julian_day=instant.julian_day,
        utc=instant.utc.isoformat(),
    )
    return ChartResponse(
        chart_id=chart_id,
        meta=meta,
        location=LocationOut(
            latitude=geo.latitude,
            longitude=geo.longitude,
            formatted_name=geo.formatted_name,
            timezone=tz.zone_name if tz else None,
            country=tz.country_name if tz else None,
            utc_offset_seconds=instant.utc_offset_seconds,
        ),
        angles=angles,
        houses=houses,
        bodies=bodies,
        aspects=aspects_out,
        record=to_record(chart),
    )


@router.get("/house-systems", response_model=List[HouseSystemOut])
def list_house_systems():
    return [
        HouseSystemOut(code=code, name=name, analytic=code in ANALYTIC_SYSTEMS)
        for code, name in HOUSE_SYSTEMS.items()
    ]
