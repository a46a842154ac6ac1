from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any


class BirthChartRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    birth_date: str = Field(alias="birthDate")  # YYYY-MM-DD
    birth_time: str = Field(alias="birthTime")  # HH:MM
    birth_place: str = Field(alias="birthPlace")
    house_system: Optional[str] = Field(default=None, alias="houseSystem")
    extended_aspects: bool = Field(default=False, alias="extendedAspects")


class LocationOut(BaseModel):
    latitude: float
    longitude: float
    formatted_name: str
    timezone: Optional[str] = None
    country: Optional[str] = None
    utc_offset_seconds: int


class BodyOut(BaseModel):
    name: str
    lon: float
    sign: str
    degree: float
    house: Optional[int] = None
    symbol: Optional[str] = None


class HouseOut(BaseModel):
    num: int
    cusp_lon: float
    sign: str


class AspectOut(BaseModel):
    p1: str
    p2: str
    type: str
    symbol: str
    angle: float
    orb: float
    strength: str


class MetaOut(BaseModel):
    engine: str = "birthchart-engine"
    engine_version: str
    zodiac: str = "tropical"
    house_system: str
    house_system_name: str
    source: str
    approximate: bool = False
    offset_source: str
    julian_day: float
    utc: str


class ChartResponse(BaseModel):
    chart_id: str
    meta: MetaOut
    location: LocationOut
    angles: Dict[str, float]
    houses: List[HouseOut]
    bodies: List[BodyOut]
    aspects: List[AspectOut]
    record: Dict[str, Any]


class HouseSystemOut(BaseModel):
    code: str
    name: str
    analytic: bool
