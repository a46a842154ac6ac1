from .charts import (
    AspectOut,
    BirthChartRequest,
    BodyOut,
    ChartResponse,
    HouseOut,
    HouseSystemOut,
    LocationOut,
    MetaOut,
)
