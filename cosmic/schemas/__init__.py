from .charts import BirthChartInput, BirthChartOut, PositionOut, HouseOut, AspectOut, ChartMeta, PositionsResponse

from .transits import TransitsResponse, TransitSnapshotOut
from .compatibility import SynastryResponse, CompatibilityScores

from .lunar import (
    LunarPhaseOut,
    LunarCalendarResponse,
    NextPhaseResponse,
    LunarWellnessResponse,
)
