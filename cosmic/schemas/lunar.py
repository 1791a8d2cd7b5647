from pydantic import BaseModel
from typing import List, Dict, Literal

PhaseName = Literal[
    "new_moon", "waxing_crescent", "first_quarter", "waxing_gibbous",
    "full_moon", "waning_gibbous", "last_quarter", "waning_crescent",
]


class LunarPhaseOut(BaseModel):
    date: str
    phase: PhaseName
    phase_name: str
    symbol: str
    illumination: int
    moon_sign: str
    moon_longitude: float
    wellness: Dict[str, str]
    sign_influence: Dict[str, str]
    void_of_course: bool = False
    keywords: List[str] = []


class LunarCalendarResponse(BaseModel):
    start_date: str
    days: int
    phases: List[LunarPhaseOut]


class NextPhaseResponse(BaseModel):
    phase: PhaseName
    date: str
    details: LunarPhaseOut


class LunarWellnessResponse(BaseModel):
    lunar_data: LunarPhaseOut
    personalized_tip: str
    compatibility: Literal["high", "medium", "low"]
    focus_area: str
