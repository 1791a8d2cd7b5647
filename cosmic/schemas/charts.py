from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Dict, Any

Accuracy = Literal["exact", "approximate", "unknown"]


class BirthChartInput(BaseModel):
    birth_date: str  # YYYY-MM-DD
    birth_time: Optional[str] = None  # HH:MM
    birth_timezone: Optional[str] = None  # IANA name, UTC when omitted
    birth_time_accuracy: Optional[Accuracy] = None
    birth_city: Optional[str] = None
    birth_state: Optional[str] = None
    birth_country: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)


class PositionOut(BaseModel):
    body: str
    name: str
    longitude: float
    latitude: float = 0.0
    speed: Optional[float] = None
    retrograde: bool = False
    sign: str
    sign_degree: float
    precision: str
    formatted: str
    house: Optional[int] = None
    interpretation: Optional[str] = None


class HouseOut(BaseModel):
    number: int
    cusp: float
    sign: str
    meaning: Dict[str, Any]


class AspectOut(BaseModel):
    body1: str
    body2: str
    kind: str
    angle: float
    orb: float
    applying: bool
    interpretation: str


class LocationOut(BaseModel):
    birth_date: str
    birth_time: Optional[str] = None
    birth_timezone: Optional[str] = None
    birth_time_accuracy: Accuracy
    birth_city: str
    birth_state: Optional[str] = None
    birth_country: str
    latitude: float
    longitude: float


class ChartMeta(BaseModel):
    engine: str = "cosmic-wellness-engine"
    engine_version: str
    calculation_version: str
    house_system: Optional[str] = None
    calculated_at: str
    warnings: Optional[List[str]] = None


class BirthChartOut(BaseModel):
    user_id: int
    sun_sign: str
    moon_sign: str
    rising_sign: Optional[str] = None
    positions: Dict[str, PositionOut]
    houses: Optional[List[HouseOut]] = None
    ascendant: Optional[float] = None
    midheaven: Optional[float] = None
    aspects: List[AspectOut]
    element_balance: Dict[str, int]
    modality_balance: Dict[str, int]
    dominant_bodies: List[str]
    location: LocationOut
    meta: ChartMeta


class PositionsResponse(BaseModel):
    date: str
    bodies: List[PositionOut]
