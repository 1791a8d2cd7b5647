"""Value types shared by the chart, transit, synastry and lunar services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Precision(str, Enum):
    """How far a body's position can be trusted for interpretation."""

    PRECISE = "precise"
    APPROXIMATE = "approximate"


@dataclass(frozen=True)
class CelestialPosition:
    longitude: float
    sign: str
    sign_degree: float
    speed: Optional[float] = None
    retrograde: bool = False
    latitude: float = 0.0
    precision: Precision = Precision.PRECISE

    def to_dict(self) -> dict:
        return {
            "longitude": self.longitude,
            "latitude": self.latitude,
            "speed": self.speed,
            "retrograde": self.retrograde,
            "sign": self.sign,
            "sign_degree": self.sign_degree,
            "precision": self.precision.value,
        }


@dataclass(frozen=True)
class AspectKind:
    name: str
    angle: float
    max_orb: float
    symbol: str
    display_name: str


@dataclass(frozen=True)
class Aspect:
    body1: str
    body2: str
    kind: str
    angle: float
    orb: float
    applying: bool


@dataclass(frozen=True)
class BirthLocation:
    user_id: int
    birth_date: date
    birth_time: Optional[str]
    birth_timezone: Optional[str]
    birth_time_accuracy: str
    birth_city: str
    birth_state: Optional[str]
    birth_country: str
    latitude: float
    longitude: float

    @property
    def time_known(self) -> bool:
        return bool(self.birth_time) and self.birth_time_accuracy != "unknown"


@dataclass(frozen=True)
class BirthChart:
    user_id: int
    sun_sign: str
    moon_sign: str
    rising_sign: Optional[str]
    positions: Dict[str, CelestialPosition]
    houses: Optional[Tuple[float, ...]]
    ascendant: Optional[float]
    midheaven: Optional[float]
    aspects: Tuple[Aspect, ...]
    element_balance: Dict[str, int]
    modality_balance: Dict[str, int]
    dominant_bodies: Tuple[str, ...]
    location: BirthLocation
    house_system: Optional[str]
    calculated_at: datetime
    calculation_version: str = "2.0"


@dataclass(frozen=True)
class TransitSnapshot:
    body: str
    current: CelestialPosition
    natal: CelestialPosition
    aspect: Optional[Aspect] = None


@dataclass(frozen=True)
class SynastryResult:
    aspects: Tuple[Aspect, ...]
    overall: int
    emotional: int
    communication: int
    passion: int


@dataclass(frozen=True)
class LunarPhaseData:
    date: date
    phase: str
    phase_name: str
    symbol: str
    illumination: int
    moon_sign: str
    moon_longitude: float
    wellness: Dict[str, str]
    sign_influence: Dict[str, str]
    void_of_course: bool = False
    keywords: List[str] = field(default_factory=list)
