from pydantic import BaseModel
from typing import List, Optional, Dict, Any


class TransitAspect(BaseModel):
    kind: str
    angle: float
    orb: float
    applying: bool
    interpretation: str


class TransitSnapshotOut(BaseModel):
    body: str
    name: str
    current: Dict[str, Any]
    natal: Dict[str, Any]
    aspect: Optional[TransitAspect] = None


class TransitsResponse(BaseModel):
    current_date: str
    transits: List[TransitSnapshotOut]
    significant: List[TransitSnapshotOut]
