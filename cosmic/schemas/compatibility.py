from pydantic import BaseModel
from typing import List


class SynAspect(BaseModel):
    person1_body: str
    person2_body: str
    kind: str
    angle: float
    orb: float
    applying: bool
    interpretation: str


class CompatibilityScores(BaseModel):
    overall: int
    emotional: int
    communication: int
    passion: int


class SynastryResponse(BaseModel):
    aspects: List[SynAspect]
    compatibility: CompatibilityScores
