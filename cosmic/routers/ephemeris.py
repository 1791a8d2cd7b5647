from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter

from ..schemas import PositionsResponse
from ..services import ephem
from ..services.chart_builder import position_view

router = APIRouter(prefix="/v2/ephemeris", tags=["ephemeris"])


def _positions(at: datetime) -> PositionsResponse:
    bodies = [position_view(name, pos) for name, pos in ephem.positions_at(at).items()]
    return PositionsResponse(date=at.isoformat(), bodies=bodies)


@router.get("/current", response_model=PositionsResponse)
def current_positions(date: Optional[str] = None):
    at = ephem.parse_instant(date) if date else datetime.now(timezone.utc)
    return _positions(at)


@router.get("/positions/{date}", response_model=PositionsResponse)
def positions_for_date(date: str):
    return _positions(ephem.parse_instant(date))
