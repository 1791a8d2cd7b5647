from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..errors import AstroEngineError, InvalidDateRange
from ..schemas import LunarCalendarResponse, LunarPhaseOut, LunarWellnessResponse, NextPhaseResponse
from ..services import ephem, lunar
from ..services.chart_builder import parse_date
from ..services.constants import zodiac_sign_from_date

router = APIRouter(prefix="/v2/lunar", tags=["lunar"])


def _today() -> date:
    return datetime.now(timezone.utc).date()


@router.get("/current", response_model=LunarPhaseOut)
def lunar_current():
    return lunar.lunar_view(lunar.lunar_data(_today()))


@router.get("/phase/{date}", response_model=LunarPhaseOut)
def lunar_phase(date: str):
    day = ephem.parse_instant(date).astimezone(timezone.utc).date()
    return lunar.lunar_view(lunar.lunar_data(day))


@router.get("/calendar", response_model=LunarCalendarResponse)
def lunar_calendar(start: Optional[str] = None, days: int = Query(30)):
    try:
        start_date = ephem.parse_instant(start).astimezone(timezone.utc).date() if start else _today()
    except AstroEngineError as exc:
        raise InvalidDateRange("Invalid start date format. Use YYYY-MM-DD.") from exc
    phases = lunar.lunar_calendar(start_date, days)
    return LunarCalendarResponse(
        start_date=start_date.isoformat(),
        days=days,
        phases=[lunar.lunar_view(p) for p in phases],
    )


@router.get("/next/{phase}", response_model=NextPhaseResponse)
def next_phase(phase: str):
    target = lunar.validate_phase(phase)
    found = lunar.find_next_occurrence(target, _today())
    return NextPhaseResponse(
        phase=target,
        date=found.isoformat(),
        details=lunar.lunar_view(lunar.lunar_data(found)),
    )


@router.get("/wellness", response_model=LunarWellnessResponse)
def lunar_wellness(sign: Optional[str] = None, birthdate: Optional[str] = None):
    if sign:
        user_sign = sign.strip().lower()
    elif birthdate:
        user_sign = zodiac_sign_from_date(parse_date(birthdate))
    else:
        user_sign = "aries"
    if not lunar.known_sign(user_sign):
        raise HTTPException(status_code=400, detail="UNKNOWN_SIGN")
    return lunar.lunar_wellness_recommendation(_today(), user_sign)
