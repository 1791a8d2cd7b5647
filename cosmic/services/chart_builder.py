"""Natal chart assembly: validation, computation, derived statistics and views."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..errors import (
    ChartNotFound,
    InvalidDateFormat,
    InvalidLocation,
    InvalidTimezone,
    MissingLocation,
)
from . import ephem, houses as houses_svc
from .aspects import find_aspects
from .chart_store import ChartStore, ProfileStore
from .constants import ELEMENTS, MODALITIES, format_degree_as_sign, sign_name_from_lon
from .interpretations import HOUSE_MEANINGS, interpret_aspect, interpret_position
from .models import Aspect, BirthChart, BirthLocation, CelestialPosition

logger = logging.getLogger(__name__)

CALCULATION_VERSION = "2.0"
ACCURACIES = ("exact", "approximate", "unknown")
SUN_BONUS = 3
MOON_BONUS = 2
TIGHT_ORB = 2.0

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")


def parse_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` into a date."""

    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        raise InvalidDateFormat("Birth date must be in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidDateFormat(f"Invalid calendar date: {value}") from exc


def parse_time(value: str) -> Tuple[int, int]:
    """Parse ``HH:MM`` into hour and minute; a valid seconds field is ignored."""

    m = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if not m:
        raise InvalidDateFormat("Birth time must be in HH:MM format")
    hour, minute = int(m.group(1)), int(m.group(2))
    second = int(m.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        raise InvalidDateFormat(f"Invalid clock time: {value}")
    return hour, minute


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text(data: Mapping[str, Any], field: str) -> Optional[str]:
    value = data.get(field)
    if _blank(value):
        return None
    if not isinstance(value, str):
        raise InvalidLocation(f"{field} must be a string")
    return value.strip()


def _coordinate(data: Mapping[str, Any], field: str, limit: float) -> float:
    value = data.get(field)
    if isinstance(value, bool):
        raise InvalidLocation(f"{field} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidLocation(f"{field} must be a number") from exc
    if not -limit <= number <= limit:
        raise InvalidLocation(f"{field} must be between -{limit:g} and {limit:g}")
    return number


def build_location(user_id: int, data: Mapping[str, Any]) -> BirthLocation:
    """Validate raw birth input and return the location record it describes."""

    birth_date = parse_date(data.get("birth_date"))
    birth_time = data.get("birth_time") or None
    if birth_time is not None:
        parse_time(birth_time)

    for field in ("birth_city", "birth_country", "latitude", "longitude"):
        if _blank(data.get(field)):
            raise MissingLocation(f"{field} is required")

    accuracy = data.get("birth_time_accuracy") or ("exact" if birth_time else "unknown")
    if accuracy not in ACCURACIES:
        raise InvalidDateFormat(f"birth_time_accuracy must be one of {', '.join(ACCURACIES)}")

    timezone_name = data.get("birth_timezone") or None
    if timezone_name is not None and not isinstance(timezone_name, str):
        raise InvalidTimezone("birth_timezone must be an IANA zone name")

    return BirthLocation(
        user_id=user_id,
        birth_date=birth_date,
        birth_time=birth_time,
        birth_timezone=timezone_name,
        birth_time_accuracy=accuracy,
        birth_city=_text(data, "birth_city"),
        birth_state=_text(data, "birth_state"),
        birth_country=_text(data, "birth_country"),
        latitude=_coordinate(data, "latitude", 90.0),
        longitude=_coordinate(data, "longitude", 180.0),
    )


def birth_instant(location: BirthLocation) -> datetime:
    """UTC instant of birth; noon local when the time is not given."""

    hour, minute = parse_time(location.birth_time) if location.birth_time else (12, 0)
    return ephem.to_utc(location.birth_date, hour, minute, location.birth_timezone)


def element_balance(positions: Mapping[str, CelestialPosition]) -> Dict[str, int]:
    balance = {element: 0 for element in ELEMENTS}
    for pos in positions.values():
        for element, signs in ELEMENTS.items():
            if pos.sign in signs:
                balance[element] += 1
    return balance


def modality_balance(positions: Mapping[str, CelestialPosition]) -> Dict[str, int]:
    balance = {modality: 0 for modality in MODALITIES}
    for pos in positions.values():
        for modality, signs in MODALITIES.items():
            if pos.sign in signs:
                balance[modality] += 1
    return balance


def dominant_bodies(
    positions: Mapping[str, CelestialPosition], aspects: Sequence[Aspect], top: int = 3
) -> List[str]:
    """Rank bodies by aspect connections plus fixed luminary weight."""

    scores = {name: 0 for name in positions}
    for asp in aspects:
        bonus = 2 if asp.orb < TIGHT_ORB else 1
        scores[asp.body1] += bonus
        scores[asp.body2] += bonus
    if "sun" in scores:
        scores["sun"] += SUN_BONUS
    if "moon" in scores:
        scores["moon"] += MOON_BONUS
    ranked = sorted(scores.items(), key=lambda kv: -kv[1])
    return [name for name, _ in ranked[:top]]


def build_chart(
    location: BirthLocation,
    house_system: Optional[str] = None,
    calculated_at: Optional[datetime] = None,
) -> BirthChart:
    """Compute the complete natal chart for a validated birth location."""

    jd = ephem.datetime_to_jd(birth_instant(location))
    positions = ephem.positions_ecliptic(jd)

    cusps, asc, mc, system_name = None, None, None, None
    if location.time_known:
        hs = houses_svc.houses(jd, location.latitude, location.longitude, system=house_system)
        cusps, asc, mc, system_name = tuple(hs["cusps"]), hs["asc"], hs["mc"], hs["system"]

    aspects = find_aspects(positions)

    return BirthChart(
        user_id=location.user_id,
        sun_sign=positions["sun"].sign,
        moon_sign=positions["moon"].sign,
        rising_sign=sign_name_from_lon(asc) if asc is not None else None,
        positions=positions,
        houses=cusps,
        ascendant=asc,
        midheaven=mc,
        aspects=tuple(aspects),
        element_balance=element_balance(positions),
        modality_balance=modality_balance(positions),
        dominant_bodies=tuple(dominant_bodies(positions, aspects)),
        location=location,
        house_system=system_name,
        calculated_at=calculated_at or datetime.now(timezone.utc),
        calculation_version=CALCULATION_VERSION,
    )


async def create_or_update_chart(
    user_id: int,
    data: Mapping[str, Any],
    charts: ChartStore,
    profiles: ProfileStore,
    house_system: Optional[str] = None,
) -> BirthChart:
    """Validate, compute and upsert a user's natal chart.

    The chart is assembled completely before anything is written, so a
    validation failure leaves stored data untouched. The user's profile sign
    is set to the computed Sun sign.
    """

    logger.info("Creating birth chart for user %s", user_id)
    location = build_location(user_id, data)
    chart = build_chart(location, house_system=house_system)

    await charts.upsert_location(location)
    await charts.upsert_chart(chart)
    await profiles.update_profile(user_id, chart.sun_sign, location.birth_date.isoformat())
    return chart


async def get_birth_chart(user_id: int, charts: ChartStore) -> BirthChart:
    chart = await charts.get_chart(user_id)
    if chart is None:
        raise ChartNotFound(f"Birth chart not found for user {user_id}")
    return chart


def position_view(body: str, pos: CelestialPosition, cusps: Optional[Sequence[float]] = None) -> Dict[str, Any]:
    out = pos.to_dict()
    out.update(
        body=body,
        name=ephem.BODIES[body]["name"],
        formatted=format_degree_as_sign(pos.longitude),
        house=houses_svc.house_of(pos.longitude, list(cusps)) if cusps else None,
        interpretation=interpret_position(body, pos),
    )
    return out


def aspect_view(asp: Aspect) -> Dict[str, Any]:
    return {
        "body1": asp.body1,
        "body2": asp.body2,
        "kind": asp.kind,
        "angle": asp.angle,
        "orb": asp.orb,
        "applying": asp.applying,
        "interpretation": interpret_aspect(asp),
    }


def chart_view(chart: BirthChart) -> Dict[str, Any]:
    """Interpretation-annotated representation of a stored chart."""

    houses_out = None
    if chart.houses is not None:
        houses_out = [
            {
                "number": idx + 1,
                "cusp": cusp,
                "sign": sign_name_from_lon(cusp),
                "meaning": HOUSE_MEANINGS[idx],
            }
            for idx, cusp in enumerate(chart.houses)
        ]

    warnings = []
    if chart.houses is None:
        warnings.append("Birth time unknown; houses, ascendant and midheaven were not computed.")

    loc = chart.location
    return {
        "user_id": chart.user_id,
        "sun_sign": chart.sun_sign,
        "moon_sign": chart.moon_sign,
        "rising_sign": chart.rising_sign,
        "positions": {
            body: position_view(body, pos, chart.houses) for body, pos in chart.positions.items()
        },
        "houses": houses_out,
        "ascendant": chart.ascendant,
        "midheaven": chart.midheaven,
        "aspects": [aspect_view(a) for a in chart.aspects],
        "element_balance": dict(chart.element_balance),
        "modality_balance": dict(chart.modality_balance),
        "dominant_bodies": list(chart.dominant_bodies),
        "location": {
            "birth_date": loc.birth_date.isoformat(),
            "birth_time": loc.birth_time,
            "birth_timezone": loc.birth_timezone,
            "birth_time_accuracy": loc.birth_time_accuracy,
            "birth_city": loc.birth_city,
            "birth_state": loc.birth_state,
            "birth_country": loc.birth_country,
            "latitude": loc.latitude,
            "longitude": loc.longitude,
        },
        "meta": {
            "engine_version": ephem.ENGINE_VERSION,
            "calculation_version": chart.calculation_version,
            "house_system": chart.house_system,
            "calculated_at": chart.calculated_at.isoformat(),
            "warnings": warnings or None,
        },
    }
