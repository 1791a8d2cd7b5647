"""Mean-element ephemeris used by the chart, transit and lunar services.

Positions are tropical ecliptic longitudes computed from low-order series and
two-body orbits. They are good to a few arc-minutes for the Sun, well under a
degree for the Moon and are heliocentric for Mercury through Pluto. This is
interpretation-grade, not navigation-grade.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Dict, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import InvalidDateFormat, InvalidTimezone
from .constants import degrees_to_sign, normalize_degrees
from .models import CelestialPosition, Precision

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0

ENGINE_VERSION = "mean-elements-2.0"

BODIES: Dict[str, Dict[str, str]] = {
    "sun": {"symbol": "☉", "name": "Sun", "color": "#FFD700"},
    "moon": {"symbol": "☽", "name": "Moon", "color": "#C0C0C0"},
    "mercury": {"symbol": "☿", "name": "Mercury", "color": "#B5B5B5"},
    "venus": {"symbol": "♀", "name": "Venus", "color": "#FFB6C1"},
    "mars": {"symbol": "♂", "name": "Mars", "color": "#FF4500"},
    "jupiter": {"symbol": "♃", "name": "Jupiter", "color": "#FFA500"},
    "saturn": {"symbol": "♄", "name": "Saturn", "color": "#8B8970"},
    "uranus": {"symbol": "♅", "name": "Uranus", "color": "#40E0D0"},
    "neptune": {"symbol": "♆", "name": "Neptune", "color": "#1E90FF"},
    "pluto": {"symbol": "♇", "name": "Pluto", "color": "#8B0000"},
    "north_node": {"symbol": "☊", "name": "North Node", "color": "#9370DB"},
    "chiron": {"symbol": "⚷", "name": "Chiron", "color": "#808000"},
}

APPROXIMATE_BODIES = {"uranus", "neptune", "pluto", "chiron"}

# Mean orbital elements at J2000: semi-major axis (AU), eccentricity,
# inclination (deg), mean longitude and perihelion longitude as polynomials
# in Julian centuries, and sidereal period (days).
ORBITAL_ELEMENTS: Dict[str, Dict[str, object]] = {
    "mercury": {"a": 0.387, "e": 0.206, "i": 7.0,
                "L": (252.25084, 149472.67411, 0.0), "w": (77.45645, 0.15957, 0.0),
                "period": 87.97},
    "venus": {"a": 0.723, "e": 0.007, "i": 3.4,
              "L": (181.97973, 58517.81539, 0.0), "w": (131.60246, 0.0, 0.0),
              "period": 224.7},
    "mars": {"a": 1.524, "e": 0.093, "i": 1.9,
             "L": (355.45332, 19140.30268, 0.0), "w": (336.04084, 0.46002, 0.0),
             "period": 686.98},
    "jupiter": {"a": 5.203, "e": 0.048, "i": 1.3,
                "L": (34.40438, 3034.74612, 0.0), "w": (14.72847, 0.21253, 0.0),
                "period": 4332.59},
    "saturn": {"a": 9.537, "e": 0.054, "i": 2.5,
               "L": (49.95424, 1222.11379, 0.0), "w": (92.59887, 0.54626, 0.0),
               "period": 10759.22},
    "uranus": {"a": 19.19, "e": 0.047, "i": 0.8,
               "L": (313.23218, 428.48202, 0.0), "w": (170.95427, 0.40805, 0.0),
               "period": 30688.5},
    "neptune": {"a": 30.07, "e": 0.009, "i": 1.8,
                "L": (304.88003, 218.45945, 0.0), "w": (44.96476, 0.36659, 0.0),
                "period": 60182.0},
    "pluto": {"a": 39.48, "e": 0.249, "i": 17.2,
              "L": (238.92881, 145.20780, 0.0), "w": (224.06676, 0.0, 0.0),
              "period": 90560.0},
}

SUN_SPEED = 0.9856
MOON_SPEED = 13.176
NODE_SPEED = -0.053
CHIRON_SPEED = 0.02


# --- time -----------------------------------------------------------------

def civil_to_julian_day(year: int, month: int, day: int, hour: float = 0.0) -> float:
    """Julian Day for a Gregorian UTC date and fractional hour."""

    y, m = year, month
    if m <= 2:
        y -= 1
        m += 12
    a = math.floor(y / 100)
    b = 2 - a + math.floor(a / 4)
    return (
        math.floor(365.25 * (y + 4716))
        + math.floor(30.6001 * (m + 1))
        + day
        + hour / 24.0
        + b
        - 1524.5
    )


def julian_centuries(jd: float) -> float:
    return (jd - J2000) / DAYS_PER_CENTURY


def datetime_to_jd(dt: datetime) -> float:
    """Julian Day for a datetime; naive values are taken as UTC."""

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    hour = dt.hour + dt.minute / 60 + dt.second / 3600 + dt.microsecond / 3_600_000_000
    return civil_to_julian_day(dt.year, dt.month, dt.day, hour)


def date_to_jd(d: date) -> float:
    """Julian Day at 00:00 UTC of a calendar date."""

    if isinstance(d, datetime):
        return datetime_to_jd(d)
    return civil_to_julian_day(d.year, d.month, d.day, 0.0)


def parse_instant(value: str) -> datetime:
    """Parse ``YYYY-MM-DD`` (midnight UTC) or an ISO 8601 date-time (UTC when naive)."""

    try:
        if len(value.strip()) == 10:
            d = date.fromisoformat(value.strip())
            return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError) as exc:
        raise InvalidDateFormat("Invalid date format. Use YYYY-MM-DD.") from exc
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def to_utc(date_value: date, hour: int, minute: int, tz: str | None) -> datetime:
    """Interpret a wall-clock time in ``tz`` (UTC when None) and return it in UTC."""

    if not tz:
        return datetime(date_value.year, date_value.month, date_value.day, hour, minute, tzinfo=timezone.utc)
    try:
        zone = ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezone(f"Unknown timezone: {tz}") from exc
    local = datetime(date_value.year, date_value.month, date_value.day, hour, minute, tzinfo=zone)
    return local.astimezone(timezone.utc)


# --- bodies ---------------------------------------------------------------

def _position(body: str, lon: float, speed: float, retro: bool = False) -> CelestialPosition:
    lon = normalize_degrees(lon)
    sign, within = degrees_to_sign(lon)
    return CelestialPosition(
        longitude=lon,
        sign=sign,
        sign_degree=within,
        speed=speed,
        retrograde=retro,
        latitude=0.0,
        precision=Precision.APPROXIMATE if body in APPROXIMATE_BODIES else Precision.PRECISE,
    )


def sun_position(jd: float) -> CelestialPosition:
    T = julian_centuries(jd)
    L0 = 280.46646 + 36000.76983 * T + 0.0003032 * T * T
    M = math.radians(357.52911 + 35999.05029 * T - 0.0001537 * T * T)
    # equation of centre
    C = (
        (1.914602 - 0.004817 * T - 0.000014 * T * T) * math.sin(M)
        + (0.019993 - 0.000101 * T) * math.sin(2 * M)
        + 0.000289 * math.sin(3 * M)
    )
    return _position("sun", L0 + C, SUN_SPEED)


def moon_position(jd: float) -> CelestialPosition:
    T = julian_centuries(jd)
    L = 218.3164477 + 481267.88123421 * T - 0.0015786 * T * T
    D = math.radians(297.8501921 + 445267.1114034 * T - 0.0018819 * T * T)
    Ms = math.radians(357.5291092 + 35999.0502909 * T - 0.0001536 * T * T)
    Mm = math.radians(134.9633964 + 477198.8675055 * T + 0.0087414 * T * T)
    F = math.radians(93.272095 + 483202.0175233 * T - 0.0036539 * T * T)
    lon = (
        L
        + 6.289 * math.sin(Mm)
        + 1.274 * math.sin(2 * D - Mm)
        + 0.658 * math.sin(2 * D)
        + 0.214 * math.sin(2 * Mm)
        - 0.186 * math.sin(Ms)
        - 0.114 * math.sin(2 * F)
    )
    return _position("moon", lon, MOON_SPEED)


def _poly(coeffs: Tuple[float, float, float], T: float) -> float:
    return coeffs[0] + coeffs[1] * T + coeffs[2] * T * T


def planet_position(body: str, jd: float) -> CelestialPosition:
    """Heliocentric ecliptic longitude from a one-step Kepler solution."""

    el = ORBITAL_ELEMENTS[body]
    e = float(el["e"])
    T = julian_centuries(jd)
    L = _poly(el["L"], T)
    w = _poly(el["w"], T)
    M = normalize_degrees(L - w)
    Mrad = math.radians(M)
    # single-step eccentric anomaly, no iteration
    E = M + math.degrees(e * math.sin(Mrad) * (1 + e * math.cos(Mrad)))
    Erad = math.radians(E)
    v = math.degrees(2 * math.atan2(
        math.sqrt(1 + e) * math.sin(Erad / 2),
        math.sqrt(1 - e) * math.cos(Erad / 2),
    ))
    return _position(body, v + w, 360.0 / float(el["period"]))


def north_node_position(jd: float) -> CelestialPosition:
    T = julian_centuries(jd)
    return _position("north_node", 125.04452 - 1934.136261 * T, NODE_SPEED, retro=True)


def chiron_position(jd: float) -> CelestialPosition:
    # Linear mean-motion fit; not an orbit solution.
    T = julian_centuries(jd)
    return _position("chiron", 209.39 + 7.1466 * T * 365.25, CHIRON_SPEED)


def positions_ecliptic(jd: float) -> Dict[str, CelestialPosition]:
    """Return positions for every tracked body, keyed in ``BODIES`` order."""

    bodies: Dict[str, CelestialPosition] = {
        "sun": sun_position(jd),
        "moon": moon_position(jd),
    }
    for name in ORBITAL_ELEMENTS:
        bodies[name] = planet_position(name, jd)
    bodies["north_node"] = north_node_position(jd)
    bodies["chiron"] = chiron_position(jd)
    return bodies


def positions_at(dt: datetime) -> Dict[str, CelestialPosition]:
    return positions_ecliptic(datetime_to_jd(dt))


def planet_list() -> Dict[str, Dict[str, str]]:
    return {
        key: {**meta, "precision": (Precision.APPROXIMATE if key in APPROXIMATE_BODIES else Precision.PRECISE).value}
        for key, meta in BODIES.items()
    }
