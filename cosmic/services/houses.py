from __future__ import annotations

import math
import os
from typing import Dict, List, Protocol

from . import ephem
from .constants import normalize_degrees


class HouseSystem(Protocol):
    name: str

    def compute_cusps(self, ascendant: float, latitude: float, obliquity: float) -> List[float]:
        ...


class WholeSignHouses:
    """Cusp 1 is the start of the rising sign; each later cusp is 30° on."""

    name = "whole_sign"

    def compute_cusps(self, ascendant: float, latitude: float, obliquity: float) -> List[float]:
        start = math.floor(normalize_degrees(ascendant) / 30.0) * 30.0
        return [normalize_degrees(start + i * 30.0) for i in range(12)]


class EqualHouses:
    """Cusp 1 is the Ascendant itself; each later cusp is 30° on."""

    name = "equal"

    def compute_cusps(self, ascendant: float, latitude: float, obliquity: float) -> List[float]:
        return [normalize_degrees(ascendant + i * 30.0) for i in range(12)]


HOUSE_SYSTEMS: Dict[str, HouseSystem] = {
    "whole_sign": WholeSignHouses(),
    "equal": EqualHouses(),
}


def get_house_system(name: str | None = None) -> HouseSystem:
    key = (name or os.getenv("HOUSE_SYSTEM") or "whole_sign").strip().lower().replace("-", "_")
    return HOUSE_SYSTEMS.get(key, HOUSE_SYSTEMS["whole_sign"])


def greenwich_sidereal_time(jd_utc: float) -> float:
    T = ephem.julian_centuries(jd_utc)
    gmst = (
        280.46061837
        + 360.98564736629 * (jd_utc - ephem.J2000)
        + 0.000387933 * T * T
        - T * T * T / 38710000.0
    )
    return normalize_degrees(gmst)


def local_sidereal_time(jd_utc: float, lon: float) -> float:
    return normalize_degrees(greenwich_sidereal_time(jd_utc) + lon)


def obliquity(jd_utc: float) -> float:
    return 23.439291 - 0.0130042 * ephem.julian_centuries(jd_utc)


def angles(jd_utc: float, lat: float, lon: float) -> Dict[str, float]:
    """Ascendant and Midheaven for a geographic position."""

    lst = math.radians(local_sidereal_time(jd_utc, lon))
    eps = math.radians(obliquity(jd_utc))
    mc = math.degrees(math.atan2(math.sin(lst), math.cos(lst) * math.cos(eps)))
    # eastern horizon point; the plain arctangent form lands on the Descendant
    asc = math.degrees(math.atan2(
        math.cos(lst),
        -(math.sin(lst) * math.cos(eps) + math.tan(math.radians(lat)) * math.sin(eps)),
    ))
    return {"asc": normalize_degrees(asc), "mc": normalize_degrees(mc)}


def houses(jd_utc: float, lat: float, lon: float, system: HouseSystem | str | None = None):
    hs = system if system is not None and not isinstance(system, str) else get_house_system(system)
    ang = angles(jd_utc, lat, lon)
    return {
        "asc": ang["asc"],
        "mc": ang["mc"],
        "cusps": hs.compute_cusps(ang["asc"], lat, obliquity(jd_utc)),
        "system": hs.name,
    }


def house_of(lon: float, cusps: list[float]) -> int:
    # shift all longitudes so cusp 1 becomes 0°
    shift = cusps[0]

    def norm(x):
        return (x - shift) % 360.0

    nlon = norm(lon)
    ncusps = [norm(c) for c in cusps] + [360.0]
    for i in range(12):
        if ncusps[i] <= nlon < ncusps[i + 1]:
            return i + 1
    return 12
