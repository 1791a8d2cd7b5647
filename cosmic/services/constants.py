from __future__ import annotations

from datetime import date
from typing import Dict, List, Tuple

SIGN_NAMES = [
    "aries", "taurus", "gemini", "cancer", "leo", "virgo",
    "libra", "scorpio", "sagittarius", "capricorn", "aquarius", "pisces",
]

SIGN_SYMBOLS = ["♈", "♉", "♊", "♋", "♌", "♍", "♎", "♏", "♐", "♑", "♒", "♓"]

ELEMENTS: Dict[str, Tuple[str, ...]] = {
    "fire": ("aries", "leo", "sagittarius"),
    "earth": ("taurus", "virgo", "capricorn"),
    "air": ("gemini", "libra", "aquarius"),
    "water": ("cancer", "scorpio", "pisces"),
}

MODALITIES: Dict[str, Tuple[str, ...]] = {
    "cardinal": ("aries", "cancer", "libra", "capricorn"),
    "fixed": ("taurus", "leo", "scorpio", "aquarius"),
    "mutable": ("gemini", "virgo", "sagittarius", "pisces"),
}

SIGN_ELEMENT = {sign: element for element, signs in ELEMENTS.items() for sign in signs}
SIGN_MODALITY = {sign: modality for modality, signs in MODALITIES.items() for sign in signs}

# (month, day) on which each sign begins in the tropical calendar.
_SIGN_START_DATES: List[Tuple[int, int, str]] = [
    (1, 20, "aquarius"),
    (2, 19, "pisces"),
    (3, 21, "aries"),
    (4, 20, "taurus"),
    (5, 21, "gemini"),
    (6, 21, "cancer"),
    (7, 23, "leo"),
    (8, 23, "virgo"),
    (9, 23, "libra"),
    (10, 23, "scorpio"),
    (11, 22, "sagittarius"),
    (12, 22, "capricorn"),
]


def normalize_degrees(x: float) -> float:
    """Wrap an angle into [0, 360)."""
    y = x % 360.0
    # -1e-15 % 360 rounds up to exactly 360.0
    return 0.0 if y >= 360.0 else y


def sign_index_from_lon(lon: float) -> int:
    return int(normalize_degrees(lon) // 30) % 12


def sign_name_from_lon(lon: float) -> str:
    return SIGN_NAMES[sign_index_from_lon(lon)]


def degrees_to_sign(lon: float) -> Tuple[str, float]:
    """Split an ecliptic longitude into ``(sign, degree_within_sign)``."""
    norm = normalize_degrees(lon)
    return SIGN_NAMES[sign_index_from_lon(norm)], norm % 30.0


def display_sign(sign: str) -> str:
    return sign[:1].upper() + sign[1:]


def format_degree_as_sign(lon: float) -> str:
    # 0..360 to "15° Aries 23'"
    sign, within = degrees_to_sign(lon)
    deg = int(within)
    mins = int(round((within - deg) * 60))
    if mins == 60:
        deg, mins = deg + 1, 0
    return f"{deg}° {display_sign(sign)} {mins}'"


def zodiac_sign_from_date(d: date) -> str:
    """Sun sign from the calendar date alone, using the usual tropical date ranges."""
    current = "capricorn"
    for month, day, sign in _SIGN_START_DATES:
        if (d.month, d.day) >= (month, day):
            current = sign
    return current


def sign_list() -> List[dict]:
    return [
        {
            "name": sign,
            "display_name": display_sign(sign),
            "number": idx + 1,
            "start_degree": idx * 30,
            "end_degree": (idx + 1) * 30 - 1,
            "element": SIGN_ELEMENT[sign],
            "modality": SIGN_MODALITY[sign],
            "symbol": SIGN_SYMBOLS[idx],
        }
        for idx, sign in enumerate(SIGN_NAMES)
    ]
