"""Moon phase, illumination and lunar wellness guidance.

Phase and illumination come from the mean synodic month counted from a
reference new moon (2000-01-06 14:24 UTC), so they drift from true phase by
up to about half a day. The Moon's sign comes from the ephemeris.
"""

from __future__ import annotations

import math
from dataclasses import asdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Union

from ..errors import InvalidDateRange, InvalidPhaseName
from . import ephem
from .constants import SIGN_ELEMENT, SIGN_NAMES, display_sign
from .models import LunarPhaseData

SYNODIC_MONTH = 29.530588853
KNOWN_NEW_MOON_JD = 2451550.1
SEARCH_LIMIT_DAYS = 30
MAX_CALENDAR_DAYS = 365
VOID_OF_COURSE_DEGREE = 28.0

DateLike = Union[date, datetime]

PHASE_ORDER = [
    "new_moon", "waxing_crescent", "first_quarter", "waxing_gibbous",
    "full_moon", "waning_gibbous", "last_quarter", "waning_crescent",
]

MOON_PHASES: Dict[str, Dict[str, Any]] = {
    "new_moon": {"name": "New Moon", "symbol": "🌑",
                 "keywords": ["new beginnings", "intentions", "planting seeds"]},
    "waxing_crescent": {"name": "Waxing Crescent", "symbol": "🌒",
                        "keywords": ["hope", "intention", "wishes"]},
    "first_quarter": {"name": "First Quarter", "symbol": "🌓",
                      "keywords": ["challenges", "decision", "action"]},
    "waxing_gibbous": {"name": "Waxing Gibbous", "symbol": "🌔",
                       "keywords": ["refine", "adjust", "patience"]},
    "full_moon": {"name": "Full Moon", "symbol": "🌕",
                  "keywords": ["culmination", "harvest", "illumination"]},
    "waning_gibbous": {"name": "Waning Gibbous", "symbol": "🌖",
                       "keywords": ["gratitude", "sharing", "teaching"]},
    "last_quarter": {"name": "Last Quarter", "symbol": "🌗",
                     "keywords": ["release", "forgiveness", "letting go"]},
    "waning_crescent": {"name": "Waning Crescent", "symbol": "🌘",
                        "keywords": ["rest", "surrender", "healing"]},
}

PHASE_WELLNESS: Dict[str, Dict[str, str]] = {
    "new_moon": {
        "energy": "Low to moderate. Honor your body's need for rest and introspection.",
        "fitness": "Gentle movement like yoga, stretching, or walking. Set fitness intentions.",
        "nutrition": "Light, cleansing foods. Good time to start a new eating plan.",
        "mindfulness": "Meditation, journaling intentions, visualizing goals.",
        "sleep": "Extra rest is beneficial. Go to bed early.",
    },
    "waxing_crescent": {
        "energy": "Building slowly. Energy begins to increase.",
        "fitness": "Light cardio, begin new exercise routines gradually.",
        "nutrition": "Nourishing foods that support growth and building.",
        "mindfulness": "Affirmations, hope-focused meditation, wish lists.",
        "sleep": "Maintain regular schedule. Dreams may be vivid.",
    },
    "first_quarter": {
        "energy": "Active energy. Time for decisive action.",
        "fitness": "Push through challenges. Strength training is favored.",
        "nutrition": "Protein-rich foods for muscle building and energy.",
        "mindfulness": "Problem-solving meditation, addressing obstacles.",
        "sleep": "May experience some restlessness. Stay active during day.",
    },
    "waxing_gibbous": {
        "energy": "High and building. Fine-tune your approach.",
        "fitness": "Refine techniques, adjust workout intensity.",
        "nutrition": "Balanced meals, adjust portions as needed.",
        "mindfulness": "Review progress, patience practices.",
        "sleep": "Energy may run high. Ensure adequate wind-down time.",
    },
    "full_moon": {
        "energy": "Peak energy. Emotions may run high.",
        "fitness": "High-intensity workouts, dance, celebration movement.",
        "nutrition": "Hydration is key. Watch for emotional eating.",
        "mindfulness": "Gratitude practices, celebration of achievements.",
        "sleep": "May be harder to sleep. Avoid screens before bed.",
    },
    "waning_gibbous": {
        "energy": "Beginning to decrease. Time for gratitude.",
        "fitness": "Maintain routine, start reducing intensity.",
        "nutrition": "Sharing meals, comfort foods in moderation.",
        "mindfulness": "Gratitude journaling, teaching others.",
        "sleep": "Sleep begins to deepen. Honor tiredness.",
    },
    "last_quarter": {
        "energy": "Decreasing. Focus on release and letting go.",
        "fitness": "Restorative exercises, release tension through movement.",
        "nutrition": "Detox-supporting foods, reduce heavy foods.",
        "mindfulness": "Forgiveness meditation, releasing what doesn't serve you.",
        "sleep": "Deeper sleep cycles. Process and release through dreams.",
    },
    "waning_crescent": {
        "energy": "Lowest point. Honor the need for rest.",
        "fitness": "Gentle stretching, restorative yoga, rest days.",
        "nutrition": "Light, easy-to-digest foods. Fasting may feel natural.",
        "mindfulness": "Quiet contemplation, surrender practices, healing.",
        "sleep": "Maximum rest. Prepare for the new cycle.",
    },
}

MOON_SIGN_INFLUENCES: Dict[str, Dict[str, str]] = {
    "aries": {"quality": "Action-oriented, impulsive, energetic", "body_part": "Head, face",
              "wellness": "Channel energy into vigorous exercise. Address headaches proactively.",
              "avoid": "Rushing, skipping warm-ups, aggressive behavior"},
    "taurus": {"quality": "Stable, sensual, grounded", "body_part": "Throat, neck",
               "wellness": "Indulge in healthy comfort foods. Massage is beneficial.",
               "avoid": "Overindulgence, stubbornness about health changes"},
    "gemini": {"quality": "Curious, communicative, adaptable", "body_part": "Hands, arms, lungs",
               "wellness": "Vary your routine. Breathing exercises are powerful.",
               "avoid": "Nervous energy, scattered focus, shallow breathing"},
    "cancer": {"quality": "Nurturing, intuitive, protective", "body_part": "Chest, stomach",
               "wellness": "Honor emotional needs. Soothing teas and home cooking.",
               "avoid": "Emotional eating, isolation, ignoring gut feelings"},
    "leo": {"quality": "Confident, creative, generous", "body_part": "Heart, spine",
            "wellness": "Heart-healthy activities. Express creativity through movement.",
            "avoid": "Ego-driven decisions, overexertion, ignoring back pain"},
    "virgo": {"quality": "Analytical, helpful, detail-oriented", "body_part": "Digestive system",
              "wellness": "Clean eating, organized routines. Probiotics beneficial.",
              "avoid": "Perfectionism, criticism, neglecting mental health"},
    "libra": {"quality": "Harmonious, diplomatic, aesthetic", "body_part": "Kidneys, lower back",
              "wellness": "Partner workouts, balanced meals. Hydration important.",
              "avoid": "Indecision about health choices, people-pleasing"},
    "scorpio": {"quality": "Intense, transformative, powerful", "body_part": "Reproductive organs",
                "wellness": "Deep emotional work, intense workouts. Detox beneficial.",
                "avoid": "Holding onto emotional toxicity, obsessive behaviors"},
    "sagittarius": {"quality": "Adventurous, optimistic, philosophical", "body_part": "Hips, thighs, liver",
                    "wellness": "Outdoor activities, exploring new fitness. Moderation in indulgence.",
                    "avoid": "Overcommitting, excess, ignoring limits"},
    "capricorn": {"quality": "Disciplined, ambitious, practical", "body_part": "Bones, knees, skin",
                  "wellness": "Structured routines, strength building. Calcium important.",
                  "avoid": "Overworking, ignoring joint health, rigidity"},
    "aquarius": {"quality": "Innovative, humanitarian, independent", "body_part": "Ankles, circulation",
                 "wellness": "Group fitness, unique approaches. Elevate legs regularly.",
                 "avoid": "Detachment from body, irregular schedules, isolation"},
    "pisces": {"quality": "Intuitive, compassionate, dreamy", "body_part": "Feet, lymphatic system",
               "wellness": "Swimming, foot care, energy healing. Honor sensitivity.",
               "avoid": "Escapism, ignoring boundaries, absorbing others' energy"},
}

_MEDIUM_PAIRS = {("fire", "air"), ("air", "fire"), ("earth", "water"), ("water", "earth")}


def _as_date(d: DateLike) -> date:
    return d.date() if isinstance(d, datetime) else d


def phase_position(d: DateLike) -> float:
    """Fraction of the synodic month elapsed at ``d`` (0 = new, 0.5 = full)."""

    jd = ephem.date_to_jd(d)
    return ((jd - KNOWN_NEW_MOON_JD) % SYNODIC_MONTH) / SYNODIC_MONTH


def moon_illumination(d: DateLike) -> int:
    return round((1 - math.cos(2 * math.pi * phase_position(d))) * 50)


def moon_phase(d: DateLike) -> str:
    # eight equal buckets, the first centred on new moon
    shifted = (phase_position(d) + 1 / 16) % 1.0
    return PHASE_ORDER[min(int(shifted * 8), 7)]


def is_void_of_course(d: DateLike) -> bool:
    """Simplified: the Moon sits in the last two degrees of its sign."""

    return ephem.moon_position(ephem.date_to_jd(d)).sign_degree >= VOID_OF_COURSE_DEGREE


def validate_phase(name: str) -> str:
    key = (name or "").strip().lower()
    if key not in MOON_PHASES:
        raise InvalidPhaseName(f"Invalid phase. Valid phases are: {', '.join(PHASE_ORDER)}")
    return key


def lunar_data(d: DateLike) -> LunarPhaseData:
    moon = ephem.moon_position(ephem.date_to_jd(d))
    phase = moon_phase(d)
    info = MOON_PHASES[phase]
    return LunarPhaseData(
        date=_as_date(d),
        phase=phase,
        phase_name=info["name"],
        symbol=info["symbol"],
        illumination=moon_illumination(d),
        moon_sign=moon.sign,
        moon_longitude=moon.longitude,
        wellness=dict(PHASE_WELLNESS[phase]),
        sign_influence={"element": SIGN_ELEMENT[moon.sign], **MOON_SIGN_INFLUENCES[moon.sign]},
        void_of_course=is_void_of_course(d),
        keywords=list(info["keywords"]),
    )


def lunar_calendar(start: date, days: int) -> List[LunarPhaseData]:
    if not isinstance(days, int) or days < 1 or days > MAX_CALENDAR_DAYS:
        raise InvalidDateRange(f"Days must be between 1 and {MAX_CALENDAR_DAYS}.")
    return [lunar_data(start + timedelta(days=i)) for i in range(days)]


def find_next_occurrence(target: str, from_date: DateLike) -> DateLike:
    """First day after ``from_date`` whose phase is ``target``.

    Scans forward one day at a time for at most ``SEARCH_LIMIT_DAYS`` days and
    returns the last scanned day when nothing matches.
    """

    target = validate_phase(target)
    current = from_date
    for _ in range(SEARCH_LIMIT_DAYS):
        current = current + timedelta(days=1)
        if moon_phase(current) == target:
            return current
    return current


def lunar_wellness_recommendation(d: DateLike, user_sign: str) -> Dict[str, Any]:
    data = lunar_data(d)
    user_element = SIGN_ELEMENT[user_sign]
    moon_element = SIGN_ELEMENT[data.moon_sign]

    if user_element == moon_element:
        compatibility = "high"
        focus = data.wellness["fitness"]
    elif (user_element, moon_element) in _MEDIUM_PAIRS:
        compatibility = "medium"
        focus = data.wellness["mindfulness"]
    else:
        compatibility = "low"
        focus = data.wellness["sleep"]

    phase_keyword = MOON_PHASES[data.phase]["keywords"][0]
    sign_quality = MOON_SIGN_INFLUENCES[data.moon_sign]["quality"].split(",")[0]
    tip = (
        f"With the Moon in {display_sign(data.moon_sign)}, embrace {sign_quality.lower()} energy. "
        f"As a {display_sign(user_sign)}, focus on {phase_keyword} while honoring your {user_element} nature."
    )
    return {
        "lunar_data": lunar_view(data),
        "personalized_tip": tip,
        "compatibility": compatibility,
        "focus_area": focus,
    }


def lunar_view(data: LunarPhaseData) -> Dict[str, Any]:
    out = asdict(data)
    out["date"] = data.date.isoformat()
    return out


def known_sign(sign: str) -> bool:
    return sign in SIGN_NAMES
