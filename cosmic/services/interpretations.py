"""Interpretation text for bodies, houses, aspects, transits and synastry."""

from __future__ import annotations

from typing import Dict, List

from .aspects import ASPECT_KINDS
from .constants import display_sign
from .ephem import BODIES
from .models import Aspect, CelestialPosition, Precision

PLANET_MEANINGS: Dict[str, Dict[str, object]] = {
    "sun": {
        "represents": "Your core identity, ego, and life purpose",
        "keywords": ["identity", "vitality", "self-expression", "will"],
        "sign_phrase": "Your essential self expresses through {sign} qualities",
    },
    "moon": {
        "represents": "Your emotions, instincts, and inner self",
        "keywords": ["emotions", "intuition", "nurturing", "habits"],
        "sign_phrase": "You process emotions and find comfort through {sign} energy",
    },
    "mercury": {
        "represents": "Your communication style and thought processes",
        "keywords": ["communication", "thinking", "learning", "curiosity"],
        "sign_phrase": "Your mind works and communicates in a {sign} manner",
    },
    "venus": {
        "represents": "Your love nature, values, and aesthetic sense",
        "keywords": ["love", "beauty", "values", "pleasure", "attraction"],
        "sign_phrase": "You express love and appreciate beauty through {sign} ways",
    },
    "mars": {
        "represents": "Your drive, energy, and how you take action",
        "keywords": ["action", "desire", "courage", "assertion", "energy"],
        "sign_phrase": "You take action and assert yourself with {sign} energy",
    },
    "jupiter": {
        "represents": "Your expansion, growth, and good fortune",
        "keywords": ["growth", "luck", "wisdom", "abundance", "optimism"],
        "sign_phrase": "You find expansion and meaning through {sign} pursuits",
    },
    "saturn": {
        "represents": "Your discipline, challenges, and life lessons",
        "keywords": ["discipline", "responsibility", "structure", "karma"],
        "sign_phrase": "Your lessons and mastery develop through {sign} themes",
    },
    "uranus": {
        "represents": "Your individuality, innovation, and sudden change",
        "keywords": ["revolution", "freedom", "originality", "awakening"],
        "sign_phrase": "You express uniqueness and rebel through {sign} areas",
    },
    "neptune": {
        "represents": "Your imagination, spirituality, and transcendence",
        "keywords": ["dreams", "spirituality", "illusion", "compassion"],
        "sign_phrase": "Your spiritual and creative nature flows through {sign}",
    },
    "pluto": {
        "represents": "Your transformation, power, and deep psychology",
        "keywords": ["transformation", "power", "rebirth", "intensity"],
        "sign_phrase": "Deep transformation occurs through {sign} experiences",
    },
    "north_node": {
        "represents": "Your soul's purpose and life direction",
        "keywords": ["destiny", "growth direction", "life purpose", "evolution"],
        "sign_phrase": "Your soul evolves by developing {sign} qualities",
    },
    "chiron": {
        "represents": "Your deepest wound and healing gifts",
        "keywords": ["wound", "healing", "teaching", "wisdom through pain"],
        "sign_phrase": "Healing and teaching come through {sign} themes",
    },
}

HOUSE_MEANINGS: List[Dict[str, object]] = [
    {"house": 1, "name": "Self", "keywords": ["identity", "appearance", "first impressions", "beginnings"]},
    {"house": 2, "name": "Values", "keywords": ["money", "possessions", "self-worth", "resources"]},
    {"house": 3, "name": "Communication", "keywords": ["siblings", "short trips", "learning", "neighborhood"]},
    {"house": 4, "name": "Home", "keywords": ["family", "roots", "mother", "emotional foundation"]},
    {"house": 5, "name": "Creativity", "keywords": ["romance", "children", "pleasure", "self-expression"]},
    {"house": 6, "name": "Health", "keywords": ["work", "service", "daily routines", "wellness"]},
    {"house": 7, "name": "Partnership", "keywords": ["marriage", "contracts", "open enemies", "others"]},
    {"house": 8, "name": "Transformation", "keywords": ["death", "rebirth", "shared resources", "intimacy"]},
    {"house": 9, "name": "Philosophy", "keywords": ["travel", "higher learning", "beliefs", "expansion"]},
    {"house": 10, "name": "Career", "keywords": ["public image", "achievements", "father", "authority"]},
    {"house": 11, "name": "Community", "keywords": ["friends", "groups", "hopes", "social causes"]},
    {"house": 12, "name": "Spirituality", "keywords": ["subconscious", "secrets", "karma", "endings"]},
]

APPROXIMATE_NOTE = " (position is approximate, so read sign-boundary placements loosely)"


def _name(body: str) -> str:
    return BODIES[body]["name"]


def _keyword(body: str, idx: int = 0) -> str:
    return PLANET_MEANINGS[body]["keywords"][idx]


def interpret_position(body: str, pos: CelestialPosition) -> str:
    text = PLANET_MEANINGS[body]["sign_phrase"].format(sign=display_sign(pos.sign))
    if pos.precision is Precision.APPROXIMATE:
        text += APPROXIMATE_NOTE
    return text


def interpret_aspect(aspect: Aspect) -> str:
    p1, p2 = _name(aspect.body1), _name(aspect.body2)
    kind = ASPECT_KINDS[aspect.kind].display_name
    k1, k2 = _keyword(aspect.body1), _keyword(aspect.body2)

    if aspect.kind in ("trine", "sextile"):
        return (
            f"{p1} and {p2} work together harmoniously through the {kind}. "
            f"This creates natural flow between your {k1} and {k2}."
        )
    if aspect.kind in ("square", "opposition"):
        return (
            f"{p1} and {p2} create tension through the {kind}. "
            f"This dynamic pushes growth between your {k1} and {k2}."
        )
    return (
        f"{p1} and {p2} merge their energies in {kind}. "
        f"Your {k1} and {k2} are deeply connected."
    )


def interpret_transit(body: str, aspect: Aspect) -> str:
    name = _name(body)
    kind = ASPECT_KINDS[aspect.kind].display_name.lower()
    themes = " and ".join(PLANET_MEANINGS[body]["keywords"][:2])
    return f"Transit {name} {kind} your natal {name}. This activates themes of {themes}."


def interpret_synastry(aspect: Aspect) -> str:
    kind = ASPECT_KINDS[aspect.kind].display_name.lower()
    return f"Person 1's {_name(aspect.body1)} {kind} Person 2's {_name(aspect.body2)}."
