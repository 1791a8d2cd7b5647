from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .models import Aspect, AspectKind, CelestialPosition

ASPECT_KINDS: Dict[str, AspectKind] = {
    "conjunction": AspectKind("conjunction", 0.0, 8.0, "☌", "Conjunction"),
    "opposition": AspectKind("opposition", 180.0, 8.0, "☍", "Opposition"),
    "trine": AspectKind("trine", 120.0, 8.0, "△", "Trine"),
    "square": AspectKind("square", 90.0, 7.0, "□", "Square"),
    "sextile": AspectKind("sextile", 60.0, 6.0, "⚹", "Sextile"),
    "quincunx": AspectKind("quincunx", 150.0, 3.0, "⚻", "Quincunx"),
    "semisextile": AspectKind("semisextile", 30.0, 2.0, "⚺", "Semi-sextile"),
}

HARMONIOUS = {"trine", "sextile", "conjunction"}
CHALLENGING = {"square", "opposition"}


def priority_order(kinds: Iterable[AspectKind]) -> List[AspectKind]:
    """Tightest orb first; equal orbs keep their table order."""
    return sorted(kinds, key=lambda k: k.max_orb)


DEFAULT_PRIORITY = priority_order(ASPECT_KINDS.values())


def _angle_diff(a: float, b: float) -> float:
    """Return the shortest-arc distance between two longitudes."""

    angle = abs(a - b)
    if angle > 180.0:
        angle = 360.0 - angle
    return angle


def is_applying(p1: CelestialPosition, p2: CelestialPosition) -> bool:
    if p1.speed is None or p2.speed is None:
        return True
    return (p1.speed > p2.speed) == (p1.longitude < p2.longitude)


def match_aspect(
    body1: str,
    p1: CelestialPosition,
    body2: str,
    p2: CelestialPosition,
    kinds: Optional[Sequence[AspectKind]] = None,
) -> Optional[Aspect]:
    """Return the first aspect kind (in priority order) within orb, if any."""

    angle = _angle_diff(p1.longitude, p2.longitude)
    for kind in kinds if kinds is not None else DEFAULT_PRIORITY:
        orb = abs(angle - kind.angle)
        if orb <= kind.max_orb:
            return Aspect(
                body1=body1,
                body2=body2,
                kind=kind.name,
                angle=round(angle, 2),
                orb=round(orb, 2),
                applying=is_applying(p1, p2),
            )
    return None


def find_aspects(
    positions: Mapping[str, CelestialPosition],
    kinds: Optional[Sequence[AspectKind]] = None,
) -> List[Aspect]:
    """All pairwise aspects within orb; pairs with no match are omitted."""

    order = priority_order(kinds) if kinds is not None else DEFAULT_PRIORITY
    res: List[Aspect] = []
    names = list(positions.keys())
    for i in range(len(names)):
        for j in range(i + 1, len(names)):
            p1, p2 = names[i], names[j]
            found = match_aspect(p1, positions[p1], p2, positions[p2], order)
            if found is not None:
                res.append(found)
    return res


def cross_aspects(
    positions_a: Mapping[str, CelestialPosition],
    positions_b: Mapping[str, CelestialPosition],
    kinds: Optional[Sequence[AspectKind]] = None,
) -> List[Aspect]:
    """Aspects over the full cross product of two position sets."""

    order = priority_order(kinds) if kinds is not None else DEFAULT_PRIORITY
    res: List[Aspect] = []
    for a_name, a_pos in positions_a.items():
        for b_name, b_pos in positions_b.items():
            found = match_aspect(a_name, a_pos, b_name, b_pos, order)
            if found is not None:
                res.append(found)
    return res


def aspect_kind_list() -> List[dict]:
    return [
        {
            "name": k.name,
            "display_name": k.display_name,
            "symbol": k.symbol,
            "angle": k.angle,
            "orb": k.max_orb,
        }
        for k in ASPECT_KINDS.values()
    ]
