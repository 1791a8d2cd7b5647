from __future__ import annotations

from typing import Any, Dict, FrozenSet, Sequence

from .aspects import CHALLENGING, HARMONIOUS, cross_aspects
from .interpretations import interpret_synastry
from .models import Aspect, BirthChart, SynastryResult

THEME_BODIES: Dict[str, FrozenSet[str]] = {
    "emotional": frozenset({"moon", "venus"}),
    "communication": frozenset({"mercury"}),
    "passion": frozenset({"mars", "venus"}),
}


def harmony_score(aspects: Sequence[Aspect]) -> int:
    """harmonious / (harmonious + challenging + 1) as a 0-100 score."""

    harmonious = sum(1 for a in aspects if a.kind in HARMONIOUS)
    challenging = sum(1 for a in aspects if a.kind in CHALLENGING)
    return min(100, round(harmonious / (harmonious + challenging + 1) * 100))


def theme_score(aspects: Sequence[Aspect], bodies: FrozenSet[str], fallback: int) -> int:
    touching = [a for a in aspects if a.body1 in bodies or a.body2 in bodies]
    if not touching:
        return fallback
    return harmony_score(touching)


def synastry(chart_a: BirthChart, chart_b: BirthChart) -> SynastryResult:
    """Cross-compare every body of chart A with every body of chart B."""

    aspects = cross_aspects(chart_a.positions, chart_b.positions)
    overall = harmony_score(aspects)
    return SynastryResult(
        aspects=tuple(aspects),
        overall=overall,
        emotional=theme_score(aspects, THEME_BODIES["emotional"], overall),
        communication=theme_score(aspects, THEME_BODIES["communication"], overall),
        passion=theme_score(aspects, THEME_BODIES["passion"], overall),
    )


def synastry_view(result: SynastryResult) -> Dict[str, Any]:
    return {
        "aspects": [
            {
                "person1_body": a.body1,
                "person2_body": a.body2,
                "kind": a.kind,
                "angle": a.angle,
                "orb": a.orb,
                "applying": a.applying,
                "interpretation": interpret_synastry(a),
            }
            for a in result.aspects
        ],
        "compatibility": {
            "overall": result.overall,
            "emotional": result.emotional,
            "communication": result.communication,
            "passion": result.passion,
        },
    }
