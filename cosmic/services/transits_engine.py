from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from . import ephem
from .aspects import match_aspect
from .constants import format_degree_as_sign
from .interpretations import interpret_transit
from .models import BirthChart, TransitSnapshot


def compute_transits(natal: BirthChart, at: Optional[datetime] = None) -> List[TransitSnapshot]:
    """Compare each body's position at ``at`` with the same body in the natal chart.

    Only like-to-like pairs are checked (transit Sun to natal Sun, and so on);
    every body yields one snapshot, with an aspect only when one is in orb.
    """

    current = ephem.positions_at(at or datetime.now(timezone.utc))
    snapshots: List[TransitSnapshot] = []
    for body, now_pos in current.items():
        natal_pos = natal.positions.get(body)
        if natal_pos is None:
            continue
        snapshots.append(
            TransitSnapshot(
                body=body,
                current=now_pos,
                natal=natal_pos,
                aspect=match_aspect(body, now_pos, body, natal_pos),
            )
        )
    return snapshots


def snapshot_view(snap: TransitSnapshot) -> Dict[str, Any]:
    aspect = None
    if snap.aspect is not None:
        aspect = {
            "kind": snap.aspect.kind,
            "angle": snap.aspect.angle,
            "orb": snap.aspect.orb,
            "applying": snap.aspect.applying,
            "interpretation": interpret_transit(snap.body, snap.aspect),
        }
    return {
        "body": snap.body,
        "name": ephem.BODIES[snap.body]["name"],
        "current": {**snap.current.to_dict(), "formatted": format_degree_as_sign(snap.current.longitude)},
        "natal": {**snap.natal.to_dict(), "formatted": format_degree_as_sign(snap.natal.longitude)},
        "aspect": aspect,
    }
