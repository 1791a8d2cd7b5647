"""In-memory stores for birth locations, natal charts and user profiles.

These stores are only suitable for development and continuous integration
environments. They keep records in-process, keyed by user id, and are
protected by a threading lock. Methods are coroutines so a database-backed
store can replace them without touching the callers.
"""

import threading
from typing import Any, Dict, Optional

from .models import BirthChart, BirthLocation


class ChartStore:
    def __init__(self) -> None:
        self._locations: Dict[int, BirthLocation] = {}
        self._charts: Dict[int, BirthChart] = {}
        self._lock = threading.Lock()

    async def upsert_location(self, location: BirthLocation) -> BirthLocation:
        with self._lock:
            self._locations[location.user_id] = location
        return location

    async def get_location(self, user_id: int) -> Optional[BirthLocation]:
        with self._lock:
            return self._locations.get(user_id)

    async def upsert_chart(self, chart: BirthChart) -> BirthChart:
        """Insert or replace the chart for ``chart.user_id``."""
        with self._lock:
            self._charts[chart.user_id] = chart
        return chart

    async def get_chart(self, user_id: int) -> Optional[BirthChart]:
        with self._lock:
            return self._charts.get(user_id)

    def clear(self) -> None:
        with self._lock:
            self._locations.clear()
            self._charts.clear()


class ProfileStore:
    def __init__(self) -> None:
        self._profiles: Dict[int, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    async def update_profile(self, user_id: int, zodiac_sign: str, birthdate: str) -> None:
        with self._lock:
            profile = self._profiles.setdefault(user_id, {})
            profile.update(zodiac_sign=zodiac_sign, birthdate=birthdate)

    async def get_profile(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            profile = self._profiles.get(user_id)
            return dict(profile) if profile is not None else None

    def clear(self) -> None:
        with self._lock:
            self._profiles.clear()


# Global singleton stores used by the API routers.
CHARTS = ChartStore()
PROFILES = ProfileStore()
