import asyncio
from datetime import datetime, timezone

import pytest

from cosmic.errors import (
    ChartNotFound,
    InvalidDateFormat,
    InvalidLocation,
    InvalidTimezone,
    MissingLocation,
)
from cosmic.services.chart_builder import (
    build_chart,
    build_location,
    create_or_update_chart,
    dominant_bodies,
    get_birth_chart,
)
from cosmic.services.chart_store import ChartStore, ProfileStore
from cosmic.services.constants import degrees_to_sign
from cosmic.services.models import Aspect, CelestialPosition

FIXED = datetime(2024, 1, 1, tzinfo=timezone.utc)

HYDERABAD = {
    "birth_date": "1990-08-18",
    "birth_time": "14:32",
    "birth_timezone": "Asia/Kolkata",
    "birth_city": "Hyderabad",
    "birth_country": "India",
    "latitude": 17.385,
    "longitude": 78.4867,
}


def test_build_location_defaults_accuracy():
    loc = build_location(1, HYDERABAD)
    assert loc.birth_time_accuracy == "exact"
    assert loc.time_known
    loc = build_location(1, {**HYDERABAD, "birth_time": None})
    assert loc.birth_time_accuracy == "unknown"
    assert not loc.time_known


@pytest.mark.parametrize("bad", ["1990/08/18", "18-08-1990", "1990-02-30", "", None])
def test_invalid_birth_date(bad):
    with pytest.raises(InvalidDateFormat):
        build_location(1, {**HYDERABAD, "birth_date": bad})


@pytest.mark.parametrize("bad", ["25:00", "14:61", "2pm", "1432", "14:32:99", "14:32:60"])
def test_invalid_birth_time(bad):
    with pytest.raises(InvalidDateFormat):
        build_location(1, {**HYDERABAD, "birth_time": bad})


@pytest.mark.parametrize("field", ["birth_city", "birth_country", "latitude", "longitude"])
def test_missing_location_field(field):
    data = dict(HYDERABAD)
    data[field] = None if field in ("latitude", "longitude") else "  "
    with pytest.raises(MissingLocation):
        build_location(1, data)


def test_full_chart():
    chart = build_chart(build_location(1, HYDERABAD), calculated_at=FIXED)
    assert chart.sun_sign == "leo"
    assert len(chart.positions) == 12
    assert chart.houses is not None and len(chart.houses) == 12
    assert chart.rising_sign == degrees_to_sign(chart.ascendant)[0]
    assert chart.house_system == "whole_sign"
    assert sum(chart.element_balance.values()) == 12
    assert sum(chart.modality_balance.values()) == 12
    assert len(chart.dominant_bodies) == 3


def test_unknown_time_skips_angles():
    chart = build_chart(build_location(1, {**HYDERABAD, "birth_time": None}), calculated_at=FIXED)
    assert chart.houses is None
    assert chart.ascendant is None
    assert chart.midheaven is None
    assert chart.rising_sign is None
    assert chart.house_system is None
    assert len(chart.positions) == 12


def test_unknown_accuracy_with_time_still_skips_angles():
    loc = build_location(1, {**HYDERABAD, "birth_time_accuracy": "unknown"})
    assert build_chart(loc, calculated_at=FIXED).houses is None


def test_timezone_is_applied():
    local = build_chart(build_location(1, HYDERABAD), calculated_at=FIXED)
    utc = build_chart(
        build_location(1, {**HYDERABAD, "birth_time": "09:02", "birth_timezone": None}),
        calculated_at=FIXED,
    )
    assert local.positions == utc.positions
    assert local.ascendant == pytest.approx(utc.ascendant)


def test_unknown_timezone():
    with pytest.raises(InvalidTimezone):
        build_chart(build_location(1, {**HYDERABAD, "birth_timezone": "Nowhere/Atlantis"}))


def test_chart_is_deterministic():
    loc = build_location(1, HYDERABAD)
    assert build_chart(loc, calculated_at=FIXED) == build_chart(loc, calculated_at=FIXED)


def test_dominant_bodies_weights():
    def pos(lon):
        sign, within = degrees_to_sign(lon)
        return CelestialPosition(longitude=lon, sign=sign, sign_degree=within)

    positions = {name: pos(i * 25.0) for i, name in enumerate(["sun", "moon", "mars", "venus"])}
    aspects = [
        Aspect("mars", "venus", "conjunction", 1.0, 1.0, True),
        Aspect("mars", "venus", "square", 90.5, 0.5, True),
        Aspect("mars", "moon", "trine", 117.0, 3.0, True),
    ]
    # mars 2+2+1, sun 3, venus 2+2, moon 2+1
    assert dominant_bodies(positions, aspects) == ["mars", "venus", "sun"]


def test_create_or_update_upserts():
    charts, profiles = ChartStore(), ProfileStore()
    first = asyncio.run(create_or_update_chart(7, HYDERABAD, charts, profiles))
    again = asyncio.run(
        create_or_update_chart(7, {**HYDERABAD, "birth_date": "1990-01-05"}, charts, profiles)
    )
    stored = asyncio.run(get_birth_chart(7, charts))
    assert stored == again
    assert stored.sun_sign == "capricorn"
    assert first.sun_sign == "leo"
    assert asyncio.run(profiles.get_profile(7)) == {"zodiac_sign": "capricorn", "birthdate": "1990-01-05"}
    assert asyncio.run(charts.get_location(7)).birth_date.isoformat() == "1990-01-05"


def test_failed_validation_leaves_store_untouched():
    charts, profiles = ChartStore(), ProfileStore()
    asyncio.run(create_or_update_chart(8, HYDERABAD, charts, profiles))
    with pytest.raises(MissingLocation):
        asyncio.run(create_or_update_chart(8, {**HYDERABAD, "latitude": None}, charts, profiles))
    assert asyncio.run(charts.get_chart(8)).sun_sign == "leo"


def test_get_missing_chart():
    with pytest.raises(ChartNotFound):
        asyncio.run(get_birth_chart(404, ChartStore()))


def test_seconds_field_is_accepted_when_valid():
    loc = build_location(1, {**HYDERABAD, "birth_time": "14:32:45"})
    assert loc.time_known


@pytest.mark.parametrize(
    "override",
    [
        {"latitude": "north"},
        {"longitude": [78.4]},
        {"latitude": True},
        {"latitude": 95.0},
        {"latitude": -90.5},
        {"longitude": 500.0},
        {"longitude": -180.01},
        {"birth_city": 12},
        {"birth_country": ["India"]},
        {"birth_state": 5},
    ],
)
def test_malformed_location(override):
    with pytest.raises(InvalidLocation):
        build_location(1, {**HYDERABAD, **override})


def test_coordinate_bounds_are_inclusive():
    loc = build_location(1, {**HYDERABAD, "latitude": -90, "longitude": "180"})
    assert loc.latitude == -90.0
    assert loc.longitude == 180.0


def test_non_string_timezone():
    with pytest.raises(InvalidTimezone):
        build_location(1, {**HYDERABAD, "birth_timezone": 530})


def test_malformed_location_leaves_store_untouched():
    charts, profiles = ChartStore(), ProfileStore()
    with pytest.raises(InvalidLocation):
        asyncio.run(create_or_update_chart(9, {**HYDERABAD, "latitude": 95.0}, charts, profiles))
    assert asyncio.run(charts.get_chart(9)) is None
    assert asyncio.run(profiles.get_profile(9)) is None
