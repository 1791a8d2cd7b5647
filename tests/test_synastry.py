from dataclasses import replace
from datetime import datetime, timezone

from fastapi.testclient import TestClient
from cosmic.app import app
from cosmic.services.chart_builder import build_chart, build_location
from cosmic.services.compatibility_engine import harmony_score, synastry
from cosmic.services.models import Aspect, CelestialPosition

client = TestClient(app)

FIXED = datetime(2024, 1, 1, tzinfo=timezone.utc)

ALICE = {
    "birth_date": "1992-04-09",
    "birth_time": "22:10",
    "birth_timezone": "America/New_York",
    "birth_city": "New York",
    "birth_country": "USA",
    "latitude": 40.7128,
    "longitude": -74.006,
}
BOB = {
    "birth_date": "1989-12-24",
    "birth_city": "Madrid",
    "birth_country": "Spain",
    "latitude": 40.4168,
    "longitude": -3.7038,
}


def _chart(uid, data):
    return build_chart(build_location(uid, data), calculated_at=FIXED)


def test_harmony_score_formula():
    def asp(kind):
        return Aspect("sun", "moon", kind, 0.0, 0.0, True)

    assert harmony_score([]) == 0
    assert harmony_score([asp("trine")] * 3 + [asp("square")]) == 60
    assert harmony_score([asp("quincunx")] * 5) == 0


def test_synastry_is_symmetric():
    a, b = _chart(1, ALICE), _chart(2, BOB)
    ab, ba = synastry(a, b), synastry(b, a)
    assert {(x.body1, x.body2, x.kind) for x in ab.aspects} == {
        (x.body2, x.body1, x.kind) for x in ba.aspects
    }
    assert ab.overall == ba.overall
    assert ab.emotional == ba.emotional


def test_synastry_is_deterministic():
    a, b = _chart(1, ALICE), _chart(2, BOB)
    assert synastry(a, b) == synastry(a, b)
    for score in (synastry(a, b).overall, synastry(a, b).passion):
        assert 0 <= score <= 100


def test_all_conjunctions_score_near_perfect():
    base = _chart(1, ALICE)
    same = CelestialPosition(longitude=10.0, sign="aries", sign_degree=10.0, speed=1.0)
    chart = replace(base, positions={name: same for name in base.positions})
    result = synastry(chart, chart)
    assert len(result.aspects) == 144
    assert result.overall >= 99
    assert result.emotional >= 95
    assert result.communication >= 95


def test_synastry_route():
    client.post("/v2/birth-charts/301", json=ALICE)
    client.post("/v2/birth-charts/302", json=BOB)
    res = client.get("/v2/birth-charts/301/synastry/302")
    assert res.status_code == 200, res.text
    scores = res.json()["compatibility"]
    assert set(scores) == {"overall", "emotional", "communication", "passion"}
    assert res.json()["aspects"][0]["interpretation"]


def test_synastry_route_missing_partner():
    client.post("/v2/birth-charts/303", json=ALICE)
    res = client.get("/v2/birth-charts/303/synastry/909090")
    assert res.status_code == 404
