import asyncio

from fastapi.testclient import TestClient
from cosmic.app import app
from cosmic.services.chart_store import CHARTS, PROFILES

client = TestClient(app)

PAYLOAD = {
    "birth_date": "1990-08-18",
    "birth_time": "14:32",
    "birth_timezone": "Asia/Kolkata",
    "birth_time_accuracy": "exact",
    "birth_city": "Hyderabad",
    "birth_country": "India",
    "latitude": 17.385,
    "longitude": 78.4867,
}


def test_create_and_read_chart():
    res = client.post("/v2/birth-charts/101", json=PAYLOAD)
    assert res.status_code == 201, res.text
    data = res.json()
    assert data["user_id"] == 101
    assert data["sun_sign"] == "leo"
    assert len(data["positions"]) == 12
    assert "chiron" in data["positions"]
    assert data["positions"]["sun"]["house"] is not None
    assert len(data["houses"]) == 12
    assert data["houses"][0]["sign"] == data["rising_sign"]
    assert data["meta"]["house_system"] == "whole_sign"
    assert data["meta"]["warnings"] is None

    again = client.get("/v2/birth-charts/101")
    assert again.status_code == 200
    assert again.json()["positions"] == data["positions"]
    assert asyncio.run(PROFILES.get_profile(101))["zodiac_sign"] == "leo"


def test_unknown_birth_time():
    payload = {k: v for k, v in PAYLOAD.items() if k not in ("birth_time", "birth_time_accuracy")}
    res = client.post("/v2/birth-charts/102", json=payload)
    assert res.status_code == 201, res.text
    data = res.json()
    assert data["houses"] is None
    assert data["ascendant"] is None
    assert data["midheaven"] is None
    assert data["rising_sign"] is None
    assert data["location"]["birth_time_accuracy"] == "unknown"
    assert data["positions"]["moon"]["house"] is None
    assert data["meta"]["warnings"]


def test_upsert_replaces_chart():
    client.post("/v2/birth-charts/103", json=PAYLOAD)
    res = client.post("/v2/birth-charts/103", json={**PAYLOAD, "birth_date": "1990-01-05"})
    assert res.status_code == 201
    assert client.get("/v2/birth-charts/103").json()["sun_sign"] == "capricorn"


def test_invalid_date_is_400():
    res = client.post("/v2/birth-charts/104", json={**PAYLOAD, "birth_date": "18/08/1990"})
    assert res.status_code == 400
    assert res.json()["error"] == "InvalidDateFormat"
    assert asyncio.run(CHARTS.get_chart(104)) is None


def test_unknown_timezone_is_400():
    res = client.post("/v2/birth-charts/104", json={**PAYLOAD, "birth_timezone": "Mars/Base"})
    assert res.status_code == 400
    assert res.json()["error"] == "InvalidTimezone"


def test_missing_location_is_422():
    payload = {k: v for k, v in PAYLOAD.items() if k != "latitude"}
    res = client.post("/v2/birth-charts/105", json=payload)
    assert res.status_code == 422
    assert res.json()["error"] == "MissingLocation"


def test_out_of_range_latitude_is_validation_error():
    res = client.post("/v2/birth-charts/106", json={**PAYLOAD, "latitude": 123.0})
    assert res.status_code == 422
    assert res.json()["error"] == "ValidationError"


def test_unknown_chart_is_404():
    res = client.get("/v2/birth-charts/999999")
    assert res.status_code == 404
    assert res.json()["error"] == "ChartNotFound"


def test_ephemeris_positions_for_date():
    res = client.get("/v2/ephemeris/positions/2024-03-21")
    assert res.status_code == 200
    bodies = {b["body"]: b for b in res.json()["bodies"]}
    assert bodies["sun"]["sign"] == "aries"
    assert bodies["pluto"]["precision"] == "approximate"
    assert bodies["sun"]["formatted"].startswith("0° Aries")


def test_ephemeris_bad_date():
    res = client.get("/v2/ephemeris/positions/yesterday")
    assert res.status_code == 400
    assert client.get("/v2/ephemeris/current").status_code == 200
