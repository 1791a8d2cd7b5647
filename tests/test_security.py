from fastapi.testclient import TestClient
from cosmic.app import app

PAYLOAD = {
    "birth_date": "1990-08-18",
    "birth_time": "14:32",
    "birth_timezone": "Asia/Kolkata",
    "birth_city": "Hyderabad",
    "birth_country": "India",
    "latitude": 17.385,
    "longitude": 78.4867,
}


def test_reject_without_key(monkeypatch):
    monkeypatch.setenv("AUTH_ENABLED", "true")
    with TestClient(app, raise_server_exceptions=False) as client:
        r = client.post("/v2/birth-charts/501", json=PAYLOAD)
    assert r.status_code == 401


def test_reject_with_invalid_key(monkeypatch):
    monkeypatch.setenv("AUTH_ENABLED", "true")
    monkeypatch.setenv("API_KEYS", "valid123")
    with TestClient(app, raise_server_exceptions=False) as client:
        r = client.post(
            "/v2/birth-charts/501",
            headers={"Authorization": "Bearer nope"},
            json=PAYLOAD,
        )
    assert r.status_code == 403


def test_allow_with_valid_key(monkeypatch):
    monkeypatch.setenv("AUTH_ENABLED", "true")
    monkeypatch.setenv("API_KEYS", "valid123,other")
    with TestClient(app, raise_server_exceptions=False) as client:
        r = client.post(
            "/v2/birth-charts/501",
            headers={"Authorization": "Bearer valid123"},
            json=PAYLOAD,
        )
    assert r.status_code == 201


def test_metadata_is_public(monkeypatch):
    monkeypatch.setenv("AUTH_ENABLED", "true")
    with TestClient(app, raise_server_exceptions=False) as client:
        assert client.get("/v2/zodiac/signs").status_code == 200
        assert client.get("/__health").status_code == 200


def test_rate_limit(monkeypatch):
    from cosmic.middleware.ratelimit import _counters

    monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")
    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "2")
    monkeypatch.setenv("AUTH_ENABLED", "false")
    _counters.clear()
    with TestClient(app, raise_server_exceptions=False) as client:
        for i in range(3):
            r = client.get("/v2/lunar/phase/2024-01-01")
            if i < 2:
                assert r.status_code == 200
    assert r.status_code == 429
    _counters.clear()


def test_rate_limit_is_keyed_per_api_key(monkeypatch):
    from cosmic.middleware.ratelimit import _counters

    monkeypatch.setenv("AUTH_ENABLED", "true")
    monkeypatch.setenv("API_KEYS", "alpha,beta")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")
    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "1")
    _counters.clear()
    with TestClient(app, raise_server_exceptions=False) as client:
        first = client.get("/v2/lunar/phase/2024-01-01", headers={"Authorization": "Bearer alpha"})
        second = client.get("/v2/lunar/phase/2024-01-01", headers={"Authorization": "Bearer alpha"})
        other = client.get("/v2/lunar/phase/2024-01-01", headers={"Authorization": "Bearer beta"})
    assert first.status_code == 200
    assert second.status_code == 429
    assert other.status_code == 200
    assert set(_counters) == {"alpha", "beta"}
    _counters.clear()


def test_rate_limit_drops_idle_clients(monkeypatch):
    import time
    from cosmic.middleware.ratelimit import WINDOW_SECONDS, _counters

    monkeypatch.setenv("AUTH_ENABLED", "false")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")
    _counters.clear()
    _counters["10.0.0.9"] = [time.time() - WINDOW_SECONDS - 5]
    with TestClient(app, raise_server_exceptions=False) as client:
        assert client.get("/v2/lunar/phase/2024-01-01").status_code == 200
    assert "10.0.0.9" not in _counters
    assert len(_counters) == 1
    _counters.clear()
