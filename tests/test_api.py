"""
HTTP surface checks: query/body mapping onto Location and error status codes.
"""
from fastapi.testclient import TestClient

from index import MAX_DAYS, app

client = TestClient(app)


def test_root_info():
    r = client.get("/")
    assert r.status_code == 200
    info = r.json()
    assert info["status"] == "online"
    assert info["order"] == ["Fajr", "Sunrise", "Zuhr", "Asr", "Maghrib", "Isha"]


def test_get_adhan_single_day():
    r = client.get("/api/adhan", params={"lat": 0, "lng": 0, "date": "2024-03-20", "timezone": 0})
    assert r.status_code == 200
    body = r.json()
    times = body["times"]["2024-03-20"]
    assert len(times) == 6
    assert times[2] == "12:08 PM"
    assert body["clamped"] == {}


def test_get_adhan_multiple_days():
    r = client.get(
        "/api/adhan",
        params={"lat": 41.0082, "lng": 28.9784, "date": "2026-02-27", "timezone": 3, "days": 3},
    )
    assert r.status_code == 200
    assert list(r.json()["times"]) == ["2026-02-27", "2026-02-28", "2026-03-01"]


def test_get_adhan_angle_override_moves_fajr():
    params = {"lat": 41.0082, "lng": 28.9784, "date": "2026-02-20", "timezone": 3}
    base = client.get("/api/adhan", params=params).json()["times"]["2026-02-20"]
    isna = client.get("/api/adhan", params={**params, "calculationMethod": "ISNA"}).json()
    later = client.get("/api/adhan", params={**params, "fajrAngle": 12}).json()
    # smaller twilight angle -> later Fajr, same Zuhr
    assert isna["times"]["2026-02-20"][0] > base[0]
    assert later["times"]["2026-02-20"][0] > base[0]
    assert later["times"]["2026-02-20"][2] == base[2]


def test_get_adhan_unknown_method():
    r = client.get(
        "/api/adhan",
        params={"lat": 0, "lng": 0, "date": "2024-03-20", "calculationMethod": "Atlantis"},
    )
    assert r.status_code == 400
    r = client.get("/api/adhan", params={"lat": 0, "lng": 0, "date": "2024-03-20", "asrMethod": "x"})
    assert r.status_code == 400


def test_get_adhan_polar_latitude_is_rejected():
    r = client.get("/api/adhan", params={"lat": 90, "lng": 0, "date": "2024-03-20"})
    assert r.status_code == 422


def test_get_adhan_validation():
    base = {"lat": 0, "lng": 0, "date": "2024-03-20"}
    assert client.get("/api/adhan", params={**base, "elevation": -5}).status_code == 422
    assert client.get("/api/adhan", params={**base, "lat": 91}).status_code == 422
    assert client.get("/api/adhan", params={**base, "date": "2024-13-01"}).status_code == 422
    assert client.get("/api/adhan", params={**base, "days": MAX_DAYS + 1}).status_code == 422


def test_get_adhan_reports_clamped_events():
    r = client.get(
        "/api/adhan",
        params={"lat": 65, "lng": 25, "date": "2024-06-21", "timezone": 3},
    )
    assert r.status_code == 200
    clamped = r.json()["clamped"]["2024-06-21"]
    assert "Fajr" in clamped and "Isha" in clamped


def test_post_adhan():
    payload = {
        "latitude": 21.4225,
        "longitude": 39.8262,
        "elevation": 277,
        "timezone": 3,
        "fajr_angle": 18.5,
        "isha_angle": 18.5,
        "shadow_factor": 1,
        "current_datetime": "2025-04-01T12:00:00",
    }
    r = client.post("/api/adhan", json=payload)
    assert r.status_code == 200
    body = r.json()
    assert len(body["times"]) == 6
    assert body["times"][2].endswith("PM")
    assert body["clamped"] == []


def test_post_adhan_negative_elevation():
    payload = {
        "latitude": 0,
        "longitude": 0,
        "elevation": -1,
        "timezone": 0,
        "current_datetime": "2025-04-01T12:00:00",
    }
    assert client.post("/api/adhan", json=payload).status_code == 422
