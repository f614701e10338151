import pytest
from fastapi.testclient import TestClient

from mosque_calendar.api import create_app
from mosque_calendar.core import db
from mosque_calendar.core.app import CalendarApp
from mosque_calendar.core.cache_store import MemoryCacheStore

from conftest import FakeSession


@pytest.fixture(scope="module")
def client(tmp_path_factory):
    db.reset_db()
    config_dir = tmp_path_factory.mktemp("api")
    (config_dir / "config.yaml").write_text(
        "holidays:\n  public:\n    '2027-05-01': Fête du Travail\nlogging:\n  file: null\n",
        encoding="utf-8",
    )
    app = CalendarApp(
        config_path=str(config_dir / "config.yaml"),
        store=MemoryCacheStore(),
        session=FakeSession(),
        configure_logging=False,
    )
    yield TestClient(create_app(app))
    app.shutdown()


def test_hijri_endpoint(client):
    response = client.get("/api/hijri/2027-01-01")
    assert response.status_code == 200
    body = response.json()
    assert (body["day"], body["year"]) == ("22", "1448")
    assert body["month_key"] == "rajab"


def test_prayer_times_endpoint(client):
    body = client.get("/api/prayer-times/2027-06-21").json()
    assert set(body) == {"fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha"}
    assert "--:--" not in body.values()


def test_day_endpoint(client):
    body = client.get("/api/days/2027-05-01").json()
    assert body["date"] == "2027-05-01"
    assert body["day_info"]["is_public_holiday"] is True
    assert body["day_info"]["label"] == "Fête du Travail"


def test_invalid_date_is_422(client):
    assert client.get("/api/hijri/2027-02-30").status_code == 422
    assert client.get("/api/days/tomorrow").status_code == 422


def test_month_endpoint(client):
    body = client.get("/api/calendar/2027/10").json()
    assert body["legends"]["dst"]["direction"] == "winter"
    assert client.get("/api/calendar/2027/13").status_code == 404


def test_ramadan_endpoint(client):
    body = client.get("/api/ramadan/2027").json()
    assert body["hijri_year"] == "1448"


def test_refresh_offline(client):
    body = client.post("/api/refresh").json()
    assert body == {"updated": False, "school_holidays": 0, "public_holidays": 1}
