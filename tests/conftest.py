from datetime import date

import pytest

from mosque_calendar.core import db
from mosque_calendar.core.cache_store import MemoryCacheStore
from mosque_calendar.hijri.engines import HijriEngine, HijriParts, TabularEngine


class FakeResponse:
    def __init__(self, payload=None, status_code=200, error=None):
        self.payload = payload
        self.status_code = status_code
        self.error = error

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.error is not None:
            raise self.error
        return self.payload


class FakeSession:
    """requests.Session stand-in answering by URL prefix."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        for prefix, answer in self.routes.items():
            if url.startswith(prefix):
                if isinstance(answer, Exception):
                    raise answer
                return answer
        import requests

        raise requests.exceptions.ConnectionError(f"No route for {url}")


class GregorianLikeEngine(HijriEngine):
    """Broken engine that echoes the Gregorian date."""

    name = "gregorian_like"

    def to_hijri(self, day: date) -> HijriParts:
        return HijriParts(day=day.day, month_index=day.month, month_name=None, year=day.year)


class FlakyEngine(TabularEngine):
    """Passes the probe but fails on dates after 2070."""

    name = "flaky"

    def to_hijri(self, day: date) -> HijriParts:
        if day.year > 2070:
            raise ValueError("date out of supported range")
        return super().to_hijri(day)


@pytest.fixture
def memory_store():
    return MemoryCacheStore()


@pytest.fixture
def sqlite_db(tmp_path):
    db.reset_db()
    db.init_db(db_url=f"sqlite:///{tmp_path / 'test.db'}")
    yield
    db.reset_db()
