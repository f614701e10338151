"""
Public holidays and school vacations fetched from French open-data APIs,
merged into the shared HolidayCalendar and cached locally for 30 days.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

import requests

from mosque_calendar.core.cache_store import CacheStore
from mosque_calendar.holidays.models import HolidayCalendar, SchoolHoliday

CACHE_KEY = "ami_calendar_cache"
CACHE_TTL_DAYS = 30

DEFAULT_PUBLIC_HOLIDAYS_URL = "https://calendrier.api.gouv.fr/jours-feries/metropole.json"
DEFAULT_SCHOOL_HOLIDAYS_URL = (
    "https://data.education.gouv.fr/api/explore/v2.0/catalog/datasets/fr-en-calendrier-scolaire/records"
)
DEFAULT_ZONE = "Zone C"
DEFAULT_LOCATION = "Créteil"
DEFAULT_HOLIDAY_NAME = "Vacances"


def to_local_date(value: Any, tz: ZoneInfo) -> date:
    """Calendar date of an API date string in the local time zone.

    Plain dates are taken as-is; timestamps (often UTC-anchored, e.g.
    "2026-12-18T23:00:00+00:00") are converted to tz first.
    """
    text = str(value).strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def _iter_school_records(payload: Any) -> Iterable[Dict[str, Any]]:
    """Yield the field dicts of both Opendatasoft v2.0 and v2.1 response shapes."""
    if not isinstance(payload, dict):
        raise ValueError("Unexpected school holiday payload")
    if "results" in payload:
        records = payload.get("results") or []
    else:
        records = payload.get("records") or []
    for item in records:
        if not isinstance(item, dict):
            continue
        record = item.get("record", item)
        yield record.get("fields", record)


class ExternalCalendarDataSource:
    """Refreshes a HolidayCalendar from remote sources with a local TTL cache."""

    def __init__(
        self,
        calendar: HolidayCalendar,
        config: Optional[Dict[str, Any]] = None,
        store: Optional[CacheStore] = None,
        session: Optional[requests.Session] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.calendar = calendar
        self.config = config or {}
        self.store = store if store is not None else CacheStore()
        self.session = session if session is not None else requests.Session()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logging.getLogger(self.__class__.__name__)

        self.tz = ZoneInfo(self.config.get("timezone") or "Europe/Paris")
        self.ttl = timedelta(days=int(self.config.get("ttl_days", CACHE_TTL_DAYS)))
        self.timeout = float(self.config.get("timeout", 10))
        self.cache_key = self.config.get("cache_key", CACHE_KEY)
        self.network_calls = 0

    def refresh(self) -> bool:
        """Update the calendar from cache or network. Returns True if it changed."""
        try:
            if self._apply_cached():
                return True
        except Exception as e:
            self.logger.warning(f"Error reading holiday cache: {e}")

        try:
            updated = False

            public_holidays = self._fetch_public_holidays()
            if public_holidays is not None:
                self.calendar.merge_public_holidays(public_holidays)
                updated = True
                self.logger.info(f"Public holidays updated from API ({len(public_holidays)} entries)")

            school_holidays = self._fetch_school_holidays()
            if school_holidays is not None:
                self.calendar.replace_school_holidays(school_holidays)
                updated = True
                self.logger.info(f"School holidays updated from API ({len(school_holidays)} intervals)")

            if updated:
                self._save_cache()
            else:
                self.logger.warning("Offline or API error: keeping local holiday configuration")
            return updated
        except Exception as e:
            self.logger.warning(f"Holiday refresh failed, keeping local configuration: {e}")
            return False

    def _now_millis(self) -> int:
        return int(self.clock().timestamp() * 1000)

    def _apply_cached(self) -> bool:
        cached = self.store.get(self.cache_key)
        if not cached:
            return False
        age_ms = self._now_millis() - int(cached.get("timestamp", 0))
        if age_ms < 0 or age_ms >= self.ttl.total_seconds() * 1000:
            self.logger.info("Holiday cache expired or timestamped in the future")
            return False

        # Whole record is parsed before the calendar is touched
        public_holidays = {str(day): str(name) for day, name in (cached.get("publicHolidays") or {}).items()}
        school_holidays = cached.get("schoolHolidays")
        if school_holidays is not None:
            school_holidays = [SchoolHoliday.from_dict(item) for item in school_holidays]

        self.logger.info("Using cached holiday data")
        if public_holidays:
            self.calendar.merge_public_holidays(public_holidays)
        if school_holidays is not None:
            self.calendar.replace_school_holidays(school_holidays)
        return True

    def _save_cache(self) -> None:
        record = {
            "timestamp": self._now_millis(),
            "publicHolidays": dict(self.calendar.public_holidays),
            "schoolHolidays": [h.to_dict() for h in self.calendar.school_holidays],
        }
        try:
            self.store.put(self.cache_key, record)
            self.logger.info(f"Holiday data cached for {self.ttl.days} days")
        except Exception as e:
            self.logger.warning(f"Error saving holiday cache: {e}")

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        self.network_calls += 1
        self.logger.debug(f"Making API request to {url} with params {params}")
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _fetch_public_holidays(self) -> Optional[Dict[str, str]]:
        url = self.config.get("public_holidays_url") or DEFAULT_PUBLIC_HOLIDAYS_URL
        try:
            data = self._get_json(url)
        except (requests.exceptions.RequestException, ValueError) as e:
            self.logger.warning(f"Error fetching public holidays: {e}")
            return None
        if not isinstance(data, dict):
            self.logger.warning("Invalid public holiday response: expected an object")
            return None

        holidays = {}
        for key, name in data.items():
            try:
                day = to_local_date(key, self.tz)
            except ValueError:
                self.logger.debug(f"Skipping public holiday with invalid date: {key}")
                continue
            holidays[day.isoformat()] = str(name)
        return holidays

    def _school_request(self) -> Tuple[str, Optional[Dict[str, Any]]]:
        url = self.config.get("school_holidays_url") or DEFAULT_SCHOOL_HOLIDAYS_URL
        if self.config.get("school_holidays_url"):
            return url, None
        zone = self.config.get("zone", DEFAULT_ZONE)
        location = self.config.get("location", DEFAULT_LOCATION)
        since = self.config.get("since") or f"{self.clock().year - 1}-01-01"
        params = {
            "select": "description,start_date,end_date",
            "where": f'zones="{zone}" and location="{location}" and end_date>="{since}"',
            "order_by": "start_date",
            "limit": 100,
        }
        return url, params

    def _fetch_school_holidays(self) -> Optional[List[SchoolHoliday]]:
        url, params = self._school_request()
        try:
            data = self._get_json(url, params)
            return self.parse_school_holidays(data)
        except (requests.exceptions.RequestException, ValueError) as e:
            self.logger.warning(f"Error fetching school holidays: {e}")
            return None

    def parse_school_holidays(self, payload: Any) -> List[SchoolHoliday]:
        """Convert API records to SchoolHoliday intervals.

        The provider's end_date is the day classes resume, so one day is
        removed to get the last vacation day.
        """
        holidays: List[SchoolHoliday] = []
        seen = set()
        for fields in _iter_school_records(payload):
            try:
                start = to_local_date(fields["start_date"], self.tz)
                end = to_local_date(fields["end_date"], self.tz) - timedelta(days=1)
            except (KeyError, TypeError, ValueError) as e:
                self.logger.debug(f"Skipping school holiday record {fields!r}: {e}")
                continue
            end = max(end, start)
            name = str(fields.get("description") or DEFAULT_HOLIDAY_NAME)
            holiday = SchoolHoliday(name=name, start=start.isoformat(), end=end.isoformat())
            if holiday in seen:
                continue
            seen.add(holiday)
            holidays.append(holiday)
        return holidays
