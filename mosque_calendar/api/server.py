"""
FastAPI server for the calendar data. Run with run_api_server(app) in a background thread.
Endpoints: hijri date, prayer times and day info per date; month, year and Ramadan views;
POST /api/refresh to pull external holiday data.
Docs when enabled: http://<host>:<port>/docs
"""
import logging
import threading
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict

from mosque_calendar.views.month import build_day

logger = logging.getLogger(__name__)


class HijriDateResponse(BaseModel):
    """Pydantic view of HijriDate; serializes from the dataclass attributes."""

    model_config = ConfigDict(from_attributes=True)

    day: str
    month_names: Dict[str, str]
    month_key: str
    year: str
    year_localized: str


class PrayerTimesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fajr: str
    sunrise: str
    dhuhr: str
    asr: str
    maghrib: str
    isha: str


class DayInfoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_school_holiday: bool
    school_holiday_name: Optional[str] = None
    is_public_holiday: bool
    public_holiday_label: Optional[str] = None
    is_new_moon: bool
    is_eid: bool
    eid_label: Optional[str] = None
    is_dst_transition: bool
    dst_direction: Optional[str] = None
    label: str
    is_special: bool


class DayResponse(BaseModel):
    date: str
    hijri: HijriDateResponse
    prayer_times: PrayerTimesResponse
    day_info: DayInfoResponse


class RefreshResponse(BaseModel):
    updated: bool
    school_holidays: int
    public_holidays: int


def create_app(calendar_app: Any) -> FastAPI:
    """Create FastAPI app with routes that use the given CalendarApp instance."""
    app = FastAPI(title="Mosque Calendar API", description="Hijri dates, prayer times and calendar views")

    @app.get("/api/hijri/{day}", response_model=HijriDateResponse)
    def get_hijri(day: date) -> HijriDateResponse:
        return HijriDateResponse.model_validate(calendar_app.converter.convert(day))

    @app.get("/api/prayer-times/{day}", response_model=PrayerTimesResponse)
    def get_prayer_times(day: date) -> PrayerTimesResponse:
        row = build_day(calendar_app, day, calendar_app.overrides)
        return PrayerTimesResponse.model_validate(row.times)

    @app.get("/api/days/{day}", response_model=DayResponse)
    def get_day(day: date) -> DayResponse:
        """Hijri date, prayer times and classification of one day."""
        row = build_day(calendar_app, day, calendar_app.overrides)
        return DayResponse(
            date=row.day.isoformat(),
            hijri=HijriDateResponse.model_validate(row.hijri),
            prayer_times=PrayerTimesResponse.model_validate(row.times),
            day_info=DayInfoResponse.model_validate(row.info),
        )

    @app.get("/api/calendar/{year}/{month}")
    def get_month(year: int, month: int) -> Dict[str, Any]:
        if not 1 <= month <= 12:
            raise HTTPException(status_code=404, detail=f"No month {month}")
        return calendar_app.render(year, month)

    @app.get("/api/calendar/{year}")
    def get_year(year: int) -> Dict[str, Any]:
        return calendar_app.render(year)

    @app.get("/api/ramadan/{year}")
    def get_ramadan(year: int) -> Dict[str, Any]:
        return calendar_app.render_ramadan(year)

    @app.post("/api/refresh", response_model=RefreshResponse)
    def refresh() -> RefreshResponse:
        """Refresh external holiday data (served from cache while it is fresh)."""
        updated = calendar_app.refresh()
        return RefreshResponse(
            updated=updated,
            school_holidays=len(calendar_app.calendar.school_holidays),
            public_holidays=len(calendar_app.calendar.public_holidays),
        )

    @app.get("/api/tasks")
    def list_tasks() -> List[Dict[str, Any]]:
        """Active background timers."""
        return [
            {"name": t["name"], "next_run_at": t["next_run_at"].isoformat()}
            for t in calendar_app.task_manager.get_active_timers()
        ]

    return app


def run_api_server(calendar_app: Any) -> Optional[threading.Thread]:
    """
    Start the API server in a daemon thread if api.enabled is true.
    Reads api.host (default 127.0.0.1) and api.port (default 8765) from config.
    """
    api_config = calendar_app.config.data.get("api") or {}
    enabled = api_config.get("enabled", False)
    logger.info(f"API config: enabled={enabled}, config_file={calendar_app.config.config_file}")
    if not enabled:
        logger.info("API server not started: set api.enabled to true in your config file to enable.")
        return None
    host = api_config.get("host", "127.0.0.1")
    port = int(api_config.get("port", 8765))
    fastapi_app = create_app(calendar_app)

    def run_uvicorn():
        try:
            import uvicorn
            logger.info(f"API server listening at http://{host}:{port} (docs at /docs)")
            uvicorn.run(fastapi_app, host=host, port=port)
        except Exception as e:
            logger.exception(f"API server thread failed: {e}")

    thread = threading.Thread(target=run_uvicorn, daemon=True)
    thread.start()
    logger.info("API server thread started.")
    return thread
