from typing import Any, Callable, Dict, Optional
import logging
import sys
from pathlib import Path

import requests

from .cache_store import CacheStore
from .client_config import ClientConfig, apply_client_location, load_client_config
from .config import Config
from .db import init_db
from .task_manager import TaskManager
from .theme import pattern_data_uri
from mosque_calendar.hijri.converter import HijriConverter
from mosque_calendar.holidays.classifier import DayClassifier
from mosque_calendar.holidays.external import ExternalCalendarDataSource
from mosque_calendar.prayer.calculator import PrayerTimeCalculator
from mosque_calendar.prayer.overrides import load_overrides
from mosque_calendar.views.month import build_month, build_year
from mosque_calendar.views.ramadan import build_ramadan

REFRESH_TASK = "holiday_refresh"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
PATTERN_FILE = Path("assets") / "patterns" / "background-pattern.svg"


def setup_logging(logging_config: Dict[str, Any]) -> None:
    """Configure logging to write to the console and, when configured, a file"""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(getattr(logging, str(logging_config.get("level", "INFO")).upper(), logging.INFO))

    # Create formatter with line numbers
    formatter = logging.Formatter(LOG_FORMAT)

    if logging_config.get("file"):
        log_file = Path(logging_config["file"])
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Log to stderr so stdout stays clean for JSON output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


class CalendarApp:
    """Wires configuration, converters and holiday data into the calendar views.

    The app is also the context object handed to the view builders: it
    exposes converter, calculator, classifier, calendar and overrides.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        client_id: Optional[str] = None,
        store: Optional[CacheStore] = None,
        session: Optional[requests.Session] = None,
        db_url: Optional[str] = None,
        configure_logging: bool = True,
    ):
        self.logger = logging.getLogger(self.__class__.__name__)

        self.config = Config(config_path=config_path)
        if configure_logging:
            setup_logging(self.config.data["logging"])
        logging.info("Mosque calendar starting...")

        if store is None:
            init_db(self.config.data, db_url=db_url)
            store = CacheStore()

        # Client document is blocking: ClientConfigError propagates to the caller
        self.client_id = client_id or self.config.data["clients"].get("default")
        self.client: Optional[ClientConfig] = None
        if self.client_id:
            clients_dir = self.config.resolve_path(self.config.data["clients"].get("directory"))
            self.client = load_client_config(self.client_id, clients_dir)

        self.converter = HijriConverter()
        self.calculator = PrayerTimeCalculator()
        self.calculator.initialize(apply_client_location(self.config.prayer_config(), self.client))

        self.calendar = self.config.holiday_calendar()
        self.classifier = DayClassifier()
        self.calendar.register_change_callback(self.classifier.invalidate)

        self.overrides = load_overrides(self.config.resolve_path(self.config.data["overrides"].get("path")))
        self.data_source = ExternalCalendarDataSource(
            self.calendar,
            self.config.external_config(),
            store=store,
            session=session,
        )
        self.task_manager = TaskManager()
        self.pattern_uri = self._load_pattern()

    @property
    def refresh_enabled(self) -> bool:
        return bool(self.config.data["external"].get("enabled", True))

    def _load_pattern(self) -> Optional[str]:
        path = self.config.resolve_path(str(PATTERN_FILE))
        if path is None or not path.exists():
            return None
        theme = self.client.theme if self.client else None
        color = (theme.color_year_theme or theme.color_brand) if theme else None
        try:
            return pattern_data_uri(path.read_text(encoding="utf-8"), color)
        except OSError as e:
            self.logger.warning(f"Could not read background pattern {path}: {e}")
            return None

    def header(self) -> Dict[str, Any]:
        """Client identity, contact and theme for the page header"""
        data: Dict[str, Any] = {"client_id": self.client_id, "pattern": self.pattern_uri}
        if self.client is not None:
            data.update(self.client.model_dump(include={"identity", "contact", "theme"}))
        return data

    def render(self, year: int, month: Optional[int] = None) -> Dict[str, Any]:
        """Month view when month is given, otherwise the twelve months of the year."""
        if month is not None:
            view = {"view": "month", **build_month(self, year, month).to_dict()}
        else:
            view = {"view": "year", "year": year, "months": [m.to_dict() for m in build_year(self, year)]}
        view["header"] = self.header()
        return view

    def render_ramadan(self, year: int) -> Dict[str, Any]:
        view = {"view": "ramadan", **build_ramadan(self, year).to_dict()}
        view["header"] = self.header()
        return view

    def refresh(self) -> bool:
        """Refresh holiday data now, in the calling thread."""
        return self.data_source.refresh()

    def render_then_refresh(
        self,
        year: int,
        month: Optional[int],
        on_render: Callable[[Dict[str, Any]], None],
        render: Optional[Callable[[], Dict[str, Any]]] = None,
        timeout: Optional[float] = None,
    ) -> bool:
        """Render with resident data, refresh in the background, render again if it changed.

        Returns True when a second render happened.
        """
        render = render or (lambda: self.render(year, month))
        on_render(render())

        if not self.refresh_enabled:
            return False

        self.task_manager.run_in_background(REFRESH_TASK, self.data_source.refresh)
        updated = self.task_manager.wait_for(REFRESH_TASK, timeout=timeout)
        if not updated:
            self.logger.info("No external holiday update, keeping first render")
            return False

        self.logger.info("Holiday data updated, rendering again")
        on_render(render())
        return True

    def schedule_refresh(self, interval_hours: float = 24) -> None:
        """Refresh now and then periodically (used while the API is serving)."""
        if self.refresh_enabled:
            self.task_manager.schedule_task(
                REFRESH_TASK, self.data_source.refresh, interval_hours * 3600, one_time=False, initial_delay=0
            )

    def shutdown(self) -> None:
        logging.info("Mosque calendar shutting down...")
        self.task_manager.stop()
