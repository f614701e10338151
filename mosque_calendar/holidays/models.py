"""
Holiday data shared by the classifier and the external data source.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchoolHoliday:
    """Inclusive whole-day school vacation interval. start/end are ISO dates."""
    name: str
    start: str
    end: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SchoolHoliday":
        return cls(
            name=str(data.get("name") or "Vacances"),
            start=str(data["start"]),
            end=str(data["end"]),
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class HolidayCalendar:
    """School vacation intervals and public holidays (ISO date -> name).

    Every mutation bumps revision and notifies registered callbacks so that
    derived data (parsed intervals) can be invalidated.
    """

    def __init__(
        self,
        school_holidays: Optional[Iterable[SchoolHoliday]] = None,
        public_holidays: Optional[Mapping[str, str]] = None,
    ):
        self.school_holidays: List[SchoolHoliday] = list(school_holidays or [])
        self.public_holidays: Dict[str, str] = dict(public_holidays or {})
        self.revision = 0
        self.change_callbacks: List[Callable[["HolidayCalendar"], None]] = []

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "HolidayCalendar":
        """Build from {"school": [{name, start, end}], "public": {date: name}}."""
        data = data or {}
        school = []
        for item in data.get("school") or []:
            try:
                school.append(SchoolHoliday.from_dict(item))
            except (KeyError, TypeError) as e:
                logger.warning(f"Ignoring invalid school holiday entry {item!r}: {e}")
        return cls(school, data.get("public") or {})

    def register_change_callback(self, callback: Callable[["HolidayCalendar"], None]) -> None:
        """Register a callback to be called after the calendar changes"""
        self.change_callbacks.append(callback)

    def replace_school_holidays(self, holidays: Iterable[SchoolHoliday]) -> None:
        self.school_holidays = list(holidays)
        self._changed()

    def merge_public_holidays(self, holidays: Mapping[str, str]) -> None:
        """Add or update entries; entries missing from holidays are kept."""
        self.public_holidays = {**self.public_holidays, **holidays}
        self._changed()

    def _changed(self) -> None:
        self.revision += 1
        for callback in self.change_callbacks:
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Error in holiday calendar change callback: {e}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "school": [h.to_dict() for h in self.school_holidays],
            "public": dict(self.public_holidays),
        }
