"""
Day classification: school holiday, public holiday, DST change, new moon, Eid.

Each rule is evaluated independently, so one day may carry several flags
(a Friday that is also Eid, a public holiday during school vacation, ...).
"""
import logging
from collections import namedtuple
from dataclasses import asdict, dataclass
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Tuple, Union

from mosque_calendar.hijri.models import HijriDate
from mosque_calendar.holidays.models import HolidayCalendar

DST_SUMMER = "summer"
DST_WINTER = "winter"

DST_LABELS = {
    DST_SUMMER: "Heure d'été (+1h)",
    DST_WINTER: "Heure d'hiver (-1h)",
}

EID_FITR = "Eid-ul-Fitr"
EID_ADHA = "Eid-ul-Adha"

_DAY_START = time(0, 0, 0, 0)
_DAY_END = time(23, 59, 59, 999000)

ParsedInterval = namedtuple("ParsedInterval", ["start", "end", "name"])


@dataclass(frozen=True)
class DayInfo:
    """Composite attributes of one calendar day. Computed fresh, never stored."""
    is_school_holiday: bool = False
    school_holiday_name: Optional[str] = None
    is_public_holiday: bool = False
    public_holiday_label: Optional[str] = None
    is_new_moon: bool = False
    is_eid: bool = False
    eid_label: Optional[str] = None
    is_dst_transition: bool = False
    dst_direction: Optional[str] = None

    @property
    def label(self) -> str:
        """Display label: Eid wins over DST, DST over the public holiday name."""
        if self.is_eid and self.eid_label:
            return self.eid_label
        if self.is_dst_transition and self.dst_direction:
            return DST_LABELS[self.dst_direction]
        if self.is_public_holiday and self.public_holiday_label:
            return self.public_holiday_label
        return ""

    @property
    def is_special(self) -> bool:
        """Eid days are rendered like Fridays."""
        return self.is_eid

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["label"] = self.label
        return data


def is_last_sunday_approx(day: date) -> bool:
    """Sunday with no further Sunday within a 31-day month.

    Fixed 31-day approximation of the EU "last Sunday" rule; exact for March
    and October, which are the only months it is applied to.
    """
    return day.weekday() == 6 and day.day + 7 > 31


def dst_direction_for(day: date) -> Optional[str]:
    if not is_last_sunday_approx(day):
        return None
    if day.month == 3:
        return DST_SUMMER
    if day.month == 10:
        return DST_WINTER
    return None


def eid_label_for(hijri: HijriDate) -> Optional[str]:
    """Eid-ul-Fitr on 1 Shawwal, Eid-ul-Adha on 10 Dhu al-Hijja."""
    key = hijri.month_key
    if not key:
        # Unrecognised month spelling passed through: match on the raw name.
        raw = hijri.month_name_fr.lower()
        if "chawwal" in raw or "shawwal" in raw:
            key = "shawwal"
        elif "hijja" in raw or "hija" in raw:
            key = "dhu_al_hijja"
    if hijri.day == "1" and key == "shawwal":
        return EID_FITR
    if hijri.day == "10" and key == "dhu_al_hijja":
        return EID_ADHA
    return None


class DayClassifier:
    """Classifies days against a HolidayCalendar.

    School-holiday intervals are parsed lazily and reused across calls until
    invalidate() is called or the calendar (identity or revision) changes.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self._parsed: Optional[List[ParsedInterval]] = None
        self._parsed_source: Optional[Tuple[int, int]] = None
        self.parse_count = 0

    def invalidate(self, *_args: Any) -> None:
        """Drop parsed intervals; usable directly as a HolidayCalendar change callback."""
        self._parsed = None
        self._parsed_source = None

    def classify(self, day: Union[date, datetime], hijri: HijriDate, calendar: HolidayCalendar) -> DayInfo:
        moment = day if isinstance(day, datetime) else datetime.combine(day, _DAY_START)
        calendar_day = moment.date()

        school_name = self._school_holiday_name(moment, calendar)
        public_label = calendar.public_holidays.get(calendar_day.isoformat())
        dst = dst_direction_for(calendar_day)
        eid = eid_label_for(hijri)

        return DayInfo(
            is_school_holiday=school_name is not None,
            school_holiday_name=school_name,
            is_public_holiday=bool(public_label),
            public_holiday_label=public_label or None,
            is_new_moon=hijri.day == "1",
            is_eid=eid is not None,
            eid_label=eid,
            is_dst_transition=dst is not None,
            dst_direction=dst,
        )

    def _school_holiday_name(self, moment: datetime, calendar: HolidayCalendar) -> Optional[str]:
        if moment.tzinfo is not None:
            moment = moment.replace(tzinfo=None)
        for interval in self._intervals(calendar):
            if interval.start <= moment <= interval.end:
                return interval.name
        return None

    def _intervals(self, calendar: HolidayCalendar) -> List[ParsedInterval]:
        source = (id(calendar), calendar.revision)
        if self._parsed is None or self._parsed_source != source:
            self._parsed = self._parse(calendar)
            self._parsed_source = source
            self.parse_count += 1
        return self._parsed

    def _parse(self, calendar: HolidayCalendar) -> List[ParsedInterval]:
        parsed = []
        for holiday in calendar.school_holidays:
            try:
                start = datetime.combine(date.fromisoformat(str(holiday.start)[:10]), _DAY_START)
                end = datetime.combine(date.fromisoformat(str(holiday.end)[:10]), _DAY_END)
            except ValueError as e:
                self.logger.warning(f"Skipping school holiday {holiday.name!r} with invalid dates: {e}")
                continue
            parsed.append(ParsedInterval(start, end, holiday.name))
        parsed.sort(key=lambda interval: interval.start)
        self.logger.debug(f"Parsed {len(parsed)} school holiday intervals")
        return parsed
