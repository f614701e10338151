"""
Month and year views: one row per day plus the legends and titles of the page.
"""
import calendar
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from mosque_calendar.hijri.models import HijriDate
from mosque_calendar.holidays.classifier import DST_LABELS, DST_SUMMER, DST_WINTER, DayInfo
from mosque_calendar.prayer.models import DailyPrayerTimes
from mosque_calendar.prayer.overrides import apply_overrides
from mosque_calendar.views.texts import EID_FALLBACK_LABEL, FRIDAY, MONTHS_FR, MONTHS_TA, weekday_names

logger = logging.getLogger(__name__)


@dataclass
class DayRow:
    day: date
    hijri: HijriDate
    times: DailyPrayerTimes
    info: DayInfo

    @property
    def is_friday(self) -> bool:
        return self.day.weekday() == FRIDAY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "weekday": weekday_names(self.day.weekday()),
            "is_friday": self.is_friday,
            "is_highlighted": self.is_friday or self.info.is_special,
            "hijri": self.hijri.to_dict(),
            "prayer_times": self.times.as_dict(),
            "day_info": self.info.to_dict(),
        }


@dataclass
class MonthView:
    year: int
    month: int
    rows: List[DayRow] = field(default_factory=list)
    legends: Dict[str, Any] = field(default_factory=dict)
    titles: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "titles": dict(self.titles),
            "legends": dict(self.legends),
            "days": [row.to_dict() for row in self.rows],
        }


def build_day(ctx, day: date, overrides: Optional[Dict[str, Dict[str, str]]] = None) -> DayRow:
    """Hijri date, prayer times and classification of a single day."""
    hijri = ctx.converter.convert(day)
    times = apply_overrides(day, ctx.calculator.compute_times(day), overrides)
    info = ctx.classifier.classify(day, hijri, ctx.calendar)
    return DayRow(day=day, hijri=hijri, times=times, info=info)


def _legends(month: int, rows: List[DayRow]) -> Dict[str, Any]:
    dst = None
    if month == 3:
        dst = {"direction": DST_SUMMER, "label": DST_LABELS[DST_SUMMER]}
    elif month == 10:
        dst = {"direction": DST_WINTER, "label": DST_LABELS[DST_WINTER]}

    eid = None
    public_holiday = False
    new_moon = None
    school_names: List[str] = []
    for row in rows:
        if row.info.is_eid:
            eid = row.info.label or EID_FALLBACK_LABEL
        if row.info.is_public_holiday:
            public_holiday = True
        if row.info.is_school_holiday and row.info.school_holiday_name not in school_names:
            school_names.append(row.info.school_holiday_name)
        if row.info.is_new_moon:
            new_moon = row.hijri.month_name_fr

    return {
        "dst": dst,
        "eid": eid,
        "school_holidays": " / ".join(school_names) if school_names else None,
        "public_holiday": public_holiday,
        "new_moon": new_moon,
    }


def _titles(year: int, month: int, first: HijriDate, last: HijriDate) -> Dict[str, Any]:
    hijri_fr = ""
    hijri_ar = ""
    if first.month_name_fr and last.month_name_fr:
        if first.month_name_fr == last.month_name_fr:
            hijri_fr = f"{first.month_name_fr} {first.year}"
            hijri_ar = f"{first.month_name_ar} {first.year_localized}"
        else:
            hijri_fr = f"{first.month_name_fr} / {last.month_name_fr} {last.year}"
            hijri_ar = f"{first.month_name_ar} / {last.month_name_ar} {last.year_localized}"
    return {
        "month_fr": MONTHS_FR[month - 1],
        "month_ta": MONTHS_TA[month - 1],
        "year": year,
        "hijri_fr": hijri_fr,
        "hijri_ar": hijri_ar,
    }


def build_month(ctx, year: int, month: int) -> MonthView:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    days_in_month = calendar.monthrange(year, month)[1]
    overrides = getattr(ctx, "overrides", None)
    rows = [build_day(ctx, date(year, month, d), overrides) for d in range(1, days_in_month + 1)]
    logger.debug(f"Built month view {year}-{month:02d} ({len(rows)} days)")
    return MonthView(
        year=year,
        month=month,
        rows=rows,
        legends=_legends(month, rows),
        titles=_titles(year, month, rows[0].hijri, rows[-1].hijri),
    )


def build_year(ctx, year: int) -> List[MonthView]:
    return [build_month(ctx, year, month) for month in range(1, 13)]
