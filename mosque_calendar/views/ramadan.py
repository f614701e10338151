"""
Ramadan timetable: every day of a Gregorian year that falls in Hijri Ramadan,
with the mosque's override times applied.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List

from mosque_calendar.views.month import DayRow, build_day

logger = logging.getLogger(__name__)

RAMADAN_KEY = "ramadan"


@dataclass
class RamadanView:
    year: int
    hijri_year: str = ""
    hijri_year_localized: str = ""
    rows: List[DayRow] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "hijri_year": self.hijri_year,
            "hijri_year_localized": self.hijri_year_localized,
            "days": [row.to_dict() for row in self.rows],
        }


def build_ramadan(ctx, year: int) -> RamadanView:
    """Scan the Gregorian year and keep the Ramadan days.

    The Hijri year shown is the one of the first Ramadan day found.
    """
    view = RamadanView(year=year)
    overrides = getattr(ctx, "overrides", None)
    day = date(year, 1, 1)
    end = date(year, 12, 31)
    while day <= end:
        hijri = ctx.converter.convert(day)
        if hijri.month_key == RAMADAN_KEY:
            row = build_day(ctx, day, overrides)
            if not view.rows:
                view.hijri_year = row.hijri.year
                view.hijri_year_localized = row.hijri.year_localized
            view.rows.append(row)
        day += timedelta(days=1)

    if not view.rows:
        logger.warning(f"No Ramadan day found in {year}")
    else:
        logger.info(f"Ramadan {view.hijri_year}: {view.rows[0].day} to {view.rows[-1].day} ({len(view.rows)} days)")
    return view
