from .classifier import DST_LABELS, EID_ADHA, EID_FITR, DayClassifier, DayInfo
from .external import CACHE_KEY, ExternalCalendarDataSource
from .models import HolidayCalendar, SchoolHoliday

__all__ = [
    "DST_LABELS",
    "EID_ADHA",
    "EID_FITR",
    "DayClassifier",
    "DayInfo",
    "CACHE_KEY",
    "ExternalCalendarDataSource",
    "HolidayCalendar",
    "SchoolHoliday",
]
