from .month import DayRow, MonthView, build_day, build_month, build_year
from .ramadan import RamadanView, build_ramadan

__all__ = [
    "DayRow",
    "MonthView",
    "build_day",
    "build_month",
    "build_year",
    "RamadanView",
    "build_ramadan",
]
