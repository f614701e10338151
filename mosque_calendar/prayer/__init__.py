from .calculator import FAJR_ANGLE, ISHA_ANGLE, PrayerTimeCalculator, format_instant
from .models import PRAYER_NAMES, TIME_SENTINEL, DailyPrayerTimes, PrayerTimesConfig
from .overrides import apply_overrides, load_overrides

__all__ = [
    "FAJR_ANGLE",
    "ISHA_ANGLE",
    "PrayerTimeCalculator",
    "format_instant",
    "PRAYER_NAMES",
    "TIME_SENTINEL",
    "DailyPrayerTimes",
    "PrayerTimesConfig",
    "apply_overrides",
    "load_overrides",
]
