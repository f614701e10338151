from .converter import HijriConverter
from .engines import CivilCalendarEngine, HijriEngine, HijriParts, TabularEngine, engine_is_reliable
from .models import UNKNOWN_HIJRI_DATE, HijriDate
from .months import HIJRI_MONTHS, MONTHS_BY_KEY, normalize_month_name, to_arabic_digits

__all__ = [
    "HijriConverter",
    "HijriEngine",
    "HijriParts",
    "TabularEngine",
    "CivilCalendarEngine",
    "engine_is_reliable",
    "HijriDate",
    "UNKNOWN_HIJRI_DATE",
    "HIJRI_MONTHS",
    "MONTHS_BY_KEY",
    "normalize_month_name",
    "to_arabic_digits",
]
