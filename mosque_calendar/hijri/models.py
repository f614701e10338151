from dataclasses import dataclass, field
from typing import Dict

LANGUAGES = ("fr", "en", "ar")


@dataclass(frozen=True)
class HijriDate:
    """Hijri date as displayed on the calendar.

    day and year are strings so that the unknown sentinel can carry "?".
    month_names holds the localised month name per language; month_key is the
    canonical month key, empty when the month could not be identified.
    """
    day: str
    month_names: Dict[str, str] = field(default_factory=dict)
    month_key: str = ""
    year: str = ""
    year_localized: str = ""

    @property
    def month_name_fr(self) -> str:
        return self.month_names.get("fr", "")

    @property
    def month_name_ar(self) -> str:
        return self.month_names.get("ar", "")

    @property
    def is_known(self) -> bool:
        return self.day != "?"

    def to_dict(self) -> Dict[str, object]:
        return {
            "day": self.day,
            "month_names": dict(self.month_names),
            "month_key": self.month_key,
            "year": self.year,
            "year_localized": self.year_localized,
        }


UNKNOWN_HIJRI_DATE = HijriDate(day="?", month_names={lang: "" for lang in LANGUAGES})
