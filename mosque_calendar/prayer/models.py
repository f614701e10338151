from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional

PRAYER_NAMES = ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha")

TIME_SENTINEL = "--:--"

ASR_METHODS = ("Shafi", "Hanafi")


def _zero_adjustments() -> Dict[str, int]:
    return {name: 0 for name in PRAYER_NAMES}


@dataclass
class PrayerTimesConfig:
    """Location and calculation settings for the prayer time solver.

    adjustments holds per-prayer minute offsets (positive = later).
    """
    latitude: float
    longitude: float
    timezone: str = "Europe/Paris"
    calculation_method: str = "MuslimWorldLeague"
    asr_method: str = "Shafi"
    adjustments: Dict[str, int] = field(default_factory=_zero_adjustments)

    def copy(self) -> "PrayerTimesConfig":
        return replace(self, adjustments=dict(self.adjustments))

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "PrayerTimesConfig":
        """Build from a flat mapping using the keys of the YAML/JSON configs (lat/lng accepted)."""
        latitude = data.get("latitude", data.get("lat"))
        longitude = data.get("longitude", data.get("lng", data.get("lon")))
        if latitude is None or longitude is None:
            raise ValueError("Latitude and longitude must be configured")
        adjustments = _zero_adjustments()
        for name, minutes in (data.get("adjustments") or {}).items():
            if name in adjustments:
                adjustments[name] = int(minutes)
        return cls(
            latitude=float(latitude),
            longitude=float(longitude),
            timezone=str(data.get("timezone") or "Europe/Paris"),
            calculation_method=str(data.get("calculation_method") or data.get("method") or "MuslimWorldLeague"),
            asr_method=str(data.get("asr_method") or data.get("asrMethod") or "Shafi"),
            adjustments=adjustments,
        )


@dataclass(frozen=True)
class DailyPrayerTimes:
    """Six daily markers, each "HH:MM" or "--:--" when not computable."""
    fajr: str = TIME_SENTINEL
    sunrise: str = TIME_SENTINEL
    dhuhr: str = TIME_SENTINEL
    asr: str = TIME_SENTINEL
    maghrib: str = TIME_SENTINEL
    isha: str = TIME_SENTINEL

    @classmethod
    def unavailable(cls) -> "DailyPrayerTimes":
        return cls()

    def as_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in PRAYER_NAMES}

    def with_overrides(self, override: Optional[Mapping[str, str]]) -> "DailyPrayerTimes":
        """Return a copy where known prayer keys are replaced by the override values."""
        if not override:
            return self
        values = {name: str(value) for name, value in override.items() if name in PRAYER_NAMES}
        return replace(self, **values)
