"""
Thin adapter over the adhanpy astronomical solver.

The solver receives the configured calculation method (with its own minute
adjustments), fixed 18° Fajr/Isha angles, the configured madhab, the
"seventh of the night" high latitude rule and the per-prayer minute
adjustments. Output instants are formatted as zero-padded "HH:MM" in the
configured time zone.
"""
import logging
from datetime import date, datetime
from typing import Any, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from adhanpy.PrayerTimes import PrayerTimes
from adhanpy.calculation.CalculationMethod import CalculationMethod
from adhanpy.calculation.CalculationParameters import CalculationParameters
from adhanpy.calculation.HighLatitudeRule import HighLatitudeRule
from adhanpy.calculation.Madhab import Madhab
from adhanpy.calculation.PrayerAdjustments import PrayerAdjustments

from mosque_calendar.prayer.models import (
    ASR_METHODS,
    PRAYER_NAMES,
    TIME_SENTINEL,
    DailyPrayerTimes,
    PrayerTimesConfig,
)

FAJR_ANGLE = 18.0
ISHA_ANGLE = 18.0

DEFAULT_METHOD = CalculationMethod.MUSLIM_WORLD_LEAGUE

_METHOD_ALIASES = {"other": "none", "custom": "none", "mwl": "muslimworldleague", "isna": "northamerica"}


def resolve_method(name: Optional[str]) -> Optional[CalculationMethod]:
    """Map "MuslimWorldLeague", "MUSLIM_WORLD_LEAGUE", "muslim-world-league"... to the adhanpy enum."""
    key = "".join(c for c in (name or "").lower() if c.isalnum())
    key = _METHOD_ALIASES.get(key, key)
    for method in CalculationMethod:
        if method.name.replace("_", "").lower() == key:
            return method
    return None


def format_instant(value: Any, tz: Optional[ZoneInfo] = None) -> str:
    """Format a solver instant as HH:MM, or the sentinel for None/invalid values."""
    if not isinstance(value, datetime):
        return TIME_SENTINEL
    if tz is not None and value.tzinfo is not None:
        value = value.astimezone(tz)
    return f"{value.hour:02d}:{value.minute:02d}"


class PrayerTimeCalculator:
    """Computes DailyPrayerTimes once initialized with a PrayerTimesConfig."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self._config: Optional[PrayerTimesConfig] = None
        self._coordinates = None
        self._parameters: Optional[CalculationParameters] = None
        self._tz: Optional[ZoneInfo] = None

    @property
    def is_initialized(self) -> bool:
        return self._parameters is not None and self._coordinates is not None

    @property
    def config(self) -> Optional[PrayerTimesConfig]:
        return self._config

    def initialize(self, config: Optional[PrayerTimesConfig]) -> bool:
        """Build solver parameters from config. Unchanged config keeps existing state."""
        if config is None:
            self.logger.warning("Prayer calculator not initialized: no configuration")
            return self.is_initialized

        if self.is_initialized and config == self._config:
            self.logger.debug("Prayer calculator already initialized with this configuration")
            return True

        try:
            self._validate(config)
            tz = ZoneInfo(config.timezone)
        except (ValueError, ZoneInfoNotFoundError) as e:
            self.logger.error(f"Invalid prayer configuration: {e}")
            return self.is_initialized

        method = resolve_method(config.calculation_method)
        if method is None:
            self.logger.warning(f"Unknown calculation method {config.calculation_method!r}, using {DEFAULT_METHOD.name}")
            method = DEFAULT_METHOD

        if method is CalculationMethod.NONE:
            parameters = CalculationParameters(fajr_angle=FAJR_ANGLE, isha_angle=ISHA_ANGLE)
        else:
            # Angles set by the method are overridden
            parameters = CalculationParameters(method=method)
            parameters.fajr_angle = FAJR_ANGLE
            parameters.isha_angle = ISHA_ANGLE
        parameters.madhab = Madhab.HANAFI if config.asr_method.lower() == "hanafi" else Madhab.SHAFI
        parameters.high_latitude_rule = HighLatitudeRule.SEVENTH_OF_THE_NIGHT
        parameters.adjustments = PrayerAdjustments(**{name: int(config.adjustments.get(name, 0)) for name in PRAYER_NAMES})

        self._coordinates = (config.latitude, config.longitude)
        self._parameters = parameters
        self._tz = tz
        self._config = config.copy()
        self.logger.info(
            f"Prayer calculator initialized: lat={config.latitude}, lng={config.longitude}, "
            f"tz={config.timezone}, method={method.name}, asr={config.asr_method}"
        )
        return True

    def _validate(self, config: PrayerTimesConfig) -> None:
        if not (-90 <= config.latitude <= 90) or not (-180 <= config.longitude <= 180):
            raise ValueError("Latitude must be between -90 and 90, longitude between -180 and 180")
        if config.asr_method.capitalize() not in ASR_METHODS:
            raise ValueError(f"Unknown Asr juristic method: {config.asr_method}")

    def compute_times(self, day: Union[date, datetime]) -> DailyPrayerTimes:
        """Return formatted prayer times for a date; all sentinels if not initialized"""
        if not self.is_initialized:
            return DailyPrayerTimes.unavailable()

        try:
            times = PrayerTimes(
                self._coordinates,
                datetime(day.year, day.month, day.day),
                calculation_parameters=self._parameters,
                time_zone=self._tz,
            )
        except Exception as e:
            self.logger.warning(f"Prayer time calculation failed for {day}: {e}")
            return DailyPrayerTimes.unavailable()

        return DailyPrayerTimes(**{name: format_instant(getattr(times, name, None), self._tz) for name in PRAYER_NAMES})
