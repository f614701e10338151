"""
Gregorian to Hijri conversion with spelling normalisation, engine fallback
and per-date memoisation.
"""
import logging
from datetime import date, datetime
from typing import Any, MutableMapping, Optional, Union

from mosque_calendar.hijri.engines import (
    CivilCalendarEngine,
    HijriEngine,
    HijriParts,
    TabularEngine,
    engine_is_reliable,
)
from mosque_calendar.hijri.models import LANGUAGES, UNKNOWN_HIJRI_DATE, HijriDate
from mosque_calendar.hijri.months import month_by_index, normalize_month_name, to_arabic_digits

DateLike = Union[date, datetime, str]


class HijriConverter:
    """Convert Gregorian dates to HijriDate. Never raises from convert()."""

    def __init__(
        self,
        engine: Optional[HijriEngine] = None,
        fallback: Optional[HijriEngine] = None,
        cache: Optional[MutableMapping[Any, HijriDate]] = None,
    ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.fallback = fallback or TabularEngine()
        primary = engine if engine is not None else CivilCalendarEngine()

        if engine_is_reliable(primary):
            self.engine = primary
        else:
            self.logger.warning(f"Hijri engine {primary.name} is unreliable, switching to {self.fallback.name}")
            self.engine = self.fallback
        self.logger.info(f"Hijri conversion engine: {self.engine.name}")

        self.cache = cache if cache is not None else {}
        self.cache_hits = 0
        self.cache_misses = 0

    @property
    def using_fallback(self) -> bool:
        return self.engine is self.fallback

    def convert(self, value: DateLike) -> HijriDate:
        """Return the Hijri date for a Gregorian date, or UNKNOWN_HIJRI_DATE on error"""
        moment = self._coerce(value)
        if moment is None:
            self.logger.debug(f"Cannot convert non-date value: {value!r}")
            return UNKNOWN_HIJRI_DATE

        cached = self.cache.get(moment)
        if cached is not None:
            self.cache_hits += 1
            return cached
        self.cache_misses += 1

        day = moment.date() if isinstance(moment, datetime) else moment
        try:
            result = self._convert_with(self.engine, day)
        except Exception as e:
            if self.using_fallback:
                self.logger.warning(f"Hijri conversion failed for {day}: {e}")
                return UNKNOWN_HIJRI_DATE
            self.logger.debug(f"Engine {self.engine.name} failed for {day} ({e}), trying {self.fallback.name}")
            try:
                result = self._convert_with(self.fallback, day)
            except Exception as e2:
                self.logger.warning(f"Hijri conversion failed for {day}: {e2}")
                return UNKNOWN_HIJRI_DATE

        self.cache[moment] = result
        return result

    def _coerce(self, value: Any) -> Optional[Union[date, datetime]]:
        if isinstance(value, (date, datetime)):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                if len(text) == 10:
                    return date.fromisoformat(text)
                return datetime.fromisoformat(text.replace("Z", "+00:00"))
            except ValueError:
                return None
        return None

    def _convert_with(self, engine: HijriEngine, day: date) -> HijriDate:
        parts = engine.to_hijri(day)
        return self._build(parts)

    def _build(self, parts: HijriParts) -> HijriDate:
        hijri_day = int(parts.day)
        if not 1 <= hijri_day <= 30:
            raise ValueError(f"Hijri day out of range: {hijri_day}")

        month = normalize_month_name(parts.month_name)
        if month is None and parts.month_index is not None:
            month = month_by_index(int(parts.month_index))
            if month is not None and parts.month_name:
                self.logger.debug(f"Unknown month spelling {parts.month_name!r}, matched by index {parts.month_index}")

        if month is None:
            raw = (parts.month_name or "").strip()
            self.logger.warning(f"Unrecognised Hijri month {raw!r}, passing it through")
            names = {lang: raw for lang in LANGUAGES}
            key = ""
        else:
            names = dict(month.names)
            key = month.key

        year = str(int(parts.year))
        return HijriDate(
            day=str(hijri_day),
            month_names=names,
            month_key=key,
            year=year,
            year_localized=to_arabic_digits(year),
        )
