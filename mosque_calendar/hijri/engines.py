"""
Calendar engines that turn a Gregorian date into raw Hijri parts.

Both engines follow the Islamic civil calendar: 30-year cycle with leap years
2, 5, 7, 10, 13, 16, 18, 21, 24, 26 and 29, counted from the Friday epoch
(16 July 622, Julian). CivilCalendarEngine delegates to the convertdate
library. TabularEngine is the same arithmetic written out, used when the
library engine fails the capability probe or cannot convert a given date.
"""
import logging
from abc import ABC, abstractmethod
from collections import namedtuple
from datetime import date
from typing import Iterable

from convertdate import islamic

logger = logging.getLogger(__name__)

# month_index is 1-based and may be None when an engine only reports names.
HijriParts = namedtuple("HijriParts", ["day", "month_index", "month_name", "year"])

# Offset between date.toordinal() and the Julian day number at noon.
JULIAN_DAY_OFFSET = 1721425

# Sample dates checked by the probe: Hijri years must stay well below these.
PROBE_DATES = (date(2021, 3, 1), date(2027, 1, 1), date(2034, 9, 15))


class HijriEngine(ABC):
    """Base class for Gregorian to Hijri engines"""

    name = "engine"

    @abstractmethod
    def to_hijri(self, day: date) -> HijriParts:
        """Convert a Gregorian date. May raise on unsupported dates."""
        pass


class CivilCalendarEngine(HijriEngine):
    """Islamic civil calendar from the convertdate library."""

    name = "islamic_civil"

    def to_hijri(self, day: date) -> HijriParts:
        year, month, hijri_day = islamic.from_gregorian(day.year, day.month, day.day)
        return HijriParts(day=int(hijri_day), month_index=int(month), month_name=None, year=int(year))


class TabularEngine(HijriEngine):
    """Islamic civil calendar computed over the Julian day number."""

    name = "tabular"

    CYCLE_DAYS = 10631
    # Julian day number of 1 Muharram 1 AH (Friday epoch)
    EPOCH = 1948440

    def month_start(self, year: int, month: int) -> int:
        """Julian day number of the first day of a Hijri month"""
        return (
            self.EPOCH
            + (59 * (month - 1) + 1) // 2
            + (year - 1) * 354
            + (3 + 11 * year) // 30
        )

    def to_hijri(self, day: date) -> HijriParts:
        jd = day.toordinal() + JULIAN_DAY_OFFSET
        year = (30 * (jd - self.EPOCH) + 10646) // self.CYCLE_DAYS
        # ceil(elapsed / 29.5) + 1, in integers
        elapsed = jd - 29 - self.month_start(year, 1)
        month = min(12, -((-2 * elapsed) // 59) + 1)
        hijri_day = jd - self.month_start(year, month) + 1
        return HijriParts(day=hijri_day, month_index=month, month_name=None, year=year)


def engine_is_reliable(engine: HijriEngine, samples: Iterable[date] = PROBE_DATES) -> bool:
    """Check that an engine returns plausible Hijri years.

    A Hijri year must be lower than the Gregorian year and sit in the
    [G - 583, G - 576] band for the 2020s-2030s. Engines returning
    Gregorian-like years, or raising, are rejected.
    """
    for sample in samples:
        try:
            parts = engine.to_hijri(sample)
            year = int(parts.year)
            day = int(parts.day)
        except Exception as e:
            logger.warning(f"Hijri engine {engine.name} failed probe on {sample}: {e}")
            return False
        if year >= sample.year or not (sample.year - 583 <= year <= sample.year - 576):
            logger.warning(f"Hijri engine {engine.name} returned implausible year {year} for {sample}")
            return False
        if not 1 <= day <= 30:
            logger.warning(f"Hijri engine {engine.name} returned implausible day {day} for {sample}")
            return False
    return True
