"""
Date-keyed prayer time overrides (typically the mosque's own Ramadan timetable).

File format: {"YYYY-MM-DD": {"fajr": "05:40", "sunrise": "07:20", ...}, ...}
"""
import json
import logging
from datetime import date
from pathlib import Path
from typing import Dict, Optional, Union

from mosque_calendar.prayer.models import PRAYER_NAMES, DailyPrayerTimes

logger = logging.getLogger(__name__)

Overrides = Dict[str, Dict[str, str]]


def load_overrides(path: Optional[Union[str, Path]]) -> Overrides:
    """Load the override file; a missing or malformed file yields an empty mapping."""
    if not path:
        return {}
    path = Path(path).expanduser()
    if not path.exists():
        logger.debug(f"No prayer time override file at {path}")
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Error reading override file {path}: {e}")
        return {}
    if not isinstance(raw, dict):
        logger.warning(f"Ignoring override file {path}: root must be an object")
        return {}

    overrides: Overrides = {}
    for key, entry in raw.items():
        if not isinstance(entry, dict):
            logger.warning(f"Ignoring override for {key}: not an object")
            continue
        try:
            date.fromisoformat(key)
        except ValueError:
            logger.warning(f"Ignoring override with invalid date key: {key}")
            continue
        overrides[key] = {name: str(value) for name, value in entry.items() if name in PRAYER_NAMES}
    logger.info(f"Loaded {len(overrides)} prayer time overrides from {path}")
    return overrides


def apply_overrides(day: date, times: DailyPrayerTimes, overrides: Optional[Overrides]) -> DailyPrayerTimes:
    """Return times patched with the override entry for this date, if any."""
    if not overrides:
        return times
    return times.with_overrides(overrides.get(day.isoformat()[:10]))
