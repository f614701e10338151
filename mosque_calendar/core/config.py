"""
Application configuration: YAML file merged over built-in defaults, with
values taken from the environment (and an optional .env file).
"""
import copy
import logging
import os
import re
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import yaml

from mosque_calendar.holidays.models import HolidayCalendar
from mosque_calendar.prayer.models import PRAYER_NAMES, PrayerTimesConfig

logger = logging.getLogger(__name__)

_ENV_LINE = re.compile(r'^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$')
_ENV_REF = re.compile(r'^\$\{([^}]+)\}$|^\$([A-Za-z_][A-Za-z0-9_]*)$')

DEFAULT_CONFIG: Dict[str, Any] = {
    "location": {
        "lat": 48.9322,
        "lng": 2.3967,
        "timezone": "Europe/Paris",
    },
    "prayer": {
        "calculation_method": "MuslimWorldLeague",
        "asr_method": "Shafi",
        "adjustments": {name: 0 for name in PRAYER_NAMES},
    },
    "holidays": {
        "school": [],
        "public": {},
    },
    "external": {
        "enabled": True,
        "public_holidays_url": None,
        "school_holidays_url": None,
        "zone": "Zone C",
        "location": "Créteil",
        "since": None,
        "ttl_days": 30,
        "timeout": 10,
    },
    "database": {
        "path": None,
    },
    "clients": {
        "directory": "clients",
        "default": None,
    },
    "overrides": {
        "path": "data/ramadan_overrides.json",
    },
    "api": {
        "enabled": False,
        "host": "127.0.0.1",
        "port": 8765,
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return base updated recursively with override (nested dicts merged, other values replaced)."""
    result = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_env_file(candidates: Iterable[Path]) -> Optional[Path]:
    """Export KEY=VALUE lines of the first existing file; variables already set win."""
    env_file = next((p for p in candidates if p.is_file()), None)
    if env_file is None:
        logger.debug("No .env file found")
        return None

    logger.info(f"Reading environment from {env_file}")
    try:
        lines = env_file.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        logger.warning(f"Could not read {env_file}: {e}")
        return None
    for raw in lines:
        match = _ENV_LINE.match(raw.strip())
        if not match or raw.lstrip().startswith('#'):
            continue
        name, value = match.groups()
        os.environ.setdefault(name, value.strip().strip('"\''))
    return env_file


def expand_env(data: Any) -> Any:
    """Replace "${NAME}" / "$NAME" string values by the environment value, when set."""
    if isinstance(data, dict):
        return {key: expand_env(value) for key, value in data.items()}
    if isinstance(data, list):
        return [expand_env(item) for item in data]
    if isinstance(data, str):
        match = _ENV_REF.match(data)
        if match:
            return os.environ.get(match.group(1) or match.group(2), data)
    return data


def diff_config(old: Dict[str, Any], new: Dict[str, Any], prefix: str = "") -> List[Tuple[str, Any, Any]]:
    """Dotted paths whose value differs, as (path, old, new); missing values are None."""
    changes = []
    for key in sorted(set(old) | set(new), key=str):
        path = f"{prefix}.{key}" if prefix else str(key)
        before, after = old.get(key), new.get(key)
        if isinstance(before, dict) and isinstance(after, dict):
            changes.extend(diff_config(before, after, path))
        elif before != after or (key in old) != (key in new):
            changes.append((path, before, after))
    return changes


class Config:
    """YAML configuration. data always holds a complete, defaults-merged mapping."""

    def __init__(self, config_path: Optional[str] = None, create_if_missing: bool = True):
        self.config_file = Path(config_path or "config.yaml").expanduser().resolve()
        self.config_dir = self.config_file.parent
        self.change_callbacks: List[Callable[[Dict[str, Any]], None]] = []
        self.data: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._reloading = False

        logger.debug(f"Config file: {self.config_file}")
        load_env_file([self.config_dir / ".env", Path.cwd() / ".env"])
        if create_if_missing and not self.config_file.exists():
            self._write_defaults()
        self._read()

    def register_change_callback(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        """Register a callback to be called with the new data after reload()"""
        self.change_callbacks.append(callback)

    def reload(self) -> None:
        """Re-read the file, log what changed and notify callbacks"""
        if self._reloading:
            return
        self._reloading = True
        try:
            previous = copy.deepcopy(self.data)
            self._read()
            for path, before, after in diff_config(previous, self.data):
                logger.info(f"Config {path}: {before!r} -> {after!r}")
            for callback in self.change_callbacks:
                try:
                    callback(self.data)
                except Exception as e:
                    logger.error(f"Config change callback failed: {e}")
        finally:
            self._reloading = False

    def _write_defaults(self) -> None:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                yaml.safe_dump(DEFAULT_CONFIG, f, allow_unicode=True, sort_keys=False)
            logger.info(f"Wrote default configuration to {self.config_file}")
        except OSError as e:
            logger.warning(f"Could not write default config file {self.config_file}: {e}")

    def _read(self) -> None:
        """Load the file over the defaults. On error the current data is kept."""
        try:
            content = {}
            if self.config_file.exists():
                with open(self.config_file, encoding="utf-8") as f:
                    content = yaml.safe_load(f) or {}
            if not isinstance(content, dict):
                raise ValueError("top level of the config file must be a mapping")
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config {self.config_file}: {e}; keeping current values")
            return

        data = deep_merge(DEFAULT_CONFIG, expand_env(content))
        if data["logging"].get("file"):
            data["logging"]["file"] = os.path.expanduser(data["logging"]["file"])
        self.data = data
        logger.debug(f"Loaded config: {self.data}")

    def resolve_path(self, value: Optional[str]) -> Optional[Path]:
        """Resolve a config path relative to the config file directory"""
        if not value:
            return None
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.config_dir / path

    def prayer_config(self) -> PrayerTimesConfig:
        """PrayerTimesConfig from the location and prayer sections"""
        return PrayerTimesConfig.from_dict({**self.data["location"], **self.data["prayer"]})

    def holiday_calendar(self) -> HolidayCalendar:
        """HolidayCalendar from the static holidays section"""
        return HolidayCalendar.from_dict(self.data.get("holidays"))

    def external_config(self) -> Dict[str, Any]:
        """External source settings, with the location time zone"""
        external = dict(self.data.get("external") or {})
        external.setdefault("timezone", self.data["location"].get("timezone"))
        return external
