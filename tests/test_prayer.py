import json
from dataclasses import replace
from datetime import date

import pytest

from adhanpy.calculation.CalculationMethod import CalculationMethod

from mosque_calendar.prayer import (
    PRAYER_NAMES,
    TIME_SENTINEL,
    DailyPrayerTimes,
    PrayerTimeCalculator,
    PrayerTimesConfig,
    apply_overrides,
    format_instant,
    load_overrides,
)
from mosque_calendar.prayer.calculator import resolve_method

PARIS = PrayerTimesConfig(latitude=48.9322, longitude=2.3967, timezone="Europe/Paris")


def _minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def test_uninitialized_returns_sentinels():
    calculator = PrayerTimeCalculator()
    assert not calculator.is_initialized
    times = calculator.compute_times(date(2027, 6, 21))
    assert times.as_dict() == {name: TIME_SENTINEL for name in PRAYER_NAMES}


def test_summer_solstice_paris_is_ordered():
    calculator = PrayerTimeCalculator()
    assert calculator.initialize(PARIS)
    times = calculator.compute_times(date(2027, 6, 21)).as_dict()
    values = [times[name] for name in PRAYER_NAMES]
    assert TIME_SENTINEL not in values
    minutes = [_minutes(v) for v in values]
    assert minutes == sorted(minutes)
    assert len(set(minutes)) == len(minutes)


def test_times_are_zero_padded():
    calculator = PrayerTimeCalculator()
    calculator.initialize(PARIS)
    for value in calculator.compute_times(date(2027, 1, 15)).as_dict().values():
        assert len(value) == 5 and value[2] == ":"


def test_initialize_is_idempotent():
    calculator = PrayerTimeCalculator()
    assert calculator.initialize(PARIS)
    parameters = calculator._parameters
    assert calculator.initialize(PARIS.copy())
    assert calculator._parameters is parameters


def test_initialize_rebuilds_on_change():
    calculator = PrayerTimeCalculator()
    calculator.initialize(PARIS)
    parameters = calculator._parameters
    hanafi = PARIS.copy()
    hanafi.asr_method = "Hanafi"
    assert calculator.initialize(hanafi)
    assert calculator._parameters is not parameters


def test_hanafi_asr_is_later():
    shafi = PrayerTimeCalculator()
    shafi.initialize(PARIS)
    hanafi_config = PARIS.copy()
    hanafi_config.asr_method = "Hanafi"
    hanafi = PrayerTimeCalculator()
    hanafi.initialize(hanafi_config)
    day = date(2027, 4, 1)
    assert _minutes(hanafi.compute_times(day).asr) > _minutes(shafi.compute_times(day).asr)


def test_adjustments_shift_times():
    base = PrayerTimeCalculator()
    base.initialize(PARIS)
    shifted_config = PARIS.copy()
    shifted_config.adjustments["maghrib"] = 5
    shifted = PrayerTimeCalculator()
    shifted.initialize(shifted_config)
    day = date(2027, 4, 1)
    assert _minutes(shifted.compute_times(day).maghrib) - _minutes(base.compute_times(day).maghrib) == 5


@pytest.mark.parametrize(
    "config",
    [
        None,
        PrayerTimesConfig(latitude=120.0, longitude=2.0),
        PrayerTimesConfig(latitude=48.0, longitude=2.0, asr_method="Maliki"),
        PrayerTimesConfig(latitude=48.0, longitude=2.0, timezone="Mars/Olympus"),
    ],
)
def test_invalid_config_keeps_calculator_uninitialized(config):
    calculator = PrayerTimeCalculator()
    assert not calculator.initialize(config)
    assert not calculator.is_initialized


def test_solver_failure_returns_sentinels(monkeypatch):
    calculator = PrayerTimeCalculator()
    calculator.initialize(PARIS)

    def boom(*args, **kwargs):
        raise RuntimeError("no sunrise")

    monkeypatch.setattr("mosque_calendar.prayer.calculator.PrayerTimes", boom)
    assert calculator.compute_times(date(2027, 6, 21)) == DailyPrayerTimes.unavailable()


def test_format_instant_rejects_non_datetimes():
    assert format_instant(None) == TIME_SENTINEL
    assert format_instant(float("nan")) == TIME_SENTINEL
    assert format_instant("12:00") == TIME_SENTINEL


def test_config_from_dict_accepts_short_keys():
    config = PrayerTimesConfig.from_dict({"lat": 1.5, "lng": 2.5, "asrMethod": "Hanafi", "adjustments": {"isha": 3}})
    assert (config.latitude, config.longitude, config.asr_method) == (1.5, 2.5, "Hanafi")
    assert config.adjustments["isha"] == 3
    assert config.adjustments["fajr"] == 0


def test_config_from_dict_requires_coordinates():
    with pytest.raises(ValueError):
        PrayerTimesConfig.from_dict({"lat": 1.0})


def test_overrides_patch_only_configured_dates(tmp_path):
    path = tmp_path / "overrides.json"
    path.write_text(json.dumps({
        "2027-02-10": {"fajr": "06:00", "isha": "19:40", "iftar_note": "dates"},
        "not-a-date": {"fajr": "01:00"},
    }), encoding="utf-8")
    overrides = load_overrides(path)
    assert list(overrides) == ["2027-02-10"]
    assert overrides["2027-02-10"] == {"fajr": "06:00", "isha": "19:40"}

    computed = DailyPrayerTimes("06:12", "08:01", "13:05", "15:38", "18:09", "19:37")
    patched = apply_overrides(date(2027, 2, 10), computed, overrides)
    assert patched.fajr == "06:00"
    assert patched.isha == "19:40"
    assert patched.dhuhr == "13:05"
    assert apply_overrides(date(2027, 2, 11), computed, overrides) == computed


def test_missing_or_malformed_override_file(tmp_path):
    assert load_overrides(tmp_path / "missing.json") == {}
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_overrides(broken) == {}
    assert load_overrides(None) == {}


@pytest.mark.parametrize(
    "name,expected",
    [
        ("MuslimWorldLeague", CalculationMethod.MUSLIM_WORLD_LEAGUE),
        ("MUSLIM_WORLD_LEAGUE", CalculationMethod.MUSLIM_WORLD_LEAGUE),
        ("muslim-world-league", CalculationMethod.MUSLIM_WORLD_LEAGUE),
        ("Karachi", CalculationMethod.KARACHI),
        ("Other", CalculationMethod.NONE),
        ("Nowhere", None),
    ],
)
def test_resolve_method(name, expected):
    assert resolve_method(name) is expected


def test_configured_method_reaches_solver():
    calculator = PrayerTimeCalculator()
    calculator.initialize(PARIS)
    parameters = calculator._parameters
    assert parameters.method is CalculationMethod.MUSLIM_WORLD_LEAGUE
    assert parameters.method_adjustments.dhuhr == 1
    assert parameters.fajr_angle == 18
    assert parameters.isha_angle == 18


def test_method_adjustment_shifts_dhuhr():
    with_method = PrayerTimeCalculator()
    with_method.initialize(PARIS)
    angles_only = PrayerTimeCalculator()
    angles_only.initialize(replace(PARIS, calculation_method="Other"))
    day = date(2027, 6, 21)
    assert _minutes(with_method.compute_times(day).dhuhr) == _minutes(angles_only.compute_times(day).dhuhr) + 1


def test_unknown_method_uses_muslim_world_league():
    calculator = PrayerTimeCalculator()
    assert calculator.initialize(replace(PARIS, calculation_method="Nowhere"))
    assert calculator._parameters.method is CalculationMethod.MUSLIM_WORLD_LEAGUE
