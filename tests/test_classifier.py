from datetime import date, datetime, timedelta

from mosque_calendar.hijri.models import UNKNOWN_HIJRI_DATE, HijriDate
from mosque_calendar.hijri.months import MONTHS_BY_KEY
from mosque_calendar.holidays import (
    DST_LABELS,
    EID_ADHA,
    EID_FITR,
    DayClassifier,
    HolidayCalendar,
    SchoolHoliday,
)
from mosque_calendar.holidays.classifier import is_last_sunday_approx

CHRISTMAS = SchoolHoliday(name="Vacances de Noël", start="2026-12-19", end="2027-01-03")


def hijri(day, key):
    month = MONTHS_BY_KEY[key]
    return HijriDate(day=str(day), month_names=dict(month.names), month_key=key, year="1448")


def test_dst_transitions_2027():
    classifier = DayClassifier()
    calendar = HolidayCalendar()
    march = classifier.classify(date(2027, 3, 28), UNKNOWN_HIJRI_DATE, calendar)
    assert march.is_dst_transition
    assert march.dst_direction == "summer"
    assert march.label == DST_LABELS["summer"] == "Heure d'été (+1h)"

    october = classifier.classify(date(2027, 10, 31), UNKNOWN_HIJRI_DATE, calendar)
    assert october.dst_direction == "winter"
    assert october.label == "Heure d'hiver (-1h)"

    assert not classifier.classify(date(2027, 3, 21), UNKNOWN_HIJRI_DATE, calendar).is_dst_transition
    assert not classifier.classify(date(2027, 5, 30), UNKNOWN_HIJRI_DATE, calendar).is_dst_transition


def test_last_sunday_approximation():
    assert is_last_sunday_approx(date(2027, 3, 28))
    assert not is_last_sunday_approx(date(2027, 3, 27))
    assert not is_last_sunday_approx(date(2027, 3, 21))


def test_school_holiday_interval_is_inclusive():
    classifier = DayClassifier()
    calendar = HolidayCalendar(school_holidays=[CHRISTMAS])
    day = date(2026, 12, 19)
    while day <= date(2027, 1, 3):
        info = classifier.classify(day, UNKNOWN_HIJRI_DATE, calendar)
        assert info.is_school_holiday, day
        assert info.school_holiday_name == "Vacances de Noël"
        day += timedelta(days=1)
    assert not classifier.classify(date(2026, 12, 18), UNKNOWN_HIJRI_DATE, calendar).is_school_holiday
    assert not classifier.classify(date(2027, 1, 4), UNKNOWN_HIJRI_DATE, calendar).is_school_holiday


def test_school_holiday_last_instant_of_end_day():
    classifier = DayClassifier()
    calendar = HolidayCalendar(school_holidays=[CHRISTMAS])
    assert classifier.classify(datetime(2027, 1, 3, 23, 59, 59), UNKNOWN_HIJRI_DATE, calendar).is_school_holiday


def test_public_holiday_label():
    classifier = DayClassifier()
    calendar = HolidayCalendar(public_holidays={"2027-05-01": "Fête du Travail"})
    info = classifier.classify(date(2027, 5, 1), UNKNOWN_HIJRI_DATE, calendar)
    assert info.is_public_holiday
    assert info.label == "Fête du Travail"


def test_eid_rules():
    classifier = DayClassifier()
    calendar = HolidayCalendar()
    fitr = classifier.classify(date(2027, 3, 10), hijri(1, "shawwal"), calendar)
    assert fitr.is_eid and fitr.eid_label == EID_FITR
    assert fitr.is_new_moon
    assert fitr.is_special

    adha = classifier.classify(date(2027, 5, 17), hijri(10, "dhu_al_hijja"), calendar)
    assert adha.is_eid and adha.eid_label == EID_ADHA
    assert not adha.is_new_moon

    assert not classifier.classify(date(2027, 3, 11), hijri(2, "shawwal"), calendar).is_eid
    assert not classifier.classify(date(2027, 2, 8), hijri(1, "ramadan"), calendar).is_eid


def test_eid_on_raw_month_name():
    classifier = DayClassifier()
    raw = HijriDate(day="1", month_names={"fr": "Schawwal", "en": "Schawwal", "ar": "Schawwal"})
    assert classifier.classify(date(2027, 3, 10), raw, HolidayCalendar()).eid_label == EID_FITR


def test_label_precedence():
    classifier = DayClassifier()
    calendar = HolidayCalendar(public_holidays={"2027-03-28": "Pâques"})
    dst_over_public = classifier.classify(date(2027, 3, 28), UNKNOWN_HIJRI_DATE, calendar)
    assert dst_over_public.label == DST_LABELS["summer"]

    eid_over_dst = classifier.classify(date(2027, 3, 28), hijri(1, "shawwal"), calendar)
    assert eid_over_dst.label == EID_FITR


def test_unknown_hijri_date_is_not_new_moon():
    info = DayClassifier().classify(date(2027, 1, 1), UNKNOWN_HIJRI_DATE, HolidayCalendar())
    assert not info.is_new_moon
    assert not info.is_eid


def test_intervals_parsed_once_per_mutation():
    classifier = DayClassifier()
    calendar = HolidayCalendar(school_holidays=[CHRISTMAS])
    calendar.register_change_callback(classifier.invalidate)

    for offset in range(40):
        classifier.classify(date(2026, 12, 1) + timedelta(days=offset), UNKNOWN_HIJRI_DATE, calendar)
    assert classifier.parse_count == 1

    calendar.replace_school_holidays([SchoolHoliday(name="Hiver", start="2027-02-13", end="2027-02-28")])
    assert classifier.classify(date(2027, 2, 14), UNKNOWN_HIJRI_DATE, calendar).school_holiday_name == "Hiver"
    assert not classifier.classify(date(2026, 12, 25), UNKNOWN_HIJRI_DATE, calendar).is_school_holiday
    assert classifier.parse_count == 2


def test_revision_change_detected_without_callback():
    classifier = DayClassifier()
    calendar = HolidayCalendar(school_holidays=[CHRISTMAS])
    classifier.classify(date(2026, 12, 20), UNKNOWN_HIJRI_DATE, calendar)
    calendar.merge_public_holidays({"2027-01-01": "Jour de l'an"})
    classifier.classify(date(2026, 12, 20), UNKNOWN_HIJRI_DATE, calendar)
    assert classifier.parse_count == 2


def test_invalid_interval_is_skipped():
    classifier = DayClassifier()
    calendar = HolidayCalendar(school_holidays=[
        SchoolHoliday(name="Broken", start="someday", end="2027-01-03"),
        CHRISTMAS,
    ])
    assert classifier.classify(date(2027, 1, 2), UNKNOWN_HIJRI_DATE, calendar).school_holiday_name == "Vacances de Noël"


def test_merge_public_holidays_is_additive():
    calendar = HolidayCalendar(public_holidays={"2027-01-01": "Jour de l'an"})
    calendar.merge_public_holidays({"2027-05-01": "Fête du Travail"})
    assert calendar.public_holidays == {"2027-01-01": "Jour de l'an", "2027-05-01": "Fête du Travail"}
    assert calendar.revision == 1


def test_calendar_from_dict_skips_invalid_entries():
    calendar = HolidayCalendar.from_dict({
        "school": [{"name": "Noël", "start": "2026-12-19", "end": "2027-01-03"}, {"name": "no dates"}],
        "public": {"2027-11-11": "Armistice"},
    })
    assert calendar.school_holidays == [SchoolHoliday("Noël", "2026-12-19", "2027-01-03")]
    assert calendar.public_holidays == {"2027-11-11": "Armistice"}
