"""Localised labels printed on the calendar pages. Weekday lists start on Monday."""

MONTHS_FR = [
    "Janvier", "Février", "Mars", "Avril", "Mai", "Juin",
    "Juillet", "Août", "Septembre", "Octobre", "Novembre", "Décembre",
]

MONTHS_TA = [
    "ஜனவரி", "பிப்ரவரி", "மார்ச்", "ஏப்ரல்", "மே", "ஜூன்",
    "ஜூலை", "ஆகஸ்ட்", "செப்டம்பர்", "அக்டோபர்", "நவம்பர்", "டிசம்பர்",
]

DAYS_FR = ["Lundi", "Mardi", "Mercredi", "Jeudi", "Vendredi", "Samedi", "Dimanche"]
DAYS_FR_SHORT = ["Lun", "Mar", "Mer", "Jeu", "Ven", "Sam", "Dim"]
DAYS_AR = ["الإثنين", "الثلاثاء", "الأربعاء", "الخميس", "الجمعة", "السبت", "الأحد"]
DAYS_TA = ["திங்கள்", "செவ்வாய்", "புதன்", "வியாழன்", "வெள்ளி", "சனி", "ஞாயிறு"]

FRIDAY = 4

EID_FALLBACK_LABEL = "Aïd"


def weekday_names(weekday: int) -> dict:
    """Names of a date.weekday() value in every printed language."""
    return {
        "fr": DAYS_FR[weekday],
        "fr_short": DAYS_FR_SHORT[weekday],
        "ar": DAYS_AR[weekday],
        "ta": DAYS_TA[weekday],
    }
