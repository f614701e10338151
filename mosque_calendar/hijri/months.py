"""
Canonical Hijri month table and spelling normalisation.

Calendar engines spell lunar months in many ways (French or English
transliterations, diacritics, apostrophes, hyphens). Every known spelling is
mapped to one of the 12 canonical months below.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HijriMonth:
    """One canonical lunar month. index is 1-based (1 = Muharram)."""
    key: str
    index: int
    names: Dict[str, str]

    @property
    def name_fr(self) -> str:
        return self.names["fr"]

    @property
    def name_ar(self) -> str:
        return self.names["ar"]


HIJRI_MONTHS: Tuple[HijriMonth, ...] = (
    HijriMonth("muharram", 1, {"fr": "Mouharram", "en": "Muharram", "ar": "محرم"}),
    HijriMonth("safar", 2, {"fr": "Safar", "en": "Safar", "ar": "صفر"}),
    HijriMonth("rabi_al_awwal", 3, {"fr": "Rabia al awal", "en": "Rabi al-Awwal", "ar": "ربيع الأول"}),
    HijriMonth("rabi_al_thani", 4, {"fr": "Rabia ath-thani", "en": "Rabi al-Thani", "ar": "ربيع الآخر"}),
    HijriMonth("jumada_al_ula", 5, {"fr": "Joumada al oula", "en": "Jumada al-Ula", "ar": "جمادى الأولى"}),
    HijriMonth("jumada_al_akhira", 6, {"fr": "Joumada ath-thania", "en": "Jumada al-Akhira", "ar": "جمادى الآخرة"}),
    HijriMonth("rajab", 7, {"fr": "Rajab", "en": "Rajab", "ar": "رجب"}),
    HijriMonth("shaban", 8, {"fr": "Chaabane", "en": "Shaban", "ar": "شعبان"}),
    HijriMonth("ramadan", 9, {"fr": "Ramadan", "en": "Ramadan", "ar": "رمضان"}),
    HijriMonth("shawwal", 10, {"fr": "Chawwal", "en": "Shawwal", "ar": "شوال"}),
    HijriMonth("dhu_al_qada", 11, {"fr": "Dhou al qi`da", "en": "Dhu al-Qada", "ar": "ذو القعدة"}),
    HijriMonth("dhu_al_hijja", 12, {"fr": "Dhou al-hijja", "en": "Dhu al-Hijja", "ar": "ذو الحجة"}),
)

MONTHS_BY_KEY: Dict[str, HijriMonth] = {m.key: m for m in HIJRI_MONTHS}

# Spellings observed across calendar engines, lowercase and trimmed.
_VARIANTS: Dict[str, Tuple[str, ...]] = {
    "muharram": (
        "mouharram", "muharram", "muḥarram", "moharram", "muharram al-haram",
    ),
    "safar": (
        "safar", "ṣafar", "saphar",
    ),
    "rabi_al_awwal": (
        "rabia al awal", "rabia al-awal", "rabiʻ i", "rabi' i", "rabi i",
        "rabi al-awwal", "rabi' al-awwal", "rabi’ al-awwal", "rabiʻ al-awwal",
        "rabi al awwal", "rabi ul awwal", "rabīʿ al-awwal",
    ),
    "rabi_al_thani": (
        "rabia ath-thani", "rabia al thani", "rabiʻ ii", "rabi' ii", "rabi ii",
        "rabi al-thani", "rabi' al-thani", "rabi’ al-thani", "rabi al-akhir",
        "rabi' al-akhir", "rabi’ al-akhir", "rabi ul akhir", "rabīʿ al-ākhir",
    ),
    "jumada_al_ula": (
        "joumada al oula", "joumada al-oula", "jumada i", "jumada al-ula",
        "jumada al-oula", "jumada al-awwal", "jumādā al-ūlā",
    ),
    "jumada_al_akhira": (
        "joumada ath-thania", "joumada al-akhira", "jumada ii", "jumada al-akhira",
        "jumada al-akhirah", "jumada al-thani", "jumada al-thaniyah", "jumādā al-ākhirah",
    ),
    "rajab": (
        "rajab", "radjab", "rajab al-murajjab",
    ),
    "shaban": (
        "chaʻban", "chaabane", "cha'ban", "chaabân", "shaʻban", "sha'ban", "sha’ban",
        "shaban", "shaaban", "shaʿbān",
    ),
    "ramadan": (
        "ramadan", "ramadhan", "ramazan", "ramaḍān",
    ),
    "shawwal": (
        "chawwal", "schawwal", "shawwal", "shawal", "chaoual", "shawwāl",
    ),
    "dhu_al_qada": (
        "dhou al qi`da", "dhou al qi’da", "dhou al-qi'da", "dhuʻl-qiʻdah",
        "dhu'l-qi'dah", "dhu al-qi'dah", "dhu al-qi’dah", "dhu al-qadah",
        "dhul qadah", "dhu al-qada", "dhū al-qaʿdah",
    ),
    "dhu_al_hijja": (
        "dhou al-hijja", "dhou al hijja", "dhou al-hijjah", "dhuʻl-hijjah",
        "dhu'l-hijjah", "dhu al-hijjah", "dhu al-hijja", "dhul hijjah",
        "dhū al-ḥijjah",
    ),
}


def _build_lookup() -> Dict[str, HijriMonth]:
    lookup: Dict[str, HijriMonth] = {}
    for key, spellings in _VARIANTS.items():
        month = MONTHS_BY_KEY[key]
        for spelling in spellings + (month.name_ar, month.names["fr"].lower(), month.names["en"].lower()):
            lookup[spelling.strip().lower()] = month
    return lookup


MONTH_LOOKUP: Dict[str, HijriMonth] = _build_lookup()

ARABIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"


def normalize_month_name(raw: Optional[str]) -> Optional[HijriMonth]:
    """Return the canonical month for an engine spelling, or None if unknown."""
    if not raw:
        return None
    return MONTH_LOOKUP.get(raw.strip().lower())


def month_by_index(index: int) -> Optional[HijriMonth]:
    """Return the canonical month at a 1-based position, or None if out of range."""
    if 1 <= index <= len(HIJRI_MONTHS):
        return HIJRI_MONTHS[index - 1]
    return None


def to_arabic_digits(text: str) -> str:
    """Replace Latin digits with Eastern Arabic digits."""
    return "".join(ARABIC_DIGITS[int(ch)] if "0" <= ch <= "9" else ch for ch in text)
