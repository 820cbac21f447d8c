"""Canonical surah order and rank lookup.

Feed titles spell chapter names inconsistently ("سورة البقرة", "سورة البقره",
"Surah Al-Baqarah", "Surat al baqara"). Every known spelling is reduced to a
lookup key so a label can be ranked by its position in the mushaf.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import Episode
from .text import normalize

logger = logging.getLogger(__name__)

UNRANKED = sys.maxsize
MAX_NAME_TOKENS = 4

# Words that introduce a chapter name rather than being part of it
SURAH_MARKERS = frozenset({"سوره", "سورت", "surah", "surat", "sura", "soorah"})
# Latin transliteration of the definite article
LATIN_ARTICLES = frozenset({"al", "an", "ar", "as", "ash", "at", "ad", "adh", "az", "ath", "aal", "ali", "el"})

_NON_WORD_PATTERN = re.compile(r"[^\w\s]|_")
_REPEATED_LETTER_PATTERN = re.compile(r"(.)\1+")
TATWEEL = "\u0640"

# (canonical Arabic name, transliterations and alternative names)
SURAH_NAMES: Sequence[Tuple[str, Sequence[str]]] = (
    ("الفاتحة", ("Al-Fatihah", "Al-Fatiha", "The Opening", "أم الكتاب")),
    ("البقرة", ("Al-Baqarah", "Al-Baqara", "The Cow")),
    ("آل عمران", ("Aal-Imran", "Al-Imran", "Ali Imran", "Aal-e-Imran")),
    ("النساء", ("An-Nisa", "An-Nisaa")),
    ("المائدة", ("Al-Maidah", "Al-Ma'idah", "المايدة")),
    ("الأنعام", ("Al-An'am", "Al-Anaam")),
    ("الأعراف", ("Al-A'raf", "Al-Araaf")),
    ("الأنفال", ("Al-Anfal",)),
    ("التوبة", ("At-Tawbah", "At-Taubah", "Bara'ah", "براءة")),
    ("يونس", ("Yunus", "Younus")),
    ("هود", ("Hud", "Hood")),
    ("يوسف", ("Yusuf", "Yousuf", "Yousef")),
    ("الرعد", ("Ar-Ra'd", "Ar-Raad")),
    ("إبراهيم", ("Ibrahim", "Ebrahim")),
    ("الحجر", ("Al-Hijr",)),
    ("النحل", ("An-Nahl",)),
    ("الإسراء", ("Al-Isra", "Al-Israa", "Bani Israil", "بني إسرائيل")),
    ("الكهف", ("Al-Kahf",)),
    ("مريم", ("Maryam", "Mariam")),
    ("طه", ("Taha", "Ta-Ha")),
    ("الأنبياء", ("Al-Anbiya", "Al-Anbiyaa")),
    ("الحج", ("Al-Hajj", "Al-Haj")),
    ("المؤمنون", ("Al-Mu'minun", "Al-Muminoon", "المؤمنين")),
    ("النور", ("An-Nur", "An-Noor")),
    ("الفرقان", ("Al-Furqan",)),
    ("الشعراء", ("Ash-Shu'ara", "Ash-Shuaraa")),
    ("النمل", ("An-Naml",)),
    ("القصص", ("Al-Qasas",)),
    ("العنكبوت", ("Al-Ankabut", "Al-Ankaboot")),
    ("الروم", ("Ar-Rum", "Ar-Room")),
    ("لقمان", ("Luqman", "Lukman")),
    ("السجدة", ("As-Sajdah", "As-Sajda")),
    ("الأحزاب", ("Al-Ahzab",)),
    ("سبأ", ("Saba", "Sabaa", "سبا")),
    ("فاطر", ("Fatir", "Faatir")),
    ("يس", ("Ya-Sin", "Yasin", "Ya-Seen", "ياسين")),
    ("الصافات", ("As-Saffat", "As-Saaffaat")),
    ("ص", ("Sad", "Saad", "صاد")),
    ("الزمر", ("Az-Zumar",)),
    ("غافر", ("Ghafir", "Al-Mu'min", "المؤمن")),
    ("فصلت", ("Fussilat", "Ha-Mim As-Sajdah", "حم السجدة")),
    ("الشورى", ("Ash-Shura", "Ash-Shoora")),
    ("الزخرف", ("Az-Zukhruf",)),
    ("الدخان", ("Ad-Dukhan",)),
    ("الجاثية", ("Al-Jathiyah", "Al-Jaathiya")),
    ("الأحقاف", ("Al-Ahqaf",)),
    ("محمد", ("Muhammad", "Mohammed", "Al-Qital", "القتال")),
    ("الفتح", ("Al-Fath",)),
    ("الحجرات", ("Al-Hujurat",)),
    ("ق", ("Qaf", "قاف")),
    ("الذاريات", ("Adh-Dhariyat", "Az-Zariyat")),
    ("الطور", ("At-Tur", "At-Toor")),
    ("النجم", ("An-Najm",)),
    ("القمر", ("Al-Qamar",)),
    ("الرحمن", ("Ar-Rahman", "Ar-Rahmaan")),
    ("الواقعة", ("Al-Waqi'ah", "Al-Waqiah")),
    ("الحديد", ("Al-Hadid", "Al-Hadeed")),
    ("المجادلة", ("Al-Mujadilah", "Al-Mujadalah")),
    ("الحشر", ("Al-Hashr",)),
    ("الممتحنة", ("Al-Mumtahanah", "Al-Mumtahinah")),
    ("الصف", ("As-Saff", "As-Saf")),
    ("الجمعة", ("Al-Jumu'ah", "Al-Jumuah", "Al-Jumah")),
    ("المنافقون", ("Al-Munafiqun", "Al-Munafiqoon", "المنافقين")),
    ("التغابن", ("At-Taghabun",)),
    ("الطلاق", ("At-Talaq",)),
    ("التحريم", ("At-Tahrim", "At-Tahreem")),
    ("الملك", ("Al-Mulk", "تبارك")),
    ("القلم", ("Al-Qalam", "ن")),
    ("الحاقة", ("Al-Haqqah", "Al-Haaqqa")),
    ("المعارج", ("Al-Ma'arij", "Al-Maarij")),
    ("نوح", ("Nuh", "Nooh")),
    ("الجن", ("Al-Jinn",)),
    ("المزمل", ("Al-Muzzammil", "Al-Muzammil")),
    ("المدثر", ("Al-Muddaththir", "Al-Muddathir")),
    ("القيامة", ("Al-Qiyamah", "Al-Qiyama")),
    ("الإنسان", ("Al-Insan", "Ad-Dahr", "الدهر")),
    ("المرسلات", ("Al-Mursalat",)),
    ("النبأ", ("An-Naba", "An-Nabaa", "النبا", "عم")),
    ("النازعات", ("An-Nazi'at", "An-Naziat")),
    ("عبس", ("Abasa", "'Abasa")),
    ("التكوير", ("At-Takwir", "At-Takweer")),
    ("الانفطار", ("Al-Infitar",)),
    ("المطففين", ("Al-Mutaffifin", "Al-Mutaffifeen")),
    ("الانشقاق", ("Al-Inshiqaq",)),
    ("البروج", ("Al-Buruj", "Al-Burooj")),
    ("الطارق", ("At-Tariq", "At-Taariq")),
    ("الأعلى", ("Al-A'la", "Al-Aala")),
    ("الغاشية", ("Al-Ghashiyah", "Al-Ghaashiya")),
    ("الفجر", ("Al-Fajr",)),
    ("البلد", ("Al-Balad",)),
    ("الشمس", ("Ash-Shams",)),
    ("الليل", ("Al-Layl", "Al-Lail")),
    ("الضحى", ("Ad-Duha", "Ad-Dhuha")),
    ("الشرح", ("Ash-Sharh", "Al-Inshirah", "الانشراح")),
    ("التين", ("At-Tin", "At-Teen")),
    ("العلق", ("Al-Alaq", "اقرأ")),
    ("القدر", ("Al-Qadr",)),
    ("البينة", ("Al-Bayyinah", "Al-Bayyina")),
    ("الزلزلة", ("Az-Zalzalah", "Az-Zilzal", "الزلزال")),
    ("العاديات", ("Al-Adiyat", "Al-Aadiyaat")),
    ("القارعة", ("Al-Qari'ah", "Al-Qariah")),
    ("التكاثر", ("At-Takathur",)),
    ("العصر", ("Al-Asr",)),
    ("الهمزة", ("Al-Humazah",)),
    ("الفيل", ("Al-Fil", "Al-Feel")),
    ("قريش", ("Quraysh", "Quraish")),
    ("الماعون", ("Al-Ma'un", "Al-Maun")),
    ("الكوثر", ("Al-Kawthar", "Al-Kauthar")),
    ("الكافرون", ("Al-Kafirun", "Al-Kafiroon", "الكافرين")),
    ("النصر", ("An-Nasr",)),
    ("المسد", ("Al-Masad", "Al-Lahab", "اللهب", "تبت")),
    ("الإخلاص", ("Al-Ikhlas", "At-Tawhid", "التوحيد")),
    ("الفلق", ("Al-Falaq",)),
    ("الناس", ("An-Nas", "An-Naas")),
)


def _tokens(name: str) -> List[str]:
    cleaned = _NON_WORD_PATTERN.sub(" ", normalize(name).replace(TATWEEL, ""))
    return [token for token in cleaned.split() if token not in SURAH_MARKERS]


def _key(tokens: Sequence[str]) -> str:
    """Collapse a token window to a spelling-insensitive lookup key."""
    tokens = list(tokens)
    if len(tokens) > 1 and tokens[0] in LATIN_ARTICLES:
        tokens = tokens[1:]
    key = "".join(tokens)
    if key.isascii():
        # Transliterations disagree on doubled letters and a final "h"
        key = _REPEATED_LETTER_PATTERN.sub(r"\1", key)
        if len(key) > 3 and key.endswith("h"):
            key = key[:-1]
    return key


def _build_rank_table(names: Iterable[Tuple[str, Sequence[str]]]) -> Dict[str, int]:
    table: Dict[str, int] = {}
    for rank, (arabic, variants) in enumerate(names, start=1):
        for name in (arabic, *variants):
            key = _key(_tokens(name))
            if key in table and table[key] != rank:
                logger.debug("Surah key %r already ranked %s, ignoring %r", key, table[key], name)
                continue
            table[key] = rank
    return table


RANK_TABLE: Dict[str, int] = _build_rank_table(SURAH_NAMES)


def lookup_rank(surah_name: Optional[str]) -> Optional[int]:
    """Return the canonical number for a chapter label, or None if unknown.

    The label may carry a "سورة"/"Surah" marker and trailing words
    ("سورة البقرة كاملة"); the longest leading token window that names a
    chapter wins.
    """
    tokens = _tokens(surah_name or "")
    for size in range(min(MAX_NAME_TOKENS, len(tokens)), 0, -1):
        rank = RANK_TABLE.get(_key(tokens[:size]))
        if rank is not None:
            return rank
    return None


def rank_of(surah_name: Optional[str]) -> int:
    """Return the sort rank for a chapter label; unknown names get ``UNRANKED``."""
    rank = lookup_rank(surah_name)
    return UNRANKED if rank is None else rank


def sort_by_surah(episodes: Iterable[Episode]) -> List[Episode]:
    """Sort episodes by canonical chapter order.

    The sort is stable, so unranked chapters keep their relative input order
    after all ranked ones.
    """
    return sorted(episodes, key=lambda episode: rank_of(episode.surah))
