"""Split free-text episode titles into a chapter label and a reciter label.

Feed titles come in two labeling conventions and two separator styles:

    سورة البقرة | الشيخ محمد
    Surah Al-Baqarah - Sheikh Ahmad
    الشيخ محمد | سورة الكهف | Surah Al-Kahf

The chapter segment is located by its marker word ("سورة" or "Surah"); every
other segment belongs to the reciter.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .models import ParsedTitle

logger = logging.getLogger(__name__)

ARABIC_SURAH_MARKER = "سورة"
ENGLISH_SURAH_MARKER = "surah"

DASH_SEPARATOR = " - "
PIPE_SEPARATOR = "|"

GENERAL_RECITATIONS = "تلاوات عامة"
# Compared against the lowercased reciter label
UNKNOWN_RECITER_LITERALS = frozenset({"القارئ غير معروف", "unknown"})


def split_title(raw_title: str) -> List[str]:
    """Split a title into stripped segments on " - " and "|".

    Empty segments are kept so indexes line up with the raw title.
    """
    normalized = raw_title.replace(DASH_SEPARATOR, f" {PIPE_SEPARATOR} ")
    return [part.strip() for part in normalized.split(PIPE_SEPARATOR)]


def _find_segment(parts: List[str], marker: str, *, fold_case: bool = False) -> Optional[int]:
    for idx, part in enumerate(parts):
        haystack = part.lower() if fold_case else part
        if marker in haystack:
            return idx
    return None


def is_unknown_reciter(reciter: str) -> bool:
    """Return True when a reciter label is empty or a placeholder literal."""
    return not reciter or reciter.lower() in UNKNOWN_RECITER_LITERALS


def parse_title(raw_title: Optional[str]) -> ParsedTitle:
    """Extract the chapter and reciter labels from a raw episode title.

    The Arabic chapter segment wins over the English one; both are excluded
    from the reciter label. When neither marker is present, the first segment
    is taken as the chapter and the rest as the reciter. Missing or
    placeholder reciters are replaced by ``GENERAL_RECITATIONS``.

    Args:
        raw_title: Title text from the feed

    Returns:
        ParsedTitle with surah and reciter labels
    """
    parts = split_title(raw_title or "")

    arabic_idx = _find_segment(parts, ARABIC_SURAH_MARKER)
    english_idx = _find_segment(parts, ENGLISH_SURAH_MARKER, fold_case=True)

    surah = ""
    if arabic_idx is not None:
        surah = parts[arabic_idx]
    if not surah and english_idx is not None:
        surah = parts[english_idx]

    reciter = " ".join(
        part for idx, part in enumerate(parts) if idx not in (arabic_idx, english_idx)
    ).strip()

    if not surah and parts:
        surah = parts[0]
        reciter = " ".join(parts[1:]).strip()

    if is_unknown_reciter(reciter):
        logger.debug("No reciter in title %r, using general recitations", raw_title)
        reciter = GENERAL_RECITATIONS

    return ParsedTitle(surah=surah, reciter=reciter)
