"""Arabic text normalization for search and chapter lookup."""

from __future__ import annotations

import re
from typing import Optional

ALEF_VARIANTS_PATTERN = re.compile(r"[أإآ]")
TAA_MARBUTA = "ة"
ALEF_MAKSURA = "ى"
# Tanween, harakat, shadda, sukun and the combining marks that follow them
DIACRITICS_PATTERN = re.compile(r"[\u064B-\u065F]")


def normalize(text: Optional[str]) -> str:
    """Canonicalize Arabic text for comparison.

    Hamza-bearing alef forms become bare alef, taa marbuta becomes haa, alef
    maksura becomes yaa, diacritics are dropped and the result is lowercased
    so embedded Latin text compares case-insensitively.

    The function is pure and idempotent.

    Args:
        text: Text to normalize (None is treated as empty)

    Returns:
        Normalized text
    """
    if not text:
        return ""
    text = ALEF_VARIANTS_PATTERN.sub("ا", text)
    text = text.replace(TAA_MARBUTA, "ه")
    text = text.replace(ALEF_MAKSURA, "ي")
    text = DIACRITICS_PATTERN.sub("", text)
    return text.lower()
