"""Reciter listing and episode search over an extracted episode list.

All functions are pure: they read the episode sequence they are given and
return new lists, so they can be re-run on every query change.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .models import Episode, ReciterSummary
from .surah_order import sort_by_surah
from .text import normalize

logger = logging.getLogger(__name__)

ALL_RECITERS = "All"


def list_reciters(episodes: Sequence[Episode], query: str = "") -> List[ReciterSummary]:
    """List distinct reciters in first-seen order, optionally filtered by name.

    Each reciter keeps the artwork of its first episode. A non-empty query
    matches when its normalized form is contained in the normalized name, or
    when its lowercase form is contained in the lowercase name (for Latin
    queries against Latin names).

    Args:
        episodes: Episodes in feed order
        query: Reciter name search text

    Returns:
        List of ReciterSummary
    """
    images: Dict[str, str] = {}
    for episode in episodes:
        if episode.reciter not in images:
            images[episode.reciter] = episode.image

    reciters = [ReciterSummary(name=name, image=image) for name, image in images.items()]
    if not query:
        return reciters

    normalized_query = normalize(query)
    lowered_query = query.lower()
    matched = [
        reciter
        for reciter in reciters
        if normalized_query in normalize(reciter.name) or lowered_query in reciter.name.lower()
    ]
    logger.debug("Reciter query %r matched %s of %s reciters", query, len(matched), len(reciters))
    return matched


def query_terms(query: str) -> List[str]:
    """Split a query into normalized, non-empty search terms."""
    return normalize(query).split()


def matches_query(episode: Episode, terms: Sequence[str]) -> bool:
    """Return True when every term is a substring of the episode's surah and reciter."""
    combined = f"{normalize(episode.surah)} {normalize(episode.reciter)}"
    return all(term in combined for term in terms)


def filter_episodes(
    episodes: Sequence[Episode],
    selected_reciter: str = ALL_RECITERS,
    query: str = "",
) -> List[Episode]:
    """Filter episodes by reciter and search text, sorted in surah order.

    Args:
        episodes: Episodes in feed order
        selected_reciter: Exact reciter name, or ``ALL_RECITERS`` for no filter
        query: Free-text search; every whitespace-separated term must appear
            in the episode's normalized surah and reciter labels

    Returns:
        Matching episodes, stably sorted by canonical surah rank
    """
    result: List[Episode] = list(episodes)

    if selected_reciter != ALL_RECITERS:
        result = [episode for episode in result if episode.reciter == selected_reciter]

    if query:
        terms = query_terms(query)
        result = [episode for episode in result if matches_query(episode, terms)]

    logger.debug(
        "Filtered %s episodes to %s (reciter=%r, query=%r)",
        len(episodes),
        len(result),
        selected_reciter,
        query,
    )
    return sort_by_surah(result)
