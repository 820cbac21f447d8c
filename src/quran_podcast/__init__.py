"""Quran Podcast - Searchable recitation records from a podcast RSS feed.

This package turns a podcast feed of Quran recitations, whose titles mix
Arabic and English labels, into normalized records that can be filtered by
reciter, searched regardless of Arabic spelling variants and sorted in mushaf
order.

Programmatic API Example:
    >>> import quran_podcast
    >>>
    >>> episodes = quran_podcast.extract_episodes(feed_xml)
    >>> quran_podcast.list_reciters(episodes)
    >>> quran_podcast.filter_episodes(episodes, "All", "البقرة")

Service API Example:
    >>> from quran_podcast import service
    >>> result = service.run(quran_podcast.Config(query="الكهف"))
    >>> if result.success:
    ...     print(result.summary)

CLI Usage:
    $ quran-podcast --list-reciters
    $ quran-podcast https://example.com/feed.xml --query "الكهف"
"""

from __future__ import annotations

from .config import Config, load_config_file
from .models import Episode, FeedResult, ParsedTitle, ReciterSummary
from .rss_parser import extract_episodes, fetch_and_parse_feed, parse_feed
from .search import ALL_RECITERS, filter_episodes, list_reciters
from .surah_order import rank_of, sort_by_surah
from .text import normalize
from .titles import GENERAL_RECITATIONS, parse_title

__all__ = [
    "ALL_RECITERS",
    "Config",
    "Episode",
    "FeedResult",
    "GENERAL_RECITATIONS",
    "ParsedTitle",
    "ReciterSummary",
    "extract_episodes",
    "fetch_and_parse_feed",
    "filter_episodes",
    "list_reciters",
    "load_config_file",
    "normalize",
    "parse_feed",
    "parse_title",
    "rank_of",
    "sort_by_surah",
    "__version__",
]
__version__ = "1.0.0"
