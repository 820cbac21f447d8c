"""Helpers for stepping through and paging a filtered episode list."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .models import Episode
from .search import ALL_RECITERS

ITEMS_PER_PAGE = 10
SECONDS_PER_MINUTE = 60
EMPTY_TIME = "00:00"


def _index_of(episodes: Sequence[Episode], episode_id: Optional[str]) -> Optional[int]:
    if not episode_id:
        return None
    for idx, episode in enumerate(episodes):
        if episode.id == episode_id:
            return idx
    return None


def next_episode(episodes: Sequence[Episode], current_id: Optional[str]) -> Optional[Episode]:
    """Return the episode after ``current_id``, or None at the end of the list."""
    idx = _index_of(episodes, current_id)
    if idx is None or idx >= len(episodes) - 1:
        return None
    return episodes[idx + 1]


def previous_episode(episodes: Sequence[Episode], current_id: Optional[str]) -> Optional[Episode]:
    """Return the episode before ``current_id``, or None at the start of the list."""
    idx = _index_of(episodes, current_id)
    if idx is None or idx == 0:
        return None
    return episodes[idx - 1]


def paginate(episodes: Sequence[Episode], visible_count: int = ITEMS_PER_PAGE) -> List[Episode]:
    """Return the first ``visible_count`` episodes."""
    return list(episodes[: max(0, visible_count)])


def remaining_count(episodes: Sequence[Episode], visible_count: int = ITEMS_PER_PAGE) -> int:
    """Return how many episodes are hidden beyond ``visible_count``."""
    return max(0, len(episodes) - max(0, visible_count))


def format_time(seconds: Optional[float]) -> str:
    """Format a playback position as ``M:SS``.

    Minutes are not zero-padded. Unknown positions (None, NaN, infinite or
    negative values) render as ``"00:00"``.
    """
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return EMPTY_TIME
    minutes = int(seconds // SECONDS_PER_MINUTE)
    secs = int(seconds % SECONDS_PER_MINUTE)
    return f"{minutes}:{secs:02d}"


def resolve_reciter(episodes: Sequence[Episode], requested: Optional[str]) -> str:
    """Return ``requested`` if any episode has that reciter, else ``ALL_RECITERS``.

    Used to validate a reciter filter restored from a URL parameter or a saved
    preference against the current feed.
    """
    if requested and any(episode.reciter == requested for episode in episodes):
        return requested
    return ALL_RECITERS
