from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Episode:
    """Represents a single recitation episode extracted from the feed.

    Episodes are rebuilt wholesale on every fetch and never mutated afterwards.

    Attributes:
        id: Feed item guid, or a deterministic digest of title and url when the
            item has none.
        title: Raw title text exactly as it appeared in the feed.
        surah: Chapter label split out of the title (Arabic or English).
        reciter: Reciter label, or the general-recitations sentinel.
        url: Audio enclosure URL. Never empty.
        image: Item artwork URL, falling back to the channel artwork.
        duration: Duration text from the feed, "00:00" when absent.

    Example:
        >>> episode = Episode(
        ...     id="guid-1",
        ...     title="سورة البقرة | الشيخ محمد",
        ...     surah="سورة البقرة",
        ...     reciter="الشيخ محمد",
        ...     url="https://example.com/2.mp3",
        ...     image="https://example.com/art.jpg",
        ...     duration="01:02:03",
        ... )
    """

    id: str
    title: str
    surah: str
    reciter: str
    url: str
    image: str = ""
    duration: str = "00:00"


@dataclass(frozen=True)
class ParsedTitle:
    """Chapter and reciter labels split out of a raw episode title."""

    surah: str
    reciter: str


@dataclass(frozen=True)
class ReciterSummary:
    """A distinct reciter with the artwork of its first episode."""

    name: str
    image: str


@dataclass
class FeedResult:
    """Outcome of fetching and parsing a feed.

    Unlike a bare episode list, this separates "the feed has no items"
    (``success`` with an empty list) from "the feed could not be loaded"
    (``error`` set).

    Attributes:
        episodes: Extracted episodes in feed order.
        error: Failure reason, None when the feed was read successfully.
        source: URL or label of the document that was parsed.
    """

    episodes: List[Episode] = field(default_factory=list)
    error: Optional[str] = None
    source: str = ""

    @property
    def success(self) -> bool:
        return self.error is None

    def __len__(self) -> int:
        return len(self.episodes)
