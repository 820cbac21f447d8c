"""RSS feed parsing and episode record extraction."""

from __future__ import annotations

import hashlib
import logging

# Bandit: parsing handled via defusedxml safe APIs
import xml.etree.ElementTree as ET  # nosec B405
from typing import List, Optional, Tuple, Union
from urllib.parse import urljoin

from defusedxml.ElementTree import fromstring as safe_fromstring, ParseError as DefusedXMLParseError

from . import config, downloader, models
from .exceptions import FeedError, FeedParseError
from .titles import parse_title

logger = logging.getLogger(__name__)

ITUNES_NS = "{http://www.itunes.com/dtds/podcast-1.0.dtd}"
# Feeds also declare the legacy capitalized URI, so any itunes.com namespace counts
ITUNES_NS_HOST = "itunes.com"
DEFAULT_DURATION = "00:00"
SYNTHETIC_ID_LENGTH = 16

FeedText = Union[str, bytes]


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1].lower()


def _child_text(parent: ET.Element, tag: str) -> str:
    elem = parent.find(tag)
    if elem is None:
        elem = next((e for e in parent if _local_name(e.tag) == tag.lower()), None)
    if elem is None:
        return ""
    # itertext() covers CDATA sections and stray nested markup alike
    return "".join(elem.itertext()).strip()


def _itunes_child(parent: ET.Element, name: str) -> Optional[ET.Element]:
    elem = parent.find(f"{ITUNES_NS}{name}")
    if elem is not None:
        return elem
    for child in parent:
        tag = child.tag if isinstance(child.tag, str) else ""
        namespace = tag[1:].split("}", 1)[0].lower() if tag.startswith("{") else ""
        if ITUNES_NS_HOST in namespace and _local_name(tag) == name:
            return child
    return None


def _itunes_image_href(parent: ET.Element, base_url: str) -> str:
    image_elem = _itunes_child(parent, "image")
    if image_elem is None:
        return ""
    href = image_elem.attrib.get("href", "").strip()
    return urljoin(base_url, href) if href else ""


def parse_feed_document(feed_text: FeedText) -> Tuple[Optional[ET.Element], List[ET.Element]]:
    """Parse feed XML and locate the channel and its items.

    Args:
        feed_text: Raw feed document

    Returns:
        Tuple of (channel_or_None, list_of_items) in document order

    Raises:
        FeedParseError: If the document is empty or not well-formed XML
    """
    if not feed_text or not feed_text.strip():
        raise FeedParseError("Feed document is empty")
    try:
        root = safe_fromstring(feed_text)
    except (DefusedXMLParseError, ValueError) as exc:
        raise FeedParseError(f"Failed to parse RSS XML: {exc}") from exc
    if root is None:
        raise FeedParseError("Feed document has no root element")

    channel = root.find("channel")
    if channel is None:
        channel = next((e for e in root.iter() if _local_name(e.tag) == "channel"), None)

    if channel is not None:
        items = list(channel.findall("item"))
        if not items:
            items = [e for e in channel if _local_name(e.tag) == "item"]
    else:
        items = [e for e in root.iter() if _local_name(e.tag) == "item"]
    return channel, items


def extract_channel_image(channel: Optional[ET.Element], base_url: str = "") -> str:
    """Extract the channel-level default artwork URL.

    Prefers ``itunes:image/@href`` and falls back to the RSS 2.0
    ``<image><url>`` element.

    Returns:
        Artwork URL, or an empty string when the channel has none
    """
    if channel is None:
        return ""
    image_url = _itunes_image_href(channel, base_url)
    if image_url:
        return image_url
    image_elem = channel.find("image")
    if image_elem is not None:
        url = _child_text(image_elem, "url")
        if url:
            return urljoin(base_url, url)
    return ""


def find_enclosure_url(item: ET.Element, base_url: str = "") -> str:
    """Return the first enclosure URL of an item, or an empty string."""
    for el in item.iter():
        if _local_name(el.tag) == "enclosure":
            url_attr = el.attrib.get("url", "").strip()
            if url_attr:
                return urljoin(base_url, url_attr)
    return ""


def synthesize_episode_id(title: str, url: str) -> str:
    """Derive a stable id for items without a guid."""
    digest = hashlib.sha256(f"{title}\n{url}".encode("utf-8")).hexdigest()
    return digest[:SYNTHETIC_ID_LENGTH]


def extract_duration(item: ET.Element) -> str:
    """Return the item's ``itunes:duration`` text, defaulting to "00:00"."""
    duration_elem = _itunes_child(item, "duration")
    if duration_elem is None or not duration_elem.text or not duration_elem.text.strip():
        return DEFAULT_DURATION
    return duration_elem.text.strip()


def create_episode_from_item(
    item: ET.Element, channel_image: str = "", base_url: str = ""
) -> Optional[models.Episode]:
    """Create an Episode from an RSS item.

    Args:
        item: RSS item element
        channel_image: Artwork used when the item has none of its own
        base_url: Base URL for resolving relative URLs

    Returns:
        Episode, or None when the item has no audio enclosure
    """
    title = _child_text(item, "title")
    url = find_enclosure_url(item, base_url)
    if not url:
        logger.debug("Skipping item without audio enclosure: %r", title)
        return None

    parsed = parse_title(title)
    guid = _child_text(item, "guid")
    image = _itunes_image_href(item, base_url) or channel_image

    return models.Episode(
        id=guid or synthesize_episode_id(title, url),
        title=title,
        surah=parsed.surah,
        reciter=parsed.reciter,
        url=url,
        image=image,
        duration=extract_duration(item),
    )


def _extract(feed_text: FeedText, base_url: str) -> List[models.Episode]:
    channel, items = parse_feed_document(feed_text)
    channel_image = extract_channel_image(channel, base_url)

    episodes: List[models.Episode] = []
    for item in items:
        episode = create_episode_from_item(item, channel_image, base_url)
        if episode is not None:
            episodes.append(episode)

    logger.debug("Extracted %s episodes from %s feed items", len(episodes), len(items))
    return episodes


def parse_feed(feed_text: FeedText, base_url: str = "", source: str = "<text>") -> models.FeedResult:
    """Extract episodes from a feed document into a tagged result.

    Args:
        feed_text: Raw feed document
        base_url: Base URL for resolving relative URLs
        source: Label recorded on the result and in log messages

    Returns:
        FeedResult with episodes in feed order, or with ``error`` set when the
        document cannot be parsed
    """
    try:
        episodes = _extract(feed_text, base_url)
    except FeedError as exc:
        logger.warning(f"Could not parse feed from {source}: {exc.message}")
        return models.FeedResult(error=exc.message, source=source)
    except Exception as exc:
        logger.warning(f"Unexpected error while parsing feed from {source}: {exc}", exc_info=True)
        return models.FeedResult(error=str(exc), source=source)
    return models.FeedResult(episodes=episodes, source=source)


def extract_episodes(feed_text: FeedText, base_url: str = "") -> List[models.Episode]:
    """Extract episodes from a feed document.

    Never raises: an unparseable document yields an empty list, the same as a
    feed with no playable items. Use `parse_feed()` to tell the two apart.
    """
    return parse_feed(feed_text, base_url).episodes


def fetch_and_parse_feed(cfg: config.Config) -> models.FeedResult:
    """Fetch the configured feed and extract its episodes.

    Args:
        cfg: Configuration object with feed URL and request settings

    Returns:
        FeedResult; fetch and parse failures are reported through ``error``
    """
    try:
        feed_bytes, final_url = downloader.fetch_bytes(
            cfg.rss_url, cfg.user_agent, cfg.timeout, max_bytes=cfg.max_feed_bytes
        )
    except FeedError as exc:
        logger.warning(f"Failed to fetch feed {cfg.rss_url}: {exc.message}")
        return models.FeedResult(error=exc.message, source=cfg.rss_url)

    result = parse_feed(feed_bytes, base_url=final_url, source=cfg.rss_url)
    if result.success:
        logger.info(f"Loaded {len(result.episodes)} episodes from {cfg.rss_url}")
    return result
