"""Shared fixtures and test utilities for quran_podcast tests.

This module contains:
- Test constants
- Builders for RSS documents and items
- Helper functions for creating test objects
- A mock HTTP response

All test files can import from this module using pytest's conftest.py mechanism.
"""

from quran_podcast import config, models

# Test constants
TEST_BASE_URL = "https://example.com"
TEST_FEED_URL = f"{TEST_BASE_URL}/feed.xml"
TEST_CHANNEL_IMAGE = f"{TEST_BASE_URL}/channel.jpg"
TEST_ITEM_IMAGE = f"{TEST_BASE_URL}/item.jpg"
TEST_MEDIA_URL = f"{TEST_BASE_URL}/audio/001.mp3"
TEST_RECITER = "الشيخ محمد"
TEST_OTHER_RECITER = "Sheikh Ahmad"
TEST_ARABIC_TITLE = "سورة البقرة | الشيخ محمد"
TEST_ENGLISH_TITLE = "Surah Al-Baqarah - Sheikh Ahmad"
ITUNES_NS_DECL = 'xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd"'


def build_item_xml(
    title=TEST_ARABIC_TITLE,
    url=TEST_MEDIA_URL,
    guid="guid-1",
    image=None,
    duration=None,
    cdata=False,
):
    """Build a single RSS <item> element.

    Args:
        title: Item title, or None to omit the element
        url: Enclosure URL, or None to omit the enclosure
        guid: Item guid, or None to omit it
        image: Optional itunes:image href
        duration: Optional itunes:duration text
        cdata: Wrap the title in a CDATA section

    Returns:
        XML string for the item
    """
    parts = ["<item>"]
    if title is not None:
        body = f"<![CDATA[{title}]]>" if cdata else title
        parts.append(f"<title>{body}</title>")
    if guid is not None:
        parts.append(f'<guid isPermaLink="false">{guid}</guid>')
    if url is not None:
        parts.append(f'<enclosure url="{url}" length="1000" type="audio/mpeg"/>')
    if image is not None:
        parts.append(f'<itunes:image href="{image}"/>')
    if duration is not None:
        parts.append(f"<itunes:duration>{duration}</itunes:duration>")
    parts.append("</item>")
    return "".join(parts)


def build_rss_xml(items, channel_image=TEST_CHANNEL_IMAGE, title="المصحف المرتل"):
    """Build an RSS 2.0 document with the iTunes namespace.

    Args:
        items: Iterable of item XML strings (see build_item_xml)
        channel_image: Channel-level itunes:image href, or None to omit it
        title: Channel title

    Returns:
        RSS XML string
    """
    channel_image_xml = (
        f'<itunes:image href="{channel_image}"/>' if channel_image is not None else ""
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" {ITUNES_NS_DECL}>
  <channel>
    <title>{title}</title>
    {channel_image_xml}
    {"".join(items)}
  </channel>
</rss>"""


def create_test_config(**overrides):
    """Create test Config object with defaults.

    Args:
        **overrides: Fields to override from defaults

    Returns:
        config.Config object with test defaults
    """
    defaults = {
        "rss_url": TEST_FEED_URL,
        "user_agent": "test-agent",
        "timeout": 5,
        "log_level": "INFO",
    }
    defaults.update(overrides)
    return config.Config(**defaults)


def create_test_episode(
    surah="سورة البقرة",
    reciter=TEST_RECITER,
    episode_id=None,
    image=TEST_ITEM_IMAGE,
    url=None,
    duration="10:00",
):
    """Create an Episode with sensible defaults."""
    episode_id = episode_id or f"{surah}-{reciter}"
    return models.Episode(
        id=episode_id,
        title=f"{surah} | {reciter}",
        surah=surah,
        reciter=reciter,
        url=url or f"{TEST_BASE_URL}/audio/{episode_id}.mp3",
        image=image,
        duration=duration,
    )


class MockHTTPResponse:
    """Simple mock for HTTP responses used in downloader tests."""

    def __init__(self, *, content=b"", url="", headers=None, chunks=None, status_code=200):
        self.content = content
        self.url = url
        self.headers = headers or {}
        self.status_code = status_code
        self._chunks = chunks if chunks is not None else [content]
        self.closed = False

    def raise_for_status(self):
        return None

    def iter_content(self, chunk_size=1):
        for chunk in self._chunks:
            yield chunk

    def close(self):
        self.closed = True


def create_rss_response(rss_xml, url=TEST_FEED_URL):
    """Create MockHTTPResponse for an RSS feed."""
    content = rss_xml.encode("utf-8")
    return MockHTTPResponse(
        content=content,
        url=url,
        headers={"Content-Type": "application/rss+xml", "Content-Length": str(len(content))},
    )
