"""Configuration constants for quran_podcast.

All constants are re-exported from config.py for convenience.
"""

# General defaults
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_TIMEOUT_SECONDS = 20
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/119.0 Safari/537.36"
)

# Feed source
DEFAULT_RSS_URL = "https://anchor.fm/s/c665db20/podcast/rss"
DEFAULT_MAX_FEED_BYTES = 20 * 1024 * 1024  # 20 MiB

# Validation
MIN_TIMEOUT_SECONDS = 1
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_URL_SCHEMES = ("http", "https")
