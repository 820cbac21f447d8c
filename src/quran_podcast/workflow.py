"""Fetch-filter pipeline and logging setup for quran_podcast."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

from . import config, models, navigation, rss_parser, search

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def apply_log_level(level: str, log_file: Optional[str] = None) -> None:
    """Apply logging level to root logger and configure handlers.

    Args:
        level: Log level string (e.g., 'DEBUG', 'INFO', 'WARNING')
        log_file: Optional path to log file. If provided, logs will be written to both
                  console and file.

    Raises:
        ValueError: If log level is invalid
        OSError: If log file cannot be created or written to
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    root_logger = logging.getLogger()

    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(console_handler)
        root_logger.setLevel(numeric_level)
    else:
        root_logger.setLevel(numeric_level)
        for handler in root_logger.handlers:
            handler.setLevel(numeric_level)

    if log_file:
        file_handler_exists = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)
            for h in root_logger.handlers
        )

        if not file_handler_exists:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root_logger.addHandler(file_handler)


def select_episodes(
    episodes: List[models.Episode], reciter: str, query: str
) -> Tuple[str, List[models.Episode]]:
    """Validate the reciter filter against the feed and apply reciter and query.

    Returns:
        Tuple of (effective_reciter, matching_episodes)
    """
    effective_reciter = navigation.resolve_reciter(episodes, reciter)
    if effective_reciter != reciter:
        logger.warning(f"Reciter {reciter!r} not found in feed; showing all reciters")
    return effective_reciter, search.filter_episodes(episodes, effective_reciter, query)


def run_pipeline(cfg: config.Config) -> Tuple[models.FeedResult, List[models.Episode]]:
    """Fetch the configured feed and apply the configured reciter and query.

    Args:
        cfg: Configuration object

    Returns:
        Tuple of (feed_result, matching_episodes). When the feed fails to load,
        matching_episodes is empty and ``feed_result.error`` carries the reason.
    """
    feed = rss_parser.fetch_and_parse_feed(cfg)
    if not feed.success:
        return feed, []

    _, matching = select_episodes(feed.episodes, cfg.reciter, cfg.query)
    logger.info(f"{len(matching)} of {len(feed.episodes)} episodes match")
    return feed, matching
