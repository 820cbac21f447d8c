"""Service API for programmatic use of quran_podcast.

This module provides a programmatic interface for non-interactive callers
such as a web backend that refreshes the episode list on a schedule.

Example:
    >>> from quran_podcast import service, config
    >>>
    >>> cfg = config.Config(reciter="الشيخ محمد", query="البقرة")
    >>> result = service.run(cfg)
    >>> if result.success:
    ...     print(f"{len(result.episodes)} of {result.total_episodes} episodes")
    ... else:
    ...     print(f"Error: {result.error}")
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from . import __version__, config, models, search, workflow

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Result of a service run.

    Attributes:
        episodes: Episodes matching the configured reciter and query, in surah order
        reciters: All reciters in the feed, in first-seen order
        total_episodes: Number of playable episodes in the feed
        summary: Human-readable summary message
        success: Whether the feed was loaded successfully
        error: Error message if success is False, None otherwise
    """

    episodes: List[models.Episode] = field(default_factory=list)
    reciters: List[models.ReciterSummary] = field(default_factory=list)
    total_episodes: int = 0
    summary: str = ""
    success: bool = True
    error: Optional[str] = None


def run(cfg: config.Config) -> ServiceResult:
    """Load the feed and apply the configured filters.

    Args:
        cfg: Configuration object (can be created from Config() or Config(**load_config_file()))

    Returns:
        ServiceResult with the matching episodes
    """
    try:
        if cfg.log_file or cfg.log_level:
            workflow.apply_log_level(level=cfg.log_level or "INFO", log_file=cfg.log_file)

        feed, matching = workflow.run_pipeline(cfg)
    except Exception as e:
        error_msg = str(e)
        logger.error(f"Pipeline execution failed: {error_msg}", exc_info=True)
        return ServiceResult(success=False, error=error_msg)

    if not feed.success:
        return ServiceResult(success=False, error=feed.error, summary="Feed unavailable")

    return ServiceResult(
        episodes=matching,
        reciters=search.list_reciters(feed.episodes),
        total_episodes=len(feed.episodes),
        summary=f"{len(matching)} of {len(feed.episodes)} episodes match",
    )


def run_from_config_file(config_path: str | Path) -> ServiceResult:
    """Run the service from a configuration file.

    Args:
        config_path: Path to configuration file (JSON or YAML)

    Returns:
        ServiceResult; an unreadable or invalid config file yields success=False
    """
    try:
        config_dict = config.load_config_file(str(config_path))
        cfg = config.Config(**config_dict)
    except Exception as e:
        error_msg = f"Failed to load configuration: {e}"
        logger.error(error_msg)
        return ServiceResult(success=False, error=error_msg)

    return run(cfg)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for service mode (config-file only).

    Designed for schedulers and process supervisors:
    python -m quran_podcast.service --config config.yaml

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    import argparse

    parser = argparse.ArgumentParser(
        description="Quran Podcast Service - Refresh the episode list from a configuration file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with config file
  python -m quran_podcast.service --config config.yaml

  # For supervisor/systemd usage
  [program:quran_podcast]
  command=python -m quran_podcast.service --config /path/to/config.yaml
  autostart=true
        """,
    )
    parser.add_argument(
        "--config",
        required=True,
        help="Path to configuration file (JSON or YAML)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"quran_podcast {__version__}",
    )
    args = parser.parse_args(argv)

    result = run_from_config_file(args.config)

    if result.success:
        print(result.summary)
        return 0
    else:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
