"""Command-line interface for quran_podcast."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Callable, cast, Dict, List, Optional, Sequence, TextIO, Tuple

from pydantic import ValidationError

from . import __version__, config, models, navigation, search, surah_order, workflow

_LOGGER = logging.getLogger(__name__)

FIELD_SEPARATOR = "\t"


def validate_args(args: argparse.Namespace) -> None:
    """Validate parsed CLI arguments and raise ValueError when invalid."""
    errors: List[str] = []

    if args.timeout is not None and args.timeout <= 0:
        errors.append(f"--timeout must be positive, got: {args.timeout}")

    if args.max_feed_bytes is not None and args.max_feed_bytes <= 0:
        errors.append(f"--max-feed-bytes must be positive, got: {args.max_feed_bytes}")

    if args.limit is not None and args.limit <= 0:
        errors.append(f"--limit must be positive, got: {args.limit}")

    if errors:
        raise ValueError("Invalid input parameters:\n  " + "\n  ".join(errors))


def _add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=None, help="Path to configuration file (JSON or YAML)")
    parser.add_argument(
        "rss", nargs="?", default=None, help=f"Feed URL (default: {config.DEFAULT_RSS_URL})"
    )
    parser.add_argument("--user-agent", default=config.DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument(
        "--timeout",
        type=int,
        default=config.DEFAULT_TIMEOUT_SECONDS,
        help="Request timeout in seconds",
    )
    parser.add_argument(
        "--max-feed-bytes",
        type=int,
        default=config.DEFAULT_MAX_FEED_BYTES,
        help="Refuse feeds larger than this many bytes",
    )
    parser.add_argument("--version", action="store_true", help="Show program version and exit")
    parser.add_argument(
        "--log-file",
        default=None,
        help="Path to log file (logs will be written to both console and file)",
    )
    parser.add_argument(
        "--log-level",
        default=config.DEFAULT_LOG_LEVEL,
        type=str.upper,
        help="Logging level (e.g., DEBUG, INFO)",
    )

    search_group = parser.add_argument_group("Search")
    search_group.add_argument(
        "--reciter",
        default=search.ALL_RECITERS,
        help=f"Only show this reciter's episodes (default: {search.ALL_RECITERS})",
    )
    search_group.add_argument(
        "--query", default="", help="Search text matched against surah and reciter names"
    )
    search_group.add_argument(
        "--list-reciters",
        action="store_true",
        help="List reciters instead of episodes (--query filters reciter names)",
    )
    search_group.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Show at most this many results",
    )


def _load_and_merge_config(
    parser: argparse.ArgumentParser, config_path: str, argv: Optional[Sequence[str]]
) -> argparse.Namespace:
    """Load configuration file and use it as defaults for CLI arguments.

    Raises:
        ValueError: If config is invalid
    """
    config_data = config.load_config_file(config_path)
    try:
        config_model = config.Config.model_validate(config_data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc

    defaults_updates: Dict[str, Any] = config_model.model_dump(exclude_none=True, by_alias=True)
    parser.set_defaults(**defaults_updates)
    return parser.parse_args(argv)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments, optionally merging configuration file defaults."""
    parser = argparse.ArgumentParser(
        description="Search Quran recitations published in a podcast RSS feed."
    )
    _add_arguments(parser)

    initial_args, _ = parser.parse_known_args(argv)

    if initial_args.version:
        print(f"quran_podcast {__version__}")
        raise SystemExit(0)

    if initial_args.config:
        args = _load_and_merge_config(parser, initial_args.config, argv)
    else:
        args = parser.parse_args(argv)

    validate_args(args)
    return args


def _build_config(args: argparse.Namespace) -> config.Config:
    """Materialize a Config object from already-validated CLI arguments."""
    payload: Dict[str, Any] = {
        "rss_url": args.rss,
        "user_agent": args.user_agent,
        "timeout": args.timeout,
        "max_feed_bytes": args.max_feed_bytes,
        "log_level": args.log_level,
        "log_file": args.log_file,
        "reciter": args.reciter,
        "query": args.query,
    }
    return cast(config.Config, config.Config.model_validate(payload))


def format_episode_line(episode: models.Episode) -> str:
    """Render one episode as a tab-separated line: rank, surah, reciter, duration, url."""
    rank = surah_order.lookup_rank(episode.surah)
    return FIELD_SEPARATOR.join(
        [
            str(rank) if rank is not None else "-",
            episode.surah,
            episode.reciter,
            episode.duration,
            episode.url,
        ]
    )


def format_reciter_line(reciter: models.ReciterSummary) -> str:
    """Render one reciter as a tab-separated line: name, image."""
    return FIELD_SEPARATOR.join([reciter.name, reciter.image])


def _emit(lines: Sequence[str], out: TextIO) -> None:
    for line in lines:
        out.write(line + "\n")


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    apply_log_level_fn: Optional[Callable[[str, Optional[str]], None]] = None,
    run_pipeline_fn: Optional[
        Callable[[config.Config], Tuple[models.FeedResult, List[models.Episode]]]
    ] = None,
    logger: Optional[logging.Logger] = None,
    out: Optional[TextIO] = None,
) -> int:
    """Entry point for the CLI; returns an exit status code."""
    log = logger or _LOGGER
    out = out or sys.stdout
    if apply_log_level_fn is None:
        apply_log_level_fn = workflow.apply_log_level
    if run_pipeline_fn is None:
        run_pipeline_fn = workflow.run_pipeline

    try:
        args = parse_args(argv)
    except ValueError as exc:
        log.error(f"Error: {exc}")
        return 1

    try:
        cfg = _build_config(args)
    except ValidationError as exc:
        log.error(f"Invalid configuration: {exc}")
        return 1

    apply_log_level_fn(cfg.log_level, cfg.log_file)
    log.debug(f"Feed URL: {cfg.rss_url}")

    if args.list_reciters:
        # Reciter listing matches the query against reciter names only
        cfg = cfg.model_copy(update={"reciter": search.ALL_RECITERS, "query": ""})

    try:
        feed, matching = run_pipeline_fn(cfg)
    except Exception as exc:
        log.error(f"Unexpected failure: {exc}")
        return 1

    if not feed.success:
        log.error(f"Feed unavailable: {feed.error}")
        return 1

    limit = args.limit if args.limit is not None else len(feed.episodes)
    if args.list_reciters:
        reciters = search.list_reciters(feed.episodes, args.query)
        _emit([format_reciter_line(r) for r in reciters[:limit]], out)
    else:
        visible = navigation.paginate(matching, limit)
        _emit([format_episode_line(e) for e in visible], out)
        hidden = navigation.remaining_count(matching, limit)
        if hidden:
            log.info(f"{hidden} more episodes not shown (use --limit to show more)")
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry
    raise SystemExit(main())
