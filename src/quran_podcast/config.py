from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlparse

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import config_constants
from .search import ALL_RECITERS

logger = logging.getLogger(__name__)

TRUTHY_ENV_VALUES = ("1", "true", "yes")


def _is_test_environment() -> bool:
    """Return True under pytest or when TESTING is set, where .env files are ignored."""
    return (
        "pytest" in sys.modules
        or "PYTEST_CURRENT_TEST" in os.environ
        or os.environ.get("TESTING", "").lower() in TRUTHY_ENV_VALUES
    )


def _load_dotenv_file() -> None:
    if _is_test_environment():
        return
    try:
        load_dotenv(override=False)
    except OSError as exc:
        logger.debug(f"Could not read .env file: {exc}")


_load_dotenv_file()

# Re-exported for convenience
DEFAULT_LOG_LEVEL = config_constants.DEFAULT_LOG_LEVEL
DEFAULT_TIMEOUT_SECONDS = config_constants.DEFAULT_TIMEOUT_SECONDS
DEFAULT_USER_AGENT = config_constants.DEFAULT_USER_AGENT
DEFAULT_RSS_URL = config_constants.DEFAULT_RSS_URL
DEFAULT_MAX_FEED_BYTES = config_constants.DEFAULT_MAX_FEED_BYTES
MIN_TIMEOUT_SECONDS = config_constants.MIN_TIMEOUT_SECONDS
VALID_LOG_LEVELS = config_constants.VALID_LOG_LEVELS
VALID_URL_SCHEMES = config_constants.VALID_URL_SCHEMES


class Config(BaseModel):
    """Configuration model for fetching and searching a recitation feed.

    Configuration can be created programmatically or loaded from JSON/YAML
    files using `load_config_file()`. The model is immutable (frozen) after
    creation.

    Attributes:
        rss_url: Feed URL (alias "rss"). Defaults to the recitations feed.
        user_agent: HTTP User-Agent header for requests.
        timeout: Request timeout in seconds (minimum: 1).
        max_feed_bytes: Largest feed body accepted, in bytes.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file path for file output.
        reciter: Default reciter filter ("All" for no filter).
        query: Default search text.

    Example:
        >>> from quran_podcast import Config
        >>> cfg = Config(rss="https://example.com/feed.xml", timeout=10)
        >>> cfg.rss_url
        'https://example.com/feed.xml'
    """

    rss_url: str = Field(default=DEFAULT_RSS_URL, alias="rss")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="user_agent")
    timeout: int = Field(default=DEFAULT_TIMEOUT_SECONDS, alias="timeout")
    max_feed_bytes: int = Field(default=DEFAULT_MAX_FEED_BYTES, alias="max_feed_bytes")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, alias="log_level")
    log_file: Optional[str] = Field(default=None, alias="log_file")
    reciter: str = Field(default=ALL_RECITERS, alias="reciter")
    query: str = Field(default="", alias="query")

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    @field_validator("rss_url", mode="before")
    @classmethod
    def _strip_rss(cls, value: Any) -> str:
        if value is None:
            return DEFAULT_RSS_URL
        return str(value).strip() or DEFAULT_RSS_URL

    @field_validator("rss_url", mode="after")
    @classmethod
    def _validate_rss(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in VALID_URL_SCHEMES:
            raise ValueError(f"RSS URL must be http or https: {value}")
        if not parsed.netloc:
            raise ValueError(f"RSS URL must have a valid hostname: {value}")
        return value

    @field_validator("user_agent", mode="before")
    @classmethod
    def _coerce_user_agent(cls, value: Any) -> str:
        if value is None:
            return DEFAULT_USER_AGENT
        return str(value).strip() or DEFAULT_USER_AGENT

    @field_validator("timeout", mode="before")
    @classmethod
    def _ensure_timeout(cls, value: Any) -> int:
        if value is None or value == "":
            return DEFAULT_TIMEOUT_SECONDS
        try:
            timeout = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("timeout must be an integer") from exc
        return max(MIN_TIMEOUT_SECONDS, timeout)

    @field_validator("max_feed_bytes", mode="before")
    @classmethod
    def _ensure_max_feed_bytes(cls, value: Any) -> int:
        if value is None or value == "":
            return DEFAULT_MAX_FEED_BYTES
        try:
            max_bytes = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("max_feed_bytes must be an integer") from exc
        if max_bytes <= 0:
            raise ValueError(f"max_feed_bytes must be positive, got: {max_bytes}")
        return max_bytes

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> str:
        """Normalize log level value."""
        if value is None:
            return DEFAULT_LOG_LEVEL
        return str(value).strip().upper() or DEFAULT_LOG_LEVEL

    @field_validator("log_level", mode="after")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        """Validate log level is one of the valid levels."""
        if value not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got: {value}")
        return value

    @field_validator("log_file", mode="before")
    @classmethod
    def _load_log_file_from_env(cls, value: Any) -> Optional[str]:
        """Load log file path from environment variable if not provided."""
        if value is not None and str(value).strip():
            return str(value).strip()
        env_log_file = os.getenv("LOG_FILE")
        if env_log_file and env_log_file.strip():
            return env_log_file.strip()
        return None

    @field_validator("reciter", mode="before")
    @classmethod
    def _coerce_reciter(cls, value: Any) -> str:
        if value is None:
            return ALL_RECITERS
        return str(value).strip() or ALL_RECITERS

    @field_validator("query", mode="before")
    @classmethod
    def _coerce_query(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)


CONFIG_PARSERS: Dict[str, Callable[[str], Any]] = {
    ".json": json.loads,
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
}


def load_config_file(path: str) -> Dict[str, Any]:
    """Load configuration from a JSON or YAML file.

    The file format is auto-detected from the extension (`.json`, `.yaml` or
    `.yml`). The returned dictionary can be unpacked into `Config`.

    Args:
        path: Path to configuration file. Supports tilde expansion.

    Returns:
        Dict[str, Any]: Configuration values from the file.

    Raises:
        ValueError: If the path is empty, the file does not exist, the format
            is unsupported or the content cannot be parsed

    Example:
        >>> config_dict = load_config_file("config.yaml")
        >>> cfg = Config(**config_dict)
    """
    if not path:
        raise ValueError("Config path cannot be empty")

    try:
        cfg_path = Path(path).expanduser().resolve()
    except (OSError, RuntimeError) as exc:
        raise ValueError(f"Invalid config path: {path} ({exc})") from exc

    parse = CONFIG_PARSERS.get(cfg_path.suffix.lower())
    if parse is None:
        raise ValueError(
            f"Unsupported config file type: {cfg_path.suffix!r} (use .json, .yaml or .yml)"
        )
    if not cfg_path.is_file():
        raise ValueError(f"Config file not found: {cfg_path}")

    try:
        data = parse(cfg_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"Cannot read config file {cfg_path}: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValueError(f"Cannot parse config file {cfg_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Config file {cfg_path} must hold a mapping of settings")
    logger.debug(f"Loaded {len(data)} settings from {cfg_path}")
    return data
