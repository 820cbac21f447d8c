"""HTTP session management and feed download helpers for quran_podcast."""

from __future__ import annotations

import atexit
import logging
import threading
from typing import cast, List, Optional, Tuple

import requests
from requests.utils import requote_uri

from .exceptions import FeedFetchError

logger = logging.getLogger(__name__)

URLLIB3_LOGGERS = ("urllib3", "urllib3.connectionpool", "urllib3.connection")
_urllib3_quieted = False


def _quiet_urllib3_logs() -> None:
    """Raise urllib3 loggers to WARNING once, if the root logger runs at DEBUG.

    Runs on first session creation, after ``apply_log_level`` has set the root level.
    """
    global _urllib3_quieted
    if _urllib3_quieted:
        return
    _urllib3_quieted = True

    if (logging.getLogger().level or logging.INFO) > logging.DEBUG:
        return
    for name in URLLIB3_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


DOWNLOAD_CHUNK_SIZE = 1024 * 64

_sessions = threading.local()
_open_sessions: List[requests.Session] = []
_open_sessions_lock = threading.Lock()


def normalize_url(url: str) -> str:
    """Normalize URLs while preserving already-encoded segments."""
    normalized = requote_uri(url)
    if normalized != url:
        logger.debug("Normalized URL %s -> %s", url, normalized)
    return cast(str, normalized)


def _get_thread_request_session() -> requests.Session:
    """Return this thread's HTTP session, creating it on first use."""
    session = getattr(_sessions, "current", None)
    if session is not None:
        return session

    _quiet_urllib3_logs()
    session = requests.Session()
    _sessions.current = session
    with _open_sessions_lock:
        _open_sessions.append(session)
    logger.debug("Opened HTTP session %s for thread %s", hex(id(session)), threading.get_ident())
    return session


@atexit.register
def _close_all_sessions() -> None:
    with _open_sessions_lock:
        sessions = list(_open_sessions)
        _open_sessions.clear()
    for session in sessions:
        try:
            session.close()
        except Exception as exc:
            logger.debug("Error while closing HTTP session at exit: %s", exc)


def fetch_url(
    url: str, user_agent: str, timeout: int, *, stream: bool = False
) -> requests.Response:
    """Execute an HTTP GET request and return the response.

    Raises:
        FeedFetchError: On connection errors, timeouts or non-success status
    """
    normalized_url = normalize_url(url)
    headers = {"User-Agent": user_agent}
    session = _get_thread_request_session()
    logger.debug(
        "Opening HTTP connection to %s (timeout=%s, stream=%s)", normalized_url, timeout, stream
    )
    try:
        resp = session.get(normalized_url, headers=headers, timeout=timeout, stream=stream)
    except requests.RequestException as exc:
        raise FeedFetchError(f"Request failed: {exc}", source=url) from exc

    try:
        resp.raise_for_status()
    except requests.HTTPError as exc:
        resp.close()
        raise FeedFetchError(
            f"HTTP {resp.status_code}",
            source=url,
            status_code=resp.status_code,
            suggestion="Check that the feed URL is correct and publicly reachable",
        ) from exc

    logger.debug(
        "HTTP request to %s succeeded with status %s and Content-Length=%s",
        normalized_url,
        resp.status_code,
        resp.headers.get("Content-Length"),
    )
    return resp


def fetch_bytes(
    url: str, user_agent: str, timeout: int, max_bytes: Optional[int] = None
) -> Tuple[bytes, str]:
    """Download a document, refusing bodies larger than ``max_bytes``.

    Args:
        url: Document URL
        user_agent: HTTP User-Agent header
        timeout: Request timeout in seconds
        max_bytes: Optional size cap for the response body

    Returns:
        Tuple of (body, final_url) where final_url reflects redirects

    Raises:
        FeedFetchError: If the request fails or the body exceeds the cap
    """
    resp = fetch_url(url, user_agent, timeout, stream=True)
    try:
        content_length = resp.headers.get("Content-Length")
        try:
            declared_size = int(content_length) if content_length else None
        except (TypeError, ValueError):
            declared_size = None
        if max_bytes is not None and declared_size is not None and declared_size > max_bytes:
            raise FeedFetchError(
                f"Feed is {declared_size} bytes, larger than the {max_bytes} byte limit",
                source=url,
            )

        body_parts: List[bytes] = []
        total_bytes = 0
        for chunk in resp.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
            if not chunk:
                continue
            total_bytes += len(chunk)
            if max_bytes is not None and total_bytes > max_bytes:
                raise FeedFetchError(
                    f"Feed exceeded the {max_bytes} byte limit while downloading",
                    source=url,
                )
            body_parts.append(chunk)

        logger.debug("Read %s bytes from %s", total_bytes, url)
        return b"".join(body_parts), resp.url or url
    except (requests.RequestException, OSError) as exc:
        raise FeedFetchError(f"Failed to read response: {exc}", source=url) from exc
    finally:
        resp.close()
