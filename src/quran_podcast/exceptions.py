"""Custom exceptions for quran_podcast feed handling.

These are raised inside the fetch and parse layers and converted to a
``FeedResult`` at the extraction boundary, so callers of the public
extraction API never see them.

Exception Hierarchy:
    FeedError (base)
    ├── FeedFetchError - Network failures, bad status, oversized bodies
    └── FeedParseError - Malformed or non-RSS documents
"""

from typing import Optional


class FeedError(Exception):
    """Base exception for all feed-related errors.

    Attributes:
        source: Where the feed came from (URL or "<text>")
        message: Human-readable error message
        suggestion: Optional suggestion for resolving the error
    """

    def __init__(
        self,
        message: str,
        source: str = "<text>",
        suggestion: Optional[str] = None,
    ) -> None:
        self.source = source
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with source and suggestion."""
        parts = [f"[{self.source}] {self.message}"]
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " ".join(parts)


class FeedFetchError(FeedError):
    """Raised when the feed document cannot be retrieved.

    Common causes:
    - DNS/connection failures and timeouts
    - Non-success HTTP status
    - Response body larger than the configured cap

    Example:
        >>> raise FeedFetchError(
        ...     message="HTTP 404",
        ...     source="https://example.com/feed.xml",
        ...     status_code=404,
        ... )
    """

    def __init__(
        self,
        message: str,
        source: str = "<text>",
        status_code: Optional[int] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message=message, source=source, suggestion=suggestion)


class FeedParseError(FeedError):
    """Raised when the feed document is not well-formed RSS."""
