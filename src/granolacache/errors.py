"""Error taxonomy surfaced to callers of the query API."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds a UI can map to fixed messages."""

    NOT_INSTALLED = "not_installed"
    CACHE_NOT_FOUND = "cache_not_found"
    CACHE_PARSE_ERROR = "cache_parse_error"

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def retryable(self) -> bool:
        """Whether calling again later may succeed without user action."""
        return self is ErrorKind.CACHE_NOT_FOUND


_MESSAGES = {
    ErrorKind.NOT_INSTALLED: "Granola is not installed. Install it from granola.ai to use this feature.",
    ErrorKind.CACHE_NOT_FOUND: "Granola cache not found. Open Granola and record a meeting first.",
    ErrorKind.CACHE_PARSE_ERROR: "Could not read Granola data. Try restarting Granola.",
}


class GranolaCacheError(Exception):
    """Base class for errors raised while reading the Granola cache."""

    kind: ErrorKind = ErrorKind.CACHE_PARSE_ERROR


class MalformedCacheError(GranolaCacheError):
    """The cache file exists but does not match the expected envelope."""

    kind = ErrorKind.CACHE_PARSE_ERROR
