"""Custom exceptions for the random walker."""

from __future__ import annotations


class WalkerError(Exception):
    """Base exception for this project."""


class ConfigError(WalkerError):
    """Raised when runtime configuration is invalid."""


class InvalidURLError(WalkerError):
    """Raised when a value is not an absolute http(s) URL."""


class FetchError(WalkerError):
    """Raised when fetching a URL fails."""


class EmptyResponseError(WalkerError):
    """Raised when a fetched page has no body to sanitize."""


class NoNavigableLinksError(WalkerError):
    """Raised when a page offers no link that could be followed."""

    def __init__(self, message: str = "No navigable links found") -> None:
        super().__init__(message)


class UnsafeURLError(WalkerError):
    """Raised when the safety check rejects a resolved candidate."""

    def __init__(self, message: str, *, candidate: str, reasons: tuple[str, ...] | list[str]) -> None:
        super().__init__(message)
        self.candidate = candidate
        self.reasons = tuple(reasons)
