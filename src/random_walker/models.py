"""Protocols and lightweight model types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Protocol
from urllib.parse import urlsplit, urlunsplit

DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class ParsedURL:
    """An absolute http(s) URL. Build instances through ``validation.validate_url``."""

    scheme: str
    netloc: str
    path: str = ""
    query: str = ""
    fragment: str = ""

    @property
    def host(self) -> str:
        return urlsplit(str(self)).hostname or ""

    @property
    def port(self) -> int | None:
        return urlsplit(str(self)).port

    @property
    def canonical(self) -> str:
        """Identity key: lowercased scheme and host, default port dropped, no fragment."""
        host = self.host
        if ":" in host:
            host = f"[{host}]"
        port = self.port
        if port is not None and port != DEFAULT_PORTS.get(self.scheme):
            host = f"{host}:{port}"
        return urlunsplit((self.scheme, host, self.path or "/", self.query, ""))

    def without_fragment(self) -> ParsedURL:
        return replace(self, fragment="")

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.query, self.fragment))


VisitedSet = frozenset[str]


@dataclass(frozen=True)
class Candidate:
    """An extracted outbound link that has not been fetched yet."""

    url: ParsedURL
    label: str | None = None


@dataclass(frozen=True)
class FetchResult:
    """Body of a fetched page and the URL it finally resolved to, when known."""

    body: str
    final_url: ParsedURL | None = None


@dataclass(frozen=True)
class SafetyVerdict:
    safe: bool
    score: float
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class ResolvedLink:
    """A fetched, sanitized destination ready to be embedded."""

    url: ParsedURL
    label: str | None
    html: str


class Fetcher(Protocol):
    """Contract for page fetchers."""

    def fetch(self, url: ParsedURL) -> FetchResult:
        """Return the page body and its post-redirect URL, or raise FetchError."""


class LinkSource(Protocol):
    """Anything that can resolve one random step, e.g. ``walker.LinkPicker``."""

    def next_link(self) -> ResolvedLink:
        """Return the next resolved link or raise WalkerError."""


SafetyEvaluator = Callable[[ParsedURL], SafetyVerdict]
PickerFactory = Callable[[str, VisitedSet], LinkSource]
