"""URL validation, canonicalization and runtime guardrails."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from urllib.parse import urlsplit

from .errors import ConfigError, InvalidURLError
from .models import ParsedURL, VisitedSet

SUPPORTED_SCHEMES = frozenset({"http", "https"})


def validate_url(raw: object) -> ParsedURL:
    """Parse ``raw`` into an absolute http(s) URL or raise InvalidURLError."""
    if isinstance(raw, ParsedURL):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidURLError("URL is required")

    value = raw.strip()
    try:
        parts = urlsplit(value)
        # Accessing .port validates it; urlsplit alone accepts "host:abc".
        _ = parts.port
    except ValueError as exc:
        raise InvalidURLError(f"Invalid URL: {exc}") from exc

    scheme = parts.scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise InvalidURLError("Unsupported URL scheme")
    if not parts.hostname:
        raise InvalidURLError(f"Invalid URL: missing host in {value!r}")
    return ParsedURL(
        scheme=scheme,
        netloc=parts.netloc,
        path=parts.path,
        query=parts.query,
        fragment=parts.fragment,
    )


def is_supported_url(raw: object) -> bool:
    """Allow only absolute HTTP(S) URLs with a hostname."""
    try:
        validate_url(raw)
    except InvalidURLError:
        return False
    return True


def canonicalize_url(raw: object) -> str:
    """Return the fragment-less identity key used for visited checks."""
    return validate_url(raw).canonical


def build_visited_set(items: Iterable[object] | None) -> VisitedSet:
    """Canonicalize caller-supplied visited URLs, dropping values that are not http(s) URLs."""
    visited: set[str] = set()
    for item in items or ():
        try:
            visited.add(canonicalize_url(item))
        except InvalidURLError:
            continue
    return frozenset(visited)


def load_lines_from_file(path: str) -> list[str]:
    """Load non-empty lines from a UTF-8 text file."""
    content = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in content.splitlines() if line.strip()]


def validate_runtime_constraints(
    *,
    connect_timeout: float,
    read_timeout: float,
    max_redirects: int,
    steps: int,
    max_failure_streak: int,
) -> None:
    """Validate CLI/runtime configuration and raise ConfigError on invalid values."""
    if connect_timeout <= 0 or read_timeout <= 0:
        raise ConfigError("--timeout must be > 0.")
    if max_redirects < 1:
        raise ConfigError("--max-redirects must be >= 1.")
    if steps < 1:
        raise ConfigError("--steps must be >= 1.")
    if max_failure_streak < 1:
        raise ConfigError("--max-failure-streak must be >= 1.")
