"""JSON-ready envelopes for a "resolve next link" endpoint."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from typing import Any

from .config import WalkerConfig
from .errors import NoNavigableLinksError, UnsafeURLError, WalkerError
from .models import Fetcher, ResolvedLink
from .walker import build_picker

HTTP_OK = 200
HTTP_UNPROCESSABLE = 422


def link_to_payload(link: ResolvedLink, *, include_html: bool = True) -> dict[str, Any]:
    payload: dict[str, Any] = {"url": str(link.url), "label": link.label}
    if include_html:
        payload["html"] = link.html
    return payload


def error_to_payload(exc: WalkerError) -> dict[str, Any]:
    """Render a failure, keeping the fields callers use to tell failure kinds apart."""
    payload: dict[str, Any] = {"error": str(exc)}
    if isinstance(exc, UnsafeURLError):
        payload["unsafe"] = True
        payload["reasons"] = list(exc.reasons)
        payload["blocked_url"] = exc.candidate
    elif isinstance(exc, NoNavigableLinksError):
        payload["no_links"] = True
    return payload


def resolve_payload(
    url: str | None,
    config: WalkerConfig,
    *,
    fetcher: Fetcher | None = None,
    visited: Iterable[object] | None = None,
    rng: random.Random | None = None,
    logger: logging.Logger,
) -> tuple[int, dict[str, Any]]:
    """Resolve the next link for ``url`` (or the configured start URL) as ``(status, payload)``."""
    current = url.strip() if url and url.strip() else config.start_url
    try:
        picker = build_picker(
            current, config, visited=visited, rng=rng, fetcher=fetcher, logger=logger
        )
        link = picker.next_link()
    except WalkerError as exc:
        logger.warning("Walk from %s failed: %s", current, exc)
        return HTTP_UNPROCESSABLE, error_to_payload(exc)
    return HTTP_OK, link_to_payload(link)
