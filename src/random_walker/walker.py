"""Core orchestration: pick a random outbound link and resolve it to an embeddable page."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable

from .config import WalkerConfig
from .errors import FetchError, NoNavigableLinksError, UnsafeURLError, WalkerError
from .extraction import extract_candidates
from .fetchers import RedirectFollowingFetcher, make_session
from .logging_utils import get_logger
from .models import Candidate, Fetcher, FetchResult, ParsedURL, ResolvedLink, SafetyEvaluator
from .safety import evaluate_url
from .sanitizer import sanitize_html
from .validation import build_visited_set, validate_url


class LinkPicker:
    """Resolve one random step away from ``url``.

    Candidates are tried one at a time in a shuffled order; the first one that
    fetches, passes the safety check, has not been visited and sanitizes
    cleanly wins. ``visited`` is only read, never grown.
    """

    def __init__(
        self,
        url: object,
        *,
        fetcher: Fetcher,
        visited: Iterable[object] | None = None,
        rng: random.Random | None = None,
        evaluate: SafetyEvaluator = evaluate_url,
        logger: logging.Logger | None = None,
    ) -> None:
        self._source_url = validate_url(url)
        self._fetcher = fetcher
        self._visited = build_visited_set(visited)
        self._rng = rng if rng is not None else random.Random()
        self._evaluate = evaluate
        self._logger = logger or get_logger("walker")

    @property
    def source_url(self) -> ParsedURL:
        return self._source_url

    def next_url(self) -> str:
        return str(self.next_link().url)

    def next_link(self) -> ResolvedLink:
        candidates = self.extract_candidates()
        if not candidates:
            raise NoNavigableLinksError()

        order = list(candidates)
        self._rng.shuffle(order)
        self._logger.debug("Trying %d candidates from %s", len(order), self._source_url)

        last_error: WalkerError | None = None
        for candidate in order:
            if self._is_visited(candidate.url):
                continue
            try:
                link = self._resolve(candidate)
            except WalkerError as exc:
                self._logger.debug("Candidate %s failed: %s", candidate.url, exc)
                last_error = exc
                continue
            if link is None:
                continue
            self._logger.info("Resolved %s -> %s", self._source_url, link.url)
            return link

        raise last_error or NoNavigableLinksError()

    def extract_candidates(self) -> list[Candidate]:
        """Fetch the source page and list its outbound links."""
        try:
            result = self._fetcher.fetch(self._source_url)
        except Exception as exc:
            raise FetchError(f"Failed to fetch {self._source_url}: {exc}") from exc
        document_url = result.final_url or self._source_url
        return extract_candidates(result.body, document_url)

    def _is_visited(self, url: ParsedURL) -> bool:
        return url.canonical in self._visited

    def _fetch_candidate(self, url: ParsedURL) -> FetchResult:
        try:
            return self._fetcher.fetch(url)
        except Exception as exc:
            raise FetchError(f"Failed to fetch {url}: {exc}") from exc

    def _resolve(self, candidate: Candidate) -> ResolvedLink | None:
        result = self._fetch_candidate(candidate.url)
        final_url = result.final_url or validate_url(candidate.url)
        if self._is_visited(final_url):
            return None

        verdict = self._evaluate(final_url)
        if not verdict.safe:
            raise UnsafeURLError(
                f"Blocked unsafe URL {final_url}: {'; '.join(verdict.reasons)}",
                candidate=str(final_url),
                reasons=verdict.reasons,
            )

        html = sanitize_html(result.body, final_url)
        return ResolvedLink(url=final_url, label=candidate.label, html=html)


def build_fetcher(config: WalkerConfig, *, logger: logging.Logger) -> RedirectFollowingFetcher:
    """Build the production HTTP fetcher described by ``config``."""
    return RedirectFollowingFetcher(
        session=make_session(config.user_agent),
        connect_timeout=config.connect_timeout,
        read_timeout=config.read_timeout,
        max_redirects=config.max_redirects,
        logger=logger,
    )


def build_picker(
    url: object,
    config: WalkerConfig,
    *,
    visited: Iterable[object] | None = None,
    rng: random.Random | None = None,
    fetcher: Fetcher | None = None,
    logger: logging.Logger,
) -> LinkPicker:
    """Wire a LinkPicker with the production HTTP fetcher unless one is supplied."""
    if fetcher is None:
        fetcher = build_fetcher(config, logger=logger)
    return LinkPicker(url, fetcher=fetcher, visited=visited, rng=rng, logger=logger)
