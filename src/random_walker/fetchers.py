"""HTTP fetcher that follows redirects hop by hop."""

from __future__ import annotations

import logging
from urllib.parse import urljoin

from requests import Session
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException
from urllib3.util.retry import Retry

from .config import DEFAULT_CONNECT_TIMEOUT, DEFAULT_MAX_REDIRECTS, DEFAULT_READ_TIMEOUT
from .errors import FetchError, InvalidURLError
from .models import FetchResult, ParsedURL
from .validation import validate_url


def make_session(user_agent: str) -> Session:
    """Create a requests session with a fixed user agent and no transport retries."""
    session = Session()
    session.headers.update({"User-Agent": user_agent})
    # A failed candidate is abandoned rather than retried, and redirects are
    # followed by RedirectFollowingFetcher so every hop is validated.
    retry = Retry(total=0, read=False, redirect=False, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def resolve_location(current: ParsedURL, location: str) -> ParsedURL:
    """Resolve a ``Location`` header against the URL that returned it."""
    value = location.strip()
    if not value:
        raise FetchError("Redirect without location")
    try:
        return validate_url(urljoin(str(current), value))
    except (InvalidURLError, ValueError) as exc:
        raise FetchError("Redirected to unsupported scheme") from exc


class RedirectFollowingFetcher:
    """Requests-based fetcher that chases 3xx responses up to a hop limit."""

    def __init__(
        self,
        *,
        session: Session,
        logger: logging.Logger,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
    ) -> None:
        self._session = session
        self._timeout = (connect_timeout, read_timeout)
        self._max_redirects = max_redirects
        self._logger = logger

    def fetch(self, url: ParsedURL) -> FetchResult:
        current = validate_url(url)
        remaining = self._max_redirects
        while True:
            if remaining <= 0:
                raise FetchError("Too many redirects")

            try:
                response = self._session.get(
                    str(current), timeout=self._timeout, allow_redirects=False
                )
            except RequestException as exc:
                self._logger.debug("Request failed for %s: %s", current, exc)
                raise FetchError(f"{type(exc).__name__}: {exc}") from exc

            with response:
                status = response.status_code
                if 200 <= status < 300:
                    return FetchResult(body=str(response.text), final_url=current)
                if not 300 <= status < 400:
                    raise FetchError(f"HTTP {status} {response.reason or ''}".rstrip())
                location = response.headers.get("Location")

            if location is None:
                raise FetchError("Redirect without location")
            next_url = resolve_location(current, location)
            self._logger.debug("Redirect %d from %s to %s", status, current, next_url)
            current = next_url
            remaining -= 1
