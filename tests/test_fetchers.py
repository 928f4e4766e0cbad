import logging
from typing import Any

import pytest
import requests

from random_walker.errors import FetchError
from random_walker.fetchers import RedirectFollowingFetcher, make_session, resolve_location
from random_walker.validation import validate_url


class FakeResponse:
    def __init__(
        self,
        *,
        status_code: int = 200,
        text: str = "",
        reason: str = "OK",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.text = text
        self.reason = reason
        self.headers = headers or {}
        self.closed = False

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.closed = True


class FakeSession:
    def __init__(self, responses: dict[str, Any]) -> None:
        self._responses = responses
        self.calls: list[str] = []
        self.kwargs: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(url)
        self.kwargs.append(kwargs)
        response = self._responses[url]
        if isinstance(response, Exception):
            raise response
        return response


def redirect(location: str | None, status: int = 302) -> FakeResponse:
    headers = {"Location": location} if location is not None else {}
    return FakeResponse(status_code=status, reason="Found", headers=headers)


def make_fetcher(session: FakeSession, max_redirects: int = 5) -> RedirectFollowingFetcher:
    return RedirectFollowingFetcher(
        session=session,  # type: ignore[arg-type]
        connect_timeout=2.0,
        read_timeout=3.0,
        max_redirects=max_redirects,
        logger=logging.getLogger("test"),
    )


def test_fetch_returns_body_and_requested_url_on_success() -> None:
    session = FakeSession({"https://example.com/": FakeResponse(text="<p>hi</p>")})
    result = make_fetcher(session).fetch(validate_url("https://example.com/"))
    assert result.body == "<p>hi</p>"
    assert str(result.final_url) == "https://example.com/"
    assert session.kwargs[0] == {"timeout": (2.0, 3.0), "allow_redirects": False}


def test_fetch_follows_relative_and_absolute_redirects() -> None:
    session = FakeSession(
        {
            "https://a.example/start": redirect("/moved", status=301),
            "https://a.example/moved": redirect("https://b.example/final", status=307),
            "https://b.example/final": FakeResponse(text="done"),
        }
    )
    result = make_fetcher(session).fetch(validate_url("https://a.example/start"))
    assert result.body == "done"
    assert str(result.final_url) == "https://b.example/final"
    assert session.calls == [
        "https://a.example/start",
        "https://a.example/moved",
        "https://b.example/final",
    ]


def test_fetch_gives_up_when_hop_budget_is_exhausted() -> None:
    session = FakeSession(
        {
            "https://loop.example/1": redirect("/2"),
            "https://loop.example/2": redirect("/3"),
            "https://loop.example/3": FakeResponse(text="too late"),
        }
    )
    with pytest.raises(FetchError, match="Too many redirects"):
        make_fetcher(session, max_redirects=2).fetch(validate_url("https://loop.example/1"))
    assert len(session.calls) == 2


def test_fetch_rejects_redirect_without_location() -> None:
    session = FakeSession({"https://example.com/": redirect(None)})
    with pytest.raises(FetchError, match="Redirect without location"):
        make_fetcher(session).fetch(validate_url("https://example.com/"))


def test_fetch_rejects_redirect_to_unsupported_scheme() -> None:
    session = FakeSession({"https://example.com/": redirect("ftp://files.example/x")})
    with pytest.raises(FetchError, match="unsupported scheme"):
        make_fetcher(session).fetch(validate_url("https://example.com/"))


def test_fetch_reports_http_status_and_reason() -> None:
    session = FakeSession(
        {"https://example.com/missing": FakeResponse(status_code=404, reason="Not Found")}
    )
    with pytest.raises(FetchError, match="HTTP 404 Not Found"):
        make_fetcher(session).fetch(validate_url("https://example.com/missing"))


def test_fetch_wraps_transport_errors_with_cause() -> None:
    cause = requests.ConnectionError("connection refused")
    session = FakeSession({"https://down.example/": cause})
    with pytest.raises(FetchError) as info:
        make_fetcher(session).fetch(validate_url("https://down.example/"))
    assert info.value.__cause__ is cause
    assert "connection refused" in str(info.value)


def test_fetch_rejects_malformed_redirect_location() -> None:
    session = FakeSession({"https://example.com/": redirect("http://[oops/x")})
    with pytest.raises(FetchError, match="unsupported scheme"):
        make_fetcher(session).fetch(validate_url("https://example.com/"))


def test_resolve_location_joins_against_current_url() -> None:
    current = validate_url("https://example.com/dir/page")
    assert str(resolve_location(current, " next ")) == "https://example.com/dir/next"
    with pytest.raises(FetchError):
        resolve_location(current, "javascript:alert(1)")


def test_make_session_sets_user_agent_and_disables_retries() -> None:
    session = make_session("walker-agent")
    assert session.headers["User-Agent"] == "walker-agent"
    adapter = session.get_adapter("https://example.com")
    assert adapter.max_retries.total == 0  # type: ignore[attr-defined]
