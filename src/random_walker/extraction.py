"""Pure link extraction from fetched HTML."""

from __future__ import annotations

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from .errors import InvalidURLError
from .models import Candidate, ParsedURL
from .validation import validate_url

WHITESPACE_RE = re.compile(r"\s+")


def resolve_href(href: str | None, base: ParsedURL) -> ParsedURL | None:
    """Resolve an href against ``base``; return None unless it lands on an http(s) URL."""
    if href is None:
        return None
    value = href.strip()
    if not value:
        return None
    try:
        return validate_url(urljoin(str(base), value)).without_fragment()
    except (InvalidURLError, ValueError):
        return None


def link_label(anchor: Tag) -> str | None:
    """Return collapsed anchor text, falling back to the title attribute."""
    text = WHITESPACE_RE.sub(" ", anchor.get_text()).strip()
    if text:
        return text
    title = anchor.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return None


def document_base(soup: BeautifulSoup, document_url: ParsedURL) -> ParsedURL:
    """Return the effective base: the first ``<base href>`` if usable, else the document URL."""
    base_tag = soup.find("base", href=True)
    if isinstance(base_tag, Tag):
        href = base_tag.get("href")
        if isinstance(href, str):
            resolved = resolve_href(href, document_url)
            if resolved is not None:
                return resolved
    return document_url


def extract_candidates(html: str, document_url: ParsedURL) -> list[Candidate]:
    """Collect unique outbound http(s) links in document order."""
    soup = BeautifulSoup(html or "", "html.parser")
    base = document_base(soup, document_url)

    candidates: list[Candidate] = []
    seen: set[str] = set()
    for anchor in soup.find_all("a", href=True):
        if not isinstance(anchor, Tag):
            continue
        href = anchor.get("href")
        if not isinstance(href, str):
            continue
        url = resolve_href(href, base)
        if url is None or url.canonical in seen:
            continue
        seen.add(url.canonical)
        candidates.append(Candidate(url=url, label=link_label(anchor)))
    return candidates
