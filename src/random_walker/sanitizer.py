"""Rewrite fetched HTML so it can be embedded inertly (e.g. in an iframe srcdoc)."""

from __future__ import annotations

from bs4 import BeautifulSoup
from bs4.element import Comment, Doctype, NavigableString, Tag

from .errors import EmptyResponseError
from .models import ParsedURL

STRIPPED_ELEMENTS = ("script", "iframe", "frame", "frameset", "object", "embed")
URL_ATTRIBUTES = ("href", "src")


def _remove_active_elements(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(STRIPPED_ELEMENTS):
        tag.decompose()
    for meta in soup.find_all("meta"):
        if str(meta.get("http-equiv", "")).strip().lower() == "refresh":
            meta.decompose()
    # Conditional comments can carry markup that some engines still execute.
    for comment in soup.find_all(string=lambda node: isinstance(node, Comment)):
        comment.extract()


def _strip_attributes(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(True):
        for name in list(tag.attrs):
            if name.lower().startswith("on"):
                del tag.attrs[name]
            elif name.lower() in URL_ATTRIBUTES:
                value = str(tag.attrs[name]).strip().lower()
                if value.startswith("javascript:"):
                    del tag.attrs[name]


def _ensure_head(soup: BeautifulSoup) -> Tag:
    head = soup.find("head")
    if isinstance(head, Tag):
        return head
    head = soup.new_tag("head")
    html = soup.find("html")
    if isinstance(html, Tag):
        html.insert(0, head)
        return head
    position = 0
    for index, node in enumerate(soup.contents):
        if isinstance(node, Doctype):
            position = index + 1
    soup.insert(position, head)
    return head


def _trim_doctype_newline(soup: BeautifulSoup) -> None:
    # Doctype serializes with a trailing newline; drop the one already in the
    # source so a re-parse of the output yields the same string.
    for index, node in enumerate(soup.contents):
        if not isinstance(node, Doctype):
            continue
        following = soup.contents[index + 1] if index + 1 < len(soup.contents) else None
        if type(following) is NavigableString and following.startswith("\n"):
            remainder = str(following)[1:]
            if remainder:
                following.replace_with(NavigableString(remainder))
            else:
                following.extract()
        return


def _ensure_single_base(soup: BeautifulSoup, head: Tag, base_url: str) -> None:
    base = head.find("base")
    if not isinstance(base, Tag):
        base = soup.new_tag("base")
        head.insert(0, base)
    base["href"] = base_url
    for other in soup.find_all("base"):
        if other is not base:
            other.decompose()


def sanitize_html(html: str, base_url: ParsedURL | str) -> str:
    """Strip scripts, frames, refreshes and handlers, and pin relative URLs to ``base_url``."""
    if not html or not html.strip():
        raise EmptyResponseError("Empty response")

    soup = BeautifulSoup(html, "html.parser")
    _trim_doctype_newline(soup)
    _remove_active_elements(soup)
    _strip_attributes(soup)
    head = _ensure_head(soup)
    _ensure_single_base(soup, head, str(base_url))
    return str(soup)
