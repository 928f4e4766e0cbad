"""Heuristic URL safety scoring.

The verdict is advisory: it blocks obviously risky destinations (raw IP hosts,
TLDs popular with throwaway phishing domains) and records softer warnings
without acting on them.
"""

from __future__ import annotations

import math
import re

from .errors import InvalidURLError
from .models import ParsedURL, SafetyVerdict
from .validation import validate_url

SUSPICIOUS_TLDS = frozenset(
    {"zip", "review", "country", "stream", "download", "gq", "work", "men", "loan", "click", "link"}
)
SUSPICIOUS_KEYWORDS = (
    "login",
    "verify",
    "update",
    "account",
    "secure",
    "free",
    "gift",
    "winner",
    "bitcoin",
    "crypto",
    "invest",
)
IPV4_HOST_RE = re.compile(r"^(?:\d{1,3}\.){3}\d{1,3}$")

# Low-weight warnings (HTTPS, keywords) can add up to this and still pass.
MAX_SAFE_SCORE = 2
HIGH_RISK_PENALTY = 100


def is_ip_host(url: ParsedURL) -> bool:
    return bool(IPV4_HOST_RE.match(url.host))


def has_suspicious_tld(url: ParsedURL) -> bool:
    return url.host.lower().rstrip(".").rsplit(".", maxsplit=1)[-1] in SUSPICIOUS_TLDS


def suspicious_keyword_hits(url: ParsedURL) -> list[str]:
    """Return the keywords found in host, path and query, in list order."""
    haystack = " ".join(part for part in (url.host, url.path, url.query) if part).lower()
    return [keyword for keyword in SUSPICIOUS_KEYWORDS if keyword in haystack]


def evaluate_url(raw: object) -> SafetyVerdict:
    """Score a URL and classify it; any high-risk flag makes it unsafe."""
    try:
        url = validate_url(raw)
    except InvalidURLError as exc:
        message = str(exc)
        if not message.startswith("Invalid URL"):
            message = f"Invalid URL: {message}"
        return SafetyVerdict(safe=False, score=math.inf, reasons=(message,))

    high_risk: list[str] = []
    if is_ip_host(url):
        high_risk.append("IP address hosts are blocked")
    if has_suspicious_tld(url):
        high_risk.append("Suspicious top-level domain")

    warnings: list[str] = []
    if url.scheme != "https":
        warnings.append("URL must use HTTPS")
    hits = suspicious_keyword_hits(url)
    if hits:
        warnings.append(f"Contains suspicious terms: {', '.join(hits)}")

    score = len(warnings) + HIGH_RISK_PENALTY * len(high_risk)
    safe = not high_risk and score <= MAX_SAFE_SCORE
    return SafetyVerdict(safe=safe, score=score, reasons=tuple(high_risk + warnings))
