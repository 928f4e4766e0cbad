import math

from random_walker.safety import HIGH_RISK_PENALTY, MAX_SAFE_SCORE, evaluate_url
from random_walker.validation import validate_url


def test_plain_https_url_is_safe() -> None:
    verdict = evaluate_url(validate_url("https://example.com/path"))
    assert verdict.safe is True
    assert verdict.score == 0
    assert verdict.reasons == ()


def test_ip_host_is_blocked() -> None:
    verdict = evaluate_url("https://192.168.0.1/login")
    assert verdict.safe is False
    assert verdict.reasons[0] == "IP address hosts are blocked"
    assert "Contains suspicious terms: login" in verdict.reasons


def test_suspicious_tld_is_blocked() -> None:
    verdict = evaluate_url("https://phish.zip/form")
    assert verdict.safe is False
    assert verdict.reasons == ("Suspicious top-level domain",)
    assert verdict.score >= HIGH_RISK_PENALTY


def test_low_weight_warnings_alone_stay_safe() -> None:
    verdict = evaluate_url("http://secure-login.example.com")
    assert verdict.safe is True
    assert verdict.score == MAX_SAFE_SCORE
    assert verdict.reasons == (
        "URL must use HTTPS",
        "Contains suspicious terms: login, secure",
    )


def test_high_risk_reasons_come_before_warnings() -> None:
    verdict = evaluate_url("http://10.0.0.1/free-gift")
    assert verdict.safe is False
    assert verdict.reasons == (
        "IP address hosts are blocked",
        "URL must use HTTPS",
        "Contains suspicious terms: free, gift",
    )
    assert verdict.score == HIGH_RISK_PENALTY + 2


def test_invalid_input_is_unsafe_with_infinite_score() -> None:
    verdict = evaluate_url("not a url")
    assert verdict.safe is False
    assert math.isinf(verdict.score)
    assert verdict.reasons[0].startswith("Invalid URL")
