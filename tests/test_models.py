import logging

from random_walker.logging_utils import configure_logging, get_logger
from random_walker.validation import validate_url


def test_parsed_url_renders_and_canonicalizes() -> None:
    url = validate_url("https://User@Example.COM:8443/a%20b?q=1#frag")
    assert str(url) == "https://User@Example.COM:8443/a%20b?q=1#frag"
    assert url.host == "example.com"
    assert url.port == 8443
    assert url.canonical == "https://example.com:8443/a%20b?q=1"
    assert str(url.without_fragment()) == "https://User@Example.COM:8443/a%20b?q=1"


def test_ipv6_hosts_keep_brackets_in_canonical_form() -> None:
    assert validate_url("http://[::1]:80/x").canonical == "http://[::1]/x"


def test_get_logger_returns_component_children() -> None:
    assert get_logger().name == "random_walker"
    assert get_logger("walker").name == "random_walker.walker"
    configure_logging(verbose=True)
    assert logging.getLogger("urllib3").level == logging.INFO
