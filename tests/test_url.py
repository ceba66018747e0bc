"""
Test suite for URL parsing, composition and rewriting
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.config_validator import ConfigValidationError
from core.routing.router import create_context
from core.routing.url import compose_url, parse_url, resolve_url, rewrite_url
from tools.schemas import PartialUrl, UrlObject


def make_context(url: str):
    return create_context(url, {"pid": 1, "name": "Terminal"})


def expect_url_error(directive, ctx) -> ConfigValidationError:
    try:
        rewrite_url(directive, ctx)
    except ConfigValidationError as e:
        assert e.category == "URL_ERROR", e.category
        return e
    raise AssertionError(f"expected URL_ERROR for {directive!r}")


def test_parse_url():
    """Test URL decomposition."""

    print("Testing parse_url...")

    url = parse_url("https://user:pw@Example.com:8080/a/b?q=1&r=2#frag")
    assert url.protocol == "https"
    assert url.username == "user"
    assert url.password == "pw"
    assert url.host == "Example.com"
    assert url.port == 8080
    assert url.pathname == "/a/b"
    assert url.search == "q=1&r=2"
    assert url.hash == "frag"

    # Missing parts
    url = parse_url("https://example.com")
    assert url.host == "example.com"
    assert url.port is None
    assert url.username == ""
    assert url.password == ""
    assert url.pathname == ""
    assert url.search == ""
    assert url.hash == ""

    # IPv6 hosts keep their brackets
    url = parse_url("http://[::1]:8080/status")
    assert url.host == "[::1]"
    assert url.port == 8080

    url = parse_url("http://[::1]/status")
    assert url.host == "[::1]"
    assert url.port is None

    print("✓ parse_url tests passed")


def test_compose_url():
    """Test URL composition."""

    print("Testing compose_url...")

    # Parse then compose returns the input for canonical URLs
    for url_string in [
        "https://example.com",
        "https://example.com/",
        "http://example.com:8080/path?q=1#top",
        "https://user:pw@example.com/a",
        "https://user@example.com/a",
        "http://[::1]:8080/status",
    ]:
        assert compose_url(parse_url(url_string)) == url_string, url_string

    # Mappings are accepted
    assert compose_url({"protocol": "http", "host": "x.com", "pathname": "/p"}) == "http://x.com/p"

    # Empty segments are dropped with their delimiter
    url = UrlObject(protocol="https", host="example.com", pathname="/a", search="", hash="")
    assert compose_url(url) == "https://example.com/a"

    # Compose then parse returns a fully populated URL unchanged
    url = UrlObject(
        protocol="https", username="user", password="pw", host="example.com",
        port=8443, pathname="/a/b", search="q=1", hash="top",
    )
    assert parse_url(compose_url(url)) == url

    print("✓ compose_url tests passed")


def test_rewrite_with_string():
    """Test rewriting to a literal URL string."""

    print("Testing rewrite_url with strings...")

    ctx = make_context("https://example.com/a")
    updated = rewrite_url("https://other.org/b?x=1", ctx)

    assert updated.url_string == "https://other.org/b?x=1"
    assert updated.url.host == "other.org"
    assert updated.url.search == "x=1"
    assert updated.opener == ctx.opener

    # Input context is untouched
    assert ctx.url_string == "https://example.com/a"
    assert ctx.url.host == "example.com"

    print("✓ rewrite_url string tests passed")


def test_rewrite_with_partial_url():
    """Test merging partial URLs over the current one."""

    print("Testing rewrite_url with partial URLs...")

    ctx = make_context("https://example.com/a?b=1")

    # Protocol change
    updated = rewrite_url({"protocol": "http"}, ctx)
    assert updated.url_string == "http://example.com/a?b=1"
    assert updated.url.protocol == "http"

    # Host change
    updated = rewrite_url({"host": "example.org"}, ctx)
    assert updated.url_string == "https://example.org/a?b=1"

    # Multiple changes
    updated = rewrite_url({"host": "example.org", "pathname": "/new", "port": 8443}, ctx)
    assert updated.url_string == "https://example.org:8443/new?b=1"
    assert updated.url.port == 8443

    # Explicitly empty fields are applied
    updated = rewrite_url({"search": ""}, ctx)
    assert updated.url_string == "https://example.com/a"

    # Model instances behave like mappings
    updated = rewrite_url(PartialUrl(hash="top"), ctx)
    assert updated.url_string == "https://example.com/a?b=1#top"

    print("✓ rewrite_url partial URL tests passed")


def test_rewrite_with_function():
    """Test function directives."""

    print("Testing rewrite_url with functions...")

    ctx = make_context("https://example.com/a")

    to_string = MagicMock(return_value="https://other.org/")
    updated = rewrite_url(to_string, ctx)
    to_string.assert_called_once_with(ctx)
    assert updated.url_string == "https://other.org/"

    # Returned partial URLs merge over the original URL
    updated = rewrite_url(lambda c: {"host": c.url.host.replace("com", "net")}, ctx)
    assert updated.url_string == "https://example.net/a"

    # Functions are called exactly once
    to_partial = MagicMock(return_value={"pathname": "/b"})
    rewrite_url(to_partial, ctx)
    assert to_partial.call_count == 1

    print("✓ rewrite_url function tests passed")


def test_resolve_url():
    """Test directive resolution without building a context."""

    print("Testing resolve_url...")

    ctx = make_context("https://example.com/a")

    assert resolve_url("https://x.org", ctx) == "https://x.org"

    merged = resolve_url({"pathname": "/b"}, ctx)
    assert merged["host"] == "example.com"
    assert merged["pathname"] == "/b"

    print("✓ resolve_url tests passed")


def test_rewrite_errors():
    """Test invalid rewrite results."""

    print("Testing rewrite_url errors...")

    ctx = make_context("https://example.com/a")

    # Function returning something that is not a URL
    expect_url_error(lambda c: 42, ctx)
    expect_url_error(lambda c: None, ctx)

    # Unknown URL field
    error = expect_url_error({"hots": "example.org"}, ctx)
    assert error.path == "url.hots", error.path

    # Wrong field types
    expect_url_error({"port": "not-a-port"}, ctx)
    expect_url_error({"port": "1234"}, ctx)
    expect_url_error(lambda c: {"pathname": 5}, ctx)

    # Required field cleared
    expect_url_error({"host": None}, ctx)

    # Unsupported directive
    expect_url_error(3.14, ctx)

    # Strings that cannot be split into a URL
    error = expect_url_error("http://[bad", ctx)
    assert error.path == "url", error.path
    expect_url_error(lambda c: "http://[::1", ctx)

    print("✓ rewrite_url error tests passed")


def run_all_tests():
    """Run all test functions."""
    print("\n" + "="*60)
    print("Running URL Tests")
    print("="*60 + "\n")

    try:
        test_parse_url()
        test_compose_url()
        test_rewrite_with_string()
        test_rewrite_with_partial_url()
        test_rewrite_with_function()
        test_resolve_url()
        test_rewrite_errors()

        print("\n" + "="*60)
        print("✅ ALL TESTS PASSED!")
        print("="*60 + "\n")

    except AssertionError as e:
        print("\n" + "="*60)
        print("❌ TEST FAILED!")
        print("="*60)
        print(f"Error: {e}\n")
        import traceback
        traceback.print_exc()
        raise


if __name__ == "__main__":
    run_all_tests()
