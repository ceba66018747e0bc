"""
Test suite for pattern compilation and matcher evaluation
"""

import re
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.routing.matching import (
    MatcherKind,
    classify_matcher,
    create_regular_expression,
    is_hostname_match,
    is_match,
    is_rule_match,
)
from core.routing.router import create_context


def make_context(url: str):
    return create_context(url, {"pid": 1, "name": "Terminal"})


def test_create_regular_expression():
    """Test wildcard pattern compilation."""

    print("Testing create_regular_expression...")

    # Bare patterns match either scheme
    re_plain = create_regular_expression("example.com")
    assert re_plain.pattern == r"^https?:\/\/example\.com$"
    assert re_plain.search("http://example.com")
    assert re_plain.search("https://example.com")
    assert not re_plain.search("https://example.com/")
    assert not re_plain.search("ftp://example.com")

    # Explicit scheme is kept
    re_http = create_regular_expression("http://example.com")
    assert re_http.search("http://example.com")
    assert not re_http.search("https://example.com")

    re_https = create_regular_expression("https://example.com")
    assert re_https.search("https://example.com")
    assert not re_https.search("http://example.com")

    # Wildcards
    re_path = create_regular_expression("example.com/*")
    assert re_path.search("https://example.com/")
    assert re_path.search("https://example.com/a/b?c=d")
    assert not re_path.search("https://example.com")
    assert not re_path.search("https://example.org/a")

    re_multi = create_regular_expression("sub.*.com*")
    assert re_multi.search("https://sub.test.com")
    assert re_multi.search("https://sub.test.com/path")
    assert not re_multi.search("https://other.test.com")

    # Case-insensitive
    assert re_plain.search("HTTPS://EXAMPLE.COM")

    # Metacharacters are literal
    re_meta = create_regular_expression("example.com/?q=(1)")
    assert re_meta.search("https://example.com/?q=(1)")
    assert not re_meta.search("https://exampleXcom/q=1")

    # Empty pattern matches only the empty string
    re_empty = create_regular_expression("")
    assert re_empty.search("")
    assert not re_empty.search("https://example.com")

    # Compiled patterns are reused across calls
    assert create_regular_expression("example.com") is re_plain
    assert create_regular_expression.cache_info().hits > 0

    print("✓ create_regular_expression tests passed")


def test_classify_matcher():
    """Test matcher classification."""

    print("Testing classify_matcher...")

    assert classify_matcher("example.com") is MatcherKind.PATTERN
    assert classify_matcher(re.compile("example")) is MatcherKind.REGEX
    assert classify_matcher(lambda ctx: True) is MatcherKind.PREDICATE
    assert classify_matcher(42) is MatcherKind.UNSUPPORTED
    assert classify_matcher(None) is MatcherKind.UNSUPPORTED

    print("✓ classify_matcher tests passed")


def test_is_match():
    """Test full-URL matching."""

    print("Testing is_match...")

    ctx = make_context("https://example.com/path?q=1")

    # Patterns and regexes
    assert is_match("example.com/*", ctx)
    assert not is_match("example.org/*", ctx)
    assert is_match(re.compile(r"path\?q=1"), ctx)
    assert not is_match(re.compile(r"^http://"), ctx)

    # Predicates
    assert is_match(lambda c: c.url.host == "example.com", ctx)
    assert not is_match(lambda c: c.url.host == "example.org", ctx)
    assert is_match(lambda c: "truthy", ctx)
    assert not is_match(lambda c: 0, ctx)

    # Lists are OR-combined
    assert is_match(["example.org/*", re.compile("example.com")], ctx)
    assert not is_match(["example.org/*", "example.net/*"], ctx)
    assert not is_match([], ctx)

    # Absent matcher never matches
    assert not is_match(None, ctx)

    # Unsupported elements never match, others still can
    assert not is_match(42, ctx)
    assert is_match([42, "example.com/*"], ctx)

    print("✓ is_match tests passed")


def test_is_match_predicate_arguments():
    """Test that predicates receive the request context."""

    print("Testing is_match predicate arguments...")

    ctx = make_context("https://example.com/")
    predicate = MagicMock(return_value=True)

    assert is_match(predicate, ctx)
    predicate.assert_called_once_with(ctx)

    print("✓ is_match predicate argument tests passed")


def test_is_match_short_circuits():
    """Test that list evaluation stops at the first match."""

    print("Testing is_match short-circuit...")

    ctx = make_context("https://example.com/")
    first = MagicMock(return_value=True)
    second = MagicMock(return_value=True)

    assert is_match([first, second], ctx)
    first.assert_called_once()
    second.assert_not_called()

    print("✓ is_match short-circuit tests passed")


def test_is_hostname_match():
    """Test hostname-only matching."""

    print("Testing is_hostname_match...")

    ctx = make_context("https://mail.google.com/mail/u/0/#inbox")

    # Patterns test the host, not the path
    assert is_hostname_match("mail.google.com", ctx)
    assert is_hostname_match("*.google.com", ctx)
    assert not is_hostname_match("google.com", ctx)
    assert not is_hostname_match("mail.google.com/mail/*", ctx)

    # Regexes are searched in the bare host
    assert is_hostname_match(re.compile(r"google\.com$"), ctx)
    assert is_hostname_match(re.compile(r"^mail\."), ctx)
    assert not is_hostname_match(re.compile("inbox"), ctx)

    # Predicates receive (host, ctx)
    predicate = MagicMock(return_value=True)
    assert is_hostname_match(predicate, ctx)
    predicate.assert_called_once_with("mail.google.com", ctx)

    assert is_hostname_match(["example.com", "mail.google.com"], ctx)
    assert not is_hostname_match(None, ctx)

    print("✓ is_hostname_match tests passed")


def test_is_rule_match():
    """Test that hostname and full-URL conditions are alternatives."""

    print("Testing is_rule_match...")

    ctx = make_context("https://example.com/docs")

    assert is_rule_match(SimpleNamespace(match=None, match_hostname="example.com"), ctx)
    assert is_rule_match(SimpleNamespace(match="example.com/*", match_hostname=None), ctx)
    assert is_rule_match(SimpleNamespace(match="example.com/*", match_hostname="other.com"), ctx)
    assert is_rule_match(SimpleNamespace(match="other.com/*", match_hostname="example.com"), ctx)
    assert not is_rule_match(SimpleNamespace(match="other.com/*", match_hostname="other.com"), ctx)

    # Neither condition: never applies
    assert not is_rule_match(SimpleNamespace(match=None, match_hostname=None), ctx)

    print("✓ is_rule_match tests passed")


def test_predicate_errors_propagate():
    """Test that exceptions from predicates are not swallowed."""

    print("Testing predicate error propagation...")

    ctx = make_context("https://example.com/")

    def broken(c):
        raise ZeroDivisionError("boom")

    try:
        is_match(broken, ctx)
        assert False, "expected ZeroDivisionError"
    except ZeroDivisionError as e:
        assert str(e) == "boom"

    print("✓ predicate error propagation tests passed")


def run_all_tests():
    """Run all test functions."""
    print("\n" + "="*60)
    print("Running Matcher Tests")
    print("="*60 + "\n")

    try:
        test_create_regular_expression()
        test_classify_matcher()
        test_is_match()
        test_is_match_predicate_arguments()
        test_is_match_short_circuits()
        test_is_hostname_match()
        test_is_rule_match()
        test_predicate_errors_propagate()

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
