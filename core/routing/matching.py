"""
Matcher Evaluation

Decides whether a rule applies to the current request.
Handles: wildcard patterns, compiled regular expressions and predicate
functions, alone or in lists (any element matching is enough).
"""

import re
from enum import Enum
from functools import lru_cache
from typing import Any, Optional

from infra.logger import logger_matcher


# ═══════════════════════════════════════════════════════════════════════════
# PATTERN COMPILER
# ═══════════════════════════════════════════════════════════════════════════

# Regex metacharacters escaped in wildcard patterns ("*" is escaped, then expanded)
_METACHARACTERS = re.compile(r"[-\[\]/{}()*+?.,\\^$|#\s]")

_SCHEME_PREFIX = r"https?:\/\/"


@lru_cache(maxsize=512)
def create_regular_expression(pattern: str) -> re.Pattern:
    """
    Compile a wildcard pattern into an anchored, case-insensitive regex.

    Patterns without an explicit http:// or https:// prefix match either
    scheme. The same compiled form is used for full URLs and bare hostnames;
    the caller picks the subject.

    Examples:
        "example.com"        → ^https?:\\/\\/example\\.com$
        "example.com/*"      → ^https?:\\/\\/example\\.com\\/.*$
        "http://example.com" → ^http:\\/\\/example\\.com$
        ""                   → ^$
    """
    if not pattern:
        return re.compile(r"^$")

    result = _METACHARACTERS.sub(lambda m: "\\" + m.group(0), pattern)
    result = result.replace("\\*", ".*")

    if not pattern.startswith(("http://", "https://")):
        result = _SCHEME_PREFIX + result

    return re.compile("^" + result + "$", re.IGNORECASE)


# ═══════════════════════════════════════════════════════════════════════════
# MATCHER CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════

class MatcherKind(Enum):
    """
    Shape of a single matcher value.

    REGEX: compiled regular expression, searched in the subject
    PATTERN: wildcard string, compiled with create_regular_expression
    PREDICATE: callable returning a truthy value
    UNSUPPORTED: anything else; never matches
    """
    REGEX = "regex"
    PATTERN = "pattern"
    PREDICATE = "predicate"
    UNSUPPORTED = "unsupported"


def classify_matcher(matcher: Any) -> MatcherKind:
    if isinstance(matcher, re.Pattern):
        return MatcherKind.REGEX
    if isinstance(matcher, str):
        return MatcherKind.PATTERN
    if callable(matcher):
        return MatcherKind.PREDICATE
    return MatcherKind.UNSUPPORTED


def _as_list(matcher) -> list:
    if isinstance(matcher, (list, tuple)):
        return list(matcher)
    return [matcher]


# ═══════════════════════════════════════════════════════════════════════════
# EVALUATION
# ═══════════════════════════════════════════════════════════════════════════

def _test(matcher, subject: str, *args, pattern_subject: Optional[str] = None) -> bool:
    kind = classify_matcher(matcher)

    if kind is MatcherKind.REGEX:
        return matcher.search(subject) is not None

    if kind is MatcherKind.PATTERN:
        target = subject if pattern_subject is None else pattern_subject
        return create_regular_expression(matcher).search(target) is not None

    if kind is MatcherKind.PREDICATE:
        # Exceptions raised by user predicates propagate unchanged
        return bool(matcher(*args))

    logger_matcher.warning(
        f"UNSUPPORTED_MATCHER | type={type(matcher).__name__} | treated as non-matching"
    )
    return False


def is_match(matcher, ctx) -> bool:
    """
    Evaluate a match condition against the full URL string.

    Args:
        matcher: A matcher, a list of matchers, or None
        ctx: Current request context (predicates receive it as-is)

    Returns:
        True if any matcher in the list matches; False for None
    """
    if matcher is None:
        return False

    return any(_test(m, ctx.url_string, ctx) for m in _as_list(matcher))


def is_hostname_match(matcher, ctx) -> bool:
    """
    Evaluate a match condition against the hostname only.

    Predicates receive (host, ctx) instead of (ctx). Regexes are searched in
    the bare host; wildcard patterns carry a scheme, so they are tested
    against "<protocol>://<host>".
    """
    if matcher is None:
        return False

    host = ctx.url.host
    qualified = f"{ctx.url.protocol}://{host}"
    return any(
        _test(m, host, host, ctx, pattern_subject=qualified) for m in _as_list(matcher)
    )


def is_rule_match(rule, ctx) -> bool:
    """A rule applies if its hostname condition OR its full-URL condition holds."""
    matched = is_hostname_match(rule.match_hostname, ctx) or is_match(rule.match, ctx)
    logger_matcher.debug(f"RULE_EVALUATED | matched={matched} | url={ctx.url_string[:80]}")
    return matched
