"""
Routing Layer

Exposes the URL routing engine: pattern matching, URL rewriting, browser
resolution and the resolution pipeline tying them together.
"""

from .url import compose_url, parse_url, rewrite_url
from .matching import create_regular_expression, is_hostname_match, is_match, is_rule_match
from .browser import guess_app_type, resolve_browser
from .router import get_url_shorteners, resolve

__all__ = [
    "compose_url",
    "create_regular_expression",
    "get_url_shorteners",
    "guess_app_type",
    "is_hostname_match",
    "is_match",
    "is_rule_match",
    "parse_url",
    "resolve",
    "resolve_browser",
    "rewrite_url",
]
