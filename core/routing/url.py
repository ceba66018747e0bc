"""
URL Resolution & Rewriting

Parses URL strings into UrlObjects, recomposes them, and applies rewrite
directives (string, partial URL or function) to a request context.
"""

from collections.abc import Mapping
from typing import Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ValidationError

from tools.schemas import PartialUrl, RequestContext, UrlObject
from core.config_validator import fail, from_validation_error
from core.state import unwrap
from infra.logger import logger_rewrite


# ═══════════════════════════════════════════════════════════════════════════
# PARSE & COMPOSE
# ═══════════════════════════════════════════════════════════════════════════

def _split_host(netloc: str):
    """Split "user:pass@host:port" into (host, port) keeping the host's case."""
    hostinfo = netloc.rpartition("@")[2]
    host, sep, port = hostinfo.rpartition(":")

    if not sep or not (port == "" or (port.isascii() and port.isdigit())):
        # No port, or the colon belongs to a bracketed IPv6 address
        return hostinfo, None

    return host, int(port) if port else None


def parse_url(url_string: str) -> UrlObject:
    """
    Decompose a URL string.

    Delimiters are stripped from protocol, search and hash; port is an int
    or None; missing string parts are "".

    Example:
        >>> parse_url("https://user@example.com:8080/a?q=1#top")
        UrlObject(protocol='https', username='user', password='', host='example.com',
                  port=8080, pathname='/a', search='q=1', hash='top')

    Raises:
        ConfigValidationError: URL_ERROR if the string cannot be split,
            e.g. an unterminated IPv6 host
    """
    try:
        parts = urlsplit(url_string)
    except ValueError as e:
        fail("URL_ERROR", f"{e}: {url_string[:120]}", "url")

    host, port = _split_host(parts.netloc)

    return UrlObject(
        protocol=parts.scheme,
        username=parts.username or "",
        password=parts.password or "",
        host=host,
        port=port,
        pathname=parts.path,
        search=parts.query,
        hash=parts.fragment,
    )


def compose_url(url: Union[UrlObject, Mapping]) -> str:
    """
    Recompose a URL string.

    protocol://[username[:password]@]host[:port][pathname][?search][#hash]

    Empty segments are omitted together with their delimiter.
    """
    if isinstance(url, Mapping):
        url = UrlObject.model_validate(dict(url))

    auth = ""
    if url.username:
        auth = url.username
        if url.password:
            auth += f":{url.password}"
        auth += "@"

    port = f":{url.port}" if url.port else ""
    search = f"?{url.search}" if url.search else ""
    fragment = f"#{url.hash}" if url.hash else ""

    return f"{url.protocol}://{auth}{url.host}{port}{url.pathname or ''}{search}{fragment}"


# ═══════════════════════════════════════════════════════════════════════════
# DIRECTIVE RESOLUTION
# ═══════════════════════════════════════════════════════════════════════════

def _partial_fields(value) -> dict:
    """Fields explicitly present in a partial URL value."""
    if isinstance(value, PartialUrl):
        return value.model_dump(exclude_unset=True)

    if isinstance(value, UrlObject):
        return value.model_dump()

    if isinstance(value, BaseModel):
        return value.model_dump(exclude_unset=True)

    try:
        return PartialUrl.model_validate(dict(value)).model_dump(exclude_unset=True)
    except ValidationError as e:
        raise from_validation_error("URL_ERROR", e, prefix="url") from e


def _merge(base: UrlObject, value) -> dict:
    return {**base.model_dump(), **_partial_fields(value)}


def resolve_url(directive, ctx):
    """
    Resolve a rewrite directive to a URL string or a merged URL dict.

    Strings are used verbatim, partial URLs are merged over ctx.url, and
    functions are called once with ctx; their result is resolved the same
    way (merging against the original ctx.url).
    """
    base = unwrap(ctx).url

    if isinstance(directive, str):
        return directive

    if isinstance(directive, (Mapping, BaseModel)):
        return _merge(base, directive)

    if callable(directive):
        resolved = directive(ctx)

        if isinstance(resolved, str):
            return resolved

        if isinstance(resolved, (Mapping, BaseModel)):
            return _merge(base, resolved)

        fail(
            "URL_ERROR",
            f"url function must return a string or a partial URL, got {type(resolved).__name__}",
            "url",
        )

    fail("URL_ERROR", f"Unsupported url directive of type {type(directive).__name__}", "url")


# ═══════════════════════════════════════════════════════════════════════════
# REWRITE
# ═══════════════════════════════════════════════════════════════════════════

def rewrite_url(directive, ctx) -> RequestContext:
    """
    Apply a rewrite directive and build the next request context.

    Args:
        directive: URL string, partial URL (dict or PartialUrl) or function
        ctx: Current RequestContext (or a LegacyContext view of it)

    Returns:
        A new RequestContext; the input context is never modified

    Raises:
        ConfigValidationError: If the resolved value is not a valid URL
    """
    current = unwrap(ctx)
    resolved = resolve_url(directive, ctx)

    if isinstance(resolved, str):
        updated = current.model_copy(update={"url_string": resolved, "url": parse_url(resolved)})
    else:
        try:
            url = UrlObject.model_validate(resolved)
        except ValidationError as e:
            raise from_validation_error("URL_ERROR", e, prefix="url") from e

        updated = current.model_copy(update={"url": url, "url_string": compose_url(url)})

    logger_rewrite.debug(
        f"URL_RESOLVED | from={current.url_string[:80]} | to={updated.url_string[:80]}"
    )
    return updated
