"""
Resolution Pipeline

Decides, for one incoming URL, what the final URL is and which browsers
should open it:

1. Validate the configuration
2. Build the request context from the URL and its opener
3. Rewrite stage: apply EVERY matching rewrite rule, in order
4. Handler stage: the FIRST matching handler decides the browser
5. Otherwise fall back to the default browser

The asymmetry between stages 3 and 4 is intentional.
"""

from collections.abc import Mapping
from typing import List, Optional, Union

from pydantic import ValidationError

from tools.schemas import Application, RequestContext, ResolutionResult, RoutingConfig
from core.config_validator import from_validation_error, fail, validate_config
from core.routing.browser import resolve_browser
from core.routing.matching import is_rule_match
from core.routing.url import parse_url, rewrite_url
from core.state import wrap
from app.config import DEFAULT_URL_SHORTENERS
from infra.logger import (
    log_default_browser,
    log_evaluation_error,
    log_handler_matched,
    log_request_start,
    log_resolution_complete,
    log_rewrite_applied,
)


# ═══════════════════════════════════════════════════════════════════════════
# CONTEXT
# ═══════════════════════════════════════════════════════════════════════════

def _build_opener(opener) -> Application:
    if isinstance(opener, Application):
        return opener

    if not isinstance(opener, Mapping):
        fail("OPENER_ERROR", "opener must be an Application or a mapping", "opener")

    try:
        return Application.model_validate(dict(opener))
    except ValidationError as e:
        raise from_validation_error("OPENER_ERROR", e, prefix="opener") from e


def create_context(url_string: str, opener) -> RequestContext:
    """Build the initial request context for a URL."""
    return RequestContext(
        url_string=url_string,
        url=parse_url(url_string),
        opener=_build_opener(opener),
    )


def format_request_log(url_string: str, opener: Application) -> str:
    return (
        f"Opening {url_string} from {opener.name or 'N/A'}\n"
        f"\tbundleId: {opener.bundle_id or 'N/A'}\n"
        f"\tpath: {opener.path or 'N/A'}"
    )


# ═══════════════════════════════════════════════════════════════════════════
# STAGES
# ═══════════════════════════════════════════════════════════════════════════

def process_rewrites(config: RoutingConfig, ctx: RequestContext, api) -> RequestContext:
    """
    Apply every matching rewrite rule in declaration order.

    Later rules see the URL as rewritten by earlier ones.
    """
    for index, rule in enumerate(config.rewrite):
        view = wrap(ctx, api)
        try:
            if not is_rule_match(rule, view):
                continue
            before = ctx.url_string
            ctx = rewrite_url(rule.url, view)
        except Exception as e:
            log_evaluation_error("rewrite", index, e)
            raise

        log_rewrite_applied(index, before, ctx.url_string)

    return ctx


def process_handlers(
    config: RoutingConfig,
    ctx: RequestContext,
    api,
) -> Optional[ResolutionResult]:
    """
    Resolve the browser of the first matching handler.

    Returns None when no handler matches. Later handlers are never evaluated
    once one matches.
    """
    for index, handler in enumerate(config.handlers):
        view = wrap(ctx, api)
        try:
            if not is_rule_match(handler, view):
                continue

            if handler.url is not None:
                ctx = rewrite_url(handler.url, view)
                view = wrap(ctx, api)

            log_handler_matched(index, ctx.url_string)
            return resolve_browser(handler.browser, view)
        except Exception as e:
            log_evaluation_error("handlers", index, e)
            raise

    return None


# ═══════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ═══════════════════════════════════════════════════════════════════════════

def resolve(
    config,
    url_string: str,
    opener: Union[Application, Mapping],
    api=None,
) -> ResolutionResult:
    """
    Resolve one URL open request against a routing configuration.

    Args:
        config: Candidate configuration (dict) or an already validated RoutingConfig
        url_string: The URL that was opened
        opener: The application that opened it (Application or mapping)
        api: Host API handed to configuration functions (defaults to tools.api.api)

    Returns:
        ResolutionResult with the browsers to open and the final URL

    Raises:
        ConfigValidationError: If the configuration, a rewritten URL or a
            browser object is invalid
        Exception: Anything raised by a configuration function, unchanged
    """
    if api is None:
        from tools.api import api as default_api
        api = default_api

    routing_config = validate_config(config)
    ctx = create_context(url_string, opener)

    log_request_start(url_string, ctx.opener.name)

    if routing_config.options.log_requests:
        api.log(format_request_log(url_string, ctx.opener))

    ctx = process_rewrites(routing_config, ctx, api)

    result = process_handlers(routing_config, ctx, api)
    if result is None:
        log_default_browser(ctx.url_string)
        try:
            result = resolve_browser(routing_config.default_browser, wrap(ctx, api))
        except Exception as e:
            log_evaluation_error("defaultBrowser", 0, e)
            raise

    log_resolution_complete(result.url, [b.name or b.app_type for b in result.browsers])
    return result


def get_url_shorteners(config) -> List[str]:
    """
    Effective list of URL shortener hostnames for a configuration.

    A callable urlShorteners option receives the default list and returns
    the list to use.
    """
    routing_config = validate_config(config)
    options = routing_config.options
    if "url_shorteners" not in options.model_fields_set:
        return list(DEFAULT_URL_SHORTENERS)

    shorteners = options.url_shorteners

    if callable(shorteners):
        shorteners = shorteners(list(DEFAULT_URL_SHORTENERS))

    if isinstance(shorteners, str) or not all(isinstance(host, str) for host in shorteners):
        fail("SCHEMA_ERROR", "urlShorteners must resolve to a list of hostnames", "options.urlShorteners")

    return list(shorteners)
