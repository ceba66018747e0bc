"""
Browser Resolution

Turns a browser directive (name, path, bundle id, object, list, function or
None) into validated BrowserObjects.
"""

import re
from collections.abc import Mapping
from typing import List

from pydantic import BaseModel, ValidationError

from tools.schemas import AppType, BrowserObject, BrowserSpec, ResolutionResult
from core.config_validator import fail, from_validation_error
from core.state import unwrap
from infra.logger import logger_browser


# ═══════════════════════════════════════════════════════════════════════════
# APP TYPE CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════

# Uniform Type Identifier shape, e.g. "com.apple.Safari"
_BUNDLE_ID = re.compile(r"^[A-Za-z]{2,6}((?!-)\.[A-Za-z0-9-]{1,63})+$")


def looks_like_bundle_identifier(value: str) -> bool:
    return _BUNDLE_ID.match(value) is not None


def looks_like_absolute_path(value: str) -> bool:
    return value.startswith(("/", "~"))


def guess_app_type(value: str) -> AppType:
    """
    Classify how a browser reference names its target.

    The bundle id check runs before the path check.

    Examples:
        "com.apple.Safari"       → "bundleId"
        "/Applications/Foo.app"  → "appPath"
        "Firefox"                → "appName"
    """
    if looks_like_bundle_identifier(value):
        return "bundleId"

    if looks_like_absolute_path(value):
        return "appPath"

    return "appName"


# ═══════════════════════════════════════════════════════════════════════════
# BROWSER OBJECTS
# ═══════════════════════════════════════════════════════════════════════════

NO_BROWSER = BrowserObject(name="", app_type="none")


def _to_spec(value, index: int) -> BrowserSpec:
    if isinstance(value, BrowserSpec):
        return value

    if isinstance(value, str):
        return BrowserSpec(name=value)

    if isinstance(value, BaseModel):
        value = value.model_dump(exclude_unset=True)

    if not isinstance(value, Mapping):
        fail(
            "BROWSER_ERROR",
            f"browser must be a string, an object or None, got {type(value).__name__}",
            f"browsers.{index}",
        )

    try:
        return BrowserSpec.model_validate(dict(value))
    except ValidationError as e:
        raise from_validation_error("BROWSER_ERROR", e, prefix=f"browsers.{index}") from e


def create_browser_object(value, index: int = 0) -> BrowserObject:
    """
    Normalize one browser value.

    None and {"appType": "none"} mean "open nothing". A missing appType is
    inferred from the name; a None name becomes "".
    """
    if value is None:
        return NO_BROWSER

    spec = _to_spec(value, index)

    if spec.app_type == "none":
        return NO_BROWSER

    name = spec.name if spec.name is not None else ""
    fields = spec.model_dump(exclude_none=True)
    fields["name"] = name
    fields["app_type"] = spec.app_type or guess_app_type(name)
    if spec.args is not None:
        fields["args"] = list(spec.args)

    try:
        return BrowserObject.model_validate(fields)
    except ValidationError as e:
        raise from_validation_error("BROWSER_ERROR", e, prefix=f"browsers.{index}") from e


# ═══════════════════════════════════════════════════════════════════════════
# RESOLUTION
# ═══════════════════════════════════════════════════════════════════════════

def resolve_browser(directive, ctx) -> ResolutionResult:
    """
    Resolve a browser directive for the current request.

    Args:
        directive: None, string, object, list of those, or a function
            returning any of them
        ctx: Current RequestContext (functions receive it as-is)

    Returns:
        ResolutionResult with the browsers in order and ctx's URL string

    Raises:
        ConfigValidationError: If a produced browser object is invalid
    """
    if callable(directive) and not isinstance(directive, BaseModel):
        directive = directive(ctx)

    values = list(directive) if isinstance(directive, (list, tuple)) else [directive]

    browsers: List[BrowserObject] = []
    for index, value in enumerate(values):
        if callable(value) and not isinstance(value, BaseModel):
            value = value(ctx)
        browsers.append(create_browser_object(value, index))

    url_string = unwrap(ctx).url_string

    logger_browser.debug(
        f"BROWSERS_RESOLVED | count={len(browsers)} | "
        f"names={','.join(b.name or b.app_type for b in browsers)}"
    )
    return ResolutionResult(browsers=browsers, url=url_string)
