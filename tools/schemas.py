"""
Routing Schemas and Type Definitions

Defines Pydantic schemas for the routing configuration, the request context
threaded through the resolution pipeline, and the host state exposed to
configuration functions.

Configuration keys are accepted under their camelCase names (defaultBrowser,
matchHostname, appType, ...) as well as the snake_case field names.
"""

import re
from typing import Annotated, Any, Callable, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, model_validator

from app.config import DEFAULT_BROWSER


# ═══════════════════════════════════════════════════════════════════════════════
# URL
# ═══════════════════════════════════════════════════════════════════════════════

class UrlObject(BaseModel):
    """
    A fully decomposed URL.

    Fragment fields are stored without their delimiters ("?", "#", ":").
    protocol and host are always present on a resolved URL.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    protocol: StrictStr = Field(..., description="Scheme without the trailing ':'", examples=["https"])
    username: Optional[StrictStr] = None
    password: Optional[StrictStr] = None
    host: StrictStr = Field(..., description="Hostname without port", examples=["example.com"])
    port: Optional[StrictInt] = None
    pathname: Optional[StrictStr] = None
    search: Optional[StrictStr] = Field(None, description="Query string without the leading '?'")
    hash: Optional[StrictStr] = Field(None, description="Fragment without the leading '#'")


class PartialUrl(BaseModel):
    """
    A partial URL merged over the current one by a rewrite.

    Only fields explicitly present in the input overwrite the current value,
    including fields explicitly set to an empty value.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    protocol: Optional[StrictStr] = None
    username: Optional[StrictStr] = None
    password: Optional[StrictStr] = None
    host: Optional[StrictStr] = None
    port: Optional[StrictInt] = None
    pathname: Optional[StrictStr] = None
    search: Optional[StrictStr] = None
    hash: Optional[StrictStr] = None


# ═══════════════════════════════════════════════════════════════════════════════
# REQUEST CONTEXT
# ═══════════════════════════════════════════════════════════════════════════════

class Application(BaseModel):
    """The process that requested the URL to be opened."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pid: StrictInt
    path: Optional[str] = None
    bundle_id: Optional[str] = Field(None, alias="bundleId")
    name: Optional[str] = None


class RequestContext(BaseModel):
    """
    Per-request state handed to every matcher, rewrite and browser function.

    Immutable: each pipeline stage produces a new context.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url_string: str = Field(..., alias="urlString")
    url: UrlObject
    opener: Application


# ═══════════════════════════════════════════════════════════════════════════════
# MATCHERS & DIRECTIVES
# ═══════════════════════════════════════════════════════════════════════════════

Matcher = Annotated[
    Union[StrictStr, re.Pattern, Callable[..., Any]],
    Field(union_mode="left_to_right"),
]

MatcherRule = Annotated[
    Union[StrictStr, re.Pattern, Callable[..., Any], Tuple[Matcher, ...]],
    Field(union_mode="left_to_right"),
]

UrlDirective = Annotated[
    Union[StrictStr, PartialUrl, Callable[..., Any]],
    Field(union_mode="left_to_right"),
]

AppType = Literal["appName", "appPath", "bundleId", "none"]


class BrowserSpec(BaseModel):
    """
    A browser as written in the configuration.

    name is required unless appType is "none". It may be None (normalized
    to "") and appType is inferred from it when absent.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: Optional[StrictStr] = Field(
        None,
        description="Application name, path or bundle identifier",
        examples=["Firefox", "/Applications/Firefox.app", "org.mozilla.firefox"]
    )
    app_type: Optional[AppType] = Field(None, alias="appType")
    open_in_background: Optional[StrictBool] = Field(None, alias="openInBackground")
    profile: Optional[StrictStr] = None
    args: Optional[Tuple[StrictStr, ...]] = None

    @model_validator(mode="after")
    def _require_name(self):
        if self.app_type != "none" and "name" not in self.model_fields_set:
            raise ValueError("name is required unless appType is 'none'")
        return self


BrowserValue = Optional[Annotated[
    Union[StrictStr, BrowserSpec, Callable[..., Any]],
    Field(union_mode="left_to_right"),
]]

BrowserDirective = Optional[Annotated[
    Union[StrictStr, BrowserSpec, Callable[..., Any], Tuple[BrowserValue, ...]],
    Field(union_mode="left_to_right"),
]]


# ═══════════════════════════════════════════════════════════════════════════════
# RULES & CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════

class GlobalOptions(BaseModel):
    """Miscellaneous options applying to the whole configuration."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hide_icon: StrictBool = Field(False, alias="hideIcon")
    check_for_update: StrictBool = Field(True, alias="checkForUpdate")
    log_requests: StrictBool = Field(False, alias="logRequests")
    url_shorteners: Annotated[
        Union[Tuple[StrictStr, ...], Callable[..., Any]],
        Field(union_mode="left_to_right"),
    ] = Field((), alias="urlShorteners")


class RewriteRule(BaseModel):
    """
    A match condition paired with a URL transformation.

    Every matching rewrite rule is applied, in declaration order.
    A rule with neither match nor matchHostname never applies.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    match: Optional[MatcherRule] = None
    match_hostname: Optional[MatcherRule] = Field(None, alias="matchHostname")
    url: UrlDirective


class HandlerRule(BaseModel):
    """
    A match condition paired with a target browser and an optional rewrite.

    Handlers are first-match-wins.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    match: Optional[MatcherRule] = None
    match_hostname: Optional[MatcherRule] = Field(None, alias="matchHostname")
    url: Optional[UrlDirective] = None
    browser: BrowserDirective


class RoutingConfig(BaseModel):
    """
    A complete, validated routing configuration.

    Read-only after validation; no keys beyond the declared ones are allowed.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    default_browser: BrowserDirective = Field(DEFAULT_BROWSER, alias="defaultBrowser")
    options: GlobalOptions = Field(default_factory=GlobalOptions)
    rewrite: Tuple[RewriteRule, ...] = ()
    handlers: Tuple[HandlerRule, ...] = ()


# ═══════════════════════════════════════════════════════════════════════════════
# RESOLUTION RESULT
# ═══════════════════════════════════════════════════════════════════════════════

class BrowserObject(BaseModel):
    """
    A normalized, validated description of an application to open a URL with.

    app_type is always populated; name is "" when app_type is "none".
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: StrictStr
    app_type: AppType = Field(..., alias="appType")
    open_in_background: Optional[StrictBool] = Field(None, alias="openInBackground")
    profile: Optional[StrictStr] = None
    args: Optional[List[StrictStr]] = None

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ResolutionResult(BaseModel):
    """Final answer for one request: where the URL goes and what it became."""
    model_config = ConfigDict(frozen=True)

    browsers: List[BrowserObject] = Field(default_factory=list)
    url: str

    def to_dict(self) -> dict:
        return {
            "browsers": [browser.to_dict() for browser in self.browsers],
            "url": self.url,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# HOST STATE
# ═══════════════════════════════════════════════════════════════════════════════

class KeyOptions(BaseModel):
    """Modifier keys held down while the URL was opened."""
    model_config = ConfigDict(populate_by_name=True)

    shift: bool = False
    option: bool = False
    command: bool = False
    control: bool = False
    caps_lock: bool = Field(False, alias="capsLock")
    function: bool = False


class BatteryInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    charge_percentage: float = Field(..., alias="chargePercentage", ge=0, le=100)
    is_charging: bool = Field(..., alias="isCharging")
    is_plugged_in: bool = Field(..., alias="isPluggedIn")


class SystemInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    localized_name: str = Field(..., alias="localizedName")
    address: str
