# ═══════════════════════════════════════════════════════════════════════════════
# REQUEST STATE & LEGACY FIELD ACCESS
# ═══════════════════════════════════════════════════════════════════════════════
from typing import Any, Union

from tools.schemas import RequestContext
from app.config import DEPRECATED_CONTEXT_FIELDS


class LegacyContext:
    """
    Read-only view of a RequestContext handed to configuration functions.

    Old configurations may still read `keys`, `sourceBundleIdentifier` and
    `sourceProcessPath`. Those values are computed on access and a
    deprecation notice is sent through the host API the first time each one
    is read. Everything else is delegated to the wrapped context.

    Example:
        >>> view = LegacyContext(ctx, api)
        >>> view.url_string
        'https://example.com'
        >>> view.sourceBundleIdentifier   # logs a one-time notice
        'com.apple.Terminal'
    """

    __slots__ = ("_context", "_api")

    def __init__(self, context: RequestContext, api):
        object.__setattr__(self, "_context", context)
        object.__setattr__(self, "_api", api)

    @property
    def context(self) -> RequestContext:
        """The wrapped, immutable request context"""
        return self._context

    @property
    def keys(self):
        self._deprecated("keys")
        return self._api.get_keys()

    @property
    def sourceBundleIdentifier(self):
        self._deprecated("sourceBundleIdentifier")
        return self._context.opener.bundle_id

    @property
    def sourceProcessPath(self):
        self._deprecated("sourceProcessPath")
        return self._context.opener.path

    def _deprecated(self, field: str):
        self._api.deprecate(field, DEPRECATED_CONTEXT_FIELDS[field])

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._context, name)

    def __setattr__(self, name: str, value: Any):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __eq__(self, other):
        return unwrap(other) == self._context

    __hash__ = None

    def __repr__(self):
        return f"LegacyContext({self._context!r})"


def unwrap(ctx: Union[RequestContext, LegacyContext]) -> RequestContext:
    """Return the underlying RequestContext for either a context or a view"""
    if isinstance(ctx, LegacyContext):
        return ctx.context
    return ctx


def wrap(ctx: Union[RequestContext, LegacyContext], api) -> LegacyContext:
    """Build the view user functions receive for this context"""
    return LegacyContext(unwrap(ctx), api)
