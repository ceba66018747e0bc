"""
Configuration API

The host API handed to configuration functions. Wraps the host's raw
callables (logging, notifications, live state) and adds URL utilities.

Configuration modules usually import the shared instance:

    from tools.api import api

    config = {
        "handlers": [{
            "match": lambda ctx: api.get_keys().option,
            "browser": "Firefox",
        }],
    }
"""

import re
from typing import Callable, Dict, Mapping

from tools.host import HOST_FUNCTIONS
from core.routing.url import compose_url, parse_url
from infra.logger import logger_api


# ═══════════════════════════════════════════════════════════════════════════════
# HOSTNAME MATCHER HELPER
# ═══════════════════════════════════════════════════════════════════════════════

def match_hostnames(matchers) -> Callable:
    """
    Build a predicate matching the request hostname.

    Strings must equal the hostname exactly; regular expressions are
    searched in it.

    Args:
        matchers: A string, a compiled regex, or a list of them

    Returns:
        Predicate taking a request context

    Raises:
        TypeError: If a matcher is neither a string nor a compiled regex
    """
    matchers = list(matchers) if isinstance(matchers, (list, tuple)) else [matchers]

    for matcher in matchers:
        if not isinstance(matcher, (str, re.Pattern)):
            raise TypeError(f"match_hostnames: Unrecognized hostname {matcher!r}")

    def hostname_matcher(ctx) -> bool:
        host = ctx.url.host
        for matcher in matchers:
            if isinstance(matcher, re.Pattern):
                if matcher.search(host):
                    return True
            elif matcher == host:
                return True
        return False

    return hostname_matcher


# ═══════════════════════════════════════════════════════════════════════════════
# CONFIG API
# ═══════════════════════════════════════════════════════════════════════════════

class ConfigAPI:
    """
    Host collaborator exposed to configuration functions.

    Holds the only state that outlives a single request: which deprecation
    notices have already been sent.
    """

    parse_url = staticmethod(parse_url)
    compose_url = staticmethod(compose_url)
    match_hostnames = staticmethod(match_hostnames)

    # Legacy naming
    get_url_parts = parse_url
    match_domains = match_hostnames

    def __init__(
        self,
        *,
        log: Callable,
        notify: Callable,
        get_battery: Callable,
        get_system_info: Callable,
        get_keys: Callable,
    ):
        self._log = log
        self._notify = notify
        self._get_battery = get_battery
        self._get_system_info = get_system_info
        self._get_keys = get_keys
        self._deprecations_sent = set()

    def log(self, *messages):
        """Log one or more messages (lists are flattened) through the host."""
        parts = []
        for message in messages:
            if isinstance(message, (list, tuple)):
                parts.extend(str(m) for m in message)
            else:
                parts.append(str(message))
        self._log(" ".join(parts))

    def notify(self, title: str, subtitle: str = ""):
        self._notify(title, subtitle)

    def get_battery(self):
        return self._get_battery()

    def get_system_info(self):
        return self._get_system_info()

    def get_keys(self):
        return self._get_keys()

    def deprecate(self, field: str, message: str):
        """Send a deprecation notice for a legacy field, once per field."""
        if field in self._deprecations_sent:
            return

        self._deprecations_sent.add(field)
        logger_api.warning(f"DEPRECATED_FIELD | field={field}")
        self.log(f"Deprecation warning: '{field}' is deprecated. {message}")


def decorate_api(internal: Mapping[str, Callable], **overrides: Callable) -> ConfigAPI:
    """
    Build a ConfigAPI from the host's raw functions.

    Args:
        internal: Host functions keyed log, notify, get_battery,
            get_system_info, get_keys
        overrides: Replacements for any of those functions

    Raises:
        KeyError: If a host function is missing
    """
    functions: Dict[str, Callable] = {**internal, **overrides}
    missing = [name for name in HOST_FUNCTIONS if name not in functions]
    if missing:
        raise KeyError(f"Missing host functions: {', '.join(missing)}")

    return ConfigAPI(**{name: functions[name] for name in HOST_FUNCTIONS})


def create_default_api(**overrides: Callable) -> ConfigAPI:
    """ConfigAPI backed by the local stand-ins in tools.host."""
    return decorate_api(HOST_FUNCTIONS, **overrides)


api: ConfigAPI = create_default_api()
