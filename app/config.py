"""
Router Configuration

Centralized settings for the URL router and its local test harness.
Environment variables are loaded separately (see infra.env).
"""

from typing import Dict, List

from infra.env import get_env


# ═══════════════════════════════════════════════════════════════════════════════
# ROUTING DEFAULTS
# ═══════════════════════════════════════════════════════════════════════════════

# Browser used when a configuration does not name one
DEFAULT_BROWSER: str = "Safari"

# Hostnames treated as URL shorteners when the configuration does not override them
DEFAULT_URL_SHORTENERS: List[str] = [
    "bit.ly",
    "buff.ly",
    "dlvr.it",
    "goo.gl",
    "is.gd",
    "ow.ly",
    "t.co",
    "tinyurl.com",
    "youtu.be",
]


# ═══════════════════════════════════════════════════════════════════════════════
# DEPRECATED CONTEXT FIELDS
# ═══════════════════════════════════════════════════════════════════════════════

# Legacy request fields still readable by old configurations, with migration hints
DEPRECATED_CONTEXT_FIELDS: Dict[str, str] = {
    "keys": "Use api.get_keys() instead",
    "sourceBundleIdentifier": "Use opener.bundle_id instead",
    "sourceProcessPath": "Use opener.path instead",
}


# ═══════════════════════════════════════════════════════════════════════════════
# LOCAL TEST HARNESS
# ═══════════════════════════════════════════════════════════════════════════════

# URL resolved when none is given on the command line
DEFAULT_TEST_URL: str = "https://example.com/test"

# Configuration module loaded when none is given on the command line
DEFAULT_CONFIG_PATH: str = get_env("ROUTER_CONFIG", "./router_config.py")

# Name of the module attribute holding the routing configuration
CONFIG_ATTRIBUTE: str = "config"

# Opener reported for requests made from the harness
DEFAULT_OPENER = {
    "pid": 1337,
    "path": "/dev/null",
    "name": "Browser Router",
    "bundleId": "org.browserrouter.cli",
}


# ═══════════════════════════════════════════════════════════════════════════════
# LOGGING CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════

# Log level for the application
LOG_LEVEL: str = get_env("ROUTER_LOG_LEVEL", "WARNING")  # DEBUG, INFO, WARNING, ERROR, CRITICAL

# Optional log file path (console only when unset)
LOG_FILE_PATH = get_env("ROUTER_LOG_FILE")


# ═══════════════════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════════

def validate_settings():
    """Validate settings on startup"""
    assert DEFAULT_BROWSER, "DEFAULT_BROWSER must not be empty"
    assert LOG_LEVEL.upper() in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}, \
        f"Invalid LOG_LEVEL: {LOG_LEVEL}"
    assert all(isinstance(host, str) and host for host in DEFAULT_URL_SHORTENERS), \
        "DEFAULT_URL_SHORTENERS must contain hostnames"
    assert CONFIG_ATTRIBUTE.isidentifier(), "CONFIG_ATTRIBUTE must be a valid identifier"
