"""
Router Logging

Structured logging for the URL router:
- One logger per pipeline component, all under the "router" namespace
- EVENT | key=value lines
- Rule-level tracing through the rewrite and handler stages

Nothing is configured on import; the entry point calls setup_logging().
"""

import logging
import sys
from typing import Optional


ROOT_LOGGER_NAME = "router"

LOG_FORMAT = "%(asctime)s | %(name)-15s | %(levelname)-8s | %(message)s"
FILE_LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(module)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# ═══════════════════════════════════════════════════════════════════════════════
# LOGGER CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════

def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None):
    """
    Attach handlers to the "router" logger.

    The root logger is left alone so a host embedding the router keeps its
    own logging setup. Calling this again replaces the previous handlers.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Also append to this file when given
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    router_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(router_logger.handlers):
        router_logger.removeHandler(handler)
        handler.close()

    router_logger.setLevel(log_level)
    router_logger.propagate = False
    router_logger.addHandler(_handler(logging.StreamHandler(sys.stderr), log_level, LOG_FORMAT))

    if log_file:
        router_logger.addHandler(_handler(logging.FileHandler(log_file), log_level, FILE_LOG_FORMAT))


# ═══════════════════════════════════════════════════════════════════════════════
# COMPONENT LOGGERS
# ═══════════════════════════════════════════════════════════════════════════════

logger_config = logging.getLogger(f"{ROOT_LOGGER_NAME}.config")
logger_matcher = logging.getLogger(f"{ROOT_LOGGER_NAME}.matcher")
logger_rewrite = logging.getLogger(f"{ROOT_LOGGER_NAME}.rewrite")
logger_browser = logging.getLogger(f"{ROOT_LOGGER_NAME}.browser")
logger_pipeline = logging.getLogger(f"{ROOT_LOGGER_NAME}.pipeline")
logger_api = logging.getLogger(f"{ROOT_LOGGER_NAME}.api")


# ═══════════════════════════════════════════════════════════════════════════════
# STRUCTURED LOGGING HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

class LogContext:
    """Helper for consistent structured logging"""

    @staticmethod
    def format_dict(data: dict) -> str:
        """Format dictionary for logging"""
        return " | ".join(f"{k}={v}" for k, v in data.items())

    @staticmethod
    def format_rule(stage: str, index: int, **kwargs) -> str:
        """Format rule information"""
        context = {"stage": stage, "rule": index, **kwargs}
        return LogContext.format_dict(context)

    @staticmethod
    def truncate(value: str, limit: int = 120) -> str:
        """Shorten long URLs so log lines stay readable"""
        return value if len(value) <= limit else value[:limit] + "..."


# ═══════════════════════════════════════════════════════════════════════════════
# LOGGING UTILITIES
# ═══════════════════════════════════════════════════════════════════════════════

def log_request_start(url: str, opener_name: Optional[str] = None):
    """Log the start of a resolution request"""
    context = {"url": LogContext.truncate(url), "opener": opener_name or "N/A"}
    logger_pipeline.debug(f"RESOLVE_START | {LogContext.format_dict(context)}")


def log_rewrite_applied(index: int, before: str, after: str):
    """Log a rewrite rule that changed the URL"""
    context = {
        "from": LogContext.truncate(before),
        "to": LogContext.truncate(after),
    }
    logger_rewrite.debug(f"REWRITE_APPLIED | {LogContext.format_rule('rewrite', index, **context)}")


def log_handler_matched(index: int, url: str):
    """Log the handler that won the handler stage"""
    logger_pipeline.debug(
        f"HANDLER_MATCHED | {LogContext.format_rule('handlers', index, url=LogContext.truncate(url))}"
    )


def log_default_browser(url: str):
    """Log fallback to the default browser"""
    logger_pipeline.debug(f"DEFAULT_BROWSER | url={LogContext.truncate(url)}")


def log_resolution_complete(url: str, browsers: list):
    """Log the final resolution result"""
    context = {"url": LogContext.truncate(url), "browsers": ",".join(browsers) or "-"}
    logger_pipeline.info(f"RESOLVE_COMPLETE | {LogContext.format_dict(context)}")


def log_validation_error(category: str, message: str, path: Optional[str] = None):
    """Log validation error"""
    context = {"category": category, "message": message}
    if path:
        context["path"] = path
    logger_config.error(f"VALIDATION_ERROR | {LogContext.format_dict(context)}")


def log_evaluation_error(stage: str, index: int, error: Exception):
    """Log a user-supplied function that raised"""
    context = {"error_type": type(error).__name__, "error": str(error)[:200]}
    logger_pipeline.error(f"EVALUATION_ERROR | {LogContext.format_rule(stage, index, **context)}")
