"""
Failure Classification

Classifies failures raised while loading a configuration or resolving a URL,
so callers can report them without inspecting exception types themselves.
"""

from enum import Enum

from core.config_validator import ConfigValidationError
from infra.logger import logger_pipeline


# ═══════════════════════════════════════════════════════════════════════════════
# FAILURE CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

class ConfigLoadError(Exception):
    """The configuration module could not be found, imported or read."""


class FailureType(Enum):
    """
    Types of failures and how they are reported.

    CONFIG_LOAD: The configuration could not be loaded at all
    CONFIG_INVALID: The configuration (or a value it produced) broke its contract
    EVALUATION: A configuration function raised while handling the request
    """
    CONFIG_LOAD = "config_load"
    CONFIG_INVALID = "config_invalid"
    EVALUATION = "evaluation"


FAILURE_MESSAGES = {
    FailureType.CONFIG_LOAD: "Couldn't open configuration file.",
    FailureType.CONFIG_INVALID: "Couldn't validate configuration.",
    FailureType.EVALUATION: "Couldn't resolve URL.",
}


def classify_failure(error: BaseException) -> FailureType:
    """
    Classify a failure raised by the router.

    None of these are retried: resolution is deterministic, so the same
    inputs fail the same way.

    Examples:
        >>> classify_failure(ConfigLoadError("no such file"))
        FailureType.CONFIG_LOAD

        >>> classify_failure(ConfigValidationError("SCHEMA_ERROR", "bad key"))
        FailureType.CONFIG_INVALID

        >>> classify_failure(ZeroDivisionError())
        FailureType.EVALUATION
    """
    if isinstance(error, ConfigLoadError):
        failure = FailureType.CONFIG_LOAD
    elif isinstance(error, ConfigValidationError):
        failure = FailureType.CONFIG_INVALID
    else:
        failure = FailureType.EVALUATION

    logger_pipeline.debug(
        f"CLASSIFY_FAILURE | {failure.name} | error={str(error)[:50]}"
    )
    return failure


def describe_failure(error: BaseException) -> str:
    """Short, user-facing description for a failure"""
    return FAILURE_MESSAGES[classify_failure(error)]
