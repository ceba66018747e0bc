from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from tools.schemas import RoutingConfig
from infra.logger import logger_config, log_validation_error


ROOT_PATH = "<root>"


# =========================
# Exception
# =========================

class ConfigValidationError(Exception):
    """
    A routing configuration, resolved URL or resolved browser object does not
    match its structural contract.

    Attributes:
        category: SCHEMA_ERROR | URL_ERROR | BROWSER_ERROR | OPENER_ERROR
        message: Human-readable summary of the first issue
        path: Dotted path of the offending field ("<root>" for the value itself)
        issues: Every issue found, as {"path": ..., "message": ...}
    """

    def __init__(
        self,
        category: str,
        message: str,
        path: Optional[str] = None,
        issues: Optional[List[Dict[str, str]]] = None,
    ):
        super().__init__(f"{category}: {message}")
        self.category = category
        self.message = message
        self.path = path
        self.issues = issues or [{"path": path or ROOT_PATH, "message": message}]


# =========================
# Failure Helpers
# =========================

def fail(category: str, message: str, path: Optional[str] = None):
    log_validation_error(category, message, path)
    raise ConfigValidationError(category, message, path=path)


def format_path(loc) -> str:
    if not loc:
        return ROOT_PATH
    return ".".join(str(part) for part in loc)


def from_validation_error(category: str, error: ValidationError, prefix: str = "") -> ConfigValidationError:
    """
    Convert a pydantic ValidationError into a ConfigValidationError.

    The first reported issue becomes the error's message and path; all
    issues stay available on .issues.
    """
    issues = []
    for item in error.errors():
        loc = tuple(item.get("loc", ()))
        path = format_path(((prefix,) if prefix else ()) + loc)
        issues.append({"path": path, "message": item.get("msg", "invalid value")})

    if not issues:
        issues = [{"path": prefix or ROOT_PATH, "message": str(error)}]

    first = issues[0]
    message = f"{first['path']}: {first['message']}"
    if len(issues) > 1:
        message += f" (+{len(issues) - 1} more)"

    log_validation_error(category, message, first["path"])
    return ConfigValidationError(category, message, path=first["path"], issues=issues)


# =========================
# Public Entry
# =========================

def validate_config(candidate: Any) -> RoutingConfig:
    """
    Validate a candidate routing configuration.

    Defaults are injected for absent optional fields (defaultBrowser="Safari",
    option defaults, empty rule lists). Validation has no side effects other
    than logging.

    Args:
        candidate: The evaluated configuration (usually a dict)

    Returns:
        The validated, read-only RoutingConfig

    Raises:
        ConfigValidationError: If the candidate does not match the schema
    """
    if isinstance(candidate, RoutingConfig):
        return candidate

    if candidate is None:
        fail("SCHEMA_ERROR", "configuration is missing", ROOT_PATH)

    try:
        config = RoutingConfig.model_validate(candidate)
    except ValidationError as e:
        raise from_validation_error("SCHEMA_ERROR", e) from e

    _validate_rules(config)

    logger_config.debug(
        f"CONFIG_VALID | rewrite={len(config.rewrite)} | handlers={len(config.handlers)}"
    )
    return config


# =========================
# Rule Checks
# =========================

def _validate_rules(config: RoutingConfig):
    for section, rules in (("rewrite", config.rewrite), ("handlers", config.handlers)):
        for index, rule in enumerate(rules):
            if rule.match is None and rule.match_hostname is None:
                # Accepted, but worth surfacing: the rule can never fire
                logger_config.warning(
                    f"RULE_NEVER_MATCHES | path={section}.{index} | "
                    f"reason=neither match nor matchHostname is set"
                )
