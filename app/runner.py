"""
Request Runner

Loads a configuration module and resolves URLs against it for the local
command-line harness, with:
- Configuration loading from a Python file
- Failure classification
- Comprehensive logging
"""

import importlib.util
import time
from pathlib import Path
from typing import Optional

from core.routing import resolve
from core.failure_classifier import ConfigLoadError, FailureType, classify_failure, describe_failure
from app.config import CONFIG_ATTRIBUTE, DEFAULT_OPENER
from infra.logger import logger_api


# ═══════════════════════════════════════════════════════════════════════════════
# CONFIGURATION LOADING
# ═══════════════════════════════════════════════════════════════════════════════

def load_config_file(path: str):
    """
    Import a Python configuration module and return its configuration.

    The module must define a module-level `config` value (usually a dict).

    Args:
        path: Path to the configuration file

    Returns:
        The unvalidated configuration object

    Raises:
        ConfigLoadError: If the file is missing, fails to import, or has no config
    """
    config_path = Path(path).expanduser().resolve()
    logger_api.debug(f"CONFIG_LOAD | path={config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"No such configuration file: {config_path}")

    spec = importlib.util.spec_from_file_location("router_user_config", config_path)
    if spec is None or spec.loader is None:
        raise ConfigLoadError(f"Cannot import configuration file: {config_path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigLoadError(f"{type(e).__name__}: {e}") from e

    if not hasattr(module, CONFIG_ATTRIBUTE):
        raise ConfigLoadError(f"{config_path} does not define '{CONFIG_ATTRIBUTE}'")

    return getattr(module, CONFIG_ATTRIBUTE)


# ═══════════════════════════════════════════════════════════════════════════════
# REQUEST EXECUTION
# ═══════════════════════════════════════════════════════════════════════════════

def run_response(*, success, data=None, error=None, failure_type=None):
    return {
        "success": success,
        "data": data,
        "error": error,
        "failure_type": failure_type.value if failure_type else None,
    }


def run_request(url: str, config_path: str, opener: Optional[dict] = None, api=None) -> dict:
    """
    Load a configuration and resolve one URL against it.

    Args:
        url: URL to resolve
        config_path: Configuration file to load
        opener: Opening application (defaults to the harness itself)
        api: Host API for configuration functions

    Returns:
        Response dictionary with success status and data/error
    """
    start_time = time.perf_counter()

    try:
        config = load_config_file(config_path)
        result = resolve(config, url, opener or DEFAULT_OPENER, api=api)
    except Exception as e:
        failure_type = classify_failure(e)
        logger_api.error(
            f"RUN_FAILED | url={url[:80]} | failure={failure_type.name} | error={str(e)[:200]}"
        )
        return run_response(
            success=False,
            error=f"{describe_failure(e)} {e}",
            failure_type=failure_type,
        )

    duration_ms = (time.perf_counter() - start_time) * 1000
    logger_api.info(f"RUN_COMPLETE | url={url[:80]} | duration_ms={duration_ms:.2f}")
    return run_response(success=True, data=result.to_dict())


def is_config_failure(response: dict) -> bool:
    """Whether a failed response was caused by the configuration itself"""
    return response.get("failure_type") in {
        FailureType.CONFIG_LOAD.value,
        FailureType.CONFIG_INVALID.value,
    }
