"""
Local Host State

Stand-ins for the host application's live state, used when the router runs
outside the host (command-line harness, tests). The real host supplies its
own implementations through tools.api.decorate_api.
"""

import platform
import socket

from tools.schemas import BatteryInfo, KeyOptions, SystemInfo
from infra.logger import logger_api


def log(message: str):
    logger_api.info(f"CONFIG_LOG | {message}")


def notify(title: str, subtitle: str = ""):
    logger_api.info(f"NOTIFY | title={title} | subtitle={subtitle}")


def get_battery() -> BatteryInfo:
    return BatteryInfo(charge_percentage=50, is_charging=True, is_plugged_in=True)


def get_system_info() -> SystemInfo:
    hostname = socket.gethostname()
    return SystemInfo(
        name=hostname,
        localized_name=platform.node() or hostname,
        address="127.0.0.1",
    )


def get_keys() -> KeyOptions:
    # No keyboard access outside the host: nothing is held down
    return KeyOptions()


HOST_FUNCTIONS = {
    "log": log,
    "notify": notify,
    "get_battery": get_battery,
    "get_system_info": get_system_info,
    "get_keys": get_keys,
}
