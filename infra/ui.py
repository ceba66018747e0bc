"""
Console Output

Presentation helpers for the command-line harness.
"""

import json


def print_log(message: str):
    """Print a message logged by a configuration function."""
    print(f"[log] {message}")


def print_notification(title: str, subtitle: str = ""):
    """Print a notification sent by a configuration function."""
    print(f"[notification] {title} {subtitle}".rstrip())


def print_result(data: dict):
    """
    Print a resolution result.

    Args:
        data: ResolutionResult as a dict (see ResolutionResult.to_dict)
    """
    print("Result:")
    print(json.dumps(data, indent=2))


def print_error(message: str):
    print(f"Error: {message}")
