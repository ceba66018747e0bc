"""
Browser Router CLI

Resolves URLs against a routing configuration file, for testing a
configuration locally:

    python main.py [url] [config_path]

Without a URL, starts an interactive prompt resolving one URL per line.
"""

import sys
from typing import Optional

from app.config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_TEST_URL,
    LOG_FILE_PATH,
    LOG_LEVEL,
    validate_settings,
)
from app.runner import is_config_failure, run_request
from infra.logger import logger_api, setup_logging
from infra.ui import print_error, print_log, print_notification, print_result
from tools.api import create_default_api


# ═══════════════════════════════════════════════════════════════════════════════
# CLI INTERFACE
# ═══════════════════════════════════════════════════════════════════════════════

class CLI:
    """
    Command-line interface for the router.

    Resolves a single URL, or runs an interactive prompt when no URL is given.
    Configuration functions that log or notify print to the console.
    """

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.api = create_default_api(log=print_log, notify=print_notification)
        self.session_requests = 0

    def resolve_once(self, url: str) -> int:
        """Resolve one URL and print the result. Returns an exit code."""
        self.session_requests += 1
        response = run_request(url, self.config_path, api=self.api)

        if not response["success"]:
            print_error(response["error"])
            return 2 if is_config_failure(response) else 1

        print_result(response["data"])
        return 0

    def run(self):
        """Start interactive CLI session"""
        self._print_welcome()

        while True:
            try:
                url = self._get_input()

                if not url:
                    continue

                if url.lower() in ('exit', 'quit', 'q'):
                    break

                if url.lower() in ('help', 'h', '?'):
                    self._print_help()
                    continue

                self.resolve_once(url)

            except KeyboardInterrupt:
                print("\n")
                break

        self._print_goodbye()

    def _get_input(self) -> str:
        """Get a URL with prompt"""
        try:
            return input("\nURL: ").strip()
        except EOFError:
            return "exit"

    def _print_welcome(self):
        print("=" * 60)
        print("  Browser Router")
        print("=" * 60)
        print()
        print(f"  Configuration: {self.config_path}")
        print("  Enter a URL to see where it would open.")
        print("  Commands: help | exit")
        print()

    def _print_help(self):
        print()
        print("Available commands:")
        print("  help, h, ?  - Show this help message")
        print("  exit, quit  - Exit the application")
        print()
        print("Examples:")
        print(f"  {DEFAULT_TEST_URL}")
        print("  https://mail.google.com/inbox")
        print()

    def _print_goodbye(self):
        print()
        print(f"Resolved {self.session_requests} URLs this session.")
        print()


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════════

def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the application.

    Sets up logging, validates settings, and resolves the URL given on the
    command line (or starts the interactive prompt).
    """
    args = sys.argv[1:] if argv is None else argv
    url = args[0] if args else None
    config_path = args[1] if len(args) > 1 else DEFAULT_CONFIG_PATH

    try:
        setup_logging(level=LOG_LEVEL, log_file=LOG_FILE_PATH)
        validate_settings()

        logger_api.info(f"ROUTER_START | config={config_path}")
        print(f"Opening configuration file {config_path}")

        cli = CLI(config_path)
        if url is None:
            cli.run()
            return 0
        return cli.resolve_once(url)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 0

    except Exception as e:
        logger_api.error(f"STARTUP_ERROR | error={str(e)}")
        print_error(f"Startup error: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
