"""
Test suite for logging setup and structured log helpers
"""

import logging
import sys
import tempfile
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from infra.logger import ROOT_LOGGER_NAME, LogContext, logger_pipeline, setup_logging


def test_setup_logging():
    """Test handler setup on the router logger."""

    print("Testing setup_logging...")

    root_handlers = list(logging.getLogger().handlers)
    router_logger = logging.getLogger(ROOT_LOGGER_NAME)

    setup_logging("debug")
    assert router_logger.level == logging.DEBUG
    assert len(router_logger.handlers) == 1
    assert router_logger.propagate is False

    # Calling again replaces handlers instead of stacking them
    setup_logging("ERROR")
    assert router_logger.level == logging.ERROR
    assert len(router_logger.handlers) == 1

    # Unknown level names fall back to WARNING
    setup_logging("chatty")
    assert router_logger.level == logging.WARNING

    # Root logger is untouched
    assert logging.getLogger().handlers == root_handlers

    # Component loggers sit under the router logger
    assert logger_pipeline.name == f"{ROOT_LOGGER_NAME}.pipeline"
    assert logger_pipeline.parent is router_logger

    with tempfile.TemporaryDirectory() as tmp:
        log_file = str(Path(tmp) / "router.log")
        setup_logging("INFO", log_file=log_file)
        assert len(router_logger.handlers) == 2

        logger_pipeline.info("RESOLVE_COMPLETE | url=https://example.com")
        for handler in router_logger.handlers:
            handler.flush()
        assert "RESOLVE_COMPLETE" in Path(log_file).read_text()

        # Release the file before the directory is removed
        setup_logging("WARNING")

    print("✓ setup_logging tests passed")


def test_log_context():
    """Test structured log formatting."""

    print("Testing LogContext...")

    assert LogContext.format_dict({"a": 1, "b": "x"}) == "a=1 | b=x"
    assert LogContext.format_rule("handlers", 2, url="u") == "stage=handlers | rule=2 | url=u"

    assert LogContext.truncate("short") == "short"
    long_url = "https://example.com/" + "a" * 200
    truncated = LogContext.truncate(long_url)
    assert truncated.endswith("...")
    assert len(truncated) == 123

    print("✓ LogContext tests passed")


def run_all_tests():
    """Run all test functions."""
    print("\n" + "="*60)
    print("Running Logger Tests")
    print("="*60 + "\n")

    try:
        test_setup_logging()
        test_log_context()

        print("\n" + "="*60)
        print("✅ ALL TESTS PASSED!")
        print("="*60 + "\n")

    except AssertionError as e:
        print("\n" + "="*60)
        print("❌ TEST FAILED!")
        print("="*60)
        print(f"Error: {e}\n")
        import traceback
        traceback.print_exc()
        raise


if __name__ == "__main__":
    run_all_tests()
