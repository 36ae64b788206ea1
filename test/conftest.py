"""
Test Configuration

Environment setup MUST happen before any application import: settings and
the loguru sinks are built at import time.

Architecture:
- Unit tests (test/**/unit/): mocked gateway, in-memory persistence
- Adapter tests: httpx.MockTransport for the gateway, tmp_path for files
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # Never reach a real booking service or write into the project tree
    os.environ.pop('BOOKING_API_URL', None)
    os.environ['STORAGE_BACKEND'] = 'memory'


_early_setup_test_environment()
