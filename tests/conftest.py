# PATH: tests/conftest.py
"""
Pytest configuration and fixtures for RUNGUARD tests.
"""

import logging
import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.logging import clear_global_context  # noqa: E402
from core.models import Budget, create_run  # noqa: E402
from core.time import FixedClock  # noqa: E402
from execution.context import ExecutionContext  # noqa: E402


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@pytest.fixture
def clock():
    """Deterministic clock advancing 10ms per read."""
    return FixedClock(start_ms=1_700_000_000_000, step_ms=10)


@pytest.fixture
def context(clock):
    """Fresh kill switch + event log per test."""
    return ExecutionContext(clock=clock)


@pytest.fixture
def run():
    return create_run("run_test", Budget(max_tokens=200, max_usd=Decimal("0.5")))


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo setup_logging() calls made by CLI tests."""
    yield
    clear_global_context()
    for handler in logging.root.handlers[:]:
        handler.close()
        logging.root.removeHandler(handler)
