# ABOUTME: pytest configuration for the CRPT API client tests
# ABOUTME: Configures timeouts, log capture and shared fixtures such as a manual clock

import pytest
from loguru import logger


def pytest_configure(config):
    """Configure pytest for the client tests."""
    config.addinivalue_line("markers", "unit: Unit tests with 20-second timeout")
    config.addinivalue_line("markers", "integration: Integration tests with 60-second timeout")
    config.addinivalue_line("markers", "config: Configuration tests")


def pytest_collection_modifyitems(config, items):
    """Modify test items to add appropriate timeouts based on test type."""
    for item in items:
        # Respect an explicit timeout marker
        if item.get_closest_marker("timeout"):
            continue

        if item.get_closest_marker("unit"):
            item.add_marker(pytest.mark.timeout(20))
        elif item.get_closest_marker("integration"):
            item.add_marker(pytest.mark.timeout(60))


class ManualClock:
    """Monotonic clock that only moves when a test advances it."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock() -> ManualClock:
    """Fixture providing a manually advanced clock for deterministic window tests."""
    return ManualClock()


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
