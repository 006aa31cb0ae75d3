"""
Shared fixtures for Gatekeeper tests.
"""

import pytest

from gatekeeper.config import GatekeeperSettings
from gatekeeper.logging import clear_context
from gatekeeper.metrics import GatekeeperMetrics


@pytest.fixture(autouse=True)
def _clean_logging_context():
    """Reset correlation context variables around every test."""
    clear_context()
    yield
    clear_context()


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return GatekeeperSettings(_env_file=None, strict_rule_names=True, enable_metrics=False)


@pytest.fixture
def metrics():
    """Metrics collector with its own registry."""
    return GatekeeperMetrics("gatekeeper_test")


class Probe:
    """Records every call made to it, for ordering and short-circuit checks."""

    def __init__(self, name: str, value=True):
        self.name = name
        self.value = value
        self.calls = []

    def __call__(self, parameters, context):
        self.calls.append((parameters, context))
        return self.value

    @property
    def called(self) -> bool:
        return bool(self.calls)


@pytest.fixture
def probe_factory():
    """Create call-recording evaluators."""
    return Probe
