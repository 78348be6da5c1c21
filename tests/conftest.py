"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from fincalc.main import app
from fincalc.services.history import CalculationHistory, get_history_service


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def history():
    """Fresh calculation history injected in place of the singleton."""
    service = CalculationHistory(max_entries=50)
    app.dependency_overrides[get_history_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_history_service, None)


@pytest.fixture
def client(history):
    """Create test client."""
    return TestClient(app)
