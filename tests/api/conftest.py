"""
Pytest configuration for API integration tests
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="function")
def client():
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh service to avoid state contamination.
    """
    from main import app
    from services.transform_service import TransformService

    # Create test config
    test_config = {
        "environment": "test",
        "system": {"log_level": "INFO", "debug": False},
        "engine": {"max_pixels": 1024 * 1024},
    }

    # Set in app state
    app.state.transform_service = TransformService(max_pixels=1024 * 1024)
    app.state.config = test_config

    # Create test client (no context manager so the lifespan does not replace state)
    test_client = TestClient(app, raise_server_exceptions=False)

    yield test_client
