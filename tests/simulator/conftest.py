"""Test fixtures for simulator tests."""

import pytest
from fastapi.testclient import TestClient

import storefront.simulator.store as store_module


@pytest.fixture(autouse=True)
def reset_store():
    """Reset the global simulator store before each test."""
    store_module._simulator_store = None
    yield
    store_module._simulator_store = None


@pytest.fixture
def client():
    """Create test client."""
    from storefront.simulator.main import app
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    """Register and log in a user; return its bearer header."""
    client.post("/auth/register", json={"username": "crio.do", "password": "learnbydoing"})
    response = client.post("/auth/login", json={"username": "crio.do", "password": "learnbydoing"})
    return {"Authorization": f"Bearer {response.json()['token']}"}
