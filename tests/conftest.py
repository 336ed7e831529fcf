import pytest
from fastapi.testclient import TestClient

import auth
import store
from main import app


@pytest.fixture(autouse=True)
def clean_state():
    """Fresh user registry and tables for every test."""
    auth.reset_users()
    store.reset()
    yield
    auth.reset_users()
    store.reset()


@pytest.fixture
def client():
    return TestClient(app)


def _register(client, email):
    resp = client.post("/register", json={"email": email, "password": "farm2025", "full_name": "Test Farmer"})
    assert resp.status_code == 201
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return _register(client, "farmer@example.com")


@pytest.fixture
def other_headers(client):
    return _register(client, "neighbour@example.com")


@pytest.fixture
def rice_soil():
    """A measurement inside every one of Rice's ranges."""
    return {
        "nitrogen": 100,
        "phosphorus": 50,
        "potassium": 50,
        "ph_level": 6.5,
        "temperature": 27,
        "humidity": 85,
        "rainfall": 200,
        "location": "Thanjavur",
    }
