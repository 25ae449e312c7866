import pytest
from fastapi.testclient import TestClient

from notes_database import JsonFileStore
from src.api.dependencies import get_store
from src.api.main import app


@pytest.fixture
def db_path(tmp_path):
    """Location of a throwaway JSON database document."""
    return tmp_path / "data" / "db.json"


@pytest.fixture
def store(db_path):
    """File-backed store for a single test."""
    return JsonFileStore(db_path)


@pytest.fixture
def client(store):
    """Fixture for FastAPI TestClient with the test store injected."""
    app.dependency_overrides[get_store] = lambda: store

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def user_data():
    """Returns default user data for registration."""
    return {"username": "alice", "password": "alicepassword123"}


@pytest.fixture
def second_user_data():
    """Returns a second user's data."""
    return {"username": "bob", "password": "bobpassword456"}


def register_and_auth(client, username, password):
    """Helper for registering then logging in to get the api token header."""
    r1 = client.post("/api/register", json={"username": username, "password": password})
    assert r1.status_code in (200, 400)

    r2 = client.post("/api/login", json={"username": username, "password": password})
    assert r2.status_code == 200
    return {"api-token": r2.json()["token"]}


@pytest.fixture
def auth_header(client, user_data):
    """Returns {'api-token': <token>} for the default user."""
    return register_and_auth(client, user_data["username"], user_data["password"])


@pytest.fixture
def second_auth_header(client, second_user_data):
    """Returns the auth header for the second user."""
    return register_and_auth(client, second_user_data["username"], second_user_data["password"])
