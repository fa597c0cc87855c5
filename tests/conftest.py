"""Shared test fixtures for kracker-core."""

import os
import tempfile

# Keep the module-level app (built on import of kracker_core.main) out of ./data
os.environ.setdefault(
    "DATABASE_PATH",
    os.path.join(tempfile.mkdtemp(prefix="kracker-tests-"), "kracker.db"),
)

import pytest

from kracker_core.auth.password import PasswordHasher
from kracker_core.auth.service import AuthFlows
from kracker_core.auth.token import TokenService
from kracker_core.config import Settings
from kracker_core.db import Database, SqliteCredentialStore
from kracker_core.main import create_app
from kracker_core.services import EXTENSION_KEY

TEST_SECRET = "test-secret-key-that-is-at-least-32-bytes"

# Cheap Argon2 parameters so the suite stays fast
FAST_ARGON2 = {"time_cost": 1, "memory_cost": 8192, "parallelism": 1}


@pytest.fixture
def test_settings(tmp_path):
    """Settings with a temp database, a fixed secret and cheap hashing."""
    return Settings(
        database_path=str(tmp_path / "kracker.db"),
        jwt_secret=TEST_SECRET,
        argon2_time_cost=FAST_ARGON2["time_cost"],
        argon2_memory_cost=FAST_ARGON2["memory_cost"],
        argon2_parallelism=FAST_ARGON2["parallelism"],
    )


@pytest.fixture
def app(test_settings):
    """Create an app wired to the test settings."""
    app = create_app(test_settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Create test client for API testing."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def services(app):
    """The service graph of the test app."""
    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def database(tmp_path):
    """Initialized sqlite Database in a temp directory."""
    db = Database(str(tmp_path / "store.db"))
    db.init_db()
    return db


@pytest.fixture
def store(database):
    return SqliteCredentialStore(database)


@pytest.fixture
def hasher():
    return PasswordHasher(**FAST_ARGON2)


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRET)


@pytest.fixture
def flows(store, hasher, token_service):
    return AuthFlows(store=store, hasher=hasher, tokens=token_service)


@pytest.fixture
def registered_user(client):
    """Register neo through the API.

    Returns the response JSON: {"id", "username", "accessToken"}.
    """
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "neo", "email": "neo@example.com", "password": "whoa123"},
    )
    assert response.status_code == 200
    return response.get_json()


@pytest.fixture
def auth_headers(registered_user):
    """Authorization header for the registered user."""
    return {"Authorization": f"Bearer {registered_user['accessToken']}"}
