"""
Pytest fixtures for pizzadash backend tests.

Provides an in-memory EntityStore for service tests, plus an application,
test client and logged-in headers for route tests.

NOTE: the dashboard keeps a single active session, so logging in as one user
ends the previous user's session. A test should use either admin_headers or
staff_headers, not both.
"""

import pytest

from pizzadash import create_app
from pizzadash.extensions import STORE_EXTENSION_KEY
from pizzadash.services import auth_service
from pizzadash.services.entity_store import EntityStore
from pizzadash.services.persistence import MemorySnapshotBackend


PASSWORD = "secret123"
ADMIN_EMAIL = "admin@pizza.test"
STAFF_EMAIL = "staff@pizza.test"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """bcrypt's minimum cost keeps hashing outside an app context fast."""
    monkeypatch.setattr(auth_service, "DEFAULT_BCRYPT_ROUNDS", 4)


# =============================================================================
# SERVICE-LEVEL FIXTURES
# =============================================================================


@pytest.fixture
def backend():
    return MemorySnapshotBackend()


@pytest.fixture
def store(backend):
    """Store seeded with the built-in dataset (7 products, 7 orders, 4 customers)."""
    return EntityStore(backend)


@pytest.fixture
def empty_store():
    """Store with empty collections and the default pizza settings."""
    return EntityStore(MemorySnapshotBackend(), seed={})


@pytest.fixture
def admin(store):
    return auth_service.register(store, name="Ada Admin", email=ADMIN_EMAIL, password=PASSWORD, role="administrator")


@pytest.fixture
def staff(store):
    return auth_service.create_user(store, name="Sam Staff", email=STAFF_EMAIL, password=PASSWORD, role="staff")


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SNAPSHOT_BACKEND": "memory",
        "BCRYPT_ROUNDS": 4,
        "GENERATION_API_KEY": "",
    })
    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def app_store(app):
    return app.extensions[STORE_EXTENSION_KEY]


@pytest.fixture
def admin_user(app_store):
    return auth_service.register(
        app_store, name="Ada Admin", email=ADMIN_EMAIL, password=PASSWORD, role="administrator",
    )


@pytest.fixture
def staff_user(app_store):
    return auth_service.create_user(
        app_store, name="Sam Staff", email=STAFF_EMAIL, password=PASSWORD, role="staff",
    )


def login(client, email, password=PASSWORD):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture
def admin_headers(client, admin_user):
    return login(client, ADMIN_EMAIL)


@pytest.fixture
def staff_headers(client, staff_user):
    return login(client, STAFF_EMAIL)


@pytest.fixture
def login_as(client):
    """Log in through the API and return the Authorization header."""
    def _login(email, password=PASSWORD):
        return login(client, email, password)
    return _login
