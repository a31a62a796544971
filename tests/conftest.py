"""Pytest configuration and fixtures."""
import os

# Must be set before app.main is imported, it configures logging on import
os.environ.setdefault("LOG_FILE", "")

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.database import Database
from app.main import create_app

FRONTEND_URL = "http://localhost:5173"


@pytest.fixture
def settings():
    """Settings pointing at an in-memory SQLite database."""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        frontend_url=FRONTEND_URL,
        log_file=None,
    )


@pytest.fixture
def test_db(settings):
    """Create a test database for testing."""
    database = Database(settings.sqlalchemy_database_url)
    database.connect()
    yield database
    database.close()


@pytest.fixture
def db_session(test_db):
    """A session on the test database."""
    session = test_db.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(settings, test_db):
    """Client for an app serving the test database."""
    app = create_app(settings, test_db)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_product(client):
    """Create a product through the API and return its data."""

    def _create(name="Monitor", price=300, availability=True):
        response = client.post(
            "/api/products",
            json={"name": name, "price": price, "availability": availability},
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
