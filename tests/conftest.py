"""
Shared fixtures: an in-memory SQLite database wired into the API.
"""

import pytest
from fastapi.testclient import TestClient

from api.deps import get_db
from api.main import app
from backoffice.db_utils import DatabaseManager


@pytest.fixture
def db():
    """Fresh in-memory database with every record table created."""
    manager = DatabaseManager(url="sqlite://")
    manager.create_tables()
    yield manager
    manager.close()


@pytest.fixture
def client(db):
    """TestClient whose requests all use the in-memory database."""
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()
