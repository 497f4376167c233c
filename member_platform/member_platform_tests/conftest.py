"""
Pytest configuration for member_service tests.

Every test gets its own application bound to a fresh SQLite file database.
"""
import pytest
from fastapi.testclient import TestClient

from member_platform.member_platform.member_service.config import Settings
from member_platform.member_platform.member_service.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'members.db'}")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(app, client):
    """Session on the running app's database."""
    session = app.state.db.session()
    yield session
    session.close()


@pytest.fixture
def register(client):
    """Register an account through the API and return the response."""
    def _register(username="alice", useremail="a@x.com", password="pw123"):
        return client.post(
            "/register",
            json={"username": username, "useremail": useremail, "password": password},
        )
    return _register
