import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from exercise_tracker.main import create_app


@pytest.fixture
def engine():
    """A fresh in-memory SQLite database shared by every thread of one test."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield eng
    eng.dispose()


@pytest.fixture
def app(engine):
    return create_app(engine)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(client):
    def _make(username):
        r = client.post('/api/users', data={'username': username})
        assert r.status_code == 200
        return r.json()
    return _make
