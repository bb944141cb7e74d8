"""
Shared fixtures: a fresh SQLite file database and app per test.
"""

import sqlite3

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test.db"


@pytest.fixture
def make_settings(db_path):
    def _make(**overrides) -> Settings:
        values = {
            "DATABASE_URL": f"sqlite+aiosqlite:///{db_path}",
            "SECRET_KEY": "test-secret",
            "BCRYPT_ROUNDS": 4,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def make_client(make_settings):
    """Build a TestClient, optionally with settings overrides."""
    clients = []

    def _make(**overrides) -> TestClient:
        client = TestClient(create_app(make_settings(**overrides)))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def count_users(db_path):
    def _count() -> int:
        with sqlite3.connect(db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]

    return _count


ADA = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@example.com",
    "password": "secret",
}


@pytest.fixture
def ada():
    return dict(ADA)
