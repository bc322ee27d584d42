"""Shared fixtures: isolated settings, stores and signed-in API clients."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from backoffice.config import Settings
from backoffice.database import Store
from backoffice.main import create_app

ADMIN_EMAIL = "admin@school.com"
ADMIN_PASSWORD = "admin123"


def make_settings(tmp_path, **overrides):
    values = dict(
        DATABASE_PATH=str(tmp_path / "database.sqlite"),
        SNAPSHOT_FALLBACK_PATHS=[],
        SNAPSHOT_URL=None,
        EPHEMERAL_STORAGE=False,
        VERCEL=None,
        BCRYPT_ROUNDS=4,
        SECRET_KEY="test-secret-key",
        DEFAULT_ADMIN_EMAIL=ADMIN_EMAIL,
        DEFAULT_ADMIN_PASSWORD=ADMIN_PASSWORD,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def store(settings):
    """File-backed store in a temp dir."""
    s = Store(settings).acquire()
    yield s
    s.dispose()


@pytest.fixture
def memory_store(tmp_path):
    s = Store(make_settings(tmp_path, EPHEMERAL_STORAGE=True)).acquire()
    yield s
    s.dispose()


def login(client, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.fixture
def car_client(tmp_path):
    with TestClient(create_app(make_settings(tmp_path, DEPLOYMENT="cars"))) as client:
        assert login(client).status_code == 200
        yield client


@pytest.fixture
def student_client(tmp_path):
    with TestClient(create_app(make_settings(tmp_path, DEPLOYMENT="students"))) as client:
        assert login(client).status_code == 200
        yield client


@pytest.fixture
def anonymous_client(tmp_path):
    with TestClient(create_app(make_settings(tmp_path, DEPLOYMENT="cars"))) as client:
        yield client
