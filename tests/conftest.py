"""Shared fixtures: a throwaway SQLite database and application instances."""

from __future__ import annotations

import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DB_PATH = Path(__file__).parent / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ACCESS_TOKEN_EXPIRE_MINUTES", "15")
os.environ.setdefault("REALTIME_AUTH_TIMEOUT_SECONDS", "5")

import pytest
from fastapi.testclient import TestClient

from board_realtime.config import get_settings

get_settings.cache_clear()

from board_realtime.domain.entities import TokenClaims
from board_realtime.infrastructure import database
from board_realtime.infrastructure.security import issue_token
from board_realtime.main import create_app


@pytest.fixture(autouse=True)
def reset_database():
    """Give every test empty tables."""

    from board_realtime.infrastructure import models  # noqa: F401

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.engine.dispose()


@pytest.fixture(scope="session", autouse=True)
def remove_database_file():
    yield
    database.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture()
def db_session():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def app():
    return create_app()


@pytest.fixture()
def client(app):
    """Test client sharing one event loop between HTTP calls and websockets."""

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_token():
    def _make_token(user_id: str, *, email: str | None = None) -> str:
        return issue_token(
            TokenClaims(user_id=user_id, role_id=None, email=email or f"{user_id}@example.com")
        )

    return _make_token


@pytest.fixture()
def auth_headers(make_token):
    def _auth_headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _auth_headers


@pytest.fixture()
def anyio_backend():
    return "asyncio"
