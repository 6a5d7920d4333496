from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from valportal.app.api import app
from valportal.app.dependencies import get_db_connection
from valportal.infrastructure.db import ensure_schema, get_connection
from valportal.infrastructure.db.repositories import (DocRepository,
                                                      ResourceRepository)

TEST_SECRET = "test-secret-with-at-least-32-bytes!!"
TEST_ACCESS_CODE = "open-sesame"


@pytest.fixture(autouse=True)
def portal_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without auth configured."""
    for name in ("PORTAL_JWT_SECRET", "PORTAL_ACCESS_CODE", "PORTAL_ENV"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def auth_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORTAL_JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("PORTAL_ACCESS_CODE", TEST_ACCESS_CODE)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "portal.db"


@pytest.fixture
def seed_resources(db_path: Path) -> Callable[[str, list[dict]], None]:
    def _seed(domain: str, rows: list[dict]) -> None:
        with get_connection(db_path) as conn:
            ResourceRepository(conn).upsert_many(domain, rows)

    return _seed


@pytest.fixture
def seed_doc(db_path: Path) -> Callable[..., None]:
    def _seed(**fields) -> None:
        with get_connection(db_path) as conn:
            DocRepository(conn).upsert(**fields)

    return _seed


@pytest.fixture
def client(db_path: Path) -> Iterator[TestClient]:
    def _test_connection():
        with get_connection(db_path, check_same_thread=False) as conn:
            ensure_schema(conn)
            yield conn

    app.dependency_overrides[get_db_connection] = _test_connection
    try:
        yield TestClient(app, follow_redirects=False)
    finally:
        app.dependency_overrides.clear()
