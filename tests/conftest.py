"""
Shared test fixtures for the suggestion box test suite.
"""

from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app import create_app
from database.connection import init_database, close_database


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """Path to a fresh SQLite file inside a not-yet-existing directory."""
    return str(tmp_path / "data" / "suggestions.db")


@pytest_asyncio.fixture
async def db_conn(db_path: str):
    """Provide an initialized aiosqlite connection for service-level tests."""
    conn = await init_database(db_path)
    yield conn
    await close_database(conn)


# ============================================================================
# API Client Fixtures
# ============================================================================


@pytest.fixture
def static_dir(tmp_path: Path) -> str:
    """Static asset directory with an index page and one plain file."""
    directory = tmp_path / "static"
    directory.mkdir()
    (directory / "index.html").write_text("<h1>Suggestion Box</h1>")
    (directory / "hello.txt").write_text("hello")
    return str(directory)


@pytest.fixture
def api_client(db_path: str, static_dir: str) -> TestClient:
    """FastAPI test client with the lifespan (database init) running."""
    app = create_app(db_path=db_path, static_dir=static_dir)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def create_suggestion(api_client: TestClient):
    """Factory posting a suggestion and returning the decoded response body."""

    def _create(suggestion: str = "More coffee", name: str = "Dana") -> dict:
        response = api_client.post("/api/suggestions", json={"name": name, "suggestion": suggestion})
        assert response.status_code == 200, response.text
        return response.json()

    return _create
