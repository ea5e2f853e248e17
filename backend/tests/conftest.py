"""
Inkpress Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the test suite.
How:   Endpoint tests build a fresh app per test from explicit Settings: a
       SQLite file database (aiosqlite) and an upload directory, both under
       pytest's tmp_path. Unit tests use mocked sessions.

Fixture Hierarchy:
    settings ─▶ app ─▶ test_client
    mock_db_session, sample_png_bytes, sample_jpeg_bytes (standalone)
"""

import os
import tempfile
from typing import Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Importing inkpress.main builds a module-level app from the environment;
# keep it away from real databases and the working directory.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="inkpress_test_")
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from inkpress.config import Settings  # noqa: E402


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        upload_dir=str(tmp_path / "uploads"),
        jwt_secret="test-secret-not-real",
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings):
    """A fully wired application with its tables created."""
    from inkpress.main import create_app

    application = create_app(settings)
    await application.state.db.create_all()
    yield application
    await application.state.db.dispose()


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    The client's cookie jar keeps the session cookie between requests,
    like a browser.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    """A MagicMock standing in for AsyncSession (no real DB needed)."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_png_bytes() -> bytes:
    """PNG signature followed by an empty IHDR-sized payload; enough for upload tests."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 25


@pytest.fixture
def sample_jpeg_bytes() -> bytes:
    # Start of Image (FFD8) + JFIF marker + End of Image (FFD9)
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xd9"
    )


async def _register_and_login(client: AsyncClient, username: str, password: str) -> Tuple[str, dict]:
    """Registers an account, logs it in (cookie lands in the jar) and returns (user_id, login body)."""
    response = await client.post("/register", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    response = await client.post("/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    return body["id"], body


async def _create_post(client: AsyncClient, title: str, file_bytes: bytes, filename: str = "img.png", **fields) -> dict:
    """POST /post as the currently logged-in user; returns the created post."""
    data = {"title": title, "summary": fields.get("summary", f"{title} summary"), "content": fields.get("content", "<p>body</p>")}
    response = await client.post(
        "/post",
        data=data,
        files={"file": (filename, file_bytes, "application/octet-stream")},
    )
    assert response.status_code == 200, response.text
    return response.json()["postDoc"]


@pytest.fixture
def register_and_login():
    return _register_and_login


@pytest.fixture
def create_post():
    return _create_post
