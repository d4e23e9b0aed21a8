"""
Test configuration and fixtures for the HeroForge test suite.

Environment variables are set before any heroforge import: configuration
is read from the environment and the Argon2 cost parameters are fixed at
import time.
"""

import os
from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any

os.environ.setdefault("HEROFORGE_JWT_SECRET", "test-jwt-secret-key-for-testing-only")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOGGING_ENVIRONMENT", "unit_test")
os.environ.setdefault("LOGGING_LEVEL", "WARNING")
os.environ.setdefault("SERVER_PORT", "54731")
# Cheap hashes keep the suite fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from heroforge.app.factory import create_app  # noqa: E402
from heroforge.auth.session_authority import SessionAuthority, get_session_authority  # noqa: E402
from heroforge.config import reset_config  # noqa: E402
from heroforge.database import DatabaseManager, close_db, get_session_maker, init_db  # noqa: E402

DEFAULT_PASSWORD = "secret1"


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Fresh configuration and a fresh in-memory database for every test."""
    reset_config()
    DatabaseManager.reset_instance()
    yield
    DatabaseManager.reset_instance()
    reset_config()


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """A session on a freshly created schema."""
    await init_db()
    session_maker = get_session_maker()
    async with session_maker() as session:
        yield session
    await close_db()


@pytest.fixture
def session_authority() -> SessionAuthority:
    """Authority configured exactly like the application's."""
    return get_session_authority()


@pytest.fixture
def app() -> FastAPI:
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client running the application lifespan (schema creation included)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sign_up(client: TestClient) -> Callable[..., Any]:
    """Register an account through the API."""

    def _sign_up(account_id: str, password: str = DEFAULT_PASSWORD, name: str | None = None) -> Any:
        return client.post(
            "/api/sign-up",
            json={
                "id": account_id,
                "password": password,
                "passwordCheck": password,
                "name": name or account_id.upper(),
            },
        )

    return _sign_up


@pytest.fixture
def sign_in(client: TestClient) -> Callable[..., Any]:
    """Sign in through the API, replacing whatever session the client held."""

    def _sign_in(account_id: str, password: str = DEFAULT_PASSWORD) -> Any:
        client.cookies.clear()
        return client.post("/api/sign-in", json={"id": account_id, "password": password})

    return _sign_in


@pytest.fixture
def signed_in_as(sign_up: Callable[..., Any], sign_in: Callable[..., Any]) -> Callable[[str], None]:
    """Register (if needed) and sign in as ``account_id``."""

    def _signed_in_as(account_id: str) -> None:
        sign_up(account_id)
        response = sign_in(account_id)
        assert response.status_code == 200, response.text

    return _signed_in_as
