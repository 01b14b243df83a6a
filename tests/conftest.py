"""Shared test fixtures for pytest.

ENVIRONMENT is pinned to "test" before anything imports the application so
`get_settings()` never looks for a .env file. Tests that need specific
provider or SMTP settings build their own `Settings` and install it with a
dependency override instead of touching os.environ.
"""

import os
from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient


os.environ["ENVIRONMENT"] = "test"

from core.config import Settings, get_settings
from main import app


SettingsFactory = Callable[..., Settings]

TEST_SETTINGS: dict[str, Any] = {
    "ENVIRONMENT": "test",
    "GROQ_API_KEY": "test-groq-key",
    "SMTP_HOST": "smtp.example.com",
    "SMTP_PORT": 465,
    "SMTP_USER": "sender@example.com",
    # allowlist: placeholder credential used only by tests
    "SMTP_PASS": "placeholder-smtp-pass",  # pragma: allowlist secret
    "FROM_EMAIL": None,
}


@pytest.fixture
def make_settings() -> SettingsFactory:
    """Build a Settings instance from test defaults plus overrides."""

    def _make(**overrides: Any) -> Settings:
        values = {**TEST_SETTINGS, **overrides}
        return Settings(_env_file=None, **values)  # type: ignore[call-arg]

    return _make


@pytest.fixture
def settings(make_settings: SettingsFactory) -> Settings:
    return make_settings()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """
    Create a test client for the FastAPI application.
    """
    with TestClient(app) as client:
        yield client


@pytest.fixture
def override_settings() -> Generator[Callable[[Settings], None], None, None]:
    """Install a Settings instance for request handlers that depend on it."""

    def _install(settings: Settings) -> None:
        app.dependency_overrides[get_settings] = lambda: settings

    yield _install
    app.dependency_overrides.pop(get_settings, None)


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Async client bound directly to the ASGI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def smtp_client() -> MagicMock:
    """Stand-in for a connected-on-demand aiosmtplib.SMTP instance."""
    smtp = MagicMock()
    smtp.connect = AsyncMock()
    smtp.noop = AsyncMock()
    smtp.send_message = AsyncMock(return_value=({}, "250 Message accepted"))
    smtp.quit = AsyncMock()
    smtp.close = MagicMock()
    smtp.is_connected = True
    return smtp
