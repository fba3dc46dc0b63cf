"""
Pytest configuration and fixtures for adapter tests.
"""

from collections.abc import AsyncGenerator, Callable, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

# Configure pytest-asyncio to use function-scoped event loops
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Give every test freshly loaded settings."""
    from webapp.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Build a Starlette request whose body is delivered in one message."""

    def _make(body: bytes = b"", method: str = "POST") -> Request:
        async def receive() -> dict:
            return {"type": "http.request", "body": body, "more_body": False}

        scope = {
            "type": "http",
            "method": method,
            "path": "/",
            "query_string": b"",
            "headers": [(b"content-type", b"application/json")],
        }
        return Request(scope, receive)

    return _make


@pytest.fixture
def app() -> FastAPI:
    """Create a fresh application instance."""
    from webapp.main import create_app

    return create_app()


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing the application.

    Unhandled exceptions are answered by the app's exception handlers, so
    the transport must not re-raise them.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
