"""
FastAPI application entry point.

Configures and creates a FastAPI application with:
- Logging
- Exception handlers
- A health route served through the web app adapter
"""

from __future__ import annotations

from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.requests import Request

from webapp.api import ResponseWriter, handle_func, register_exception_handlers
from webapp.core.config import Settings, get_settings
from webapp.core.logging import configure_logging

# Load environment variables first
load_dotenv()


def health(request: Request, writer: ResponseWriter) -> dict[str, str]:
    """Report that the service is up."""
    return {"status": "ok"}


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Settings to use (defaults to the cached environment settings)

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="webapp", version="1.0.0")
    register_exception_handlers(app)
    app.add_api_route("/health", handle_func(health), methods=["GET"])
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
