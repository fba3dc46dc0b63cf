"""
Centralized exception handling for the host application.

Web app errors raised from ordinary FastAPI routes are encoded the same
way as handler results, and any other unhandled exception becomes a 500
NONWEBAPPERROR JSON response so clients always receive JSON.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from starlette.responses import Response

from webapp.api.codec import (
    JSON_CONTENT_TYPE,
    MARSHAL_ERROR_BODY,
    MARSHAL_ERROR_STATUS,
    encode_result,
)
from webapp.models.errors import (
    WebAppError,
    is_web_app_error_capable,
    non_web_app_error,
)

logger = logging.getLogger(__name__)


def _json_response(exc: Exception) -> Response:
    encoded = encode_result(exc) or (MARSHAL_ERROR_STATUS, MARSHAL_ERROR_BODY)
    status_code, body = encoded
    return Response(
        content=body, status_code=status_code, media_type=JSON_CONTENT_TYPE
    )


async def web_app_exception_handler(request: Request, exc: Exception) -> Response:
    """
    Encode a WebAppError raised outside a wrapped handler.

    Args:
        request: The incoming HTTP request
        exc: The raised exception (must be WebAppError)

    Returns:
        JSON response with the error's status code
    """
    if not isinstance(exc, WebAppError):
        raise exc

    logger.debug(f"{request.method} {request.url.path}: {exc}")
    return _json_response(exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """
    Turn any other exception into a 500 NONWEBAPPERROR response.

    The full error is logged server-side; the client only sees the
    generic identifier.
    """
    if is_web_app_error_capable(exc):
        return _json_response(exc)

    logger.error(
        f"{request.method} {request.url.path}: {type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    return _json_response(non_web_app_error(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers on the FastAPI app.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(WebAppError, web_app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
