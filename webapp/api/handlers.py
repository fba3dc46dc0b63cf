"""
Adapters from web app handlers to Starlette/FastAPI endpoints.

A web app handler receives the request and a ResponseWriter and returns a
result value (payload, Envelope, error, or DONE_RESPONSE). The endpoints
built here call the handler and encode its result as the HTTP response.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, Union

from starlette.requests import Request
from starlette.responses import Response

from webapp.api.codec import encode_response
from webapp.api.writer import ResponseWriter
from webapp.models.errors import WebAppError, is_web_app_error_capable

HandlerFunc = Callable[[Request, ResponseWriter], Union[Any, Awaitable[Any]]]
Endpoint = Callable[[Request], Awaitable[Response]]


class WebAppHandler(Protocol):
    """An object that serves a web app request and returns its result."""

    def serve_web_app(
        self, request: Request, writer: ResponseWriter
    ) -> Any | Awaitable[Any]: ...


async def _call(func: HandlerFunc, request: Request, writer: ResponseWriter) -> Any:
    # Sync handlers run in a worker thread, off the event loop. Declared errors
    # raised by the handler are treated like returned ones; anything else
    # propagates to the server's exception handlers.
    try:
        if inspect.iscoroutinefunction(func):
            result = await func(request, writer)
        else:
            result = await asyncio.to_thread(func, request, writer)
        if inspect.isawaitable(result):
            result = await result
    except WebAppError as e:
        return e
    except Exception as e:
        if not is_web_app_error_capable(e):
            raise
        return e
    return result


def handle_func(func: HandlerFunc) -> Endpoint:
    """
    Convert a web app handler function into a Starlette/FastAPI endpoint.

    Works as a filter: gets the result from the handler and encodes it to
    the client.

    Args:
        func: Sync or async callable taking (request, writer); sync
            callables run in a worker thread

    Returns:
        Endpoint suitable for Route(...) or app.add_api_route(...)
    """

    async def endpoint(request: Request) -> Response:
        writer = ResponseWriter()
        result = await _call(func, request, writer)
        encode_response(writer, request, result)
        return writer.to_response()

    # Not functools.wraps: FastAPI would follow __wrapped__ and inspect the
    # handler's own signature.
    endpoint.__name__ = getattr(func, "__name__", endpoint.__name__)
    endpoint.__qualname__ = getattr(func, "__qualname__", endpoint.__qualname__)
    endpoint.__doc__ = func.__doc__
    return endpoint


def handle(handler: WebAppHandler) -> Endpoint:
    """Convert a WebAppHandler object into a Starlette/FastAPI endpoint."""
    endpoint = handle_func(handler.serve_web_app)
    endpoint.__name__ = type(handler).__name__
    endpoint.__qualname__ = type(handler).__qualname__
    return endpoint
