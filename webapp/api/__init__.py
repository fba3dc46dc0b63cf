"""
API layer package.

Provides request decoding, response encoding, handler wiring and
application-level error handling.
"""

from webapp.api.codec import (
    Validatable,
    decode_body,
    decode_request,
    encode_response,
    encode_result,
)
from webapp.api.errors import register_exception_handlers
from webapp.api.handlers import HandlerFunc, WebAppHandler, handle, handle_func
from webapp.api.writer import ResponseWriter

__all__ = [
    "HandlerFunc",
    "ResponseWriter",
    "Validatable",
    "WebAppHandler",
    "decode_body",
    "decode_request",
    "encode_response",
    "encode_result",
    "handle",
    "handle_func",
    "register_exception_handlers",
]
