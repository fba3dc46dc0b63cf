"""
JSON request/response adapter for Starlette and FastAPI handlers.

Handlers return plain values, Envelope, errors or DONE_RESPONSE; the
adapter decodes JSON requests and encodes the result with the right
status code.
"""

from webapp.api import (
    HandlerFunc,
    ResponseWriter,
    Validatable,
    WebAppHandler,
    decode_body,
    decode_request,
    encode_response,
    encode_result,
    handle,
    handle_func,
    register_exception_handlers,
)
from webapp.models.errors import (
    ErrorID,
    WebAppError,
    WebAppErrorCapable,
    new_bad_request_error,
    new_error,
    new_not_found_error,
)
from webapp.models.responses import DONE_RESPONSE, Done, Envelope

__all__ = [
    "DONE_RESPONSE",
    "Done",
    "Envelope",
    "ErrorID",
    "HandlerFunc",
    "ResponseWriter",
    "Validatable",
    "WebAppError",
    "WebAppErrorCapable",
    "WebAppHandler",
    "decode_body",
    "decode_request",
    "encode_response",
    "encode_result",
    "handle",
    "handle_func",
    "new_bad_request_error",
    "new_error",
    "new_not_found_error",
    "register_exception_handlers",
]
