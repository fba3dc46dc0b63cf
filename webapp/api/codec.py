"""
Request decoding and response encoding for web app handlers.

Decoding parses a JSON request body into a typed target and runs the
target's own validation. Encoding turns whatever a handler returned into a
status code and a JSON body. Only JSON is supported; the Content-Type and
Accept headers are not inspected.
"""

from __future__ import annotations

import json
import logging
from collections.abc import MutableMapping
from typing import Any, Protocol, runtime_checkable

from fastapi.encoders import jsonable_encoder
from pydantic import TypeAdapter, ValidationError
from starlette.requests import Request

from webapp.api.writer import ResponseWriter
from webapp.core.config import get_settings
from webapp.models.errors import (
    WebAppError,
    invalid_json_error,
    is_web_app_error_capable,
    non_web_app_error,
    validation_error,
)
from webapp.models.responses import (
    CapableErrorResult,
    Done,
    Envelope,
    GenericErrorResult,
    RawPayload,
    Result,
    StructuredErrorResult,
    classify_result,
)

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

# Written verbatim when the real payload cannot be serialized
MARSHAL_ERROR_BODY = b'{"Code": 500, "ErrorId": "RESPONSEMARSHALERROR"}'
MARSHAL_ERROR_STATUS = 500

_JSON_OBJECT_ADAPTER: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])


@runtime_checkable
class Validatable(Protocol):
    """Decoded request data that can validate itself.

    validate_request() signals invalid data by raising ValueError, a
    WebAppError or an exception implementing WebAppErrorCapable. Any other
    exception is treated as a bug and propagates.
    """

    def validate_request(self) -> None: ...


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Decoding
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


# pydantic error types meaning the JSON could not be read into the target at
# all (syntax or type mismatch), as opposed to constraint failures
_DECODE_ERROR_TYPES = frozenset({"json_invalid", "int_from_float"})
_DECODE_ERROR_SUFFIXES = ("_type", "_parsing")


def _is_decode_error(exc: ValidationError) -> bool:
    return any(
        error["type"] in _DECODE_ERROR_TYPES
        or error["type"].endswith(_DECODE_ERROR_SUFFIXES)
        for error in exc.errors()
    )


def _parse(raw: bytes, adapter: TypeAdapter[Any]) -> Any:
    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        if _is_decode_error(e):
            logger.debug(f"Request body cannot be decoded into target: {e}")
            raise invalid_json_error(e) from e
        logger.debug(f"Request body violates target constraints: {e}")
        raise validation_error(e) from e


def _validate(data: Any) -> None:
    if not isinstance(data, Validatable):
        return
    try:
        data.validate_request()
    except Exception as e:
        if not (
            isinstance(e, (ValueError, WebAppError)) or is_web_app_error_capable(e)
        ):
            raise
        logger.debug(f"Request validation failed: {e}")
        raise validation_error(e) from e


def decode_body(raw: bytes, target: Any) -> Any:
    """
    Decode a JSON request body into a target structure.

    Args:
        raw: The request body
        target: A type pydantic can validate (model, dataclass, TypedDict,
            builtin) or a mutable mapping to populate in place

    Returns:
        The decoded instance, or the populated mapping

    Raises:
        WebAppError: 400 INVALIDREQJSON if the body is not valid JSON or
            has the wrong shape or types for the target, 400 VALIDATIONERROR
            if the data violates the target's constraints or fails its own
            validate_request()
    """
    if isinstance(target, MutableMapping):
        target.update(_parse(raw, _JSON_OBJECT_ADAPTER))
        data = target
    else:
        data = _parse(raw, TypeAdapter(target))

    _validate(data)
    return data


async def decode_request(request: Request, target: Any) -> Any:
    """
    Read the request body once and decode it into a target structure.

    The request is closed before returning, whatever the outcome.

    Args:
        request: The incoming request
        target: See decode_body

    Returns:
        The decoded instance, or the populated mapping

    Raises:
        WebAppError: See decode_body
    """
    # TODO: choose the decoder from the Content-Type header once non-JSON
    # bodies are accepted
    try:
        raw = await request.body()
    finally:
        await request.close()
    return decode_body(raw, target)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Encoding
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def render_json(payload: Any) -> bytes:
    """
    Serialize a payload to compact JSON.

    Raises:
        TypeError, ValueError, RecursionError: If the payload cannot be
            serialized (unsupported objects, NaN, cyclic structures)
    """
    return json.dumps(
        jsonable_encoder(payload),
        ensure_ascii=False,
        allow_nan=False,
        indent=None,
        separators=(",", ":"),
    ).encode("utf-8")


def _resolve(result: Result, include_cause: bool) -> tuple[int, Any]:
    if isinstance(result, Envelope):
        return result.status_code, result.payload

    if isinstance(result, StructuredErrorResult):
        return result.error.code, result.error.to_dict(include_cause)

    if isinstance(result, CapableErrorResult):
        code, error_id = result.error.web_app_error()
        if not isinstance(code, int):
            raise TypeError(f"web_app_error() returned non-integer code {code!r}")
        wrapped = WebAppError(code=code, error_id=error_id, cause=result.error)
        return code, wrapped.to_dict(include_cause)

    if isinstance(result, GenericErrorResult):
        logger.error(
            f"Unhandled handler error: {type(result.error).__name__}: {result.error}",
            exc_info=result.error,
        )
        wrapped = non_web_app_error(result.error)
        return wrapped.code, wrapped.to_dict(include_cause)

    if isinstance(result, RawPayload):
        return 200, result.value

    raise TypeError(f"Unknown result variant: {type(result).__name__}")


def encode_result(result: Any) -> tuple[int, bytes] | None:
    """
    Determine the status code and JSON body for a handler result.

    Args:
        result: Any value returned by a handler

    Returns:
        (status code, body) or None if the handler already wrote the response
    """
    variant = classify_result(result)
    if isinstance(variant, Done):
        return None

    include_cause = get_settings().expose_error_cause
    try:
        status_code, payload = _resolve(variant, include_cause)
    except Exception:
        logger.exception(f"Failed to resolve {type(variant).__name__} result")
        return MARSHAL_ERROR_STATUS, MARSHAL_ERROR_BODY

    try:
        body = render_json(payload)
    except (TypeError, ValueError, RecursionError):
        logger.exception(
            f"Failed to serialize {type(payload).__name__} response payload"
        )
        return MARSHAL_ERROR_STATUS, MARSHAL_ERROR_BODY

    return status_code, body


def encode_response(writer: ResponseWriter, request: Request, result: Any) -> None:
    """
    Write a handler result to the response as JSON.

    Writes nothing when the result is DONE_RESPONSE. Otherwise sets the
    content type, writes the status once and the body once. Never raises.

    Args:
        writer: The response channel
        request: The original request (reserved for content negotiation)
        result: Any value returned by a handler
    """
    _ = request
    encoded = encode_result(result)
    if encoded is None:
        return

    status_code, body = encoded
    # TODO: pick the encoding from the Accept header once non-JSON responses
    # are supported
    writer.headers["content-type"] = JSON_CONTENT_TYPE
    writer.write_header(status_code)
    writer.write(body)
