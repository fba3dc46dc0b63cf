"""
Handler result variants.

A handler may return any value. Before encoding, the value is classified
into exactly one of the variants below so the encoder can resolve it with a
single explicit dispatch instead of probing arbitrary runtime types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from webapp.models.errors import WebAppError, is_web_app_error_capable

# Reserved status carried by Done; never sent to a client
DONE_STATUS_CODE = 666


@dataclass(frozen=True)
class Envelope:
    """
    Response that should use a specific HTTP status code.

    Attributes:
        status_code: HTTP status code sent to the client
        payload: Data serialized as the JSON body
    """

    status_code: int
    payload: Any = None


@dataclass(frozen=True)
class Done:
    """Marks that the handler has already written the response itself."""

    status_code: int = DONE_STATUS_CODE


DONE_RESPONSE = Done()


@dataclass(frozen=True)
class StructuredErrorResult:
    """A WebAppError returned by the handler."""

    error: WebAppError


@dataclass(frozen=True)
class CapableErrorResult:
    """An exception that declares its own status code and error ID."""

    error: Exception


@dataclass(frozen=True)
class GenericErrorResult:
    """An exception that does not declare a status code."""

    error: Exception


@dataclass(frozen=True)
class RawPayload:
    """Any other value, sent as-is with status 200."""

    value: Any


Result = Union[
    Done,
    Envelope,
    StructuredErrorResult,
    CapableErrorResult,
    GenericErrorResult,
    RawPayload,
]

_VARIANTS = (
    Done,
    Envelope,
    StructuredErrorResult,
    CapableErrorResult,
    GenericErrorResult,
    RawPayload,
)


def classify_result(value: Any) -> Result:
    """
    Map a handler return value to its result variant.

    Checked in priority order, first match wins: Done, Envelope,
    WebAppError, error-capable exception, other exception, anything else.

    Args:
        value: The value returned (or raised) by a handler

    Returns:
        The matching result variant
    """
    if isinstance(value, _VARIANTS):
        return value
    if isinstance(value, WebAppError):
        return StructuredErrorResult(value)
    if is_web_app_error_capable(value):
        return CapableErrorResult(value)
    if isinstance(value, Exception):
        return GenericErrorResult(value)
    return RawPayload(value)
