"""
Structured error schema for web app handlers.

Provides the error value returned to clients, the capability protocol that
lets application exceptions declare their own status code and identifier,
and small factories for building errors at call sites.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError


class ErrorID(str, Enum):
    """Error identifiers produced by the adapter itself."""

    # Request decoding
    INVALIDREQJSON = "INVALIDREQJSON"
    VALIDATIONERROR = "VALIDATIONERROR"

    # Response encoding
    NONWEBAPPERROR = "NONWEBAPPERROR"
    RESPONSEMARSHALERROR = "RESPONSEMARSHALERROR"


@runtime_checkable
class WebAppErrorCapable(Protocol):
    """An exception that reports its own HTTP status code and error ID."""

    def web_app_error(self) -> tuple[int, str]: ...


def is_web_app_error_capable(value: object) -> bool:
    """Check whether a value is an exception implementing WebAppErrorCapable."""
    return isinstance(value, Exception) and isinstance(value, WebAppErrorCapable)


def serialize_cause(cause: BaseException | None) -> Any:
    """
    Convert a wrapped cause into a JSON-compatible value.

    Opaque exceptions serialize as an empty object; only causes that carry
    their own structure (nested web app errors, pydantic validation errors)
    expose any detail.

    Args:
        cause: The wrapped exception, if any

    Returns:
        None, a dict describing the cause, or an empty dict
    """
    if cause is None:
        return None
    if isinstance(cause, WebAppError):
        return cause.to_dict()
    if isinstance(cause, ValidationError):
        return {
            "errors": cause.errors(
                include_url=False, include_context=False, include_input=False
            )
        }
    return {}


class WebAppError(Exception):
    """
    Structured error response for web app handlers.

    Attributes:
        code: HTTP status code sent to the client
        error_id: Short machine-readable identifier
        cause: Optional wrapped exception
        extra: Optional additional data included in the response body
    """

    def __init__(
        self,
        code: int,
        error_id: str,
        cause: BaseException | None = None,
        extra: Any = None,
    ) -> None:
        if isinstance(error_id, ErrorID):
            error_id = error_id.value
        self._code = code
        self._error_id = error_id
        self._cause = cause
        self._extra = extra
        super().__init__(code, error_id)

    @property
    def code(self) -> int:
        return self._code

    @property
    def error_id(self) -> str:
        return self._error_id

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    @property
    def extra(self) -> Any:
        return self._extra

    def __str__(self) -> str:
        orig = "nil" if self._cause is None else str(self._cause)
        return f"REST Error {self._code}: {self._error_id} (original: {orig})"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self._code!r}, "
            f"error_id={self._error_id!r}, cause={self._cause!r}, "
            f"extra={self._extra!r})"
        )

    def web_app_error(self) -> tuple[int, str]:
        """Return the (status code, error ID) pair."""
        return self._code, self._error_id

    def to_dict(self, include_cause: bool = True) -> dict[str, Any]:
        """
        Convert error to dictionary format for JSON responses.

        Args:
            include_cause: Whether to serialize the wrapped cause

        Returns:
            Dictionary with Code, ErrorID, OrigError and Extra keys
        """
        return {
            "Code": self._code,
            "ErrorID": self._error_id,
            "OrigError": serialize_cause(self._cause) if include_cause else None,
            "Extra": self._extra,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WebAppError:
        """Rebuild an error from its JSON body. The cause is not restored."""
        return cls(
            code=int(data["Code"]),
            error_id=str(data["ErrorID"]),
            extra=data.get("Extra"),
        )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Error Factories
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def new_error(
    code: int,
    error_id: str,
    cause: BaseException | None = None,
    extra: Any = None,
) -> WebAppError:
    """Create an error with an arbitrary status code."""
    return WebAppError(code=code, error_id=error_id, cause=cause, extra=extra)


def new_bad_request_error(error_id: str, extra: Any = None) -> WebAppError:
    """Create an error with status 400 (Bad Request)."""
    return WebAppError(code=400, error_id=error_id, extra=extra)


def new_not_found_error(error_id: str, extra: Any = None) -> WebAppError:
    """Create an error with status 404 (Not Found)."""
    return WebAppError(code=404, error_id=error_id, extra=extra)


def invalid_json_error(cause: BaseException) -> WebAppError:
    """Create error for a request body that is not valid JSON."""
    return WebAppError(code=400, error_id=ErrorID.INVALIDREQJSON, cause=cause)


def validation_error(cause: BaseException) -> WebAppError:
    """Create error for request data that failed validation."""
    return WebAppError(code=400, error_id=ErrorID.VALIDATIONERROR, cause=cause)


def non_web_app_error(cause: BaseException) -> WebAppError:
    """Create error for an exception that does not declare its own status."""
    return WebAppError(code=500, error_id=ErrorID.NONWEBAPPERROR, cause=cause)
