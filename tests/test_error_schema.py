"""
Tests for the structured error schema.

Validates ErrorID, WebAppError, the error capability protocol and the
error factory functions.
"""

from __future__ import annotations

import pytest
from pydantic import BaseModel, ValidationError

from webapp.models.errors import (
    ErrorID,
    WebAppError,
    WebAppErrorCapable,
    invalid_json_error,
    is_web_app_error_capable,
    new_bad_request_error,
    new_error,
    new_not_found_error,
    non_web_app_error,
    serialize_cause,
    validation_error,
)


class QuotaExceeded(Exception):
    """Application error that declares its own status."""

    def web_app_error(self) -> tuple[int, str]:
        return 429, "QUOTAEXCEEDED"


class NotAnException:
    def web_app_error(self) -> tuple[int, str]:
        return 418, "TEAPOT"


class TestErrorID:
    """Test ErrorID enum."""

    def test_all_error_ids_unique(self) -> None:
        """All error IDs should have unique values."""
        ids = [e.value for e in ErrorID]
        assert len(ids) == len(set(ids))

    def test_error_ids_match_names(self) -> None:
        """Identifiers are sent verbatim, so value equals name."""
        for error_id in ErrorID:
            assert error_id.value == error_id.name


class TestWebAppError:
    """Test WebAppError."""

    def test_minimal_error_creation(self) -> None:
        """Create error with only required fields."""
        error = WebAppError(code=409, error_id="DUPLICATE")
        assert error.code == 409
        assert error.error_id == "DUPLICATE"
        assert error.cause is None
        assert error.extra is None

    def test_enum_error_id_is_stored_as_string(self) -> None:
        """ErrorID members are normalized to their string value."""
        error = WebAppError(code=400, error_id=ErrorID.VALIDATIONERROR)
        assert error.error_id == "VALIDATIONERROR"
        assert type(error.error_id) is str

    def test_fields_are_read_only(self) -> None:
        """Errors are immutable after construction."""
        error = WebAppError(code=400, error_id="X")
        with pytest.raises(AttributeError):
            error.code = 500  # type: ignore[misc]

    def test_str_without_cause(self) -> None:
        """Message reports 'nil' when there is no cause."""
        error = WebAppError(code=400, error_id="BADTHING")
        assert str(error) == "REST Error 400: BADTHING (original: nil)"

    def test_str_with_cause(self) -> None:
        """Message includes the cause's message."""
        error = WebAppError(code=500, error_id="BOOM", cause=RuntimeError("disk full"))
        assert str(error) == "REST Error 500: BOOM (original: disk full)"

    def test_is_raisable(self) -> None:
        """WebAppError is a regular exception."""
        with pytest.raises(WebAppError) as exc_info:
            raise new_bad_request_error("NOPE")
        assert exc_info.value.code == 400

    def test_web_app_error_pair(self) -> None:
        """web_app_error() returns (code, error_id)."""
        error = WebAppError(code=404, error_id="MISSING")
        assert error.web_app_error() == (404, "MISSING")
        assert isinstance(error, WebAppErrorCapable)

    def test_to_dict_minimal(self) -> None:
        """Convert minimal error to dict."""
        error = WebAppError(code=400, error_id="BADTHING")
        assert error.to_dict() == {
            "Code": 400,
            "ErrorID": "BADTHING",
            "OrigError": None,
            "Extra": None,
        }

    def test_to_dict_with_extra(self) -> None:
        """Extra data is included as-is."""
        error = WebAppError(code=400, error_id="BADTHING", extra={"field": "name"})
        assert error.to_dict()["Extra"] == {"field": "name"}

    def test_to_dict_opaque_cause_is_empty_object(self) -> None:
        """Plain exceptions do not leak their message."""
        error = WebAppError(code=500, error_id="X", cause=KeyError("secret"))
        assert error.to_dict()["OrigError"] == {}

    def test_to_dict_nested_cause(self) -> None:
        """A wrapped WebAppError is serialized structurally."""
        inner = WebAppError(code=404, error_id="INNER")
        outer = WebAppError(code=500, error_id="OUTER", cause=inner)
        assert outer.to_dict()["OrigError"] == inner.to_dict()

    def test_to_dict_without_cause(self) -> None:
        """include_cause=False drops the cause."""
        inner = WebAppError(code=404, error_id="INNER")
        outer = WebAppError(code=500, error_id="OUTER", cause=inner)
        assert outer.to_dict(include_cause=False)["OrigError"] is None

    def test_from_dict(self) -> None:
        """Errors can be rebuilt from their JSON body."""
        data = {"Code": 422, "ErrorID": "X", "OrigError": {}, "Extra": [1, 2]}
        error = WebAppError.from_dict(data)
        assert error.code == 422
        assert error.error_id == "X"
        assert error.extra == [1, 2]
        assert error.cause is None


class TestSerializeCause:
    """Test cause serialization."""

    def test_none(self) -> None:
        assert serialize_cause(None) is None

    def test_pydantic_validation_error(self) -> None:
        """Validation errors expose their error list without inputs."""

        class Item(BaseModel):
            count: int

        with pytest.raises(ValidationError) as exc_info:
            Item.model_validate({"count": "many"})

        data = serialize_cause(exc_info.value)
        assert data["errors"][0]["loc"] == ("count",)
        assert "input" not in data["errors"][0]
        assert "url" not in data["errors"][0]


class TestErrorCapability:
    """Test the error capability check."""

    def test_capable_exception(self) -> None:
        assert is_web_app_error_capable(QuotaExceeded())

    def test_plain_exception(self) -> None:
        assert not is_web_app_error_capable(ValueError("x"))

    def test_non_exception_with_method(self) -> None:
        """Only exceptions count as error-capable."""
        assert not is_web_app_error_capable(NotAnException())


class TestErrorFactories:
    """Test predefined error factory functions."""

    def test_new_error(self) -> None:
        cause = OSError("io")
        error = new_error(503, "UNAVAILABLE", cause=cause, extra={"retry": 5})
        assert error.code == 503
        assert error.error_id == "UNAVAILABLE"
        assert error.cause is cause
        assert error.extra == {"retry": 5}

    def test_new_bad_request_error(self) -> None:
        error = new_bad_request_error("MISSINGNAME")
        assert error.code == 400
        assert error.error_id == "MISSINGNAME"
        assert error.cause is None

    def test_new_not_found_error(self) -> None:
        error = new_not_found_error("NOSUCHUSER")
        assert error.code == 404
        assert error.error_id == "NOSUCHUSER"

    def test_invalid_json_error(self) -> None:
        cause = ValueError("bad json")
        error = invalid_json_error(cause)
        assert error.web_app_error() == (400, "INVALIDREQJSON")
        assert error.cause is cause

    def test_validation_error(self) -> None:
        error = validation_error(ValueError("too short"))
        assert error.web_app_error() == (400, "VALIDATIONERROR")

    def test_non_web_app_error(self) -> None:
        error = non_web_app_error(RuntimeError("boom"))
        assert error.web_app_error() == (500, "NONWEBAPPERROR")
