"""Unit tests for user friendly errors.

Tests cover:
- Name and message generation
- JSON envelope
- Cause slot
- Structured logging per channel
"""

import json

import pytest

from src.shared.errors import (
    ActionForbidden,
    AlreadyExists,
    AuthenticationRequired,
    BadRequest,
    ErrorResponse,
    InternalServerError,
    InvalidInput,
    NotFound,
    TooManyRequest,
    UserFriendlyError,
    trace_id_var,
)

# ==================== Declaration Tests ====================


class TestErrorDeclaration:
    """Tests for auto-generated error attributes."""

    @pytest.mark.parametrize(
        ("error_class", "status", "name", "type_"),
        [
            (InternalServerError, 500, "INTERNAL_SERVER_ERROR", "INTERNAL_SERVER_ERROR"),
            (TooManyRequest, 429, "TOO_MANY_REQUEST", "TOO_MANY_REQUESTS"),
            (BadRequest, 400, "BAD_REQUEST", "BAD_REQUEST"),
            (AuthenticationRequired, 401, "AUTHENTICATION_REQUIRED", "AUTHENTICATION_REQUIRED"),
            (ActionForbidden, 403, "ACTION_FORBIDDEN", "ACTION_FORBIDDEN"),
            (NotFound, 404, "NOT_FOUND", "RESOURCE_NOT_FOUND"),
            (AlreadyExists, 409, "ALREADY_EXISTS", "RESOURCE_ALREADY_EXISTS"),
            (InvalidInput, 422, "INVALID_INPUT", "INVALID_INPUT"),
        ],
    )
    def test_catalog(self, error_class, status, name, type_):
        """Test status, name and type of every catalog entry."""
        error = error_class()

        assert error.status == status
        assert error.name == name
        assert error.type == type_

    def test_default_message_from_docstring(self):
        """Test default message is the first docstring line."""

        class DocNotFound(NotFound):
            """Doc not found.

            Raised when a document id is unknown.
            """

        error = DocNotFound()

        assert error.message == "Doc not found."
        assert error.name == "DOC_NOT_FOUND"
        assert error.status == 404

    def test_explicit_message_and_status(self):
        """Test constructor arguments override class defaults."""
        error = BadRequest("Missing field", status=418)

        assert error.message == "Missing field"
        assert error.status == 418
        assert BadRequest.status == 400

    def test_is_exception(self):
        """Test user friendly errors can be raised."""
        with pytest.raises(UserFriendlyError):
            raise NotFound()


# ==================== JSON Tests ====================


class TestErrorJson:
    """Tests for the JSON envelope."""

    def test_envelope_shape(self):
        """Test envelope keys and values."""
        error = NotFound("Doc not found", data={"resource_type": "doc", "resource_id": "d1"})

        assert error.to_json() == {
            "status": 404,
            "code": "Not Found",
            "type": "RESOURCE_NOT_FOUND",
            "name": "NOT_FOUND",
            "message": "Doc not found",
            "data": {"resource_type": "doc", "resource_id": "d1"},
            "trace_id": "",
        }

    def test_empty_data_is_omitted(self):
        """Test data key is absent when there are no details."""
        assert "data" not in BadRequest().to_json()

    def test_to_response_model(self):
        """Test Pydantic model matches the JSON envelope."""
        error = TooManyRequest(retry_after=30)

        response = error.to_response()

        assert isinstance(response, ErrorResponse)
        assert response.data == {"retry_after": 30}
        assert response.model_dump(exclude_none=True) == error.to_json()

    def test_trace_id_from_context(self):
        """Test trace_id is read from the request context."""
        token = trace_id_var.set("trace-123")
        try:
            assert BadRequest().to_json()["trace_id"] == "trace-123"
        finally:
            trace_id_var.reset(token)

    def test_cause_never_serialized(self):
        """Test the cause does not leak into the envelope."""
        error = InternalServerError()
        error.cause = RuntimeError("db password is hunter2")

        payload = json.dumps(error.to_json())

        assert "cause" not in error.to_json()
        assert "hunter2" not in payload

    def test_invalid_data_kept_as_is(self):
        """Test data failing validation is still attached."""
        error = BadRequest(data={"resource_id": ["a", "b"]})

        assert error.data == {"resource_id": ["a", "b"]}

    def test_non_string_data_keys(self):
        """Test data with non-string keys is kept and still serializes."""
        error = BadRequest(data={1: "x"})

        assert error.data == {"1": "x"}
        assert error.to_json()["data"] == {"1": "x"}

    def test_unknown_status_code_phrase(self):
        """Test non-standard status codes get a generic phrase."""
        assert BadRequest(status=499).code == "Unknown Error"


# ==================== Cause Tests ====================


class TestErrorCause:
    """Tests for the cause slot."""

    def test_cause_unset_by_default(self):
        """Test a fresh error has no cause."""
        assert InternalServerError().cause is None

    def test_cause_set_once(self):
        """Test cause can be assigned exactly once."""
        error = InternalServerError()
        error.cause = "boom"

        with pytest.raises(RuntimeError):
            error.cause = "again"

        assert error.cause == "boom"

    def test_none_cause_counts_as_set(self):
        """Test assigning None still consumes the slot."""
        error = InternalServerError()
        error.cause = None

        with pytest.raises(RuntimeError):
            error.cause = ValueError()

    def test_exception_cause_is_chained(self):
        """Test exception causes are chained as __cause__."""
        original = ValueError("bad")
        error = InternalServerError()
        error.cause = original

        assert error.__cause__ is original


# ==================== Logging Tests ====================


class TestErrorLog:
    """Tests for structured logging."""

    def test_internal_error_logged_with_traceback(self, log_records):
        """Test internal errors are logged at ERROR with the cause attached."""
        error = InternalServerError()
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            error.cause = e

        error.log("HTTP")

        assert len(log_records) == 1
        record = log_records[0]
        assert record["level"].name == "ERROR"
        assert record["extra"]["channel"] == "HTTP"
        assert record["extra"]["status"] == 500
        assert record["exception"] is not None
        assert record["exception"].type is RuntimeError

    def test_internal_error_with_plain_cause(self, log_records):
        """Test non-exception causes are rendered into the message."""
        error = InternalServerError()
        error.cause = "boom"

        error.log("Sse")

        assert len(log_records) == 1
        assert "'boom'" in log_records[0]["message"]
        assert log_records[0]["exception"] is None

    def test_user_error_logged_as_info(self, log_records):
        """Test user errors are logged without traceback."""
        NotFound().log("Websocket")

        assert len(log_records) == 1
        record = log_records[0]
        assert record["level"].name == "INFO"
        assert record["extra"]["channel"] == "Websocket"
        assert record["extra"]["error_name"] == "NOT_FOUND"
        assert record["exception"] is None
