"""Unit tests for the error taxonomy and HTTP status mapping."""

import pytest

from src.core.errors import (
    BatchLimitExceededError,
    EnvelopeValidationError,
    ErrorCategory,
    ErrorCode,
    FileEmptyError,
    ForbiddenError,
    IdentityLookupError,
    MalformedRowError,
    TaskNotFoundError,
    TaskValidationError,
    error_status_code,
)


@pytest.mark.unit
class TestErrorStatusCode:
    """Tests for error_status_code."""

    def test_validation_is_bad_request(self):
        assert error_status_code(TaskValidationError("title is required")) == 400

    def test_malformed_row_is_validation(self):
        error = MalformedRowError(line_number=3, field_count=5, expected=6)

        assert error.category == ErrorCategory.VALIDATION
        assert error_status_code(error) == 400

    def test_forbidden(self):
        assert error_status_code(ForbiddenError("nope")) == 403

    def test_not_found_defaults_to_404(self):
        assert error_status_code(TaskNotFoundError()) == 404

    def test_not_found_status_override(self):
        """Mutations report a missing task as a bad request."""
        assert error_status_code(TaskNotFoundError(), not_found_status=400) == 400

    @pytest.mark.parametrize(
        "error",
        [
            BatchLimitExceededError(count=26),
            FileEmptyError("empty"),
            IdentityLookupError("Email not found"),
        ],
    )
    def test_pipeline_errors_are_server_errors(self, error):
        assert error_status_code(error) == 500


@pytest.mark.unit
class TestErrorDetails:
    """Tests for error messages and structured responses."""

    def test_batch_limit_message(self):
        error = BatchLimitExceededError(count=30)

        assert error.count == 30
        assert error.limit == 25
        assert str(error) == "Batch of 30 tasks exceeds the limit of 25"

    def test_malformed_row_message(self):
        error = MalformedRowError(line_number=4, field_count=7, expected=6)

        assert error.message == "Malformed row at line 4: expected 6 fields, got 7"

    def test_task_not_found_default_message(self):
        assert TaskNotFoundError().message == "Task not found"

    def test_error_codes(self):
        assert EnvelopeValidationError("Invalid envelope").code == ErrorCode.ERR_INVALID_ENVELOPE
        assert MalformedRowError(line_number=2, field_count=1, expected=6).code == ErrorCode.ERR_MALFORMED_ROW
