"""Error taxonomy for task operations and the event pipeline."""

from enum import Enum

from src.core.config import Constants


class ErrorCategory(Enum):
    """Categories of errors raised by repositories and services."""

    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    BATCH_LIMIT_EXCEEDED = "batch_limit_exceeded"
    FILE_EMPTY = "file_empty"
    IDENTITY_LOOKUP_ERROR = "identity_lookup_error"
    UNKNOWN = "unknown"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Request errors
    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_FORBIDDEN = "ERR_FORBIDDEN"
    ERR_TASK_NOT_FOUND = "ERR_TASK_NOT_FOUND"

    # Pipeline errors
    ERR_BATCH_LIMIT_EXCEEDED = "ERR_BATCH_LIMIT_EXCEEDED"
    ERR_FILE_EMPTY = "ERR_FILE_EMPTY"
    ERR_MALFORMED_ROW = "ERR_MALFORMED_ROW"
    ERR_INVALID_ENVELOPE = "ERR_INVALID_ENVELOPE"

    # Identity errors
    ERR_IDENTITY_LOOKUP = "ERR_IDENTITY_LOOKUP"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class TodoTaskError(Exception):
    """Base class for every error raised by this application."""

    category: ErrorCategory = ErrorCategory.UNKNOWN
    code: str = ErrorCode.ERR_UNKNOWN

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TaskValidationError(TodoTaskError):
    """Malformed request body or fields."""

    category = ErrorCategory.VALIDATION
    code = ErrorCode.ERR_VALIDATION


class MalformedRowError(TaskValidationError):
    """A batch import row does not have the expected number of fields."""

    code = ErrorCode.ERR_MALFORMED_ROW

    def __init__(self, *, line_number: int, field_count: int, expected: int) -> None:
        super().__init__(f"Malformed row at line {line_number}: expected {expected} fields, got {field_count}")
        self.line_number = line_number
        self.field_count = field_count


class EnvelopeValidationError(TaskValidationError):
    """An inbound message does not match the envelope or event schema."""

    code = ErrorCode.ERR_INVALID_ENVELOPE


class ForbiddenError(TodoTaskError):
    """Caller attempted to act on another owner's tasks without admin rights."""

    category = ErrorCategory.AUTHORIZATION
    code = ErrorCode.ERR_FORBIDDEN


class TaskNotFoundError(TodoTaskError):
    """The requested task does not exist."""

    category = ErrorCategory.NOT_FOUND
    code = ErrorCode.ERR_TASK_NOT_FOUND

    def __init__(self, message: str = "Task not found") -> None:
        super().__init__(message)


class BatchLimitExceededError(TodoTaskError):
    """More tasks than a single batch write accepts."""

    category = ErrorCategory.BATCH_LIMIT_EXCEEDED
    code = ErrorCode.ERR_BATCH_LIMIT_EXCEEDED

    def __init__(self, *, count: int, limit: int = Constants.BATCH_WRITE_LIMIT) -> None:
        super().__init__(f"Batch of {count} tasks exceeds the limit of {limit}")
        self.count = count
        self.limit = limit


class FileEmptyError(TodoTaskError):
    """An uploaded import file has no content."""

    category = ErrorCategory.FILE_EMPTY
    code = ErrorCode.ERR_FILE_EMPTY


class IdentityLookupError(TodoTaskError):
    """The caller's email could not be resolved from the identity provider."""

    category = ErrorCategory.IDENTITY_LOOKUP_ERROR
    code = ErrorCode.ERR_IDENTITY_LOOKUP


_STATUS_BY_CATEGORY: dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: Constants.HTTP_BAD_REQUEST,
    ErrorCategory.AUTHORIZATION: Constants.HTTP_FORBIDDEN,
    ErrorCategory.NOT_FOUND: Constants.HTTP_NOT_FOUND,
}


def error_status_code(error: TodoTaskError, *, not_found_status: int = Constants.HTTP_NOT_FOUND) -> int:
    """Map an error to the HTTP status the task API answers with.

    NOT_FOUND answers 404 on reads and 400 on mutations, so callers pass the
    status for their verb. Categories with no HTTP meaning map to 500.

    Args:
        error: The raised application error
        not_found_status: Status to use for NOT_FOUND errors

    Returns:
        HTTP status code
    """
    if error.category is ErrorCategory.NOT_FOUND:
        return not_found_status
    return _STATUS_BY_CATEGORY.get(error.category, Constants.HTTP_SERVER_ERROR)
