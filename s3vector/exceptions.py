"""Vector store exception hierarchy.

All custom exceptions inherit from VectorStoreError.
Each exception carries an error code for programmatic branching.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # Index operations
    INDEX_CREATION_FAILED = "index_creation_failed"
    DESCRIBE_FAILED = "describe_failed"
    DELETE_INDEX_FAILED = "delete_index_failed"
    LIST_INDEXES_FAILED = "list_indexes_failed"

    # Vector operations
    UPSERT_FAILED = "upsert_failed"
    QUERY_FAILED = "query_failed"
    UPDATE_VECTOR_FAILED = "update_vector_failed"
    DELETE_VECTOR_FAILED = "delete_vector_failed"

    # Local validation (never reach the remote service)
    UPDATE_REQUIRES_VECTOR_DATA = "update_requires_vector_data"
    INDEX_MISMATCH = "index_mismatch"
    DIMENSION_MISMATCH = "dimension_mismatch"

    # Client setup
    CONFIGURATION_ERROR = "configuration_error"


class VectorStoreError(Exception):
    """Base exception for all vector store errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context, usually the underlying remote failure.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        details: Any = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured logs."""
        details = self.details
        if details is not None and not isinstance(
            details, (dict, list, str, int, float, bool)
        ):
            details = repr(details)
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": details,
            }
        }


class ValidationError(VectorStoreError):
    """Local input validation error."""


class ConfigurationError(VectorStoreError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: Any = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)
