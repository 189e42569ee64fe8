"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for sync and store failures."""

    # Remote source
    NETWORK_ERROR = "NETWORK_ERROR"
    API_ERROR = "API_ERROR"
    NO_DATA = "NO_DATA"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"

    # Local store
    STORE_ERROR = "STORE_ERROR"
    DUPLICATE_RECORD = "DUPLICATE_RECORD"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"

    # Lookup codes
    ENCODE_FAILED = "ENCODE_FAILED"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(self.message)


class NetworkError(AppException):
    """The remote endpoint could not be reached."""

    def __init__(self, message: str) -> None:
        super().__init__(
            error_code=ErrorCode.NETWORK_ERROR,
            message=f"Network error: {message}",
        )


class ApiError(AppException):
    """The remote endpoint answered, but not with usable data."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.API_ERROR,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            details={"status_code": status_code} if status_code is not None else None,
        )
        self.status_code = status_code


class StoreError(AppException):
    """Local persistence failed."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.STORE_ERROR,
        details: Any | None = None,
    ) -> None:
        super().__init__(error_code=error_code, message=message, details=details)


class DuplicateRecordError(StoreError):
    """A record with the same identifier already exists."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            message=f"Record already exists: {identifier}",
            error_code=ErrorCode.DUPLICATE_RECORD,
            details={"identifier": identifier},
        )

