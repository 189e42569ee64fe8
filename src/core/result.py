"""Tagged success/failure values returned by sync operations."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from core.exceptions import AppException, ErrorCode

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a human-readable reason."""

    reason: str
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    details: Any | None = None

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise AppException(self.error_code, self.reason, self.details)

    def unwrap_or(self, default: T) -> T:
        return default

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Err":
        """Build a failure from any exception, keeping app error codes."""
        if isinstance(exc, AppException):
            return cls(reason=exc.message, error_code=exc.error_code, details=exc.details)
        return cls(reason=str(exc) or exc.__class__.__name__)


Result = Ok[T] | Err
