from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    TRANSIENT = "transient"
    UNKNOWN = "unknown"

    @classmethod
    def from_response(cls, status_code: int, code: Optional[str] = None) -> "ErrorKind":
        if code in _CODE_KINDS:
            return _CODE_KINDS[code]
        if status_code in _STATUS_KINDS:
            return _STATUS_KINDS[status_code]
        if status_code >= 500:
            return cls.TRANSIENT
        return cls.UNKNOWN


_CODE_KINDS = {
    "UNAUTHORIZED": ErrorKind.UNAUTHORIZED,
    "INVALID_CREDENTIALS": ErrorKind.UNAUTHORIZED,
    "PERMISSION_DENIED": ErrorKind.PERMISSION_DENIED,
    "RESOURCE_NOT_FOUND": ErrorKind.NOT_FOUND,
    "NOT_FOUND": ErrorKind.NOT_FOUND,
    "INVALID_INPUT": ErrorKind.INVALID_INPUT,
    "CONFLICT": ErrorKind.CONFLICT,
    "SERVICE_UNAVAILABLE": ErrorKind.TRANSIENT,
}

_STATUS_KINDS = {
    400: ErrorKind.INVALID_INPUT,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.PERMISSION_DENIED,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
    422: ErrorKind.INVALID_INPUT,
}


@dataclass(frozen=True)
class Outcome:
    """Result of a client call: either a value or a tagged error, never an exception."""

    value: Any = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: Optional[str] = None) -> "Outcome":
        return cls(error=error, message=message)
