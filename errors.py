from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORAGE = "storage"
    INTERNAL = "internal"

    @property
    def status_code(self) -> int:
        return _STATUS[self]


_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE: 500,
    ErrorKind.INTERNAL: 500,
}


class ApiError(Exception):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "error": self.message}
        if self.code:
            body["code"] = self.code
        return body


class ValidationFailed(ApiError):
    kind = ErrorKind.VALIDATION


class NotFound(ApiError):
    kind = ErrorKind.NOT_FOUND


class StorageFailure(ApiError):
    kind = ErrorKind.STORAGE
