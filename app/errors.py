from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, List

from dbinspector.errors.codes import ErrorCode
from dbinspector.errors.exceptions import InspectorError
from dbinspector.errors.mapper import map_error


@dataclass
class AppError(Exception):
    """Base class for domain-level errors."""

    message: str
    http_status: int = 500
    code: str = "internal_error"
    retryable: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)
    details: Optional[List[str]] = None

    def __str__(self) -> str:
        return self.message


# 4xx
@dataclass
class BadRequestError(AppError):
    http_status: int = 400
    code: str = "bad_request"


@dataclass
class InvalidIdentifier(BadRequestError):
    code: str = ErrorCode.INVALID_IDENTIFIER.value


@dataclass
class DatabaseNotFound(AppError):
    http_status: int = 404
    code: str = ErrorCode.DB_NOT_FOUND.value


# 5xx-ish
@dataclass
class InspectionFailed(AppError):
    http_status: int = 500
    code: str = ErrorCode.DB_STATEMENT_FAILED.value


def from_inspector_error(exc: InspectorError, **extra: Any) -> AppError:
    """Translate a facade error into the HTTP error contract."""
    status, retryable = map_error(exc.code)
    cls = InvalidIdentifier if exc.code == ErrorCode.INVALID_IDENTIFIER else InspectionFailed
    return cls(
        message=exc.message,
        http_status=status,
        code=exc.code.value,
        retryable=retryable,
        extra=dict(extra),
        details=[str(exc.__cause__)] if exc.__cause__ is not None else None,
    )
