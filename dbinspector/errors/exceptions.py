from __future__ import annotations

import sqlite3

from dbinspector.errors.codes import ErrorCode


class InspectorError(Exception):
    """Base class for failures surfaced by the inspection facade."""

    code: ErrorCode = ErrorCode.DB_STATEMENT_FAILED

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class DatabaseOpenError(InspectorError):
    code = ErrorCode.DB_OPEN_FAILED


class StatementError(InspectorError):
    code = ErrorCode.DB_STATEMENT_FAILED


class SchemaShapeError(InspectorError):
    code = ErrorCode.SCHEMA_SHAPE


class InvalidIdentifierError(InspectorError, ValueError):
    code = ErrorCode.INVALID_IDENTIFIER


def code_for_sqlite_error(exc: sqlite3.Error) -> ErrorCode:
    """Pick a code for a raw engine error; lock contention is retryable."""
    if isinstance(exc, sqlite3.OperationalError):
        msg = str(exc).lower()
        if "locked" in msg or "busy" in msg:
            return ErrorCode.DB_LOCKED
    return ErrorCode.DB_STATEMENT_FAILED
