from dbinspector.errors.codes import ErrorCode

ERROR_MAP = {
    ErrorCode.DB_NOT_FOUND: (404, False),
    ErrorCode.INVALID_IDENTIFIER: (400, False),
    ErrorCode.SCHEMA_SHAPE: (500, False),
    ErrorCode.DB_OPEN_FAILED: (500, False),
    ErrorCode.DB_STATEMENT_FAILED: (500, False),
    ErrorCode.DB_LOCKED: (503, True),
}


def map_error(code: ErrorCode | None) -> tuple[int, bool]:
    if code is None:
        return (500, False)
    return ERROR_MAP.get(code, (500, False))
