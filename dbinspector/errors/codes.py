from enum import Enum


class ErrorCode(str, Enum):
    # --- Connection ---
    DB_OPEN_FAILED = "DB_OPEN_FAILED"
    DB_LOCKED = "DB_LOCKED"

    # --- Statements ---
    DB_STATEMENT_FAILED = "DB_STATEMENT_FAILED"

    # --- Schema ---
    SCHEMA_SHAPE = "SCHEMA_SHAPE"

    # --- Input ---
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    DB_NOT_FOUND = "DB_NOT_FOUND"
