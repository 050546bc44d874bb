from __future__ import annotations

from typing import Any

from dbinspector.errors.exceptions import InvalidIdentifierError


def validate_identifier(name: Any, *, kind: str = "identifier") -> str:
    """
    Check that ``name`` can be used as a quoted SQLite identifier.

    SQLite accepts any text inside double quotes except NUL, so the rules are
    short: a non-empty str without NUL characters.
    """
    if not isinstance(name, str):
        raise InvalidIdentifierError(f"{kind} must be a string, got {type(name).__name__}")
    if not name:
        raise InvalidIdentifierError(f"{kind} must not be empty")
    if "\x00" in name:
        raise InvalidIdentifierError(f"{kind} must not contain NUL characters")
    return name


def quote_identifier(name: Any, *, kind: str = "identifier") -> str:
    """Double-quote an identifier, doubling embedded quotes: a"b -> "a""b"."""
    valid = validate_identifier(name, kind=kind)
    return '"' + valid.replace('"', '""') + '"'
