from __future__ import annotations

from typing import Any

from dbinspector.types import StorageClass, UNKNOWN_STORAGE_CLASS


def storage_class_of(value: Any) -> int:
    """Storage class of a value as returned by the sqlite3 binding."""
    if value is None:
        return StorageClass.NULL
    if isinstance(value, int):
        return StorageClass.INTEGER
    if isinstance(value, float):
        return StorageClass.FLOAT
    if isinstance(value, str):
        return StorageClass.STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return StorageClass.BLOB
    return UNKNOWN_STORAGE_CLASS


def column_type(cursor: Any, col: int) -> int:
    """
    Storage class tag of column ``col`` at the cursor's current row.

    Cursors that report types directly (``get_type``) are asked as-is. Others
    must expose their raw ``window`` and ``position``; the window is probed
    null, long, float, string, blob in that order and the first match wins.
    Returns -1 when nothing matches.
    """
    get_type = getattr(cursor, "get_type", None)
    if callable(get_type):
        return int(get_type(col))

    window = cursor.window
    pos = cursor.position
    if window.is_null(pos, col):
        return StorageClass.NULL
    elif window.is_long(pos, col):
        return StorageClass.INTEGER
    elif window.is_float(pos, col):
        return StorageClass.FLOAT
    elif window.is_string(pos, col):
        return StorageClass.STRING
    elif window.is_blob(pos, col):
        return StorageClass.BLOB
    return UNKNOWN_STORAGE_CLASS
