import sqlite3

import pytest

from dbinspector.column_type import column_type, storage_class_of
from dbinspector.cursor import CursorWindow, RowCursor
from dbinspector.types import StorageClass


class LegacyCursor:
    """A cursor that only exposes its raw window, no get_type()."""

    def __init__(self, rows, position=0):
        self.window = CursorWindow(start=0, rows=rows)
        self.position = position


def test_storage_class_tags_are_stable():
    assert [int(c) for c in StorageClass] == [0, 1, 2, 3, 4]
    assert [c.name for c in StorageClass] == ["NULL", "INTEGER", "FLOAT", "STRING", "BLOB"]


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, StorageClass.NULL),
        (42, StorageClass.INTEGER),
        (1.5, StorageClass.FLOAT),
        ("text", StorageClass.STRING),
        (b"\x00\x01", StorageClass.BLOB),
    ],
)
def test_legacy_window_probe(value, expected):
    cursor = LegacyCursor([(value,)])
    assert column_type(cursor, 0) == expected
    assert storage_class_of(value) == expected


def test_legacy_window_probe_reads_current_position():
    cursor = LegacyCursor([(1, "a"), (None, b"z")], position=1)
    assert column_type(cursor, 0) == StorageClass.NULL
    assert column_type(cursor, 1) == StorageClass.BLOB


def test_unknown_value_maps_to_minus_one():
    cursor = LegacyCursor([(object(),)])
    assert column_type(cursor, 0) == -1


def test_native_get_type_is_preferred():
    class NativeCursor:
        def get_type(self, col):
            return StorageClass.FLOAT

        @property
        def window(self):
            raise AssertionError("window must not be consulted")

    assert column_type(NativeCursor(), 3) == StorageClass.FLOAT


def test_row_cursor_reports_engine_types():
    conn = sqlite3.connect(":memory:")
    try:
        cur = RowCursor(conn.execute("SELECT NULL, 7, 2.5, 'x', X'CAFE'"))
        assert cur.move_to_first()
        assert [column_type(cur, i) for i in range(5)] == [0, 1, 2, 3, 4]
    finally:
        conn.close()
