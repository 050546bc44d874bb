from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple, TypeVar

from adapters.db.base import DBAdapter, PathLike
from adapters.db.sqlite_adapter import DEFAULT_ADAPTER
from dbinspector.column_type import storage_class_of
from dbinspector.errors.exceptions import StatementError, code_for_sqlite_error

log = logging.getLogger(__name__)

R = TypeVar("R")

DEFAULT_WINDOW_SIZE = 256


@dataclass
class CursorWindow:
    """
    A block of rows fetched from the engine, addressed by absolute row
    position. Rows before ``start`` have already been dropped.
    """

    start: int = 0
    rows: List[Tuple[Any, ...]] = field(default_factory=list)

    @property
    def end(self) -> int:
        return self.start + len(self.rows)

    def contains(self, pos: int) -> bool:
        return self.start <= pos < self.end

    def value(self, pos: int, col: int) -> Any:
        if not self.contains(pos):
            raise IndexError(f"row {pos} is outside window [{self.start}, {self.end})")
        return self.rows[pos - self.start][col]

    def is_null(self, pos: int, col: int) -> bool:
        return self.value(pos, col) is None

    def is_long(self, pos: int, col: int) -> bool:
        return isinstance(self.value(pos, col), int)

    def is_float(self, pos: int, col: int) -> bool:
        return isinstance(self.value(pos, col), float)

    def is_string(self, pos: int, col: int) -> bool:
        return isinstance(self.value(pos, col), str)

    def is_blob(self, pos: int, col: int) -> bool:
        return isinstance(self.value(pos, col), (bytes, bytearray, memoryview))


class RowCursor:
    """
    Forward-only, position-addressed view over a ``sqlite3.Cursor``.

    Rows are pulled in windows of ``window_size`` so large results stream.
    The position starts before the first row (-1), like a freshly executed
    query.
    """

    def __init__(self, cursor: sqlite3.Cursor, window_size: int = DEFAULT_WINDOW_SIZE):
        self._cursor = cursor
        self._window_size = max(1, window_size)
        self._window = CursorWindow()
        self._position = -1
        self._exhausted = False
        self.columns: List[str] = [d[0] for d in (cursor.description or ())]

    # --- positioning ---

    @property
    def position(self) -> int:
        return self._position

    @property
    def window(self) -> CursorWindow:
        return self._window

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def _fill_until(self, pos: int) -> bool:
        while pos >= self._window.end:
            if self._exhausted:
                return False
            rows = self._cursor.fetchmany(self._window_size)
            if len(rows) < self._window_size:
                self._exhausted = True
            if not rows:
                return False
            self._window = CursorWindow(start=self._window.end, rows=list(rows))
        return True

    def move_to_position(self, pos: int) -> bool:
        if pos < 0:
            self._position = -1
            return False
        if pos < self._window.start:
            raise ValueError(f"cannot rewind forward-only cursor to row {pos}")
        if self._fill_until(pos):
            self._position = pos
            return True
        self._position = self._window.end
        return False

    def move_to_first(self) -> bool:
        return self.move_to_position(0)

    def move_to_next(self) -> bool:
        return self.move_to_position(self._position + 1)

    def is_after_last(self) -> bool:
        return self._exhausted and self._position >= self._window.end

    # --- column access ---

    def get_column_index(self, name: str) -> int:
        try:
            return self.columns.index(name)
        except ValueError:
            return -1

    def get_value(self, col: int) -> Any:
        return self._window.value(self._position, col)

    def get_row(self) -> Tuple[Any, ...]:
        return tuple(self._window.rows[self._position - self._window.start])

    def get_string(self, col: int) -> Optional[str]:
        value = self.get_value(col)
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value).decode("utf-8", errors="replace")
        return str(value)

    def get_type(self, col: int) -> int:
        return storage_class_of(self.get_value(col))

    def close(self) -> None:
        self._cursor.close()


def raw_query(
    conn: sqlite3.Connection,
    sql: str,
    params: Sequence[Any] = (),
    *,
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> RowCursor:
    log.debug("Executing SQL: %s", sql.strip().replace("\n", " "))
    return RowCursor(conn.execute(sql, tuple(params)), window_size=window_size)


def cursor_operation(
    file: PathLike,
    provide_cursor: Callable[[sqlite3.Connection], RowCursor],
    consume: Callable[[sqlite3.Connection, RowCursor], R],
    *,
    adapter: Optional[DBAdapter] = None,
) -> R:
    """
    Open ``file``, obtain a cursor from ``provide_cursor``, shape the result
    with ``consume`` and release cursor and connection on every exit path.

    Engine errors surface as StatementError with the original error chained.
    """
    db = adapter or DEFAULT_ADAPTER
    with db.connect(file) as conn:
        try:
            cursor = provide_cursor(conn)
        except sqlite3.Error as exc:
            raise StatementError(str(exc), code=code_for_sqlite_error(exc)) from exc
        try:
            return consume(conn, cursor)
        except sqlite3.Error as exc:
            raise StatementError(str(exc), code=code_for_sqlite_error(exc)) from exc
        finally:
            cursor.close()


def each_row(cursor: RowCursor) -> Iterator[RowCursor]:
    """Walk the cursor from its first row, yielding it positioned on each row."""
    moved = cursor.move_to_first()
    while moved:
        yield cursor
        moved = cursor.move_to_next()
