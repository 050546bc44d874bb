from __future__ import annotations

import sqlite3
from typing import Any, List, Optional, Tuple

from adapters.db.base import DBAdapter, PathLike
from dbinspector.column_type import column_type
from dbinspector.cursor import RowCursor, cursor_operation, each_row, raw_query
from dbinspector.identifiers import quote_identifier
from dbinspector.metrics import track_operation
from dbinspector.types import TablePage

DEFAULT_PAGE_SIZE = 100


def table_page(
    file: PathLike,
    table: str,
    *,
    offset: int = 0,
    limit: int = DEFAULT_PAGE_SIZE,
    adapter: Optional[DBAdapter] = None,
) -> TablePage:
    """
    Read ``limit`` rows of ``table`` starting at ``offset``, with the storage
    class of every cell and the table's total row count.
    """
    if offset < 0:
        raise ValueError("offset must be >= 0")
    if limit < 1:
        raise ValueError("limit must be >= 1")

    quoted = quote_identifier(table, kind="table name")

    def provide_cursor(conn: sqlite3.Connection) -> RowCursor:
        return raw_query(
            conn,
            f"SELECT * FROM {quoted} LIMIT ? OFFSET ?",
            (limit, offset),
            window_size=limit,
        )

    def consume(conn: sqlite3.Connection, cursor: RowCursor) -> TablePage:
        rows: List[Tuple[Any, ...]] = []
        types: List[Tuple[int, ...]] = []
        for row in each_row(cursor):
            rows.append(row.get_row())
            types.append(tuple(column_type(row, col) for col in range(row.column_count)))

        total = conn.execute(f"SELECT COUNT(*) FROM {quoted}").fetchone()[0]
        return TablePage(
            table=table,
            columns=list(cursor.columns),
            rows=rows,
            types=types,
            offset=offset,
            limit=limit,
            total=int(total),
        )

    with track_operation("table_page"):
        return cursor_operation(file, provide_cursor, consume, adapter=adapter)
