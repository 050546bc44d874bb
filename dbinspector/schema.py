"""
Read-only schema introspection over ``sqlite_master`` and PRAGMA statements.

Every function opens its own connection through ``cursor_operation`` and
closes it before returning. Table names are double-quoted before they are
formatted into PRAGMA text.
"""

from __future__ import annotations

import sqlite3
from typing import List, Optional, Sequence

from adapters.db.base import DBAdapter, PathLike
from dbinspector.constants import (
    COLUMN_NAME,
    COLUMN_TYPE,
    NAME_COLUMN_INDEX,
    PRAGMA_FORMAT_FOREIGN_KEYS,
    PRAGMA_FORMAT_INDEX,
    PRAGMA_FORMAT_TABLE_INFO,
    PRIMARY_KEY_COLUMN_INDEX,
    TABLE_LIST_QUERY,
    USER_VERSION_QUERY,
)
from dbinspector.cursor import RowCursor, cursor_operation, each_row, raw_query
from dbinspector.errors.exceptions import SchemaShapeError
from dbinspector.identifiers import quote_identifier
from dbinspector.metrics import track_operation
from dbinspector.types import ColumnDescriptor, ForeignKeyInfo, IndexInfo, TableColumn


def _pragma(fmt: str, table: str) -> str:
    return fmt % quote_identifier(table, kind="table name")


def _required_column(cursor: RowCursor, name: str) -> int:
    idx = cursor.get_column_index(name)
    if idx < 0:
        raise SchemaShapeError(
            f"expected column {name!r} in result, got {cursor.columns!r}"
        )
    return idx


def _optional_value(cursor: RowCursor, name: str):
    idx = cursor.get_column_index(name)
    return cursor.get_value(idx) if idx >= 0 else None


def user_version(file: PathLike, *, adapter: Optional[DBAdapter] = None) -> str:
    """``PRAGMA user_version`` as a string, or "" when the pragma yields no row."""

    def consume(conn: sqlite3.Connection, cursor: RowCursor) -> str:
        if cursor.move_to_first():
            return cursor.get_string(0) or ""
        return ""

    with track_operation("user_version"):
        return cursor_operation(
            file, lambda conn: raw_query(conn, USER_VERSION_QUERY), consume, adapter=adapter
        )


def tables(file: PathLike, *, adapter: Optional[DBAdapter] = None) -> List[str]:
    """Names of every table in ``sqlite_master``, in cursor order."""

    def consume(conn: sqlite3.Connection, cursor: RowCursor) -> List[str]:
        table_list: List[str] = []
        if cursor.move_to_first():
            name_idx = _required_column(cursor, COLUMN_NAME)
            while not cursor.is_after_last():
                table_list.append(cursor.get_string(name_idx))
                cursor.move_to_next()
        return table_list

    with track_operation("tables"):
        return cursor_operation(
            file, lambda conn: raw_query(conn, TABLE_LIST_QUERY), consume, adapter=adapter
        )


def table_info(
    file: PathLike, table: str, *, adapter: Optional[DBAdapter] = None
) -> List[TableColumn]:
    """Full ``PRAGMA table_info`` rows for ``table``; empty if the table is unknown."""
    query = _pragma(PRAGMA_FORMAT_TABLE_INFO, table)

    def consume(conn: sqlite3.Connection, cursor: RowCursor) -> List[TableColumn]:
        columns: List[TableColumn] = []
        for row in each_row(cursor):
            default = _optional_value(row, "dflt_value")
            columns.append(
                TableColumn(
                    cid=int(row.get_value(_required_column(row, "cid"))),
                    name=row.get_string(_required_column(row, COLUMN_NAME)),
                    type=row.get_string(_required_column(row, COLUMN_TYPE)) or "",
                    not_null=bool(row.get_value(_required_column(row, "notnull"))),
                    default_value=None if default is None else str(default),
                    primary_key=int(row.get_value(_required_column(row, "pk"))),
                )
            )
        return columns

    with track_operation("table_info"):
        return cursor_operation(
            file, lambda conn: raw_query(conn, query), consume, adapter=adapter
        )


def is_allowed_data_type(data_types: Sequence[str], target: Optional[str]) -> bool:
    return target in list(data_types)


def allowed_columns(
    file: PathLike,
    table: str,
    allowed_types: Sequence[str],
    *,
    adapter: Optional[DBAdapter] = None,
) -> List[ColumnDescriptor]:
    """
    Columns of ``table`` whose declared type is in ``allowed_types``.

    The row editor only offers these, since their values survive a trip
    through a text field.
    """
    query = _pragma(PRAGMA_FORMAT_TABLE_INFO, table)
    allowed = list(allowed_types)

    def consume(conn: sqlite3.Connection, cursor: RowCursor) -> List[ColumnDescriptor]:
        column_list: List[ColumnDescriptor] = []
        for row in each_row(cursor):
            data_type = row.get_string(_required_column(row, COLUMN_TYPE))
            if is_allowed_data_type(allowed, data_type):
                column_list.append(
                    ColumnDescriptor(
                        type=data_type,
                        name=row.get_string(_required_column(row, COLUMN_NAME)),
                    )
                )
        return column_list

    with track_operation("allowed_columns"):
        return cursor_operation(
            file, lambda conn: raw_query(conn, query), consume, adapter=adapter
        )


def primary_key_name(
    file: PathLike, table: str, *, adapter: Optional[DBAdapter] = None
) -> Optional[str]:
    """
    Name of the first column flagged as primary key, or None.

    Only the first key column of a composite key is reported.
    """
    query = _pragma(PRAGMA_FORMAT_TABLE_INFO, table)

    def consume(conn: sqlite3.Connection, cursor: RowCursor) -> Optional[str]:
        for row in each_row(cursor):
            if row.column_count <= PRIMARY_KEY_COLUMN_INDEX:
                raise SchemaShapeError(
                    f"table_info returned {row.column_count} columns, "
                    f"need at least {PRIMARY_KEY_COLUMN_INDEX + 1}"
                )
            if row.get_string(PRIMARY_KEY_COLUMN_INDEX) == "1":
                return row.get_string(NAME_COLUMN_INDEX)
        return None

    with track_operation("primary_key_name"):
        return cursor_operation(
            file, lambda conn: raw_query(conn, query), consume, adapter=adapter
        )


def indexes(
    file: PathLike, table: str, *, adapter: Optional[DBAdapter] = None
) -> List[IndexInfo]:
    query = _pragma(PRAGMA_FORMAT_INDEX, table)

    def consume(conn: sqlite3.Connection, cursor: RowCursor) -> List[IndexInfo]:
        index_list: List[IndexInfo] = []
        for row in each_row(cursor):
            partial = _optional_value(row, "partial")
            index_list.append(
                IndexInfo(
                    seq=int(row.get_value(_required_column(row, "seq"))),
                    name=row.get_string(_required_column(row, COLUMN_NAME)),
                    unique=bool(row.get_value(_required_column(row, "unique"))),
                    origin=_optional_value(row, "origin"),
                    partial=None if partial is None else bool(partial),
                )
            )
        return index_list

    with track_operation("indexes"):
        return cursor_operation(
            file, lambda conn: raw_query(conn, query), consume, adapter=adapter
        )


def foreign_keys(
    file: PathLike, table: str, *, adapter: Optional[DBAdapter] = None
) -> List[ForeignKeyInfo]:
    query = _pragma(PRAGMA_FORMAT_FOREIGN_KEYS, table)

    def consume(conn: sqlite3.Connection, cursor: RowCursor) -> List[ForeignKeyInfo]:
        fk_list: List[ForeignKeyInfo] = []
        for row in each_row(cursor):
            fk_list.append(
                ForeignKeyInfo(
                    id=int(row.get_value(_required_column(row, "id"))),
                    seq=int(row.get_value(_required_column(row, "seq"))),
                    table=row.get_string(_required_column(row, "table")),
                    from_column=row.get_string(_required_column(row, "from")),
                    # NULL when the parent key is the implicit primary key
                    to_column=row.get_string(_required_column(row, "to")),
                    on_update=_optional_value(row, "on_update") or "NO ACTION",
                    on_delete=_optional_value(row, "on_delete") or "NO ACTION",
                    match=_optional_value(row, "match") or "NONE",
                )
            )
        return fk_list

    with track_operation("foreign_keys"):
        return cursor_operation(
            file, lambda conn: raw_query(conn, query), consume, adapter=adapter
        )
