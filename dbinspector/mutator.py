"""
Single-row insert / update / delete keyed by primary-key equality.

Each call opens its own connection, runs one statement in autocommit mode and
closes the connection. Failures never escape: bad identifiers and engine
errors are logged and the call reports False, so callers only ever see
"changed" or "not changed".
"""

from __future__ import annotations

import logging
import math
import sqlite3
from typing import List, Optional, Sequence, Union

from adapters.db.base import DBAdapter, PathLike
from adapters.db.sqlite_adapter import DEFAULT_ADAPTER
from dbinspector.errors.exceptions import DatabaseOpenError, InvalidIdentifierError
from dbinspector.identifiers import quote_identifier
from dbinspector.metrics import mutations_total
from dbinspector.types import RowMutation

log = logging.getLogger(__name__)

WRITE_ERRORS = (sqlite3.Error, DatabaseOpenError, InvalidIdentifierError)


def _is_empty(value: Optional[str]) -> bool:
    return value is None or value == ""


def key_param(value: str) -> Union[int, float, str]:
    """
    Bind value for the primary-key predicate.

    Canonical numeric literals go in as numbers so they match the key the
    same way an inline literal would, whatever the column's affinity.
    """
    try:
        as_int = int(value)
    except (TypeError, ValueError):
        pass
    else:
        if str(as_int) == value:
            return as_int
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        return value
    if math.isfinite(as_float) and repr(as_float) == value:
        return as_float
    return value


def _record(kind: str, affected: bool) -> bool:
    mutations_total.labels(kind=kind, affected=str(affected).lower()).inc()
    return affected


def delete_row(
    file: PathLike,
    table: str,
    primary_key: str,
    primary_key_value: str,
    *,
    adapter: Optional[DBAdapter] = None,
) -> bool:
    """Delete the row whose ``primary_key`` equals ``primary_key_value``."""
    db = adapter or DEFAULT_ADAPTER
    try:
        sql = (
            f"DELETE FROM {quote_identifier(table, kind='table name')} "
            f"WHERE {quote_identifier(primary_key, kind='primary key')} = ?"
        )
        with db.connect(file) as conn:
            affected_rows = conn.execute(sql, (key_param(primary_key_value),)).rowcount
    except WRITE_ERRORS:
        log.exception("Failed to delete row from %s in %s", table, file)
        return _record("delete", False)

    log.debug("Deleted %d row(s) from %s", affected_rows, table)
    return _record("delete", affected_rows != 0)


def update_row(
    file: PathLike,
    table: str,
    primary_key: str,
    primary_key_value: str,
    column_names: Sequence[str],
    column_values: Sequence[str],
    *,
    adapter: Optional[DBAdapter] = None,
) -> bool:
    """
    Set every named column on the matching row. Empty strings are written
    as-is; nothing is skipped.
    """
    mutation = RowMutation(
        table, primary_key, primary_key_value, list(column_names), list(column_values)
    )
    if not mutation.names:
        log.error("Refusing to update %s: no columns given", table)
        return _record("update", False)

    params: List[object] = [*mutation.values, key_param(primary_key_value)]
    db = adapter or DEFAULT_ADAPTER
    try:
        assignments = ", ".join(
            f"{quote_identifier(name, kind='column name')} = ?" for name in mutation.names
        )
        sql = (
            f"UPDATE {quote_identifier(table, kind='table name')} SET {assignments} "
            f"WHERE {quote_identifier(primary_key, kind='primary key')} = ?"
        )
        with db.connect(file) as conn:
            affected_rows = conn.execute(sql, params).rowcount
    except WRITE_ERRORS:
        log.exception("Failed to update row in %s in %s", table, file)
        return _record("update", False)

    log.debug("Updated %d row(s) in %s", affected_rows, table)
    return _record("update", affected_rows != 0)


def insert_row(
    file: PathLike,
    table: str,
    primary_key: str,
    primary_key_value: str,
    column_names: Sequence[str],
    column_values: Sequence[str],
    *,
    adapter: Optional[DBAdapter] = None,
) -> bool:
    """
    Insert a row from the non-empty name/value pairs; empty values are left
    out so column defaults apply.

    ``primary_key`` and ``primary_key_value`` only take part when they are
    also among the pairs. Success means a non-zero new row id, so a row
    explicitly stored with rowid 0 reads as a failure.
    """
    mutation = RowMutation(
        table, primary_key, primary_key_value, list(column_names), list(column_values)
    )
    pairs = [(name, value) for name, value in mutation.pairs() if not _is_empty(value)]
    params = [value for _, value in pairs]

    db = adapter or DEFAULT_ADAPTER
    try:
        quoted_table = quote_identifier(table, kind="table name")
        if pairs:
            names = ", ".join(
                quote_identifier(name, kind="column name") for name, _ in pairs
            )
            placeholders = ", ".join("?" for _ in pairs)
            sql = f"INSERT INTO {quoted_table} ({names}) VALUES ({placeholders})"
        else:
            sql = f"INSERT INTO {quoted_table} DEFAULT VALUES"
        with db.connect(file) as conn:
            row_id = conn.execute(sql, params).lastrowid
    except WRITE_ERRORS:
        log.exception("Failed to insert row into %s in %s", table, file)
        return _record("insert", False)

    log.debug("Inserted row id %s into %s", row_id, table)
    return _record("insert", bool(row_id))
