from __future__ import annotations

import pytest

from dbinspector import schema
from dbinspector.errors.codes import ErrorCode
from dbinspector.errors.exceptions import (
    DatabaseOpenError,
    InvalidIdentifierError,
    StatementError,
)
from dbinspector.types import ColumnDescriptor

from conftest import create_db


def test_user_version(sandbox, t_db):
    assert schema.user_version(sandbox["databases"] / "main.db") == "3"
    assert schema.user_version(t_db) == "0"


def test_tables_in_cursor_order(sandbox):
    assert schema.tables(sandbox["databases"] / "main.db") == ["users", "posts"]


def test_tables_include_sqlite_sequence_when_engine_returns_it(tmp_path):
    db = create_db(
        tmp_path / "seq.db",
        "CREATE TABLE a (id INTEGER PRIMARY KEY AUTOINCREMENT, v TEXT);",
    )
    assert schema.tables(db) == ["a", "sqlite_sequence"]


def test_tables_of_empty_database(tmp_path):
    assert schema.tables(tmp_path / "fresh.db") == []


def test_allowed_columns_filters_by_declared_type(t_db):
    columns = schema.allowed_columns(t_db, "T", ["TEXT", "INTEGER"])

    assert columns == [
        ColumnDescriptor(type="INTEGER", name="id"),
        ColumnDescriptor(type="TEXT", name="name"),
    ]


def test_allowed_columns_uses_exact_type_match(t_db):
    assert schema.allowed_columns(t_db, "T", ["text"]) == []


def test_primary_key_name(t_db, tmp_path):
    assert schema.primary_key_name(t_db, "T") == "id"

    no_pk = create_db(tmp_path / "nopk.db", "CREATE TABLE loose (a TEXT, b TEXT);")
    assert schema.primary_key_name(no_pk, "loose") is None


def test_primary_key_name_reports_first_key_of_composite(tmp_path):
    db = create_db(
        tmp_path / "composite.db",
        "CREATE TABLE pair (b TEXT, a TEXT, PRIMARY KEY (a, b));",
    )
    # pk flag is 1 for a, 2 for b
    assert schema.primary_key_name(db, "pair") == "a"


def test_primary_key_name_for_unknown_table(t_db):
    assert schema.primary_key_name(t_db, "missing") is None


def test_primary_key_is_one_of_the_columns(sandbox, t_db):
    for db, table in [(t_db, "T"), (sandbox["databases"] / "main.db", "posts")]:
        pk = schema.primary_key_name(db, table)
        all_types = [c.type for c in schema.table_info(db, table)]
        names = [c.name for c in schema.allowed_columns(db, table, all_types)]
        assert pk is None or pk in names


def test_table_info_display_rows(t_db):
    info = schema.table_info(t_db, "T")

    assert [c.name for c in info] == ["id", "name", "payload"]
    first = info[0].as_display_row()
    assert list(first.keys()) == [
        "cid",
        "name",
        "type",
        "not null",
        "default value",
        "primary key",
    ]
    assert first["primary key"] == 1
    assert info[1].primary_key == 0


def test_table_info_default_and_not_null(tmp_path):
    db = create_db(
        tmp_path / "defaults.db",
        "CREATE TABLE d (id INTEGER PRIMARY KEY, flag INTEGER NOT NULL DEFAULT 0, note TEXT DEFAULT 'x');",
    )
    by_name = {c.name: c for c in schema.table_info(db, "d")}

    assert by_name["flag"].not_null is True
    assert by_name["flag"].default_value == "0"
    assert by_name["note"].default_value == "'x'"
    assert by_name["id"].default_value is None


def test_indexes(sandbox):
    indexes = schema.indexes(sandbox["files"] / "app.db", "kv")

    assert len(indexes) == 1
    assert indexes[0].unique is True
    assert indexes[0].name.startswith("sqlite_autoindex_kv")


def test_foreign_keys(sandbox):
    fks = schema.foreign_keys(sandbox["databases"] / "main.db", "posts")

    assert len(fks) == 1
    fk = fks[0]
    assert fk.table == "users"
    assert fk.from_column == "user_id"
    assert fk.to_column == "id"
    assert fk.on_delete == "NO ACTION"


def test_table_names_are_quoted(tmp_path):
    db = create_db(
        tmp_path / "odd.db",
        'CREATE TABLE "my ""odd"" table" (id INTEGER PRIMARY KEY, "select" TEXT);',
    )
    assert schema.primary_key_name(db, 'my "odd" table') == "id"
    assert [c.name for c in schema.table_info(db, 'my "odd" table')] == ["id", "select"]


def test_invalid_table_name_is_rejected_before_opening(tmp_path):
    target = tmp_path / "never-created.db"
    with pytest.raises(InvalidIdentifierError):
        schema.table_info(target, "")
    assert not target.exists()


def test_read_of_non_database_surfaces_statement_error(tmp_path):
    bogus = tmp_path / "bogus.db"
    bogus.write_bytes(b"definitely not sqlite " * 64)

    with pytest.raises(StatementError) as excinfo:
        schema.tables(bogus)
    assert excinfo.value.code == ErrorCode.DB_STATEMENT_FAILED
    assert excinfo.value.__cause__ is not None


def test_open_failure_surfaces(tmp_path):
    with pytest.raises(DatabaseOpenError):
        schema.tables(tmp_path / "no" / "such" / "dir" / "x.db")
