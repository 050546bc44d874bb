import os
from pathlib import Path

import pytest

from dbinspector.probe import (
    DirectoryAppContext,
    discover,
    is_database_file,
    is_external_available,
    walk_files,
)


def _ctx(sandbox, **kwargs) -> DirectoryAppContext:
    return DirectoryAppContext(
        databases_dir=sandbox["databases"], files_dir=sandbox["files"], **kwargs
    )


def test_discover_finds_registered_internal_and_nested_databases(sandbox):
    found = discover(_ctx(sandbox))

    expected = {
        (sandbox["databases"] / "main.db").resolve(),
        (sandbox["files"] / "app.db").resolve(),
        (sandbox["files"] / "notes.cblite2" / "db.sqlite3").resolve(),
    }
    assert found == expected


def test_discover_skips_journal_sidecars(sandbox):
    found = discover(_ctx(sandbox))
    assert not any(p.name.endswith("-journal") for p in found)


def test_discover_collapses_duplicates_by_canonical_path(sandbox):
    # the same file reachable twice: registered and via a symlink in files/
    link = sandbox["files"] / "alias.db"
    try:
        os.symlink(sandbox["databases"] / "main.db", link)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")

    found = discover(_ctx(sandbox))
    assert len(found) == 3
    assert (sandbox["databases"] / "main.db").resolve() in found


def test_external_dir_is_listed_only_when_mounted(sandbox, tmp_path):
    external = tmp_path / "external"
    nested = external / "deep"
    nested.mkdir(parents=True)
    (external / "ext.sqlite").write_bytes(b"")
    (nested / "hidden.db").write_bytes(b"")

    mounted = discover(_ctx(sandbox, external_files_dir=external))
    assert (external / "ext.sqlite").resolve() in mounted
    # external listing is not recursive
    assert (nested / "hidden.db").resolve() not in mounted

    read_only = discover(
        _ctx(sandbox, external_files_dir=external, external_storage_state="mounted_ro")
    )
    assert (external / "ext.sqlite").resolve() in read_only

    removed = discover(
        _ctx(sandbox, external_files_dir=external, external_storage_state="removed")
    )
    assert (external / "ext.sqlite").resolve() not in removed


def test_missing_directories_are_not_errors(tmp_path):
    ctx = DirectoryAppContext(
        databases_dir=tmp_path / "nope",
        files_dir=tmp_path / "also-nope",
        external_files_dir=tmp_path / "gone",
    )
    assert discover(ctx) == set()


@pytest.mark.parametrize(
    "name, expected",
    [
        ("a.sql", True),
        ("a.sqlite", True),
        ("a.sqlite3", True),
        ("a.db", True),
        ("a.cblite", True),
        ("a.cblite2", True),
        ("a.db-journal", False),
        ("a.txt", False),
        ("db", False),
    ],
)
def test_extension_filter(tmp_path, name, expected):
    path = tmp_path / name
    path.write_bytes(b"")
    assert is_database_file(path) is expected


def test_extension_filter_rejects_directories(tmp_path):
    d = tmp_path / "store.cblite2"
    d.mkdir()
    assert is_database_file(d) is False


def test_walk_survives_symlink_cycles(tmp_path):
    root = tmp_path / "root"
    (root / "a").mkdir(parents=True)
    (root / "a" / "x.db").write_bytes(b"")
    try:
        os.symlink(root, root / "a" / "loop")
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")

    files = list(walk_files(root))
    assert [p.name for p in files] == ["x.db"]


def test_is_external_available():
    assert is_external_available("mounted")
    assert is_external_available("mounted_ro")
    assert not is_external_available("unmounted")
    assert not is_external_available(None)


def test_registered_databases_resolve_to_absolute_paths(sandbox):
    ctx = _ctx(sandbox)
    assert "main.db" in ctx.database_list()
    assert ctx.get_database_path("main.db").is_absolute()
    assert Path(ctx.get_database_path("main.db")).exists()


def test_subdirectories_are_not_registered_databases(sandbox):
    (sandbox["databases"] / "backup.db").mkdir()
    ctx = _ctx(sandbox)

    assert ctx.database_list() == ["main.db", "main.db-journal"]
    assert (sandbox["databases"] / "backup.db").resolve() not in discover(ctx)
