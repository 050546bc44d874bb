import sqlite3
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_inspector_service
from app.main import app
from app.services.inspector_service import InspectorService
from app.settings import Settings


def create_db(db_path: Path, *statements: str) -> Path:
    """Create a SQLite file at db_path and run the given statements."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    try:
        for stmt in statements:
            conn.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    return db_path


@pytest.fixture
def t_db(tmp_path) -> Path:
    """Table T(id INTEGER PRIMARY KEY, name TEXT, payload BLOB) with row (1, 'a')."""
    return create_db(
        tmp_path / "t.db",
        "CREATE TABLE T (id INTEGER PRIMARY KEY, name TEXT, payload BLOB);",
        "INSERT INTO T (id, name) VALUES (1, 'a');",
    )


@pytest.fixture
def sandbox(tmp_path) -> dict:
    """
    Application sandbox:

    databases/main.db, databases/main.db-journal,
    files/app.db, files/cache.txt, files/notes.cblite2/db.sqlite3
    """
    databases = tmp_path / "databases"
    files = tmp_path / "files"
    create_db(
        databases / "main.db",
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT);",
        "CREATE TABLE posts (id INTEGER PRIMARY KEY, user_id INTEGER REFERENCES users(id), body TEXT);",
        "INSERT INTO users (id, name) VALUES (1, 'Alice');",
        "PRAGMA user_version = 3;",
    )
    (databases / "main.db-journal").write_bytes(b"")
    create_db(files / "app.db", "CREATE TABLE kv (k TEXT PRIMARY KEY, v TEXT);")
    (files / "cache.txt").write_text("not a database")
    create_db(files / "notes.cblite2" / "db.sqlite3", "CREATE TABLE docs (id INTEGER);")
    return {"root": tmp_path, "databases": databases, "files": files}


@pytest.fixture
def settings(sandbox) -> Settings:
    return Settings(
        databases_dir=str(sandbox["databases"]),
        files_dir=str(sandbox["files"]),
        external_files_dir="",
    )


@pytest.fixture
def client(settings):
    """TestClient wired to an InspectorService over the sandbox fixture."""
    service = InspectorService(settings=settings)
    app.dependency_overrides[get_inspector_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_inspector_service, None)
