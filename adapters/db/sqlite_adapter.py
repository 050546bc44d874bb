import sqlite3
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from adapters.db.base import DBAdapter, PathLike
from dbinspector.errors.exceptions import DatabaseOpenError

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 5.0


class SQLiteAdapter(DBAdapter):
    name = "sqlite"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SEC):
        self.timeout = timeout

    def open(self, file: PathLike) -> sqlite3.Connection:
        # read/write, created when absent; isolation_level=None keeps
        # every statement in autocommit mode
        path = Path(file)
        try:
            conn = sqlite3.connect(str(path), timeout=self.timeout, isolation_level=None)
        except sqlite3.Error as exc:
            log.debug("Failed to open SQLite DB %s: %s", path, exc)
            raise DatabaseOpenError(f"could not open database {str(path)!r}: {exc}") from exc
        log.info("SQLiteAdapter opened connection to: %s", path)
        return conn

    def close(self, conn: sqlite3.Connection) -> None:
        conn.close()

    @contextmanager
    def connect(self, file: PathLike) -> Iterator[sqlite3.Connection]:
        conn = self.open(file)
        try:
            yield conn
        finally:
            self.close(conn)


DEFAULT_ADAPTER = SQLiteAdapter()
