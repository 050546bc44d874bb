import sqlite3
from pathlib import Path
from typing import ContextManager, Protocol, Union

PathLike = Union[str, Path]


class DBAdapter(Protocol):
    """Opens short-lived read/write connections to a database file."""

    name: str

    def open(self, file: PathLike) -> sqlite3.Connection:
        """Open (or create) the database at ``file``. Raise DatabaseOpenError on failure."""

    def close(self, conn: sqlite3.Connection) -> None:
        """Release a connection returned by ``open``."""

    def connect(self, file: PathLike) -> ContextManager[sqlite3.Connection]:
        """Scoped ``open``: the connection is closed on every exit path."""
