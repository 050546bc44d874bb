"""
Discovery of SQLite files inside an application sandbox.

Three places are searched: the registered databases directory, the external
files directory (top level only, when external storage is readable) and the
private files directory (recursively, since document stores such as
Couchbase Lite keep the actual database inside a ``*.cblite2/`` directory).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Protocol, Set

from dbinspector.constants import (
    DATABASE_EXTENSIONS,
    JOURNAL_SUFFIX,
    MEDIA_MOUNTED,
    MEDIA_MOUNTED_READ_ONLY,
)
from dbinspector.metrics import discovered_files, track_operation

log = logging.getLogger(__name__)


class AppContext(Protocol):
    """What discovery needs from the host application."""

    files_dir: Path
    external_files_dir: Optional[Path]
    external_storage_state: str

    def database_list(self) -> List[str]:
        """Names registered in the app's databases directory."""

    def get_database_path(self, name: str) -> Path:
        """Absolute path of a registered database name."""


@dataclass
class DirectoryAppContext:
    """AppContext backed by plain directories on the local filesystem."""

    databases_dir: Path
    files_dir: Path
    external_files_dir: Optional[Path] = None
    external_storage_state: str = MEDIA_MOUNTED

    def database_list(self) -> List[str]:
        try:
            names = sorted(os.listdir(self.databases_dir))
        except OSError:
            return []
        return [n for n in names if (Path(self.databases_dir) / n).is_file()]

    def get_database_path(self, name: str) -> Path:
        return (Path(self.databases_dir) / name).absolute()


def is_external_available(state: Optional[str]) -> bool:
    # both read/write and read-only media can be listed
    return state in (MEDIA_MOUNTED, MEDIA_MOUNTED_READ_ONLY)


def is_database_file(path: Path) -> bool:
    try:
        return (
            path.is_file()
            and os.access(path, os.R_OK)
            and path.name.endswith(DATABASE_EXTENSIONS)
        )
    except OSError:
        return False


def _canonical(path: Path) -> Path:
    return Path(path).resolve()


def _list_dir(directory: Path) -> List[Path]:
    try:
        return sorted(Path(directory).iterdir())
    except OSError as exc:
        log.debug("Skipping unreadable directory %s: %s", directory, exc)
        return []


def walk_files(root: Path) -> Iterator[Path]:
    """
    Depth-first walk yielding every readable regular file under ``root``.

    Iterative, and each directory is entered once by canonical path so
    symlink loops terminate.
    """
    pending: List[Path] = [Path(root)]
    visited: Set[Path] = set()
    while pending:
        current = pending.pop()
        try:
            if current.is_file():
                if os.access(current, os.R_OK):
                    yield current
                continue
            if not current.is_dir():
                continue
            real = current.resolve()
        except OSError as exc:
            log.debug("Skipping %s: %s", current, exc)
            continue
        if real in visited:
            continue
        visited.add(real)
        pending.extend(reversed(_list_dir(current)))


def discover(context: AppContext) -> Set[Path]:
    """Return the canonical paths of every candidate database for ``context``."""
    with track_operation("discover"):
        databases: Set[Path] = set()

        for name in context.database_list():
            # -journal files only hold temporary rollback data
            if not name.endswith(JOURNAL_SUFFIX):
                databases.add(_canonical(context.get_database_path(name)))

        external_dir = context.external_files_dir
        if external_dir is not None and is_external_available(
            context.external_storage_state
        ):
            for path in _list_dir(external_dir):
                if is_database_file(path):
                    databases.add(_canonical(path))

        for path in walk_files(context.files_dir):
            if is_database_file(path):
                databases.add(_canonical(path))

        discovered_files.set(len(databases))
        log.debug("Discovered %d database file(s)", len(databases))
        return databases
