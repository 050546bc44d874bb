from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from adapters.db.base import DBAdapter
from adapters.db.sqlite_adapter import SQLiteAdapter
from app.errors import DatabaseNotFound, from_inspector_error
from app.settings import Settings
from dbinspector import content, mutator, schema
from dbinspector.errors.exceptions import InspectorError
from dbinspector.probe import DirectoryAppContext, discover
from dbinspector.types import (
    ColumnDescriptor,
    ForeignKeyInfo,
    IndexInfo,
    TableColumn,
    TablePage,
)

log = logging.getLogger(__name__)

T = TypeVar("T")


def database_id(path: Path) -> str:
    """Stable id of a database file: sha1 of its canonical path."""
    return hashlib.sha1(str(path).encode("utf-8")).hexdigest()


@dataclass
class InspectorService:
    """
    Application-level service in front of the inspection facade.

    Responsibilities:
        - Build the sandbox AppContext from Settings and run discovery.
        - Resolve database ids back to discovered files.
        - Translate facade errors into AppError for the HTTP layer.
    """

    settings: Settings
    adapter: DBAdapter = field(init=False)

    def __post_init__(self) -> None:
        self.adapter = SQLiteAdapter(timeout=self.settings.sqlite_timeout)

    # ---- discovery ----

    def app_context(self) -> DirectoryAppContext:
        return DirectoryAppContext(
            databases_dir=Path(self.settings.databases_dir),
            files_dir=Path(self.settings.files_dir),
            external_files_dir=self.settings.external_dir,
            external_storage_state=self.settings.external_storage_state,
        )

    def list_databases(self) -> List[Dict[str, str]]:
        found = sorted(discover(self.app_context()))
        return [
            {"id": database_id(path), "name": path.name, "path": str(path)}
            for path in found
        ]

    def resolve(self, db_id: str) -> Path:
        for path in discover(self.app_context()):
            if database_id(path) == db_id:
                return path
        raise DatabaseNotFound(f"Could not resolve database for id={db_id!r}")

    def _call(self, db_id: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        path = self.resolve(db_id)
        try:
            return fn(path, *args, adapter=self.adapter, **kwargs)
        except InspectorError as exc:
            log.debug(
                "Inspector call failed",
                extra={"db_id": db_id, "operation": fn.__name__, "error": str(exc)},
            )
            raise from_inspector_error(exc, db_id=db_id, operation=fn.__name__) from exc

    # ---- schema ----

    def version(self, db_id: str) -> str:
        return self._call(db_id, schema.user_version)

    def tables(self, db_id: str) -> List[str]:
        return self._call(db_id, schema.tables)

    def columns(self, db_id: str, table: str) -> List[TableColumn]:
        return self._call(db_id, schema.table_info, table)

    def allowed_columns(self, db_id: str, table: str) -> List[ColumnDescriptor]:
        return self._call(
            db_id, schema.allowed_columns, table, self.settings.allowed_data_types
        )

    def primary_key(self, db_id: str, table: str) -> Optional[str]:
        return self._call(db_id, schema.primary_key_name, table)

    def indexes(self, db_id: str, table: str) -> List[IndexInfo]:
        return self._call(db_id, schema.indexes, table)

    def foreign_keys(self, db_id: str, table: str) -> List[ForeignKeyInfo]:
        return self._call(db_id, schema.foreign_keys, table)

    def rows(
        self, db_id: str, table: str, *, offset: int = 0, limit: Optional[int] = None
    ) -> TablePage:
        return self._call(
            db_id,
            content.table_page,
            table,
            offset=offset,
            limit=limit or self.settings.page_size,
        )

    # ---- mutations ----

    def insert(
        self,
        db_id: str,
        table: str,
        primary_key: str,
        primary_key_value: str,
        names: Sequence[str],
        values: Sequence[str],
    ) -> bool:
        return self._call(
            db_id, mutator.insert_row, table, primary_key, primary_key_value, names, values
        )

    def update(
        self,
        db_id: str,
        table: str,
        primary_key: str,
        primary_key_value: str,
        names: Sequence[str],
        values: Sequence[str],
    ) -> bool:
        return self._call(
            db_id, mutator.update_row, table, primary_key, primary_key_value, names, values
        )

    def delete(
        self, db_id: str, table: str, primary_key: str, primary_key_value: str
    ) -> bool:
        return self._call(db_id, mutator.delete_row, table, primary_key, primary_key_value)
