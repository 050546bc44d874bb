from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple


# =====================
# Storage classes
# =====================


class StorageClass(IntEnum):
    """Dynamic type of a cell value. The integer tags are part of the public API."""

    NULL = 0
    INTEGER = 1
    FLOAT = 2
    STRING = 3
    BLOB = 4


# Returned by the type shim when no predicate matches.
UNKNOWN_STORAGE_CLASS = -1


# =====================
# Schema metadata
# =====================


@dataclass(frozen=True)
class ColumnDescriptor:
    """Column surfaced by the row editor: declared type first, then name."""

    type: str
    name: str


@dataclass(frozen=True)
class TableColumn:
    """One row of ``PRAGMA table_info``."""

    cid: int
    name: str
    type: str
    not_null: bool
    default_value: Optional[str]
    primary_key: int

    def as_display_row(self) -> Dict[str, Any]:
        return {
            "cid": self.cid,
            "name": self.name,
            "type": self.type,
            "not null": self.not_null,
            "default value": self.default_value,
            "primary key": self.primary_key,
        }


@dataclass(frozen=True)
class IndexInfo:
    """One row of ``PRAGMA index_list``."""

    seq: int
    name: str
    unique: bool
    origin: Optional[str] = None
    partial: Optional[bool] = None


@dataclass(frozen=True)
class ForeignKeyInfo:
    """One row of ``PRAGMA foreign_key_list``."""

    id: int
    seq: int
    table: str
    from_column: str
    to_column: Optional[str]
    on_update: str = "NO ACTION"
    on_delete: str = "NO ACTION"
    match: str = "NONE"


# =====================
# Table content
# =====================


@dataclass(frozen=True)
class TablePage:
    """
    A window of rows read from a table.

    ``types`` mirrors ``rows`` cell by cell with StorageClass tags, so callers
    can render a value without re-inspecting it.
    """

    table: str
    columns: List[str]
    rows: List[Tuple[Any, ...]]
    types: List[Tuple[int, ...]]
    offset: int
    limit: int
    total: int


# =====================
# Mutations
# =====================


@dataclass(frozen=True)
class RowMutation:
    """
    Single-row change keyed by primary-key equality.

    ``names`` and ``values`` are parallel and applied positionally.
    """

    table: str
    primary_key: str
    primary_key_value: str
    names: List[str] = field(default_factory=list)
    values: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.names) != len(self.values):
            raise ValueError(
                f"column names and values differ in length "
                f"({len(self.names)} != {len(self.values)})"
            )

    def pairs(self) -> List[Tuple[str, str]]:
        return list(zip(self.names, self.values))
