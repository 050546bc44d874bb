from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class DatabaseEntry(BaseModel):
    id: str
    name: str
    path: str


class DatabaseListResponse(BaseModel):
    databases: List[DatabaseEntry] = Field(default_factory=list)


class VersionResponse(BaseModel):
    version: str


class TablesResponse(BaseModel):
    tables: List[str] = Field(default_factory=list)


class ColumnsResponse(BaseModel):
    # keys: "cid", "name", "type", "not null", "default value", "primary key"
    columns: List[Dict[str, Any]] = Field(default_factory=list)


class AllowedColumn(BaseModel):
    type: str
    name: str


class AllowedColumnsResponse(BaseModel):
    columns: List[AllowedColumn] = Field(default_factory=list)


class PrimaryKeyResponse(BaseModel):
    primary_key: Optional[str] = None


class IndexModel(BaseModel):
    seq: int
    name: str
    unique: bool
    origin: Optional[str] = None
    partial: Optional[bool] = None


class IndexesResponse(BaseModel):
    indexes: List[IndexModel] = Field(default_factory=list)


class ForeignKeyModel(BaseModel):
    id: int
    seq: int
    table: str
    from_column: str
    to_column: Optional[str] = None
    on_update: str
    on_delete: str
    match: str


class ForeignKeysResponse(BaseModel):
    foreign_keys: List[ForeignKeyModel] = Field(default_factory=list)


class RowsResponse(BaseModel):
    table: str
    columns: List[str]
    # blobs are rendered as hex strings
    rows: List[List[Any]]
    types: List[List[int]]
    offset: int
    limit: int
    total: int


class RowWriteRequest(BaseModel):
    primary_key: str
    primary_key_value: str
    column_names: List[str] = Field(default_factory=list)
    column_values: List[str] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @model_validator(mode="after")
    def _parallel_columns(self) -> "RowWriteRequest":
        if len(self.column_names) != len(self.column_values):
            raise ValueError("column_names and column_values must have equal length")
        return self


class RowWriteResponse(BaseModel):
    ok: bool
