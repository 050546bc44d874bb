from __future__ import annotations

# --- Stdlib ---
import logging
from typing import Any, List, Optional

# --- Third-party ---
from fastapi import APIRouter, Depends, HTTPException, Query, Security
from fastapi.security import APIKeyHeader

# --- Local ---
from app.dependencies import get_inspector_service
from app.schemas import (
    AllowedColumn,
    AllowedColumnsResponse,
    ColumnsResponse,
    DatabaseEntry,
    DatabaseListResponse,
    ForeignKeyModel,
    ForeignKeysResponse,
    IndexModel,
    IndexesResponse,
    PrimaryKeyResponse,
    RowWriteRequest,
    RowWriteResponse,
    RowsResponse,
    TablesResponse,
    VersionResponse,
)
from app.services.inspector_service import InspectorService
from app.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def require_api_key(key: Optional[str] = Security(api_key_header)):
    """
    Simple API key check using X-API-Key header and configured API keys.

    - Settings.api_keys_raw is a comma-separated list of keys.
    - If api_keys_raw is empty → auth disabled (dev mode).
    """
    raw = settings.api_keys_raw or ""
    allowed = {k.strip() for k in raw.split(",") if k.strip()}
    if not allowed:
        # No keys configured → treat as dev mode (auth off).
        return
    if not key or key not in allowed:
        raise HTTPException(status_code=401, detail="invalid API key")


router = APIRouter(prefix="/databases", dependencies=[Depends(require_api_key)])


# -------------------------------
# Helpers
# -------------------------------


def _jsonable(value: Any) -> Any:
    """Cells go out as JSON scalars; blobs become hex strings."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return value


# -------------------------------
# Discovery
# -------------------------------


@router.get("", response_model=DatabaseListResponse, name="list_databases")
def list_databases(svc: InspectorService = Depends(get_inspector_service)):
    entries: List[DatabaseEntry] = [
        DatabaseEntry(**entry) for entry in svc.list_databases()
    ]
    return DatabaseListResponse(databases=entries)


# -------------------------------
# Schema
# -------------------------------


@router.get("/{db_id}/version", response_model=VersionResponse)
def database_version(db_id: str, svc: InspectorService = Depends(get_inspector_service)):
    return VersionResponse(version=svc.version(db_id))


@router.get("/{db_id}/tables", response_model=TablesResponse)
def database_tables(db_id: str, svc: InspectorService = Depends(get_inspector_service)):
    return TablesResponse(tables=svc.tables(db_id))


@router.get("/{db_id}/tables/{table}/columns", response_model=ColumnsResponse)
def table_columns(
    db_id: str, table: str, svc: InspectorService = Depends(get_inspector_service)
):
    return ColumnsResponse(
        columns=[c.as_display_row() for c in svc.columns(db_id, table)]
    )


@router.get(
    "/{db_id}/tables/{table}/allowed-columns", response_model=AllowedColumnsResponse
)
def table_allowed_columns(
    db_id: str, table: str, svc: InspectorService = Depends(get_inspector_service)
):
    return AllowedColumnsResponse(
        columns=[
            AllowedColumn(type=c.type, name=c.name)
            for c in svc.allowed_columns(db_id, table)
        ]
    )


@router.get("/{db_id}/tables/{table}/primary-key", response_model=PrimaryKeyResponse)
def table_primary_key(
    db_id: str, table: str, svc: InspectorService = Depends(get_inspector_service)
):
    return PrimaryKeyResponse(primary_key=svc.primary_key(db_id, table))


@router.get("/{db_id}/tables/{table}/indexes", response_model=IndexesResponse)
def table_indexes(
    db_id: str, table: str, svc: InspectorService = Depends(get_inspector_service)
):
    return IndexesResponse(
        indexes=[
            IndexModel(
                seq=i.seq, name=i.name, unique=i.unique, origin=i.origin, partial=i.partial
            )
            for i in svc.indexes(db_id, table)
        ]
    )


@router.get("/{db_id}/tables/{table}/foreign-keys", response_model=ForeignKeysResponse)
def table_foreign_keys(
    db_id: str, table: str, svc: InspectorService = Depends(get_inspector_service)
):
    return ForeignKeysResponse(
        foreign_keys=[
            ForeignKeyModel(
                id=fk.id,
                seq=fk.seq,
                table=fk.table,
                from_column=fk.from_column,
                to_column=fk.to_column,
                on_update=fk.on_update,
                on_delete=fk.on_delete,
                match=fk.match,
            )
            for fk in svc.foreign_keys(db_id, table)
        ]
    )


# -------------------------------
# Table content & row editor
# -------------------------------


@router.get("/{db_id}/tables/{table}/rows", response_model=RowsResponse)
def table_rows(
    db_id: str,
    table: str,
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    svc: InspectorService = Depends(get_inspector_service),
):
    page = svc.rows(db_id, table, offset=offset, limit=limit)
    return RowsResponse(
        table=page.table,
        columns=page.columns,
        rows=[[_jsonable(v) for v in row] for row in page.rows],
        types=[list(t) for t in page.types],
        offset=page.offset,
        limit=page.limit,
        total=page.total,
    )


@router.post("/{db_id}/tables/{table}/rows", response_model=RowWriteResponse)
def insert_row(
    db_id: str,
    table: str,
    body: RowWriteRequest,
    svc: InspectorService = Depends(get_inspector_service),
):
    ok = svc.insert(
        db_id,
        table,
        body.primary_key,
        body.primary_key_value,
        body.column_names,
        body.column_values,
    )
    logger.debug("Insert row", extra={"db_id": db_id, "table": table, "ok": ok})
    return RowWriteResponse(ok=ok)


@router.put("/{db_id}/tables/{table}/rows", response_model=RowWriteResponse)
def update_row(
    db_id: str,
    table: str,
    body: RowWriteRequest,
    svc: InspectorService = Depends(get_inspector_service),
):
    ok = svc.update(
        db_id,
        table,
        body.primary_key,
        body.primary_key_value,
        body.column_names,
        body.column_values,
    )
    logger.debug("Update row", extra={"db_id": db_id, "table": table, "ok": ok})
    return RowWriteResponse(ok=ok)


@router.delete("/{db_id}/tables/{table}/rows", response_model=RowWriteResponse)
def delete_row(
    db_id: str,
    table: str,
    primary_key: str = Query(...),
    value: str = Query(...),
    svc: InspectorService = Depends(get_inspector_service),
):
    ok = svc.delete(db_id, table, primary_key, value)
    logger.debug("Delete row", extra={"db_id": db_id, "table": table, "ok": ok})
    return RowWriteResponse(ok=ok)
