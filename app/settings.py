from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dbinspector.constants import DEFAULT_ALLOWED_DATA_TYPES, MEDIA_MOUNTED

# Resolve repo root from this file's location:
# app/settings.py → parent = app/ → parent = repo root
REPO_ROOT = Path(__file__).resolve().parents[1]

# Sandbox layout used when nothing is configured
DEFAULT_SANDBOX = REPO_ROOT / "data" / "sandbox"
DEFAULT_DATABASES_DIR = DEFAULT_SANDBOX / "databases"
DEFAULT_FILES_DIR = DEFAULT_SANDBOX / "files"


def _resolve_path(raw: str, default: Path) -> Path:
    raw = (raw or "").strip()
    if not raw:
        return default
    candidate = Path(raw)
    if not candidate.is_absolute():
        candidate = REPO_ROOT / raw
    return candidate


def parse_allowed_data_types(raw: str) -> List[str]:
    return [t.strip() for t in (raw or "").split(",") if t.strip()]


@dataclass
class Settings:
    """
    Centralized application configuration.

    Does NOT depend on pydantic. Values are loaded from environment
    variables via Settings.from_env().
    """

    # --- Sandbox directories ---
    databases_dir: str = str(DEFAULT_DATABASES_DIR)
    files_dir: str = str(DEFAULT_FILES_DIR)
    external_files_dir: str = ""
    external_storage_state: str = MEDIA_MOUNTED

    # --- Row editor resource (dbinspector_crud_allowed_data_types) ---
    allowed_data_types: List[str] = field(
        default_factory=lambda: list(DEFAULT_ALLOWED_DATA_TYPES)
    )

    # --- Table content paging ---
    page_size: int = 100

    # --- SQLite busy timeout (seconds) ---
    sqlite_timeout: float = 5.0

    # --- API keys (comma-separated) ---
    api_keys_raw: str = ""

    # --- App version ---
    app_version: str = "dev"

    @property
    def external_dir(self) -> Optional[Path]:
        return Path(self.external_files_dir) if self.external_files_dir else None

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build Settings from environment variables with sane fallbacks.

        - Directory variables can be absolute or relative.
        - Relative paths are resolved against REPO_ROOT.
        """

        def getenv_int(name: str, default: int) -> int:
            raw = os.getenv(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return int(raw)
            except ValueError:
                return default

        def getenv_float(name: str, default: float) -> float:
            raw = os.getenv(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return float(raw)
            except ValueError:
                return default

        raw_external = os.getenv("DBINSPECTOR_EXTERNAL_FILES_DIR", "").strip()
        external = str(_resolve_path(raw_external, REPO_ROOT)) if raw_external else ""

        allowed = parse_allowed_data_types(
            os.getenv("DBINSPECTOR_ALLOWED_DATA_TYPES", "")
        ) or list(DEFAULT_ALLOWED_DATA_TYPES)

        return cls(
            databases_dir=str(
                _resolve_path(
                    os.getenv("DBINSPECTOR_DATABASES_DIR", ""), DEFAULT_DATABASES_DIR
                )
            ),
            files_dir=str(
                _resolve_path(os.getenv("DBINSPECTOR_FILES_DIR", ""), DEFAULT_FILES_DIR)
            ),
            external_files_dir=external,
            external_storage_state=os.getenv(
                "DBINSPECTOR_EXTERNAL_STORAGE_STATE", cls.external_storage_state
            ).strip(),
            allowed_data_types=allowed,
            page_size=max(1, getenv_int("DBINSPECTOR_PAGE_SIZE", cls.page_size)),
            sqlite_timeout=getenv_float("DBINSPECTOR_SQLITE_TIMEOUT", cls.sqlite_timeout),
            api_keys_raw=os.getenv("API_KEYS", cls.api_keys_raw),
            app_version=os.getenv("APP_VERSION", cls.app_version),
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
