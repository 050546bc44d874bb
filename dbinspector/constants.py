"""Wire-stable names and statement templates used across the inspector."""

# Display keys for a PRAGMA table_info row, in column order.
COLUMN_CID = "cid"
COLUMN_NAME = "name"
COLUMN_TYPE = "type"
COLUMN_NOT_NULL = "not null"
COLUMN_DEFAULT = "default value"
COLUMN_PRIMARY = "primary key"

TABLE_INFO_DISPLAY_COLUMNS = (
    COLUMN_CID,
    COLUMN_NAME,
    COLUMN_TYPE,
    COLUMN_NOT_NULL,
    COLUMN_DEFAULT,
    COLUMN_PRIMARY,
)

USER_VERSION_QUERY = "PRAGMA user_version"
TABLE_LIST_QUERY = "SELECT name FROM sqlite_master WHERE type='table'"

PRAGMA_FORMAT_TABLE_INFO = "PRAGMA table_info(%s)"
PRAGMA_FORMAT_INDEX = "PRAGMA index_list(%s)"
PRAGMA_FORMAT_FOREIGN_KEYS = "PRAGMA foreign_key_list(%s)"

# Positions inside a PRAGMA table_info row.
NAME_COLUMN_INDEX = 1
PRIMARY_KEY_COLUMN_INDEX = 5

# Rollback sidecars live next to the database, they are not databases.
JOURNAL_SUFFIX = "-journal"

DATABASE_EXTENSIONS = (
    ".sql",
    ".sqlite",
    ".sqlite3",
    ".db",
    ".cblite",
    ".cblite2",
)

MEDIA_MOUNTED = "mounted"
MEDIA_MOUNTED_READ_ONLY = "mounted_ro"

# Name of the host string-array resource listing editable column types.
ALLOWED_DATA_TYPES_RESOURCE = "dbinspector_crud_allowed_data_types"

DEFAULT_ALLOWED_DATA_TYPES = (
    "INTEGER",
    "TEXT",
    "REAL",
    "NUMERIC",
    "VARCHAR",
)
