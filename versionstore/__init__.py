"""
Schema version tracking for relational databases.

A version store keeps an append-only table of applied migrations and lets a
migration runner read the current schema version, record new versions and
serialise runs across processes, uniformly over several SQL dialects.

Key components:
- VersionStore contract with per-dialect SQL templates and lock hooks
- Immutable Pydantic configuration, loadable from YAML
- VersionRecord model for the version table rows
- Error types for corrupt version data and lock failures; schema-creation
  and statement-execution failures are the driver's DBAPIError, one type
  under two names, so they cannot be told apart by type
"""

from .base_store import VersionStore
from .config import StoreConfig, get_default_config, load_store_config
from .dialects import DuckDBVersionStore, MySQLVersionStore, PostgreSQLVersionStore, SQLiteVersionStore
from .errors import (
    LockAcquisitionError,
    MigrationError,
    SchemaCreationError,
    StatementExecutionError,
    VersionFormatError,
)
from .logging_config import StoreLoggerAdapter, setup_store_logging
from .models import VersionRecord
from .store_factory import VersionStoreFactory

__version__ = "1.0.0"
__all__ = [
    # Contract and dialects
    "VersionStore",
    "SQLiteVersionStore",
    "DuckDBVersionStore",
    "PostgreSQLVersionStore",
    "MySQLVersionStore",
    "VersionStoreFactory",

    # Configuration
    "StoreConfig",
    "load_store_config",
    "get_default_config",
    "setup_store_logging",
    "StoreLoggerAdapter",

    # Data model
    "VersionRecord",

    # Errors
    "MigrationError",
    "VersionFormatError",
    "LockAcquisitionError",
    "SchemaCreationError",
    "StatementExecutionError",
]
