"""
Dialect-specific version stores
"""

from .duckdb_store import DuckDBVersionStore
from .mysql_store import MySQLVersionStore
from .postgres_store import PostgreSQLVersionStore
from .sqlite_store import SQLiteVersionStore

__all__ = [
    'DuckDBVersionStore',
    'MySQLVersionStore',
    'PostgreSQLVersionStore',
    'SQLiteVersionStore'
]
