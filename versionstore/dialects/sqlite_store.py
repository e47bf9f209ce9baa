"""
SQLite version store
"""

from sqlalchemy.engine import Connection

from ..base_store import VersionStore


class SQLiteVersionStore(VersionStore):
    """
    Reads from / writes to a version table in an SQLite database.

    SQLite has no cross-process lock primitive usable here, so the lock hooks
    do nothing. Concurrent runs against the same file must be serialised by
    the caller, for example with a file-system lock.
    """

    dialect_name = 'sqlite'
    supports_distributed_lock = False

    def acquire_database_lock(self, connection: Connection) -> None:
        self.logger.lock_event('skipped', "SQLite has no native lock primitive")

    def release_database_lock(self, connection: Connection) -> None:
        self.logger.lock_event('skipped', "SQLite has no native lock primitive")

    def create_version_table_sql(self) -> str:
        """
        Get SQL to create the version table

        Returns:
            CREATE TABLE IF NOT EXISTS statement
        """
        return f"""CREATE TABLE IF NOT EXISTS {self.table_name} (
            Id INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
            Version INTEGER NOT NULL,
            AppliedOn DATETIME NOT NULL,
            Description TEXT NOT NULL
        )"""

    def current_version_sql(self) -> str:
        return f"SELECT Version FROM {self.table_name} ORDER BY Id DESC LIMIT 1"

    def set_version_sql(self) -> str:
        return (
            f"INSERT INTO {self.table_name} (Version, AppliedOn, Description) "
            f"VALUES (:Version, datetime('now', 'localtime'), :Description)"
        )
