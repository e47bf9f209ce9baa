"""
DuckDB version store
"""

from typing import List

from sqlalchemy.engine import Connection

from ..base_store import VersionStore


class DuckDBVersionStore(VersionStore):
    """
    Version store for DuckDB databases.

    DuckDB has no auto-increment column type, so the Id column draws from a
    sequence created alongside the table. DuckDB allows a single writing
    process per database file and offers no lock primitive; the lock hooks
    are no-ops.
    """

    dialect_name = 'duckdb'
    supports_distributed_lock = False

    @property
    def sequence_name(self) -> str:
        return f"{self.table_name}_Id_seq"

    def acquire_database_lock(self, connection: Connection) -> None:
        self.logger.lock_event('skipped', "DuckDB has no native lock primitive")

    def release_database_lock(self, connection: Connection) -> None:
        self.logger.lock_event('skipped', "DuckDB has no native lock primitive")

    def create_version_table_statements(self) -> List[str]:
        return [
            f"CREATE SEQUENCE IF NOT EXISTS {self.sequence_name} START 1",
            self.create_version_table_sql(),
        ]

    def create_version_table_sql(self) -> str:
        """
        Get SQL to create the version table

        The sequence from ``create_version_table_statements`` must exist first.

        Returns:
            CREATE TABLE IF NOT EXISTS statement
        """
        return f"""CREATE TABLE IF NOT EXISTS {self.table_name} (
            Id BIGINT PRIMARY KEY DEFAULT nextval('{self.sequence_name}'),
            Version BIGINT NOT NULL,
            AppliedOn TIMESTAMP NOT NULL,
            Description TEXT NOT NULL
        )"""

    def current_version_sql(self) -> str:
        return f"SELECT Version FROM {self.table_name} ORDER BY Id DESC LIMIT 1"

    def set_version_sql(self) -> str:
        return (
            f"INSERT INTO {self.table_name} (Version, AppliedOn, Description) "
            f"VALUES (:Version, current_localtimestamp(), :Description)"
        )
