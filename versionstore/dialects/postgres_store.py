"""
PostgreSQL version store
"""

from sqlalchemy.engine import Connection

from ..base_store import VersionStore


class PostgreSQLVersionStore(VersionStore):
    """
    Version store for PostgreSQL databases.

    Exclusive access uses a session-level advisory lock keyed by
    ``config.lock_key``. Acquisition blocks until the lock is free; there is
    no timeout unless the session sets ``lock_timeout`` itself.
    """

    dialect_name = 'postgresql'
    supports_distributed_lock = True

    def acquire_database_lock(self, connection: Connection) -> None:
        """
        Take the advisory lock

        Args:
            connection: Open SQLAlchemy connection
        """
        self._execute(connection, "SELECT pg_advisory_lock(:key)", {'key': self.config.lock_key})
        self.logger.lock_event('acquired', f"advisory lock {self.config.lock_key}")

    def release_database_lock(self, connection: Connection) -> None:
        """
        Release the advisory lock

        Args:
            connection: Open SQLAlchemy connection
        """
        released = self._execute(
            connection, "SELECT pg_advisory_unlock(:key)", {'key': self.config.lock_key}
        ).scalar()

        if released:
            self.logger.lock_event('released', f"advisory lock {self.config.lock_key}")
        else:
            self.logger.warning(f"Advisory lock {self.config.lock_key} was not held by this session")

    def create_version_table_sql(self) -> str:
        """
        Get SQL to create the version table

        Returns:
            CREATE TABLE IF NOT EXISTS statement
        """
        return f"""CREATE TABLE IF NOT EXISTS {self.table_name} (
            Id SERIAL PRIMARY KEY,
            Version BIGINT NOT NULL,
            AppliedOn TIMESTAMP NOT NULL,
            Description TEXT NOT NULL
        )"""

    def current_version_sql(self) -> str:
        return f"SELECT Version FROM {self.table_name} ORDER BY Id DESC LIMIT 1"

    def set_version_sql(self) -> str:
        return (
            f"INSERT INTO {self.table_name} (Version, AppliedOn, Description) "
            f"VALUES (:Version, LOCALTIMESTAMP, :Description)"
        )
