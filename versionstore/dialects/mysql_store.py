"""
MySQL version store
"""

from sqlalchemy.engine import Connection

from ..base_store import VersionStore
from ..errors import LockAcquisitionError


class MySQLVersionStore(VersionStore):
    """
    Version store for MySQL / MariaDB databases.

    Exclusive access uses the named lock ``config.lock_name`` through
    GET_LOCK, waiting ``config.lock_timeout`` seconds (negative waits
    forever).
    """

    dialect_name = 'mysql'
    supports_distributed_lock = True

    def acquire_database_lock(self, connection: Connection) -> None:
        """
        Take the named lock

        Args:
            connection: Open SQLAlchemy connection

        Raises:
            LockAcquisitionError: If GET_LOCK timed out or failed
        """
        params = {'name': self.config.lock_name, 'timeout': self.config.lock_timeout}
        result = self._execute(connection, "SELECT GET_LOCK(:name, :timeout)", params).scalar()

        # 1 = obtained, 0 = timed out, NULL = error (e.g. killed while waiting)
        if result is None or int(result) != 1:
            outcome = "timed out" if result is not None else "failed"
            self.logger.lock_event('error', f"GET_LOCK('{self.config.lock_name}') {outcome}")
            raise LockAcquisitionError(
                f"Could not acquire lock '{self.config.lock_name}': GET_LOCK {outcome}"
            )

        self.logger.lock_event('acquired', f"named lock '{self.config.lock_name}'")

    def release_database_lock(self, connection: Connection) -> None:
        """
        Release the named lock

        Args:
            connection: Open SQLAlchemy connection
        """
        released = self._execute(
            connection, "SELECT RELEASE_LOCK(:name)", {'name': self.config.lock_name}
        ).scalar()

        if released:
            self.logger.lock_event('released', f"named lock '{self.config.lock_name}'")
        else:
            self.logger.warning(f"Named lock '{self.config.lock_name}' was not held by this session")

    def create_version_table_sql(self) -> str:
        """
        Get SQL to create the version table

        Returns:
            CREATE TABLE IF NOT EXISTS statement
        """
        return f"""CREATE TABLE IF NOT EXISTS {self.table_name} (
            Id INT NOT NULL AUTO_INCREMENT PRIMARY KEY,
            Version BIGINT NOT NULL,
            AppliedOn DATETIME NOT NULL,
            Description TEXT NOT NULL
        )"""

    def current_version_sql(self) -> str:
        return f"SELECT Version FROM {self.table_name} ORDER BY Id DESC LIMIT 1"

    def set_version_sql(self) -> str:
        return (
            f"INSERT INTO {self.table_name} (Version, AppliedOn, Description) "
            f"VALUES (:Version, NOW(), :Description)"
        )
